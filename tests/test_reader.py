"""
Tests for the bounded reader.
"""

import tempfile
from pathlib import Path

import pytest

from pathfence.filesystem import (
    AccessDeniedError,
    BoundaryResolver,
    BoundedFileReader,
    ErrorKind,
    FileIOError,
    FileSizeLimitExceededError,
    PathNotFoundError,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def resolver(temp_dir):
    """Resolver denying `private`."""
    (temp_dir / "private").mkdir()
    (temp_dir / "private" / "key").write_text("secret")
    return BoundaryResolver.from_directories([temp_dir / "private"])


@pytest.fixture
def reader(resolver):
    """Create a BoundedFileReader with a small size limit."""
    return BoundedFileReader(resolver, max_file_size_bytes=100)


class TestReadFile:
    """Test BoundedFileReader.read_file."""

    def test_read(self, temp_dir, reader):
        """Test reading a file."""
        (temp_dir / "a.txt").write_text("hello")
        assert reader.read_file(temp_dir / "a.txt") == "hello"

    def test_denied(self, temp_dir, reader):
        """Test that reading a denied file fails."""
        with pytest.raises(AccessDeniedError):
            reader.read_file(temp_dir / "private" / "key")

    def test_symlink_into_denied(self, temp_dir, reader):
        """Test that reading through a symlink into a denied directory fails."""
        (temp_dir / "link").symlink_to(temp_dir / "private" / "key")
        with pytest.raises(AccessDeniedError):
            reader.read_file(temp_dir / "link")

    def test_missing_file(self, temp_dir, reader):
        """Test that a missing file is an I/O failure."""
        with pytest.raises(FileIOError) as exc_info:
            reader.read_file(temp_dir / "missing.txt")
        assert exc_info.value.kind is ErrorKind.IO_FAILURE

    def test_missing_parent(self, temp_dir, reader):
        """Test that a missing parent is reported as not found."""
        with pytest.raises(PathNotFoundError):
            reader.read_file(temp_dir / "nope" / "missing.txt")

    def test_directory(self, temp_dir, reader):
        """Test that reading a directory fails."""
        (temp_dir / "dir").mkdir()
        with pytest.raises(FileIOError):
            reader.read_file(temp_dir / "dir")

    def test_size_limit(self, temp_dir, reader):
        """Test that oversized files are refused."""
        (temp_dir / "big.txt").write_text("x" * 200)
        with pytest.raises(FileSizeLimitExceededError) as exc_info:
            reader.read_file(temp_dir / "big.txt")
        assert exc_info.value.size == 200
        assert exc_info.value.limit == 100

    def test_binary_file(self, temp_dir, reader):
        """Test that undecodable content is an I/O failure."""
        (temp_dir / "blob.bin").write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(FileIOError):
            reader.read_file(temp_dir / "blob.bin")


class TestReadFiles:
    """Test BoundedFileReader.read_files."""

    def test_partial_failure(self, temp_dir, reader):
        """Test that one failure does not stop the other reads."""
        (temp_dir / "a.txt").write_text("A")
        (temp_dir / "b.txt").write_text("B")
        results = reader.read_files(
            [temp_dir / "a.txt", temp_dir / "private" / "key", temp_dir / "b.txt"]
        )

        assert [r.ok for r in results] == [True, False, True]
        assert results[0].content == "A"
        assert isinstance(results[1].error, AccessDeniedError)
        assert results[2].content == "B"


class TestFileInfo:
    """Test BoundedFileReader.get_file_info."""

    def test_file_info(self, temp_dir, reader):
        """Test metadata for a file."""
        path = temp_dir / "a.txt"
        path.write_text("hello")
        path.chmod(0o640)
        info = reader.get_file_info(path)

        assert info.size == 5
        assert info.is_file
        assert not info.is_directory
        assert info.permissions == "640"

    def test_directory_info_text(self, temp_dir, reader):
        """Test the text rendering for a directory."""
        text = reader.get_file_info(temp_dir).to_text()

        assert "isDirectory: true" in text
        assert "isFile: false" in text
        assert text.splitlines()[0].startswith("size: ")

    def test_missing(self, temp_dir, reader):
        """Test that stat'ing a missing path fails."""
        with pytest.raises(FileIOError):
            reader.get_file_info(temp_dir / "missing")


class TestListDirectory:
    """Test BoundedFileReader.list_directory."""

    def test_list(self, temp_dir, reader):
        """Test that entries are listed with their kind, denied ones left out."""
        (temp_dir / "a.txt").write_text("")
        (temp_dir / "sub").mkdir()
        entries = {e.name: e for e in reader.list_directory(temp_dir)}

        assert set(entries) == {"a.txt", "sub"}
        assert entries["sub"].is_dir
        assert not entries["a.txt"].is_dir

    def test_denied_directory(self, temp_dir, reader):
        """Test that listing a denied directory fails."""
        with pytest.raises(AccessDeniedError):
            reader.list_directory(temp_dir / "private")

