"""
Tests for the bounded writer.
"""

import tempfile
from pathlib import Path

import pytest

from pathfence.filesystem import (
    AccessDeniedError,
    BoundaryResolver,
    BoundedFileWriter,
    FileIOError,
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
def writer(resolver):
    """Create a BoundedFileWriter with writes enabled."""
    return BoundedFileWriter(resolver, allow_write=True)


class TestWriter:
    """Test BoundedFileWriter."""

    def test_writes_disabled_by_default(self, temp_dir, resolver):
        """Test that a default writer refuses to write."""
        writer = BoundedFileWriter(resolver)
        with pytest.raises(AccessDeniedError):
            writer.write_file(temp_dir / "a.txt", "x")
        assert not (temp_dir / "a.txt").exists()

    def test_write_file(self, temp_dir, writer):
        """Test creating and overwriting a file."""
        path = temp_dir / "a.txt"
        assert writer.write_file(path, "one") == path
        writer.write_file(path, "two")
        assert path.read_text() == "two"

    def test_write_denied(self, temp_dir, writer):
        """Test that writing inside a denied directory fails."""
        with pytest.raises(AccessDeniedError):
            writer.write_file(temp_dir / "private" / "new", "x")

    def test_write_through_dangling_symlink(self, temp_dir, writer):
        """Test that a dangling symlink cannot redirect a write into a denied directory."""
        (temp_dir / "trap").symlink_to(temp_dir / "private" / "planted")
        with pytest.raises(AccessDeniedError):
            writer.write_file(temp_dir / "trap", "x")
        assert not (temp_dir / "private" / "planted").exists()

    def test_create_directory(self, temp_dir, writer):
        """Test creating nested directories."""
        path = temp_dir / "a" / "b" / "c"
        assert writer.create_directory(path) == path
        assert path.is_dir()
        writer.create_directory(path)

    def test_create_directory_denied(self, temp_dir, writer):
        """Test that creating a directory under a denied one fails."""
        with pytest.raises(AccessDeniedError):
            writer.create_directory(temp_dir / "private" / "x" / "y")
        assert not (temp_dir / "private" / "x").exists()

    def test_move_file(self, temp_dir, writer):
        """Test moving a file."""
        (temp_dir / "a.txt").write_text("A")
        writer.move_file(temp_dir / "a.txt", temp_dir / "b.txt")

        assert not (temp_dir / "a.txt").exists()
        assert (temp_dir / "b.txt").read_text() == "A"

    def test_move_destination_exists(self, temp_dir, writer):
        """Test that moving onto an existing path fails."""
        (temp_dir / "a.txt").write_text("A")
        (temp_dir / "b.txt").write_text("B")
        with pytest.raises(FileIOError):
            writer.move_file(temp_dir / "a.txt", temp_dir / "b.txt")

    def test_move_missing_source(self, temp_dir, writer):
        """Test that moving a missing file fails."""
        with pytest.raises(FileIOError):
            writer.move_file(temp_dir / "missing", temp_dir / "b.txt")

    def test_move_into_denied(self, temp_dir, writer):
        """Test that moving into a denied directory fails."""
        (temp_dir / "a.txt").write_text("A")
        with pytest.raises(AccessDeniedError):
            writer.move_file(temp_dir / "a.txt", temp_dir / "private" / "a.txt")
        assert (temp_dir / "a.txt").exists()
