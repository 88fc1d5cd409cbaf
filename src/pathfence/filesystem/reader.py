"""
Bounded file reader: single and batched reads, metadata and directory listings.
"""

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.exceptions import (
    FileIOError,
    FileSizeLimitExceededError,
    FileSystemError,
)
from pathfence.filesystem.tree import EntryKind, TreeEntry, entry_is_dir, scan_directory

logger = logging.getLogger(__name__)


@dataclass
class ReadResult:
    """Outcome of one file in a batched read."""

    path: str
    content: Optional[str] = None
    error: Optional[FileSystemError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FileInfo:
    """Metadata about a file or directory."""

    size: int
    created: datetime
    modified: datetime
    accessed: datetime
    is_directory: bool
    is_file: bool
    permissions: str

    def to_text(self) -> str:
        """Render as `key: value` lines."""
        fields = {
            "size": self.size,
            "created": self.created.isoformat(),
            "modified": self.modified.isoformat(),
            "accessed": self.accessed.isoformat(),
            "isDirectory": str(self.is_directory).lower(),
            "isFile": str(self.is_file).lower(),
            "permissions": self.permissions,
        }
        return "\n".join(f"{key}: {value}" for key, value in fields.items())


class BoundedFileReader:
    """
    File reader that validates every path against the boundary resolver.

    Usage:
        resolver = BoundaryResolver.from_directories(["~/.ssh"])
        reader = BoundedFileReader(resolver, max_file_size_bytes=1_000_000)

        try:
            content = reader.read_file("~/project/main.py")
        except AccessDeniedError as e:
            print(f"Access denied: {e}")
    """

    def __init__(self, resolver: BoundaryResolver, max_file_size_bytes: int = 10_000_000):
        """
        Initialize the file reader.

        Args:
            resolver: Boundary resolver
            max_file_size_bytes: Largest file `read_file` will return
        """
        self.resolver = resolver
        self.max_file_size_bytes = max_file_size_bytes

    def read_file(self, path: Union[str, Path], encoding: str = "utf-8") -> str:
        """
        Read a file with boundary and size checks.

        Raises:
            AccessDeniedError: If access is denied
            PathNotFoundError: If the file's parent directory doesn't exist
            FileSizeLimitExceededError: If the file is too large
            FileIOError: If the file is missing, not a regular file, or unreadable
        """
        resolved_path = self.resolver.validate(path)

        if not resolved_path.exists():
            raise FileIOError(str(resolved_path), "File not found")

        if not resolved_path.is_file():
            raise FileIOError(str(resolved_path), "Path is not a regular file")

        file_size = resolved_path.stat().st_size
        if file_size > self.max_file_size_bytes:
            logger.warning(
                f"File too large: {resolved_path} ({file_size} bytes > "
                f"{self.max_file_size_bytes} bytes)"
            )
            raise FileSizeLimitExceededError(
                str(resolved_path), file_size, self.max_file_size_bytes
            )

        try:
            content = resolved_path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read file {resolved_path}: {e}")
            raise FileIOError(str(resolved_path), f"Cannot read file ({e})")

        logger.debug(f"Successfully read file: {resolved_path} ({file_size} bytes)")
        return content

    def read_files(
        self, paths: list[Union[str, Path]], encoding: str = "utf-8"
    ) -> list[ReadResult]:
        """
        Read multiple files.

        A file that fails to read gets its error recorded on its result;
        the remaining files are still read.
        """
        results = []

        for path in paths:
            try:
                content = self.read_file(path, encoding=encoding)
                results.append(ReadResult(path=str(path), content=content))
            except FileSystemError as e:
                logger.warning(f"Skipping file {path}: {e}")
                results.append(ReadResult(path=str(path), error=e))

        return results

    def get_file_info(self, path: Union[str, Path]) -> FileInfo:
        """
        Stat a file or directory.

        Raises:
            AccessDeniedError: If access is denied
            FileIOError: If the path cannot be stat'ed
        """
        resolved_path = self.resolver.validate(path)
        try:
            st = resolved_path.stat()
        except OSError as e:
            raise FileIOError(str(resolved_path), f"Cannot stat path ({e.strerror or e})")

        # st_birthtime is only available on some platforms.
        created = getattr(st, "st_birthtime", st.st_ctime)
        return FileInfo(
            size=st.st_size,
            created=datetime.fromtimestamp(created),
            modified=datetime.fromtimestamp(st.st_mtime),
            accessed=datetime.fromtimestamp(st.st_atime),
            is_directory=stat.S_ISDIR(st.st_mode),
            is_file=stat.S_ISREG(st.st_mode),
            permissions=oct(st.st_mode)[-3:],
        )

    def list_directory(self, directory: Union[str, Path]) -> list[TreeEntry]:
        """
        List the immediate entries of a directory, in enumeration order.

        No ignore files are applied; entries that fail validation are left out.

        Raises:
            AccessDeniedError: If the directory is denied
            FileIOError: If the directory cannot be listed
        """
        resolved_dir = self.resolver.validate(directory)

        entries = []
        for entry in scan_directory(resolved_dir):
            entry_path = Path(os.path.join(resolved_dir, entry.name))
            try:
                self.resolver.validate(entry_path)
            except FileSystemError as e:
                logger.debug(f"Skipping {entry_path}: {e}")
                continue
            kind = EntryKind.DIRECTORY if entry_is_dir(entry) else EntryKind.FILE
            entries.append(TreeEntry(entry.name, kind, entry.name))

        logger.debug(f"Listed {len(entries)} entries in {resolved_dir}")
        return entries
