"""
Bounded file writer for file creation, directory creation and moves.
"""

import logging
from pathlib import Path
from typing import Union

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.exceptions import (
    AccessDeniedError,
    FileIOError,
    PathNotFoundError,
)
from pathfence.filesystem.paths import normalize_path

logger = logging.getLogger(__name__)


class BoundedFileWriter:
    """
    File writer that validates every path against the boundary resolver.

    Writes are refused unless `allow_write` is set.

    Usage:
        resolver = BoundaryResolver.from_directories(["~/.ssh"])
        writer = BoundedFileWriter(resolver, allow_write=True)

        writer.write_file("~/project/notes.txt", "Hello, world!")
    """

    def __init__(self, resolver: BoundaryResolver, allow_write: bool = False):
        self.resolver = resolver
        self.allow_write = allow_write

    def _check_enabled(self, path: Union[str, Path]) -> None:
        if not self.allow_write:
            raise AccessDeniedError(str(path), "Write operations are disabled")

    def write_file(
        self, path: Union[str, Path], content: str, encoding: str = "utf-8"
    ) -> Path:
        """
        Create or overwrite a file.

        Returns:
            The resolved path written to

        Raises:
            AccessDeniedError: If writes are disabled or the path is denied
            PathNotFoundError: If the parent directory doesn't exist
            FileIOError: If the write fails
        """
        self._check_enabled(path)
        resolved_path = self.resolver.validate(path)

        try:
            resolved_path.write_text(content, encoding=encoding)
        except OSError as e:
            logger.error(f"Failed to write file {resolved_path}: {e}")
            raise FileIOError(str(resolved_path), f"Cannot write file ({e.strerror or e})")

        logger.info(f"Successfully wrote file: {resolved_path} ({len(content)} chars)")
        return resolved_path

    def create_directory(self, path: Union[str, Path]) -> Path:
        """
        Create a directory and any missing parents; succeed if it exists.

        Raises:
            AccessDeniedError: If writes are disabled or the path is denied
            FileIOError: If creation fails
        """
        self._check_enabled(path)
        resolved_path = self._validate_new_directory(Path(path))

        try:
            resolved_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {resolved_path}: {e}")
            raise FileIOError(str(resolved_path), f"Cannot create directory ({e.strerror or e})")

        logger.info(f"Successfully created directory: {resolved_path}")
        return resolved_path

    def move_file(self, source: Union[str, Path], destination: Union[str, Path]) -> Path:
        """
        Move or rename a file or directory. Fails if the destination exists.

        Raises:
            AccessDeniedError: If writes are disabled or either path is denied
            FileIOError: If the source is missing, the destination exists, or the move fails
        """
        self._check_enabled(source)
        resolved_source = self.resolver.validate(source)
        resolved_destination = self.resolver.validate(destination)

        if not resolved_source.exists():
            raise FileIOError(str(resolved_source), "Source does not exist")
        if resolved_destination.exists():
            raise FileIOError(str(resolved_destination), "Destination already exists")

        try:
            resolved_source.rename(resolved_destination)
        except OSError as e:
            logger.error(f"Failed to move {resolved_source} to {resolved_destination}: {e}")
            raise FileIOError(str(resolved_source), f"Cannot move ({e.strerror or e})")

        logger.info(f"Moved {resolved_source} to {resolved_destination}")
        return resolved_destination

    def _validate_new_directory(self, path: Path) -> Path:
        """
        Validate a directory that may be several levels below existing ones.

        The deepest existing ancestor is validated (symlinks resolved) and
        every missing level beneath it is checked against the boundaries.
        """
        missing = []
        current = normalize_path(path)
        while True:
            try:
                resolved = self.resolver.validate(current)
                break
            except PathNotFoundError:
                if current.parent == current:
                    raise
                missing.append(current.name)
                current = current.parent

        for name in reversed(missing):
            resolved = resolved / name
            if self.resolver.is_denied(resolved):
                raise AccessDeniedError(
                    str(resolved), "Access denied - path is inside a disallowed directory"
                )
        return resolved
