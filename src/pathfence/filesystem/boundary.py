"""
Boundary resolver: validates candidate paths against the denied directories.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from pathfence.filesystem.config import BoundarySet
from pathfence.filesystem.exceptions import AccessDeniedError, PathNotFoundError
from pathfence.filesystem.paths import PathLike, expand_home, normalize_path

logger = logging.getLogger(__name__)


class BoundaryResolver:
    """
    Normalizes paths and rejects anything inside a denied directory.

    The boundary set is an immutable value; `configure` swaps it wholesale.
    Reconfiguring while a traversal is running is not supported.

    Usage:
        resolver = BoundaryResolver.from_directories(["~/.ssh", "/etc"])

        try:
            path = resolver.validate("~/project/main.py")
        except AccessDeniedError as e:
            print(f"Access denied: {e}")
    """

    def __init__(self, boundaries: Optional[BoundarySet] = None):
        """
        Initialize the resolver.

        Args:
            boundaries: Denied directories (default: none)
        """
        self._boundaries = boundaries if boundaries is not None else BoundarySet()

    @classmethod
    def from_directories(cls, directories: Iterable[PathLike]) -> "BoundaryResolver":
        """Create a resolver denying the given directories."""
        return cls(BoundarySet(directories=tuple(directories)))

    @property
    def boundaries(self) -> tuple[Path, ...]:
        """Normalized denied directories, in configuration order."""
        return self._boundaries.directories

    def configure(self, directories: Iterable[PathLike]) -> None:
        """
        Replace the denied directories. Not additive: the last call wins.

        Args:
            directories: Directories to deny (home-expanded and normalized)
        """
        self._boundaries = BoundarySet(directories=tuple(directories))
        logger.debug(f"Boundary set configured: {[str(d) for d in self.boundaries]}")

    def is_denied(self, path: PathLike) -> bool:
        """Check a path lexically (no symlink resolution) against the boundaries."""
        return self._boundaries.contains(normalize_path(path))

    def validate(self, path: PathLike) -> Path:
        """
        Validate a path and return its resolved absolute form.

        Existing paths are returned with symlinks resolved. Paths that do not
        exist yet are returned lexically normalized once their parent has
        been checked.

        Args:
            path: Candidate path (absolute, relative to the cwd, or `~`-prefixed)

        Returns:
            Resolved absolute path

        Raises:
            AccessDeniedError: If the path, its real path, or its parent is denied
            PathNotFoundError: If the path is missing and so is its parent
        """
        boundaries = self._boundaries
        absolute = Path(os.path.normpath(os.path.abspath(expand_home(path))))

        if boundaries.contains(absolute):
            raise AccessDeniedError(
                str(absolute), "Access denied - path is inside a disallowed directory"
            )

        try:
            real_path = Path(os.path.realpath(absolute, strict=True))
        except OSError:
            real_path = None

        if real_path is not None:
            if boundaries.contains(real_path):
                logger.warning(f"Symlink escape blocked: {absolute} -> {real_path}")
                raise AccessDeniedError(
                    str(absolute),
                    "Access denied - symlink target inside disallowed directories",
                )
            return real_path

        # Dangling symlink: the eventual write would land on its target.
        if absolute.is_symlink():
            target = Path(os.path.realpath(absolute))
            if boundaries.contains(target):
                logger.warning(f"Dangling symlink escape blocked: {absolute} -> {target}")
                raise AccessDeniedError(
                    str(absolute),
                    "Access denied - symlink target inside disallowed directories",
                )

        parent = absolute.parent
        try:
            real_parent = Path(os.path.realpath(parent, strict=True))
        except OSError:
            raise PathNotFoundError(str(parent), "Parent directory does not exist")

        if boundaries.contains(real_parent):
            raise AccessDeniedError(
                str(absolute),
                "Access denied - parent directory is inside a disallowed directory",
            )
        return absolute
