"""
Per-traversal ignore pattern store.

One `IgnorePatternStore` is created for each top-level tree build or search
and threaded through the recursive walk. It is never shared between calls.
"""

import logging
import os
from pathlib import Path

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.exceptions import FileSystemError
from pathfence.filesystem.patterns import Pattern, gitignore_line_to_pattern

logger = logging.getLogger(__name__)


def parse_ignore_lines(lines: list[str]) -> list[Pattern]:
    """Parse ignore-file lines into patterns, dropping blanks, comments and negations."""
    patterns = []
    for line in lines:
        pattern = gitignore_line_to_pattern(line)
        if pattern is not None:
            patterns.append(pattern)
    return patterns


class IgnorePatternStore:
    """
    Traversal context holding each directory's own ignore patterns.

    Patterns are loaded lazily, the first time a directory is visited, and
    memoized for the lifetime of the store. The store also tracks the real
    paths of the directories currently being descended into, so a symlink
    back to an ancestor is not followed. Sibling aliases of the same
    directory are walked in full.
    """

    def __init__(self, resolver: BoundaryResolver, ignore_file_name: str = ".gitignore"):
        self.resolver = resolver
        self.ignore_file_name = ignore_file_name
        self._own_patterns: dict[Path, list[Pattern]] = {}
        self._active: set[Path] = set()

    def load_own_patterns(self, directory: Path) -> list[Pattern]:
        """
        Read and parse the ignore file of a single directory.

        Returns an empty list if the file is missing, unreadable or denied.
        Never raises.
        """
        ignore_path = directory / self.ignore_file_name
        try:
            valid_path = self.resolver.validate(ignore_path)
            if not valid_path.is_file():
                return []
            content = valid_path.read_text(encoding="utf-8")
        except (FileSystemError, OSError, UnicodeDecodeError) as e:
            logger.debug(f"No usable ignore file at {ignore_path}: {e}")
            return []

        patterns = parse_ignore_lines(content.splitlines())
        if patterns:
            logger.debug(f"Loaded {len(patterns)} ignore patterns from {ignore_path}")
        return patterns

    def own_patterns(self, directory: Path) -> list[Pattern]:
        """Memoized `load_own_patterns`."""
        if directory not in self._own_patterns:
            self._own_patterns[directory] = self.load_own_patterns(directory)
        return self._own_patterns[directory]

    def effective_patterns(self, directory: Path, inherited: list[Pattern]) -> list[Pattern]:
        """Patterns inherited from ancestors followed by the directory's own."""
        return [*inherited, *self.own_patterns(directory)]

    def enter(self, directory: Path) -> bool:
        """
        Mark a directory as being descended into.

        Returns False if its real path is already on the current descent
        (a symlink cycle). Every successful `enter` must be paired with `leave`.
        """
        real = Path(os.path.realpath(directory))
        if real in self._active:
            return False
        self._active.add(real)
        return True

    def leave(self, directory: Path) -> None:
        """Mark a directory as fully descended."""
        self._active.discard(Path(os.path.realpath(directory)))
