"""
Bounded, gitignore-aware file name search.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.exceptions import FileIOError, FileSystemError
from pathfence.filesystem.ignore import IgnorePatternStore
from pathfence.filesystem.patterns import (
    NOISE_PATTERNS,
    Pattern,
    matches_any,
    normalize_exclude_pattern,
    normalize_ignore_folder,
)
from pathfence.filesystem.tree import entry_is_dir, scan_directory

logger = logging.getLogger(__name__)

NO_MATCHES = "No matches found"


class _ResultLimitReached(Exception):
    pass


class FileSearch:
    """
    Case-insensitive name search over a directory tree.

    Applies the same filtering as the tree builder (noise names, inherited
    ignore files, folder filters) plus caller-supplied exclude patterns.
    An entry that fails validation is skipped; the search carries on.

    Usage:
        resolver = BoundaryResolver.from_directories(["/etc"])
        search = FileSearch(resolver)

        print(search.search("~/project", "readme", exclude_patterns=["node_modules"]))
    """

    def __init__(
        self,
        resolver: BoundaryResolver,
        ignore_file_name: str = ".gitignore",
        max_results: Optional[int] = None,
    ):
        """
        Initialize the search engine.

        Args:
            resolver: Boundary resolver used to validate every visited path
            ignore_file_name: Per-directory ignore file to honour
            max_results: Stop after this many matches (None = unlimited)
        """
        self.resolver = resolver
        self.ignore_file_name = ignore_file_name
        self.max_results = max_results

    def search(
        self,
        root: Union[str, Path],
        query: str,
        exclude_patterns: Iterable[str] = (),
        ignore_folders: Iterable[str] = (),
    ) -> str:
        """
        Search and render the result as text.

        Returns:
            Matching paths joined by newlines, or `NO_MATCHES`
        """
        found = self.find_matches(root, query, exclude_patterns, ignore_folders)
        if not found:
            return NO_MATCHES
        return "\n".join(str(p) for p in found)

    def find_matches(
        self,
        root: Union[str, Path],
        query: str,
        exclude_patterns: Iterable[str] = (),
        ignore_folders: Iterable[str] = (),
    ) -> list[Path]:
        """
        Find entries whose name contains `query`, ignoring case.

        Directories are descended into whether or not they match.

        Args:
            root: Directory to search
            query: Substring to look for in entry names
            exclude_patterns: Names or globs to exclude (`name` means `**/name/**`)
            ignore_folders: Folder names, folder paths or globs to leave out

        Returns:
            Full paths of matching entries in pre-order discovery order

        Raises:
            AccessDeniedError: If the root is denied
            PathNotFoundError: If the root's parent does not exist
            FileIOError: If the root cannot be listed
        """
        valid_root = self.resolver.validate(root)
        if not valid_root.is_dir():
            raise FileIOError(str(valid_root), "Path is not a directory")

        excludes = [normalize_exclude_pattern(p) for p in exclude_patterns]
        folder_patterns = [normalize_ignore_folder(f) for f in ignore_folders]
        context = IgnorePatternStore(self.resolver, self.ignore_file_name)
        context.enter(valid_root)

        results: list[Path] = []
        try:
            self._search(
                valid_root, valid_root, valid_root, query.lower(),
                context, [], excludes, folder_patterns, results,
            )
        except _ResultLimitReached:
            logger.warning(f"Reached max results ({self.max_results})")
        finally:
            context.leave(valid_root)

        logger.info(f"Search for {query!r} under {valid_root} found {len(results)} matches")
        return results

    def _search(
        self,
        directory: Path,
        valid_directory: Path,
        root: Path,
        query: str,
        context: IgnorePatternStore,
        inherited: list[Pattern],
        excludes: list[Pattern],
        folder_patterns: list[Pattern],
        results: list[Path],
    ) -> None:
        patterns = context.effective_patterns(directory, inherited)

        for entry in scan_directory(valid_directory):
            entry_path = directory / entry.name
            relative_path = entry_path.relative_to(root).as_posix()
            is_dir = entry_is_dir(entry)

            try:
                valid_entry = self.resolver.validate(entry_path)
            except FileSystemError as e:
                logger.debug(f"Skipping {relative_path}: {e}")
                continue

            is_match = query in entry.name.lower()

            if matches_any(NOISE_PATTERNS, relative_path, entry.name, is_dir):
                continue
            if matches_any(folder_patterns, relative_path, entry.name, is_dir):
                continue
            if matches_any(excludes, relative_path, entry.name, is_dir) or matches_any(
                patterns, relative_path, entry.name, is_dir
            ):
                continue

            if is_match:
                results.append(entry_path)
                if self.max_results is not None and len(results) >= self.max_results:
                    raise _ResultLimitReached()

            if is_dir and context.enter(entry_path):
                try:
                    self._search(
                        entry_path, valid_entry, root, query, context,
                        patterns, excludes, folder_patterns, results,
                    )
                except FileSystemError as e:
                    logger.warning(f"Not searching contents of {relative_path}: {e}")
                finally:
                    context.leave(entry_path)
