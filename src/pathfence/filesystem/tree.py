"""
Gitignore-aware directory tree builder.

Produces either a nested listing (enumeration order at each level) or a
flattened listing of sorted directory and file paths relative to the root.
"""

import json
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.exceptions import FileIOError, FileSystemError
from pathfence.filesystem.ignore import IgnorePatternStore
from pathfence.filesystem.patterns import (
    NOISE_PATTERNS,
    Pattern,
    matches_any,
    normalize_ignore_folder,
)

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of a listing entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class TreeEntry:
    """A file or directory found during traversal."""

    name: str
    kind: EntryKind
    path: str
    children: Optional[list["TreeEntry"]] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def to_dict(self) -> dict[str, Any]:
        """Nested representation: directories always carry `children`, files never do."""
        data: dict[str, Any] = {"name": self.name, "type": self.kind.value}
        if self.is_dir:
            data["children"] = [child.to_dict() for child in self.children or []]
        return data


@dataclass
class FlatTree:
    """Sorted directory paths (with trailing `/`) and file paths."""

    directories: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {"directories": self.directories, "files": self.files}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def entries_to_json(entries: list[TreeEntry]) -> str:
    """Serialize a nested listing as indented JSON."""
    return json.dumps([entry.to_dict() for entry in entries], indent=2)


def flatten(entries: Iterable[TreeEntry]) -> FlatTree:
    """Flatten a nested listing into sorted directory and file sequences."""
    tree = FlatTree()
    stack = list(entries)
    while stack:
        entry = stack.pop()
        if entry.is_dir:
            tree.directories.append(entry.path + "/")
            stack.extend(entry.children or [])
        else:
            tree.files.append(entry.path)
    tree.directories.sort()
    tree.files.sort()
    return tree


def scan_directory(valid_directory: Path) -> list[os.DirEntry]:
    """
    List the immediate entries of a validated directory.

    Raises:
        FileIOError: If the directory cannot be listed
    """
    try:
        with os.scandir(valid_directory) as it:
            return list(it)
    except OSError as e:
        raise FileIOError(str(valid_directory), f"Cannot list directory ({e.strerror or e})")


def entry_is_dir(entry: os.DirEntry) -> bool:
    """Directory check following symlinks; unreadable entries count as files."""
    try:
        return entry.is_dir()
    except OSError:
        return False


class DirectoryTreeBuilder:
    """
    Depth-first directory walker filtered by boundaries and ignore patterns.

    Each build creates a fresh `IgnorePatternStore`, so independent builds
    never see each other's cached patterns.

    Usage:
        resolver = BoundaryResolver.from_directories(["~/.ssh"])
        builder = DirectoryTreeBuilder(resolver)

        flat = builder.build_flat_tree("~/project", ignore_folders=["build"])
        print(flat.to_json())
    """

    def __init__(self, resolver: BoundaryResolver, ignore_file_name: str = ".gitignore"):
        """
        Initialize the tree builder.

        Args:
            resolver: Boundary resolver used to validate every visited path
            ignore_file_name: Per-directory ignore file to honour
        """
        self.resolver = resolver
        self.ignore_file_name = ignore_file_name

    def build_flat_tree(
        self, root: Union[str, Path], ignore_folders: Iterable[str] = ()
    ) -> FlatTree:
        """
        Build a flattened listing of everything under `root`.

        Args:
            root: Directory to list
            ignore_folders: Folder names, folder paths or globs to leave out

        Returns:
            FlatTree with sorted, root-relative directory and file paths

        Raises:
            AccessDeniedError: If the root is denied
            PathNotFoundError: If the root's parent does not exist
            FileIOError: If the root cannot be listed
        """
        folder_patterns = [normalize_ignore_folder(f) for f in ignore_folders]
        tree = flatten(self._build(root, folder_patterns))
        logger.info(
            f"Flat tree for {root}: {len(tree.directories)} directories, "
            f"{len(tree.files)} files"
        )
        return tree

    def build_nested_tree(self, root: Union[str, Path]) -> list[TreeEntry]:
        """
        Build a nested listing of everything under `root`.

        Entries keep filesystem enumeration order at each level.

        Raises:
            AccessDeniedError: If the root is denied
            PathNotFoundError: If the root's parent does not exist
            FileIOError: If the root cannot be listed
        """
        return self._build(root, [])

    def _build(self, root: Union[str, Path], folder_patterns: list[Pattern]) -> list[TreeEntry]:
        valid_root = self.resolver.validate(root)
        if not valid_root.is_dir():
            raise FileIOError(str(valid_root), "Path is not a directory")

        context = IgnorePatternStore(self.resolver, self.ignore_file_name)
        context.enter(valid_root)
        try:
            return self._traverse(valid_root, valid_root, valid_root, context, [], folder_patterns)
        finally:
            context.leave(valid_root)

    def _traverse(
        self,
        directory: Path,
        valid_directory: Path,
        root: Path,
        context: IgnorePatternStore,
        inherited: list[Pattern],
        folder_patterns: list[Pattern],
    ) -> list[TreeEntry]:
        entries = scan_directory(valid_directory)
        patterns = context.effective_patterns(directory, inherited)

        results: list[TreeEntry] = []
        for entry in entries:
            entry_path = directory / entry.name
            relative_path = entry_path.relative_to(root).as_posix()
            is_dir = entry_is_dir(entry)

            if matches_any(NOISE_PATTERNS, relative_path, entry.name, is_dir):
                continue
            if matches_any(patterns, relative_path, entry.name, is_dir):
                logger.debug(f"Ignored by ignore file: {relative_path}")
                continue
            if matches_any(folder_patterns, relative_path, entry.name, is_dir):
                logger.debug(f"Ignored by folder filter: {relative_path}")
                continue

            try:
                valid_entry = self.resolver.validate(entry_path)
            except FileSystemError as e:
                logger.debug(f"Skipping {relative_path}: {e}")
                continue

            if not is_dir:
                results.append(TreeEntry(entry.name, EntryKind.FILE, relative_path))
                continue

            children: list[TreeEntry] = []
            if context.enter(entry_path):
                try:
                    children = self._traverse(
                        entry_path, valid_entry, root, context, patterns, folder_patterns
                    )
                except FileSystemError as e:
                    logger.warning(f"Not listing contents of {relative_path}: {e}")
                finally:
                    context.leave(entry_path)
            else:
                logger.debug(f"Not following symlink cycle: {relative_path}")

            results.append(
                TreeEntry(entry.name, EntryKind.DIRECTORY, relative_path, children)
            )

        return results
