"""
Bounded filesystem access for agents.

Paths are validated against a denylist of directories (with symlink-escape
prevention) before any read, listing or search, and directory traversal
honours per-directory `.gitignore` files.
"""

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.config import BoundarySet, FileSystemConfig
from pathfence.filesystem.exceptions import (
    AccessDeniedError,
    ErrorKind,
    FileIOError,
    FileSizeLimitExceededError,
    FileSystemError,
    PathNotFoundError,
)
from pathfence.filesystem.ignore import IgnorePatternStore
from pathfence.filesystem.patterns import MatchScope, Pattern, matches
from pathfence.filesystem.reader import BoundedFileReader, FileInfo, ReadResult
from pathfence.filesystem.search import NO_MATCHES, FileSearch
from pathfence.filesystem.tools import FileSystemTools, format_tool_result
from pathfence.filesystem.tree import (
    DirectoryTreeBuilder,
    EntryKind,
    FlatTree,
    TreeEntry,
)
from pathfence.filesystem.writer import BoundedFileWriter

__all__ = [
    # Boundaries
    "BoundaryResolver",
    "BoundarySet",
    "FileSystemConfig",
    # Errors
    "AccessDeniedError",
    "ErrorKind",
    "FileIOError",
    "FileSizeLimitExceededError",
    "FileSystemError",
    "PathNotFoundError",
    # Traversal
    "IgnorePatternStore",
    "MatchScope",
    "Pattern",
    "matches",
    "DirectoryTreeBuilder",
    "EntryKind",
    "FlatTree",
    "TreeEntry",
    "FileSearch",
    "NO_MATCHES",
    # File access
    "BoundedFileReader",
    "BoundedFileWriter",
    "FileInfo",
    "ReadResult",
    # Tools
    "FileSystemTools",
    "format_tool_result",
]
