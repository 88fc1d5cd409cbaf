"""
pathfence - bounded file reading, listing and search for automation agents.

Every path is checked against a configured set of denied directories,
and directory walks honour `.gitignore` files.
"""

__version__ = "0.1.0"

from pathfence.filesystem import (
    AccessDeniedError,
    BoundaryResolver,
    BoundedFileReader,
    BoundedFileWriter,
    DirectoryTreeBuilder,
    FileIOError,
    FileSearch,
    FileSystemConfig,
    FileSystemError,
    FileSystemTools,
    NO_MATCHES,
    PathNotFoundError,
)

__all__ = [
    "__version__",
    "AccessDeniedError",
    "BoundaryResolver",
    "BoundedFileReader",
    "BoundedFileWriter",
    "DirectoryTreeBuilder",
    "FileIOError",
    "FileSearch",
    "FileSystemConfig",
    "FileSystemError",
    "FileSystemTools",
    "NO_MATCHES",
    "PathNotFoundError",
]
