"""
Exceptions for bounded filesystem operations.

Every error carries an `ErrorKind` so callers can branch on the failure
category; the text form is only produced at the tool/CLI boundary.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Structured error categories."""

    ACCESS_DENIED = "AccessDenied"
    NOT_FOUND = "NotFound"
    IO_FAILURE = "IOFailure"


class FileSystemError(Exception):
    """Base exception for filesystem operations."""

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class AccessDeniedError(FileSystemError):
    """Raised when a path, its symlink target, or its parent is inside a denied boundary."""

    kind = ErrorKind.ACCESS_DENIED

    def __init__(self, path: str, reason: str = "Access denied"):
        super().__init__(path, reason)


class PathNotFoundError(FileSystemError):
    """Raised when the parent of a not-yet-existing path does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, path: str, reason: str = "Path not found"):
        super().__init__(path, reason)


class FileIOError(FileSystemError):
    """Raised for any other read, stat or listing failure."""

    kind = ErrorKind.IO_FAILURE

    def __init__(self, path: str, reason: str = "I/O failure"):
        super().__init__(path, reason)


class FileSizeLimitExceededError(FileIOError):
    """Raised when a file exceeds the size limit."""

    def __init__(self, path: str, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(path, f"File too large ({size} bytes > {limit} bytes)")
