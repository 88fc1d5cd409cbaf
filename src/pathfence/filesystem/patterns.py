"""
Glob patterns used to exclude entries during traversal.

Globs are compiled with `pathspec` using git wildmatch semantics:
`**` crosses separators, `*` and `?` stay within one segment, matching is
case-sensitive and dot-prefixed names are not hidden.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional, Union

import pathspec

logger = logging.getLogger(__name__)

# Excluded regardless of ignore files or caller overrides.
NOISE_NAMES: frozenset[str] = frozenset({".git", ".DS_Store", ".idea"})


class MatchScope(str, Enum):
    """What part of an entry a pattern is tested against."""

    PATH = "path"
    """Root-relative path, falling back to the bare entry name."""

    NAME = "name"
    """Bare entry name only."""


@dataclass(frozen=True)
class Pattern:
    """A glob tagged with its match scope."""

    glob: str
    scope: MatchScope = MatchScope.PATH

    def __str__(self) -> str:
        return self.glob


NOISE_PATTERNS: tuple[Pattern, ...] = tuple(
    Pattern(name, MatchScope.NAME) for name in sorted(NOISE_NAMES)
)


@lru_cache(maxsize=1024)
def _compile(glob: str) -> Optional[pathspec.PathSpec]:
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", [glob])
    except (ValueError, TypeError) as e:
        logger.warning(f"Ignoring invalid glob {glob!r}: {e}")
        return None


def matches(
    pattern: Pattern, relative_path: str, entry_name: str, is_dir: bool = False
) -> bool:
    """
    Check whether a pattern excludes an entry.

    A `PATH` pattern matches if it matches the root-relative path or, failing
    that, the bare entry name (exact name, never a substring). Directories are
    also tested with a trailing `/` so `**/name/**` covers the directory itself.

    Args:
        pattern: Pattern to test
        relative_path: Entry path relative to the traversal root, `/`-separated
        entry_name: Last path segment
        is_dir: Whether the entry is a directory
    """
    spec = _compile(pattern.glob)
    if spec is None:
        return False

    if pattern.scope is MatchScope.NAME:
        candidates = [entry_name]
    else:
        candidates = [relative_path, entry_name]

    for candidate in candidates:
        if spec.match_file(candidate):
            return True
        if is_dir and spec.match_file(candidate + "/"):
            return True
    return False


def matches_any(
    patterns: Union[list[Pattern], tuple[Pattern, ...]],
    relative_path: str,
    entry_name: str,
    is_dir: bool = False,
) -> bool:
    """Check whether any of the patterns excludes an entry."""
    return any(matches(p, relative_path, entry_name, is_dir) for p in patterns)


def normalize_ignore_folder(entry: str) -> Pattern:
    """
    Turn a caller-supplied folder filter into a pattern.

    Backslashes become `/`, a leading `./` and a trailing `/` are stripped.
    A wildcard-free entry names a folder (or folder path) exactly and, since
    excluded folders are never entered, covers everything beneath it.
    An entry with `*` or `?` is used verbatim as a glob.
    """
    folder = entry.replace("\\", "/")
    if folder.startswith("./"):
        folder = folder[2:]
    folder = folder.rstrip("/")
    return Pattern(folder)


def normalize_exclude_pattern(entry: str) -> Pattern:
    """Wrap a wildcard-free search exclusion as `**/<entry>/**`."""
    if "*" in entry:
        return Pattern(entry)
    return Pattern(f"**/{entry}/**")


def gitignore_line_to_pattern(line: str) -> Optional[Pattern]:
    """
    Convert one ignore-file line into a pattern.

    Returns None for blank lines, comments and negations (`!` entries are
    not supported and are dropped).
    """
    entry = line.strip()
    if not entry or entry.startswith("#") or entry.startswith("!"):
        return None
    entry = entry.lstrip("/")
    if not entry:
        return None
    if entry.endswith("/"):
        return Pattern(f"**/{entry}**")
    return Pattern(f"**/{entry}")
