"""Lexical path helpers shared by the configuration and the resolver."""

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, os.PathLike]


def expand_home(path: PathLike) -> str:
    """Expand a leading `~` or `~/` to the user's home directory."""
    text = os.fspath(path)
    if text == "~" or text.startswith("~/"):
        return str(Path.home()) + text[1:]
    return text


def normalize_path(path: PathLike) -> Path:
    """
    Return the home-expanded, absolute, lexically normalized form of a path.

    Symlinks are not resolved; `..` segments are collapsed textually.
    """
    expanded = expand_home(path)
    return Path(os.path.normpath(os.path.abspath(expanded)))


def is_within(path: Path, directory: Path) -> bool:
    """Check if path equals directory or lies beneath it (whole segments only)."""
    return path == directory or directory in path.parents
