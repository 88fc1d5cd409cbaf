"""
Configuration for bounded filesystem access.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from pathfence.filesystem.paths import is_within, normalize_path


class BoundarySet(BaseModel):
    """
    Immutable, ordered set of denied directories.

    Any path equal to or beneath one of these directories is denied.
    An empty set denies nothing.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    directories: tuple[Path, ...] = Field(
        default=(),
        description="Denied directories (home-expanded, absolute, normalized)",
    )

    @field_validator("directories", mode="before")
    @classmethod
    def normalize_directories(cls, v):
        """Normalize every entry and drop duplicates, keeping the first occurrence."""
        if not v:
            return ()
        normalized: list[Path] = []
        for entry in v:
            path = normalize_path(entry)
            if path not in normalized:
                normalized.append(path)
        return tuple(normalized)

    def contains(self, path: Path) -> bool:
        """Check if a normalized absolute path is at or beneath any denied directory."""
        return any(is_within(path, directory) for directory in self.directories)


class FileSystemConfig(BaseModel):
    """
    Configuration for agent filesystem access.

    Example:
        ```python
        config = FileSystemConfig(
            disallowed_directories=["~/.ssh", "/etc"],
            max_search_results=200,
        )

        # Load from file
        config = FileSystemConfig.from_file("~/.pathfence.yaml")
        ```
    """

    model_config = {"extra": "forbid"}

    disallowed_directories: list[Path] = Field(
        default_factory=list,
        description="Denied directories (resolved to absolute paths)",
    )

    ignore_file_name: str = Field(
        default=".gitignore",
        min_length=1,
        description="Per-directory ignore file consulted during traversal",
    )

    max_file_size_bytes: int = Field(
        default=10_000_000,  # 10 MB
        ge=0,
        description="Maximum file size that can be read (bytes)",
    )

    max_search_results: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of search matches to return (None = unlimited)",
    )

    allow_write: bool = Field(
        default=False,
        description="Allow write operations (create/overwrite files, create directories, move)",
    )

    @field_validator("disallowed_directories", mode="before")
    @classmethod
    def resolve_directories(cls, v):
        """Normalize all directories to absolute paths."""
        if not v:
            return []
        return [normalize_path(p) for p in v]

    @field_validator("ignore_file_name")
    @classmethod
    def plain_file_name(cls, v: str) -> str:
        """Ignore file must be a bare file name."""
        if "/" in v or "\\" in v:
            raise ValueError("ignore_file_name must not contain path separators")
        return v

    def boundary_set(self) -> BoundarySet:
        """Build the immutable boundary set from this configuration."""
        return BoundarySet(directories=self.disallowed_directories)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FileSystemConfig":
        """
        Load configuration from a YAML or JSON file.

        File format (YAML):
            ```yaml
            disallowed_directories:
              - ~/.ssh
              - /etc
            ignore_file_name: .gitignore
            max_file_size_bytes: 1000000
            allow_write: false
            ```

        Raises:
            FileNotFoundError: If the config file doesn't exist
        """
        path = Path(path).expanduser().resolve()

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text()

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        elif path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "FileSystemConfig":
        """Create configuration from a dictionary."""
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = "PATHFENCE_") -> "FileSystemConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            PATHFENCE_DISALLOWED_DIRECTORIES - os.pathsep-separated directory list
            PATHFENCE_IGNORE_FILE_NAME - Ignore file name
            PATHFENCE_MAX_FILE_SIZE_BYTES - Read size limit
            PATHFENCE_MAX_SEARCH_RESULTS - Search result cap
            PATHFENCE_ALLOW_WRITE - "1"/"true"/"yes" enables writes
        """
        data: dict = {}

        directories = os.environ.get(f"{prefix}DISALLOWED_DIRECTORIES")
        if directories:
            data["disallowed_directories"] = [
                d for d in directories.split(os.pathsep) if d.strip()
            ]

        ignore_file_name = os.environ.get(f"{prefix}IGNORE_FILE_NAME")
        if ignore_file_name:
            data["ignore_file_name"] = ignore_file_name

        max_size = os.environ.get(f"{prefix}MAX_FILE_SIZE_BYTES")
        if max_size:
            data["max_file_size_bytes"] = int(max_size)

        max_results = os.environ.get(f"{prefix}MAX_SEARCH_RESULTS")
        if max_results:
            data["max_search_results"] = int(max_results)

        allow_write = os.environ.get(f"{prefix}ALLOW_WRITE")
        if allow_write:
            data["allow_write"] = allow_write.strip().lower() in ("1", "true", "yes", "on")

        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"FileSystemConfig("
            f"disallowed_dirs={len(self.disallowed_directories)}, "
            f"ignore_file={self.ignore_file_name!r}, "
            f"allow_write={self.allow_write})"
        )
