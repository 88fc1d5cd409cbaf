"""
CLI module for pathfence.

Provides command-line access to bounded validation, listing, search and
reading.
"""

from pathfence.cli.main import cli

__all__ = ["cli"]
