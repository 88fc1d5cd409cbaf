"""
pathfence CLI.

Runs the bounded filesystem tools from the command line, mainly for
inspecting what an agent would see under a given configuration.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from pathfence import __version__
from pathfence.filesystem.config import FileSystemConfig
from pathfence.filesystem.tools import FileSystemTools, format_tool_result

# Load environment variables
load_dotenv()

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Setup rich logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def load_config(config_path: Optional[Path], deny: tuple[str, ...]) -> FileSystemConfig:
    """Load configuration from a file or the environment and add `--deny` entries."""
    if config_path is not None:
        config = FileSystemConfig.from_file(config_path)
    else:
        config = FileSystemConfig.from_env()

    if deny:
        data = config.model_dump()
        data["disallowed_directories"] = [*config.disallowed_directories, *deny]
        config = FileSystemConfig(**data)
    return config


def _run(ctx: click.Context, tool_name: str, arguments: dict[str, Any]) -> None:
    tools: FileSystemTools = ctx.obj["tools"]
    result = asyncio.run(tools.execute_tool(tool_name, arguments))

    if not result["success"]:
        err_console.print(f"[bold red]Error:[/bold red] {escape(result['error'])}", highlight=False)
        sys.exit(1)

    # Plain echo: tool output is consumed by scripts and must not be re-wrapped.
    click.echo(format_tool_result(result))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON configuration file (default: PATHFENCE_* environment variables)",
)
@click.option(
    "--deny",
    "-d",
    multiple=True,
    help="Directory to deny access to (repeatable)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], deny: tuple[str, ...], verbose: bool):
    """pathfence - bounded file listing, search and reading."""
    setup_logging(verbose)
    try:
        config = load_config(config_path, deny)
    except (ValueError, OSError) as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        sys.exit(2)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["tools"] = FileSystemTools(config)


@cli.command()
@click.argument("path")
@click.pass_context
def validate(ctx: click.Context, path: str):
    """Print the resolved form of PATH, or fail if it is denied."""
    _run(ctx, "validate_path", {"path": path})


@cli.command()
@click.argument("root", default=".")
@click.option("--nested", is_flag=True, help="Print the nested tree instead of flat lists")
@click.option(
    "--ignore-folder",
    "-i",
    "ignore_folders",
    multiple=True,
    help="Folder name or glob to leave out (repeatable, flat mode only)",
)
@click.pass_context
def tree(ctx: click.Context, root: str, nested: bool, ignore_folders: tuple[str, ...]):
    """List everything under ROOT, honouring .gitignore files."""
    if nested:
        if ignore_folders:
            raise click.UsageError("--ignore-folder only applies to the flat tree")
        _run(ctx, "directory_tree", {"path": root})
    else:
        _run(
            ctx,
            "directory_tree_flat",
            {"path": root, "ignoreFolders": list(ignore_folders)},
        )


@cli.command()
@click.argument("root")
@click.argument("query")
@click.option("--exclude", "-e", "exclude_patterns", multiple=True, help="Name or glob to exclude (repeatable)")
@click.option("--ignore-folder", "-i", "ignore_folders", multiple=True, help="Folder name or glob to leave out (repeatable)")
@click.pass_context
def search(
    ctx: click.Context,
    root: str,
    query: str,
    exclude_patterns: tuple[str, ...],
    ignore_folders: tuple[str, ...],
):
    """Find entries under ROOT whose name contains QUERY (case-insensitive)."""
    _run(
        ctx,
        "search_files",
        {
            "path": root,
            "pattern": query,
            "excludePatterns": list(exclude_patterns),
            "ignoreFolders": list(ignore_folders),
        },
    )


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.pass_context
def read(ctx: click.Context, paths: tuple[str, ...]):
    """Print the contents of one or more files."""
    if len(paths) == 1:
        _run(ctx, "read_file", {"path": paths[0]})
    else:
        _run(ctx, "read_multiple_files", {"paths": list(paths)})


@cli.command()
@click.argument("path")
@click.pass_context
def info(ctx: click.Context, path: str):
    """Show size, timestamps and permissions of PATH."""
    _run(ctx, "get_file_info", {"path": path})


@cli.command("ls")
@click.argument("path", default=".")
@click.pass_context
def list_directory(ctx: click.Context, path: str):
    """List the immediate entries of PATH."""
    _run(ctx, "list_directory", {"path": path})


@cli.command("tools")
@click.option("--schemas", is_flag=True, help="Print the function calling schemas as JSON")
@click.pass_context
def show_tools(ctx: click.Context, schemas: bool):
    """Show the active configuration and available tools."""
    tools: FileSystemTools = ctx.obj["tools"]
    if schemas:
        console.print_json(json.dumps(tools.get_tool_schemas()))
        return

    summary = tools.get_summary()
    denied = summary["disallowed_directories"] or ["(none)"]
    names = [s["function"]["name"] for s in tools.get_tool_schemas()]
    body = "\n".join(
        [
            "[bold]Disallowed directories:[/bold]",
            *[f"  • {d}" for d in denied],
            f"[bold]Ignore file:[/bold] {summary['ignore_file_name']}",
            f"[bold]Max file size:[/bold] {summary['max_file_size_mb']:.1f} MB",
            f"[bold]Writes:[/bold] {'enabled' if summary['allow_write'] else 'disabled'}",
            "[bold]Tools:[/bold] " + ", ".join(names),
        ]
    )
    console.print(Panel(body, title="pathfence"))


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
