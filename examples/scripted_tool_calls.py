"""
Example: Driving the bounded filesystem tools with scripted tool calls

An agent normally decides which tool to call next. Here the calls are
scripted so the example runs without a model: we build a throwaway project,
deny one directory inside it, and show what each tool returns.
"""

import asyncio
import tempfile
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from pathfence.filesystem import FileSystemConfig, FileSystemTools, format_tool_result

console = Console()


def build_project(root: Path) -> None:
    """Create a small project with a build folder, a gitignore and secrets."""
    (root / "src").mkdir()
    (root / "build").mkdir()
    (root / "secrets").mkdir()
    (root / "src" / "main.py").write_text("print('hello')\n")
    (root / "src" / "build.rs").write_text("fn main() {}\n")
    (root / "build" / "out.o").write_text("")
    (root / "secrets" / "token.txt").write_text("do-not-read\n")
    (root / "README.md").write_text("# Demo\n")
    (root / ".gitignore").write_text("*.log\n")
    (root / "debug.log").write_text("noise\n")


async def main():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        build_project(root)

        config = FileSystemConfig(disallowed_directories=[root / "secrets"])
        tools = FileSystemTools(config)

        calls = [
            ("directory_tree_flat", {"path": str(root), "ignoreFolders": ["build"]}),
            ("search_files", {"path": str(root), "pattern": "main"}),
            ("read_file", {"path": str(root / "README.md")}),
            # Denied: the agent gets an error string, never the content
            ("read_file", {"path": str(root / "secrets" / "token.txt")}),
            ("write_file", {"path": str(root / "notes.txt"), "content": "hi"}),
        ]

        for tool_name, arguments in calls:
            result = await tools.execute_tool(tool_name, arguments)
            style = "green" if result["success"] else "red"
            console.print(
                Panel(
                    format_tool_result(result),
                    title=f"{tool_name}({', '.join(arguments)})",
                    border_style=style,
                )
            )


if __name__ == "__main__":
    asyncio.run(main())
