"""
Function-calling interface over the bounded filesystem.

Provides tool schemas (OpenAI function calling format) and an async
dispatcher. Results are dicts; `format_tool_result` flattens them to the
plain-text form agents consume.
"""

import inspect
import logging
from typing import Any, Optional

from pathfence.filesystem.boundary import BoundaryResolver
from pathfence.filesystem.config import FileSystemConfig
from pathfence.filesystem.exceptions import FileSystemError
from pathfence.filesystem.reader import BoundedFileReader
from pathfence.filesystem.search import FileSearch
from pathfence.filesystem.tree import DirectoryTreeBuilder, entries_to_json
from pathfence.filesystem.writer import BoundedFileWriter

logger = logging.getLogger(__name__)

READ_SEPARATOR = "\n---\n"


def _schema(name: str, description: str, properties: dict, required: list[str]) -> dict:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


_PATH = {"type": "string", "description": "Path to a file or directory"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}


def format_tool_result(result: dict[str, Any]) -> str:
    """Flatten a tool result to text; failures become `Error: <message>`."""
    if result.get("success"):
        return result["content"]
    return f"Error: {result['error']}"


class FileSystemTools:
    """
    Bounded filesystem operations exposed as agent tools.

    Usage:
        config = FileSystemConfig(disallowed_directories=["~/.ssh"])
        tools = FileSystemTools(config)

        schemas = tools.get_tool_schemas()
        result = await tools.execute_tool(
            tool_name="search_files",
            arguments={"path": "~/project", "pattern": "readme"},
        )
        print(format_tool_result(result))
    """

    def __init__(
        self,
        config: FileSystemConfig,
        resolver: Optional[BoundaryResolver] = None,
    ):
        """
        Initialize the tools.

        Args:
            config: Filesystem configuration
            resolver: Shared boundary resolver (default: built from `config`)
        """
        self.config = config
        self.resolver = resolver or BoundaryResolver(config.boundary_set())
        self.reader = BoundedFileReader(self.resolver, config.max_file_size_bytes)
        self.writer = BoundedFileWriter(self.resolver, config.allow_write)
        self.tree = DirectoryTreeBuilder(self.resolver, config.ignore_file_name)
        self.search = FileSearch(
            self.resolver, config.ignore_file_name, config.max_search_results
        )

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        """Function calling schemas for every available tool."""
        schemas = [
            _schema(
                "validate_path",
                "Check whether a path may be accessed and return its resolved absolute form.",
                {"path": _PATH},
                ["path"],
            ),
            _schema(
                "read_file",
                "Read the complete contents of a file as UTF-8 text. "
                "Only works outside disallowed directories.",
                {"path": _PATH},
                ["path"],
            ),
            _schema(
                "read_multiple_files",
                "Read several files at once. Each file's content is returned with its "
                "path; a failed read is reported inline and does not stop the others.",
                {"paths": {**_STRING_LIST, "description": "Files to read"}},
                ["paths"],
            ),
            _schema(
                "get_file_info",
                "Retrieve size, timestamps, type and permissions of a file or directory.",
                {"path": _PATH},
                ["path"],
            ),
            _schema(
                "list_directory",
                "List the immediate entries of a directory, prefixed with [DIR] or [FILE].",
                {"path": _PATH},
                ["path"],
            ),
            _schema(
                "directory_tree",
                "Get a recursive tree of files and directories as JSON. Each entry has "
                "'name', 'type' (file/directory) and, for directories, 'children'. "
                "Respects .gitignore files.",
                {"path": _PATH},
                ["path"],
            ),
            _schema(
                "directory_tree_flat",
                "Get every directory and file under a path as two sorted JSON lists of "
                "relative paths. Respects .gitignore files and the given folder filters.",
                {
                    "path": _PATH,
                    "ignoreFolders": {
                        **_STRING_LIST,
                        "description": "Folder names or globs to leave out (e.g. 'build', 'dist/*')",
                    },
                },
                ["path"],
            ),
            _schema(
                "search_files",
                "Recursively search for files and directories whose name contains a "
                "pattern (case-insensitive). Returns full paths, one per line.",
                {
                    "path": _PATH,
                    "pattern": {"type": "string", "description": "Substring to look for"},
                    "excludePatterns": {
                        **_STRING_LIST,
                        "description": "Names or globs to exclude",
                    },
                    "ignoreFolders": {
                        **_STRING_LIST,
                        "description": "Folder names or globs to leave out",
                    },
                },
                ["path", "pattern"],
            ),
        ]

        if self.config.allow_write:
            schemas.extend([
                _schema(
                    "write_file",
                    "Create a new file or overwrite an existing one.",
                    {"path": _PATH, "content": {"type": "string"}},
                    ["path", "content"],
                ),
                _schema(
                    "create_directory",
                    "Create a directory, including missing parents. Succeeds if it exists.",
                    {"path": _PATH},
                    ["path"],
                ),
                _schema(
                    "move_file",
                    "Move or rename a file or directory. Fails if the destination exists.",
                    {"source": _PATH, "destination": _PATH},
                    ["source", "destination"],
                ),
            ])

        return schemas

    async def execute_tool(
        self, tool_name: str, arguments: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Execute a tool call.

        Args:
            tool_name: Name of the tool to execute
            arguments: Tool arguments (from the function call)

        Returns:
            `{"success": True, "content": str}` or
            `{"success": False, "error": str, "error_type": str}`

        Raises:
            ValueError: If tool name is unknown
        """
        if tool_name == "validate_path":
            handler = self._validate_path
        elif tool_name == "read_file":
            handler = self._read_file
        elif tool_name == "read_multiple_files":
            handler = self._read_multiple_files
        elif tool_name == "get_file_info":
            handler = self._get_file_info
        elif tool_name == "list_directory":
            handler = self._list_directory
        elif tool_name == "directory_tree":
            handler = self._directory_tree
        elif tool_name == "directory_tree_flat":
            handler = self._directory_tree_flat
        elif tool_name == "search_files":
            handler = self._search_files
        elif tool_name == "write_file":
            handler = self._write_file
        elif tool_name == "create_directory":
            handler = self._create_directory
        elif tool_name == "move_file":
            handler = self._move_file
        else:
            raise ValueError(f"Unknown tool: {tool_name}")

        try:
            bound = inspect.signature(handler).bind(**arguments)
        except TypeError as e:
            logger.warning(f"Tool {tool_name} called with bad arguments: {e}")
            return {
                "success": False,
                "error": f"Invalid arguments for {tool_name}: {e}",
                "error_type": "InvalidArguments",
            }

        try:
            content = await handler(*bound.args, **bound.kwargs)
            return {"success": True, "content": content}
        except FileSystemError as e:
            logger.warning(f"Tool {tool_name} failed: {e}")
            return {
                "success": False,
                "error": str(e),
                "error_type": e.kind.value,
            }
        except Exception as e:
            logger.error(f"Tool {tool_name} unexpected error: {e}")
            return {
                "success": False,
                "error": f"Unexpected error: {e}",
                "error_type": "UnexpectedError",
            }

    async def _validate_path(self, path: str) -> str:
        return str(self.resolver.validate(path))

    async def _read_file(self, path: str) -> str:
        return self.reader.read_file(path)

    async def _read_multiple_files(self, paths: list[str]) -> str:
        parts = []
        for result in self.reader.read_files(paths):
            if result.ok:
                parts.append(f"{result.path}:\n{result.content}\n")
            else:
                parts.append(f"{result.path}: Error - {result.error}")
        return READ_SEPARATOR.join(parts)

    async def _get_file_info(self, path: str) -> str:
        return self.reader.get_file_info(path).to_text()

    async def _list_directory(self, path: str) -> str:
        entries = self.reader.list_directory(path)
        return "\n".join(
            f"{'[DIR]' if entry.is_dir else '[FILE]'} {entry.name}" for entry in entries
        )

    async def _directory_tree(self, path: str) -> str:
        return entries_to_json(self.tree.build_nested_tree(path))

    async def _directory_tree_flat(
        self, path: str, ignoreFolders: Optional[list[str]] = None
    ) -> str:
        return self.tree.build_flat_tree(path, ignoreFolders or []).to_json()

    async def _search_files(
        self,
        path: str,
        pattern: str,
        excludePatterns: Optional[list[str]] = None,
        ignoreFolders: Optional[list[str]] = None,
    ) -> str:
        return self.search.search(path, pattern, excludePatterns or [], ignoreFolders or [])

    async def _write_file(self, path: str, content: str) -> str:
        self.writer.write_file(path, content)
        return f"Successfully wrote to {path}"

    async def _create_directory(self, path: str) -> str:
        self.writer.create_directory(path)
        return f"Successfully created directory {path}"

    async def _move_file(self, source: str, destination: str) -> str:
        self.writer.move_file(source, destination)
        return f"Successfully moved {source} to {destination}"

    def get_summary(self) -> dict[str, Any]:
        """Summary of the active configuration."""
        return {
            "disallowed_directories": [str(d) for d in self.resolver.boundaries],
            "ignore_file_name": self.config.ignore_file_name,
            "max_file_size_mb": self.config.max_file_size_bytes / (1024 * 1024),
            "max_search_results": self.config.max_search_results,
            "allow_write": self.config.allow_write,
        }
