"""MCP stdio server exposing the toolbox as MCP tools."""

import json
from typing import List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .config import ProbeConfig
from .logging import get_logger
from .toolbox import ToolResult, Toolbox

SERVER_NAME = "repoprobe"

logger = get_logger("server")


def format_result(result: ToolResult) -> str:
    """Render a tool result as text; failures raise so the client sees isError."""
    if not result.ok:
        raise ToolError(f"Error: {result.error}")
    if isinstance(result.payload, str):
        return result.payload
    return json.dumps(result.payload, indent=2)


def create_server(toolbox: Toolbox) -> FastMCP:
    """Create the FastMCP instance with one tool per toolbox operation."""
    mcp = FastMCP(SERVER_NAME)

    def _call(name: str, **arguments) -> str:
        return format_result(toolbox.dispatch(name, arguments))

    @mcp.tool()
    def read_file(path: str, start_line: Optional[int] = None, end_line: Optional[int] = None) -> str:
        """
        Read a file with optional line range. Returns content with line numbers.

        Args:
            path: Relative path to the file from project root
            start_line: Start line number (1-indexed, optional)
            end_line: End line number (1-indexed, -1 for end of file, optional)
        """
        return _call("read_file", path=path, start_line=start_line, end_line=end_line)

    @mcp.tool()
    def read_multiple_files(paths: List[str]) -> str:
        """
        Read multiple files at once for comparison or analysis.

        Args:
            paths: Relative file paths to read
        """
        return _call("read_multiple_files", paths=paths)

    @mcp.tool()
    def write_file(path: str, content: str) -> str:
        """Write or overwrite content of an existing file."""
        return _call("write_file", path=path, content=content)

    @mcp.tool()
    def create_file(path: str, content: str) -> str:
        """Create a new file with content. Creates parent directories if needed."""
        return _call("create_file", path=path, content=content)

    @mcp.tool()
    def delete_file(path: str) -> str:
        """Delete a file from the project."""
        return _call("delete_file", path=path)

    @mcp.tool()
    def list_files(directory: str = ".", recursive: bool = False, pattern: Optional[str] = None) -> str:
        """
        List files and directories with optional pattern filtering.

        Args:
            directory: Relative directory path (default: root)
            recursive: List recursively (default: false)
            pattern: Filter by extension pattern (e.g., '.php')
        """
        return _call("list_files", directory=directory, recursive=recursive, pattern=pattern)

    @mcp.tool()
    def search_code(
        query: str,
        file_extensions: Optional[List[str]] = None,
        case_sensitive: bool = False,
        regex: bool = False,
    ) -> str:
        """
        Search for text across the codebase. Files are ranked by match count.

        Args:
            query: Text to search for (literal unless regex is set)
            file_extensions: Filter by extensions (e.g., ['.php', '.blade.php'])
            case_sensitive: Case-sensitive search (default: false)
            regex: Treat the query as a regular expression (default: false)
        """
        return _call(
            "search_code",
            query=query,
            file_extensions=file_extensions,
            case_sensitive=case_sensitive,
            regex=regex,
        )

    @mcp.tool()
    def search_and_replace(path: str, search: str, replace: str) -> str:
        """Search and replace literal text in a specific file."""
        return _call("search_and_replace", path=path, search=search, replace=replace)

    @mcp.tool()
    def get_project_structure(max_depth: Optional[int] = None) -> str:
        """
        Get a tree view of the project structure.

        Args:
            max_depth: Maximum depth to traverse (default: 3)
        """
        return _call("get_project_structure", max_depth=max_depth)

    @mcp.tool()
    def analyze_php_file(path: str) -> str:
        """Analyze a PHP file to extract namespace, class, methods, properties, and imports."""
        return _call("analyze_php_file", path=path)

    @mcp.tool()
    def find_class_usages(class_name: str) -> str:
        """
        Find all usages of a PHP class across the project.

        Args:
            class_name: Class name to search for (e.g., 'User' or 'App\\Models\\User')
        """
        return _call("find_class_usages", class_name=class_name)

    @mcp.tool()
    def analyze_imports(path: str) -> str:
        """Analyze imports in a JavaScript/TypeScript file to understand dependencies."""
        return _call("analyze_imports", path=path)

    @mcp.tool()
    def read_component_context(component_path: str) -> str:
        """Read a component file along with its related files (styles, tests, types)."""
        return _call("read_component_context", component_path=component_path)

    return mcp


def run_server(config: ProbeConfig) -> None:  # pragma: no cover - stdio transport
    """Serve the toolbox over MCP stdio until the client disconnects."""
    logger.info("repoprobe MCP server running for: %s", config.root)
    create_server(Toolbox(config)).run()


__all__ = ["create_server", "format_result", "run_server"]
