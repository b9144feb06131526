"""Named tool dispatch: argument validation, routing and uniform failure payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, Field, ValidationError

from .analyzers import StructureAnalyzer, UsageFinder, analyze_imports
from .config import ProbeConfig
from .errors import NotFound, ProbeError
from .files import FileOperations
from .logging import get_logger
from .sandbox import PathSandbox
from .search import SearchEngine
from .walker import TreeWalker

Payload = Union[str, Dict[str, Any]]


class ReadFileArgs(BaseModel):
    path: str = Field(description="Relative path to the file from project root")
    start_line: Optional[int] = Field(default=None, description="Start line number (1-indexed)")
    end_line: Optional[int] = Field(
        default=None, description="End line number (1-indexed, -1 for end of file)"
    )


class ReadMultipleFilesArgs(BaseModel):
    paths: List[str] = Field(description="Relative file paths to read")


class WriteFileArgs(BaseModel):
    path: str = Field(description="Relative path to an existing file")
    content: str = Field(description="Content to write")


class CreateFileArgs(BaseModel):
    path: str = Field(description="Relative path for the new file")
    content: str = Field(description="Initial content")


class DeleteFileArgs(BaseModel):
    path: str = Field(description="Relative path to the file to delete")


class ListFilesArgs(BaseModel):
    directory: str = Field(default=".", description="Relative directory path")
    recursive: bool = Field(default=False, description="List recursively")
    pattern: Optional[str] = Field(default=None, description="Filename suffix filter, e.g. '.php'")


class SearchCodeArgs(BaseModel):
    query: str = Field(description="Text or pattern to search for")
    file_extensions: Optional[List[str]] = Field(
        default=None, description="Filter by extensions, e.g. ['.php', '.blade.php']"
    )
    case_sensitive: bool = Field(default=False, description="Case-sensitive search")
    regex: bool = Field(default=False, description="Treat the query as a regular expression")


class SearchAndReplaceArgs(BaseModel):
    path: str = Field(description="Relative path to the file")
    search: str = Field(description="Literal text to search for")
    replace: str = Field(description="Replacement text")


class ProjectStructureArgs(BaseModel):
    max_depth: Optional[int] = Field(default=None, description="Maximum depth to traverse (default: 3)")


class AnalyzeFileArgs(BaseModel):
    path: str = Field(description="Relative path to the source file")


class FindClassUsagesArgs(BaseModel):
    class_name: str = Field(description="Class name, short ('User') or qualified ('App\\Models\\User')")


class ComponentContextArgs(BaseModel):
    component_path: str = Field(description="Path to the main component file")


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    args_model: Type[BaseModel]


_TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        "read_file",
        "Read a file with optional line range. Returns content with line numbers.",
        ReadFileArgs,
    ),
    ToolDefinition(
        "read_multiple_files",
        "Read multiple files at once for comparison or analysis.",
        ReadMultipleFilesArgs,
    ),
    ToolDefinition("write_file", "Overwrite the content of an existing file.", WriteFileArgs),
    ToolDefinition(
        "create_file",
        "Create a new file with content. Creates parent directories if needed.",
        CreateFileArgs,
    ),
    ToolDefinition("delete_file", "Delete a file from the project.", DeleteFileArgs),
    ToolDefinition(
        "list_files",
        "List files and directories with optional suffix filtering.",
        ListFilesArgs,
    ),
    ToolDefinition(
        "search_code",
        "Search for text across the codebase; files ranked by match count.",
        SearchCodeArgs,
    ),
    ToolDefinition(
        "search_and_replace",
        "Replace literal text in a specific file.",
        SearchAndReplaceArgs,
    ),
    ToolDefinition(
        "get_project_structure",
        "Get a tree view of the project structure.",
        ProjectStructureArgs,
    ),
    ToolDefinition(
        "analyze_php_file",
        "Extract namespace, class, methods, properties, constants and imports from a PHP file.",
        AnalyzeFileArgs,
    ),
    ToolDefinition(
        "find_class_usages",
        "Find imports, parents, interfaces and references of a PHP class across the project.",
        FindClassUsagesArgs,
    ),
    ToolDefinition(
        "analyze_imports",
        "Group JavaScript/TypeScript imports into external, internal and type-only modules.",
        AnalyzeFileArgs,
    ),
    ToolDefinition(
        "read_component_context",
        "Read a component file along with its related style, test and type files.",
        ComponentContextArgs,
    ),
)

TOOLS: Dict[str, ToolDefinition] = {tool.name: tool for tool in _TOOL_DEFINITIONS}


@dataclass
class ToolResult:
    """Outcome of one dispatched call: a payload or a human-readable error."""

    name: str
    payload: Optional[Payload] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        if isinstance(self.payload, str):
            return {"text": self.payload}
        return dict(self.payload or {})


def _format_validation_error(name: str, exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
        for error in exc.errors()
    )
    return f"Invalid arguments for {name}: {details}"


class Toolbox:
    """Binds the core components to one project root and routes named calls to them."""

    def __init__(self, config: ProbeConfig) -> None:
        self.config = config
        self.sandbox = PathSandbox(config.root)
        self.walker = TreeWalker(self.sandbox, config.exclude_dirs)
        self.files = FileOperations(self.sandbox, max_workers=config.max_workers)
        self.search_engine = SearchEngine(config, self.walker)
        self.structure = StructureAnalyzer()
        self.usages = UsageFinder(config, self.walker)
        self.logger = get_logger("toolbox")

    def describe(self) -> List[Dict[str, Any]]:
        """Return name, description and JSON schema for every tool."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.args_model.model_json_schema(),
            }
            for tool in _TOOL_DEFINITIONS
        ]

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Run tool `name`; every fault becomes a failure result instead of propagating."""
        tool = TOOLS.get(name)
        if tool is None:
            return ToolResult(name=name, error=f"Unknown tool: {name}")

        try:
            args = tool.args_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            return ToolResult(name=name, error=_format_validation_error(name, exc))

        handler: Callable[[Any], Payload] = getattr(self, tool.name)
        self.logger.debug("Dispatching %s", name)
        try:
            payload = handler(args)
        except (ProbeError, OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Tool %s failed: %s", name, exc)
            return ToolResult(name=name, error=str(exc))
        except Exception as exc:  # pragma: no cover - unexpected faults still reach the caller
            self.logger.exception("Tool %s raised an unexpected error", name)
            return ToolResult(name=name, error=f"{type(exc).__name__}: {exc}")
        return ToolResult(name=name, payload=payload)

    # Tool handlers

    def read_file(self, args: ReadFileArgs) -> str:
        return self.files.read(args.path, args.start_line, args.end_line)

    def read_multiple_files(self, args: ReadMultipleFilesArgs) -> Dict[str, Any]:
        return self.files.read_many(args.paths)

    def write_file(self, args: WriteFileArgs) -> Dict[str, Any]:
        return self.files.write(args.path, args.content)

    def create_file(self, args: CreateFileArgs) -> Dict[str, Any]:
        return self.files.create(args.path, args.content)

    def delete_file(self, args: DeleteFileArgs) -> Dict[str, Any]:
        return self.files.delete(args.path)

    def list_files(self, args: ListFilesArgs) -> Dict[str, Any]:
        directory = self.sandbox.resolve(args.directory)
        if args.recursive:
            if not directory.is_dir():
                raise NotFound(f"Directory not found: {args.directory}")
            extensions = [args.pattern] if args.pattern else None
            walk = self.walker.collect_files(directory, extensions)
            return {
                "directory": args.directory,
                "pattern": args.pattern,
                "files": walk.files,
                "count": len(walk.files),
                "skipped": walk.skipped,
            }

        items = self.walker.list_children(directory, args.pattern)
        return {
            "directory": args.directory,
            "items": [item.to_dict() for item in items],
            "count": len(items),
        }

    def search_code(self, args: SearchCodeArgs) -> Dict[str, Any]:
        report = self.search_engine.search(
            args.query,
            args.file_extensions,
            case_sensitive=args.case_sensitive,
            regex=args.regex,
        )
        return report.to_dict()

    def search_and_replace(self, args: SearchAndReplaceArgs) -> Dict[str, Any]:
        return self.files.replace(args.path, args.search, args.replace).to_dict()

    def get_project_structure(self, args: ProjectStructureArgs) -> str:
        max_depth = args.max_depth if args.max_depth and args.max_depth > 0 else self.config.tree_depth
        tree = self.walker.render_tree(self.config.root, max_depth)
        return f"{self.config.root.name}/\n{tree}"

    def _read_source(self, path: str) -> str:
        target = self.sandbox.resolve(path)
        if not target.is_file():
            raise NotFound(f"File not found: {path}")
        return target.read_text(encoding="utf-8")

    def analyze_php_file(self, args: AnalyzeFileArgs) -> Dict[str, Any]:
        return self.structure.analyze(self._read_source(args.path), file=args.path).to_dict()

    def find_class_usages(self, args: FindClassUsagesArgs) -> Dict[str, Any]:
        return self.usages.find(args.class_name).to_dict()

    def analyze_imports(self, args: AnalyzeFileArgs) -> Dict[str, Any]:
        return analyze_imports(self._read_source(args.path), file=args.path).to_dict()

    def read_component_context(self, args: ComponentContextArgs) -> Dict[str, Any]:
        return self.files.read_related(args.component_path)


__all__ = ["TOOLS", "ToolResult", "ToolDefinition", "Toolbox"]
