"""Core data models shared across repoprobe components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FileRecord:
    """One entry of a single-level directory listing."""

    name: str
    type: str
    size: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "size": self.size}


@dataclass
class WalkResult:
    """Files collected by a recursive walk plus directories that could not be read."""

    files: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


@dataclass
class LineMatch:
    line: int
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "content": self.content}


@dataclass
class FileMatches:
    """All matching lines of one file."""

    file: str
    matches: List[LineMatch] = field(default_factory=list)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "matches": [match.to_dict() for match in self.matches],
            "matchCount": self.match_count,
        }


@dataclass
class SearchReport:
    """Ranked search outcome; `results` is already capped."""

    query: str
    total_matches: int
    file_count: int
    results: List[FileMatches] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "totalMatches": self.total_matches,
            "fileCount": self.file_count,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass
class ReplaceChange:
    line: int
    before: str
    after: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "before": self.before, "after": self.after}


@dataclass
class ReplaceReport:
    file: str
    message: str
    changes: List[ReplaceChange] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "message": self.message,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass
class ImportEntry:
    statement: str
    line: int


@dataclass
class ConstantEntry:
    name: str
    visibility: str
    line: int


@dataclass
class PropertyEntry:
    name: str
    visibility: str
    is_static: bool
    type: Optional[str]
    line: int


@dataclass
class MethodEntry:
    name: str
    visibility: str
    is_static: bool
    params: Optional[str]
    return_type: Optional[str]
    line: int


@dataclass
class SymbolTable:
    """Declarations extracted from one PHP file.

    At most one namespace and one primary class-like declaration are kept;
    later declarations of either kind are ignored.
    """

    file: Optional[str] = None
    namespace: Optional[str] = None
    class_name: Optional[str] = None
    class_type: Optional[str] = None
    extends: Optional[str] = None
    implements: List[str] = field(default_factory=list)
    traits: List[str] = field(default_factory=list)
    imports: List[ImportEntry] = field(default_factory=list)
    constants: List[ConstantEntry] = field(default_factory=list)
    properties: List[PropertyEntry] = field(default_factory=list)
    methods: List[MethodEntry] = field(default_factory=list)

    @property
    def full_class_name(self) -> Optional[str]:
        if self.namespace and self.class_name:
            return f"{self.namespace}\\{self.class_name}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "namespace": self.namespace,
            "className": self.class_name,
            "classType": self.class_type,
            "extends": self.extends,
            "implements": list(self.implements),
            "traits": list(self.traits),
            "imports": [{"statement": item.statement, "line": item.line} for item in self.imports],
            "constants": [
                {"name": item.name, "visibility": item.visibility, "line": item.line}
                for item in self.constants
            ],
            "properties": [
                {
                    "name": item.name,
                    "visibility": item.visibility,
                    "isStatic": item.is_static,
                    "type": item.type,
                    "line": item.line,
                }
                for item in self.properties
            ],
            "methods": [
                {
                    "name": item.name,
                    "visibility": item.visibility,
                    "isStatic": item.is_static,
                    "params": item.params,
                    "returnType": item.return_type,
                    "line": item.line,
                }
                for item in self.methods
            ],
            "fullClassName": self.full_class_name,
        }


@dataclass
class UsageHit:
    file: str
    line: int
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "line": self.line, "content": self.content}


@dataclass
class UsageReport:
    """Lines referencing a class, bucketed by independent categories."""

    class_name: str
    short_name: str
    imports: List[UsageHit] = field(default_factory=list)
    extends: List[UsageHit] = field(default_factory=list)
    implements: List[UsageHit] = field(default_factory=list)
    references: List[UsageHit] = field(default_factory=list)

    @property
    def total_usages(self) -> int:
        return len(self.imports) + len(self.extends) + len(self.implements) + len(self.references)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "className": self.class_name,
            "shortName": self.short_name,
            "totalUsages": self.total_usages,
            "imports": [hit.to_dict() for hit in self.imports],
            "extends": [hit.to_dict() for hit in self.extends],
            "implements": [hit.to_dict() for hit in self.implements],
            "references": [hit.to_dict() for hit in self.references],
        }


@dataclass
class ImportSummary:
    """JavaScript/TypeScript module imports grouped by origin."""

    file: Optional[str] = None
    external: List[str] = field(default_factory=list)
    internal: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "external": list(self.external),
            "internal": list(self.internal),
            "types": list(self.types),
        }
