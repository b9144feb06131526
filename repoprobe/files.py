"""Single-file primitives: ranged reads, writes, creation, deletion and search-and-replace."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .errors import AccessDenied, AlreadyExists, InvalidPattern, NotFound
from .logging import get_logger
from .models import ReplaceChange, ReplaceReport
from .sandbox import PathSandbox

RELATED_SUFFIXES = (
    ".module.css",
    ".module.scss",
    ".css",
    ".test.tsx",
    ".test.ts",
    ".spec.tsx",
    ".spec.ts",
    ".types.ts",
    ".d.ts",
)

_HEADER_RULE = "─" * 60

logger = get_logger("files")


def split_lines(text: str) -> List[str]:
    """Split on newlines; a trailing newline does not start another line."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def format_numbered(path: str, lines: Sequence[str], start_line: Optional[int], end_line: Optional[int]) -> str:
    """Render `lines` with right-justified numbers under a range header.

    `start_line` below 1 is raised to 1; `end_line` past the end, below 1
    or -1 is clamped to the last line. A start past the end yields an empty body.
    """
    total = len(lines)
    start = 1
    end = total
    if start_line is not None:
        start = max(1, start_line)
        end = total if end_line is None or end_line < 1 else min(total, end_line)

    body = [f"{number:>4} | {lines[number - 1]}" for number in range(start, end + 1)]
    header = f"File: {path} (lines {start}-{end} of {total})\n{_HEADER_RULE}"
    return "\n".join([header, *body])


def _line_count(content: str) -> int:
    return len(content.split("\n"))


class FileOperations:
    """File I/O behind the path sandbox."""

    def __init__(self, sandbox: PathSandbox, *, max_workers: int = 8) -> None:
        self.sandbox = sandbox
        self.max_workers = max_workers

    def _existing_file(self, path: str) -> Path:
        target = self.sandbox.resolve(path)
        if not target.is_file():
            raise NotFound(f"File not found: {path}")
        return target

    def read(self, path: str, start_line: Optional[int] = None, end_line: Optional[int] = None) -> str:
        target = self._existing_file(path)
        lines = split_lines(target.read_text(encoding="utf-8"))
        return format_numbered(path, lines, start_line, end_line)

    def read_many(self, paths: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        """Read several files concurrently; failures are reported per path."""

        def _read_one(path: str) -> Dict[str, Any]:
            try:
                content = self._existing_file(path).read_text(encoding="utf-8")
            except Exception as exc:  # reported to the caller per entry
                logger.debug("read_many failed for %s: %s", path, exc)
                return {"success": False, "error": str(exc)}
            return {"success": True, "content": content}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            outcomes = list(executor.map(_read_one, paths))
        return dict(zip(paths, outcomes))

    def write(self, path: str, content: str) -> Dict[str, Any]:
        target = self._existing_file(path)
        target.write_text(content, encoding="utf-8")
        lines = _line_count(content)
        return {"path": path, "lines": lines, "message": f"Successfully wrote {lines} lines to {path}"}

    def create(self, path: str, content: str) -> Dict[str, Any]:
        target = self.sandbox.resolve(path)
        if target.exists():
            raise AlreadyExists(f"File already exists: {path}. Use write_file to overwrite.")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        lines = _line_count(content)
        return {"path": path, "lines": lines, "message": f"Successfully created {path} with {lines} lines"}

    def delete(self, path: str) -> Dict[str, Any]:
        target = self._existing_file(path)
        target.unlink()
        return {"path": path, "message": f"Successfully deleted {path}"}

    def replace(self, path: str, search: str, replace: str) -> ReplaceReport:
        """Replace every literal occurrence of `search`, rewriting the file only on change.

        The rewrite is a whole-file overwrite; a concurrent external edit between
        the read and the write is lost.
        """
        if not search:
            raise InvalidPattern("Search text must not be empty")
        target = self._existing_file(path)
        with target.open("r", encoding="utf-8", newline="") as handle:
            lines = handle.read().split("\n")

        changes: List[ReplaceChange] = []
        for index, line in enumerate(lines):
            if search not in line:
                continue
            updated = line.replace(search, replace)
            changes.append(ReplaceChange(line=index + 1, before=line.strip(), after=updated.strip()))
            lines[index] = updated

        if not changes:
            return ReplaceReport(file=path, message="No matches found")

        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write("\n".join(lines))
        return ReplaceReport(
            file=path,
            message=f"Replaced {len(changes)} occurrence(s)",
            changes=changes,
        )

    def read_related(self, path: str, suffixes: Sequence[str] = RELATED_SUFFIXES) -> Dict[str, Any]:
        """Return a component file with its existing sibling style, test and type files."""
        target = self._existing_file(path)
        stem = target.stem
        related = []
        for suffix in suffixes:
            sibling = target.with_name(f"{stem}{suffix}")
            if sibling == target or not sibling.is_file():
                continue
            rel_path = self.sandbox.relative(sibling)
            try:
                candidate = self.sandbox.resolve(rel_path)
            except AccessDenied:
                logger.debug("Skipping related file %s: resolves outside the root", rel_path)
                continue
            try:
                content = candidate.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping related file %s: %s", candidate, exc)
                continue
            related.append({"file": rel_path, "content": content})
        return {
            "main": {"file": path, "content": target.read_text(encoding="utf-8")},
            "related": related,
        }


__all__ = ["FileOperations", "RELATED_SUFFIXES", "format_numbered", "split_lines"]
