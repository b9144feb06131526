"""Exclusion-aware directory traversal: listing, recursive collection, tree rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from .config import DEFAULT_EXCLUDE_DIRS
from .errors import NotFound
from .logging import get_logger
from .models import FileRecord, WalkResult
from .sandbox import PathSandbox

ExclusionPredicate = Callable[[str, str], bool]

_SIZE_UNITS = ("B", "KB", "MB", "GB")

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "

logger = get_logger("walker")


def substring_exclusion(fragments: Iterable[str]) -> ExclusionPredicate:
    """Build the default exclusion rule.

    An entry is excluded when its name is hidden or when its root-relative
    path contains any fragment. Containment is loose: a
    fragment also matches inside longer names anywhere in the tree.
    """
    fragments = tuple(fragments)

    def _excluded(name: str, rel_path: str) -> bool:
        if name.startswith("."):
            return True
        return any(fragment in rel_path for fragment in fragments)

    return _excluded


def format_size(num_bytes: int) -> str:
    """Return a binary-prefixed size such as ``512 B`` or ``1.5 KB``."""
    size = float(num_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1
    decimals = 1 if unit_index > 0 else 0
    return f"{size:.{decimals}f} {_SIZE_UNITS[unit_index]}"


def _iter_entries(directory: Path) -> List[Path]:
    return list(directory.iterdir())


def _is_dir(path: Path) -> bool:
    # Symlinked directories are reported as files so walks cannot loop.
    return path.is_dir() and not path.is_symlink()


def _sort_key(path: Path) -> tuple[int, str]:
    return (0 if _is_dir(path) else 1, path.name)


class TreeWalker:
    """Walks directories below the sandbox root while skipping excluded entries."""

    def __init__(
        self,
        sandbox: PathSandbox,
        exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
        *,
        exclusion: ExclusionPredicate | None = None,
    ) -> None:
        self.sandbox = sandbox
        self.is_excluded = exclusion or substring_exclusion(exclude_dirs)

    def _visible_entries(self, directory: Path) -> List[Path]:
        entries = [
            entry
            for entry in _iter_entries(directory)
            if not self.is_excluded(entry.name, self.sandbox.relative(entry))
        ]
        return sorted(entries, key=_sort_key)

    def list_children(self, directory: Path, pattern: Optional[str] = None) -> List[FileRecord]:
        """List one directory level, directories first, files with a readable size."""
        if not directory.is_dir():
            raise NotFound(f"Directory not found: {self.sandbox.relative(directory) or '.'}")

        records: List[FileRecord] = []
        for entry in self._visible_entries(directory):
            if _is_dir(entry):
                records.append(FileRecord(name=entry.name, type="directory"))
                continue
            if pattern and not entry.name.endswith(pattern):
                continue
            try:
                size: Optional[str] = format_size(entry.stat().st_size)
            except OSError:
                size = None
            records.append(FileRecord(name=entry.name, type="file", size=size))
        return records

    def collect_files(
        self, directory: Path, extensions: Optional[Sequence[str]] = None
    ) -> WalkResult:
        """Collect root-relative paths of files whose names end with one of `extensions`.

        ``extensions=None`` accepts every file. Directories that cannot be read
        are recorded in ``WalkResult.skipped`` and the walk carries on.
        """
        suffixes = tuple(extensions) if extensions is not None else None
        result = WalkResult()
        self._walk(directory, suffixes, result)
        return result

    def _walk(self, directory: Path, suffixes: Optional[tuple[str, ...]], result: WalkResult) -> None:
        try:
            entries = _iter_entries(directory)
        except OSError as exc:
            rel_dir = self.sandbox.relative(directory)
            logger.debug("Skipping unreadable directory %s: %s", rel_dir or ".", exc)
            result.skipped.append(rel_dir)
            return

        for entry in entries:
            rel_path = self.sandbox.relative(entry)
            if self.is_excluded(entry.name, rel_path):
                continue
            if _is_dir(entry):
                self._walk(entry, suffixes, result)
            elif suffixes is None or entry.name.endswith(suffixes):
                result.files.append(rel_path)

    def render_tree(self, directory: Path, max_depth: int) -> str:
        """Render a box-drawing tree of `directory`, `max_depth` levels deep."""
        lines: List[str] = []
        self._tree_lines(directory, "", 0, max_depth, lines)
        return "".join(f"{line}\n" for line in lines)

    def _tree_lines(
        self, directory: Path, prefix: str, depth: int, max_depth: int, lines: List[str]
    ) -> None:
        if depth >= max_depth:
            return
        try:
            entries = self._visible_entries(directory)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return

        for index, entry in enumerate(entries):
            is_last = index == len(entries) - 1
            connector = _LAST_BRANCH if is_last else _BRANCH
            if _is_dir(entry):
                lines.append(f"{prefix}{connector}{entry.name}/")
                extension = _SPACE if is_last else _PIPE
                self._tree_lines(entry, prefix + extension, depth + 1, max_depth, lines)
            else:
                lines.append(f"{prefix}{connector}{entry.name}")


__all__ = ["TreeWalker", "format_size", "substring_exclusion"]
