"""Resolution of caller-supplied paths inside the project root."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import AccessDenied


class PathSandbox:
    """Resolves relative paths against a fixed root and rejects escapes.

    The check compares raw strings, so a sibling directory whose name extends
    the root's name (``/proj`` vs ``/proj-other``) still passes.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()
        self._prefix = str(self.root)

    def resolve(self, relative_path: str | Path) -> Path:
        """Return the absolute form of `relative_path`, or raise AccessDenied."""
        resolved = (self.root / relative_path).resolve()
        if not str(resolved).startswith(self._prefix):
            raise AccessDenied("Path escapes project root - access denied")
        return resolved

    def relative(self, path: Path) -> str:
        """Return `path` relative to the root in POSIX form ("" for the root)."""
        relative = Path(os.path.relpath(path, self.root)).as_posix()
        return "" if relative == "." else relative


__all__ = ["PathSandbox"]
