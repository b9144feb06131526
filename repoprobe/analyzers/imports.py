"""Classification of JavaScript/TypeScript import statements."""

from __future__ import annotations

import re
from typing import Optional

from ..models import ImportSummary

_TYPE_IMPORT = re.compile(r"import\s+type\s+{[^}]+}\s+from\s+['\"](.*?)['\"]")
_IMPORT = re.compile(r"import\s+(?:{[^}]+}|[\w*]+(?:\s+as\s+\w+)?)\s+from\s+['\"](.*?)['\"]")

_INTERNAL_PREFIXES = (".", "@/")


def analyze_imports(text: str, file: Optional[str] = None) -> ImportSummary:
    """Group module specifiers into type-only, internal (relative or `@/`) and external."""
    summary = ImportSummary(file=file)
    for line in text.split("\n"):
        summary.types.extend(_TYPE_IMPORT.findall(line))
        for module in _IMPORT.findall(line):
            if module.startswith(_INTERNAL_PREFIXES):
                summary.internal.append(module)
            else:
                summary.external.append(module)
    return summary


__all__ = ["analyze_imports"]
