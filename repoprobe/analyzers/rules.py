"""Pure line classifiers for PHP declarations.

Each rule takes one line and returns a structured fact or None. Rules do not
share state; ordering and first-declaration-wins live in the structure fold.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

_NAMESPACE = re.compile(r"^\s*namespace\s+([^;]+)")
_USE = re.compile(r"^\s*use\s+([^;]+)")
_CLASS_HEADER = re.compile(r"^\s*(abstract\s+)?(final\s+)?(class|interface|trait|enum)\s+(\w+)")
_EXTENDS = re.compile(r"extends\s+(\w+)")
_IMPLEMENTS = re.compile(r"implements\s+([^{]+)")
_CONSTANT = re.compile(r"^\s*(public|protected|private)?\s*const\s+(\w+)\s*=")
_PROPERTY = re.compile(
    r"^\s*(public|protected|private)\s+(static\s+)?(\??\w+(?:\|[\w\?]+)*)?\s*\$(\w+)"
)
_METHOD = re.compile(
    r"^\s*(public|protected|private)\s+(static\s+)?function\s+(\w+)\s*\(([^)]*)\)"
)
_RETURN_TYPE = re.compile(r"\):\s*(\??[\w\|\\]+)")


@dataclass
class ClassHeader:
    kind: str
    name: str
    extends: Optional[str] = None
    implements: List[str] = field(default_factory=list)


@dataclass
class ConstantFact:
    name: str
    visibility: str


@dataclass
class PropertyFact:
    name: str
    visibility: str
    is_static: bool
    type: Optional[str]


@dataclass
class MethodFact:
    name: str
    visibility: str
    is_static: bool
    params: Optional[str]


def match_namespace(line: str) -> Optional[str]:
    match = _NAMESPACE.match(line)
    return match.group(1).strip() if match else None


def match_use(line: str) -> Optional[str]:
    """Return the target of a `use` statement (import or trait use)."""
    match = _USE.match(line)
    return match.group(1).strip() if match else None


def match_class_header(line: str) -> Optional[ClassHeader]:
    match = _CLASS_HEADER.match(line)
    if not match:
        return None
    header = ClassHeader(kind=match.group(3), name=match.group(4))

    extends_match = _EXTENDS.search(line)
    if extends_match:
        header.extends = extends_match.group(1)

    implements_match = _IMPLEMENTS.search(line)
    if implements_match:
        header.implements = [
            name.strip() for name in implements_match.group(1).split(",") if name.strip()
        ]
    return header


def match_constant(line: str) -> Optional[ConstantFact]:
    match = _CONSTANT.match(line)
    if not match:
        return None
    return ConstantFact(name=match.group(2), visibility=match.group(1) or "public")


def match_property(line: str) -> Optional[PropertyFact]:
    match = _PROPERTY.match(line)
    if not match:
        return None
    return PropertyFact(
        name=match.group(4),
        visibility=match.group(1),
        is_static=bool(match.group(2)),
        type=match.group(3) or None,
    )


def match_method(line: str) -> Optional[MethodFact]:
    match = _METHOD.match(line)
    if not match:
        return None
    return MethodFact(
        name=match.group(3),
        visibility=match.group(1),
        is_static=bool(match.group(2)),
        params=match.group(4).strip() or None,
    )


def match_return_type(line: str) -> Optional[str]:
    match = _RETURN_TYPE.search(line)
    return match.group(1) if match else None


__all__ = [
    "ClassHeader",
    "ConstantFact",
    "MethodFact",
    "PropertyFact",
    "match_class_header",
    "match_constant",
    "match_method",
    "match_namespace",
    "match_property",
    "match_return_type",
    "match_use",
]
