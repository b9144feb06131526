"""Single-pass extraction of class-level symbols from PHP source text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..models import ConstantEntry, ImportEntry, MethodEntry, PropertyEntry, SymbolTable
from . import rules


@dataclass
class _FoldState:
    """Accumulator carried across lines."""

    table: SymbolTable = field(default_factory=SymbolTable)
    class_seen: bool = False


def _fold_line(state: _FoldState, line_number: int, line: str) -> _FoldState:
    table = state.table

    namespace = rules.match_namespace(line)
    if namespace is not None and table.namespace is None:
        table.namespace = namespace

    used = rules.match_use(line)
    if used is not None:
        if state.class_seen and "\\" not in used:
            table.traits.append(used)
        else:
            table.imports.append(ImportEntry(statement=used, line=line_number))

    header = rules.match_class_header(line)
    if header is not None and not state.class_seen:
        table.class_type = header.kind
        table.class_name = header.name
        table.extends = header.extends
        table.implements = list(header.implements)
        state.class_seen = True

    constant = rules.match_constant(line)
    if constant is not None:
        table.constants.append(
            ConstantEntry(name=constant.name, visibility=constant.visibility, line=line_number)
        )

    prop = rules.match_property(line)
    if prop is not None:
        table.properties.append(
            PropertyEntry(
                name=prop.name,
                visibility=prop.visibility,
                is_static=prop.is_static,
                type=prop.type,
                line=line_number,
            )
        )

    method = rules.match_method(line)
    if method is not None:
        table.methods.append(
            MethodEntry(
                name=method.name,
                visibility=method.visibility,
                is_static=method.is_static,
                params=method.params,
                return_type=rules.match_return_type(line),
                line=line_number,
            )
        )

    return state


class StructureAnalyzer:
    """Heuristic, line-based PHP symbol extractor (no tokenizer, no brace tracking)."""

    def analyze(self, text: str, file: Optional[str] = None) -> SymbolTable:
        state = _FoldState(table=SymbolTable(file=file))
        for line_number, line in enumerate(text.split("\n"), start=1):
            state = _fold_line(state, line_number, line)
        return state.table


__all__ = ["StructureAnalyzer"]
