"""Heuristic, line-based source analyzers."""

from .imports import analyze_imports
from .structure import StructureAnalyzer
from .usages import UsageFinder, short_name

__all__ = ["StructureAnalyzer", "UsageFinder", "analyze_imports", "short_name"]
