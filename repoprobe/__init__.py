"""Sandboxed project inspection tools for automated callers."""

__version__ = "0.1.0"
