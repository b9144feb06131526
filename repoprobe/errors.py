"""Error taxonomy shared by the core operations and the dispatch boundary."""

from __future__ import annotations


class ProbeError(RuntimeError):
    """Base class for failures reported back to the caller verbatim."""


class AccessDenied(ProbeError):
    """Raised when a caller path resolves outside the project root."""


class NotFound(ProbeError):
    """Raised when a target file or directory does not exist."""


class AlreadyExists(ProbeError):
    """Raised when creating a file that is already present."""


class InvalidPattern(ProbeError):
    """Raised for empty search text or a pattern that does not compile."""


__all__ = ["AccessDenied", "AlreadyExists", "InvalidPattern", "NotFound", "ProbeError"]
