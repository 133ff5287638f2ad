"""
Exception hierarchy for diagram-gen.

The layout, swimlane, style and page-assembly code never raises; these
errors come from the collaborators around it (annotation parsing, source
scanning, validation, compression, configuration).
"""

from __future__ import annotations


class DiagramGenError(Exception):
    """Base class for all diagram-gen errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AnnotationError(DiagramGenError):
    """Raised when a ``diagram:"..."`` annotation cannot be parsed."""


class SourceParseError(DiagramGenError):
    """Raised when an input file or directory cannot be read."""


class ValidationError(DiagramGenError):
    """Raised when a diagram model fails validation."""


class CompressionError(DiagramGenError):
    """Raised when page XML cannot be compressed or decompressed."""


class ConfigError(DiagramGenError):
    """Raised for unreadable or malformed configuration files."""
