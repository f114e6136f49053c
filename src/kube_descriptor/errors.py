"""Error taxonomy for descriptor generation."""
from __future__ import annotations

from typing import Optional


class DescriptorError(Exception):
    """Base class for every fatal descriptor generation failure."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class ParseError(DescriptorError):
    """Raised when a fragment file is malformed or under-specified."""


class ConfigurationError(DescriptorError):
    """Raised when the declarative configuration is structurally invalid."""


class EnrichmentError(DescriptorError):
    """Raised when an enricher stage rejects or fails on the resource list."""

    def __init__(self, message: str, stage: str) -> None:
        self.stage = stage
        super().__init__(message, source=f"enricher '{stage}'")


class DescriptorIOError(DescriptorError):
    """Raised when reading fragments or writing the descriptor fails."""
