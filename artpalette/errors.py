"""Exceptions raised by the palette engine."""

from __future__ import annotations


class ArtPaletteError(Exception):
    """Base class for palette engine failures."""


class DecodeError(ArtPaletteError):
    """Raised when a pixel buffer cannot be obtained or decoded."""


class EmptyPaletteError(ArtPaletteError):
    """Raised when no usable pixels survive sampling."""


class CorpusEntryUnavailable(ArtPaletteError):
    """Raised when a single reference artwork cannot be turned into a palette."""

    def __init__(self, identifier: str, reason: str | None = None) -> None:
        message = f"Reference artwork unavailable: {identifier}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.identifier = identifier
        self.reason = reason
