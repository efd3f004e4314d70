"""Fallback palettes for callers whose image yields no colors."""

from __future__ import annotations

from typing import Dict, Sequence

from .models import ColorRecord, Palette


def _palette(hex_values: Sequence[str]) -> tuple[ColorRecord, ...]:
    return tuple(ColorRecord.from_hex(value) for value in hex_values)


DEFAULT_FALLBACK_PALETTE: tuple[ColorRecord, ...] = _palette(
    (
        "#ff6b6b",
        "#4ecdc4",
        "#45b7d1",
        "#96ceb4",
        "#ffeaa7",
        "#dda0dd",
        "#98d8c8",
        "#f7dc6f",
    )
)

GENRE_PALETTES: Dict[str, tuple[ColorRecord, ...]] = {
    "Impressionism": _palette(("#87ceeb", "#98fb98", "#f0e68c", "#dda0dd")),
    "Post-Impressionism": _palette(("#ffd700", "#ff6b35", "#228b22", "#4a90e2")),
    "Cubism": _palette(("#696969", "#8b0000", "#ff4500", "#4a90e2")),
    "Surrealism": _palette(("#ff69b4", "#4a90e2", "#ffd700", "#8b4513")),
    "Baroque": _palette(("#8b4513", "#696969", "#ffd700", "#8b0000")),
    "High Renaissance": _palette(("#8b4513", "#696969", "#ffd700", "#4a90e2")),
    "Pop Art": _palette(("#ff69b4", "#ff4500", "#4a90e2", "#ffd700")),
    "Abstract Expressionism": _palette(("#ff4500", "#4a90e2", "#ffd700", "#228b22")),
}


def default_fallback_palette() -> Palette:
    return list(DEFAULT_FALLBACK_PALETTE)


def genre_fallback_palette(genre: str | None) -> Palette:
    """Return the signature palette for *genre*, defaulting to Impressionism."""
    palette = GENRE_PALETTES.get(genre or "", GENRE_PALETTES["Impressionism"])
    return list(palette)
