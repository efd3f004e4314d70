"""Data models shared across the palette engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..features.convert import hex_to_rgb, rgb_to_hex, rgb_to_hsl


@dataclass(frozen=True, slots=True)
class ColorRecord:
    """A single color expressed as hex, RGB and HSL."""

    hex: str
    rgb: Tuple[int, int, int]
    hsl: Tuple[float, float, float]

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "ColorRecord":
        hex_value = rgb_to_hex(r, g, b)
        rgb = hex_to_rgb(hex_value)
        return cls(hex=hex_value, rgb=rgb, hsl=rgb_to_hsl(*rgb))

    @classmethod
    def from_hex(cls, value: str) -> "ColorRecord":
        return cls.from_rgb(*hex_to_rgb(value))

    def to_dict(self) -> Dict[str, Any]:
        return {"hex": self.hex, "rgb": list(self.rgb), "hsl": list(self.hsl)}


Palette = List[ColorRecord]


@dataclass(frozen=True, slots=True)
class HarmonyVariant:
    """A harmony color derived from a source palette color."""

    hex: str
    name: str
    original_color: str

    def to_dict(self) -> Dict[str, str]:
        return {"hex": self.hex, "name": self.name, "originalColor": self.original_color}


@dataclass(frozen=True, slots=True)
class HarmonySuggestion:
    """A titled set of swatches built around the primary palette color."""

    key: str
    title: str
    description: str
    colors: List[HarmonyVariant] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ReferenceArtwork:
    """A reference artwork whose palette has not been extracted yet."""

    artist: str
    artwork: str
    image_ref: str
    year: str | None = None
    genre: str | None = None
    nationality: str | None = None

    @property
    def identifier(self) -> str:
        return f"{self.artist} - {self.artwork}"


@dataclass(slots=True)
class ReferenceCorpusEntry:
    """Color signature and metadata for one reference artwork."""

    artist: str
    artwork: str
    palette: Palette
    image_ref: str
    year: str | None = None
    genre: str | None = None
    nationality: str | None = None

    @property
    def identifier(self) -> str:
        return f"{self.artist} - {self.artwork}"

    @classmethod
    def from_artwork(cls, artwork: ReferenceArtwork, palette: Palette) -> "ReferenceCorpusEntry":
        return cls(
            artist=artwork.artist,
            artwork=artwork.artwork,
            palette=list(palette),
            image_ref=artwork.image_ref,
            year=artwork.year,
            genre=artwork.genre,
            nationality=artwork.nationality,
        )


@dataclass(frozen=True, slots=True)
class MatchResult:
    """A corpus entry paired with its similarity to the uploaded palette."""

    entry: ReferenceCorpusEntry
    similarity: float
    padded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        entry = self.entry
        return {
            "artist": entry.artist,
            "artwork": entry.artwork,
            "year": entry.year,
            "genre": entry.genre,
            "nationality": entry.nationality,
            "image": entry.image_ref,
            "colors": [color.to_dict() for color in entry.palette],
            "similarity": float(self.similarity),
            "padded": self.padded,
        }
