"""Output helpers for persisting palettes, harmonies and matches."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import pandas as pd

from .models import ColorRecord, HarmonySuggestion, HarmonyVariant, MatchResult, ReferenceCorpusEntry


def write_palette(path: Path, palette: Sequence[ColorRecord]) -> Path:
    """Write *palette* to *path* as JSON and return the path."""
    serialised = [color.to_dict() for color in palette]
    path.write_text(json.dumps(serialised, indent=2), encoding="utf-8")
    return path


def write_harmonies(
    path: Path,
    variants: Mapping[str, Sequence[HarmonyVariant]],
    suggestions: Mapping[str, HarmonySuggestion] | None = None,
) -> Path:
    """Write harmony variants keyed by type, plus optional suggestion sets."""
    payload: Dict[str, Any] = {
        "variants": {
            name: [variant.to_dict() for variant in items] for name, items in variants.items()
        }
    }
    if suggestions:
        payload["suggestions"] = {
            name: {
                "title": suggestion.title,
                "description": suggestion.description,
                "colors": [variant.to_dict() for variant in suggestion.colors],
            }
            for name, suggestion in suggestions.items()
        }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def write_matches(path: Path, matches: Sequence[MatchResult]) -> Path:
    """Write ranked matches to *path* as JSON and return the path."""
    serialised = [match.to_dict() for match in matches]
    path.write_text(json.dumps(serialised, indent=2), encoding="utf-8")
    return path


def corpus_frame(corpus: Sequence[ReferenceCorpusEntry]) -> pd.DataFrame:
    """Return one row per corpus entry with its palette as hex strings."""
    rows = []
    for entry in corpus:
        row = asdict(entry)
        row["palette"] = [color.hex for color in entry.palette]
        row["identifier"] = entry.identifier
        rows.append(row)
    columns = ["identifier", "artist", "artwork", "year", "genre", "nationality", "image_ref", "palette"]
    return pd.DataFrame(rows, columns=columns)


def write_corpus_table(path: Path, corpus: Sequence[ReferenceCorpusEntry]) -> Path:
    """Persist the corpus as a parquet table and return the path."""
    df = corpus_frame(corpus)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False, engine="pyarrow")
    return path
