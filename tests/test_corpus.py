from __future__ import annotations

import asyncio
import random
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from artpalette.errors import CorpusEntryUnavailable, DecodeError
from artpalette.io.models import ReferenceArtwork
from artpalette.match.catalog import (
    ARTISTS,
    ARTISTS_BY_NAME,
    discover_reference_corpus,
    plan_reference_corpus,
)
from artpalette.match.corpus import build_corpus, build_corpus_async, build_entry, extract_palettes


def _solid(rgb: tuple[int, int, int], alpha: int = 255) -> np.ndarray:
    return np.full((6, 6, 4), (*rgb, alpha), dtype=np.uint8)


def _artwork(name: str) -> ReferenceArtwork:
    return ReferenceArtwork(artist="Tester", artwork=name, image_ref=name, genre="Cubism")


class FakeLoader:
    def __init__(self, buffers: dict[str, np.ndarray]) -> None:
        self.buffers = buffers

    def __call__(self, ref: str) -> np.ndarray:
        if ref == "broken-disk":
            raise OSError("disk error")
        if ref not in self.buffers:
            raise DecodeError(f"missing {ref}")
        return self.buffers[ref]


def _truncated_idat_png(size: int = 64) -> bytes:
    noise = np.random.default_rng(0).integers(0, 256, (size, size, 3), dtype=np.uint8)
    buffer = BytesIO()
    Image.fromarray(noise).save(buffer, format="PNG")
    data = bytearray(buffer.getvalue())
    start = data.index(b"IDAT") - 4
    length = int.from_bytes(data[start : start + 4], "big")
    data[start : start + 4] = (length // 2).to_bytes(4, "big")
    return bytes(data)


def test_build_corpus_skips_failures_and_keeps_order() -> None:
    loader = FakeLoader(
        {
            "red": _solid((255, 0, 0)),
            "clear": _solid((0, 0, 0), alpha=0),
            "blue": _solid((0, 0, 255)),
        }
    )
    artworks = [_artwork(name) for name in ("red", "missing", "clear", "broken-disk", "blue")]

    corpus = build_corpus(artworks, loader, workers=3, progress=False)

    assert [entry.artwork for entry in corpus] == ["red", "blue"]
    assert [c.hex for c in corpus[0].palette] == ["#e00000"]
    assert corpus[1].genre == "Cubism"


def test_build_corpus_limits_palette_size() -> None:
    pixels = np.concatenate(
        [np.full((2, 6, 4), (i * 40, 0, 0, 255), dtype=np.uint8) for i in range(6)]
    )
    corpus = build_corpus([_artwork("stripes")], FakeLoader({"stripes": pixels}), progress=False)
    assert len(corpus[0].palette) == 4


def test_build_corpus_survives_unexpected_loader_errors() -> None:
    def loader(ref: str) -> np.ndarray:
        if ref == "nul":
            raise ValueError("embedded null byte")
        return _solid((0, 0, 255))

    corpus = build_corpus([_artwork("nul"), _artwork("ok")], loader, workers=2, progress=False)

    assert [entry.artwork for entry in corpus] == ["ok"]


def test_build_corpus_empty_input() -> None:
    assert build_corpus([], FakeLoader({}), progress=False) == []


def test_build_entry_wraps_failures() -> None:
    with pytest.raises(CorpusEntryUnavailable) as excinfo:
        build_entry(_artwork("missing"), FakeLoader({}))
    assert excinfo.value.identifier == "Tester - missing"


def test_build_corpus_async() -> None:
    loader = FakeLoader({"green": _solid((0, 255, 0))})
    corpus = asyncio.run(
        build_corpus_async([_artwork("green"), _artwork("gone")], loader, progress=False)
    )
    assert [entry.artwork for entry in corpus] == ["green"]


def test_extract_palettes_preserves_order() -> None:
    buffers = [_solid((255, 0, 0)), _solid((0, 255, 0)), _solid((0, 0, 255))]
    palettes = extract_palettes(buffers, workers=2)
    assert [p[0].hex for p in palettes] == ["#e00000", "#00e000", "#0000e0"]


def test_extract_palettes_propagates_errors() -> None:
    with pytest.raises(DecodeError):
        extract_palettes([_solid((1, 2, 3)), None])


def test_plan_reference_corpus(tmp_path: Path) -> None:
    artists = ARTISTS[:3]
    plan = plan_reference_corpus(tmp_path, random.Random(5), artists=artists)

    for artist in artists:
        works = [item for item in plan if item.artist == artist.display_name]
        assert 5 <= len(works) <= 15
        assert works[0].image_ref == str(tmp_path / artist.name / f"{artist.name}_1.jpg")
        assert all(artist.born <= int(item.year) <= artist.died for item in works)
        assert all(item.genre == artist.genre for item in works)

    again = plan_reference_corpus(tmp_path, random.Random(5), artists=artists)
    assert again == plan


def test_plan_reference_corpus_validates_bounds(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        plan_reference_corpus(tmp_path, min_works=4, max_works=2)


def test_catalog_lookup() -> None:
    monet = ARTISTS_BY_NAME["Claude_Monet"]
    assert monet.display_name == "Claude Monet"
    assert monet.genre == "Impressionism"


def test_discover_and_build_from_disk(tmp_path: Path) -> None:
    monet = tmp_path / "Claude_Monet"
    monet.mkdir()
    Image.new("RGB", (12, 12), (40, 90, 200)).save(monet / "Claude_Monet_1.png")
    (monet / "Claude_Monet_2.jpg").write_bytes(b"not an image")
    (monet / "notes.txt").write_text("ignored", encoding="utf-8")
    unknown = tmp_path / "Someone_Else"
    unknown.mkdir()
    Image.new("RGBA", (8, 8), (250, 250, 250, 255)).save(unknown / "sketch.png")

    artworks = discover_reference_corpus(tmp_path, random.Random(1))

    assert [(a.artist, a.artwork) for a in artworks] == [
        ("Claude Monet", "Artwork 1"),
        ("Claude Monet", "Artwork 2"),
        ("Someone Else", "sketch"),
    ]
    assert artworks[0].nationality == "French"
    assert artworks[2].genre is None

    corpus = build_corpus(artworks, progress=False)
    assert [entry.identifier for entry in corpus] == [
        "Claude Monet - Artwork 1",
        "Someone Else - sketch",
    ]
    assert [c.hex for c in corpus[0].palette] == ["#2040c0"]


def test_build_from_disk_skips_png_with_broken_chunks(tmp_path: Path) -> None:
    monet = tmp_path / "Claude_Monet"
    monet.mkdir()
    Image.new("RGB", (12, 12), (40, 90, 200)).save(monet / "Claude_Monet_1.png")
    (monet / "Claude_Monet_2.png").write_bytes(_truncated_idat_png())

    corpus = build_corpus(discover_reference_corpus(tmp_path, random.Random(1)), progress=False)

    assert [entry.artwork for entry in corpus] == ["Artwork 1"]


def test_discover_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_reference_corpus(tmp_path / "nope")
