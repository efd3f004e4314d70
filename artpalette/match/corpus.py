"""Concurrent construction of the reference palette corpus."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Sequence

from tqdm import tqdm

from ..errors import CorpusEntryUnavailable, DecodeError, EmptyPaletteError
from ..extract.decode import load_image_pixels
from ..features.palette import DEFAULT_MAX_COLORS, extract_palette
from ..io.models import Palette, ReferenceArtwork, ReferenceCorpusEntry

logger = logging.getLogger(__name__)

CORPUS_PALETTE_SIZE = 4
DEFAULT_WORKERS = 8

PixelLoader = Callable[[str], Any]


def build_entry(
    artwork: ReferenceArtwork,
    load_pixels: PixelLoader = load_image_pixels,
    max_colors: int = CORPUS_PALETTE_SIZE,
) -> ReferenceCorpusEntry:
    """Extract the palette for one artwork.

    Raises :class:`CorpusEntryUnavailable` when the image cannot be loaded or
    yields no usable pixels.
    """
    try:
        pixels = load_pixels(artwork.image_ref)
        palette = extract_palette(pixels, max_colors)
    except (DecodeError, EmptyPaletteError, OSError) as exc:
        raise CorpusEntryUnavailable(artwork.identifier, str(exc)) from exc
    return ReferenceCorpusEntry.from_artwork(artwork, palette)


def build_corpus(
    artworks: Sequence[ReferenceArtwork],
    load_pixels: PixelLoader = load_image_pixels,
    *,
    max_colors: int = CORPUS_PALETTE_SIZE,
    workers: int = DEFAULT_WORKERS,
    progress: bool = True,
) -> list[ReferenceCorpusEntry]:
    """Build palettes for *artworks* in parallel and return the finished corpus.

    Every artwork is extracted independently on a thread pool. Entries that
    fail are logged and left out; the rest are returned in input order once
    all jobs have completed.
    """
    if not artworks:
        return []

    results: Dict[int, ReferenceCorpusEntry] = {}
    skipped = 0
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(artworks)))) as pool:
        future_map = {
            pool.submit(build_entry, artwork, load_pixels, max_colors): index
            for index, artwork in enumerate(artworks)
        }
        for future in tqdm(
            as_completed(future_map),
            total=len(future_map),
            desc="Building corpus",
            unit="artwork",
            leave=False,
            disable=not progress,
        ):
            index = future_map[future]
            try:
                results[index] = future.result()
            except CorpusEntryUnavailable as exc:
                skipped += 1
                logger.warning("Skipping %s", exc)
            except Exception:  # noqa: BLE001 - one artwork must not abort the batch
                skipped += 1
                logger.warning(
                    "Skipping %s after unexpected error",
                    artworks[index].identifier,
                    exc_info=True,
                )

    if skipped:
        logger.info("Corpus built with %d entries, %d skipped", len(results), skipped)
    return [results[index] for index in sorted(results)]


async def build_corpus_async(
    artworks: Sequence[ReferenceArtwork],
    load_pixels: PixelLoader = load_image_pixels,
    **kwargs: Any,
) -> list[ReferenceCorpusEntry]:
    """Awaitable variant of :func:`build_corpus` for asyncio callers."""
    return await asyncio.to_thread(build_corpus, artworks, load_pixels, **kwargs)


def extract_palettes(
    buffers: Sequence[Any],
    max_colors: int = DEFAULT_MAX_COLORS,
    *,
    workers: int = DEFAULT_WORKERS,
) -> List[Palette]:
    """Extract palettes for independent pixel buffers concurrently.

    Results follow the order of *buffers*; the first extraction error is
    raised after all jobs have finished.
    """
    if not buffers:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(buffers)))) as pool:
        futures = [pool.submit(extract_palette, buffer, max_colors) for buffer in buffers]
        return [future.result() for future in futures]
