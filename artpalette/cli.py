"""Command-line interface for the artpalette project."""

from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Iterable

from .errors import DecodeError, EmptyPaletteError
from .extract.decode import load_image_pixels
from .features.harmony import HARMONY_TYPES, HarmonySession, harmony_suggestions
from .features.palette import DEFAULT_MAX_COLORS, extract_palette
from .io.fallbacks import GENRE_PALETTES, default_fallback_palette, genre_fallback_palette
from .io.models import Palette
from .io.outputs import write_corpus_table, write_harmonies, write_matches, write_palette
from .match.catalog import discover_reference_corpus
from .match.corpus import DEFAULT_WORKERS, build_corpus
from .match.ranking import DEFAULT_THRESHOLD, rank_matches, score_corpus
from .match.similarity import DEFAULT_BOOST


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the palette pipeline."""
    parser = argparse.ArgumentParser(
        description="Extract a color palette from an image, suggest harmonies and find similar artworks."
    )
    parser.add_argument(
        "--image",
        required=True,
        help="Path or http(s) URL of the image to analyse.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Directory path where JSON outputs will be written.",
    )
    parser.add_argument(
        "--corpus",
        required=False,
        default=None,
        help="Directory of reference artworks, one sub-directory per artist.",
    )
    parser.add_argument(
        "--harmony",
        choices=HARMONY_TYPES,
        default=None,
        help="Only print the given harmony type (all types are always written).",
    )
    parser.add_argument(
        "--extra",
        type=int,
        default=0,
        metavar="N",
        help="Append N generated variants to every harmony type.",
    )
    parser.add_argument("--max-colors", type=int, default=DEFAULT_MAX_COLORS)
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD)
    parser.add_argument("--boost", type=float, default=DEFAULT_BOOST)
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS)
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the randomized match selection.",
    )
    parser.add_argument(
        "--debug-scores",
        nargs="?",
        const=20,
        type=int,
        metavar="N",
        default=0,
        help="Show the top N raw similarity scores (default 20).",
    )
    parser.add_argument(
        "--fallback-genre",
        choices=sorted(GENRE_PALETTES),
        default=None,
        help="Genre whose signature palette replaces an unreadable image.",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(list(argv) if argv is not None else None)


def _load_palette(source: str, max_colors: int, fallback_genre: str | None = None) -> Palette:
    """Extract the uploaded palette, falling back to stock swatches."""
    try:
        pixels = load_image_pixels(source)
        return extract_palette(pixels, max_colors)
    except (DecodeError, EmptyPaletteError) as exc:
        print(f"[warn] {source}: extraction failed ({exc}); using fallback palette")
        if fallback_genre:
            return genre_fallback_palette(fallback_genre)[:max_colors]
        return default_fallback_palette()[:max_colors]


def _print_palette(palette: Palette) -> None:
    print(f"[palette] {len(palette)} colors")
    for index, color in enumerate(palette, start=1):
        h, s, l = color.hsl
        print(f"  {index}. {color.hex} rgb={color.rgb} hsl=({h:.0f}, {s:.0f}, {l:.0f})")


def _run_harmonies(palette: Palette, out_dir: Path, extra: int, only: str | None) -> None:
    session = HarmonySession(palette)
    for harmony_type in HARMONY_TYPES:
        for _ in range(max(0, extra)):
            session.add_variant(harmony_type)

    variants = {name: session.variants(name) for name in HARMONY_TYPES}
    path = write_harmonies(out_dir / "harmonies.json", variants, harmony_suggestions(palette))

    for name in (only,) if only else HARMONY_TYPES:
        swatches = ", ".join(f"{v.name}={v.hex}" for v in variants[name])
        print(f"[harmony] {name}: {swatches}")
    print(f"[harmony] wrote {path}")


def _run_matches(palette: Palette, args: argparse.Namespace, out_dir: Path) -> None:
    artworks = discover_reference_corpus(args.corpus, rng=random.Random(args.seed))
    print(f"[corpus] {len(artworks)} reference images found")
    corpus = build_corpus(artworks, workers=args.workers)
    print(f"[corpus] {len(corpus)} palettes extracted")
    if corpus:
        table = write_corpus_table(out_dir / "corpus.parquet", corpus)
        print(f"[corpus] wrote {len(corpus)} rows to {table}")

    matches = rank_matches(
        palette,
        corpus,
        args.threshold,
        rng=random.Random(args.seed),
        boost=args.boost,
    )
    path = write_matches(out_dir / "matches.json", matches)
    print(f"[matches] {len(matches)} selected (threshold {args.threshold:.2f})")
    for index, match in enumerate(matches, start=1):
        marker = " (random)" if match.padded else ""
        print(f"  {index}. {match.entry.identifier} {match.similarity * 100:.1f}%{marker}")
    print(f"[matches] wrote {path}")

    if args.debug_scores:
        scored = score_corpus(palette, corpus, boost=args.boost)
        print(f"[scores] showing top {min(args.debug_scores, len(scored))} of {len(scored)}")
        for index, item in enumerate(scored[: args.debug_scores], start=1):
            print(f"  {index}. {item.entry.identifier} score={item.similarity:.3f}")


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    palette = _load_palette(args.image, args.max_colors, args.fallback_genre)
    _print_palette(palette)
    palette_path = write_palette(out_dir / "palette.json", palette)
    print(f"[palette] wrote {palette_path}")

    _run_harmonies(palette, out_dir, args.extra, args.harmony)

    if args.corpus:
        _run_matches(palette, args, out_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
