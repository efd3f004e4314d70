"""Dominant color palette extraction from decoded pixel buffers."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from PIL import Image

from ..errors import DecodeError, EmptyPaletteError
from ..io.models import ColorRecord, Palette

logger = logging.getLogger(__name__)

DEFAULT_MAX_COLORS = 8
MAX_DIMENSION = 200
ALPHA_THRESHOLD = 128
BUCKET_SIZE = 32
SAMPLE_TARGET = 1000


def extract_palette(
    pixels: Any,
    max_colors: int = DEFAULT_MAX_COLORS,
    *,
    max_dimension: int = MAX_DIMENSION,
    alpha_threshold: int = ALPHA_THRESHOLD,
    bucket_size: int = BUCKET_SIZE,
    sample_target: int = SAMPLE_TARGET,
) -> Palette:
    """Return the most frequent quantized colors of an RGBA pixel buffer.

    *pixels* is a ``(height, width, 4)`` array of 8-bit RGBA values; a
    three-channel buffer is treated as fully opaque. The buffer is shrunk so
    its longer side is at most *max_dimension*, sampled with a fixed stride
    of roughly *sample_target* pixels, and every opaque sample is floored to
    a *bucket_size* grid before counting. Colors are returned most frequent
    first, ties keeping the order in which they were first sampled.

    Raises :class:`DecodeError` for a missing or malformed buffer and
    :class:`EmptyPaletteError` when no sampled pixel passes the alpha test.
    """
    if bucket_size <= 0:
        raise ValueError("bucket_size must be a positive integer")

    rgba = as_rgba_buffer(pixels)
    rgba = downscale(rgba, max_dimension)

    flat = rgba.reshape(-1, 4)
    step = max(1, flat.shape[0] // max(1, sample_target))
    samples = flat[::step]
    opaque = samples[samples[:, 3] >= alpha_threshold]
    if opaque.shape[0] == 0:
        raise EmptyPaletteError(
            f"No pixels with alpha >= {alpha_threshold} among {samples.shape[0]} samples"
        )
    if max_colors <= 0:
        return []

    quantized = (opaque[:, :3].astype(np.int32) // bucket_size) * bucket_size
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]
    unique_keys, first_seen, counts = np.unique(
        keys, return_index=True, return_counts=True
    )
    order = np.lexsort((first_seen, -counts))[:max_colors]

    palette: Palette = []
    for idx in order:
        key = int(unique_keys[idx])
        palette.append(ColorRecord.from_rgb((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF))

    logger.debug(
        "Extracted %d colors from %d samples (%d buckets)",
        len(palette),
        opaque.shape[0],
        unique_keys.shape[0],
    )
    return palette


def extract_palette_from_image(
    img: Image.Image, max_colors: int = DEFAULT_MAX_COLORS, **kwargs: Any
) -> Palette:
    """Convenience wrapper accepting a Pillow image."""
    if not isinstance(img, Image.Image):
        raise DecodeError("extract_palette_from_image expects a PIL.Image.Image instance")
    rgba_image = img.convert("RGBA") if img.mode != "RGBA" else img
    return extract_palette(np.asarray(rgba_image), max_colors, **kwargs)


def as_rgba_buffer(pixels: Any) -> np.ndarray:
    """Validate *pixels* and return a contiguous ``uint8`` RGBA array."""
    if pixels is None:
        raise DecodeError("No pixel buffer supplied")
    try:
        array = np.asarray(pixels)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Pixel buffer is not array-like: {exc}") from exc

    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise DecodeError(f"Expected an HxWx4 RGBA buffer, got shape {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise DecodeError("Pixel buffer has no pixels")
    if not np.issubdtype(array.dtype, np.number):
        raise DecodeError(f"Unsupported pixel dtype {array.dtype}")

    if array.dtype != np.uint8:
        array = np.clip(np.nan_to_num(array), 0, 255).astype(np.uint8)
    if array.shape[2] == 3:
        alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
        array = np.concatenate([array, alpha], axis=2)
    return np.ascontiguousarray(array)


def downscale(rgba: np.ndarray, max_dimension: int = MAX_DIMENSION) -> np.ndarray:
    """Shrink *rgba* so its longer side is at most *max_dimension*."""
    height, width = rgba.shape[:2]
    if max_dimension <= 0 or max(height, width) <= max_dimension:
        return rgba

    scale = min(max_dimension / width, max_dimension / height)
    size = (max(1, int(width * scale)), max(1, int(height * scale)))
    with Image.fromarray(rgba) as img:
        resized = img.resize(size, Image.Resampling.LANCZOS)
        return np.asarray(resized)
