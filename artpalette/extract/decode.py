"""Decode image payloads into RGBA pixel buffers."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from ..crawl.fetch import fetch_image_bytes, is_remote
from ..errors import DecodeError

logger = logging.getLogger(__name__)


def decode_image_bytes(image_bytes: bytes) -> np.ndarray:
    """Return an ``(height, width, 4)`` uint8 RGBA array for *image_bytes*."""
    if not image_bytes:
        raise DecodeError("Empty image payload cannot be decoded")
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Image failed to decode: {exc}") from exc
    try:
        return np.asarray(rgba).copy()
    finally:
        rgba.close()


def load_image_pixels(source: str | Path) -> np.ndarray:
    """Load *source* (a local path or an http(s) URL) as an RGBA buffer."""
    if isinstance(source, str) and is_remote(source):
        return decode_image_bytes(fetch_image_bytes(source))

    path = Path(source)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Could not read image {path}: {exc}") from exc
    logger.debug("Read %d bytes from %s", len(data), path)
    return decode_image_bytes(data)
