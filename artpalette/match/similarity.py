"""Similarity scoring between color palettes."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..io.models import ColorRecord

DEFAULT_BOOST: float = 1.5
MAX_DISTANCE: float = math.sqrt(3 * 255.0**2)


def color_distance(a: ColorRecord, b: ColorRecord) -> float:
    """Return the Euclidean distance between two colors in RGB space."""
    return math.sqrt(sum((float(x) - float(y)) ** 2 for x, y in zip(a.rgb, b.rgb)))


def palette_similarity(
    a: Sequence[ColorRecord],
    b: Sequence[ColorRecord],
    *,
    boost: float = DEFAULT_BOOST,
) -> float:
    """Return the boosted mean pairwise similarity of *a* and *b* in [0, 1].

    Every color of *a* is compared with every color of *b*; each pair scores
    ``1 - distance / MAX_DISTANCE`` and the mean is multiplied by *boost*
    before clamping.
    """
    if not a or not b:
        return 0.0

    rgb_a = np.array([color.rgb for color in a], dtype=float)
    rgb_b = np.array([color.rgb for color in b], dtype=float)
    deltas = rgb_a[:, None, :] - rgb_b[None, :, :]
    distances = np.sqrt(np.sum(deltas * deltas, axis=2))
    average = float(np.mean(1.0 - distances / MAX_DISTANCE))

    score = average * float(boost)
    return float(max(0.0, min(1.0, score)))
