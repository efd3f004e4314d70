"""Color space conversions between RGB, hex and HSL."""

from __future__ import annotations

import math

RGB = tuple[int, int, int]
HSL = tuple[float, float, float]


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Return the lowercase ``#rrggbb`` string for an RGB triple."""
    return "#{:02x}{:02x}{:02x}".format(_channel(r), _channel(g), _channel(b))


def hex_to_rgb(value: str) -> RGB:
    """Parse ``#rrggbb`` (or ``rrggbb``) into an integer RGB triple."""
    if not isinstance(value, str):
        raise TypeError("Hex colors must be provided as strings")
    stripped = value.strip().lower()
    if stripped.startswith("#"):
        stripped = stripped[1:]
    if len(stripped) != 6:
        raise ValueError(f"Invalid hex color: {value!r}")
    try:
        return (
            int(stripped[0:2], 16),
            int(stripped[2:4], 16),
            int(stripped[4:6], 16),
        )
    except ValueError as exc:
        raise ValueError(f"Invalid hex color: {value!r}") from exc


def rgb_to_hsl(r: float, g: float, b: float) -> HSL:
    """Return ``(h, s, l)`` with h in [0, 360) and s, l in [0, 100]."""
    rn = _channel(r) / 255.0
    gn = _channel(g) / 255.0
    bn = _channel(b) / 255.0

    high = max(rn, gn, bn)
    low = min(rn, gn, bn)
    lightness = (high + low) / 2.0

    if high == low:
        return (0.0, 0.0, lightness * 100.0)

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2.0 - high - low)
    else:
        saturation = delta / (high + low)

    if high == rn:
        hue = (gn - bn) / delta + (6.0 if gn < bn else 0.0)
    elif high == gn:
        hue = (bn - rn) / delta + 2.0
    else:
        hue = (rn - gn) / delta + 4.0
    hue = (hue / 6.0) * 360.0
    if hue >= 360.0:
        hue -= 360.0

    return (hue, saturation * 100.0, lightness * 100.0)


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """Inverse of :func:`rgb_to_hsl` using the chroma formulation."""
    hue = normalize_hue(h)
    sat = clamp(s, 0.0, 100.0) / 100.0
    light = clamp(l, 0.0, 100.0) / 100.0

    chroma = (1.0 - abs(2.0 * light - 1.0)) * sat
    second = chroma * (1.0 - abs((hue / 60.0) % 2.0 - 1.0))
    match = light - chroma / 2.0

    if hue < 60.0:
        rp, gp, bp = chroma, second, 0.0
    elif hue < 120.0:
        rp, gp, bp = second, chroma, 0.0
    elif hue < 180.0:
        rp, gp, bp = 0.0, chroma, second
    elif hue < 240.0:
        rp, gp, bp = 0.0, second, chroma
    elif hue < 300.0:
        rp, gp, bp = second, 0.0, chroma
    else:
        rp, gp, bp = chroma, 0.0, second

    return (
        _channel((rp + match) * 255.0),
        _channel((gp + match) * 255.0),
        _channel((bp + match) * 255.0),
    )


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Return the hex string for an HSL triple."""
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def normalize_hue(h: float) -> float:
    """Wrap *h* into [0, 360)."""
    if not math.isfinite(h):
        return 0.0
    wrapped = float(h) % 360.0
    # float modulo can land exactly on 360.0 for tiny negative inputs
    return 0.0 if wrapped >= 360.0 else wrapped


def clamp(value: float, low: float, high: float) -> float:
    return float(max(low, min(high, value)))


def _channel(value: float) -> int:
    # round half up, clamp to a byte
    if not math.isfinite(value):
        return 0
    return int(max(0, min(255, math.floor(float(value) + 0.5))))
