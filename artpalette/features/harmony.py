"""Color harmony generation by hue rotation and lightness shifts."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..errors import EmptyPaletteError
from ..io.models import ColorRecord, HarmonySuggestion, HarmonyVariant
from .convert import clamp, hsl_to_hex, normalize_hue

HARMONY_TYPES: tuple[str, ...] = ("complementary", "analogous", "triadic", "monochromatic")

VARIANTS_PER_COLOR: Dict[str, int] = {
    "complementary": 1,
    "analogous": 2,
    "triadic": 2,
    "monochromatic": 2,
}

COMPLEMENTARY_STEPS: tuple[int, ...] = tuple(range(30, 360, 30))
ANALOGOUS_STEPS: tuple[int, ...] = tuple(range(45, 181, 15))
TRIADIC_STEPS: tuple[int, ...] = (60, 120, 180, 240, 300)
MONOCHROMATIC_CYCLE = 9
MONOCHROMATIC_STEP = 10.0
LIGHTNESS_SHIFT = 20.0

_ROTATION_STEPS: Dict[str, tuple[tuple[int, ...], str]] = {
    "complementary": (COMPLEMENTARY_STEPS, "Complement"),
    "analogous": (ANALOGOUS_STEPS, "Analogous"),
    "triadic": (TRIADIC_STEPS, "Triadic"),
}


def generate_harmony(palette: Sequence[ColorRecord], harmony_type: str) -> List[HarmonyVariant]:
    """Return the base harmony variants for every color of *palette*."""
    _check_type(harmony_type)
    variants: List[HarmonyVariant] = []
    for index, color in enumerate(palette, start=1):
        h, s, l = color.hsl
        if harmony_type == "complementary":
            variants.append(_variant(color, f"Complement {index}", h + 180, s, l))
        elif harmony_type == "analogous":
            variants.append(_variant(color, f"Analogous {index}-1", h + 30, s, l))
            variants.append(_variant(color, f"Analogous {index}-2", h - 30, s, l))
        elif harmony_type == "triadic":
            variants.append(_variant(color, f"Triadic {index}-1", h + 120, s, l))
            variants.append(_variant(color, f"Triadic {index}-2", h + 240, s, l))
        else:
            variants.append(_variant(color, f"Darker {index}", h, s, l - LIGHTNESS_SHIFT))
            variants.append(_variant(color, f"Lighter {index}", h, s, l + LIGHTNESS_SHIFT))
    return variants


def base_size(palette: Sequence[ColorRecord], harmony_type: str) -> int:
    """Return how many base variants :func:`generate_harmony` yields."""
    _check_type(harmony_type)
    return len(palette) * VARIANTS_PER_COLOR[harmony_type]


def next_harmony_variant(
    palette: Sequence[ColorRecord], harmony_type: str, current_count: int
) -> HarmonyVariant:
    """Return the extra variant shown after *current_count* existing ones.

    The step is taken from a fixed cycle for the harmony type and always
    applied to the first palette color, so the same count yields the same
    variant.
    """
    _check_type(harmony_type)
    if not palette:
        raise EmptyPaletteError("Cannot derive a harmony variant from an empty palette")
    if current_count < 0:
        raise ValueError("current_count must be non-negative")

    primary = palette[0]
    h, s, l = primary.hsl
    label = current_count + 1

    if harmony_type == "monochromatic":
        offset = (current_count % MONOCHROMATIC_CYCLE - 4) * MONOCHROMATIC_STEP
        return _variant(
            primary,
            f"Mono {label}",
            h,
            clamp(s + offset, 0.0, 100.0),
            clamp(l + offset, 0.0, 100.0),
        )

    steps, prefix = _ROTATION_STEPS[harmony_type]
    angle = steps[current_count % len(steps)]
    return _variant(primary, f"{prefix} {label}", h + angle, s, l)


def harmony_suggestions(palette: Sequence[ColorRecord]) -> Dict[str, HarmonySuggestion]:
    """Return the four titled swatch sets built around the primary color."""
    if not palette:
        return {}
    primary = palette[0]
    h, s, l = primary.hsl
    original = HarmonyVariant(hex=primary.hex, name="Original", original_color=primary.hex)

    def swatch(name: str, hue: float, sat: float = s, light: float = l) -> HarmonyVariant:
        return _variant(primary, name, hue, sat, light)

    def anchor(name: str) -> HarmonyVariant:
        return HarmonyVariant(hex=primary.hex, name=name, original_color=primary.hex)

    return {
        "complementary": HarmonySuggestion(
            key="complementary",
            title="Complementary",
            description="Colors opposite on the color wheel for high contrast",
            colors=[
                original,
                swatch("Complement", h + 180),
                swatch("Split 1", h + 150),
                swatch("Split 2", h + 210),
            ],
        ),
        "analogous": HarmonySuggestion(
            key="analogous",
            title="Analogous",
            description="Colors next to each other on the color wheel for harmony",
            colors=[
                anchor("Base"),
                swatch("Analogous 1", h + 30),
                swatch("Analogous 2", h - 30),
                swatch("Extended", h + 60),
            ],
        ),
        "triadic": HarmonySuggestion(
            key="triadic",
            title="Triadic",
            description="Three colors equally spaced on the color wheel",
            colors=[
                anchor("Primary"),
                swatch("Triadic 1", h + 120),
                swatch("Triadic 2", h + 240),
                swatch("Accent", h + 60),
            ],
        ),
        "monochromatic": HarmonySuggestion(
            key="monochromatic",
            title="Monochromatic",
            description="Different shades and tints of the same color",
            colors=[
                anchor("Base"),
                swatch("Darker", h, light=clamp(l - LIGHTNESS_SHIFT, 0.0, 100.0)),
                swatch("Lighter", h, light=clamp(l + LIGHTNESS_SHIFT, 0.0, 100.0)),
                swatch("Muted", h, sat=clamp(s - LIGHTNESS_SHIFT, 0.0, 100.0)),
            ],
        ),
    }


class HarmonySession:
    """Caller-owned harmony state: the source palette plus added variants.

    Base variants are recomputed from the palette on demand and never
    change; variants added through :meth:`add_variant` are kept per harmony
    type and are the only ones that can be removed.
    """

    def __init__(self, palette: Sequence[ColorRecord]) -> None:
        self._palette: List[ColorRecord] = list(palette)
        self._added: Dict[str, List[HarmonyVariant]] = {name: [] for name in HARMONY_TYPES}

    @property
    def palette(self) -> List[ColorRecord]:
        return list(self._palette)

    def base(self, harmony_type: str) -> List[HarmonyVariant]:
        return generate_harmony(self._palette, harmony_type)

    def added(self, harmony_type: str) -> List[HarmonyVariant]:
        _check_type(harmony_type)
        return list(self._added[harmony_type])

    def variants(self, harmony_type: str) -> List[HarmonyVariant]:
        """Return base followed by added variants for *harmony_type*."""
        return self.base(harmony_type) + self.added(harmony_type)

    def add_variant(self, harmony_type: str) -> HarmonyVariant:
        current_count = base_size(self._palette, harmony_type) + len(self._added[harmony_type])
        variant = next_harmony_variant(self._palette, harmony_type, current_count)
        self._added[harmony_type].append(variant)
        return variant

    def remove_variant(self, harmony_type: str, index: int) -> HarmonyVariant | None:
        """Remove the added variant at *index* of :meth:`variants`.

        Indices pointing into the base set, or past the end, are ignored and
        ``None`` is returned.
        """
        offset = index - base_size(self._palette, harmony_type)
        extras = self._added[harmony_type]
        if offset < 0 or offset >= len(extras):
            return None
        return extras.pop(offset)

    def reset(self, harmony_type: str | None = None) -> None:
        if harmony_type is None:
            for extras in self._added.values():
                extras.clear()
            return
        _check_type(harmony_type)
        self._added[harmony_type].clear()


def _variant(source: ColorRecord, name: str, h: float, s: float, l: float) -> HarmonyVariant:
    return HarmonyVariant(
        hex=hsl_to_hex(normalize_hue(h), clamp(s, 0.0, 100.0), clamp(l, 0.0, 100.0)),
        name=name,
        original_color=source.hex,
    )


def _check_type(harmony_type: str) -> None:
    if harmony_type not in VARIANTS_PER_COLOR:
        raise ValueError(
            f"Unknown harmony type {harmony_type!r}; expected one of {', '.join(HARMONY_TYPES)}"
        )
