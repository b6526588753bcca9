"""DR banding: map a DR value onto the fixed 0-14 scale and its color tier.

Bands 0-7 share one tier; 8-14 each get their own. The table is ordered, so a
higher band never maps to a lower tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DR_MIN = 0
DR_MAX = 14

# Bands at or below this value collapse into the lowest tier
COLLAPSED_CEILING = 7


class ColorTier(Enum):
    """Semantic color tag of a DR band, lowest tier first."""

    RED = "red"
    ORANGE_RED = "orange_red"
    ORANGE = "orange"
    AMBER = "amber"
    YELLOW = "yellow"
    YELLOW_GREEN = "yellow_green"
    LIGHT_GREEN = "light_green"
    GREEN = "green"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return TIER_RGB[self]

    @property
    def hex(self) -> str:
        r, g, b = self.rgb
        return f"#{r:02x}{g:02x}{b:02x}"


_TIER_ORDER: tuple[ColorTier, ...] = tuple(ColorTier)

TIER_RGB: dict[ColorTier, tuple[int, int, int]] = {
    ColorTier.RED: (230, 0, 0),
    ColorTier.ORANGE_RED: (255, 69, 0),
    ColorTier.ORANGE: (255, 140, 0),
    ColorTier.AMBER: (255, 191, 0),
    ColorTier.YELLOW: (255, 230, 0),
    ColorTier.YELLOW_GREEN: (173, 230, 47),
    ColorTier.LIGHT_GREEN: (102, 214, 102),
    ColorTier.GREEN: (0, 170, 0),
}

# band -> tier, indexed by band value
BAND_TIERS: tuple[ColorTier, ...] = tuple(
    ColorTier.RED if band <= COLLAPSED_CEILING else _TIER_ORDER[band - COLLAPSED_CEILING]
    for band in range(DR_MIN, DR_MAX + 1)
)


@dataclass(frozen=True)
class DRBand:
    """A clamped DR value with its color tier.

    Attributes:
        value: Band in [0, 14]
        tier: Color tier for the band
        raw_value: Value before clamping
        clamped: True if raw_value was outside [0, 14]
    """

    value: int
    tier: ColorTier
    raw_value: int
    clamped: bool = False

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "tier": self.tier.value,
            "raw_value": self.raw_value,
            "clamped": self.clamped,
        }


def clamp(value: int, lo: int = DR_MIN, hi: int = DR_MAX) -> int:
    """Clamp value between lo and hi."""
    return max(lo, min(hi, value))


def classify(dr_value: int, raw_value: Optional[int] = None) -> DRBand:
    """Band a DR value.

    Total over all integers: out-of-range input is clamped and flagged.

    Args:
        dr_value: Integer DR value (clamped or not)
        raw_value: Pre-clamp value when the caller already clamped; used to
            keep the clamped flag accurate

    Returns:
        DRBand for the value
    """
    raw = dr_value if raw_value is None else raw_value
    band = clamp(int(dr_value))
    return DRBand(
        value=band,
        tier=BAND_TIERS[band],
        raw_value=raw,
        clamped=band != raw,
    )
