"""Tests for classifier.py - DR banding and color tiers."""

import pytest

from drlogseeker.classifier import (
    BAND_TIERS,
    DR_MAX,
    DR_MIN,
    ColorTier,
    DRBand,
    clamp,
    classify,
)


class TestClamp:
    """Test clamp."""

    @pytest.mark.parametrize("value,expected", [(-5, 0), (0, 0), (7, 7), (14, 14), (99, 14)])
    def test_default_range(self, value, expected):
        assert clamp(value) == expected

    def test_custom_range(self):
        assert clamp(5, 1, 3) == 3


class TestClassify:
    """Test classify."""

    @pytest.mark.parametrize("value", range(DR_MIN, 8))
    def test_low_bands_share_lowest_tier(self, value):
        assert classify(value).tier is ColorTier.RED

    @pytest.mark.parametrize(
        "value,tier",
        [
            (8, ColorTier.ORANGE_RED),
            (9, ColorTier.ORANGE),
            (10, ColorTier.AMBER),
            (11, ColorTier.YELLOW),
            (12, ColorTier.YELLOW_GREEN),
            (13, ColorTier.LIGHT_GREEN),
            (14, ColorTier.GREEN),
        ],
    )
    def test_high_bands_have_own_tier(self, value, tier):
        assert classify(value).tier is tier

    def test_monotonic(self):
        """A higher DR value never gets a lower tier."""
        ranks = [classify(v).tier.rank for v in range(-5, 21)]
        assert ranks == sorted(ranks)

    def test_in_range_value(self):
        assert classify(9) == DRBand(value=9, tier=ColorTier.ORANGE, raw_value=9, clamped=False)

    def test_above_range_is_clamped(self):
        band = classify(20)
        assert band.value == DR_MAX
        assert band.raw_value == 20
        assert band.clamped
        assert band.tier is ColorTier.GREEN

    def test_below_range_is_clamped(self):
        band = classify(-3)
        assert band.value == 0
        assert band.clamped
        assert band.tier is ColorTier.RED

    def test_raw_value_keeps_clamp_flag(self):
        """Values clamped upstream stay flagged."""
        band = classify(14, raw_value=18)
        assert band.value == 14
        assert band.raw_value == 18
        assert band.clamped

    def test_to_dict(self):
        assert classify(12).to_dict() == {
            "value": 12,
            "tier": "yellow_green",
            "raw_value": 12,
            "clamped": False,
        }


class TestColorTier:
    """Test tier table properties."""

    def test_band_table_covers_scale(self):
        assert len(BAND_TIERS) == DR_MAX - DR_MIN + 1

    def test_high_bands_distinct(self):
        assert len(set(BAND_TIERS[8:])) == 7

    def test_rank_order(self):
        assert [t.rank for t in ColorTier] == list(range(len(ColorTier)))

    def test_hex(self):
        assert ColorTier.RED.hex == "#e60000"
        assert ColorTier.GREEN.hex == "#00aa00"

    def test_every_tier_has_color(self):
        for tier in ColorTier:
            assert len(tier.rgb) == 3
            assert all(0 <= c <= 255 for c in tier.rgb)
