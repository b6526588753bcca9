"""Summary statistics over a scan report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .classifier import DR_MAX, ColorTier
from .scanning.models import ScanReport


@dataclass(frozen=True)
class DRSummary:
    """Distribution of band values among successfully parsed files."""

    count: int
    mean: Optional[float]
    median: Optional[float]
    minimum: Optional[int]
    maximum: Optional[int]

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.minimum,
            "max": self.maximum,
        }


def band_values(report: ScanReport) -> np.ndarray:
    """Band values of all entries that have one, in report order."""
    return np.array(
        [e.band.value for e in report.entries if e.band is not None], dtype=np.int64
    )


def band_histogram(report: ScanReport) -> np.ndarray:
    """Counts per band: index i holds the number of files in band i (0..14)."""
    return np.bincount(band_values(report), minlength=DR_MAX + 1)


def tier_counts(report: ScanReport) -> dict[ColorTier, int]:
    """Counts per color tier, lowest tier first; every tier is present."""
    counts = {tier: 0 for tier in ColorTier}
    for entry in report.entries:
        if entry.band is not None:
            counts[entry.band.tier] += 1
    return counts


def dr_summary(report: ScanReport) -> DRSummary:
    values = band_values(report)
    if values.size == 0:
        return DRSummary(count=0, mean=None, median=None, minimum=None, maximum=None)
    return DRSummary(
        count=int(values.size),
        mean=round(float(np.mean(values)), 2),
        median=float(np.median(values)),
        minimum=int(values.min()),
        maximum=int(values.max()),
    )
