"""Selection of scan entries for an external pruning step.

The engine only decides *which* paths fail the caller's threshold. It never
deletes or modifies anything; a separate, user-confirmed component consumes
these lists.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .classifier import DR_MAX, DR_MIN
from .scanning.models import ScanEntry, ScanReport


@dataclass(frozen=True)
class PruneSelection:
    """Entries selected for pruning, in the report's canonical order."""

    threshold: int
    entries: tuple[ScanEntry, ...]

    @property
    def paths(self) -> list[Path]:
        return [e.candidate.path for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def select_prune_candidates(
    report: ScanReport, threshold: int, include_failures: bool = True
) -> PruneSelection:
    """
    Pick entries that failed to parse or whose band is below ``threshold``.

    Args:
        report: A finished (or partial) scan report
        threshold: Bands strictly below this are selected (0..15; 15 selects
            every parsed file)
        include_failures: Also select files that produced no DR value

    Returns:
        PruneSelection in canonical path order
    """
    if not DR_MIN <= threshold <= DR_MAX + 1:
        raise ValueError(f"threshold must be between {DR_MIN} and {DR_MAX + 1}, got {threshold}")

    selected = []
    for entry in report.entries:
        if entry.band is None:
            if include_failures:
                selected.append(entry)
        elif entry.band.value < threshold:
            selected.append(entry)
    return PruneSelection(threshold=threshold, entries=tuple(selected))


def parent_dirs_emptied_by(paths: Iterable[Path]) -> list[Path]:
    """
    Directories that would be left empty if ``paths`` were removed.

    Only the immediate parent of each path is considered. Directories that
    cannot be listed are left out.
    """
    by_parent: dict[Path, set[str]] = defaultdict(set)
    for path in paths:
        by_parent[path.parent].add(path.name)

    emptied = []
    for parent, names in sorted(by_parent.items(), key=lambda kv: str(kv[0])):
        try:
            remaining = {child.name for child in parent.iterdir()} - names
        except OSError:
            continue
        if not remaining:
            emptied.append(parent)
    return emptied
