"""Data models for the scanning layer."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

from ..classifier import DRBand
from ..exceptions import RootInaccessibleError


class Dialect(Enum):
    """Known DR report formats, in recognition priority order."""

    ENGLISH = "english"
    RUSSIAN = "russian"


class FailureReason(Enum):
    """Why a file (or subtree) produced no DR value."""

    NO_MATCH_FOUND = "no_match_found"
    UNREADABLE = "unreadable"
    AMBIGUOUS_MATCH = "ambiguous_match"
    EMPTY_FILE = "empty_file"
    SUBTREE_INACCESSIBLE = "subtree_inaccessible"


class ScanState(Enum):
    """Scan lifecycle: IDLE -> SCANNING -> one terminal state."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FATALLY_FAILED = "fatally_failed"

    @property
    def terminal(self) -> bool:
        return self in (ScanState.COMPLETED, ScanState.CANCELLED, ScanState.FATALLY_FAILED)


@dataclass(frozen=True)
class CandidateFile:
    """A discovered file whose extension qualifies it for parsing.

    ``size`` and ``modified`` are None when the file could not be stat'ed.
    """

    path: Path
    canonical_path: Path
    size: Optional[int] = None
    modified: Optional[float] = None

    @property
    def sort_key(self) -> str:
        return str(self.canonical_path)

    @property
    def name(self) -> str:
        return self.path.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "canonical_path": str(self.canonical_path),
            "size": self.size,
            "modified": self.modified,
        }


@dataclass(frozen=True)
class ParsedReport:
    """Outcome of extraction for one candidate file.

    Exactly one of (``dr_value``, ``reason``) is set. Use :meth:`success`
    and :meth:`failure` rather than the constructor.

    Attributes:
        dr_value: Rounded DR value clamped to [0, 14]
        dialect: Report format the value came from
        unclamped_value: Rounded value before clamping
        token: The numeric text as it appeared in the report
        reason: Failure reason
        detail: Human-readable context for failures
    """

    dr_value: Optional[int] = None
    dialect: Optional[Dialect] = None
    unclamped_value: Optional[int] = None
    token: Optional[str] = None
    reason: Optional[FailureReason] = None
    detail: str = ""

    @classmethod
    def success(
        cls,
        dr_value: int,
        dialect: Dialect,
        unclamped_value: Optional[int] = None,
        token: Optional[str] = None,
    ) -> ParsedReport:
        return cls(
            dr_value=dr_value,
            dialect=dialect,
            unclamped_value=dr_value if unclamped_value is None else unclamped_value,
            token=token,
        )

    @classmethod
    def failure(cls, reason: FailureReason, detail: str = "") -> ParsedReport:
        return cls(reason=reason, detail=detail)

    @property
    def is_success(self) -> bool:
        return self.reason is None

    @property
    def clamped(self) -> bool:
        return self.is_success and self.unclamped_value != self.dr_value

    def to_dict(self) -> dict[str, Any]:
        if self.is_success:
            return {
                "status": "success",
                "dr_value": self.dr_value,
                "dialect": self.dialect.value if self.dialect else None,
                "unclamped_value": self.unclamped_value,
                "token": self.token,
            }
        return {
            "status": "failure",
            "reason": self.reason.value if self.reason else None,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ScanEntry:
    """One row of a scan report."""

    candidate: CandidateFile
    parsed: ParsedReport
    band: Optional[DRBand] = None

    @property
    def path(self) -> Path:
        return self.candidate.path

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.candidate.to_dict(),
            "result": self.parsed.to_dict(),
            "band": self.band.to_dict() if self.band else None,
        }


@dataclass(frozen=True)
class SubtreeFailure:
    """A directory that could not be listed during discovery."""

    path: Path
    detail: str
    reason: FailureReason = FailureReason.SUBTREE_INACCESSIBLE

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "reason": self.reason.value, "detail": self.detail}


@dataclass(frozen=True)
class ScanSummary:
    """Counts over a scan report."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    clamped: int = 0
    failed_by_reason: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(
        cls, entries: tuple[ScanEntry, ...], subtree_failures: tuple[SubtreeFailure, ...] = ()
    ) -> ScanSummary:
        reasons: Counter[str] = Counter()
        succeeded = 0
        clamped = 0
        for entry in entries:
            if entry.parsed.is_success:
                succeeded += 1
                if entry.parsed.clamped:
                    clamped += 1
            elif entry.parsed.reason is not None:
                reasons[entry.parsed.reason.value] += 1
        for failure in subtree_failures:
            reasons[failure.reason.value] += 1
        return cls(
            total=len(entries),
            succeeded=succeeded,
            failed=len(entries) - succeeded,
            clamped=clamped,
            failed_by_reason=dict(sorted(reasons.items())),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "clamped": self.clamped,
            "failed_by_reason": dict(self.failed_by_reason),
        }


@dataclass(frozen=True)
class ScanReport:
    """Immutable snapshot of a scan.

    ``entries`` is sorted by canonical path and holds one entry per
    distinct canonical path, whatever order workers finished in.
    """

    root: Path
    status: ScanState
    entries: tuple[ScanEntry, ...] = ()
    subtree_failures: tuple[SubtreeFailure, ...] = ()
    summary: ScanSummary = field(default_factory=ScanSummary)
    fatal_error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def assemble(
        cls,
        root: Path,
        status: ScanState,
        entries: Any,
        subtree_failures: Any = (),
        fatal_error: Optional[str] = None,
        started_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
    ) -> ScanReport:
        """Build a report, imposing the canonical ordering."""
        ordered = tuple(sorted(entries, key=lambda e: e.candidate.sort_key))
        failures = tuple(sorted(subtree_failures, key=lambda f: str(f.path)))
        return cls(
            root=root,
            status=status,
            entries=ordered,
            subtree_failures=failures,
            summary=ScanSummary.build(ordered, failures),
            fatal_error=fatal_error,
            started_at=started_at,
            finished_at=finished_at,
        )

    @property
    def complete(self) -> bool:
        return self.status is ScanState.COMPLETED

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ScanEntry]:
        return iter(self.entries)

    def successes(self) -> list[ScanEntry]:
        return [e for e in self.entries if e.parsed.is_success]

    def failures(self) -> list[ScanEntry]:
        return [e for e in self.entries if not e.parsed.is_success]

    def get(self, path: Path) -> Optional[ScanEntry]:
        """Look up an entry by discovered or canonical path."""
        target = Path(path)
        for entry in self.entries:
            if entry.candidate.path == target or entry.candidate.canonical_path == target:
                return entry
        return None

    def ranked(self) -> list[ScanEntry]:
        """Display order: highest DR first, then path; failures last."""

        def key(entry: ScanEntry) -> tuple[int, int, str]:
            if entry.band is not None:
                return (0, -entry.band.value, entry.candidate.sort_key)
            return (1, 0, entry.candidate.sort_key)

        return sorted(self.entries, key=key)

    def raise_for_status(self) -> None:
        """Raise RootInaccessibleError if the scan fatally failed."""
        if self.status is ScanState.FATALLY_FAILED:
            raise RootInaccessibleError(self.root, self.fatal_error or "unknown error")

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "status": self.status.value,
            "complete": self.complete,
            "fatal_error": self.fatal_error,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "summary": self.summary.to_dict(),
            "entries": [e.to_dict() for e in self.entries],
            "subtree_failures": [f.to_dict() for f in self.subtree_failures],
        }
