"""Scan coordination: discovery, parallel extraction, and aggregation.

Usage:
    coordinator = ScanCoordinator(ScanConfig(worker_count=4))
    report = coordinator.scan("/music/logs")

    # or, streaming with cancellation
    handle = coordinator.start("/music/logs")
    for entry in handle.stream():
        print(entry.candidate.path, entry.parsed.dr_value)
        if should_stop():
            handle.cancel()
    report = handle.wait()

Threading model:
    - One dispatcher thread walks the tree and submits candidates to a
      fixed-size ThreadPoolExecutor as it discovers them.
    - A bounded semaphore caps discovered-but-unfinished files, so a huge
      tree never piles up in memory ahead of the workers.
    - Workers check the cancel flag before starting a file, never mid-file.
    - Results land in a dict keyed by canonical path under a lock; the final
      report sorts them, so output order does not depend on worker timing.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from ..classifier import classify
from ..config import ScanConfig
from ..exceptions import RootInaccessibleError, ScanError, ScanStateError
from ..logging_config import get_logger
from .discovery import DirectoryWalker, resolve_root
from .extractor import TextExtractor
from .models import (
    CandidateFile,
    FailureReason,
    ParsedReport,
    ScanEntry,
    ScanReport,
    ScanState,
    SubtreeFailure,
)

logger = get_logger(__name__)

# (entry, files done, files discovered so far)
ProgressCallback = Callable[[ScanEntry, int, int], None]

# Seconds between cancel checks while the dispatcher waits for a free slot
_SLOT_POLL_SECONDS = 0.05

_STREAM_END = object()


class ScanHandle:
    """One scan invocation: lifecycle, live results, and the final report.

    State machine: IDLE -> SCANNING -> {COMPLETED, CANCELLED, FATALLY_FAILED}.
    FATALLY_FAILED is reached only when the root cannot be used, before any
    file is dispatched.
    """

    def __init__(
        self,
        root: Union[str, Path],
        config: ScanConfig,
        extractor: TextExtractor,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.requested_root = Path(root)
        self.root: Path = self.requested_root
        self.config = config
        self.extractor = extractor
        self.on_progress = on_progress

        self._state = ScanState.IDLE
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._finished = threading.Event()
        self._stream: queue.Queue = queue.Queue()
        self._results: dict[Path, ScanEntry] = {}
        self._subtree_failures: list[SubtreeFailure] = []
        self._discovered = 0
        self._done = 0
        self._thread: Optional[threading.Thread] = None
        self._report: Optional[ScanReport] = None
        self._fatal_error: Optional[str] = None
        self._error: Optional[BaseException] = None
        self._started_at: Optional[datetime] = None

    # ── Lifecycle ──────────────────────────────────────────────

    @property
    def state(self) -> ScanState:
        with self._lock:
            return self._state

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def progress(self) -> tuple[int, int]:
        """(files done, files discovered so far)."""
        with self._lock:
            return self._done, self._discovered

    def start(self) -> ScanHandle:
        """Validate the root and begin scanning in the background."""
        with self._lock:
            if self._state is not ScanState.IDLE:
                raise ScanStateError(self._state.value, "start")
            self._state = ScanState.SCANNING
            self._started_at = datetime.now(timezone.utc)

        try:
            self.root = resolve_root(self.requested_root)
        except RootInaccessibleError as e:
            logger.error(f"Cannot scan {self.requested_root}: {e.reason}")
            self._fatal_error = e.reason
            self._finish(ScanState.FATALLY_FAILED)
            return self

        logger.info(
            f"Scanning {self.root} with {self.config.effective_workers} workers "
            f"(extensions: {', '.join(self.config.extensions)})"
        )
        self._thread = threading.Thread(
            target=self._run, name="drlog-dispatcher", daemon=True
        )
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop dispatching new files. In-flight files still finish."""
        if not self._cancel.is_set():
            logger.info("Cancellation requested; draining in-flight files")
        self._cancel.set()

    def wait(self, timeout: Optional[float] = None) -> ScanReport:
        """
        Block until the scan reaches a terminal state.

        Args:
            timeout: Seconds to wait (None = forever)

        Returns:
            The final ScanReport

        Raises:
            TimeoutError: If the scan is still running after ``timeout``
            ScanStateError: If the scan was never started
            ScanError: If discovery aborted on an unexpected error
        """
        if self.state is ScanState.IDLE:
            raise ScanStateError(ScanState.IDLE.value, "wait on")
        if not self._finished.wait(timeout):
            raise TimeoutError(f"Scan of {self.root} still running after {timeout}s")
        if self._error is not None:
            raise ScanError(f"Scan of {self.root} aborted: {self._error}") from self._error
        assert self._report is not None
        return self._report

    def stream(self) -> Iterator[ScanEntry]:
        """Yield entries as they complete, until the scan ends.

        Completion order is not deterministic; use the final report for a
        stable order. Intended for a single consumer.
        """
        if self.state is ScanState.IDLE:
            raise ScanStateError(ScanState.IDLE.value, "stream")
        while True:
            item = self._stream.get()
            if item is _STREAM_END:
                return
            yield item

    def snapshot(self) -> ScanReport:
        """Report of what has finished so far, in canonical order."""
        with self._lock:
            if self._report is not None:
                return self._report
            entries = list(self._results.values())
            failures = list(self._subtree_failures)
            state = self._state
        return ScanReport.assemble(
            root=self.root,
            status=state,
            entries=entries,
            subtree_failures=failures,
            started_at=self._started_at,
        )

    # ── Dispatcher ─────────────────────────────────────────────

    def _run(self) -> None:
        walker = DirectoryWalker(self.root, self.config)
        slots = threading.BoundedSemaphore(self.config.effective_queue_size)
        executor = ThreadPoolExecutor(
            max_workers=self.config.effective_workers,
            thread_name_prefix="drlog-worker",
        )
        try:
            for item in walker.walk():
                if self._cancel.is_set():
                    break
                if isinstance(item, SubtreeFailure):
                    with self._lock:
                        self._subtree_failures.append(item)
                    continue
                if not self._acquire_slot(slots):
                    break
                with self._lock:
                    self._discovered += 1
                future = executor.submit(self._process, item)
                future.add_done_callback(
                    lambda f, c=item: self._collect(c, f, slots)
                )
        except Exception as e:
            logger.exception(f"Discovery under {self.root} failed")
            self._error = e
            self._cancel.set()
        finally:
            # In-flight files finish; queued ones see the cancel flag and skip
            executor.shutdown(wait=True)
            self._finish(ScanState.CANCELLED if self._cancel.is_set() else ScanState.COMPLETED)

    def _acquire_slot(self, slots: threading.BoundedSemaphore) -> bool:
        while not slots.acquire(timeout=_SLOT_POLL_SECONDS):
            if self._cancel.is_set():
                return False
        if self._cancel.is_set():
            slots.release()
            return False
        return True

    # ── Workers ────────────────────────────────────────────────

    def _process(self, candidate: CandidateFile) -> Optional[ScanEntry]:
        if self._cancel.is_set():
            return None
        try:
            parsed = self.extractor.extract_file(candidate)
        except Exception as e:
            logger.error(f"Unexpected error analyzing {candidate.path}: {e}")
            parsed = ParsedReport.failure(FailureReason.UNREADABLE, f"Unexpected error: {e}")

        band = None
        if parsed.is_success and parsed.dr_value is not None:
            band = classify(parsed.dr_value, raw_value=parsed.unclamped_value)
        return ScanEntry(candidate=candidate, parsed=parsed, band=band)

    def _collect(
        self,
        candidate: CandidateFile,
        future: Future,
        slots: threading.BoundedSemaphore,
    ) -> None:
        try:
            entry = None if future.cancelled() else future.result()
            if entry is None:
                return

            with self._lock:
                if candidate.canonical_path in self._results:
                    return
                self._results[candidate.canonical_path] = entry
                self._done += 1
                done, discovered = self._done, self._discovered

            reason = entry.parsed.reason
            if reason is not None:
                logger.debug(f"{candidate.path}: {reason.value} ({entry.parsed.detail})")
            self._stream.put(entry)

            if self.on_progress is not None:
                try:
                    self.on_progress(entry, done, discovered)
                except Exception as e:
                    logger.warning(f"Progress callback failed: {e}")
        finally:
            # Released last so the dispatcher sees a cancel issued by the callback
            slots.release()

    # ── Completion ─────────────────────────────────────────────

    def _finish(self, state: ScanState) -> None:
        finished_at = datetime.now(timezone.utc)
        with self._lock:
            report = ScanReport.assemble(
                root=self.root,
                status=state,
                entries=self._results.values(),
                subtree_failures=self._subtree_failures,
                fatal_error=self._fatal_error,
                started_at=self._started_at,
                finished_at=finished_at,
            )
            self._report = report
            self._state = state

        summary = report.summary
        if state is ScanState.CANCELLED:
            logger.info(f"Scan cancelled: {summary.total} files processed before stopping")
        elif state is ScanState.COMPLETED:
            logger.info(
                f"Scan complete: {summary.total} files, {summary.succeeded} with DR value, "
                f"{summary.failed} failed, {len(report.subtree_failures)} inaccessible directories"
            )
        self._stream.put(_STREAM_END)
        self._finished.set()


class ScanCoordinator:
    """Runs scans with a fixed configuration.

    The coordinator holds no scan state of its own; every call produces a
    fresh ScanHandle, so concurrent scans do not interfere.
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        extractor: Optional[TextExtractor] = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.extractor = extractor or TextExtractor(
            policy=self.config.policy,
            max_bytes=self.config.max_file_size_bytes,
        )

    def start(
        self, root: Union[str, Path], on_progress: Optional[ProgressCallback] = None
    ) -> ScanHandle:
        """Begin a scan and return its handle immediately."""
        return ScanHandle(root, self.config, self.extractor, on_progress).start()

    def scan(
        self, root: Union[str, Path], on_progress: Optional[ProgressCallback] = None
    ) -> ScanReport:
        """Scan a tree and block until it finishes."""
        return self.start(root, on_progress).wait()


def scan(
    root: Union[str, Path],
    config: Optional[ScanConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> ScanReport:
    """Scan ``root`` with ``config`` (defaults if omitted) and return the report."""
    return ScanCoordinator(config).scan(root, on_progress)
