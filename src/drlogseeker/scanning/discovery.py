"""Directory discovery for candidate report files.

The walk uses an explicit stack of pending directories instead of
recursion, so depth is bounded by memory rather than the call stack.
Children are visited in name order, which makes "first seen" (and so
deduplication) deterministic.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

from ..config import ScanConfig
from ..exceptions import RootInaccessibleError
from ..file_ops import is_hidden, should_skip_file
from ..logging_config import get_logger
from .models import CandidateFile, SubtreeFailure

logger = get_logger(__name__)

Discovered = Union[CandidateFile, SubtreeFailure]


def resolve_root(root: Union[str, Path]) -> Path:
    """
    Resolve and check the scan root.

    Args:
        root: Directory to scan

    Returns:
        Absolute, symlink-free root path

    Raises:
        RootInaccessibleError: If the root is missing, not a directory, or
            cannot be listed
    """
    path = Path(root).expanduser()
    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError:
        raise RootInaccessibleError(path, "Path does not exist")
    except (OSError, RuntimeError) as e:
        raise RootInaccessibleError(path, f"Cannot resolve path: {e}")

    if not resolved.is_dir():
        raise RootInaccessibleError(resolved, "Path is not a directory")

    try:
        with os.scandir(resolved):
            pass
    except OSError as e:
        raise RootInaccessibleError(resolved, f"Cannot list directory: {e.strerror or e}")

    return resolved


@dataclass
class DiscoveryStats:
    """Counters for one walk."""

    directories: int = 0
    candidates: int = 0
    skipped: int = 0
    duplicates: int = 0
    revisits: int = 0
    inaccessible: int = 0


class DirectoryWalker:
    """Walks a tree and yields candidate files and unreadable subtrees.

    Symlinked directories are followed only when ``follow_symlinks`` is set;
    a directory reached twice (link cycle or alias) is descended once. A
    file reached through several paths is yielded once, under the first
    path seen.
    """

    def __init__(self, root: Path, config: ScanConfig):
        self.root = root
        self.config = config
        self.stats = DiscoveryStats()

    def walk(self) -> Iterator[Discovered]:
        """Yield CandidateFile and SubtreeFailure items in walk order."""
        cfg = self.config
        visited_dirs: set[tuple[int, int]] = set()
        seen_files: set[Path] = set()

        try:
            root_stat = os.stat(self.root)
            visited_dirs.add((root_stat.st_dev, root_stat.st_ino))
        except OSError as e:
            logger.warning(f"Cannot stat scan root {self.root}: {e}")

        stack: list[Path] = [self.root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                self.stats.inaccessible += 1
                logger.warning(f"Cannot list {directory}: {e.strerror or e}")
                yield SubtreeFailure(path=directory, detail=str(e.strerror or e))
                continue

            self.stats.directories += 1
            subdirs: list[Path] = []

            for entry in entries:
                if not cfg.allow_hidden_files and is_hidden(entry.name):
                    self.stats.skipped += 1
                    continue

                path = Path(entry.path)
                if _is_symlink(entry) and not cfg.follow_symlinks:
                    self.stats.skipped += 1
                    logger.debug(f"Skipped (symlink): {path}")
                    continue

                if _is_dir(entry):
                    if should_skip_file(path, cfg.exclude_patterns):
                        self.stats.skipped += 1
                        logger.debug(f"Skipped (pattern): {path}")
                        continue
                    try:
                        st = os.stat(path)
                    except OSError as e:
                        self.stats.inaccessible += 1
                        logger.warning(f"Cannot stat directory {path}: {e}")
                        yield SubtreeFailure(path=path, detail=str(e.strerror or e))
                        continue
                    key = (st.st_dev, st.st_ino)
                    if key in visited_dirs:
                        self.stats.revisits += 1
                        logger.debug(f"Skipped (already visited): {path}")
                        continue
                    visited_dirs.add(key)
                    subdirs.append(path)
                    continue

                candidate = self._candidate(entry, path, seen_files)
                if candidate is not None:
                    yield candidate

            # Reversed so the alphabetically first child is walked next
            stack.extend(reversed(subdirs))

        logger.debug(
            f"Discovery done: {self.stats.candidates} candidates in "
            f"{self.stats.directories} directories ({self.stats.skipped} skipped, "
            f"{self.stats.duplicates} duplicates, {self.stats.inaccessible} inaccessible)"
        )

    def _candidate(
        self, entry: os.DirEntry, path: Path, seen_files: set[Path]
    ) -> CandidateFile | None:
        cfg = self.config
        if not cfg.matches_extension(path):
            return None
        if should_skip_file(path, cfg.exclude_patterns):
            self.stats.skipped += 1
            logger.debug(f"Skipped (pattern): {path}")
            return None

        size = modified = None
        try:
            st = entry.stat(follow_symlinks=True)
        except OSError as e:
            # Broken link or permission problem: still a candidate, reading will fail
            logger.debug(f"Cannot stat {path}: {e}")
        else:
            if not stat.S_ISREG(st.st_mode):
                # FIFOs, sockets and devices would block or never end
                self.stats.skipped += 1
                logger.debug(f"Skipped (not a regular file): {path}")
                return None
            size, modified = st.st_size, st.st_mtime

        canonical = Path(os.path.realpath(path))
        if canonical in seen_files:
            self.stats.duplicates += 1
            logger.debug(f"Skipped (alias of {canonical}): {path}")
            return None
        seen_files.add(canonical)

        self.stats.candidates += 1
        return CandidateFile(path=path, canonical_path=canonical, size=size, modified=modified)


def _is_symlink(entry: os.DirEntry) -> bool:
    try:
        return entry.is_symlink()
    except OSError:
        return False


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=True)
    except OSError:
        return False


def discover(root: Union[str, Path], config: ScanConfig | None = None) -> list[Discovered]:
    """Resolve the root and walk it eagerly. Mostly useful for inspection and tests."""
    walker = DirectoryWalker(resolve_root(root), config or ScanConfig())
    return list(walker.walk())
