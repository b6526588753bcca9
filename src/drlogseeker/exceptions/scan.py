"""Scan-related exceptions: file access, root access, lifecycle misuse."""

from pathlib import Path

from .base import DRLogSeekerError


class ScanError(DRLogSeekerError):
    """Base class for scan-related errors."""

    pass


class FileAccessError(ScanError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class RootInaccessibleError(ScanError):
    """Raised when the scan root cannot be listed, so no work is possible."""

    def __init__(self, root: Path, reason: str):
        super().__init__(
            f"Scan root is inaccessible: {root}",
            details={"root": root, "reason": reason},
        )
        self.root = root
        self.reason = reason


class ScanStateError(ScanError):
    """Raised on an invalid scan lifecycle transition."""

    def __init__(self, current: str, attempted: str):
        super().__init__(
            f"Cannot {attempted} a scan in state {current}",
            details={"state": current, "action": attempted},
        )
        self.current = current
        self.attempted = attempted
