"""Base exception for drlogseeker."""

from typing import Any, Mapping, Optional


class DRLogSeekerError(Exception):
    """Base exception for all drlogseeker errors.

    ``details`` values are stored as strings so paths and numbers can be
    passed directly and the error still renders and serializes cleanly.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
