"""Exception hierarchy for drlogseeker."""

from .base import DRLogSeekerError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .scan import (
    FileAccessError,
    RootInaccessibleError,
    ScanError,
    ScanStateError,
)

__all__ = [
    "DRLogSeekerError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ScanError",
    "FileAccessError",
    "RootInaccessibleError",
    "ScanStateError",
]
