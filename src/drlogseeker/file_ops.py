"""
Safe file operations for drlogseeker.

Provides size-limited reads and exclusion checks. Nothing in this module
writes to the filesystem.
"""

from pathlib import Path
from typing import Iterable, Optional

from .exceptions import FileAccessError


def safe_read_bytes(filepath: Path, max_bytes: Optional[int] = None) -> bytes:
    """
    Read a file's raw bytes with a size limit.

    Args:
        filepath: File to read
        max_bytes: Refuse files larger than this (None = unlimited)

    Returns:
        File contents

    Raises:
        FileAccessError: If the file cannot be read or exceeds the size limit
    """
    try:
        with open(filepath, "rb") as f:
            if max_bytes is None:
                return f.read()
            # One byte past the limit marks an oversized file
            data = f.read(max_bytes + 1)
    except PermissionError as e:
        raise FileAccessError(filepath, f"Permission denied: {e.strerror or e}")
    except IsADirectoryError:
        raise FileAccessError(filepath, "Path is a directory")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")

    if len(data) > max_bytes:
        raise FileAccessError(filepath, f"File exceeds size limit of {max_bytes} bytes")
    return data


def should_skip_file(filepath: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Args:
        filepath: File to check
        exclude_patterns: Glob patterns to exclude

    Returns:
        True if file should be skipped
    """
    for pattern in exclude_patterns:
        if filepath.match(pattern):
            return True
    return False


def is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in {".", ".."}
