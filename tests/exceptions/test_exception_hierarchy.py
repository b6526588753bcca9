"""Tests for the drlogseeker exception hierarchy."""

from pathlib import Path

import pytest

from drlogseeker.exceptions import (
    ConfigurationError,
    DRLogSeekerError,
    FileAccessError,
    InvalidConfigError,
    InvalidPathError,
    RootInaccessibleError,
    ScanError,
    ScanStateError,
)


class TestHierarchy:
    """Every error is catchable as DRLogSeekerError."""

    @pytest.mark.parametrize(
        "error,parent",
        [
            (InvalidPathError(Path("/x"), "missing"), ConfigurationError),
            (InvalidConfigError("worker_count", 0, "too small"), ConfigurationError),
            (FileAccessError(Path("/x"), "denied"), ScanError),
            (RootInaccessibleError(Path("/x"), "missing"), ScanError),
            (ScanStateError("idle", "wait on"), ScanError),
        ],
    )
    def test_parents(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, DRLogSeekerError)


class TestMessages:
    """Test messages and details."""

    def test_plain_message(self):
        assert str(DRLogSeekerError("boom")) == "boom"

    def test_details_in_str(self):
        err = DRLogSeekerError("boom", details={"a": "1"})
        assert str(err) == "boom (a=1)"
        assert err.details == {"a": "1"}

    def test_details_stringified(self):
        err = DRLogSeekerError("boom", details={"count": 3, "path": Path("/a")})
        assert err.details == {"count": "3", "path": "/a"}
        assert str(err) == "boom (count=3, path=/a)"

    def test_file_access_error(self):
        err = FileAccessError(Path("/music/dr.txt"), "Permission denied")
        assert err.filepath == Path("/music/dr.txt")
        assert err.reason == "Permission denied"
        assert "Cannot access file: /music/dr.txt" in str(err)
        assert err.details["filepath"] == "/music/dr.txt"

    def test_root_inaccessible_error(self):
        err = RootInaccessibleError(Path("/music"), "Path does not exist")
        assert err.root == Path("/music")
        assert err.details["reason"] == "Path does not exist"

    def test_scan_state_error(self):
        err = ScanStateError("completed", "start")
        assert err.message == "Cannot start a scan in state completed"
        assert err.current == "completed"
        assert err.attempted == "start"

    def test_invalid_config_error(self):
        err = InvalidConfigError("DRLOG_WORKER_COUNT", "x", "invalid literal")
        assert err.key == "DRLOG_WORKER_COUNT"
        assert "Invalid configuration for DRLOG_WORKER_COUNT: x" in str(err)
