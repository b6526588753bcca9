"""Tests for file_ops.py."""

from pathlib import Path

import pytest

from drlogseeker.exceptions import FileAccessError
from drlogseeker.file_ops import is_hidden, safe_read_bytes, should_skip_file

from conftest import skip_if_root, write_file


class TestSafeReadBytes:
    """Test size-limited reads."""

    def test_reads_whole_file(self, tmp_path):
        path = write_file(tmp_path / "a.txt", b"DR: 9\xff")
        assert safe_read_bytes(path) == b"DR: 9\xff"

    def test_limit_is_inclusive(self, tmp_path):
        path = write_file(tmp_path / "a.txt", b"12345")
        assert safe_read_bytes(path, max_bytes=5) == b"12345"

    def test_over_limit(self, tmp_path):
        path = write_file(tmp_path / "a.txt", b"123456")
        with pytest.raises(FileAccessError) as exc_info:
            safe_read_bytes(path, max_bytes=5)
        assert "size limit" in exc_info.value.reason

    def test_missing(self, tmp_path):
        with pytest.raises(FileAccessError, match="Cannot access file"):
            safe_read_bytes(tmp_path / "missing.txt")

    def test_directory(self, tmp_path):
        with pytest.raises(FileAccessError) as exc_info:
            safe_read_bytes(tmp_path)
        assert exc_info.value.reason == "Path is a directory"

    @skip_if_root
    def test_permission_denied(self, tmp_path):
        path = write_file(tmp_path / "a.txt", "x")
        path.chmod(0)
        try:
            with pytest.raises(FileAccessError) as exc_info:
                safe_read_bytes(path)
        finally:
            path.chmod(0o644)
        assert exc_info.value.reason.startswith("Permission denied")


class TestDeniedRead:
    """Permission failures injected so they apply under any user."""

    def test_permission_error_becomes_file_access_error(self, tmp_path, deny_reading):
        path = write_file(tmp_path / "locked.txt", "x")
        deny_reading({"locked.txt"})
        with pytest.raises(FileAccessError) as exc_info:
            safe_read_bytes(path, max_bytes=100)
        assert exc_info.value.reason == "Permission denied: Permission denied"
        assert exc_info.value.filepath == path


class TestFilters:
    """Test exclusion helpers."""

    def test_should_skip_file(self):
        assert should_skip_file(Path("/m/a/cover.txt"), ["cover.*"])
        assert should_skip_file(Path("/m/Scans/x.log"), ["Scans/*"])
        assert not should_skip_file(Path("/m/a/dr.txt"), ["cover.*"])
        assert not should_skip_file(Path("/m/a/dr.txt"), [])

    @pytest.mark.parametrize(
        "name,hidden", [(".cache", True), (".dr.txt", True), ("dr.txt", False), (".", False)]
    )
    def test_is_hidden(self, name, hidden):
        assert is_hidden(name) is hidden
