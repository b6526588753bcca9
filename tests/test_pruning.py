"""Tests for pruning.py - threshold selection for external cleanup."""

from pathlib import Path

import pytest

from drlogseeker.pruning import parent_dirs_emptied_by, select_prune_candidates
from drlogseeker.scanning import scan

from conftest import write_file


class TestSelectPruneCandidates:
    """Test select_prune_candidates against the sample library."""

    def test_below_threshold_and_failures(self, library):
        selection = select_prune_candidates(scan(library), 10)
        names = sorted(p.name for p in selection.paths)
        assert names == ["empty.txt", "foo_dr.txt", "mixed.log", "notes.txt"]
        assert len(selection) == 4
        assert selection.threshold == 10

    def test_without_failures(self, library):
        selection = select_prune_candidates(scan(library), 10, include_failures=False)
        assert [p.name for p in selection.paths] == ["foo_dr.txt"]

    def test_threshold_is_exclusive(self, library):
        selection = select_prune_candidates(scan(library), 6, include_failures=False)
        assert len(selection) == 0

    def test_threshold_above_scale_selects_all_parsed(self, library):
        selection = select_prune_candidates(scan(library), 15, include_failures=False)
        assert len(selection) == 3

    def test_canonical_order(self, library):
        selection = select_prune_candidates(scan(library), 15)
        keys = [e.candidate.sort_key for e in selection.entries]
        assert keys == sorted(keys)

    @pytest.mark.parametrize("threshold", [-1, 16])
    def test_invalid_threshold(self, library, threshold):
        with pytest.raises(ValueError, match="threshold"):
            select_prune_candidates(scan(library), threshold)


class TestParentDirsEmptiedBy:
    """Test parent_dirs_emptied_by."""

    def test_all_children_removed(self, tmp_path):
        a = write_file(tmp_path / "album" / "a.txt", "x")
        b = write_file(tmp_path / "album" / "b.log", "x")
        assert parent_dirs_emptied_by([a, b]) == [tmp_path / "album"]

    def test_other_files_remain(self, tmp_path):
        a = write_file(tmp_path / "album" / "a.txt", "x")
        write_file(tmp_path / "album" / "cover.jpg", "x")
        assert parent_dirs_emptied_by([a]) == []

    def test_missing_parent_is_skipped(self, tmp_path):
        assert parent_dirs_emptied_by([tmp_path / "gone" / "a.txt"]) == []

    def test_sorted_output(self, tmp_path):
        b = write_file(tmp_path / "b" / "x.txt", "x")
        a = write_file(tmp_path / "a" / "x.txt", "x")
        assert parent_dirs_emptied_by([b, a]) == [tmp_path / "a", tmp_path / "b"]

    def test_library_folders(self, library):
        selection = select_prune_candidates(scan(library), 10)
        folders = [p.name for p in parent_dirs_emptied_by(selection.paths)]
        assert folders == ["2001 - Loud", "Broken"]
