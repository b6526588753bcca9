"""Tests for scanning/recognizer.py."""

import pytest

from drlogseeker.scanning.dialects import ENGLISH, RUSSIAN
from drlogseeker.scanning.models import Dialect
from drlogseeker.scanning.recognizer import FormatRecognizer

from conftest import english_report, russian_report


class TestFormatRecognizer:
    """Test dialect recognition order and results."""

    def test_default_priority(self):
        assert FormatRecognizer().priority == (Dialect.ENGLISH, Dialect.RUSSIAN)

    def test_recognizes_english(self):
        result = FormatRecognizer().recognize(english_report("9").splitlines())
        assert result is not None
        assert result.dialect is Dialect.ENGLISH
        assert len(result.hits) == 1

    def test_recognizes_russian(self):
        result = FormatRecognizer().recognize(russian_report("9,6").splitlines())
        assert result is not None
        assert result.dialect is Dialect.RUSSIAN

    def test_first_dialect_wins(self):
        """A file with both dialects is read as English only."""
        lines = ["Значение DR: 12", "Official DR value: 9"]
        result = FormatRecognizer().recognize(lines)
        assert result.dialect is Dialect.ENGLISH
        assert [h.token for h in result.hits] == ["9"]

    def test_custom_order(self):
        """Matcher order decides priority."""
        lines = ["Значение DR: 12", "Official DR value: 9"]
        result = FormatRecognizer([RUSSIAN, ENGLISH]).recognize(lines)
        assert result.dialect is Dialect.RUSSIAN
        assert [h.token for h in result.hits] == ["12"]

    def test_no_markers(self):
        assert FormatRecognizer().recognize(["just", "some", "text"]) is None

    def test_parsed_hits_skip_unreadable_values(self):
        lines = ["DR: ERR", "DR: 8"]
        result = FormatRecognizer().recognize(lines)
        assert len(result.hits) == 2
        assert [h.token for h in result.parsed_hits] == ["8"]

    def test_requires_matchers(self):
        with pytest.raises(ValueError):
            FormatRecognizer([])
