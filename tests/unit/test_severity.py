"""
Unit tests for severity normalization
"""

import pytest

from rowcheck.check.errors import InvalidSeverityError
from rowcheck.check.severity import Severity, normalize_severity


class TestNormalizeSeverity:
    """Test normalize_severity"""

    @pytest.mark.parametrize("raw,expected", [
        ("note", Severity.NOTE),
        ("warning", Severity.WARNING),
        ("warn", Severity.WARNING),
        ("error", Severity.ERROR),
        ("err", Severity.ERROR),
        ("abend", Severity.ABEND),
        ("abort", Severity.ABEND),
    ])
    def test_canonical_names_and_synonyms(self, raw, expected):
        """Test every recognized word maps to its canonical level"""
        assert normalize_severity(raw) is expected

    def test_case_insensitive(self):
        """Test input case is ignored"""
        assert normalize_severity("WARN") is Severity.WARNING
        assert normalize_severity("Abort") is Severity.ABEND
        assert normalize_severity("eRrOr") is Severity.ERROR

    def test_surrounding_whitespace_ignored(self):
        """Test whitespace around the word is tolerated"""
        assert normalize_severity("  note ") is Severity.NOTE

    def test_default_is_error(self):
        """Test the default and None both mean error"""
        assert normalize_severity() is Severity.ERROR
        assert normalize_severity(None) is Severity.ERROR

    def test_member_passes_through(self):
        """Test normalizing an already normalized value is a no-op"""
        for member in Severity:
            assert normalize_severity(member) is member

    def test_synonyms_are_idempotent(self):
        """Test normalizing the canonical name of a synonym gives the same member"""
        first = normalize_severity("warn")
        assert normalize_severity(first.value) is first
        assert normalize_severity(first) is first

    @pytest.mark.parametrize("raw", ["hmmm", "", "warnings", "errors", "fatal", "note warn", "info"])
    def test_unrecognized_words_rejected(self, raw):
        """Test anything but a whole recognized word is rejected"""
        with pytest.raises(InvalidSeverityError) as exc_info:
            normalize_severity(raw)

        assert exc_info.value.severity == raw
        assert exc_info.value.kind == "INVALID_SEVERITY"

    def test_non_string_rejected(self):
        """Test non-string input is rejected"""
        with pytest.raises(InvalidSeverityError):
            normalize_severity(8)
