"""Unit tests for custom exceptions module."""

import pytest

from blastscan.core.exceptions import (
    BlastscanError,
    CollaboratorTableError,
    ConfigurationError,
    FieldOrderError,
    IndelError,
    IndelOrderError,
    MalformedSummaryLineError,
    SummaryFormatError,
    UnexpectedModelError,
    UnknownScoreTripleError,
)


class TestBlastscanError:
    """Tests for base exception class."""

    def test_basic_message(self):
        """Should create exception with just message."""
        error = BlastscanError("Test error")
        assert error.message == "Test error"
        assert error.suggestion is None
        assert str(error) == "Test error"

    def test_message_with_suggestion(self):
        """Should include suggestion in full message."""
        error = BlastscanError("Test error", suggestion="Try this fix")
        assert error.suggestion == "Try this fix"
        assert "Suggestion: Try this fix" in str(error)


class TestSummaryFormatErrors:
    """Tests for summary stream error classes."""

    def test_malformed_line_cites_line(self):
        error = MalformedSummaryLineError("s.txt", 7, "A\tB\tC", 3)
        assert "line 7" in str(error)
        assert "'A\\tB\\tC'" in str(error)
        assert isinstance(error, SummaryFormatError)
        assert error.suggestion

    def test_field_order_lists_missing(self):
        error = FieldOrderError("s.txt", 4, "BITSCORE\t90", "BITSCORE", ["HACC", "HSP"])
        assert "read BITSCORE line before HACC, HSP line(s)" in str(error)

    def test_all_derive_from_base(self):
        """Every error can be caught as BlastscanError."""
        for error in [
            UnknownScoreTripleError("M", "S", "+", 3, "line"),
            UnexpectedModelError("M", "S"),
            IndelOrderError("Q1:S1+1", "Q1:S1-1", "have identical positions"),
            CollaboratorTableError("t.tsv", "bad", ("seq_name",)),
        ]:
            assert isinstance(error, BlastscanError)

    def test_indel_hierarchy(self):
        assert issubclass(IndelOrderError, IndelError)
        assert issubclass(CollaboratorTableError, ConfigurationError)

    def test_raise_and_catch(self):
        with pytest.raises(BlastscanError, match="trio not in score table"):
            raise UnknownScoreTripleError("M", "S", "+", 3, "line")
