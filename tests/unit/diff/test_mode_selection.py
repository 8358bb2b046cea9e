"""Unit tests for diff granularity selection."""

import pytest

from pdfdelta.constants import (
    ABSOLUTE_LIMIT,
    PARAGRAPH_MODE_NOTE,
    PARAGRAPH_THRESHOLD,
    SENTENCE_MODE_NOTE,
    WORD_THRESHOLD,
)
from pdfdelta.diff.modes import select_mode, select_mode_for
from pdfdelta.exceptions import TooLargeError
from pdfdelta.models import DiffMode, Extraction


@pytest.mark.unit
class TestSelectMode:
    """Tests for select_mode()."""

    @pytest.mark.parametrize(
        "length,expected",
        [
            (0, DiffMode.WORD),
            (WORD_THRESHOLD, DiffMode.WORD),
            (WORD_THRESHOLD + 1, DiffMode.PARAGRAPH),
            (PARAGRAPH_THRESHOLD, DiffMode.PARAGRAPH),
            (PARAGRAPH_THRESHOLD + 1, DiffMode.SENTENCE),
            (950_000, DiffMode.SENTENCE),
            (ABSOLUTE_LIMIT, DiffMode.SENTENCE),
        ],
    )
    def test_thresholds(self, length, expected):
        """Test each threshold is inclusive of its upper bound."""
        assert select_mode(length).mode is expected

    def test_word_mode_has_no_note(self):
        """Test word mode carries no advisory note."""
        assert select_mode(10).note is None

    def test_paragraph_note(self):
        """Test paragraph mode carries its note."""
        assert select_mode(500_000).note == PARAGRAPH_MODE_NOTE

    def test_sentence_note(self):
        """Test sentence mode carries its note."""
        assert select_mode(950_000).note == SENTENCE_MODE_NOTE

    @pytest.mark.parametrize("length", [ABSOLUTE_LIMIT + 1, 2_700_000])
    def test_too_large(self, length):
        """Test lengths beyond the absolute limit are rejected."""
        with pytest.raises(TooLargeError) as exc_info:
            select_mode(length)
        assert exc_info.value.combined_length == length
        assert "too large" in exc_info.value.message


@pytest.mark.unit
def test_select_mode_for_sums_full_texts():
    """Test selection uses the combined full text length of both extractions."""
    half = WORD_THRESHOLD // 2 + 1
    extraction_a = Extraction(tokens=(), full_text="a" * half)
    extraction_b = Extraction(tokens=(), full_text="b" * half)
    assert select_mode_for(extraction_a, extraction_b).mode is DiffMode.PARAGRAPH
