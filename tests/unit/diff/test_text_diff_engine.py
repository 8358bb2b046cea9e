"""Unit tests for the linear text diff engine."""

import pytest

from pdfdelta.diff.text_diff import (
    count_changed_words,
    diff_text,
    get_segmenter,
    new_side,
    old_side,
    segment_paragraphs,
    segment_sentences,
    segment_words,
)
from pdfdelta.models import DiffMode, DiffSegment, DiffStats, SegmentKind


def _pairs(segments: list[DiffSegment]) -> list[tuple[str, str]]:
    return [(segment.kind.value, segment.value) for segment in segments]


@pytest.mark.unit
class TestSegmenters:
    """Tests for the word, paragraph and sentence segmenters."""

    def test_words_keep_whitespace_runs(self):
        """Test whitespace runs become units of their own."""
        assert segment_words("The quick  fox") == ["The", " ", "quick", "  ", "fox"]

    def test_words_leading_and_trailing_whitespace(self):
        """Test leading and trailing whitespace is preserved."""
        assert segment_words(" a b ") == [" ", "a", " ", "b", " "]

    def test_paragraphs_keep_newlines(self):
        """Test lines keep their trailing newline."""
        assert segment_paragraphs("one\ntwo\n\nthree") == ["one\n", "two\n", "\n", "three"]

    def test_sentences(self):
        """Test splitting after sentence terminators."""
        assert segment_sentences("One. Two! Three") == ["One.", " ", "Two!", " ", "Three"]

    def test_sentence_without_terminator(self):
        """Test text without terminators is one unit."""
        assert segment_sentences("no terminator here") == ["no terminator here"]

    @pytest.mark.parametrize("mode", list(DiffMode))
    def test_segments_rebuild_input(self, mode):
        """Test every segmenter's units concatenate to the input."""
        text = "First line. Second  sentence!\nNext paragraph? yes\n\n end"
        assert "".join(get_segmenter(mode)(text)) == text

    @pytest.mark.parametrize("mode", list(DiffMode))
    def test_empty_text(self, mode):
        """Test empty text has no units."""
        assert get_segmenter(mode)("") == []

    def test_segmenter_by_name(self):
        """Test segmenters can be looked up by mode name."""
        assert get_segmenter("sentence") is segment_sentences

    def test_unknown_mode(self):
        """Test an unknown mode is rejected."""
        with pytest.raises(ValueError):
            get_segmenter("character")


@pytest.mark.unit
class TestDiffText:
    """Tests for diff_text()."""

    def test_word_insertion(self):
        """Test an inserted word at word granularity."""
        segments = diff_text("The quick fox", "The quick brown fox")
        assert _pairs(segments) == [("unchanged", "The quick "), ("added", "brown "), ("unchanged", "fox")]

    def test_word_replacement(self):
        """Test a replaced word is removed then added."""
        segments = diff_text("Invoice Total: 100", "Invoice Total: 120")
        assert _pairs(segments) == [("unchanged", "Invoice Total: "), ("removed", "100"), ("added", "120")]

    def test_identical_texts(self):
        """Test identical texts give a single unchanged segment."""
        assert _pairs(diff_text("Invoice Total: 100", "Invoice Total: 100")) == [("unchanged", "Invoice Total: 100")]

    def test_both_empty(self):
        """Test two empty texts give one empty unchanged segment."""
        assert _pairs(diff_text("", "")) == [("unchanged", "")]

    def test_added_from_empty(self):
        """Test all text is added when the baseline is empty."""
        assert _pairs(diff_text("", "hello world")) == [("added", "hello world")]

    def test_removed_to_empty(self):
        """Test all text is removed when the revision is empty."""
        assert _pairs(diff_text("hello world", "")) == [("removed", "hello world")]

    def test_paragraph_mode_compares_lines(self):
        """Test paragraph mode marks whole lines."""
        segments = diff_text("alpha\nbeta\ngamma\n", "alpha\nBETA\ngamma\n", DiffMode.PARAGRAPH)
        assert _pairs(segments) == [
            ("unchanged", "alpha\n"),
            ("removed", "beta\n"),
            ("added", "BETA\n"),
            ("unchanged", "gamma\n"),
        ]

    def test_sentence_mode_compares_sentences(self):
        """Test sentence mode marks whole sentences."""
        segments = diff_text("One fish. Two fish.", "One fish. Red fish.", "sentence")
        assert _pairs(segments) == [("unchanged", "One fish. "), ("removed", "Two fish."), ("added", "Red fish.")]

    def test_adjacent_segments_differ_in_kind(self):
        """Test runs of the same kind are merged."""
        segments = diff_text("a b c d e", "a x y d z", DiffMode.WORD)
        for first, second in zip(segments, segments[1:]):
            assert first.kind is not second.kind
            assert not (first.added and second.removed)

    def test_sides_rebuild_inputs(self):
        """Test old and new sides reproduce the inputs."""
        a = "The contract term is twelve months. Payment is due monthly."
        b = "The contract term is six months. Payment is due quarterly. Renewal is automatic."
        segments = diff_text(a, b)
        assert old_side(segments) == a
        assert new_side(segments) == b


@pytest.mark.unit
class TestCountChangedWords:
    """Tests for count_changed_words()."""

    def test_counts_added_and_removed(self):
        """Test counting words in changed segments."""
        segments = [
            DiffSegment("Keep this ", SegmentKind.UNCHANGED),
            DiffSegment("old words here", SegmentKind.REMOVED),
            DiffSegment(" new ", SegmentKind.ADDED),
        ]
        assert count_changed_words(segments) == DiffStats(added=1, removed=3)

    def test_whitespace_only_changes(self):
        """Test whitespace-only segments count zero words."""
        segments = [DiffSegment("  ", SegmentKind.ADDED), DiffSegment("\n", SegmentKind.REMOVED)]
        assert count_changed_words(segments) == DiffStats()

    def test_unchanged_only(self):
        """Test an unchanged diff has no changed words."""
        assert count_changed_words(diff_text("same text", "same text")) == DiffStats(0, 0)
