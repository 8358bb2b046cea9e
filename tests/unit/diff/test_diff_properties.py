"""Property-based tests for the diff engines.

Hypothesis generates short texts and token sequences and checks the
invariants that hold for every comparison:

- both sides of a text diff rebuild their inputs exactly
- consecutive segments never share a kind
- token change sets are minimal and leave a common subsequence behind
- identical inputs never report changes
- coarser granularity is selected as the combined length grows
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from utils import make_tokens

from pdfdelta.constants import ABSOLUTE_LIMIT
from pdfdelta.diff.modes import select_mode
from pdfdelta.diff.sequence import align
from pdfdelta.diff.text_diff import diff_text, new_side, old_side
from pdfdelta.diff.token_diff import diff_tokens
from pdfdelta.models import DiffMode, SegmentKind

MODE_ORDER = [DiffMode.WORD, DiffMode.PARAGRAPH, DiffMode.SENTENCE]

# Small alphabets make shared units, and therefore non-trivial alignments, likely
texts = st.text(alphabet="ab .!?\n", max_size=40)
words = st.lists(st.sampled_from(["Total", "Tax", "100", "120", "Due", "net"]), max_size=12)


def lcs_length(a, b) -> int:
    """Classic dynamic programming LCS length."""
    previous = [0] * (len(b) + 1)
    for item in a:
        current = [0]
        for j, other in enumerate(b):
            current.append(previous[j] + 1 if item == other else max(previous[j + 1], current[j]))
        previous = current
    return previous[-1]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestTextDiffProperties:
    """Invariants of diff_text() for every mode."""

    @given(texts, texts, st.sampled_from(MODE_ORDER))
    @settings(max_examples=200)
    def test_sides_rebuild_inputs(self, a, b, mode):
        """Test unchanged plus removed text is A, unchanged plus added text is B."""
        segments = diff_text(a, b, mode)
        assert old_side(segments) == a
        assert new_side(segments) == b

    @given(texts, texts, st.sampled_from(MODE_ORDER))
    def test_segments_are_maximal(self, a, b, mode):
        """Test consecutive segments differ in kind and are non-empty unless identical-empty."""
        segments = diff_text(a, b, mode)
        for first, second in zip(segments, segments[1:]):
            assert first.kind is not second.kind
            assert not (first.added and second.removed)
        if a != b:
            assert all(segment.value for segment in segments)

    @given(texts, st.sampled_from(MODE_ORDER))
    def test_identical_inputs(self, text, mode):
        """Test identical inputs produce exactly one unchanged segment."""
        segments = diff_text(text, text, mode)
        assert [(s.kind, s.value) for s in segments] == [(SegmentKind.UNCHANGED, text)]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestAlignmentProperties:
    """Invariants of align() and diff_tokens()."""

    @given(words, words)
    @settings(max_examples=200)
    def test_edit_script_is_minimal(self, a, b):
        """Test the number of edits equals the LCS edit distance."""
        ops = align(a, b)
        edits = sum(op.old_length for op in ops if op.tag == "delete")
        edits += sum(op.new_length for op in ops if op.tag == "insert")
        assert edits == len(a) + len(b) - 2 * lcs_length(a, b)

    @given(words, words)
    def test_change_set_partitions_tokens(self, a, b):
        """Test unchanged tokens of both sides spell the same sequence."""
        tokens_a = make_tokens(a)
        tokens_b = make_tokens(b)
        change_set = diff_tokens(tokens_a, tokens_b)

        assert change_set.removed <= {token.absolute_index for token in tokens_a}
        assert change_set.added <= {token.absolute_index for token in tokens_b}
        kept_a = [token.text for token in tokens_a if token.absolute_index not in change_set.removed]
        kept_b = [token.text for token in tokens_b if token.absolute_index not in change_set.added]
        assert kept_a == kept_b
        assert len(kept_a) == lcs_length(a, b)

    @given(words)
    def test_identical_tokens(self, a):
        """Test identical token sequences have an empty change set."""
        assert diff_tokens(make_tokens(a), make_tokens(a)).is_empty

    @given(words, words)
    def test_deterministic(self, a, b):
        """Test repeated alignment of the same input gives the same change set."""
        assert diff_tokens(make_tokens(a), make_tokens(b)) == diff_tokens(make_tokens(a), make_tokens(b))


@pytest.mark.unit
@pytest.mark.fuzzing
class TestModeSelectionProperties:
    """Invariants of select_mode()."""

    @given(st.integers(0, ABSOLUTE_LIMIT), st.integers(0, ABSOLUTE_LIMIT))
    def test_monotonic(self, first, second):
        """Test a longer combined text never selects a finer mode."""
        low, high = sorted((first, second))
        assert MODE_ORDER.index(select_mode(low).mode) <= MODE_ORDER.index(select_mode(high).mode)
