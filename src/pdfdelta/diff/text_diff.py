#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/text_diff.py
"""Linear text comparison at word, paragraph or sentence granularity.

The two full texts are cut into units by the segmenter for the selected
mode, the unit sequences are aligned with the shared LCS core, and the
resulting ops are coalesced into ``DiffSegment`` runs.

Every segmenter returns units whose concatenation is exactly the input, so
the unchanged and removed segments of a diff always rebuild the old text and
the unchanged and added segments rebuild the new text.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from pdfdelta.diff.sequence import align
from pdfdelta.models import DiffMode, DiffSegment, DiffStats, SegmentKind

_WORD_UNIT_RE = re.compile(r"\s+|\S+")
_LINE_UNIT_RE = re.compile(r"[^\n]*\n|[^\n]+")
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])(\s+)")
_WHITESPACE_RE = re.compile(r"\s+")

Segmenter = Callable[[str], list[str]]


def segment_words(text: str) -> list[str]:
    """Split into alternating runs of non-whitespace and whitespace.

    Examples
    --------
    >>> segment_words("The quick  fox")
    ['The', ' ', 'quick', '  ', 'fox']

    """
    return _WORD_UNIT_RE.findall(text)


def segment_paragraphs(text: str) -> list[str]:
    """Split into lines, each keeping its trailing newline."""
    return _LINE_UNIT_RE.findall(text)


def segment_sentences(text: str) -> list[str]:
    """Split after sentence-ending punctuation.

    The whitespace following a sentence terminator becomes a unit of its own,
    so a change of spacing between sentences does not mark the sentences as
    changed.

    Examples
    --------
    >>> segment_sentences("One. Two! Three")
    ['One.', ' ', 'Two!', ' ', 'Three']

    """
    return [part for part in _SENTENCE_BREAK_RE.split(text) if part]


SEGMENTERS: dict[DiffMode, Segmenter] = {
    DiffMode.WORD: segment_words,
    DiffMode.PARAGRAPH: segment_paragraphs,
    DiffMode.SENTENCE: segment_sentences,
}


def get_segmenter(mode: DiffMode | str) -> Segmenter:
    """Return the segmenter for ``mode``.

    Raises
    ------
    ValueError
        If ``mode`` is not a known granularity.

    """
    return SEGMENTERS[DiffMode(mode)]


def diff_text(a: str, b: str, mode: DiffMode | str = DiffMode.WORD) -> list[DiffSegment]:
    """Compute the linear diff of two texts.

    Parameters
    ----------
    a : str
        Baseline text
    b : str
        Revised text
    mode : DiffMode or str, default DiffMode.WORD
        Unit granularity

    Returns
    -------
    list of DiffSegment
        Maximal runs in document order. Within a change region the removed
        run precedes the added run. Identical inputs produce exactly one
        unchanged segment, even when both are empty.

    Examples
    --------
    >>> [(s.kind.value, s.value) for s in diff_text("The quick fox", "The quick brown fox")]
    [('unchanged', 'The quick '), ('added', 'brown '), ('unchanged', 'fox')]

    """
    if a == b:
        return [DiffSegment(a, SegmentKind.UNCHANGED)]

    segment = get_segmenter(mode)
    old_units = segment(a)
    new_units = segment(b)

    segments: list[DiffSegment] = []
    for op in align(old_units, new_units):
        if op.tag == "equal":
            value = "".join(old_units[op.old_range[0] : op.old_range[1]])
            kind = SegmentKind.UNCHANGED
        elif op.tag == "delete":
            value = "".join(old_units[op.old_range[0] : op.old_range[1]])
            kind = SegmentKind.REMOVED
        else:
            value = "".join(new_units[op.new_range[0] : op.new_range[1]])
            kind = SegmentKind.ADDED

        if segments and segments[-1].kind is kind:
            segments[-1] = DiffSegment(segments[-1].value + value, kind)
        else:
            segments.append(DiffSegment(value, kind))

    return segments


def old_side(segments: Iterable[DiffSegment]) -> str:
    """Rebuild the baseline text from a diff."""
    return "".join(s.value for s in segments if s.kind is not SegmentKind.ADDED)


def new_side(segments: Iterable[DiffSegment]) -> str:
    """Rebuild the revised text from a diff."""
    return "".join(s.value for s in segments if s.kind is not SegmentKind.REMOVED)


def _word_count(value: str) -> int:
    return sum(1 for piece in _WHITESPACE_RE.split(value) if piece)


def count_changed_words(segments: Iterable[DiffSegment]) -> DiffStats:
    """Count words in added and removed segments.

    This is a display statistic only; it plays no part in the diff itself.
    """
    added = removed = 0
    for segment in segments:
        if segment.kind is SegmentKind.ADDED:
            added += _word_count(segment.value)
        elif segment.kind is SegmentKind.REMOVED:
            removed += _word_count(segment.value)
    return DiffStats(added=added, removed=removed)
