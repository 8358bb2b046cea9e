#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/__init__.py
"""Comparison engines for extracted documents.

Two independent engines run on every comparison:

- the text diff engine aligns the linear full texts at a granularity chosen
  by the mode selector and produces ``DiffSegment`` runs;
- the token alignment engine aligns positioned tokens by text and produces
  the ``TokenChangeSet`` used for spatial highlights.

Both share the LCS core in ``pdfdelta.diff.sequence``.

Examples
--------
    >>> from pdfdelta.diff import diff_text, DiffMode
    >>> segments = diff_text("The quick fox", "The quick brown fox", DiffMode.WORD)

"""

from pdfdelta.diff.modes import select_mode, select_mode_for
from pdfdelta.diff.sequence import DiffOp, align
from pdfdelta.diff.text_diff import (
    count_changed_words,
    diff_text,
    new_side,
    old_side,
    segment_paragraphs,
    segment_sentences,
    segment_words,
)
from pdfdelta.diff.token_diff import diff_tokens
from pdfdelta.models import DiffMode

__all__ = [
    "DiffMode",
    "DiffOp",
    "align",
    "count_changed_words",
    "diff_text",
    "diff_tokens",
    "new_side",
    "old_side",
    "segment_paragraphs",
    "segment_sentences",
    "segment_words",
    "select_mode",
    "select_mode_for",
]
