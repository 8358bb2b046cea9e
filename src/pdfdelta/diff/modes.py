#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/modes.py
"""Diff granularity selection based on combined text size."""

from __future__ import annotations

import logging

from pdfdelta.constants import (
    ABSOLUTE_LIMIT,
    PARAGRAPH_MODE_NOTE,
    PARAGRAPH_THRESHOLD,
    SENTENCE_MODE_NOTE,
    WORD_THRESHOLD,
)
from pdfdelta.exceptions import TooLargeError
from pdfdelta.models import DiffMode, Extraction, ModeSelection

logger = logging.getLogger(__name__)


def select_mode(combined_length: int) -> ModeSelection:
    """Choose the text diff granularity for a combined character count.

    Larger inputs are compared at coarser units so the diff stays fast;
    past the absolute limit no comparison is attempted.

    Parameters
    ----------
    combined_length : int
        Length of both documents' full text added together

    Returns
    -------
    ModeSelection
        Selected mode and, for the coarser modes, an advisory note

    Raises
    ------
    TooLargeError
        If ``combined_length`` exceeds ``ABSOLUTE_LIMIT``

    """
    if combined_length > ABSOLUTE_LIMIT:
        raise TooLargeError(combined_length)
    if combined_length > PARAGRAPH_THRESHOLD:
        selection = ModeSelection(DiffMode.SENTENCE, SENTENCE_MODE_NOTE)
    elif combined_length > WORD_THRESHOLD:
        selection = ModeSelection(DiffMode.PARAGRAPH, PARAGRAPH_MODE_NOTE)
    else:
        selection = ModeSelection(DiffMode.WORD)
    logger.debug(f"Combined length {combined_length} -> {selection.mode.value} mode")
    return selection


def select_mode_for(extraction_a: Extraction, extraction_b: Extraction) -> ModeSelection:
    """Select the mode for a pair of extractions."""
    return select_mode(len(extraction_a.full_text) + len(extraction_b.full_text))
