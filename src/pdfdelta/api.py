#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/api.py
"""Synchronous Python API for extracting and comparing documents.

These functions run the whole pipeline in the calling thread. Use
``pdfdelta.jobs.JobCoordinator`` when comparisons should run in the
background and newer requests should supersede older ones.
"""

from __future__ import annotations

import logging
from typing import Optional

from pdfdelta.diff.modes import select_mode_for
from pdfdelta.diff.text_diff import count_changed_words, diff_text
from pdfdelta.diff.token_diff import diff_tokens
from pdfdelta.extraction.extractor import ExtractInput, extract
from pdfdelta.models import ComparisonResult, Extraction
from pdfdelta.options import CompareOptions, ExtractionOptions
from pdfdelta.progress import ProgressCallback
from pdfdelta.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def extract_document(
    source: ExtractInput,
    options: ExtractionOptions | None = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> Extraction:
    """Extract positioned tokens and full text from a document.

    Parameters
    ----------
    source : str, Path, bytes, binary stream or DocumentSource
        Document to extract
    options : ExtractionOptions, optional
        Password and run granularity
    progress_callback : ProgressCallback, optional
        Receives per-page progress events

    Returns
    -------
    Extraction
        Tokens, full text and page metrics

    Raises
    ------
    ExtractionError
        If no searchable text is found

    Examples
    --------
        >>> extraction = extract_document("invoice.pdf")
        >>> extraction.full_text
        'Invoice Total: 100'

    """
    return extract(source, options, progress_callback=progress_callback)


def compare_extractions(extraction_a: Extraction, extraction_b: Extraction) -> ComparisonResult:
    """Compare two extractions in-process.

    Selects the text diff granularity from the combined text length, then
    runs the text diff and the token alignment.

    Raises
    ------
    TooLargeError
        If the combined text is beyond the comparison limit

    """
    selection = select_mode_for(extraction_a, extraction_b)
    with debug_timer(logger, f"Diff ({selection.mode.value})"):
        segments = diff_text(extraction_a.full_text, extraction_b.full_text, selection.mode)
        change_set = diff_tokens(extraction_a.tokens, extraction_b.tokens)
    return ComparisonResult(
        text_diff=tuple(segments),
        change_set=change_set,
        mode=selection.mode,
        note=selection.note,
        extraction_a=extraction_a,
        extraction_b=extraction_b,
        stats=count_changed_words(segments),
    )


def compare_documents(
    source_a: ExtractInput,
    source_b: ExtractInput,
    options: CompareOptions | None = None,
) -> ComparisonResult:
    """Extract and compare two documents.

    Parameters
    ----------
    source_a : str, Path, bytes, binary stream or DocumentSource
        Baseline document
    source_b : str, Path, bytes, binary stream or DocumentSource
        Revised document
    options : CompareOptions, optional
        Extraction options applied to both documents

    Returns
    -------
    ComparisonResult
        Text diff, token change set, mode and advisory note

    Examples
    --------
        >>> result = compare_documents("v1.pdf", "v2.pdf")
        >>> sorted(result.change_set.added)
        [2]

    """
    options = options or CompareOptions()
    extraction_a = extract(source_a, options.extraction)
    extraction_b = extract(source_b, options.extraction)
    return compare_extractions(extraction_a, extraction_b)
