#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/extraction/extractor.py
"""Turn a document into positioned tokens and a linear full text.

Pages are processed independently: a page that fails to load or process is
logged and contributes no tokens, while extraction of the remaining pages
continues. Only a document that yields no tokens at all is an error.

Token geometry is normalized against the page viewport at reference scale
so it can later be projected onto a page rendered at any zoom.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Optional, Union

from pdfdelta.exceptions import ExtractionCancelledError, ExtractionError
from pdfdelta.extraction.sources import DocumentSource, PdfDocumentSource, RawTextRun, Viewport
from pdfdelta.models import Extraction, NormalizedRect, PageMetrics, Token
from pdfdelta.options import ExtractionOptions
from pdfdelta.progress import ProgressCallback, emit_progress
from pdfdelta.utils.decorators import debug_timer
from pdfdelta.utils.inputs import DocumentInput

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

ExtractInput = Union[DocumentSource, DocumentInput]


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def normalize_run_rect(run: RawTextRun, viewport: Viewport) -> Optional[NormalizedRect]:
    """Compute the normalized viewport rectangle of a text run.

    Parameters
    ----------
    run : RawTextRun
        Run with its content-space transform
    viewport : Viewport
        Page viewport at reference scale

    Returns
    -------
    NormalizedRect or None
        The rectangle, or None when the run has no visible area inside the
        page

    """
    a, b, c, d, e, f = run.transform
    width = run.width or math.hypot(a, b)
    height = run.height if run.height > 0 else math.hypot(c, d)

    x1, y1, x2, y2 = viewport.convert_to_viewport_rectangle((e, f, e + width, f + height))
    left, right = min(x1, x2), max(x1, x2)
    top, bottom = min(y1, y2), max(y1, y2)
    if right - left <= 0 or bottom - top <= 0:
        return None

    left = _clamp(left, 0.0, viewport.width)
    right = _clamp(right, 0.0, viewport.width)
    top = _clamp(top, 0.0, viewport.height)
    bottom = _clamp(bottom, 0.0, viewport.height)

    if viewport.width:
        norm_x, norm_width = left / viewport.width, (right - left) / viewport.width
    else:
        norm_x = norm_width = 0.0
    if viewport.height:
        norm_y, norm_height = top / viewport.height, (bottom - top) / viewport.height
    else:
        norm_y = norm_height = 0.0

    if norm_width <= 0 or norm_height <= 0:
        return None
    return NormalizedRect(x=norm_x, y=norm_y, width=norm_width, height=norm_height)


def _open_source(document: ExtractInput, options: ExtractionOptions) -> DocumentSource:
    if isinstance(document, DocumentSource):
        return document
    return PdfDocumentSource(document, options)


def extract(
    document: ExtractInput,
    options: ExtractionOptions | None = None,
    progress_callback: Optional[ProgressCallback] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Extraction:
    """Extract positioned tokens and the full text from a document.

    Parameters
    ----------
    document : DocumentSource, str, Path, bytes or binary stream
        An open source, or raw input opened with ``PdfDocumentSource``.
        The source is closed before this function returns, whether or not
        extraction succeeds.
    options : ExtractionOptions, optional
        Password and run granularity for raw inputs
    progress_callback : ProgressCallback, optional
        Receives ``started``, per-page ``item_done`` or ``error``, and
        ``finished`` events
    should_stop : callable, optional
        Polled before each page; extraction is abandoned once it returns True

    Returns
    -------
    Extraction
        Tokens in reading order with dense absolute indexes, the joined full
        text and one ``PageMetrics`` per page

    Raises
    ------
    ExtractionError
        If the document cannot be opened, or no page yields a usable token
    PasswordRequiredError
        If the document is encrypted and no valid password was given
    ExtractionCancelledError
        If ``should_stop`` returned True

    """
    options = options or ExtractionOptions()
    source = _open_source(document, options)

    with source, debug_timer(logger, "Extraction"):
        page_count = source.page_count
        emit_progress(progress_callback, "started", f"Extracting {page_count} page(s)", current=0, total=page_count)

        tokens: list[Token] = []
        page_metrics: list[PageMetrics] = []
        for page_index in range(page_count):
            if should_stop is not None and should_stop():
                logger.debug(f"Extraction stopped before page {page_index + 1}")
                raise ExtractionCancelledError(page_index)
            metrics: PageMetrics | None = None
            try:
                page = source.load_page(page_index)
                viewport = page.viewport
                metrics = PageMetrics(width=viewport.width, height=viewport.height)

                page_tokens = []
                for item_index, run in enumerate(page.runs):
                    text = collapse_whitespace(run.text)
                    if not text:
                        continue
                    rect = normalize_run_rect(run, viewport)
                    if rect is None:
                        continue
                    page_tokens.append((text, item_index, rect))
            except Exception as e:
                logger.warning(f"Failed to extract page {page_index + 1}: {e}")
                page_metrics.append(metrics or PageMetrics(width=0.0, height=0.0))
                emit_progress(
                    progress_callback,
                    "error",
                    f"Page {page_index + 1} could not be read",
                    current=page_index + 1,
                    total=page_count,
                    error=str(e),
                    page=page_index,
                )
                continue

            for text, item_index, rect in page_tokens:
                tokens.append(
                    Token(
                        text=text,
                        page_index=page_index,
                        item_index=item_index,
                        absolute_index=len(tokens),
                        rect=rect,
                    )
                )
            page_metrics.append(metrics)
            emit_progress(
                progress_callback,
                "item_done",
                f"Page {page_index + 1}/{page_count} extracted",
                current=page_index + 1,
                total=page_count,
                item_type="page",
                page=page_index,
                token_count=len(page_tokens),
            )

    if not tokens:
        raise ExtractionError(page_count=page_count)

    emit_progress(
        progress_callback,
        "finished",
        f"Extracted {len(tokens)} token(s)",
        current=page_count,
        total=page_count,
        token_count=len(tokens),
    )
    logger.debug(f"Extracted {len(tokens)} tokens from {page_count} page(s)")
    return Extraction.from_tokens(tokens, page_metrics)
