#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/extraction/__init__.py
"""Document extraction: positioned tokens and linear text from PDF pages."""

from pdfdelta.extraction.extractor import collapse_whitespace, extract, normalize_run_rect
from pdfdelta.extraction.sources import (
    DocumentSource,
    PdfDocumentSource,
    RawPage,
    RawTextRun,
    Viewport,
    open_pdf,
)

__all__ = [
    "DocumentSource",
    "PdfDocumentSource",
    "RawPage",
    "RawTextRun",
    "Viewport",
    "collapse_whitespace",
    "extract",
    "normalize_run_rect",
    "open_pdf",
]
