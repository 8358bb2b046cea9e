"""pdfdelta - Position-aware comparison of PDF documents.

pdfdelta compares two PDF files and reports what changed in two views of
the same content:

- a linear text diff of the documents' full text, computed at word,
  paragraph or sentence granularity depending on document size;
- a token change set identifying which positioned text runs were removed
  from the baseline or added in the revision, so the changes can be
  highlighted on the rendered pages.

Requirements
------------
- Python 3.10+
- PyMuPDF for PDF parsing and page rendering

Examples
--------
Compare two files and inspect the result:

    >>> from pdfdelta import compare_documents
    >>> result = compare_documents("contract_v1.pdf", "contract_v2.pdf")
    >>> result.mode
    <DiffMode.WORD: 'word'>
    >>> result.stats.added, result.stats.removed
    (12, 4)

Project highlights onto a page rendered 800 pixels wide:

    >>> from pdfdelta.highlights import PageViewport, highlights_for_side
    >>> rects = highlights_for_side(result, "revised", 0, PageViewport(800, 1035))

Run comparisons in the background, keeping only the latest:

    >>> from pdfdelta.jobs import JobCoordinator
    >>> with JobCoordinator() as jobs:
    ...     jobs.submit("contract_v1.pdf", "contract_v2.pdf")
    ...     outcome = jobs.wait()

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.


from pdfdelta.api import compare_documents, compare_extractions, extract_document
from pdfdelta.exceptions import (
    DependencyError,
    DiffComputationError,
    ExtractionCancelledError,
    ExtractionError,
    FileError,
    PasswordRequiredError,
    PdfDeltaError,
    RenderCancelledError,
    RenderingError,
    TooLargeError,
    ValidationError,
    WorkerFault,
)
from pdfdelta.models import (
    ComparisonResult,
    DiffMode,
    DiffSegment,
    DiffStats,
    Extraction,
    NormalizedRect,
    PageMetrics,
    SegmentKind,
    Token,
    TokenChangeSet,
)
from pdfdelta.options import CompareOptions, ExtractionOptions, PreviewOptions


__version__ = "1.0.0"

__all__ = [
    "ComparisonResult",
    "CompareOptions",
    "DependencyError",
    "DiffComputationError",
    "DiffMode",
    "DiffSegment",
    "DiffStats",
    "Extraction",
    "ExtractionCancelledError",
    "ExtractionError",
    "ExtractionOptions",
    "FileError",
    "NormalizedRect",
    "PageMetrics",
    "PasswordRequiredError",
    "PdfDeltaError",
    "PreviewOptions",
    "RenderCancelledError",
    "RenderingError",
    "SegmentKind",
    "Token",
    "TokenChangeSet",
    "TooLargeError",
    "ValidationError",
    "WorkerFault",
    "__version__",
    "compare_documents",
    "compare_extractions",
    "extract_document",
]
