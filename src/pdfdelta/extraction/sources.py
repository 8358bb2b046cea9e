#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/extraction/sources.py
"""Document sources: the boundary between pdfdelta and the PDF parser.

The extractor only sees the small interface defined here: a page count,
random access to ``RawPage`` objects, and deterministic release. Each raw
page carries its viewport at reference scale and the raw text runs, each
with an affine transform in PDF content space (y axis pointing up, origin
at the run's baseline start).

``PdfDocumentSource`` implements the interface on top of PyMuPDF. PyMuPDF
reports coordinates in an unrotated, y-down page space, so runs are flipped
into content space and the viewport transform flips them back and applies
the page rotation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

from pdfdelta.constants import DEPS_PDF
from pdfdelta.exceptions import ExtractionError, PasswordRequiredError
from pdfdelta.options import ExtractionOptions
from pdfdelta.utils.decorators import requires_dependencies
from pdfdelta.utils.inputs import DocumentInput, describe_input, normalize_document_input

if TYPE_CHECKING:
    import fitz

logger = logging.getLogger(__name__)

Matrix6 = tuple[float, float, float, float, float, float]

IDENTITY: Matrix6 = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def apply_transform(point: tuple[float, float], transform: Sequence[float]) -> tuple[float, float]:
    """Map a point through a 6-element affine matrix ``(a, b, c, d, e, f)``."""
    a, b, c, d, e, f = transform
    x, y = point
    return a * x + c * y + e, b * x + d * y + f


@dataclass(frozen=True)
class Viewport:
    """Page viewport at reference scale.

    Parameters
    ----------
    width, height : float
        Size of the displayed page
    transform : tuple of float
        Affine matrix mapping content space to viewport space

    """

    width: float
    height: float
    transform: Matrix6 = IDENTITY

    def convert_to_viewport_point(self, x: float, y: float) -> tuple[float, float]:
        return apply_transform((x, y), self.transform)

    def convert_to_viewport_rectangle(self, rect: Sequence[float]) -> tuple[float, float, float, float]:
        """Map both corners of ``(x1, y1, x2, y2)``; the result is not normalized."""
        x1, y1 = self.convert_to_viewport_point(rect[0], rect[1])
        x2, y2 = self.convert_to_viewport_point(rect[2], rect[3])
        return x1, y1, x2, y2


@dataclass(frozen=True)
class RawTextRun:
    """One text run as reported by the parser.

    ``width`` is the measured advance along the baseline and ``height`` the
    declared height; either may be zero when the parser does not know it.
    """

    text: str
    width: float
    height: float
    transform: Matrix6


@dataclass(frozen=True)
class RawPage:
    """A loaded page: its viewport and text runs in content order."""

    viewport: Viewport
    runs: tuple[RawTextRun, ...] = field(default_factory=tuple)


@runtime_checkable
class DocumentSource(Protocol):
    """Interface the extractor needs from a parsed document."""

    @property
    def page_count(self) -> int: ...

    def load_page(self, index: int) -> RawPage: ...

    def close(self) -> None: ...

    def __enter__(self) -> DocumentSource: ...

    def __exit__(self, *exc_info: Any) -> None: ...


@requires_dependencies("pdf", DEPS_PDF)
def open_pdf(document: DocumentInput, password: str | None = None) -> "fitz.Document":
    """Open a PDF with PyMuPDF, authenticating when it is encrypted.

    Parameters
    ----------
    document : str, Path, bytes or binary stream
        PDF to open
    password : str, optional
        Password for encrypted documents

    Returns
    -------
    fitz.Document
        Open document; the caller must close it

    Raises
    ------
    ExtractionError
        If the document cannot be parsed as a PDF
    PasswordRequiredError
        If the document is encrypted and no valid password was given

    """
    import fitz

    payload, kind = normalize_document_input(document)
    label = describe_input(document)
    try:
        if kind == "path":
            doc = fitz.open(payload, filetype="pdf")
        else:
            doc = fitz.open(stream=payload, filetype="pdf")
    except Exception as e:
        raise ExtractionError(f"Failed to open PDF document: {e}", original_error=e) from e

    if doc.needs_pass:
        if not password:
            doc.close()
            raise PasswordRequiredError(file_path=label)
        if not doc.authenticate(password):
            doc.close()
            raise PasswordRequiredError(
                "Failed to authenticate PDF with provided password. Please check the password is correct.",
                file_path=label,
            )

    logger.debug(f"Opened {label} ({doc.page_count} pages)")
    return doc


def _page_viewport(page: "fitz.Page") -> Viewport:
    import fitz

    # text coordinates are reported in the unrotated page space
    unrotated_height = page.cropbox.height
    flip = fitz.Matrix(1, 0, 0, -1, 0, unrotated_height)
    transform = flip * page.rotation_matrix
    return Viewport(width=page.rect.width, height=page.rect.height, transform=tuple(transform))


def _span_runs(page: "fitz.Page", unrotated_height: float) -> list[RawTextRun]:
    import fitz

    runs = []
    text_page = page.get_text("dict", flags=fitz.TEXTFLAGS_TEXT)
    for block in text_page.get("blocks", []):
        for line in block.get("lines", []):
            dx, dy = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                size = float(span.get("size", 0.0))
                ox, oy = span["origin"]
                x0, y0, x1, y1 = span["bbox"]
                advance = max((cx - ox) * dx + (cy - oy) * dy for cx in (x0, x1) for cy in (y0, y1))
                runs.append(
                    RawTextRun(
                        text=span.get("text", ""),
                        width=max(advance, 0.0),
                        height=size,
                        transform=(size * dx, -size * dy, size * dy, size * dx, ox, unrotated_height - oy),
                    )
                )
    return runs


def _word_runs(page: "fitz.Page", unrotated_height: float) -> list[RawTextRun]:
    runs = []
    for x0, y0, x1, y1, word, *_ in page.get_text("words"):
        height = y1 - y0
        runs.append(
            RawTextRun(
                text=word,
                width=x1 - x0,
                height=height,
                transform=(height, 0.0, 0.0, height, x0, unrotated_height - y1),
            )
        )
    return runs


class PdfDocumentSource:
    """PyMuPDF-backed ``DocumentSource``.

    Parameters
    ----------
    document : str, Path, bytes or binary stream
        PDF to open
    options : ExtractionOptions, optional
        Password and run granularity

    Examples
    --------
        >>> with PdfDocumentSource("report.pdf") as source:
        ...     page = source.load_page(0)
        ...     print(len(page.runs))

    """

    def __init__(self, document: DocumentInput, options: ExtractionOptions | None = None):
        self.options = options or ExtractionOptions()
        self.label = describe_input(document)
        self._doc = open_pdf(document, password=self.options.password)

    @property
    def page_count(self) -> int:
        if self._doc is None:
            return 0
        return self._doc.page_count

    @property
    def closed(self) -> bool:
        return self._doc is None

    def load_page(self, index: int) -> RawPage:
        """Load one page's viewport and text runs.

        Raises
        ------
        IndexError
            If the document is closed or ``index`` is out of range

        """
        if self._doc is None or not 0 <= index < self._doc.page_count:
            raise IndexError(f"Invalid page request: {index}")

        page = self._doc.load_page(index)
        viewport = _page_viewport(page)
        unrotated_height = page.cropbox.height
        if self.options.run_granularity == "word":
            runs = _word_runs(page, unrotated_height)
        else:
            runs = _span_runs(page, unrotated_height)
        return RawPage(viewport=viewport, runs=tuple(runs))

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def __enter__(self) -> PdfDocumentSource:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PdfDocumentSource({self.label!r}, pages={self.page_count})"
