#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/preview.py
"""Render page previews with change highlights overlaid.

Rendering a long document takes far longer than computing its diff, so it
is cancellable: a ``CancellationToken`` is checked before each page, between
highlight draws and before rasterizing. A cancelled render raises
``RenderCancelledError``; the document is closed on every exit path,
including when the caller stops iterating early.

Highlights are drawn on an in-memory copy of the page only; the source file
is never modified.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, AbstractSet, Iterable, Iterator, Literal

from pdfdelta.constants import DEPS_PDF, MAX_BASE_SCALE, MAX_ZOOMED_SCALE, MIN_BASE_SCALE
from pdfdelta.exceptions import RenderCancelledError, RenderingError
from pdfdelta.extraction.sources import open_pdf
from pdfdelta.highlights import HighlightRect, PageViewport, page_highlights
from pdfdelta.models import Extraction
from pdfdelta.options import PreviewOptions
from pdfdelta.utils.decorators import requires_dependencies
from pdfdelta.utils.inputs import DocumentInput

if TYPE_CHECKING:
    import fitz

logger = logging.getLogger(__name__)

HighlightKind = Literal["added", "removed"]


def compute_render_scale(page_width: float, available_width: float | None = None, zoom: float = 1.0) -> float:
    """Compute the scale at which a page is rendered.

    The base scale fits the page into ``available_width``, clamped to
    ``[0.6, 1.2]``; it falls back to 1.0 when no usable width is known. Zoom
    is applied on top and the result is capped at 3.0.

    Examples
    --------
    >>> compute_render_scale(600, 300)
    0.6
    >>> compute_render_scale(600, 600, zoom=4)
    3.0

    """
    base_scale = 1.0
    if available_width is not None and page_width > 0:
        fitted = available_width / page_width
        if math.isfinite(fitted) and fitted > 0:
            base_scale = min(max(fitted, MIN_BASE_SCALE), MAX_BASE_SCALE)
    return min(base_scale * zoom, MAX_ZOOMED_SCALE)


class CancellationToken:
    """Thread-safe flag used to stop a render in progress."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, page_index: int | None = None) -> None:
        """Raise ``RenderCancelledError`` if ``cancel`` has been called."""
        if self._event.is_set():
            raise RenderCancelledError(page_index=page_index)


@dataclass(frozen=True)
class PagePreview:
    """One rendered page.

    Parameters
    ----------
    page_index : int
        Zero-based page number
    width, height : int
        Pixel size of the image
    png : bytes
        PNG-encoded image
    highlight_count : int
        Number of highlight rectangles drawn
    scale : float
        Render scale before ``device_scale`` was applied

    """

    page_index: int
    width: int
    height: int
    png: bytes
    highlight_count: int
    scale: float


def _draw_highlight(page: "fitz.Page", rect: HighlightRect, color: tuple[float, float, float], opacity: float) -> None:
    import fitz

    # highlight rects are in displayed (rotated) page space; drawing uses unrotated space
    target = fitz.Rect(rect.left, rect.top, rect.right, rect.bottom) * page.derotation_matrix
    page.draw_rect(target, color=None, fill=color, fill_opacity=opacity, overlay=True)


@requires_dependencies("pdf", DEPS_PDF)
def render_previews(
    document: DocumentInput,
    extraction: Extraction,
    indexes: AbstractSet[int],
    kind: HighlightKind = "added",
    options: PreviewOptions | None = None,
    cancel_token: CancellationToken | None = None,
    password: str | None = None,
) -> Iterator[PagePreview]:
    """Render every page of a document with its changed tokens highlighted.

    Parameters
    ----------
    document : str, Path, bytes or binary stream
        The PDF the extraction was taken from
    extraction : Extraction
        Tokens of that document
    indexes : set of int
        Absolute indexes to highlight
    kind : {"added", "removed"}, default "added"
        Selects the highlight color
    options : PreviewOptions, optional
        Zoom, fit width, pixel density, colors and opacity
    cancel_token : CancellationToken, optional
        Token checked throughout rendering
    password : str, optional
        Password for encrypted documents

    Yields
    ------
    PagePreview
        One preview per page, in page order

    Raises
    ------
    RenderCancelledError
        If ``cancel_token`` is cancelled before rendering completes
    RenderingError
        If a page cannot be rasterized

    """
    import fitz

    options = options or PreviewOptions()
    token = cancel_token or CancellationToken()
    color = options.added_color if kind == "added" else options.removed_color

    token.raise_if_cancelled()
    doc = open_pdf(document, password=password)
    try:
        for page_index in range(doc.page_count):
            token.raise_if_cancelled(page_index)
            page = doc.load_page(page_index)
            width, height = page.rect.width, page.rect.height
            scale = compute_render_scale(width, options.available_width, options.zoom)

            rects = page_highlights(extraction.tokens, indexes, page_index, PageViewport(width, height))
            for rect in rects:
                token.raise_if_cancelled(page_index)
                _draw_highlight(page, rect, color, options.opacity)

            token.raise_if_cancelled(page_index)
            pixel_scale = scale * options.device_scale
            try:
                pixmap = page.get_pixmap(matrix=fitz.Matrix(pixel_scale, pixel_scale), alpha=False)
                png = pixmap.tobytes("png")
            except Exception as e:
                raise RenderingError(
                    f"Failed to render page {page_index + 1}: {e}", page_index=page_index, original_error=e
                ) from e

            logger.debug(f"Rendered page {page_index + 1} at scale {scale:.2f} with {len(rects)} highlight(s)")
            yield PagePreview(
                page_index=page_index,
                width=pixmap.width,
                height=pixmap.height,
                png=png,
                highlight_count=len(rects),
                scale=scale,
            )
    finally:
        doc.close()


def save_previews(previews: Iterable[PagePreview], output_dir: str | Path, prefix: str) -> list[Path]:
    """Write previews as ``<prefix>-page-<n>.png`` files and return their paths."""
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    written = []
    for preview in previews:
        target = output_path / f"{prefix}-page-{preview.page_index + 1:03d}.png"
        target.write_bytes(preview.png)
        written.append(target)
    return written
