#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/highlights.py
"""Project changed tokens onto rendered pages.

The token change set and the extraction geometry meet here: a token is
highlighted when its ``absolute_index`` is in the change set, and its
normalized rectangle is scaled to the viewport of the page as currently
rendered. Nothing is cached, so a new zoom or container width only needs a
new ``PageViewport``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, Literal

from pdfdelta.models import ComparisonResult, Token

Side = Literal["baseline", "revised"]


@dataclass(frozen=True)
class PageViewport:
    """Size of a page as rendered, in output units (pixels or points)."""

    width: float
    height: float

    def scaled(self, factor: float) -> PageViewport:
        return PageViewport(self.width * factor, self.height * factor)


@dataclass(frozen=True)
class HighlightRect:
    """Highlight rectangle in viewport coordinates (origin top-left)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> dict[str, float]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


def project(token: Token, viewport: PageViewport) -> HighlightRect:
    """Scale a token's normalized rectangle to ``viewport``."""
    rect = token.rect
    return HighlightRect(
        left=rect.x * viewport.width,
        top=rect.y * viewport.height,
        width=rect.width * viewport.width,
        height=rect.height * viewport.height,
    )


def page_highlights(
    tokens: Iterable[Token],
    indexes: AbstractSet[int],
    page_index: int,
    viewport: PageViewport,
) -> list[HighlightRect]:
    """Return highlight rectangles for changed tokens on one page.

    Parameters
    ----------
    tokens : iterable of Token
        All tokens of one document
    indexes : set of int
        Absolute indexes to highlight (``removed`` or ``added``)
    page_index : int
        Zero-based page being drawn
    viewport : PageViewport
        Current size of that page

    Returns
    -------
    list of HighlightRect
        In token order

    """
    if not indexes:
        return []
    return [
        project(token, viewport)
        for token in tokens
        if token.page_index == page_index and token.absolute_index in indexes
    ]


def highlights_for_side(
    result: ComparisonResult,
    side: Side,
    page_index: int,
    viewport: PageViewport,
) -> list[HighlightRect]:
    """Return highlights for one side of a comparison.

    The baseline side shows tokens of document A that were removed; the
    revised side shows tokens of document B that were added.

    Raises
    ------
    ValueError
        If ``side`` is not "baseline" or "revised"

    """
    if side == "baseline":
        extraction, indexes = result.extraction_a, result.change_set.removed
    elif side == "revised":
        extraction, indexes = result.extraction_b, result.change_set.added
    else:
        raise ValueError(f"side must be 'baseline' or 'revised', got {side!r}")

    if extraction is None:
        return []
    return page_highlights(extraction.tokens, indexes, page_index, viewport)
