#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/models.py
"""Data model shared by the extraction, diff and rendering stages.

Two independent views of a document's content are produced: the linear
``full_text`` compared by the text diff engine, and the sequence of positioned
``Token`` objects compared by the token alignment engine. The only link
between them and the rendered page is ``Token.absolute_index``.

Models that cross the worker boundary serialize to plain dictionaries with
``to_dict`` and are rebuilt with ``from_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from pdfdelta.constants import TOKEN_SEPARATOR


class DiffMode(str, Enum):
    """Granularity used by the text diff engine."""

    WORD = "word"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"


class SegmentKind(str, Enum):
    """Classification of a text diff segment."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class NormalizedRect:
    """Bounding box expressed as fractions of the page viewport.

    All four values lie in ``[0, 1]``; tokens are only kept when both
    ``width`` and ``height`` are positive.
    """

    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        """Serialize to a plain dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NormalizedRect:
        """Rebuild from ``to_dict`` output."""
        return cls(float(data["x"]), float(data["y"]), float(data["width"]), float(data["height"]))


@dataclass(frozen=True, slots=True)
class Token:
    """One whitespace-collapsed text run extracted from a page.

    Parameters
    ----------
    text : str
        Non-empty, whitespace-collapsed text
    page_index : int
        Zero-based page number
    item_index : int
        Ordinal among the raw runs on the page, skipped runs included.
        Kept for traceability only.
    absolute_index : int
        Dense, zero-based position among kept tokens of the whole document
    rect : NormalizedRect
        Geometry relative to the page viewport at reference scale

    """

    text: str
    page_index: int
    item_index: int
    absolute_index: int
    rect: NormalizedRect

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "text": self.text,
            "pageIndex": self.page_index,
            "itemIndex": self.item_index,
            "absoluteIndex": self.absolute_index,
            "rect": self.rect.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Token:
        """Rebuild from ``to_dict`` output."""
        return cls(
            text=data["text"],
            page_index=int(data["pageIndex"]),
            item_index=int(data["itemIndex"]),
            absolute_index=int(data["absoluteIndex"]),
            rect=NormalizedRect.from_dict(data["rect"]),
        )


@dataclass(frozen=True, slots=True)
class PageMetrics:
    """Viewport size of one page at reference scale."""

    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        """Serialize to a plain dictionary."""
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Extraction:
    """Extraction result for one document.

    Parameters
    ----------
    tokens : tuple of Token
        Tokens in reading order (increasing ``absolute_index``)
    full_text : str
        Token texts joined with a single space
    page_metrics : tuple of PageMetrics
        One entry per page, in page order

    """

    tokens: tuple[Token, ...]
    full_text: str
    page_metrics: tuple[PageMetrics, ...] = ()

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token], page_metrics: Iterable[PageMetrics] = ()) -> Extraction:
        """Build an extraction, deriving ``full_text`` from the tokens."""
        token_tuple = tuple(tokens)
        return cls(
            tokens=token_tuple,
            full_text=TOKEN_SEPARATOR.join(token.text for token in token_tuple),
            page_metrics=tuple(page_metrics),
        )

    @property
    def page_count(self) -> int:
        """Number of pages examined during extraction."""
        return len(self.page_metrics)

    def tokens_on_page(self, page_index: int) -> list[Token]:
        """Return the tokens located on ``page_index``."""
        return [token for token in self.tokens if token.page_index == page_index]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "tokens": [token.to_dict() for token in self.tokens],
            "fullText": self.full_text,
            "pageMetrics": [metrics.to_dict() for metrics in self.page_metrics],
        }


@dataclass(frozen=True, slots=True)
class DiffSegment:
    """A run of text classified as unchanged, added or removed."""

    value: str
    kind: SegmentKind

    @property
    def added(self) -> bool:
        return self.kind is SegmentKind.ADDED

    @property
    def removed(self) -> bool:
        return self.kind is SegmentKind.REMOVED

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain dictionary."""
        return {"value": self.value, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DiffSegment:
        """Rebuild from ``to_dict`` output."""
        return cls(value=data["value"], kind=SegmentKind(data["kind"]))


@dataclass(frozen=True)
class TokenChangeSet:
    """Absolute indexes of tokens present only in A (removed) or only in B (added).

    Indexes are document-local, so the two sets never collide.
    """

    removed: frozenset[int] = frozenset()
    added: frozenset[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.removed and not self.added


@dataclass(frozen=True)
class DiffStats:
    """Word counts of added and removed text."""

    added: int = 0
    removed: int = 0


@dataclass(frozen=True)
class ModeSelection:
    """Outcome of granularity selection: the mode and an optional advisory note."""

    mode: DiffMode
    note: str | None = None


@dataclass(frozen=True)
class ComparisonResult:
    """Packaged result of one comparison job.

    Parameters
    ----------
    text_diff : tuple of DiffSegment
        Linear text diff of the two full texts
    change_set : TokenChangeSet
        Token-level change set used for spatial highlights
    mode : DiffMode
        Granularity the text diff was computed at
    note : str or None
        Advisory note emitted by mode selection
    extraction_a, extraction_b : Extraction or None
        Extractions of the baseline and revised documents

    """

    text_diff: tuple[DiffSegment, ...]
    change_set: TokenChangeSet
    mode: DiffMode
    note: str | None = None
    extraction_a: Extraction | None = None
    extraction_b: Extraction | None = None
    stats: DiffStats = field(default_factory=DiffStats)

    @property
    def has_changes(self) -> bool:
        return not self.change_set.is_empty or any(segment.kind is not SegmentKind.UNCHANGED for segment in self.text_diff)
