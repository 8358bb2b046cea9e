#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/renderers/json.py
"""JSON renderer for comparison results.

The output carries everything needed to draw highlights elsewhere: the text
diff segments, the changed token indexes and, per page, the normalized
rectangles of the changed tokens.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable

from pdfdelta.models import ComparisonResult, Extraction


def _page_rects(extraction: Extraction | None, indexes: Iterable[int]) -> Dict[str, list[Dict[str, Any]]]:
    if extraction is None:
        return {}
    wanted = set(indexes)
    pages: Dict[str, list[Dict[str, Any]]] = {}
    for token in extraction.tokens:
        if token.absolute_index in wanted:
            pages.setdefault(str(token.page_index), []).append(
                {"absoluteIndex": token.absolute_index, "text": token.text, **token.rect.to_dict()}
            )
    return pages


class JsonDiffRenderer:
    """Render a comparison result as JSON.

    Parameters
    ----------
    pretty_print : bool, default = True
        If True, format JSON with indentation
    indent : int, default = 2
        Number of spaces for indentation (if pretty_print=True)

    """

    def __init__(self, pretty_print: bool = True, indent: int = 2):
        """Initialize the JSON diff renderer."""
        self.pretty_print = pretty_print
        self.indent = indent

    def to_data(self, result: ComparisonResult) -> Dict[str, Any]:
        """Build the JSON-compatible dictionary for ``result``."""
        removed = sorted(result.change_set.removed)
        added = sorted(result.change_set.added)
        return {
            "type": "pdf_diff",
            "mode": result.mode.value,
            "note": result.note,
            "statistics": {
                "words_added": result.stats.added,
                "words_removed": result.stats.removed,
                "tokens_added": len(added),
                "tokens_removed": len(removed),
            },
            "segments": [segment.to_dict() for segment in result.text_diff],
            "removedIndexes": removed,
            "addedIndexes": added,
            "highlights": {
                "baseline": _page_rects(result.extraction_a, removed),
                "revised": _page_rects(result.extraction_b, added),
            },
        }

    def render(self, result: ComparisonResult) -> str:
        """Render ``result`` to a JSON string."""
        data = self.to_data(result)
        if self.pretty_print:
            return json.dumps(data, indent=self.indent, ensure_ascii=False)
        return json.dumps(data, ensure_ascii=False)
