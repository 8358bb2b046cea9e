#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/renderers/__init__.py
"""Output renderers for comparison results.

Available Renderers
-------------------
- HtmlDiffRenderer: Standalone HTML page with ``<del>``/``<ins>`` markup
- JsonDiffRenderer: Structured JSON including per-page highlight rectangles
- UnifiedDiffRenderer: Inline word-diff text, optionally colorized

Examples
--------
    >>> from pdfdelta import compare_documents
    >>> from pdfdelta.diff.renderers import UnifiedDiffRenderer
    >>> result = compare_documents("v1.pdf", "v2.pdf")
    >>> for line in UnifiedDiffRenderer(use_color=True).render(result):
    ...     print(line)

"""

from pdfdelta.diff.renderers.html import HtmlDiffRenderer
from pdfdelta.diff.renderers.json import JsonDiffRenderer
from pdfdelta.diff.renderers.unified import UnifiedDiffRenderer

__all__ = [
    "HtmlDiffRenderer",
    "JsonDiffRenderer",
    "UnifiedDiffRenderer",
]
