#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/renderers/unified.py
"""Inline word-diff renderer with optional ANSI colors.

Removed text is wrapped as ``[-text-]`` and added text as ``{+text+}``,
the same notation as ``git diff --word-diff=plain``.
"""

from __future__ import annotations

from typing import Iterator

from pdfdelta.models import ComparisonResult, SegmentKind

RED = "\033[31m"
GREEN = "\033[32m"
CYAN = "\033[36m"
BOLD = "\033[1m"
RESET = "\033[0m"


class UnifiedDiffRenderer:
    """Render a comparison as inline word-diff text.

    Parameters
    ----------
    use_color : bool, default = True
        If True, add ANSI color codes to output
    old_label, new_label : str
        Names shown in the header lines

    Examples
    --------
        >>> renderer = UnifiedDiffRenderer(use_color=False)
        >>> for line in renderer.render(result):
        ...     print(line)
        --- a
        +++ b
        @@ word mode: +1 / -0 words @@
        The quick {+brown +}fox

    """

    def __init__(self, use_color: bool = True, old_label: str = "a", new_label: str = "b"):
        """Initialize the unified diff renderer."""
        self.use_color = use_color
        self.old_label = old_label
        self.new_label = new_label

    def _paint(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{RESET}"

    def render_inline(self, result: ComparisonResult) -> str:
        """Return the diff body as a single string."""
        parts = []
        for segment in result.text_diff:
            if segment.kind is SegmentKind.REMOVED:
                parts.append(self._paint(f"[-{segment.value}-]", RED))
            elif segment.kind is SegmentKind.ADDED:
                parts.append(self._paint(f"{{+{segment.value}+}}", GREEN))
            else:
                parts.append(segment.value)
        return "".join(parts)

    def render(self, result: ComparisonResult) -> Iterator[str]:
        """Render header lines followed by the inline diff body.

        Yields
        ------
        str
            Output lines without trailing newlines

        """
        yield self._paint(f"--- {self.old_label}", BOLD)
        yield self._paint(f"+++ {self.new_label}", BOLD)
        stats = result.stats
        yield self._paint(f"@@ {result.mode.value} mode: +{stats.added} / -{stats.removed} words @@", CYAN)
        if result.note:
            yield f"# {result.note}"
        yield from self.render_inline(result).split("\n")
