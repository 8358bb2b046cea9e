#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/renderers/html.py
"""HTML renderer for comparison results.

Produces a standalone page with summary statistics, a table of the pages
holding changed tokens, and the full text diff with removed runs as
``<del>`` and added runs as ``<ins>``. Long unchanged runs can be collapsed
into ``<details>`` blocks when ``show_context`` is False.
"""

from __future__ import annotations

from html import escape
from io import StringIO

from pdfdelta.models import ComparisonResult, SegmentKind

_COLLAPSE_THRESHOLD = 240


class HtmlDiffRenderer:
    """Render a comparison result as visual HTML.

    Parameters
    ----------
    show_context : bool, default = True
        If True, show unchanged text in full; when False, long unchanged
        runs are collapsible
    inline_styles : bool, default = True
        If True, include CSS styles in the output
    title : str, default "Document Diff"
        Page title and heading

    Examples
    --------
        >>> html = HtmlDiffRenderer().render(result)
        >>> with open("diff.html", "w", encoding="utf-8") as f:
        ...     f.write(html)

    """

    def __init__(self, show_context: bool = True, inline_styles: bool = True, title: str = "Document Diff"):
        """Initialize the HTML diff renderer."""
        self.show_context = show_context
        self.inline_styles = inline_styles
        self.title = title

    def render(self, result: ComparisonResult) -> str:
        """Render ``result`` to an HTML string."""
        output = StringIO()
        self._write_html_prefix(output)
        self._render_summary(result, output)
        self._render_page_table(result, output)
        self._render_body(result, output)
        self._write_html_suffix(output)
        return output.getvalue()

    def _write_html_prefix(self, output: StringIO) -> None:
        """Write the static HTML prefix and container."""
        output.write("<!DOCTYPE html>\n")
        output.write("<html lang='en'>\n")
        output.write("<head>\n")
        output.write("  <meta charset='UTF-8'>\n")
        output.write("  <meta name='viewport' content='width=device-width, initial-scale=1.0'>\n")
        output.write(f"  <title>{escape(self.title)}</title>\n")

        if self.inline_styles:
            output.write("  <style>\n")
            output.write(self._get_css())
            output.write("  </style>\n")

        output.write("</head>\n")
        output.write("<body>\n")
        output.write("  <div class='container'>\n")
        output.write(f"    <h1>{escape(self.title)}</h1>\n")

    def _write_html_suffix(self, output: StringIO) -> None:
        output.write("  </div>\n")
        output.write("</body>\n")
        output.write("</html>\n")

    def _get_css(self) -> str:
        return """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 1200px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f5f5f5;
        }
        .container {
            background-color: white;
            padding: 30px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h1 {
            color: #2c3e50;
            border-bottom: 3px solid #3498db;
            padding-bottom: 10px;
        }
        .diff-summary {
            background-color: #f0f4ff;
            border: 1px solid #cbd7f7;
            border-radius: 6px;
            padding: 12px 16px;
            margin-bottom: 20px;
        }
        .diff-summary dl {
            display: grid;
            grid-template-columns: max-content 1fr;
            gap: 4px 16px;
            margin: 0;
        }
        .diff-summary dt {
            font-weight: 600;
            color: #51658a;
        }
        .diff-note {
            color: #8a6d3b;
            font-style: italic;
        }
        .diff-text {
            white-space: pre-wrap;
            word-break: break-word;
        }
        ins {
            background-color: #e6ffed;
            color: #116329;
            text-decoration: none;
        }
        del {
            background-color: #ffeef0;
            color: #82071e;
        }
        .diff-pages {
            border-collapse: collapse;
            margin-bottom: 20px;
        }
        .diff-pages th, .diff-pages td {
            border: 1px solid #dde3ee;
            padding: 4px 12px;
            text-align: right;
        }
        details.diff-context-collapsed {
            display: inline;
            color: #5b6b7f;
        }
        """

    def _render_summary(self, result: ComparisonResult, output: StringIO) -> None:
        output.write("    <section class='diff-summary'>\n")
        output.write("      <dl>\n")
        rows = [
            ("Mode", result.mode.value),
            ("Words added", str(result.stats.added)),
            ("Words removed", str(result.stats.removed)),
            ("Tokens added", str(len(result.change_set.added))),
            ("Tokens removed", str(len(result.change_set.removed))),
        ]
        for label, value in rows:
            output.write(f"        <dt>{escape(label)}</dt><dd>{escape(value)}</dd>\n")
        output.write("      </dl>\n")
        if result.note:
            output.write(f"      <p class='diff-note'>{escape(result.note)}</p>\n")
        output.write("    </section>\n")

    def _render_page_table(self, result: ComparisonResult, output: StringIO) -> None:
        """List the pages holding changed tokens, one row per page."""
        counts: dict[int, list[int]] = {}
        for extraction, indexes, column in (
            (result.extraction_a, result.change_set.removed, 0),
            (result.extraction_b, result.change_set.added, 1),
        ):
            if extraction is None:
                continue
            for token in extraction.tokens:
                if token.absolute_index in indexes:
                    counts.setdefault(token.page_index, [0, 0])[column] += 1
        if not counts:
            return

        output.write("    <table class='diff-pages'>\n")
        output.write("      <tr><th>Page</th><th>Removed tokens</th><th>Added tokens</th></tr>\n")
        for page_index in sorted(counts):
            removed, added = counts[page_index]
            output.write(f"      <tr><td>{page_index + 1}</td><td>{removed}</td><td>{added}</td></tr>\n")
        output.write("    </table>\n")

    def _render_body(self, result: ComparisonResult, output: StringIO) -> None:
        if not result.has_changes:
            output.write("    <p><em>No differences found.</em></p>\n")

        output.write("    <div class='diff-text'>")
        for segment in result.text_diff:
            text = escape(segment.value)
            if segment.kind is SegmentKind.REMOVED:
                output.write(f"<del>{text}</del>")
            elif segment.kind is SegmentKind.ADDED:
                output.write(f"<ins>{text}</ins>")
            elif not self.show_context and len(segment.value) > _COLLAPSE_THRESHOLD:
                output.write(
                    "<details class='diff-context-collapsed'>"
                    f"<summary>{len(segment.value)} unchanged characters</summary>{text}</details>"
                )
            else:
                output.write(text)
        output.write("</div>\n")
