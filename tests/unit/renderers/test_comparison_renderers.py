"""Unit tests for the unified, JSON and HTML comparison renderers."""

import json

import pytest
from utils import make_extraction

from pdfdelta.api import compare_extractions
from pdfdelta.diff.renderers import HtmlDiffRenderer, JsonDiffRenderer, UnifiedDiffRenderer
from pdfdelta.diff.renderers.unified import GREEN, RED, RESET
from pdfdelta.models import ComparisonResult, DiffMode, DiffSegment, SegmentKind, TokenChangeSet


@pytest.fixture
def changed_result() -> ComparisonResult:
    """Provide a result with one removed and one added token."""
    return compare_extractions(
        make_extraction(["Invoice", "Total:", "100"]),
        make_extraction(["Invoice", "Total:", "120"]),
    )


@pytest.fixture
def unchanged_result() -> ComparisonResult:
    """Provide a result without differences."""
    extraction = make_extraction(["Invoice", "Total:", "100"])
    return compare_extractions(extraction, extraction)


@pytest.mark.unit
class TestUnifiedDiffRenderer:
    """Tests for UnifiedDiffRenderer."""

    def test_plain_output(self, changed_result):
        """Test headers and inline markers without colors."""
        lines = list(UnifiedDiffRenderer(use_color=False, old_label="v1.pdf", new_label="v2.pdf").render(changed_result))
        assert lines == [
            "--- v1.pdf",
            "+++ v2.pdf",
            "@@ word mode: +1 / -1 words @@",
            "Invoice Total: [-100-]{+120+}",
        ]

    def test_colored_markers(self, changed_result):
        """Test removed and added runs are colored."""
        body = UnifiedDiffRenderer(use_color=True).render_inline(changed_result)
        assert f"{RED}[-100-]{RESET}" in body
        assert f"{GREEN}{{+120+}}{RESET}" in body

    def test_note_line(self):
        """Test an advisory note is printed as a comment line."""
        result = ComparisonResult(
            text_diff=(DiffSegment("Same.", SegmentKind.UNCHANGED),),
            change_set=TokenChangeSet(),
            mode=DiffMode.SENTENCE,
            note="Compared at sentence level.",
        )
        lines = list(UnifiedDiffRenderer(use_color=False).render(result))
        assert lines[2] == "@@ sentence mode: +0 / -0 words @@"
        assert lines[3] == "# Compared at sentence level."

    def test_multiline_body(self):
        """Test body lines are split on newlines."""
        result = ComparisonResult(
            text_diff=(DiffSegment("one\n", SegmentKind.UNCHANGED), DiffSegment("two\n", SegmentKind.ADDED)),
            change_set=TokenChangeSet(),
            mode=DiffMode.PARAGRAPH,
        )
        lines = list(UnifiedDiffRenderer(use_color=False).render(result))
        assert lines[3:] == ["one", "{+two", "+}"]


@pytest.mark.unit
class TestJsonDiffRenderer:
    """Tests for JsonDiffRenderer."""

    def test_structure(self, changed_result):
        """Test the rendered JSON holds segments, indexes and highlights."""
        data = json.loads(JsonDiffRenderer().render(changed_result))
        assert data["type"] == "pdf_diff"
        assert data["mode"] == "word"
        assert data["note"] is None
        assert data["statistics"] == {"words_added": 1, "words_removed": 1, "tokens_added": 1, "tokens_removed": 1}
        assert data["removedIndexes"] == [2]
        assert data["addedIndexes"] == [2]
        assert [segment["kind"] for segment in data["segments"]] == ["unchanged", "removed", "added"]

    def test_highlights_grouped_by_page(self, changed_result):
        """Test highlight rectangles are keyed by page index."""
        data = JsonDiffRenderer().to_data(changed_result)
        revised = data["highlights"]["revised"]
        assert list(revised) == ["0"]
        rect = revised["0"][0]
        assert rect["absoluteIndex"] == 2
        assert rect["text"] == "120"
        assert set(rect) == {"absoluteIndex", "text", "x", "y", "width", "height"}

    def test_compact_output(self, unchanged_result):
        """Test compact output has no newlines."""
        output = JsonDiffRenderer(pretty_print=False).render(unchanged_result)
        assert "\n" not in output
        assert json.loads(output)["highlights"] == {"baseline": {}, "revised": {}}


@pytest.mark.unit
class TestHtmlDiffRenderer:
    """Tests for HtmlDiffRenderer."""

    def test_del_and_ins(self, changed_result):
        """Test removed and added runs use del and ins elements."""
        html = HtmlDiffRenderer().render(changed_result)
        assert html.startswith("<!DOCTYPE html>")
        assert "<del>100</del>" in html
        assert "<ins>120</ins>" in html
        assert "No differences found." not in html

    def test_no_differences(self, unchanged_result):
        """Test the no-differences message for identical documents."""
        html = HtmlDiffRenderer().render(unchanged_result)
        assert "No differences found." in html
        assert "<del>" not in html and "<ins>" not in html

    def test_escapes_text(self):
        """Test document text is HTML-escaped."""
        result = ComparisonResult(
            text_diff=(DiffSegment("<b>&", SegmentKind.ADDED),),
            change_set=TokenChangeSet(added=frozenset({0})),
            mode=DiffMode.WORD,
        )
        html = HtmlDiffRenderer().render(result)
        assert "<ins>&lt;b&gt;&amp;</ins>" in html

    def test_collapse_long_context(self):
        """Test long unchanged runs collapse when context is hidden."""
        long_text = "unchanged " * 40
        result = ComparisonResult(
            text_diff=(DiffSegment(long_text, SegmentKind.UNCHANGED), DiffSegment("new", SegmentKind.ADDED)),
            change_set=TokenChangeSet(added=frozenset({40})),
            mode=DiffMode.WORD,
        )
        assert "<details" not in HtmlDiffRenderer(show_context=True).render(result)
        collapsed = HtmlDiffRenderer(show_context=False).render(result)
        assert f"<summary>{len(long_text)} unchanged characters</summary>" in collapsed

    def test_note_and_title(self):
        """Test the title and advisory note appear in the page."""
        result = ComparisonResult(
            text_diff=(DiffSegment("x", SegmentKind.UNCHANGED),),
            change_set=TokenChangeSet(),
            mode=DiffMode.PARAGRAPH,
            note="Paragraph level.",
        )
        html = HtmlDiffRenderer(title="Contract changes").render(result)
        assert "Contract changes" in html
        assert "<p class='diff-note'>Paragraph level.</p>" in html

    def test_page_table(self):
        """Test changed token counts are listed per page."""
        result = compare_extractions(
            make_extraction(["Cover"], ["Total", "100"]),
            make_extraction(["Cover"], ["Total", "120", "net"]),
        )
        html = HtmlDiffRenderer().render(result)
        assert "<tr><td>2</td><td>1</td><td>2</td></tr>" in html
        assert "<tr><td>1</td>" not in html

    def test_no_page_table_without_changes(self, unchanged_result):
        """Test the page table is omitted when nothing changed."""
        assert "<table class='diff-pages'>" not in HtmlDiffRenderer().render(unchanged_result)
