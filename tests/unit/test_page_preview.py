"""Unit tests for highlighted page preview rendering."""

import pytest
from fixtures.generators.pdf_test_fixtures import PAGE_WIDTH, create_text_pdf_bytes

from pdfdelta.api import compare_extractions, extract_document
from pdfdelta.exceptions import RenderCancelledError, RenderingError
from pdfdelta.options import PreviewOptions
from pdfdelta.preview import CancellationToken, compute_render_scale, render_previews, save_previews

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.mark.unit
class TestComputeRenderScale:
    """Tests for compute_render_scale()."""

    @pytest.mark.parametrize(
        "page_width,available_width,zoom,expected",
        [
            (600, 300, 1.0, 0.6),
            (600, 600, 1.0, 1.0),
            (600, 900, 1.0, 1.2),
            (600, 480, 1.0, 0.8),
            (600, 600, 4.0, 3.0),
            (600, 900, 2.0, 2.4),
            (600, None, 1.5, 1.5),
            (0, 300, 1.0, 1.0),
            (600, 0, 1.0, 1.0),
        ],
    )
    def test_scale(self, page_width, available_width, zoom, expected):
        """Test clamping of the fitted scale and the zoom cap."""
        assert compute_render_scale(page_width, available_width, zoom) == pytest.approx(expected)


@pytest.mark.unit
class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_not_cancelled(self):
        """Test a fresh token does not raise."""
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancelled(self):
        """Test a cancelled token raises with the page index."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(RenderCancelledError) as exc_info:
            token.raise_if_cancelled(4)
        assert exc_info.value.page_index == 4
        assert isinstance(exc_info.value, RenderingError)


@pytest.mark.unit
@pytest.mark.pdf
class TestRenderPreviews:
    """Tests for render_previews() and save_previews()."""

    @pytest.fixture
    def documents(self):
        baseline = create_text_pdf_bytes([["Invoice Total: 100"], ["Second page"]])
        revised = create_text_pdf_bytes([["Invoice Total: 120"], ["Second page"]])
        return baseline, revised

    def test_renders_every_page(self, documents):
        """Test one PNG per page with highlights only where tokens changed."""
        baseline, revised = documents
        result = compare_extractions(extract_document(baseline), extract_document(revised))
        previews = list(render_previews(revised, result.extraction_b, result.change_set.added))

        assert [preview.page_index for preview in previews] == [0, 1]
        assert [preview.highlight_count for preview in previews] == [1, 0]
        assert all(preview.png.startswith(PNG_SIGNATURE) for preview in previews)
        assert previews[0].scale == 1.0
        assert previews[0].width == pytest.approx(PAGE_WIDTH, abs=1)

    def test_scale_and_device_scale(self, documents):
        """Test zoom and pixel density change the image size."""
        baseline, _ = documents
        extraction = extract_document(baseline)
        options = PreviewOptions(available_width=PAGE_WIDTH * 0.5, device_scale=2.0)
        preview = next(iter(render_previews(baseline, extraction, frozenset(), kind="removed", options=options)))
        assert preview.scale == pytest.approx(0.6)
        assert preview.width == pytest.approx(PAGE_WIDTH * 1.2, abs=2)

    def test_source_file_unchanged(self, documents, temp_dir):
        """Test drawing highlights does not modify the input file."""
        baseline, revised = documents
        path = temp_dir / "revised.pdf"
        path.write_bytes(revised)
        result = compare_extractions(extract_document(baseline), extract_document(path))
        previews = list(render_previews(path, result.extraction_b, result.change_set.added))
        assert previews[0].highlight_count == 1
        assert path.read_bytes() == revised

    def test_cancel_before_start(self, documents):
        """Test a cancelled token stops rendering before the first page."""
        baseline, _ = documents
        token = CancellationToken()
        token.cancel()
        previews = render_previews(baseline, extract_document(baseline), frozenset(), cancel_token=token)
        with pytest.raises(RenderCancelledError):
            next(iter(previews))

    def test_cancel_between_pages(self, documents):
        """Test cancelling mid-document stops before the next page."""
        baseline, _ = documents
        token = CancellationToken()
        previews = render_previews(baseline, extract_document(baseline), frozenset(), cancel_token=token)
        first = next(previews)
        token.cancel()
        with pytest.raises(RenderCancelledError) as exc_info:
            next(previews)
        assert first.page_index == 0
        assert exc_info.value.page_index == 1

    def test_save_previews(self, documents, temp_dir):
        """Test previews are written as numbered PNG files."""
        baseline, _ = documents
        previews = render_previews(baseline, extract_document(baseline), frozenset())
        written = save_previews(previews, temp_dir / "out", prefix="baseline")
        assert [path.name for path in written] == ["baseline-page-001.png", "baseline-page-002.png"]
        assert all(path.read_bytes().startswith(PNG_SIGNATURE) for path in written)
