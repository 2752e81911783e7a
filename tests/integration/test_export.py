"""
Integration tests for PDF export - real resume markup through snapshot,
pagination and PDF assembly, with a raster stand-in for headless Chromium.
"""

import asyncio
import os
from dataclasses import replace
from pathlib import Path

import pytest
from PIL import Image

from dossier.contexts.rendering import PlaywrightRasterizer, ValidationBlockedError, export_document
from dossier.contexts.session import SessionState, Step, run_export
from dossier.utils.pdf_processing import page_count, page_sizes_in

BROWSERS_PATH = Path(os.getenv("PLAYWRIGHT_BROWSERS_PATH") or Path.home() / ".cache" / "ms-playwright")
CHROMIUM_AVAILABLE = any(BROWSERS_PATH.glob("chromium*"))
skip_if_no_chromium = pytest.mark.skipif(
    not CHROMIUM_AVAILABLE,
    reason="chromium not installed - run: playwright install chromium",
)


class TallRasterizer:
    """Returns a white raster 2.3 pages tall (850 px wide, so 100 px per inch)."""

    def __init__(self):
        self.html = None

    async def rasterize(self, html, selector, scale):
        self.html = html
        return Image.new("RGB", (850, 2530), "white")


@pytest.mark.integration
def test_export_document_pages(valid_document):
    """Test that a tall resume exports as US-letter pages in order."""
    rasterizer = TallRasterizer()

    result = asyncio.run(export_document(valid_document, rasterizer, template="modern"))

    assert result.filename == "Jordan_Avery_Resume.pdf"
    assert result.page_count == 3
    assert page_count(result.pdf_bytes) == 3
    for width, height in page_sizes_in(result.pdf_bytes):
        assert width == pytest.approx(8.5, abs=0.01)
        assert height == pytest.approx(11, abs=0.01)

    # The rasterized page is the static snapshot, not the editing surface
    body = rasterizer.html.split("</style>")[1]
    assert "<input" not in body
    assert "<textarea" not in body
    assert "<button" not in body
    assert "Jordan Avery" in body
    assert "template-modern" in body


@pytest.mark.integration
def test_export_blocked_by_validation(valid_document):
    """Test that an invalid document is not exported unless forced."""
    document = replace(valid_document, executive_summary="")

    with pytest.raises(ValidationBlockedError):
        asyncio.run(export_document(document, TallRasterizer()))

    result = asyncio.run(export_document(document, TallRasterizer(), force=True))
    assert result.page_count == 3


@pytest.mark.integration
def test_run_export_session(valid_document):
    """Test the session export boundary for success and failure."""
    state = SessionState(step=Step.PREVIEW, document=valid_document)

    state, result = asyncio.run(run_export(state, TallRasterizer()))
    assert result.page_count == 3
    assert not state.is_exporting
    assert state.error is None

    state, result = asyncio.run(run_export(SessionState(), TallRasterizer()))
    assert result is None
    assert state.error == "There is no dossier to export yet."


@pytest.mark.integration
def test_run_export_reports_failure(valid_document):
    """Test that rasterizer failures become an error banner."""

    class Broken:
        async def rasterize(self, html, selector, scale):
            raise RuntimeError("browser crashed")

    state, result = asyncio.run(run_export(SessionState(step=Step.PREVIEW, document=valid_document), Broken()))

    assert result is None
    assert state.error.startswith("Failed to generate PDF:")
    assert "browser crashed" in state.error
    assert not state.is_exporting


@pytest.mark.integration
@pytest.mark.browser
@skip_if_no_chromium
def test_playwright_export(valid_document):
    """Test a real headless Chromium export of the sample dossier."""
    result = asyncio.run(export_document(valid_document, PlaywrightRasterizer()))

    assert result.page_count >= 1
    width, height = page_sizes_in(result.pdf_bytes)[0]
    assert width == pytest.approx(8.5, abs=0.01)
    assert height == pytest.approx(11, abs=0.01)
