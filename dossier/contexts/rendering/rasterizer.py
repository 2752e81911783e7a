"""
Rasterizers turn a prepared, standalone HTML snapshot into a PIL image.

PlaywrightRasterizer lays the snapshot out in headless Chromium at the
nominal page width and screenshots the target element at a high device
scale factor.
"""

from io import BytesIO
from typing import Protocol

from PIL import Image

from dossier.contexts.rendering.exceptions import RasterizationError
from dossier.utils.config import get_setting


class Rasterizer(Protocol):
    async def rasterize(self, html: str, selector: str, scale: float) -> Image.Image: ...


class PlaywrightRasterizer:
    """Rasterize with headless Chromium (requires `playwright install chromium`)."""

    def __init__(self, timeout_ms: int = 30000):
        self.timeout_ms = timeout_ms

    async def rasterize(self, html: str, selector: str, scale: float) -> Image.Image:
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:
            raise RasterizationError(
                "Playwright is required. Install with: pip install playwright && playwright install chromium",
                e,
            ) from e

        viewport_width = round(get_setting("export.page_width_in") * get_setting("export.css_px_per_in"))
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch()
                try:
                    page = await browser.new_page(
                        viewport={"width": viewport_width, "height": 1000},
                        device_scale_factor=scale,
                    )
                    await page.set_content(html, wait_until="load", timeout=self.timeout_ms)
                    png = await page.locator(selector).screenshot(type="png", timeout=self.timeout_ms)
                finally:
                    await browser.close()
        except Exception as e:
            raise RasterizationError("Failed to rasterize document snapshot", e) from e

        image = Image.open(BytesIO(png))
        image.load()
        return image
