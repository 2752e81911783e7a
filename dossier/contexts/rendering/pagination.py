"""
Page slicing for tall rasters.

The snapshot is rendered at the page width, so its height in inches is
height_px * page_width_in / width_px. Pages are cut at consecutive multiples
of the page height until the unplaced remainder is within epsilon, which
keeps floating-point residue from producing an extra blank page.
"""

from dataclasses import dataclass
from typing import List

from PIL import Image

from dossier.utils.config import get_setting


@dataclass(frozen=True)
class PageFrame:
    """
    One fixed-size page window over the raster.

    Attributes:
        index: 0-based page number
        top_in: Top edge of the window, in inches from the raster top
        top_px: Top edge in raster pixels
        bottom_px: Bottom edge in raster pixels (may exceed raster height on the last page)
        remaining_in: Unplaced height left after this page (<= epsilon on the last page)
    """

    index: int
    top_in: float
    top_px: int
    bottom_px: int
    remaining_in: float


def plan_pages(
    width_px: int,
    height_px: int,
    page_width_in: float = None,
    page_height_in: float = None,
    epsilon_in: float = None,
) -> List[PageFrame]:
    """
    Plan page frames for a raster of the given pixel size.

    Always yields at least one page.

    Raises:
        ValueError: If width_px is not positive
    """
    if width_px <= 0:
        raise ValueError(f"raster width must be positive, got {width_px}")
    if page_width_in is None:
        page_width_in = get_setting("export.page_width_in")
    if page_height_in is None:
        page_height_in = get_setting("export.page_height_in")
    if epsilon_in is None:
        epsilon_in = get_setting("export.epsilon_in")

    px_per_in = width_px / page_width_in
    image_height_in = height_px / px_per_in

    frames = []
    height_left = image_height_in
    while True:
        index = len(frames)
        top_in = index * page_height_in
        height_left -= page_height_in
        frames.append(
            PageFrame(
                index=index,
                top_in=top_in,
                top_px=round(top_in * px_per_in),
                bottom_px=round((top_in + page_height_in) * px_per_in),
                remaining_in=height_left,
            )
        )
        if height_left <= epsilon_in:
            return frames


def slice_raster(
    image: Image.Image, frames: List[PageFrame], background: str = None
) -> List[Image.Image]:
    """Crop each frame out of the raster onto a full-size page (short last page padded)."""
    if background is None:
        background = get_setting("export.background")
    width = image.width
    pages = []
    for frame in frames:
        page_height = frame.bottom_px - frame.top_px
        page = Image.new("RGB", (width, page_height), background)
        crop = image.crop((0, frame.top_px, width, min(frame.bottom_px, image.height)))
        page.paste(crop.convert("RGB"), (0, 0))
        pages.append(page)
    return pages
