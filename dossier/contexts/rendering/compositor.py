"""
Export Compositor

Turns the editable resume markup into a paginated, image-based PDF:

1. Deep-copy the #resume-to-print subtree (the live markup is never mutated)
2. Force the copy to the page width with natural height
3. Remove editing-only controls (buttons, inline errors, spellcheck layers)
4. Replace inputs and textareas with static text carrying the same classes
5. Rasterize the copy at a high scale factor
6. Slice the raster into US-letter page frames
7. Assemble the frames into one PDF in page order
8. Discard the copy, on success and on failure
"""

import copy
import re
import time
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag
from PIL import Image

from dossier.contexts.editing.document import Document
from dossier.contexts.editing.spellcheck import SpellDictionary
from dossier.contexts.editing.validation import validate_document
from dossier.contexts.rendering.exceptions import (
    RasterizationError,
    RenderTargetNotFoundError,
    ValidationBlockedError,
)
from dossier.contexts.rendering.html_renderer import render_resume_html
from dossier.contexts.rendering.logger import (
    _log_debug,
    log_export_result,
    log_export_start,
    log_raster,
)
from dossier.contexts.rendering.pagination import plan_pages, slice_raster
from dossier.contexts.rendering.rasterizer import Rasterizer
from dossier.utils.config import get_setting
from dossier.utils.pdf_processing import page_count

# Controls that only exist for interactive editing
INTERACTIVE_SELECTORS = (
    ".remove-item-button, .add-item-button, .remove-exp-button, .add-exp-button, "
    ".remove-section-button, .add-section-button, .spellcheck-backdrop, .error-text"
)


@dataclass
class ExportResult:
    """
    Result of a PDF export.

    Attributes:
        pdf_bytes: The assembled PDF
        page_count: Number of pages assembled
        filename: Suggested download name
    """

    pdf_bytes: bytes
    page_count: int
    filename: str


def export_filename(name: str) -> str:
    """'Jane  Q Doe' -> 'Jane_Q_Doe_Resume.pdf'"""
    return re.sub(r"\s+", "_", name) + "_Resume.pdf"


# =============================================================================
# SNAPSHOT PREPARATION
# =============================================================================


def _parse_style(style: str) -> Dict[str, str]:
    props = {}
    for declaration in style.split(";"):
        if ":" in declaration:
            name, value = declaration.split(":", 1)
            props[name.strip()] = value.strip()
    return props


def set_style(tag: Tag, **props: str) -> None:
    """Merge CSS properties into a tag's inline style (underscores become hyphens)."""
    style = _parse_style(tag.get("style", ""))
    style.update({name.replace("_", "-"): value for name, value in props.items()})
    tag["style"] = "; ".join(f"{name}: {value}" for name, value in style.items())


def take_snapshot(soup: BeautifulSoup, target_id: str) -> Tag:
    """
    Detached deep copy of the render target.

    Raises:
        RenderTargetNotFoundError: If no element has the target id
    """
    target = soup.find(id=target_id)
    if target is None:
        raise RenderTargetNotFoundError(target_id)
    return copy.copy(target)


def neutralize_snapshot(soup: BeautifulSoup, snapshot: Tag) -> None:
    """Apply export geometry and swap editing controls for static content, in place."""
    set_style(
        snapshot,
        width=f"{get_setting('export.page_width_in')}in",
        height="auto",
        aspect_ratio="auto",
        box_shadow="none",
        margin="0",
    )
    for column in snapshot.select(".resume-right-column"):
        set_style(column, overflow_y="visible", height="auto")

    for element in snapshot.select(INTERACTIVE_SELECTORS):
        element.decompose()

    for textarea in snapshot.find_all("textarea"):
        div = soup.new_tag("div")
        div.string = textarea.get_text()
        if textarea.get("class"):
            div["class"] = textarea["class"]
        set_style(div, white_space="pre-wrap", word_break="break-word")
        textarea.replace_with(div)

    for field in snapshot.find_all("input"):
        span = soup.new_tag("span")
        span.string = field.get("value", "")
        if field.get("class"):
            span["class"] = field["class"]
        set_style(
            span,
            display="block",
            border="none",
            background="transparent",
            padding="0",
            margin="0",
            color="inherit",
            font_family="inherit",
            font_size="inherit",
            font_weight="inherit",
            font_style="inherit",
        )
        field.replace_with(span)


def snapshot_document(soup: BeautifulSoup, snapshot: Tag) -> str:
    """Standalone page holding the page's <head> styles and the prepared snapshot."""
    head = "".join(str(node) for node in soup.head.contents) if soup.head else ""
    return (
        "<!DOCTYPE html>\n<html><head>"
        f"{head}</head><body style=\"margin: 0\">{snapshot}</body></html>"
    )


def prepare_snapshot(markup: str, target_id: str = None) -> Tuple[BeautifulSoup, Tag]:
    """
    Parse markup, copy the render target and neutralize the copy.

    Raises:
        RenderTargetNotFoundError: If the target is not in the markup
    """
    soup = BeautifulSoup(markup, "html.parser")
    snapshot = take_snapshot(soup, target_id or get_setting("export.render_target_id"))
    try:
        neutralize_snapshot(soup, snapshot)
    except Exception:
        snapshot.decompose()
        raise
    return soup, snapshot


# =============================================================================
# ASSEMBLY
# =============================================================================


def assemble_pdf(pages: List[Image.Image], pixels_per_inch: float) -> bytes:
    """Write page images into one PDF; page size follows from the resolution."""
    buffer = BytesIO()
    first, rest = pages[0], pages[1:]
    first.save(
        buffer,
        format="PDF",
        save_all=True,
        append_images=rest,
        resolution=pixels_per_inch,
    )
    return buffer.getvalue()


async def export_markup(
    markup: str,
    rasterizer: Rasterizer,
    filename: str,
    scale: Optional[float] = None,
) -> ExportResult:
    """
    Export resume markup to a paginated PDF.

    The detached snapshot is released whether the export succeeds, fails or
    is cancelled.

    Raises:
        RenderTargetNotFoundError: If the render target is missing
        RasterizationError: If rasterization fails
    """
    if scale is None:
        scale = get_setting("export.raster_scale")
    target_id = get_setting("export.render_target_id")

    soup, snapshot = prepare_snapshot(markup, target_id)
    try:
        html = snapshot_document(soup, snapshot)
        try:
            image = await rasterizer.rasterize(html, f"#{target_id}", scale)
        except RasterizationError:
            raise
        except Exception as e:
            raise RasterizationError("Rasterizer failed", e) from e
    finally:
        snapshot.decompose()

    frames = plan_pages(image.width, image.height)
    pixels_per_inch = image.width / get_setting("export.page_width_in")
    log_raster(image.width, image.height, pixels_per_inch * get_setting("export.page_height_in"))
    pages = slice_raster(image, frames)
    _log_debug(f"  Sliced {len(pages)} page frames")

    return ExportResult(
        pdf_bytes=assemble_pdf(pages, pixels_per_inch),
        page_count=len(pages),
        filename=filename,
    )


async def export_document(
    document: Document,
    rasterizer: Rasterizer,
    template: str = "executive",
    dictionary: Optional[SpellDictionary] = None,
    force: bool = False,
) -> ExportResult:
    """
    Render a document's editing surface and export it to PDF.

    Raises:
        ValidationBlockedError: If the document has validation errors (unless force)
        RenderTargetNotFoundError: If the render target is missing
        RasterizationError: If rasterization fails
    """
    report = validate_document(document)
    if report.has_errors and not force:
        raise ValidationBlockedError(report.messages())

    filename = export_filename(document.contact_info.name)
    log_export_start(filename, template)
    start_time = time.time()

    markup = render_resume_html(document, report, template=template, dictionary=dictionary)
    result = await export_markup(markup, rasterizer, filename)

    log_export_result(filename, page_count(result.pdf_bytes), time.time() - start_time)
    return result
