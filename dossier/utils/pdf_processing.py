"""
PDF inspection helpers for exported dossiers.

    page_count: Quick page count without full extraction.
    page_sizes_in: Page dimensions in inches.
"""

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pypdf import PdfReader

POINTS_PER_INCH = 72.0

PdfSource = Union[Path, bytes]


def _reader(source: PdfSource) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        return PdfReader(BytesIO(source))
    return PdfReader(str(source))


def page_count(source: PdfSource) -> Optional[int]:
    """Get page count from a PDF path or bytes, or None if unreadable."""
    try:
        return len(_reader(source).pages)
    except Exception:
        return None


def page_sizes_in(source: PdfSource) -> List[Tuple[float, float]]:
    """Return (width, height) of every page in inches."""
    reader = _reader(source)
    return [
        (float(page.mediabox.width) / POINTS_PER_INCH, float(page.mediabox.height) / POINTS_PER_INCH)
        for page in reader.pages
    ]
