"""
Rendering Context

Responsibilities:
- Renders documents into themed resume markup (editable and print views)
- Snapshots the editable markup and neutralizes editing-only controls
- Rasterizes the snapshot and slices it into US-letter pages
- Assembles the pages into a PDF

Owns: Resume templates, theme resolution, export geometry, PDF assembly
Never: Changes document content
"""

from dossier.contexts.rendering.compositor import (
    ExportResult,
    export_document,
    export_filename,
    export_markup,
)
from dossier.contexts.rendering.exceptions import (
    RasterizationError,
    RenderTargetNotFoundError,
    ValidationBlockedError,
)
from dossier.contexts.rendering.html_renderer import (
    available_templates,
    render_print_html,
    render_resume_html,
)
from dossier.contexts.rendering.pagination import PageFrame, plan_pages
from dossier.contexts.rendering.rasterizer import PlaywrightRasterizer, Rasterizer

__all__ = [
    "ExportResult",
    "PageFrame",
    "PlaywrightRasterizer",
    "RasterizationError",
    "Rasterizer",
    "RenderTargetNotFoundError",
    "ValidationBlockedError",
    "available_templates",
    "export_document",
    "export_filename",
    "export_markup",
    "plan_pages",
    "render_print_html",
    "render_resume_html",
]
