"""
Resume HTML Renderer

Renders a Document into themed resume markup with Jinja2. Two modes:

- editable: the live editing surface (inputs, textareas, spellcheck
  backdrops, inline errors, add/remove buttons). This is the tree the export
  compositor snapshots.
- static: print-ready markup with markdown fields rendered and no editing
  controls.
"""

import re
from pathlib import Path
from typing import Dict, Optional

import markdown
from markupsafe import Markup

from dossier.contexts.editing.document import Document, Theme
from dossier.contexts.editing.spellcheck import SpellDictionary, find_misspellings, render_overlay
from dossier.contexts.editing.validation import ValidationReport, validate_document
from dossier.contexts.rendering.exceptions import ValidationBlockedError
from dossier.utils.config import get_setting
from dossier.utils.templates import TemplateRegistry

TEMPLATES_PATH = Path(__file__).parent / "templates"
RESUME_TEMPLATE = "resume.html.jinja"

# Hex, named, or rgb()/rgba() colors; anything else falls back to the default
_COLOR_PATTERN = re.compile(r"^(#[0-9A-Fa-f]{3,8}|[A-Za-z]+|rgba?\([\d\s.,%]+\))$")
_PARAGRAPH_TAGS = re.compile(r"</?p>")

_registry = TemplateRegistry(TEMPLATES_PATH)


def available_templates() -> Dict[str, str]:
    """Template name -> description."""
    return dict(get_setting("templates"))


def _color(value: Optional[str], default: str) -> str:
    if value and _COLOR_PATTERN.match(value.strip()):
        return value.strip()
    return default


def theme_variables(theme: Optional[Theme]) -> Dict[str, str]:
    """
    Resolve the CSS custom properties for a theme.

    Absent themes, absent slots and unusable color strings all fall back to
    the theme.defaults settings.
    """
    defaults = get_setting("theme.defaults")
    theme = theme or Theme()
    return {
        "--resume-left-bg": _color(theme.primary_color, defaults["primary_color"]),
        "--resume-left-text": _color(theme.text_color, defaults["text_color"]),
        "--resume-right-bg": _color(theme.background_color, defaults["background_color"]),
        "--resume-right-text": defaults["body_text_color"],
        "--resume-header-text": _color(theme.header_color, defaults["header_color"]),
        "--resume-accent-line": _color(theme.accent_color, defaults["accent_line_color"]),
        "--accent-gold": _color(theme.accent_color, defaults["accent_color"]),
    }


def theme_style(theme: Optional[Theme]) -> str:
    return "; ".join(f"{name}: {value}" for name, value in theme_variables(theme).items())


def inline_markdown(text: str) -> Markup:
    """Render a markdown field without wrapping paragraphs."""
    return Markup(_PARAGRAPH_TAGS.sub("", markdown.markdown(text)))


def render_resume_html(
    document: Document,
    report: Optional[ValidationReport] = None,
    template: str = "executive",
    editable: bool = True,
    show_spellcheck: bool = True,
    dictionary: Optional[SpellDictionary] = None,
) -> str:
    """
    Render the full resume page.

    Args:
        document: Document to render
        report: Validation report to annotate (editable mode; computed if omitted)
        template: One of available_templates()
        editable: Live editing surface (True) or static print view (False)
        show_spellcheck: Show the spellcheck highlight layers
        dictionary: Spell dictionary for the highlight layers (None = no highlights)

    Raises:
        ValueError: If template is unknown
    """
    if template not in available_templates():
        raise ValueError(f"Unknown template: {template}. Use one of {', '.join(available_templates())}")
    if report is None:
        report = validate_document(document) if editable else ValidationReport()

    overlay_dictionary = dictionary if show_spellcheck else None

    def overlay(text: str, multiline: bool = False) -> Markup:
        return Markup(render_overlay(find_misspellings(text, overlay_dictionary), multiline))

    return _registry.render(
        RESUME_TEMPLATE,
        doc=document,
        errors=report,
        template=template,
        editable=editable,
        show_spellcheck=show_spellcheck,
        theme_style=theme_style(document.theme),
        target_id=get_setting("export.render_target_id"),
        overlay=overlay,
        md=inline_markdown,
    )


def render_print_html(document: Document, template: str = "executive") -> str:
    """
    Render the static print view.

    Raises:
        ValidationBlockedError: If the document has validation errors
    """
    report = validate_document(document)
    if report.has_errors:
        raise ValidationBlockedError(report.messages())
    return render_resume_html(document, report, template=template, editable=False)
