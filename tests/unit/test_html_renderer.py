"""Unit tests for resume HTML rendering and themes."""

from dataclasses import replace

import pytest

from dossier.contexts.editing.document import Theme
from dossier.contexts.rendering import ValidationBlockedError, available_templates, render_print_html, render_resume_html
from dossier.contexts.rendering.html_renderer import inline_markdown, theme_variables
from dossier.utils.config import get_setting


class FlagEverything:
    """Dictionary that knows only the word 'Jordan'."""

    def check(self, word):
        return word == "Jordan"

    def suggest(self, word, limit):
        return []


@pytest.mark.unit
def test_available_templates():
    """Test the three layouts are offered."""
    assert list(available_templates()) == ["executive", "modern", "classic"]


@pytest.mark.unit
def test_theme_defaults_and_overrides():
    """Test that unset and invalid colors fall back to defaults."""
    defaults = get_setting("theme.defaults")

    variables = theme_variables(Theme(primary_color="#263238", header_color="red; x: y"))

    assert variables["--resume-left-bg"] == "#263238"
    assert variables["--resume-header-text"] == defaults["header_color"]
    assert variables["--accent-gold"] == defaults["accent_color"]
    assert theme_variables(None)["--resume-left-bg"] == defaults["primary_color"]


@pytest.mark.unit
def test_accent_drives_accent_line():
    """Test that a custom accent color also colors the accent line."""
    variables = theme_variables(Theme(accent_color="#008080"))
    assert variables["--resume-accent-line"] == "#008080"
    assert variables["--accent-gold"] == "#008080"


@pytest.mark.unit
def test_editable_render(valid_document):
    """Test the editing surface: target id, template class, inputs and controls."""
    html = render_resume_html(valid_document, template="modern")

    assert f'id="{get_setting("export.render_target_id")}"' in html
    assert "template-modern" in html
    assert 'value="Jordan Avery"' in html
    assert "<textarea" in html
    assert "remove-exp-button" in html
    assert "--resume-left-bg: #263238" in html
    assert "Foundational Leadership Experience" in html


@pytest.mark.unit
def test_editable_render_shows_errors(valid_document):
    """Test that validation errors appear inline."""
    document = replace(valid_document, executive_summary="")
    html = render_resume_html(document)
    assert "Executive Summary is required." in html
    assert 'aria-invalid="true"' in html


@pytest.mark.unit
def test_spellcheck_overlay_toggle(valid_document):
    """Test that highlights render only when spellcheck is shown."""
    html = render_resume_html(valid_document, dictionary=FlagEverything())
    assert 'class="spellcheck-error" data-word="Avery"' in html

    html = render_resume_html(valid_document, dictionary=FlagEverything(), show_spellcheck=False)
    assert "spellcheck-error" not in html.split("</style>")[1]
    assert "spellcheck-hidden" in html


@pytest.mark.unit
def test_absent_sections_offer_add(valid_document):
    """Test that an absent licenses section shows an add control and no fields."""
    document = replace(valid_document, licenses=None, foundational_experience=None)
    html = render_resume_html(document)
    assert "add-section-button" in html
    assert 'name="licenses-title"' not in html
    assert "Foundational Leadership Experience" not in html


@pytest.mark.unit
def test_unknown_template(valid_document):
    """Test that unknown template names are rejected."""
    with pytest.raises(ValueError):
        render_resume_html(valid_document, template="retro")


@pytest.mark.unit
def test_print_view_is_static(valid_document):
    """Test that the print view has no editing controls and renders markdown."""
    html = render_print_html(valid_document, template="classic")
    body = html.split("</style>")[1]
    assert "<input" not in body
    assert "<textarea" not in body
    assert "button" not in body
    assert "<strong>15 years</strong>" in body


@pytest.mark.unit
def test_print_view_blocked_by_errors(valid_document):
    """Test that printing is refused while the document is invalid."""
    with pytest.raises(ValidationBlockedError) as exc_info:
        render_print_html(replace(valid_document, executive_summary=" "))
    assert "executiveSummary: Executive Summary is required." in exc_info.value.messages


@pytest.mark.unit
def test_inline_markdown_has_no_paragraphs():
    """Test that inline fields render emphasis without <p> wrappers."""
    assert str(inline_markdown("Led **12** teams")) == "Led <strong>12</strong> teams"


@pytest.mark.unit
def test_static_view_renders_invalid_documents(valid_document):
    """Test that the read-only view renders an invalid document without controls or errors."""
    document = replace(valid_document, executive_summary=" ")

    body = render_resume_html(document, editable=False).split("</style>")[1]

    assert "<input" not in body
    assert "+ Add" not in body
    assert "error-text" not in body
    assert "Jordan Avery" in body
