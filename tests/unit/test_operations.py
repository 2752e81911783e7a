"""Unit tests for immutable edit operations."""

from dataclasses import replace
from functools import partial

import pytest

from dossier.contexts.editing import ExperienceSection, apply_edits, validate_document
from dossier.contexts.editing import operations as ops
from dossier.contexts.editing.validation import MESSAGES


@pytest.mark.unit
def test_edits_do_not_mutate(valid_document):
    """Test that operations return new documents and leave the input alone."""
    updated = ops.set_contact_field(valid_document, "name", "Sam Lee")
    assert updated.contact_info.name == "Sam Lee"
    assert valid_document.contact_info.name == "Jordan Avery"


@pytest.mark.unit
def test_unknown_field_names(valid_document):
    """Test that unknown field names are rejected."""
    with pytest.raises(KeyError):
        ops.set_contact_field(valid_document, "fax", "123")
    with pytest.raises(KeyError):
        ops.set_theme_color(valid_document, "border_color", "#000000")


@pytest.mark.unit
def test_remove_competency_repacks_errors(valid_document):
    """Test that removing an item shifts the remaining errors with it."""
    document = ops.set_competency(valid_document, 1, "")
    document = ops.set_competency(document, 0, "A")
    document = ops.set_competency(document, 2, "C")
    assert document.core_competencies == ("A", "", "C")

    document = ops.remove_competency(document, 0)

    assert document.core_competencies == ("", "C")
    report = validate_document(document)
    assert report.competency_error(0) == MESSAGES["competency"]
    assert report.competency_error(1) is None


@pytest.mark.unit
def test_out_of_range_index(valid_document):
    """Test that bad indices raise IndexError, negatives included."""
    with pytest.raises(IndexError):
        ops.remove_competency(valid_document, 3)
    with pytest.raises(IndexError):
        ops.set_competency(valid_document, -1, "x")
    with pytest.raises(IndexError):
        ops.set_point(valid_document, ExperienceSection.PROFESSIONAL, 0, 9, "x")


@pytest.mark.unit
def test_add_and_edit_experience(valid_document):
    """Test adding a block and filling it in."""
    section = ExperienceSection.PROFESSIONAL
    document = ops.add_experience(valid_document, section)
    index = len(document.professional_experience) - 1
    assert document.professional_experience[index].points == ("",)

    document = ops.set_experience_field(document, section, index, "role", "Consultant")
    document = ops.set_point(document, section, index, 0, "Advised clients.")
    document = ops.add_point(document, section, index)
    document = ops.remove_point(document, section, index, 1)

    block = document.professional_experience[index]
    assert block.role == "Consultant"
    assert block.points == ("Advised clients.",)


@pytest.mark.unit
def test_add_experience_creates_absent_section(valid_document):
    """Test that adding to an absent foundational section creates it."""
    document = ops.remove_experience(valid_document, ExperienceSection.FOUNDATIONAL, 0)
    assert document.foundational_experience == ()

    document = ops.add_experience(replace(document, foundational_experience=None), "foundational")
    assert len(document.foundational_experience) == 1


@pytest.mark.unit
def test_licenses_lifecycle(valid_document):
    """Test add, edit and remove of the optional licenses section."""
    document = ops.remove_licenses(valid_document)
    assert document.licenses is None
    with pytest.raises(ValueError):
        ops.set_license_field(document, "title", "Certs")

    document = ops.add_licenses(document)
    assert document.licenses.title == "Licenses & Certifications"
    assert validate_document(document).licenses.values == MESSAGES["license_values"]

    document = ops.set_license_field(document, "values", "24, 7, 63")
    assert document.licenses.values == ("24", "7", "63")
    assert validate_document(document).licenses is None


@pytest.mark.unit
def test_theme_starts_from_defaults(valid_document):
    """Test that setting one color on an absent theme fills the rest from defaults."""
    document = ops.set_theme_color(replace(valid_document, theme=None), "accent_color", "#C62828")
    assert document.theme.accent_color == "#C62828"
    assert document.theme.primary_color == ops.default_theme().primary_color


@pytest.mark.unit
def test_apply_edits_last_write_wins(valid_document):
    """Test that edits apply in order."""
    document = apply_edits(
        valid_document,
        [
            partial(ops.set_executive_summary, value="First"),
            partial(ops.set_executive_summary, value="Second"),
            ops.add_competency,
        ],
    )
    assert document.executive_summary == "Second"
    assert document.core_competencies[-1] == ""
