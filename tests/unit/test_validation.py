"""Unit tests for dossier validation."""

from dataclasses import replace

import pytest

from dossier.contexts.editing import validate_document
from dossier.contexts.editing.document import ExperienceBlock, Licenses
from dossier.contexts.editing.validation import MESSAGES, validate_email, validate_linkedin


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("a@b.com", None),
        ("a@b", MESSAGES["email_format"]),
        ("has space@b.com", MESSAGES["email_format"]),
        ("a@b.com\n", MESSAGES["email_format"]),
        ("", MESSAGES["email"]),
        ("   ", MESSAGES["email"]),
    ],
)
def test_validate_email(value, expected):
    """Test required and format checks for email."""
    assert validate_email(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://www.linkedin.com/in/jdoe", None),
        ("https://linkedin.com/company/acme", None),
        ("https://www.linkedin.com/in/jane doe", None),
        ("https://example.com/in/jdoe", MESSAGES["linkedin_host"]),
        ("not a url", MESSAGES["linkedin_format"]),
        ("linkedin.com/in/jdoe", MESSAGES["linkedin_format"]),
        ("", MESSAGES["linkedin"]),
    ],
)
def test_validate_linkedin(value, expected):
    """Test that LinkedIn URLs must be absolute with a linkedin.com host."""
    assert validate_linkedin(value) == expected


@pytest.mark.unit
def test_valid_document_has_no_errors(valid_document):
    """Test that the sample dossier is valid."""
    report = validate_document(valid_document)
    assert not report.has_errors
    assert report.messages() == []


@pytest.mark.unit
def test_validation_is_deterministic(valid_document):
    """Test that equal documents produce equal reports."""
    broken = replace(valid_document, executive_summary="")
    assert validate_document(broken) == validate_document(broken)


@pytest.mark.unit
def test_contact_errors(valid_document):
    """Test per-field contact errors."""
    contact = replace(valid_document.contact_info, name=" ", email="a@b", phone="")
    report = validate_document(replace(valid_document, contact_info=contact))

    assert report.contact_info == {
        "name": MESSAGES["name"],
        "email": MESSAGES["email_format"],
        "phone": MESSAGES["phone"],
    }
    assert report.has_errors


@pytest.mark.unit
def test_competency_errors(valid_document):
    """Test list-level and per-item competency errors."""
    report = validate_document(replace(valid_document, core_competencies=()))
    assert report.core_competencies == MESSAGES["competencies"]

    report = validate_document(replace(valid_document, core_competencies=("A", "", "C")))
    assert report.core_competencies is None
    assert report.competency_error(0) is None
    assert report.competency_error(1) == MESSAGES["competency"]
    assert report.competency_error(2) is None


@pytest.mark.unit
def test_experience_errors(valid_document):
    """Test that block errors line up with block and point positions."""
    blocks = valid_document.professional_experience + (ExperienceBlock(role="Analyst", points=("Did things", "")),)
    report = validate_document(replace(valid_document, professional_experience=blocks))

    assert report.experience_errors("professional", 0).role is None
    errors = report.experience_errors("professional", 2)
    assert errors.role is None
    assert errors.company_info == MESSAGES["company_info"]
    assert errors.point_error(0) is None
    assert errors.point_error(1) == MESSAGES["point"]
    assert "professionalExperience[2].points[1]: Point cannot be empty." in report.messages()


@pytest.mark.unit
def test_foundational_errors_are_separate(valid_document):
    """Test that foundational blocks are validated in their own section."""
    report = validate_document(replace(valid_document, foundational_experience=(ExperienceBlock(),)))
    assert report.experience_errors("professional", 0).role is None
    assert report.experience_errors("foundational", 0).role == MESSAGES["role"]


@pytest.mark.unit
def test_license_errors(valid_document):
    """Test that a blank licenses section is invalid until filled."""
    report = validate_document(replace(valid_document, licenses=Licenses(values=("", " "))))
    assert report.licenses.values == MESSAGES["license_values"]
    assert report.licenses.title is None

    report = validate_document(replace(valid_document, licenses=None))
    assert report.licenses is None
