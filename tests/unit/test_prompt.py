"""Unit tests for intake prompt assembly."""

import asyncio

import pytest

from dossier.contexts.intake import (
    SEPARATOR,
    AttachmentReadError,
    IntakeError,
    UploadedAttachment,
    assemble_prompt,
    check_sources,
)
from dossier.contexts.intake.prompt import EMPTY_JD_MESSAGE, NO_SOURCES_MESSAGE, instruction_text
from dossier.utils.config import get_setting
from dossier.utils.llm import BinaryPart, TextPart


@pytest.mark.unit
def test_instruction_text_names_separator():
    """Test that the instructions tell the model the exact separator."""
    text = instruction_text()
    assert SEPARATOR in text
    assert "professionalExperience" in text


@pytest.mark.unit
def test_part_order():
    """Test instruction, markers, JD, URL and attachments appear in order."""
    attachments = [
        UploadedAttachment.from_bytes("cv.pdf", b"%PDF-1.4"),
        UploadedAttachment.from_bytes("bio.txt", b"Bio text"),
    ]

    parts = asyncio.run(assemble_prompt("Lead ops.", "https://linkedin.com/in/jdoe", attachments))

    assert len(parts) == 7
    assert parts[0] == TextPart(instruction_text())
    assert parts[1] == TextPart(get_setting("intake.start_marker"))
    assert parts[2] == TextPart("Job Description:\nLead ops.")
    assert parts[3] == TextPart("LinkedIn Profile URL: https://linkedin.com/in/jdoe")
    assert parts[4] == BinaryPart("application/pdf", b"%PDF-1.4", "cv.pdf")
    assert parts[5] == BinaryPart("text/plain", b"Bio text", "bio.txt")
    assert parts[6] == TextPart(get_setting("intake.end_marker"))


@pytest.mark.unit
def test_url_part_omitted_when_blank():
    """Test that no URL part is added without a LinkedIn URL."""
    attachments = [UploadedAttachment.from_bytes("cv.pdf", b"%PDF")]
    parts = asyncio.run(assemble_prompt("JD", "  ", attachments))
    assert not any(isinstance(p, TextPart) and p.text.startswith("LinkedIn") for p in parts)
    assert len(parts) == 5


@pytest.mark.unit
def test_empty_job_description():
    """Test that an empty JD is rejected before any request is built."""
    with pytest.raises(IntakeError, match=EMPTY_JD_MESSAGE):
        asyncio.run(assemble_prompt("   ", attachments=[UploadedAttachment.from_bytes("cv.pdf", b"x")]))


@pytest.mark.unit
def test_check_sources():
    """Test that at least one candidate source is required."""
    with pytest.raises(IntakeError, match=NO_SOURCES_MESSAGE):
        check_sources("", [])
    check_sources("https://linkedin.com/in/jdoe", [])
    check_sources("", [UploadedAttachment.from_bytes("cv.pdf", b"x")])


@pytest.mark.unit
def test_attachment_from_path(tmp_path):
    """Test that file attachments are read when the prompt is assembled."""
    path = tmp_path / "notes.md"
    path.write_text("Notes")

    parts = asyncio.run(assemble_prompt("JD", attachments=[UploadedAttachment.from_path(path)]))

    assert parts[3].data == b"Notes"
    assert parts[3].filename == "notes.md"


@pytest.mark.unit
def test_unreadable_attachment(tmp_path):
    """Test that a missing file surfaces as AttachmentReadError."""
    attachment = UploadedAttachment.from_path(tmp_path / "gone.pdf")
    with pytest.raises(AttachmentReadError) as exc_info:
        asyncio.run(assemble_prompt("JD", attachments=[attachment]))
    assert exc_info.value.filename == "gone.pdf"
