"""Unit tests for the two-part response parser."""

import pytest

from dossier.contexts.editing import Document
from dossier.contexts.generation.response_parser import (
    MalformedPayloadError,
    MissingPayloadError,
    format_response,
    parse_response,
    split_response,
)
from dossier.contexts.intake import SEPARATOR


@pytest.mark.unit
def test_parse_formatted_response(valid_document):
    """Test that a well-formed response yields the narrative and an equal document."""
    text = format_response("## Brief\nN", valid_document)

    parsed = parse_response(text)

    assert parsed.narrative == "## Brief\nN"
    assert parsed.document == valid_document
    assert isinstance(parsed.document, Document)


@pytest.mark.unit
def test_narrative_is_trimmed():
    """Test that whitespace around the narrative is stripped."""
    narrative, payload = split_response(f"\n\n  Brief  \n{SEPARATOR}\n{{}}")
    assert narrative == "Brief"
    assert payload == "\n{}"


@pytest.mark.unit
def test_splits_on_first_separator():
    """Test that a repeated separator stays inside the payload."""
    narrative, payload = split_response(f"A{SEPARATOR}B{SEPARATOR}C")
    assert narrative == "A"
    assert payload == f"B{SEPARATOR}C"


@pytest.mark.unit
@pytest.mark.parametrize("text", ["just some text", ""])
def test_missing_separator(text):
    """Test that a response without the separator keeps the full raw text."""
    with pytest.raises(MissingPayloadError) as exc_info:
        parse_response(text)
    assert exc_info.value.narrative == text


@pytest.mark.unit
def test_invalid_json_payload():
    """Test that an undecodable payload keeps both halves of the response."""
    with pytest.raises(MalformedPayloadError) as exc_info:
        parse_response(f"N\n{SEPARATOR}\n{{not json")

    error = exc_info.value
    assert error.narrative == "N"
    assert error.payload_text == "\n{not json"
    assert "invalid JSON" in error.reason


@pytest.mark.unit
def test_schema_mismatch_payload():
    """Test that valid JSON with the wrong shape is malformed, not missing."""
    with pytest.raises(MalformedPayloadError) as exc_info:
        parse_response(f"N\n{SEPARATOR}\n{{\"contactInfo\": {{}}}}")
    assert "executiveSummary" in exc_info.value.reason


@pytest.mark.unit
def test_custom_separator(valid_document):
    """Test parsing with a non-default separator."""
    parsed = parse_response(format_response("N", valid_document, separator="@@@"), separator="@@@")
    assert parsed.document == valid_document
