"""
Two-part response parser.

A backend response has the shape

    <narrative markdown>
    ===JSON_DOSSIER_START===
    <json payload>

The producer is non-deterministic, so both halves of the contract are checked:
a missing separator and a present-but-unusable payload are reported as
distinct exceptions, and neither path discards the text received.
"""

import json
from dataclasses import dataclass
from typing import Optional

from dossier.contexts.editing.document import Document, InvalidDocumentStructureError
from dossier.contexts.intake.prompt import SEPARATOR


class MissingPayloadError(Exception):
    """
    Raised when the response has no separator token (including an empty response).

    Attributes:
        narrative: The complete raw response, unmodified, for display
    """

    def __init__(self, narrative: str):
        self.narrative = narrative
        super().__init__(
            "The response did not contain a structured dossier. "
            "The briefing is shown as received; please try generating again."
        )


class MalformedPayloadError(Exception):
    """
    Raised when the separator is present but the payload is not a valid dossier.

    Attributes:
        narrative: Trimmed text before the separator
        payload_text: Raw text after the separator, kept for diagnosis
        reason: Decoder or schema error description
    """

    def __init__(self, narrative: str, payload_text: str, reason: str):
        self.narrative = narrative
        self.payload_text = payload_text
        self.reason = reason
        super().__init__(f"The structured dossier in the response is malformed: {reason}")


@dataclass(frozen=True)
class ParsedResponse:
    narrative: str
    payload_text: str
    document: Document


def split_response(text: str, separator: str = SEPARATOR) -> tuple[str, str]:
    """
    Split on the first separator occurrence into (trimmed narrative, payload text).

    Raises:
        MissingPayloadError: If the separator does not occur
    """
    index = text.find(separator)
    if index == -1:
        raise MissingPayloadError(text)
    return text[:index].strip(), text[index + len(separator) :]


def parse_payload(payload_text: str, narrative: str = "") -> Document:
    """
    Decode and shape-check the JSON payload.

    Raises:
        MalformedPayloadError: On invalid JSON or a schema mismatch
    """
    try:
        data = json.loads(payload_text)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(narrative, payload_text, f"invalid JSON ({e})") from e
    try:
        return Document.from_dict(data)
    except InvalidDocumentStructureError as e:
        raise MalformedPayloadError(narrative, payload_text, str(e)) from e


def parse_response(text: str, separator: Optional[str] = None) -> ParsedResponse:
    """
    Parse a full accumulated response into narrative and Document.

    Raises:
        MissingPayloadError: Separator absent; carries the full raw text
        MalformedPayloadError: Payload present but unusable; carries both halves
    """
    narrative, payload_text = split_response(text, separator or SEPARATOR)
    document = parse_payload(payload_text, narrative)
    return ParsedResponse(narrative=narrative, payload_text=payload_text, document=document)


def format_response(narrative: str, document: Document, separator: str = SEPARATOR) -> str:
    """Serialize back to the response grammar (used for fixtures and saved sessions)."""
    return f"{narrative}\n{separator}\n{json.dumps(document.to_dict(), indent=2)}"
