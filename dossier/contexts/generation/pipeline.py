"""
Dossier Generation Pipeline

Intake -> prompt assembly -> streamed backend response -> accumulated text ->
two-part parse -> Document.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from dossier.contexts.editing.document import Document
from dossier.contexts.generation.accumulator import accumulate
from dossier.contexts.generation.logger import (
    _log_success,
    log_parse_failure,
    log_request,
    log_stream_result,
)
from dossier.contexts.generation.response_parser import (
    MalformedPayloadError,
    MissingPayloadError,
    parse_response,
)
from dossier.contexts.intake.attachments import UploadedAttachment
from dossier.contexts.intake.prompt import assemble_prompt
from dossier.utils.llm import LLMProvider, describe_parts


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one generation run.

    Attributes:
        raw_text: Full accumulated response
        narrative: Strategic briefing (trimmed text before the separator)
        payload_text: Raw JSON text after the separator
        document: Parsed dossier (None if cancelled)
        cancelled: True if the caller cancelled before the stream finished
    """

    raw_text: str
    narrative: str = ""
    payload_text: str = ""
    document: Optional[Document] = None
    cancelled: bool = False


async def generate_dossier(
    provider: LLMProvider,
    job_description: str,
    linkedin_url: Optional[str] = None,
    attachments: Sequence[UploadedAttachment] = (),
    cancel: Optional[asyncio.Event] = None,
) -> GenerationResult:
    """
    Run one full generation request.

    A cancelled run returns a GenerationResult with cancelled=True and is
    never parsed.

    Raises:
        IntakeError: Empty job description
        AttachmentReadError: An attachment could not be read
        MissingPayloadError: No separator in the response
        MalformedPayloadError: Payload present but not a valid dossier
        Exception: Transport errors from the provider propagate unchanged
    """
    parts = await assemble_prompt(job_description, linkedin_url, attachments)
    log_request(provider.name, describe_parts(parts))

    start_time = time.time()
    response = await accumulate(provider.stream(parts), cancel)
    log_stream_result(
        response.fragment_count, len(response.text), response.cancelled, time.time() - start_time
    )
    if response.cancelled:
        return GenerationResult(raw_text=response.text, cancelled=True)

    try:
        parsed = parse_response(response.text)
    except MissingPayloadError:
        log_parse_failure("separator missing", response.text)
        raise
    except MalformedPayloadError as e:
        log_parse_failure(f"malformed payload ({e.reason})", response.text)
        raise

    _log_success(
        f"Parsed dossier for {parsed.document.contact_info.name or '(unnamed)'}: "
        f"{len(parsed.document.professional_experience)} roles"
    )
    return GenerationResult(
        raw_text=response.text,
        narrative=parsed.narrative,
        payload_text=parsed.payload_text,
        document=parsed.document,
    )
