"""
Prompt Assembly

Builds the ordered multi-part request sent to the generation backend:

    instruction block
    start-of-candidate-data marker
    "Job Description:\\n<text>"
    "LinkedIn Profile URL: <url>"       (only when provided)
    one binary part per attachment      (upload order)
    end-of-candidate-data marker
"""

from pathlib import Path
from typing import List, Optional, Sequence

from dossier.contexts.intake.attachments import UploadedAttachment, read_attachments
from dossier.utils.config import get_setting
from dossier.utils.llm import PromptPart, TextPart
from dossier.utils.templates import TemplateRegistry

# Literal boundary between the narrative and the JSON payload in a response
SEPARATOR = "===JSON_DOSSIER_START==="

PROMPTS_PATH = Path(__file__).parent / "prompts"
INSTRUCTIONS_TEMPLATE = "dossier_instructions.txt.jinja"

_registry = TemplateRegistry(PROMPTS_PATH)


class IntakeError(ValueError):
    """Raised when intake inputs cannot produce a request (user-correctable)."""


NO_SOURCES_MESSAGE = "Please upload at least one document or provide your LinkedIn URL."
EMPTY_JD_MESSAGE = "Please paste the target job description."


def instruction_text(separator: str = SEPARATOR) -> str:
    return _registry.render(INSTRUCTIONS_TEMPLATE, separator=separator)


def check_sources(linkedin_url: str, attachments: Sequence[UploadedAttachment]) -> None:
    """
    Require at least one candidate source before advancing past intake.

    Raises:
        IntakeError: If there are no attachments and no LinkedIn URL
    """
    if not attachments and not (linkedin_url or "").strip():
        raise IntakeError(NO_SOURCES_MESSAGE)


async def assemble_prompt(
    job_description: str,
    linkedin_url: Optional[str] = None,
    attachments: Sequence[UploadedAttachment] = (),
) -> List[PromptPart]:
    """
    Build the ordered prompt parts for one generation request.

    Attachment bytes are read concurrently; the request is only returned
    once every read has completed.

    Raises:
        IntakeError: If the job description is empty
        AttachmentReadError: If any attachment cannot be read
    """
    if not job_description.strip():
        raise IntakeError(EMPTY_JD_MESSAGE)

    binary_parts = await read_attachments(attachments)

    parts: List[PromptPart] = [
        TextPart(instruction_text()),
        TextPart(get_setting("intake.start_marker")),
        TextPart(f"Job Description:\n{job_description}"),
    ]
    if linkedin_url and linkedin_url.strip():
        parts.append(TextPart(f"LinkedIn Profile URL: {linkedin_url}"))
    parts.extend(binary_parts)
    parts.append(TextPart(get_setting("intake.end_marker")))
    return parts
