"""
Intake Context

Responsibilities:
- Holds the candidate's uploaded documents for the session
- Checks that at least one candidate source was provided
- Assembles the ordered multi-part prompt for the generation backend

Owns: Attachment reading, prompt layout, response separator token
Never: Calls the backend or interprets its response
"""

from dossier.contexts.intake.attachments import AttachmentReadError, UploadedAttachment
from dossier.contexts.intake.prompt import SEPARATOR, IntakeError, assemble_prompt, check_sources

__all__ = [
    "SEPARATOR",
    "AttachmentReadError",
    "IntakeError",
    "UploadedAttachment",
    "assemble_prompt",
    "check_sources",
]
