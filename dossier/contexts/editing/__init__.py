"""
Editing Context

Responsibilities:
- Represents the structured dossier document (contact info, narrative fields,
  experience blocks, optional sections, theme)
- Recomputes the validation report from the current document
- Applies pure edit operations (set/add/remove) that return new documents
- Provides the inline spellcheck overlay for editable text fields

Owns: Document schema, validation rules, edit operations, spellcheck
Never: Talks to the generation backend or produces exported files
"""

from dossier.contexts.editing.document import (
    ContactInfo,
    Document,
    Education,
    ExperienceBlock,
    InvalidDocumentStructureError,
    Licenses,
    Theme,
)
from dossier.contexts.editing.operations import ExperienceSection, apply_edits
from dossier.contexts.editing.validation import ValidationReport, validate_document

__all__ = [
    "ContactInfo",
    "Document",
    "Education",
    "ExperienceBlock",
    "ExperienceSection",
    "InvalidDocumentStructureError",
    "Licenses",
    "Theme",
    "ValidationReport",
    "apply_edits",
    "validate_document",
]
