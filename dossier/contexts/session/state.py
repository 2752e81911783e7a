"""
Session state and transitions.

The whole interactive session is one immutable SessionState snapshot.
reduce(state, action) returns the next snapshot for a named action and never
mutates its input. Every transition that changes the document recomputes
the validation report, so the report always reflects the latest document.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple, Type

from dossier.contexts.editing.document import Document
from dossier.contexts.editing.operations import Edit
from dossier.contexts.editing.validation import ValidationReport, validate_document
from dossier.contexts.intake.attachments import UploadedAttachment
from dossier.contexts.intake.prompt import IntakeError, check_sources
from dossier.utils.config import get_setting


class Step(IntEnum):
    INTAKE = 1
    TARGET_JD = 2
    BRIEFING = 3
    PREVIEW = 4

    @property
    def label(self) -> str:
        return STEP_LABELS[self]


STEP_LABELS = {
    Step.INTAKE: "Provide Intel",
    Step.TARGET_JD: "Target JD",
    Step.BRIEFING: "Strategic Briefing",
    Step.PREVIEW: "Resume Preview",
}


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of one single-user session.

    Attributes:
        step: Current wizard step
        job_description: Target job description text
        linkedin_url: Candidate's profile URL (optional source)
        attachments: Uploaded candidate documents, in upload order
        document: Parsed dossier (None until a generation succeeds)
        report: Validation report for document (empty when there is no document)
        briefing_text: Strategic briefing, or the raw response when the payload was missing
        payload_text: Raw JSON text after the separator (kept for diagnosis)
        error: Banner / inline error message
        is_generating: Generation in flight
        is_exporting: Export in flight
        template: Resume template name
        show_spellcheck: Spellcheck highlight layers visible
    """

    step: Step = Step.INTAKE
    job_description: str = ""
    linkedin_url: str = ""
    attachments: Tuple[UploadedAttachment, ...] = ()
    document: Optional[Document] = None
    report: ValidationReport = field(default_factory=ValidationReport)
    briefing_text: str = ""
    payload_text: str = ""
    error: Optional[str] = None
    is_generating: bool = False
    is_exporting: bool = False
    template: str = "executive"
    show_spellcheck: bool = True

    @property
    def can_view_resume(self) -> bool:
        return self.document is not None and not self.is_generating

    @property
    def can_export(self) -> bool:
        """Export and print need a clean document and no export in flight."""
        return self.document is not None and not self.report.has_errors and not self.is_exporting


# =============================================================================
# ACTIONS
# =============================================================================


@dataclass(frozen=True)
class AddAttachments:
    attachments: Tuple[UploadedAttachment, ...]


@dataclass(frozen=True)
class RemoveAttachment:
    """Remove every upload with this filename."""

    filename: str


@dataclass(frozen=True)
class SetLinkedinUrl:
    url: str


@dataclass(frozen=True)
class SetJobDescription:
    text: str


@dataclass(frozen=True)
class ProceedToJobDescription:
    pass


@dataclass(frozen=True)
class GenerationStarted:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    narrative: str
    payload_text: str
    document: Document


@dataclass(frozen=True)
class GenerationPayloadMissing:
    raw_text: str
    message: str


@dataclass(frozen=True)
class GenerationPayloadMalformed:
    narrative: str
    payload_text: str
    message: str


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class GenerationCancelled:
    pass


@dataclass(frozen=True)
class ViewResume:
    pass


@dataclass(frozen=True)
class BackToBriefing:
    pass


@dataclass(frozen=True)
class EditDocument:
    edit: Edit


@dataclass(frozen=True)
class SelectTemplate:
    template: str


@dataclass(frozen=True)
class ToggleSpellcheck:
    pass


@dataclass(frozen=True)
class ExportStarted:
    pass


@dataclass(frozen=True)
class ExportFinished:
    pass


@dataclass(frozen=True)
class ExportFailed:
    message: str


@dataclass(frozen=True)
class DismissError:
    pass


@dataclass(frozen=True)
class StartOver:
    pass


@dataclass(frozen=True)
class NewJobDescription:
    pass


# =============================================================================
# TRANSITIONS
# =============================================================================


def _with_document(state: SessionState, document: Optional[Document], **changes) -> SessionState:
    report = validate_document(document) if document is not None else ValidationReport()
    return replace(state, document=document, report=report, **changes)


def _add_attachments(state: SessionState, action: AddAttachments) -> SessionState:
    return replace(state, attachments=state.attachments + tuple(action.attachments), error=None)


def _remove_attachment(state: SessionState, action: RemoveAttachment) -> SessionState:
    kept = tuple(a for a in state.attachments if a.filename != action.filename)
    return replace(state, attachments=kept)


def _proceed_to_job_description(state: SessionState, action: ProceedToJobDescription) -> SessionState:
    try:
        check_sources(state.linkedin_url, state.attachments)
    except IntakeError as e:
        return replace(state, error=str(e))
    return replace(state, step=Step.TARGET_JD, error=None)


def _generation_started(state: SessionState, action: GenerationStarted) -> SessionState:
    return _with_document(
        state,
        None,
        step=Step.BRIEFING,
        is_generating=True,
        error=None,
        briefing_text="",
        payload_text="",
    )


def _generation_succeeded(state: SessionState, action: GenerationSucceeded) -> SessionState:
    return _with_document(
        state,
        action.document,
        step=Step.BRIEFING,
        is_generating=False,
        briefing_text=action.narrative,
        payload_text=action.payload_text,
        error=None,
    )


def _generation_payload_missing(state: SessionState, action: GenerationPayloadMissing) -> SessionState:
    return _with_document(
        state,
        None,
        step=Step.BRIEFING,
        is_generating=False,
        briefing_text=action.raw_text,
        payload_text="",
        error=action.message,
    )


def _generation_payload_malformed(state: SessionState, action: GenerationPayloadMalformed) -> SessionState:
    return _with_document(
        state,
        None,
        step=Step.BRIEFING,
        is_generating=False,
        briefing_text=action.narrative,
        payload_text=action.payload_text,
        error=action.message,
    )


def _generation_failed(state: SessionState, action: GenerationFailed) -> SessionState:
    return _with_document(
        state, None, step=Step.TARGET_JD, is_generating=False, error=action.message
    )


def _generation_cancelled(state: SessionState, action: GenerationCancelled) -> SessionState:
    return _with_document(state, None, step=Step.TARGET_JD, is_generating=False, error=None)


def _view_resume(state: SessionState, action: ViewResume) -> SessionState:
    if not state.can_view_resume:
        return state
    return replace(state, step=Step.PREVIEW)


def _edit_document(state: SessionState, action: EditDocument) -> SessionState:
    if state.document is None:
        raise ValueError("No document to edit")
    return _with_document(state, action.edit(state.document))


def _select_template(state: SessionState, action: SelectTemplate) -> SessionState:
    if action.template not in get_setting("templates"):
        raise ValueError(f"Unknown template: {action.template}")
    return replace(state, template=action.template)


def _start_over(state: SessionState, action: StartOver) -> SessionState:
    return SessionState()


def _new_job_description(state: SessionState, action: NewJobDescription) -> SessionState:
    return _with_document(
        state,
        None,
        step=Step.TARGET_JD,
        job_description="",
        briefing_text="",
        payload_text="",
        error=None,
        is_generating=False,
    )


_HANDLERS: Dict[Type, Callable[[SessionState, object], SessionState]] = {
    AddAttachments: _add_attachments,
    RemoveAttachment: _remove_attachment,
    SetLinkedinUrl: lambda s, a: replace(s, linkedin_url=a.url),
    SetJobDescription: lambda s, a: replace(s, job_description=a.text),
    ProceedToJobDescription: _proceed_to_job_description,
    GenerationStarted: _generation_started,
    GenerationSucceeded: _generation_succeeded,
    GenerationPayloadMissing: _generation_payload_missing,
    GenerationPayloadMalformed: _generation_payload_malformed,
    GenerationFailed: _generation_failed,
    GenerationCancelled: _generation_cancelled,
    ViewResume: _view_resume,
    BackToBriefing: lambda s, a: replace(s, step=Step.BRIEFING),
    EditDocument: _edit_document,
    SelectTemplate: _select_template,
    ToggleSpellcheck: lambda s, a: replace(s, show_spellcheck=not s.show_spellcheck),
    ExportStarted: lambda s, a: replace(s, is_exporting=True, error=None),
    ExportFinished: lambda s, a: replace(s, is_exporting=False),
    ExportFailed: lambda s, a: replace(s, is_exporting=False, error=a.message),
    DismissError: lambda s, a: replace(s, error=None),
    StartOver: _start_over,
    NewJobDescription: _new_job_description,
}


def reduce(state: SessionState, action) -> SessionState:
    """
    Apply one action and return the next state.

    Raises:
        TypeError: If the action type is unknown
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown session action: {type(action).__name__}")
    return handler(state, action)
