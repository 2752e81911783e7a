"""
Top-level async operations for the interactive session.

run_generation() and run_export() are the catch boundaries: every failure is
logged and converted into session state (error banner, busy flag reset, step
rollback). Neither ever raises to the caller.
"""

import asyncio
from typing import Callable, Optional, Tuple

from loguru import logger

from dossier.contexts.editing.spellcheck import SpellDictionary
from dossier.contexts.generation.pipeline import generate_dossier
from dossier.contexts.generation.response_parser import MalformedPayloadError, MissingPayloadError
from dossier.contexts.rendering.compositor import ExportResult, export_document
from dossier.contexts.rendering.rasterizer import PlaywrightRasterizer, Rasterizer
from dossier.contexts.session.state import (
    ExportFailed,
    ExportFinished,
    ExportStarted,
    GenerationCancelled,
    GenerationFailed,
    GenerationPayloadMalformed,
    GenerationPayloadMissing,
    GenerationStarted,
    GenerationSucceeded,
    SessionState,
    reduce,
)
from dossier.utils.llm import LLMProvider, get_provider

ProviderFactory = Callable[[], LLMProvider]


async def run_generation(
    state: SessionState,
    provider_factory: ProviderFactory = get_provider,
    cancel: Optional[asyncio.Event] = None,
) -> SessionState:
    """
    Generate a dossier for the session's intake and job description.

    Outcomes:
        success          -> step 3 with narrative and document
        separator missing -> step 3 showing the raw response, progression blocked
        malformed payload -> step 3 with narrative, payload text kept, progression blocked
        backend failure  -> step 2 with an error banner (intake is kept)
        cancelled        -> step 2, no error
    """
    state = reduce(state, GenerationStarted())
    try:
        provider = provider_factory()
        result = await generate_dossier(
            provider,
            state.job_description,
            state.linkedin_url,
            state.attachments,
            cancel,
        )
    except MissingPayloadError as e:
        return reduce(state, GenerationPayloadMissing(raw_text=e.narrative, message=str(e)))
    except MalformedPayloadError as e:
        return reduce(
            state,
            GenerationPayloadMalformed(narrative=e.narrative, payload_text=e.payload_text, message=str(e)),
        )
    except Exception as e:
        logger.exception(f"Generation failed: {e}")
        return reduce(state, GenerationFailed(f"An error occurred: {e}"))

    if result.cancelled:
        return reduce(state, GenerationCancelled())
    return reduce(
        state,
        GenerationSucceeded(
            narrative=result.narrative, payload_text=result.payload_text, document=result.document
        ),
    )


async def run_export(
    state: SessionState,
    rasterizer: Optional[Rasterizer] = None,
    dictionary: Optional[SpellDictionary] = None,
) -> Tuple[SessionState, Optional[ExportResult]]:
    """
    Export the session's document to PDF.

    Returns:
        (next state, ExportResult or None on failure)
    """
    if state.document is None:
        return reduce(state, ExportFailed("There is no dossier to export yet.")), None

    state = reduce(state, ExportStarted())
    try:
        result = await export_document(
            state.document,
            rasterizer or PlaywrightRasterizer(),
            template=state.template,
            dictionary=dictionary,
        )
    except Exception as e:
        logger.exception(f"Export failed: {e}")
        return reduce(state, ExportFailed(f"Failed to generate PDF: {e}")), None
    return reduce(state, ExportFinished()), result
