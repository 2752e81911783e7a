"""
Generation Context

Responsibilities:
- Sends the assembled prompt to the configured LLM backend
- Accumulates the streamed response in arrival order (cancellable)
- Splits the response into the strategic briefing and the JSON dossier
- Reports missing-separator and malformed-payload failures distinctly

Owns: Response grammar, stream accumulation, generation orchestration
Never: Edits documents or renders output
"""

from dossier.contexts.generation.accumulator import AccumulatedResponse, accumulate
from dossier.contexts.generation.pipeline import GenerationResult, generate_dossier
from dossier.contexts.generation.response_parser import (
    MalformedPayloadError,
    MissingPayloadError,
    ParsedResponse,
    parse_response,
)

__all__ = [
    "AccumulatedResponse",
    "GenerationResult",
    "MalformedPayloadError",
    "MissingPayloadError",
    "ParsedResponse",
    "accumulate",
    "generate_dossier",
    "parse_response",
]
