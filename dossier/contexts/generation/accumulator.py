"""
Streaming response accumulation.

accumulate() is a fold over the backend's asynchronous fragment sequence:
fragments are concatenated strictly in arrival order, with no reordering and
no deduplication. A cooperative cancellation event is checked between
fragments.
"""

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Optional


@dataclass(frozen=True)
class AccumulatedResponse:
    """
    Full text of a streamed response.

    Attributes:
        text: Concatenation of every fragment consumed
        fragment_count: Number of fragments consumed
        cancelled: True if consumption stopped because cancel was set
    """

    text: str
    fragment_count: int
    cancelled: bool = False


async def accumulate(
    fragments: AsyncIterator[str], cancel: Optional[asyncio.Event] = None
) -> AccumulatedResponse:
    """
    Concatenate a fragment stream into one response.

    Zero fragments yield an empty response (not an error here). Transport
    errors raised by the stream propagate unchanged. If cancel is set, no
    further fragments are consumed and the partial text is returned with
    cancelled=True; the underlying stream is closed.
    """
    chunks = []
    try:
        async for fragment in fragments:
            if cancel is not None and cancel.is_set():
                return AccumulatedResponse("".join(chunks), len(chunks), cancelled=True)
            chunks.append(fragment)
        return AccumulatedResponse("".join(chunks), len(chunks))
    finally:
        aclose = getattr(fragments, "aclose", None)
        if aclose is not None:
            await aclose()
