"""Unit tests for streaming response accumulation."""

import asyncio

import pytest

from dossier.contexts.generation.accumulator import accumulate


async def fragments(*items, fail_after=None):
    for i, item in enumerate(items):
        if fail_after is not None and i == fail_after:
            raise ConnectionError("stream dropped")
        yield item


@pytest.mark.unit
def test_empty_stream():
    """Test that zero fragments give an empty, uncancelled response."""
    result = asyncio.run(accumulate(fragments()))
    assert result.text == ""
    assert result.fragment_count == 0
    assert not result.cancelled


@pytest.mark.unit
def test_fragments_concatenate_in_order():
    """Test that fragments are joined in arrival order without dedup."""
    result = asyncio.run(accumulate(fragments("A", "B", "B", "C")))
    assert result.text == "ABBC"
    assert result.fragment_count == 4


@pytest.mark.unit
def test_stream_error_propagates():
    """Test that a transport error mid-stream is not swallowed."""
    with pytest.raises(ConnectionError):
        asyncio.run(accumulate(fragments("A", "B", fail_after=1)))


@pytest.mark.unit
def test_cancel_stops_consumption():
    """Test that setting cancel returns the partial text and closes the stream."""
    consumed = []
    closed = []

    async def scenario():
        cancel = asyncio.Event()

        async def stream():
            try:
                for item in ("A", "B", "C"):
                    consumed.append(item)
                    if item == "B":
                        cancel.set()
                    yield item
            finally:
                closed.append(True)

        return await accumulate(stream(), cancel)

    result = asyncio.run(scenario())

    assert result.cancelled
    assert result.text == "A"
    assert consumed == ["A", "B"]
    assert closed == [True]


@pytest.mark.unit
def test_cancel_after_completion_is_not_cancelled():
    """Test that a cancel set after the last fragment leaves the result complete."""

    async def scenario():
        cancel = asyncio.Event()
        result = await accumulate(fragments("A", "B"), cancel)
        cancel.set()
        return result

    result = asyncio.run(scenario())
    assert result.text == "AB"
    assert not result.cancelled
