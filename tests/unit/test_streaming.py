"""Tests for session command log streaming."""

import asyncio
from collections.abc import Callable
from contextlib import aclosing

import pytest

from sandbox_smoke.streaming import stream_command_logs


class FakeProcess:
    """Process API pushing scripted chunks to the log callbacks."""

    def __init__(
        self,
        chunks: list[tuple[str, str]],
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self.chunks = chunks
        self.error = error
        self.hang = hang
        self.cancelled = False
        self.calls: list[tuple[str, str]] = []

    async def get_session_command_logs_async(
        self,
        session_id: str,
        command_id: str,
        on_stdout: Callable[[str], None],
        on_stderr: Callable[[str], None],
    ) -> None:
        self.calls.append((session_id, command_id))
        try:
            for stream, chunk in self.chunks:
                (on_stdout if stream == "stdout" else on_stderr)(chunk)
                await asyncio.sleep(0)
            if self.error is not None:
                raise self.error
            if self.hang:
                await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise


async def collect(process: FakeProcess) -> list[str]:
    """Drain the stream into a list."""
    return [chunk async for chunk in stream_command_logs(process, "s-1", "cmd-1")]


async def test_yields_chunks_in_arrival_order() -> None:
    """Yields stdout and stderr chunks in the order they arrive."""
    process = FakeProcess(
        [("stdout", "Count: 1"), ("stderr", "warn"), ("stdout", "Count: 2")]
    )

    chunks = await collect(process)

    assert chunks == ["Count: 1", "warn", "Count: 2"]
    assert process.calls == [("s-1", "cmd-1")]


async def test_ends_when_command_completes() -> None:
    """Ends without chunks when the command produced no output."""
    assert await collect(FakeProcess([])) == []


async def test_raises_after_delivered_chunks() -> None:
    """Yields received chunks before raising the streaming error."""
    process = FakeProcess([("stdout", "partial")], error=ConnectionError("lost"))
    received: list[str] = []

    with pytest.raises(ConnectionError, match="lost"):
        async for chunk in stream_command_logs(process, "s-1", "cmd-1"):
            received.append(chunk)

    assert received == ["partial"]


async def test_closing_early_stops_stream() -> None:
    """Cancels the underlying stream when the consumer stops early."""
    process = FakeProcess([("stdout", "first")], hang=True)
    stream = stream_command_logs(process, "s-1", "cmd-1")

    assert await anext(stream) == "first"
    await stream.aclose()

    assert process.cancelled


async def test_leaving_aclosing_block_stops_stream() -> None:
    """Stops the stream as soon as an aclosing block is left early."""
    process = FakeProcess([("stdout", "first")], hang=True)

    async with aclosing(stream_command_logs(process, "s-1", "cmd-1")) as chunks:
        async for chunk in chunks:
            assert chunk == "first"
            break

    assert process.cancelled


async def test_aclosing_block_stops_stream_on_error() -> None:
    """Stops the stream when the consuming loop raises."""
    process = FakeProcess([("stdout", "first")], hang=True)

    with pytest.raises(ValueError):
        async with aclosing(stream_command_logs(process, "s-1", "cmd-1")) as chunks:
            async for chunk in chunks:
                raise ValueError(chunk)

    assert process.cancelled
