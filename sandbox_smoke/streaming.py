"""Streaming of session command logs as an async iterator."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Protocol

log = logging.getLogger(__name__)


class SupportsLogStreaming(Protocol):
    """Process API that pushes command output to callbacks until it finishes."""

    def get_session_command_logs_async(
        self,
        session_id: str,
        command_id: str,
        on_stdout: Callable[[str], None],
        on_stderr: Callable[[str], None],
    ) -> Awaitable[None]:
        """Stream logs for a command, returning when the command completes."""
        ...


async def stream_command_logs(
    process: SupportsLogStreaming, session_id: str, command_id: str
) -> AsyncGenerator[str, None]:
    """Yield log chunks of a session command as they arrive.

    The iterator ends when the remote command completes. Stdout and stderr
    chunks are yielded in arrival order. If streaming fails, the chunks
    received so far are yielded before the error is raised. Closing the
    iterator early stops the underlying stream.
    """
    queue: asyncio.Queue[str | None] = asyncio.Queue()

    async def feed() -> None:
        try:
            await process.get_session_command_logs_async(
                session_id, command_id, queue.put_nowait, queue.put_nowait
            )
        finally:
            queue.put_nowait(None)

    task = asyncio.create_task(feed())
    try:
        while (chunk := await queue.get()) is not None:
            yield chunk
        await task
    finally:
        if not task.done():
            log.debug("Stopping log stream for %s/%s", session_id, command_id)
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
