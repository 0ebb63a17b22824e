"""Run logger that records harness log entries and mirrors them to a console."""

import sys
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TextIO

from sandbox_smoke.models.log import GENERAL_CATEGORY, LogEntry, LogLevel
from sandbox_smoke.tracker import TestResultTracker

RESET = "\x1b[0m"

LEVEL_COLORS: Mapping[LogLevel, str] = {
    "info": "\x1b[36m",
    "success": "\x1b[32m",
    "error": "\x1b[31m",
    "warning": "\x1b[33m",
}


def format_entry(entry: LogEntry, *, color: bool = True) -> str:
    """Render an entry as a single console line."""
    line = f"[{entry.timestamp}] [{entry.category}] {entry.message}"
    if not color:
        return line
    return f"{LEVEL_COLORS[entry.type]}{line}{RESET}"


class RunLogger:
    """Append-only log of a suite run.

    Every entry goes to the global sequence and, when its category names a
    tracked test, to that test's own logs as well.
    """

    def __init__(
        self,
        tracker: TestResultTracker,
        *,
        stream: TextIO | None = None,
        color: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.tracker = tracker
        self.stream = stream
        self.color = color
        self.clock = clock
        self._entries: tuple[LogEntry, ...] = ()

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        """All entries recorded so far, in emission order."""
        return self._entries

    def record(
        self,
        message: str,
        level: LogLevel = "info",
        category: str = GENERAL_CATEGORY,
    ) -> LogEntry:
        """Record a message and echo it to the console sink."""
        entry = LogEntry(
            type=level,
            message=message,
            timestamp=self.clock().strftime("%H:%M:%S"),
            category=category,
        )
        self._entries = (*self._entries, entry)
        self.tracker.append_log(entry)

        stream = self.stream if self.stream is not None else sys.stdout
        print(format_entry(entry, color=self.color), file=stream, flush=True)

        return entry

    def clear(self) -> None:
        """Forget all recorded entries."""
        self._entries = ()
