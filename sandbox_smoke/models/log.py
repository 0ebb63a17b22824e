"""Models for harness log entries."""

from dataclasses import dataclass
from typing import Literal

type LogLevel = Literal["info", "success", "error", "warning"]

GENERAL_CATEGORY = "general"


@dataclass(frozen=True, kw_only=True)
class LogEntry:
    """A single timestamped line emitted during a suite run.

    The category is the name of the owning test, or "general" for entries
    emitted outside of any test.
    """

    type: LogLevel
    message: str
    timestamp: str
    category: str = GENERAL_CATEGORY
