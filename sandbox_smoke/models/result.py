"""Models for test execution results."""

from dataclasses import dataclass, field
from typing import Literal

from sandbox_smoke.models.log import LogEntry

type TestStatus = Literal["pending", "running", "success", "error"]

TERMINAL_STATUSES: frozenset[TestStatus] = frozenset({"success", "error"})


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Current state of a single test within a suite run.

    Records are never mutated in place; the tracker publishes a replaced
    record on every status change or appended log entry.
    """

    __test__ = False

    name: str
    status: TestStatus = "pending"
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)

    @property
    def finished(self) -> bool:
        """Whether the test has reached a terminal status."""
        return self.status in TERMINAL_STATUSES
