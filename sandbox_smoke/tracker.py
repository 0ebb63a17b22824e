"""Tracking of per-test status and logs for a suite run."""

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence

from sandbox_smoke.models.log import LogEntry
from sandbox_smoke.models.result import TestResult, TestStatus

log = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Mapping[TestStatus, frozenset[TestStatus]] = {
    "pending": frozenset({"running"}),
    "running": frozenset({"success", "error"}),
    "success": frozenset(),
    "error": frozenset(),
}


class TrackerError(Exception):
    """Base class for misuse of the result tracker."""


class DuplicateTestError(TrackerError):
    """Raised when a suite declares the same test name twice."""


class UnknownTestError(TrackerError):
    """Raised when updating a test name that is not tracked."""


class InvalidTransitionError(TrackerError):
    """Raised when a status change would break the test state machine."""


class TestResultTracker:
    """Holds one TestResult per declared test name, in declaration order.

    The results are published as a whole tuple on every change, so a reader
    such as the dashboard never observes a half-applied update.
    """

    __test__ = False

    def __init__(self) -> None:
        self._results: tuple[TestResult, ...] = ()

    @property
    def names(self) -> Sequence[str]:
        """Names of the tracked tests in declaration order."""
        return tuple(result.name for result in self._results)

    def initialize(self, names: Iterable[str]) -> None:
        """Replace tracked results with a pending record per name."""
        ordered = list(names)
        seen: set[str] = set()
        for name in ordered:
            if name in seen:
                raise DuplicateTestError(f"Test '{name}' is declared more than once")
            seen.add(name)

        self._results = tuple(TestResult(name=name) for name in ordered)
        log.debug("Tracking %d test(s)", len(ordered))

    def set_status(self, name: str, status: TestStatus) -> TestResult:
        """Move the named test to a new status.

        Raises:
            UnknownTestError: If the name is not tracked
            InvalidTransitionError: If the transition is not allowed

        """
        index = self._index_of(name)
        current = self._results[index]

        if status not in ALLOWED_TRANSITIONS[current.status]:
            raise InvalidTransitionError(
                f"Test '{name}' cannot move from {current.status} to {status}"
            )

        return self._publish(index, dataclasses.replace(current, status=status))

    def append_log(self, entry: LogEntry) -> bool:
        """Attach an entry to the test named by its category, if tracked."""
        for index, result in enumerate(self._results):
            if result.name == entry.category:
                self._publish(
                    index, dataclasses.replace(result, logs=(*result.logs, entry))
                )
                return True
        return False

    def get(self, name: str) -> TestResult:
        """Return the current record for a tracked test."""
        return self._results[self._index_of(name)]

    def snapshot(self) -> tuple[TestResult, ...]:
        """Return the current results in declaration order."""
        return self._results

    def clear(self) -> None:
        """Drop all tracked results."""
        self._results = ()

    def _index_of(self, name: str) -> int:
        for index, result in enumerate(self._results):
            if result.name == name:
                return index
        raise UnknownTestError(f"Test '{name}' is not tracked")

    def _publish(self, index: int, result: TestResult) -> TestResult:
        results = list(self._results)
        results[index] = result
        self._results = tuple(results)
        return result
