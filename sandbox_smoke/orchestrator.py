"""Suite orchestrator running named test procedures one after another."""

import logging
import tempfile
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from sandbox_smoke.config import ProfileSettings
from sandbox_smoke.logger import RunLogger
from sandbox_smoke.models.log import LogLevel
from sandbox_smoke.models.result import TestResult
from sandbox_smoke.summary import print_summary
from sandbox_smoke.tracker import TestResultTracker

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestContext[C]:
    """Everything a test procedure may touch while it runs."""

    __test__ = False

    name: str
    client: C
    settings: ProfileSettings
    workdir: Path
    logger: RunLogger = field(repr=False)

    def log(self, message: str, level: LogLevel = "info") -> None:
        """Record a message under this test's category."""
        self.logger.record(message, level, self.name)


type Procedure[C] = Callable[[TestContext[C]], Awaitable[None]]


@dataclass(frozen=True, kw_only=True)
class SuiteTest[C]:
    """A named test procedure."""

    name: str
    procedure: Procedure[C]


@dataclass(frozen=True, kw_only=True)
class SuiteOrchestrator[C]:
    """Runs a suite of tests strictly in sequence against one client.

    A failing test is recorded and never stops the tests after it. A failure
    while connecting the client aborts the run before any test starts.
    """

    logger: RunLogger
    settings: ProfileSettings
    summary_printer: Callable[[Sequence[TestResult]], None] = print_summary

    @classmethod
    def create(
        cls,
        settings: ProfileSettings,
        *,
        stream: TextIO | None = None,
        color: bool = True,
    ) -> "SuiteOrchestrator[C]":
        """Create an orchestrator with a fresh tracker and logger."""
        logger = RunLogger(TestResultTracker(), stream=stream, color=color)
        return cls(logger=logger, settings=settings)

    @property
    def tracker(self) -> TestResultTracker:
        """Tracker holding the results of the current run."""
        return self.logger.tracker

    async def run_suite(
        self,
        tests: Sequence[SuiteTest[C]],
        connect: Callable[[], AbstractAsyncContextManager[C]],
    ) -> Sequence[TestResult]:
        """Run all tests and return their final results.

        Args:
            tests: Tests to run, in order
            connect: Factory for the client context shared by all tests

        Returns:
            Final result of every declared test, in declaration order

        """
        runtime = self.settings.runtime
        self.tracker.initialize(test.name for test in tests)
        self.logger.record(f"🚀 Starting sandbox SDK tests for {runtime}...")

        try:
            async with connect() as client:
                self.logger.record("Created sandbox client", "success")
                for test in tests:
                    await self._run_test(test, client)
        except Exception as error:
            log.error("Suite run aborted: %s", error, exc_info=error)
            self.logger.record(f"❌ Error in main execution: {error}", "error")
        finally:
            self.logger.record(f"🏁 All sandbox SDK tests for {runtime} completed!")

        results = self.tracker.snapshot()
        self.summary_printer(results)
        return results

    async def _run_test(self, test: SuiteTest[C], client: C) -> None:
        """Run one test, converting any failure into an error status."""
        self.tracker.set_status(test.name, "running")
        self.logger.record(f"🔄 Starting {test.name}...", "info", test.name)

        with tempfile.TemporaryDirectory(
            prefix="sandbox-smoke-", ignore_cleanup_errors=True
        ) as workdir:
            context = TestContext(
                name=test.name,
                client=client,
                settings=self.settings,
                workdir=Path(workdir),
                logger=self.logger,
            )
            try:
                await test.procedure(context)
            except Exception as error:
                log.error("Error in %s: %s", test.name, error, exc_info=error)
                self.tracker.set_status(test.name, "error")
                self.logger.record(
                    f"❌ Error in {test.name}: {error}", "error", test.name
                )
                return

        self.tracker.set_status(test.name, "success")
        self.logger.record(
            f"✅ {test.name} completed successfully!", "success", test.name
        )
