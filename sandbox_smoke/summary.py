"""Summary of a finished suite run."""

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TextIO

from sandbox_smoke.logger import RESET
from sandbox_smoke.models.result import TestResult, TestStatus

STATUS_SYMBOLS: Mapping[TestStatus, str] = {
    "success": "✅",
    "error": "❌",
    "running": "🔄",
    "pending": "⏳",
}

STATUS_COLORS: Mapping[TestStatus, str] = {
    "success": "\x1b[32m",
    "error": "\x1b[31m",
    "running": "\x1b[34m",
    "pending": "\x1b[33m",
}

HEADER_COLOR = "\x1b[36m"


@dataclass(frozen=True, kw_only=True)
class SuiteSummary:
    """Outcome counts for a suite run."""

    successful: int
    failed: int
    total: int

    @property
    def complete(self) -> bool:
        """Whether every test reached a terminal status."""
        return self.successful + self.failed == self.total


def summarize(results: Sequence[TestResult]) -> SuiteSummary:
    """Count successful and failed tests."""
    return SuiteSummary(
        successful=sum(1 for r in results if r.status == "success"),
        failed=sum(1 for r in results if r.status == "error"),
        total=len(results),
    )


def format_summary(
    results: Sequence[TestResult], *, color: bool = False
) -> list[str]:
    """Render the summary as console lines."""

    def paint(text: str, code: str) -> str:
        return f"{code}{text}{RESET}" if color else text

    summary = summarize(results)
    lines = [
        paint("📊 Test Summary:", HEADER_COLOR),
        paint(
            f"✅ Successful: {summary.successful}/{summary.total}",
            STATUS_COLORS["success"],
        ),
    ]
    if summary.failed:
        lines.append(
            paint(
                f"❌ Failed: {summary.failed}/{summary.total}",
                STATUS_COLORS["error"],
            )
        )

    lines.extend(
        paint(f"{STATUS_SYMBOLS[r.status]} {r.name}", STATUS_COLORS[r.status])
        for r in results
    )
    return lines


def print_summary(results: Sequence[TestResult], stream: TextIO | None = None) -> None:
    """Write the colored summary to the console."""
    out = stream if stream is not None else sys.stdout
    print(file=out)
    for line in format_summary(results, color=True):
        print(line, file=out)
