"""Tests for the run logger."""

import io
from datetime import datetime

import pytest

from sandbox_smoke.logger import RESET, RunLogger, format_entry
from sandbox_smoke.testing.factories import LogEntryFactory
from sandbox_smoke.tracker import TestResultTracker


@pytest.fixture
def stream() -> io.StringIO:
    """Capture console output."""
    return io.StringIO()


@pytest.fixture
def logger(stream: io.StringIO) -> RunLogger:
    """Create logger tracking a single test with a fixed clock."""
    tracker = TestResultTracker()
    tracker.initialize(["Volumes Test"])
    return RunLogger(
        tracker, stream=stream, clock=lambda: datetime(2025, 1, 1, 9, 30, 5)
    )


def test_record_defaults_to_general_info(logger: RunLogger) -> None:
    """Records info entries in the general category by default."""
    entry = logger.record("hello")

    assert entry.type == "info"
    assert entry.category == "general"
    assert entry.timestamp == "09:30:05"
    assert logger.entries == (entry,)


def test_record_appends_to_matching_test(logger: RunLogger) -> None:
    """Mirrors entries into the test named by the category."""
    entry = logger.record("Created volume", "success", "Volumes Test")

    assert logger.tracker.get("Volumes Test").logs == (entry,)


def test_record_keeps_unknown_category_global_only(logger: RunLogger) -> None:
    """Keeps entries for unknown categories in the global sequence only."""
    entry = logger.record("orphan", "warning", "NoSuchTest")

    assert logger.entries == (entry,)
    assert logger.tracker.get("Volumes Test").logs == ()


def test_record_preserves_emission_order(logger: RunLogger) -> None:
    """Keeps global and per-test sequences in emission order."""
    first = logger.record("one", category="Volumes Test")
    middle = logger.record("two")
    last = logger.record("three", category="Volumes Test")

    assert logger.entries == (first, middle, last)
    assert logger.tracker.get("Volumes Test").logs == (first, last)


def test_record_writes_colored_line(logger: RunLogger, stream: io.StringIO) -> None:
    """Writes a colored line per entry to the console."""
    logger.record("boom", "error", "Volumes Test")

    assert stream.getvalue() == (
        f"\x1b[31m[09:30:05] [Volumes Test] boom{RESET}\n"
    )


def test_clear_forgets_entries(logger: RunLogger) -> None:
    """Clear empties the global sequence."""
    logger.record("hello")

    logger.clear()

    assert logger.entries == ()


@pytest.mark.parametrize(
    ("level", "color"),
    [
        ("info", "\x1b[36m"),
        ("success", "\x1b[32m"),
        ("error", "\x1b[31m"),
        ("warning", "\x1b[33m"),
    ],
)
def test_format_entry_colors_by_level(level: str, color: str) -> None:
    """Uses one ANSI color per level."""
    entry = LogEntryFactory.build(type=level, message="msg", category="general")

    assert format_entry(entry) == f"{color}[12:00:00] [general] msg{RESET}"


def test_format_entry_without_color() -> None:
    """Omits escape codes when color is disabled."""
    entry = LogEntryFactory.build(message="msg", category="Charts Test")

    assert format_entry(entry, color=False) == "[12:00:00] [Charts Test] msg"
