"""Tests for the declarative image procedure."""

from pathlib import Path
from typing import Any

import pytest

from sandbox_smoke.suites.images import run_declarative_image_test
from sandbox_smoke.testing.fakes import fake_daytona, fake_sandbox, make_context


async def test_builds_snapshot_and_boots_sandbox(tmp_path: Path) -> None:
    """Creates a snapshot, streams its build logs and boots a sandbox from it."""
    sandbox = fake_sandbox()
    daytona = fake_daytona(sandbox)

    async def create_snapshot(params: Any, on_logs: Any) -> None:
        on_logs("Step 1/4")
        on_logs("Step 2/4")

    daytona.snapshot.create.side_effect = create_snapshot
    ctx = make_context(daytona, tmp_path)

    await run_declarative_image_test(ctx)

    params = daytona.snapshot.create.await_args.args[0]
    assert params.name.startswith("test-example:")
    assert params.name.split(":")[1].isdigit()
    assert (params.resources.cpu, params.resources.memory, params.resources.disk) == (
        1,
        1,
        3,
    )

    sandbox_params = daytona.create.await_args.args[0]
    assert sandbox_params.snapshot == params.name

    messages = [e.message for e in ctx.logger.entries]
    assert "Snapshot: Step 1/4" in messages
    assert "Snapshot: Step 2/4" in messages
    daytona.delete.assert_awaited_once_with(sandbox)



async def test_deletes_sandbox_when_verification_fails(tmp_path: Path) -> None:
    """Deletes the sandbox booted from the snapshot when a command raises."""
    sandbox = fake_sandbox()
    sandbox.process.exec.side_effect = RuntimeError("exec failed")
    daytona = fake_daytona(sandbox)
    ctx = make_context(daytona, tmp_path)

    with pytest.raises(RuntimeError, match="exec failed"):
        await run_declarative_image_test(ctx)

    daytona.delete.assert_awaited_once_with(sandbox)


async def test_snapshot_failure_creates_no_sandbox(tmp_path: Path) -> None:
    """Stops before creating a sandbox when the snapshot build fails."""
    daytona = fake_daytona(fake_sandbox())
    daytona.snapshot.create.side_effect = RuntimeError("build failed")
    ctx = make_context(daytona, tmp_path)

    with pytest.raises(RuntimeError, match="build failed"):
        await run_declarative_image_test(ctx)

    daytona.create.assert_not_awaited()
    daytona.delete.assert_not_awaited()
