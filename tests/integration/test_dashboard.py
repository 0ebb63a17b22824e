"""Integration tests for the live dashboard."""

import asyncio
import io
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
from aiohttp.test_utils import TestClient, TestServer

from sandbox_smoke.dashboard import DashboardRunner, create_app
from sandbox_smoke.logger import RunLogger
from sandbox_smoke.models.result import TestStatus
from sandbox_smoke.orchestrator import SuiteOrchestrator, SuiteTest, TestContext
from sandbox_smoke.testing.fakes import DEFAULT_SETTINGS
from sandbox_smoke.tracker import TestResultTracker


@asynccontextmanager
async def connect() -> AsyncGenerator[str, None]:
    """Yield a stand-in client."""
    yield "client"


@pytest.fixture
def gate() -> asyncio.Event:
    """Event that holds the gated test until set."""
    return asyncio.Event()


@pytest.fixture
def runner(gate: asyncio.Event) -> DashboardRunner[str]:
    """Create runner with one quick and one gated test."""

    async def quick(ctx: TestContext[str]) -> None:
        ctx.log("quick step", "success")

    async def gated(ctx: TestContext[str]) -> None:
        ctx.log("waiting for gate")
        await gate.wait()
        raise RuntimeError("gate opened")

    logger = RunLogger(TestResultTracker(), stream=io.StringIO(), color=False)
    orchestrator: SuiteOrchestrator[str] = SuiteOrchestrator(
        logger=logger,
        settings=DEFAULT_SETTINGS,
        summary_printer=lambda results: None,
    )
    tests = [
        SuiteTest(name="Quick Test", procedure=quick),
        SuiteTest(name="Gated Test", procedure=gated),
    ]
    return DashboardRunner(orchestrator, tests, connect)


@pytest.fixture
async def client(
    runner: DashboardRunner[str],
) -> AsyncGenerator[TestClient, None]:
    """Serve the dashboard on a local test server."""
    async with TestClient(TestServer(create_app(runner))) as test_client:
        yield test_client


async def wait_for_status(
    runner: DashboardRunner[str], name: str, status: TestStatus
) -> None:
    """Poll until the named test reaches the given status."""
    async with asyncio.timeout(2):
        while not any(
            result.name == name and result.status == status
            for result in runner.orchestrator.tracker.snapshot()
        ):
            await asyncio.sleep(0.01)


async def test_index_serves_page(client: TestClient) -> None:
    """Serves the HTML dashboard."""
    response = await client.get("/")

    assert response.status == 200
    assert "Sandbox SDK Tests" in await response.text()


async def test_state_is_empty_before_first_run(client: TestClient) -> None:
    """Reports no results and no logs before any run."""
    response = await client.get("/api/state")
    state = await response.json()

    assert state == {
        "running": False,
        "summary": {"successful": 0, "failed": 0, "total": 0},
        "results": [],
        "logs": [],
    }


async def test_run_exposes_live_progress(
    client: TestClient, runner: DashboardRunner[str], gate: asyncio.Event
) -> None:
    """Shows per-test status while the suite runs and after it finishes."""
    response = await client.post("/api/run")
    assert response.status == 202

    await wait_for_status(runner, "Gated Test", "running")

    state = await (await client.get("/api/state")).json()
    assert state["running"] is True
    assert [(r["name"], r["status"]) for r in state["results"]] == [
        ("Quick Test", "success"),
        ("Gated Test", "running"),
    ]
    assert any(e["message"] == "quick step" for e in state["logs"])

    conflict = await client.post("/api/run")
    assert conflict.status == 409
    busy = await client.post("/api/clear")
    assert busy.status == 409

    gate.set()
    await runner.wait()

    state = await (await client.get("/api/state")).json()
    assert state["running"] is False
    assert state["summary"] == {"successful": 1, "failed": 1, "total": 2}
    gated_logs = state["results"][1]["logs"]
    assert gated_logs[-1]["type"] == "error"
    assert gated_logs[-1]["category"] == "Gated Test"


async def test_clear_forgets_finished_run(
    client: TestClient, runner: DashboardRunner[str], gate: asyncio.Event
) -> None:
    """Clears logs and results once the run has finished."""
    gate.set()
    await client.post("/api/run")
    await runner.wait()

    response = await client.post("/api/clear")
    assert response.status == 204

    state = await (await client.get("/api/state")).json()
    assert state["results"] == []
    assert state["logs"] == []


async def test_stop_cancels_active_run(
    runner: DashboardRunner[str],
) -> None:
    """Cancels an in-progress run on shutdown."""
    assert runner.start()
    await wait_for_status(runner, "Gated Test", "running")

    await runner.stop()

    assert not runner.running
