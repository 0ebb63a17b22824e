"""Live web dashboard for watching a suite run."""

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

from aiohttp import web

from sandbox_smoke.orchestrator import SuiteOrchestrator, SuiteTest
from sandbox_smoke.summary import summarize

log = logging.getLogger(__name__)

PAGE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Sandbox SDK Tests</title>
<style>
body { font-family: monospace; background: #0d1117; color: #c9d1d9; padding: 20px; }
.info { color: #c9d1d9; } .success { color: #10b981; }
.error { color: #ef4444; } .warning { color: #f59e0b; }
.pending { color: #6b7280; } .running { color: #3b82f6; }
</style>
</head>
<body>
<h1>Sandbox SDK Tests</h1>
<button onclick="post('/api/run')">Run tests</button>
<button onclick="post('/api/clear')">Clear logs</button>
<p id="summary"></p>
<ul id="results"></ul>
<pre id="logs"></pre>
<script>
const icons = {success: "✅", error: "❌", running: "🔄", pending: "⏳"};
async function post(path) { await fetch(path, {method: "POST"}); refresh(); }
async function refresh() {
  const state = await (await fetch("/api/state")).json();
  const s = state.summary;
  document.getElementById("summary").textContent =
    `${state.running ? "Running" : "Idle"}: ${s.successful}/${s.total} successful, ${s.failed} failed`;
  document.getElementById("results").innerHTML = state.results.map(
    r => `<li class="${r.status}">${icons[r.status]} ${r.name} (${r.logs.length} logs)</li>`
  ).join("");
  const logs = document.getElementById("logs");
  logs.innerHTML = "";
  for (const e of state.logs) {
    const line = document.createElement("div");
    line.className = e.type;
    line.textContent = `[${e.timestamp}] [${e.category}] ${e.message}`;
    logs.appendChild(line);
  }
}
setInterval(refresh, 1000);
refresh();
</script>
</body>
</html>
"""


class DashboardRunner[C]:
    """Starts suite runs in the background and exposes their state."""

    def __init__(
        self,
        orchestrator: SuiteOrchestrator[C],
        tests: Sequence[SuiteTest[C]],
        connect: Callable[[], AbstractAsyncContextManager[C]],
    ) -> None:
        self.orchestrator = orchestrator
        self.tests = tests
        self.connect = connect
        self._task: asyncio.Task[Any] | None = None

    @property
    def running(self) -> bool:
        """Whether a suite run is in progress."""
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start a suite run unless one is already in progress."""
        if self.running:
            return False

        self.orchestrator.logger.clear()
        self._task = asyncio.create_task(
            self.orchestrator.run_suite(self.tests, self.connect)
        )
        return True

    async def wait(self) -> None:
        """Wait for the current run, if any, to finish."""
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        """Cancel the current run, if any."""
        if self.running and self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                log.info("Suite run cancelled")

    def clear(self) -> bool:
        """Forget logs and results unless a run is in progress."""
        if self.running:
            return False

        self.orchestrator.logger.clear()
        self.orchestrator.tracker.clear()
        return True

    def state(self) -> dict[str, Any]:
        """Return the current logs and results as JSON-ready data."""
        results = self.orchestrator.tracker.snapshot()
        entries = self.orchestrator.logger.entries
        summary = summarize(results)
        return {
            "running": self.running,
            "summary": {
                "successful": summary.successful,
                "failed": summary.failed,
                "total": summary.total,
            },
            "results": [dataclasses.asdict(result) for result in results],
            "logs": [dataclasses.asdict(entry) for entry in entries],
        }


RUNNER_KEY = web.AppKey("runner", DashboardRunner)


async def index(request: web.Request) -> web.Response:
    """Serve the dashboard page."""
    return web.Response(text=PAGE, content_type="text/html")


async def get_state(request: web.Request) -> web.Response:
    """Return the current run state."""
    return web.json_response(request.app[RUNNER_KEY].state())


async def start_run(request: web.Request) -> web.Response:
    """Start a new suite run."""
    if not request.app[RUNNER_KEY].start():
        return web.json_response({"error": "A run is already in progress"}, status=409)
    return web.json_response({"started": True}, status=202)


async def clear_state(request: web.Request) -> web.Response:
    """Clear logs and results of the last run."""
    if not request.app[RUNNER_KEY].clear():
        return web.json_response({"error": "A run is in progress"}, status=409)
    return web.Response(status=204)


def create_app(runner: DashboardRunner[Any]) -> web.Application:
    """Create the dashboard application."""
    app = web.Application()
    app[RUNNER_KEY] = runner
    app.router.add_get("/", index)
    app.router.add_get("/api/state", get_state)
    app.router.add_post("/api/run", start_run)
    app.router.add_post("/api/clear", clear_state)

    async def on_cleanup(app: web.Application) -> None:
        await app[RUNNER_KEY].stop()

    app.on_cleanup.append(on_cleanup)
    return app
