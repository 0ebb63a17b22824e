"""Code execution, command session and chart tests."""

from collections.abc import Mapping
from contextlib import aclosing

from daytona import CreateSandboxFromSnapshotParams, SessionExecuteRequest

from sandbox_smoke.client import SandboxContext, provision_sandbox, to_json
from sandbox_smoke.streaming import stream_command_logs

HELLO_CODE: Mapping[str, str] = {
    "typescript": 'console.log("Hello World from code!")',
    "javascript": 'console.log("Hello World from code!")',
    "python": 'print("Hello World from code!")',
}

COUNTER_COMMAND = (
    'counter=1; while (( counter <= 3 )); do echo "Count: $counter"; '
    "((counter++)); sleep 1; done"
)

CHARTS_CODE = """
import matplotlib.pyplot as plt
import numpy as np

x = np.linspace(0, 10, 30)
y = np.sin(x)
categories = ['A', 'B', 'C', 'D', 'E']
values = [40, 63, 15, 25, 8]

plt.figure(figsize=(8, 5))
plt.plot(x, y, 'b-', linewidth=2)
plt.title('Line Chart')
plt.xlabel('X-axis (seconds)')
plt.ylabel('Y-axis (amplitude)')
plt.grid(True)
plt.show()

plt.figure(figsize=(10, 6))
plt.bar(categories, values, color='skyblue', edgecolor='navy')
plt.title('Bar Chart')
plt.xlabel('Categories')
plt.ylabel('Values (count)')
plt.show()

plt.figure(figsize=(8, 8))
plt.pie(values, labels=categories, autopct='%1.1f%%', shadow=True, startangle=90)
plt.title('Pie Chart (Distribution in %)')
plt.axis('equal')
plt.legend()
plt.show()
"""

FILE_IO_CODE = """
import time
start = time.perf_counter()
data = 'test data ' * 10000
with open('test-file.txt', 'w') as f:
    f.write(data)
with open('test-file.txt') as f:
    content = f.read()
print(f"File I/O took {(time.perf_counter() - start) * 1000:.2f} milliseconds")
"""

HTTP_CODE = """
import json
import time
import urllib.request
start = time.perf_counter()
with urllib.request.urlopen('https://httpbin.org/json') as response:
    data = json.load(response)
print(f"HTTP request took {(time.perf_counter() - start) * 1000:.2f} milliseconds")
print('Response received:', len(data), 'keys')
"""


async def run_exec_command_test(ctx: SandboxContext) -> None:
    """Run code, one-shot commands and session commands in a sandbox."""
    settings = ctx.settings
    params = CreateSandboxFromSnapshotParams(language=settings.language)

    async with provision_sandbox(ctx.client, params) as sandbox:
        process = sandbox.process
        ctx.log("Running basic execution tests...")

        code_result = await process.code_run(HELLO_CODE[settings.language])
        if code_result.exit_code != 0:
            ctx.log(f"Error running code: {code_result.exit_code}", "error")
        else:
            ctx.log(f"Code result: {code_result.result}", "success")

        cmd_result = await process.exec(
            f'echo "Hello World from {settings.runtime} CMD!"'
        )
        if cmd_result.exit_code != 0:
            ctx.log(f"Error running command: {cmd_result.exit_code}", "error")
        else:
            ctx.log(f"Command result: {cmd_result.result}", "success")

        ctx.log("Running session execution tests...")

        session_id = f"{settings.session_prefix}-1"
        await process.create_session(session_id)
        ctx.log(f"Created session: {session_id}", "success")

        session = await process.get_session(session_id)
        ctx.log(f"Session details: {to_json(session, indent=2)}")

        command = await process.execute_session_command(
            session_id, SessionExecuteRequest(command="export FOO=BAR")
        )

        session = await process.get_session(session_id)
        ctx.log(f"Session updated: {to_json(session, indent=2)}")

        session_command = await process.get_session_command(
            session_id, command.cmd_id
        )
        ctx.log(f"Session command: {to_json(session_command, indent=2)}")

        response = await process.execute_session_command(
            session_id, SessionExecuteRequest(command="echo $FOO")
        )
        ctx.log(f"FOO={response.output}", "success")

        logs = await process.get_session_command_logs(session_id, response.cmd_id)
        ctx.log(f"Command logs: {to_json(logs, indent=2)}")

        await process.delete_session(session_id)
        ctx.log(f"Deleted session: {session_id}", "success")

        ctx.log("Testing async command execution...")

        async_session_id = f"{settings.session_prefix}-async-logs"
        await process.create_session(async_session_id)
        ctx.log(f"Created async session: {async_session_id}", "success")

        async_command = await process.execute_session_command(
            async_session_id,
            SessionExecuteRequest(command=COUNTER_COMMAND, run_async=True),
        )
        ctx.log("Started long-running command, streaming logs...")

        async with aclosing(
            stream_command_logs(process, async_session_id, async_command.cmd_id)
        ) as chunks:
            async for chunk in chunks:
                ctx.log(f"Log chunk: {chunk}", "success")

        ctx.log("Finished streaming logs", "success")

    ctx.log("Sandbox cleaned up")


async def run_charts_test(ctx: SandboxContext) -> None:
    """Render matplotlib charts and inspect the returned artifacts."""
    params = CreateSandboxFromSnapshotParams(language="python")

    async with provision_sandbox(ctx.client, params) as sandbox:
        response = await sandbox.process.code_run(CHARTS_CODE)
        artifacts = response.artifacts
        if response.exit_code != 0:
            ctx.log(f"Execution failed with exit code {response.exit_code}", "error")
            ctx.log(f"Output: {artifacts.stdout if artifacts else None}", "error")
        else:
            ctx.log("Chart execution successful", "success")
            for chart in (artifacts.charts if artifacts else None) or []:
                ctx.log(f"Generated chart: {chart.title} ({chart.type})", "success")
                if chart.png:
                    ctx.log(f"Chart has image data ({len(chart.png)} chars)")

    ctx.log("Sandbox cleaned up")


async def run_performance_test(ctx: SandboxContext) -> None:
    """Time file I/O and an HTTP request inside a Python sandbox."""
    params = CreateSandboxFromSnapshotParams(language="python")

    async with provision_sandbox(ctx.client, params) as sandbox:
        ctx.log(f"Testing {ctx.settings.runtime} performance features...")

        io_result = await sandbox.process.code_run(FILE_IO_CODE)
        ctx.log(f"File I/O performance: {io_result.result}", "success")

        http_result = await sandbox.process.code_run(HTTP_CODE)
        ctx.log(f"HTTP performance: {http_result.result}", "success")

    ctx.log("Sandbox cleaned up")
