"""Declarative image and snapshot test."""

import time

from daytona import (
    CreateSandboxFromSnapshotParams,
    CreateSnapshotParams,
    Image,
    Resources,
)

from sandbox_smoke.client import SandboxContext, provision_sandbox

WORKSPACE_DIR = "/home/daytona/workspace"
VERIFY_COMMAND = (
    "python -c 'import numpy, pandas; print(numpy.__version__, pandas.__version__)'"
)


def build_image(runtime: str) -> Image:
    """Describe a Python data science image."""
    return (
        Image.debian_slim("3.12")
        .pip_install(["numpy", "pandas", "matplotlib", "scipy", "scikit-learn"])
        .run_commands(
            "apt-get update && apt-get install -y git",
            f"mkdir -p {WORKSPACE_DIR}",
        )
        .workdir(WORKSPACE_DIR)
        .env({"SMOKE_RUNTIME": runtime, "SMOKE_ENV": "production"})
    )


async def run_declarative_image_test(ctx: SandboxContext) -> None:
    """Build a snapshot from a declarative image and boot a sandbox from it."""
    daytona = ctx.client
    settings = ctx.settings

    snapshot_name = f"{settings.snapshot_prefix}:{time.time_ns() // 1_000_000}"
    ctx.log(f"Creating snapshot with name: {snapshot_name}")

    image = build_image(settings.runtime)

    ctx.log(f"Creating Snapshot: {snapshot_name}")
    await daytona.snapshot.create(
        CreateSnapshotParams(
            name=snapshot_name,
            image=image,
            resources=Resources(cpu=1, memory=1, disk=3),
        ),
        on_logs=lambda chunk: ctx.log(f"Snapshot: {chunk}"),
    )

    ctx.log("Creating Sandbox from Pre-built Snapshot")
    params = CreateSandboxFromSnapshotParams(snapshot=snapshot_name)
    async with provision_sandbox(daytona, params) as sandbox:
        ctx.log("Verifying sandbox from pre-built image:")
        response = await sandbox.process.exec(VERIFY_COMMAND)
        ctx.log(f"Python environment: {response.result}", "success")

        env_response = await sandbox.process.exec("echo $SMOKE_RUNTIME $SMOKE_ENV")
        ctx.log(f"Image environment: {env_response.result}")

    ctx.log("Cleaned up sandbox")
