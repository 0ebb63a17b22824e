"""Sandbox lifecycle, volume and retention policy tests."""

from contextlib import AsyncExitStack

from daytona import CreateSandboxFromSnapshotParams, VolumeMount

from sandbox_smoke.client import SandboxContext, provision_sandbox, to_json

FIRST_MOUNT_DIR = "/home/daytona/volume"
SECOND_MOUNT_DIR = "/home/daytona/my-files"


async def run_volumes_test(ctx: SandboxContext) -> None:
    """Share a volume between two sandboxes."""
    daytona = ctx.client
    settings = ctx.settings

    volume = await daytona.volume.get(settings.volume_name, create=True)
    ctx.log(f"Created/Retrieved volume: {settings.volume_name}")

    def mounted_at(path: str) -> CreateSandboxFromSnapshotParams:
        return CreateSandboxFromSnapshotParams(
            language=settings.language,
            volumes=[VolumeMount(volume_id=volume.id, mount_path=path)],
        )

    async with AsyncExitStack() as stack:
        sandbox1 = await stack.enter_async_context(
            provision_sandbox(daytona, mounted_at(FIRST_MOUNT_DIR))
        )
        ctx.log(f"Created sandbox1 with volume mounted at {FIRST_MOUNT_DIR}", "success")

        new_dir = f"{FIRST_MOUNT_DIR}/new-dir"
        await sandbox1.fs.create_folder(new_dir, "755")
        ctx.log(f"Created directory: {new_dir}")

        new_file = f"{FIRST_MOUNT_DIR}/new-file.txt"
        await sandbox1.fs.upload_file(
            f"Hello from {settings.runtime}!".encode(), new_file
        )
        ctx.log(f"Created file: {new_file}")

        sandbox2 = await stack.enter_async_context(
            provision_sandbox(daytona, mounted_at(SECOND_MOUNT_DIR))
        )
        ctx.log(
            f"Created sandbox2 with volume mounted at {SECOND_MOUNT_DIR}", "success"
        )

        files = await sandbox2.fs.list_files(SECOND_MOUNT_DIR)
        ctx.log(f"Files in {SECOND_MOUNT_DIR}: {to_json(files)}")

        content = await sandbox1.fs.download_file(new_file)
        ctx.log(f"File content: {content.decode()}", "success")

    ctx.log("Cleaned up sandboxes")


async def run_lifecycle_test(ctx: SandboxContext) -> None:
    """Walk a sandbox through stop, start, lookup and delete."""
    daytona = ctx.client

    ctx.log("Creating sandbox")
    async with provision_sandbox(daytona) as sandbox:
        ctx.log("Sandbox created", "success")

        await sandbox.set_labels(dict(ctx.settings.labels))
        ctx.log("Set labels on sandbox")

        ctx.log("Stopping sandbox")
        await sandbox.stop()
        ctx.log("Sandbox stopped", "success")

        ctx.log("Starting sandbox")
        await sandbox.start()
        ctx.log("Sandbox started", "success")

        ctx.log("Getting existing sandbox")
        existing = await daytona.get(sandbox.id)
        ctx.log("Got existing sandbox", "success")

        response = await existing.process.exec(
            f'echo "Hello World from {ctx.settings.runtime} exec!"', timeout=10
        )
        if response.exit_code != 0:
            ctx.log(f"Command error: {response.exit_code} {response.result}", "error")
        else:
            ctx.log(f"Command result: {response.result}", "success")

        sandboxes = [listed async for listed in daytona.list()]
        ctx.log(f"Total sandboxes count: {len(sandboxes)}")
        if sandboxes:
            first = sandboxes[0]
            ctx.log(f"Sandbox info -> id: {first.id} state: {first.state}")

        ctx.log("Deleting sandbox")
    ctx.log("Sandbox deleted", "success")


async def run_auto_delete_test(ctx: SandboxContext) -> None:
    """Exercise the auto-delete interval settings."""
    daytona = ctx.client

    async with AsyncExitStack() as stack:
        # Disabled by default
        sandbox1 = await stack.enter_async_context(provision_sandbox(daytona))
        ctx.log(f"Default auto-delete interval: {sandbox1.auto_delete_interval}")

        await sandbox1.set_auto_delete_interval(60)
        ctx.log(
            f"Auto-delete set to 1 hour: {sandbox1.auto_delete_interval}", "success"
        )

        await sandbox1.set_auto_delete_interval(0)
        ctx.log(f"Auto-delete immediate: {sandbox1.auto_delete_interval}", "success")

        await sandbox1.set_auto_delete_interval(-1)
        ctx.log(f"Auto-delete disabled: {sandbox1.auto_delete_interval}", "success")

        sandbox2 = await stack.enter_async_context(
            provision_sandbox(
                daytona, CreateSandboxFromSnapshotParams(auto_delete_interval=1440)
            )
        )
        ctx.log(
            f"Sandbox2 auto-delete (1 day): {sandbox2.auto_delete_interval}",
            "success",
        )

    ctx.log("Cleaned up sandboxes")


async def run_auto_archive_test(ctx: SandboxContext) -> None:
    """Exercise the auto-archive interval settings."""
    daytona = ctx.client

    async with AsyncExitStack() as stack:
        sandbox1 = await stack.enter_async_context(provision_sandbox(daytona))
        ctx.log(f"Default auto-archive interval: {sandbox1.auto_archive_interval}")

        await sandbox1.set_auto_archive_interval(60)
        ctx.log(
            f"Auto-archive set to 1 hour: {sandbox1.auto_archive_interval}", "success"
        )

        # 0 means the maximum interval
        sandbox2 = await stack.enter_async_context(
            provision_sandbox(
                daytona, CreateSandboxFromSnapshotParams(auto_archive_interval=0)
            )
        )
        ctx.log(
            f"Sandbox2 auto-archive (max): {sandbox2.auto_archive_interval}", "success"
        )

        sandbox3 = await stack.enter_async_context(
            provision_sandbox(
                daytona, CreateSandboxFromSnapshotParams(auto_archive_interval=1440)
            )
        )
        ctx.log(
            f"Sandbox3 auto-archive (1 day): {sandbox3.auto_archive_interval}",
            "success",
        )

    ctx.log("Cleaned up all sandboxes")
