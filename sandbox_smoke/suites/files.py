"""File system and language server tests."""

import json
import platform
from datetime import datetime, timezone

from daytona import FileUpload, LspCompletionPosition

from sandbox_smoke.client import SandboxContext, provision_sandbox, to_json

PROJECT_DIR = "~/project-files"

LSP_REPOSITORY = "https://github.com/panaverse/learn-typescript"
LSP_PROJECT_DIR = "learn-typescript"
LSP_BRANCH = "master"
LSP_BROKEN_LINE = "var obj1 = new Base();"
LSP_FIXED_LINE = "var obj1 = new E();"


async def run_file_operations_test(ctx: SandboxContext) -> None:
    """Upload, inspect, edit and download files in a sandbox."""
    runtime = ctx.settings.runtime

    config_data = json.dumps(
        {
            "name": f"{runtime.lower()}-project-config",
            "version": "1.0.0",
            "runtime": runtime.lower(),
            "settings": {
                "debug": True,
                "maxConnections": 10,
            },
        },
        indent=2,
    )
    local_files = {
        "example.txt": f"This is a test file from {runtime}",
        "config.json": config_data,
        "script.sh": (
            "#!/bin/bash\n"
            f'echo "Hello from {runtime} script!"\n'
            "exit 0"
        ),
    }

    uploads = []
    for name, content in local_files.items():
        source = ctx.workdir / name
        source.write_text(content)
        uploads.append(
            FileUpload(source=str(source), destination=f"{PROJECT_DIR}/{name}")
        )

    async with provision_sandbox(ctx.client) as sandbox:
        ctx.log(f"Created sandbox with ID: {sandbox.id}", "success")

        files = await sandbox.fs.list_files("~")
        ctx.log(f"Initial files: {to_json(files)}")

        await sandbox.fs.create_folder(PROJECT_DIR, "755")
        ctx.log(f"Created directory: {PROJECT_DIR}", "success")

        await sandbox.fs.upload_files(uploads)
        ctx.log("Uploaded multiple files", "success")

        ls_result = await sandbox.process.exec(f"ls -la {PROJECT_DIR}")
        ctx.log(f"Files in directory: {ls_result.result}")

        await sandbox.process.exec(f"chmod +x {PROJECT_DIR}/script.sh")

        script_result = await sandbox.process.exec(f"{PROJECT_DIR}/script.sh")
        ctx.log(f"Script output: {script_result.result}", "success")

        matches = await sandbox.fs.search_files(PROJECT_DIR, "*.json")
        ctx.log(f"JSON files found: {to_json(matches)}")

        await sandbox.fs.replace_in_files(
            [f"{PROJECT_DIR}/config.json"], '"debug": true', '"debug": false'
        )

        downloaded = await sandbox.fs.download_file(f"{PROJECT_DIR}/config.json")
        config_content = downloaded.decode()
        ctx.log(f"Updated config: {config_content}", "success")

        mode = (
            "Production mode" if '"debug": false' in config_content else "Debug mode"
        )
        script_status = (
            "Executed successfully" if script_result.exit_code == 0 else "Failed"
        )
        report = "\n".join(
            [
                f"{runtime} Project Files Report:",
                "------------------------",
                f"Time: {datetime.now(timezone.utc).isoformat()}",
                f"Platform: {platform.system()}",
                f"Arch: {platform.machine()}",
                f"Files: {len(matches.files)} JSON files found",
                f"Config: {mode}",
                f"Script: {script_status}",
            ]
        )
        await sandbox.fs.upload_file(report.encode(), f"{PROJECT_DIR}/report.txt")
        ctx.log("Created and saved report", "success")

    ctx.log("Sandbox cleaned up")


async def run_git_lsp_test(ctx: SandboxContext) -> None:
    """Clone a repository and query a language server about one of its files."""
    async with provision_sandbox(ctx.client) as sandbox:
        await sandbox.git.clone(LSP_REPOSITORY, LSP_PROJECT_DIR, LSP_BRANCH)
        ctx.log("Repository cloned successfully", "success")

        matches = await sandbox.fs.find_files(LSP_PROJECT_DIR, LSP_BROKEN_LINE)
        ctx.log(f"Matches found: {to_json(matches)}")

        if matches:
            path = matches[0].file

            lsp = sandbox.create_lsp_server("typescript", LSP_PROJECT_DIR)
            await lsp.start()
            ctx.log("Language server started", "success")

            await lsp.did_open(path)
            ctx.log(f"Opened file: {path}")

            symbols = await lsp.document_symbols(path)
            ctx.log(f"Symbols: {to_json(symbols)}")

            await sandbox.fs.replace_in_files([path], LSP_BROKEN_LINE, LSP_FIXED_LINE)
            ctx.log("Fixed error in document", "success")

            # Reopen so the server sees the edited contents
            await lsp.did_close(path)
            await lsp.did_open(path)

            completions = await lsp.completions(
                path, LspCompletionPosition(line=12, character=18)
            )
            ctx.log(f"Completions: {to_json(completions)}")

    ctx.log("Sandbox cleaned up")
