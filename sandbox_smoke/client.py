"""Connection to the sandbox API through the Daytona SDK."""

import logging
from collections.abc import AsyncGenerator, Callable, Mapping
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from daytona import (
    AsyncDaytona,
    AsyncSandbox,
    CreateSandboxFromSnapshotParams,
    DaytonaConfig,
)
from pydantic_core import to_json as _to_json

from sandbox_smoke.config import SandboxApiConfig
from sandbox_smoke.orchestrator import TestContext

log = logging.getLogger(__name__)

type SandboxContext = TestContext[AsyncDaytona]


@asynccontextmanager
async def connect_client(
    config: SandboxApiConfig,
) -> AsyncGenerator[AsyncDaytona, None]:
    """Create an SDK client and close it when the suite is done."""
    log.info(
        "Connecting to sandbox API: api_url=%s, target=%s",
        config.api_url or "<default>",
        config.target or "<default>",
    )
    daytona = AsyncDaytona(
        DaytonaConfig(
            api_key=config.api_key.get_secret_value(),
            api_url=config.api_url,
            target=config.target,
        )
    )
    try:
        yield daytona
    finally:
        await daytona.close()


def connect_from_env(
    environ: Mapping[str, str] | None = None,
) -> Callable[[], AbstractAsyncContextManager[AsyncDaytona]]:
    """Return a connect factory that reads credentials when the suite starts."""

    @asynccontextmanager
    async def connect() -> AsyncGenerator[AsyncDaytona, None]:
        config = SandboxApiConfig.from_env(environ)
        async with connect_client(config) as daytona:
            yield daytona

    return connect


@asynccontextmanager
async def provision_sandbox(
    daytona: AsyncDaytona,
    params: CreateSandboxFromSnapshotParams | None = None,
) -> AsyncGenerator[AsyncSandbox, None]:
    """Create a sandbox and delete it when the block exits.

    The sandbox is deleted even if the block fails. A failed delete after a
    failed block is logged so the original error is the one raised.
    """
    sandbox = await daytona.create(params)
    try:
        yield sandbox
    except BaseException:
        try:
            await daytona.delete(sandbox)
        except Exception as error:
            log.warning("Failed to delete sandbox %s: %s", sandbox.id, error)
        raise
    await daytona.delete(sandbox)


def to_json(value: object, *, indent: int | None = None) -> str:
    """Serialize an SDK response for logging."""
    return _to_json(value, indent=indent, fallback=repr).decode()
