"""Configuration for the sandbox API client and runtime profiles."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, SecretStr

API_KEY_ENV = "DAYTONA_API_KEY"
API_URL_ENV = "DAYTONA_API_URL"
TARGET_ENV = "DAYTONA_TARGET"


class MissingCredentialsError(Exception):
    """Raised when no API key is available in the environment."""


class SandboxApiConfig(BaseModel):
    """Connection settings for the sandbox API."""

    api_key: SecretStr
    api_url: str | None = None
    target: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SandboxApiConfig":
        """Build configuration from environment variables.

        Raises:
            MissingCredentialsError: If the API key variable is unset or empty

        """
        env = os.environ if environ is None else environ

        if not (api_key := env.get(API_KEY_ENV, "").strip()):
            raise MissingCredentialsError(
                f"{API_KEY_ENV} environment variable is required"
            )

        return cls(
            api_key=SecretStr(api_key),
            api_url=env.get(API_URL_ENV) or None,
            target=env.get(TARGET_ENV) or None,
        )


class ProfileSettings(BaseModel):
    """Runtime-specific names and labels used by the test procedures."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    runtime: str = Field(..., description="Runtime label shown in logs")
    language: str = Field(..., description="Sandbox language for code runs")
    volume_name: str = Field(..., description="Volume to get or create")
    snapshot_prefix: str = Field(..., description="Prefix for snapshot names")
    session_prefix: str = Field(
        default="exec-session", description="Prefix for process session ids"
    )
    labels: Mapping[str, str] = Field(
        default_factory=dict, description="Labels applied in the lifecycle test"
    )
