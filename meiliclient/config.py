"""Client configuration."""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "http://localhost:7700"
HOST_ENV_VAR = "MEILI_URL"
API_KEY_ENV_VAR = "MEILI_MASTER_KEY"


class ClientConfig(BaseModel):
    """Connection settings shared by every index handle of a client.

    Frozen after construction.
    """

    host: str = Field(default=DEFAULT_HOST, description="Base URL of the engine")
    api_key: str | None = Field(default=None, description="Key sent as a Bearer token")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    task_timeout_ms: float | None = Field(
        default=5000, description="Default deadline when waiting for a task"
    )
    task_interval_ms: float = Field(
        default=50, gt=0, description="Default delay between task status polls"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a configuration from ``MEILI_URL`` and ``MEILI_MASTER_KEY``.

        Keyword arguments take precedence over the environment.
        """
        values = {
            "host": os.environ.get(HOST_ENV_VAR, DEFAULT_HOST),
            "api_key": os.environ.get(API_KEY_ENV_VAR) or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
