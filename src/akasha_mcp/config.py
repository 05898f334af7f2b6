"""Gateway configuration.

Read from the environment so the same settings work under the CLI and
under ``uvicorn --factory akasha_mcp.app:create_app``.

Environment:
    FASTAPI_URL                 Backend base URL (required)
    AKASHA_QUERY_PATH           Backend search path (default /query)
    HOST / PORT                 Bind address (default 0.0.0.0:8080)
    AKASHA_KEEPALIVE_INTERVAL   SSE keep-alive period in seconds (default 15)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .transport.sse import DEFAULT_KEEPALIVE_INTERVAL

BACKEND_URL_ENV = "FASTAPI_URL"
QUERY_PATH_ENV = "AKASHA_QUERY_PATH"
HOST_ENV = "HOST"
PORT_ENV = "PORT"
KEEPALIVE_ENV = "AKASHA_KEEPALIVE_INTERVAL"


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


@dataclass
class GatewayConfig:
    """Gateway configuration."""

    backend_url: str
    query_path: str = "/query"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Keep SSE/WS connections sticky behind proxies
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL
    keep_alive_timeout: int = 75

    def __post_init__(self) -> None:
        if not self.backend_url:
            raise ConfigError(f"{BACKEND_URL_ENV} env var is required")
        if self.keepalive_interval <= 0:
            raise ConfigError("keepalive_interval must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewayConfig:
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ

        backend_url = env.get(BACKEND_URL_ENV, "").strip()
        if not backend_url:
            raise ConfigError(f"{BACKEND_URL_ENV} env var is required")

        try:
            port = int(env.get(PORT_ENV, "8080"))
            keepalive = float(env.get(KEEPALIVE_ENV, str(DEFAULT_KEEPALIVE_INTERVAL)))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        return cls(
            backend_url=backend_url,
            query_path=env.get(QUERY_PATH_ENV, "/query"),
            host=env.get(HOST_ENV, "0.0.0.0"),
            port=port,
            keepalive_interval=keepalive,
        )
