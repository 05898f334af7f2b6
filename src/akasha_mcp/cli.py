"""Akasha MCP gateway CLI.

Usage:
    akasha-mcp --backend-url http://localhost:8000   # Serve on 0.0.0.0:8080
    FASTAPI_URL=http://api:8000 akasha-mcp --port 9000
    akasha-mcp --health                              # Check a running gateway
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import click
import httpx

from .config import (
    BACKEND_URL_ENV,
    HOST_ENV,
    KEEPALIVE_ENV,
    PORT_ENV,
    ConfigError,
    GatewayConfig,
)
from .transport.sse import DEFAULT_KEEPALIVE_INTERVAL

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


@click.command()
@click.option("--host", envvar=HOST_ENV, default="0.0.0.0", help="Host to bind to")
@click.option("--port", envvar=PORT_ENV, default=8080, type=int, help="Port to bind to")
@click.option(
    "--backend-url",
    envvar=BACKEND_URL_ENV,
    help=f"Akasha FastAPI base URL (env: {BACKEND_URL_ENV})",
)
@click.option(
    "--keepalive",
    envvar=KEEPALIVE_ENV,
    default=DEFAULT_KEEPALIVE_INTERVAL,
    type=float,
    help="Seconds between SSE keep-alive frames",
)
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="info",
    help="Logging level",
)
@click.option("--health", "health_check", is_flag=True, help="Check gateway health and exit")
@click.option("--health-url", default="http://localhost:8080", help="Gateway URL for health check")
def main(
    host: str,
    port: int,
    backend_url: str | None,
    keepalive: float,
    reload: bool,
    log_level: str,
    health_check: bool,
    health_url: str,
) -> None:
    """Akasha MCP gateway - exposes qdrant_search over WebSocket and SSE."""
    if health_check:
        _do_health_check(health_url)
        return

    try:
        config = GatewayConfig(
            backend_url=backend_url or "",
            host=host,
            port=port,
            keepalive_interval=keepalive,
        )
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    _run_http_server(config, reload, log_level.lower())


def _do_health_check(url: str) -> None:
    """Check gateway health."""

    async def check() -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{url.rstrip('/')}/")
                if response.status_code == 200:
                    data = response.json()
                    click.echo(f"Gateway is healthy: {data}")
                else:
                    click.echo(f"Gateway returned {response.status_code}", err=True)
                    sys.exit(1)
        except httpx.ConnectError:
            click.echo(f"Cannot connect to gateway at {url}", err=True)
            sys.exit(1)

    asyncio.run(check())


def _run_http_server(config: GatewayConfig, reload: bool, log_level: str) -> None:
    """Run the gateway under uvicorn."""
    import uvicorn

    # The app factory reads its configuration from the environment
    os.environ[BACKEND_URL_ENV] = config.backend_url
    os.environ[KEEPALIVE_ENV] = str(config.keepalive_interval)

    click.echo(
        f"HTTP :{config.port} | WS /mcp | SSE /sse | Discovery /.well-known/mcp",
        err=True,
    )
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "akasha_mcp.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=reload,
        log_level=log_level,
        timeout_keep_alive=config.keep_alive_timeout,
    )


if __name__ == "__main__":
    main()
