"""Backend client for the Akasha search API.

Issues the single ``POST /query`` a tool call needs and folds every outcome
into a ``ToolResult``. ``invoke`` never raises: execution failures are
content-level (``isError``), not protocol faults.
"""

from __future__ import annotations

import logging

import httpx

from .protocol.types import ToolInvocationArgs, ToolResult

logger = logging.getLogger(__name__)

# Calls have no timeout, so the pool must not cap concurrent connections
BACKEND_LIMITS = httpx.Limits(max_connections=None, max_keepalive_connections=20)


class BackendClient:
    """Client for the downstream search endpoint.

    No retries, no caching and no timeout: one backend call per tool
    invocation, running to completion.
    """

    def __init__(
        self,
        base_url: str,
        query_path: str = "/query",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.query_path = query_path
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.query_path}"

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=None, limits=BACKEND_LIMITS, transport=self._transport
            )
        return self._client

    async def invoke(self, args: ToolInvocationArgs) -> ToolResult:
        """Run one search against the backend."""
        try:
            client = self._ensure_client()
            response = await client.post(
                self.endpoint,
                json=args.to_request_body(),
                headers={"Content-Type": "application/json"},
            )

            if not response.is_success:
                logger.warning(f"Backend returned {response.status_code} for {self.endpoint}")
                return ToolResult.from_error(f"{response.status_code}: {response.text}")

            return ToolResult.from_json(response.json())

        except Exception as e:
            logger.warning(f"Backend call failed: {e!r}")
            return ToolResult.from_error(f"Gateway error: {e}")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
