"""Unit tests for the backend client.

Every outcome of the backend call must come back as a ToolResult:
- 2xx with JSON -> one json content part, isError False
- non-2xx -> "<status>: <body>" text, isError True
- network failure / bad payload -> "Gateway error: ..." text, isError True
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from akasha_mcp.backend import BackendClient
from akasha_mcp.protocol.types import JsonContent, TextContent, ToolInvocationArgs

ARGS = ToolInvocationArgs(query="karma", traditions="buddhism")


class TestBackendRequest:
    """Tests for the request the client sends."""

    @pytest.mark.asyncio
    async def test_posts_to_query_endpoint(self, backend, backend_handler) -> None:
        """One POST to <base>/query with a JSON body."""
        await backend.invoke(ARGS)

        assert len(backend_handler.requests) == 1
        request = backend_handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://akasha.test/query"
        assert request.headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_body_passes_arguments_through(self, backend, backend_handler) -> None:
        """Body carries query, traditions, topK and lang unchanged."""
        args = ToolInvocationArgs(query="karma", traditions=["hinduism", "jainism"], topK=3, lang="en")
        await backend.invoke(args)

        assert backend_handler.bodies == [
            {"query": "karma", "traditions": ["hinduism", "jainism"], "topK": 3, "lang": "en"}
        ]

    @pytest.mark.asyncio
    async def test_body_defaults(self, backend, backend_handler) -> None:
        """Defaults are topK 6 and lang null."""
        await backend.invoke(ARGS)

        assert backend_handler.bodies[0]["topK"] == 6
        assert backend_handler.bodies[0]["lang"] is None

    def test_endpoint_strips_trailing_slash(self) -> None:
        """Base URL trailing slash does not double up."""
        client = BackendClient("http://akasha.test/", query_path="/v2/query")
        assert client.endpoint == "http://akasha.test/v2/query"


class TestBackendOutcomes:
    """Tests for mapping backend outcomes to ToolResult."""

    @pytest.mark.asyncio
    async def test_success_returns_json_part(self, backend) -> None:
        """Successful response yields exactly one JSON part with the parsed body."""
        result = await backend.invoke(ARGS)

        assert result.isError is False
        assert len(result.content) == 1
        part = result.content[0]
        assert isinstance(part, JsonContent)
        assert part.data["snippets"][0]["tradition"] == "buddhism"

    @pytest.mark.asyncio
    async def test_non_success_status(self, backend_factory, make_handler) -> None:
        """HTTP 500 with body 'oops' yields '500: oops'."""
        backend = backend_factory(make_handler(500, "oops"))

        result = await backend.invoke(ARGS)

        assert result.isError is True
        assert result.model_dump(mode="json") == {
            "content": [{"type": "text", "text": "500: oops"}],
            "isError": True,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 422, 502])
    async def test_error_text_contains_status(self, backend_factory, make_handler, status) -> None:
        """Every non-success status is reported with its code."""
        backend = backend_factory(make_handler(status, "nope"))

        result = await backend.invoke(ARGS)

        assert result.isError is True
        assert str(status) in result.content[0].text

    @pytest.mark.asyncio
    async def test_network_failure(self, backend_factory) -> None:
        """Connection errors become Gateway error text."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        backend = backend_factory(refuse)

        result = await backend.invoke(ARGS)

        assert result.isError is True
        part = result.content[0]
        assert isinstance(part, TextContent)
        assert part.text == "Gateway error: connection refused"

    @pytest.mark.asyncio
    async def test_malformed_payload(self, backend_factory, make_handler) -> None:
        """A 200 with a non-JSON body is an execution failure, not an exception."""
        backend = backend_factory(make_handler(200, "<html>not json</html>"))

        result = await backend.invoke(ARGS)

        assert result.isError is True
        assert result.content[0].text.startswith("Gateway error: ")

    @pytest.mark.asyncio
    async def test_single_call_no_retry(self, backend_factory, make_handler) -> None:
        """Failures are not retried."""
        handler = make_handler(503, "busy")
        backend = backend_factory(handler)

        await backend.invoke(ARGS)

        assert len(handler.requests) == 1


class HangingBackend:
    """Local HTTP backend that holds "slow" queries open until released."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.held = 0
        self._server: asyncio.Server | None = None

    @property
    def url(self) -> str:
        host, port = self._server.sockets[0].getsockname()[:2]
        return f"http://{host}:{port}"

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)

    async def stop(self) -> None:
        self.release.set()
        self._server.close()
        await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            head = await reader.readuntil(b"\r\n\r\n")
            length = 0
            for line in head.split(b"\r\n"):
                name, _, value = line.partition(b":")
                if name.strip().lower() == b"content-length":
                    length = int(value)
            body = json.loads(await reader.readexactly(length))

            if body["query"] == "slow":
                self.held += 1
                await self.release.wait()

            payload = json.dumps({"snippets": []}).encode()
            writer.write(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/json\r\n"
                b"Content-Length: %d\r\n"
                b"Connection: close\r\n\r\n" % len(payload) + payload
            )
            await writer.drain()
        finally:
            writer.close()


class TestBackendConcurrency:
    """Tests for concurrent backend calls."""

    HUNG_CALLS = 120

    @pytest.mark.asyncio
    async def test_hung_calls_do_not_block_other_calls(self, monkeypatch) -> None:
        """A fast call completes while more hung calls are open than a default pool allows."""
        for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
            monkeypatch.delenv(name, raising=False)

        server = HangingBackend()
        await server.start()
        client = BackendClient(server.url)
        slow_args = ToolInvocationArgs(query="slow", traditions="buddhism")
        slow = [asyncio.create_task(client.invoke(slow_args)) for _ in range(self.HUNG_CALLS)]

        async def all_held() -> None:
            while server.held < self.HUNG_CALLS:
                await asyncio.sleep(0.01)

        try:
            await asyncio.wait_for(all_held(), timeout=10.0)

            result = await asyncio.wait_for(client.invoke(ARGS), timeout=5.0)

            assert result.isError is False
            assert result.content[0].data == {"snippets": []}
        finally:
            server.release.set()
            results = await asyncio.gather(*slow)
            await client.aclose()
            await server.stop()

        assert all(r.isError is False for r in results)


class TestBackendLifecycle:
    """Tests for client lifecycle."""

    @pytest.mark.asyncio
    async def test_aclose_releases_client(self, backend) -> None:
        """aclose drops the HTTP client; the next call creates a fresh one."""
        await backend.invoke(ARGS)
        assert backend._client is not None

        await backend.aclose()
        assert backend._client is None

        result = await backend.invoke(ARGS)
        assert result.isError is False

    @pytest.mark.asyncio
    async def test_aclose_without_client(self) -> None:
        """aclose before any call is a no-op."""
        client = BackendClient("http://akasha.test")
        await client.aclose()
        assert client._client is None
