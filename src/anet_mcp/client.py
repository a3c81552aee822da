"""BusClient: sends requests to a NATS-served MCP server and awaits replies.

Usage::

    async with BusClient("nats://localhost:4222", "mcp.requests") as client:
        info = await client.initialize({"name": "test-client"})
        tools = await client.list_tools()
        response = await client.call_tool("example_tool", {"param": "x"})
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from nats.errors import Error as NatsError
from nats.errors import TimeoutError as NatsTimeoutError

from anet_mcp.protocol.codec import decode_response
from anet_mcp.protocol.errors import TransportIOError
from anet_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse
from anet_mcp.transport.pubsub import DEFAULT_SUBJECT, DEFAULT_URL, connect_with_retry

if TYPE_CHECKING:
    from nats.aio.client import Client


class BusClient:
    """Async context manager issuing JSON-RPC requests over NATS request-reply."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        subject: str = DEFAULT_SUBJECT,
        *,
        timeout: float = 5.0,
        client: Client | None = None,
    ) -> None:
        self._url = url
        self._subject = subject
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._next_id = 1

    async def __aenter__(self) -> BusClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def connect(self) -> None:
        if self._client is None:
            self._client = await connect_with_retry(self._url, retries=1)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.close()
            self._client = None

    async def request(self, method: str, params: Any = None) -> JsonRpcResponse:
        """Send one request and return the decoded response."""
        if self._client is None:
            msg = "Client not connected"
            raise RuntimeError(msg)

        request_id = str(self._next_id)
        self._next_id += 1

        request = JsonRpcRequest(id=request_id, method=method, params=params)
        payload = json.dumps(request.model_dump(exclude_none=True)).encode()
        try:
            reply = await self._client.request(self._subject, payload, timeout=self._timeout)
        except NatsTimeoutError as exc:
            msg = f"no reply on {self._subject!r} within {self._timeout}s"
            raise TransportIOError(msg) from exc
        except NatsError as exc:
            raise TransportIOError(str(exc)) from exc
        return decode_response(reply.data)

    async def initialize(self, client_info: dict[str, Any] | None = None) -> JsonRpcResponse:
        return await self.request("initialize", {"clientInfo": client_info or {}})

    async def list_tools(self) -> JsonRpcResponse:
        return await self.request("listTools", {})

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> JsonRpcResponse:
        params: dict[str, Any] = {"name": name}
        if arguments is not None:
            params["arguments"] = arguments
        return await self.request("callTool", params)
