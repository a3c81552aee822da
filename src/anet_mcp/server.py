"""Server: composes a transport, the tool registry and server identity.

Usage::

    config = ServerConfig(
        transport=StdioTransport(),
        name="example-mcp",
        tools=builtin_tools(),
    )
    async with Server(config) as server:
        await server.run()
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from anet_mcp.protocol.dispatcher import RequestDispatcher
from anet_mcp.protocol.errors import ServerConfigError
from anet_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse, ServerCapabilities, ServerInfo
from anet_mcp.tools.base import Tool
from anet_mcp.tools.registry import ToolRegistry
from anet_mcp.transport.base import Transport

DEFAULT_NAME = "mcp-server"
DEFAULT_VERSION = "0.1.0"


class ServerConfig(BaseModel):
    """Everything needed to build a :class:`Server`.

    Only ``transport`` is mandatory; it is checked when the server is built
    so a config can be assembled incrementally.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    transport: Transport | None = None
    name: str = DEFAULT_NAME
    version: str = DEFAULT_VERSION
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    tools: list[Tool] = []
    tool_timeout: float | None = Field(default=None, gt=0)
    logger: logging.Logger | None = None


class Server:
    """Runs the transport's receive loop against its own dispatcher.

    The registry is filled once from ``config.tools`` and is read-only
    afterwards.
    """

    def __init__(self, config: ServerConfig) -> None:
        if config.transport is None:
            msg = "Transport is required"
            raise ServerConfigError(msg)

        self._transport: Transport = config.transport
        self._registry = ToolRegistry(config.tools)
        self._info = ServerInfo(
            server_name=config.name,
            server_version=config.version,
            capabilities=config.capabilities,
        )
        self._dispatcher = RequestDispatcher(
            self._registry,
            self._info,
            tool_timeout=config.tool_timeout,
            logger=config.logger,
        )

    @classmethod
    def build(cls, transport: Transport | None = None, **options: Any) -> Server:
        """Shorthand for ``Server(ServerConfig(transport=..., **options))``."""
        return cls(ServerConfig(transport=transport, **options))

    @property
    def info(self) -> ServerInfo:
        return self._info

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> Server:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return await self._dispatcher.handle(request)

    async def handle_message(self, payload: bytes | str) -> JsonRpcResponse:
        return await self._dispatcher.handle_message(payload)

    async def run(self) -> None:
        """Serve until the transport's loop ends."""
        await self._transport.run(self)

    async def close(self) -> None:
        await self._transport.close()
