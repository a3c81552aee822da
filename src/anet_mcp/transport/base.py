"""Transport protocols: how requests reach the dispatcher and responses leave.

A transport owns its connection and runs one receive loop: read a payload,
hand it to a :class:`RequestHandler`, send the response back. Requests are
processed one at a time in arrival order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from anet_mcp.protocol.models import JsonRpcResponse


@runtime_checkable
class RequestHandler(Protocol):
    """Turns a raw payload into a response.

    Raises :class:`~anet_mcp.protocol.errors.TransportDecodeError` when the
    payload is not JSON; each transport decides whether that is fatal.
    """

    async def handle_message(self, payload: bytes | str) -> JsonRpcResponse: ...


@runtime_checkable
class Transport(Protocol):
    """Runs the receive/dispatch/reply loop."""

    async def run(self, handler: RequestHandler) -> None: ...
    async def close(self) -> None: ...
