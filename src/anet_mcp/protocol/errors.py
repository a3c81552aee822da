"""Error taxonomy for the protocol layer.

Every error that can reach the wire carries a JSON-RPC ``code`` and converts
to a :class:`~anet_mcp.protocol.models.JsonRpcError` via :meth:`to_error`.
"""

from __future__ import annotations

from typing import Any

from anet_mcp.protocol.models import JsonRpcError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server-defined range (-32000 to -32099)
TOOL_NOT_FOUND = -32001
TOOL_EXECUTION_ERROR = -32002
TOOL_TIMEOUT = -32003
TRANSPORT_IO_ERROR = -32004


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=self.code, message=self.message, data=self.data)


class TransportDecodeError(ProtocolError):
    """Inbound payload is not valid UTF-8 JSON."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Parse error" + (f": {detail}" if detail else ""))


class InvalidRequestError(ProtocolError):
    """Payload decoded but is not a well-formed request object."""

    code = INVALID_REQUEST

    def __init__(self, detail: str = "", request_id: str | int | None = None) -> None:
        self.detail = detail
        self.request_id = request_id
        super().__init__("Invalid request" + (f": {detail}" if detail else ""))


class MethodNotFoundError(ProtocolError):
    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(ProtocolError):
    code = INVALID_PARAMS

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid params: {detail}")


class InternalError(ProtocolError):
    code = INTERNAL_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Internal error" + (f": {detail}" if detail else ""))


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the registry."""

    code = TOOL_NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}", data={"tool": name})


class ToolExecutionError(ProtocolError):
    """A registered tool raised while handling a call.

    The original exception is available as ``__cause__``.
    """

    code = TOOL_EXECUTION_ERROR

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(
            f"Tool execution failed: {name}" + (f": {detail}" if detail else ""),
            data={"tool": name},
        )


class ToolTimeoutError(ToolExecutionError):
    """A tool call exceeded the configured deadline."""

    code = TOOL_TIMEOUT

    def __init__(self, name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(name, f"timed out after {timeout}s")


class TransportIOError(ProtocolError):
    """The underlying stream or bus failed to send or receive."""

    code = TRANSPORT_IO_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Transport I/O error" + (f": {detail}" if detail else ""))


class ServerConfigError(Exception):
    """Server configuration is incomplete or invalid."""
