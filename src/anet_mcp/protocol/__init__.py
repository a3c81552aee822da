"""Protocol layer: wire models, error taxonomy, codec and dispatcher."""

from anet_mcp.protocol.dispatcher import RequestDispatcher
from anet_mcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
    ServerConfigError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
    TransportDecodeError,
    TransportIOError,
)
from anet_mcp.protocol.models import (
    Content,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerCapabilities,
    ServerInfo,
    TextContent,
    ToolDefinition,
)

__all__ = [
    "Content",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ProtocolError",
    "RequestDispatcher",
    "ServerCapabilities",
    "ServerConfigError",
    "ServerInfo",
    "TextContent",
    "ToolDefinition",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "TransportDecodeError",
    "TransportIOError",
]
