"""Built-in example tools served by ``anet-mcp serve``."""

from __future__ import annotations

from typing import Any

from anet_mcp.protocol.models import TextContent
from anet_mcp.tools.base import FunctionTool

_PARAM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"param": {"type": "string"}},
    "required": ["param"],
}


def _require_param(arguments: dict[str, Any] | None) -> str:
    param = (arguments or {}).get("param")
    if not isinstance(param, str):
        msg = "Missing 'param' in input"
        raise ValueError(msg)
    return param


def _example(arguments: dict[str, Any] | None) -> list[TextContent]:
    param = _require_param(arguments)
    return [TextContent(text=f"Tool executed with param: {param}")]


def _echo(arguments: dict[str, Any] | None) -> list[TextContent]:
    return [TextContent(text=_require_param(arguments))]


def builtin_tools() -> list[FunctionTool]:
    """Return fresh instances of the built-in tools."""
    return [
        FunctionTool("example_tool", "An example tool", _example, dict(_PARAM_SCHEMA)),
        FunctionTool("echo", "Echo back 'param' as text", _echo, dict(_PARAM_SCHEMA)),
    ]
