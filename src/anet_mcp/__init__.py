"""anet-mcp-server: minimal MCP-style tool server over stdio and NATS."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from anet_mcp.server import Server as Server
    from anet_mcp.server import ServerConfig as ServerConfig

_LAZY_EXPORTS = {
    "Server": "anet_mcp.server",
    "ServerConfig": "anet_mcp.server",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'anet_mcp' has no attribute {name!r}")
