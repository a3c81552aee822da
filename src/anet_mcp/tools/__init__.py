"""Tool plugin contract and registry."""

from anet_mcp.tools.base import FunctionTool, Tool, tool
from anet_mcp.tools.builtin import builtin_tools
from anet_mcp.tools.registry import ToolRegistry

__all__ = [
    "FunctionTool",
    "Tool",
    "ToolRegistry",
    "builtin_tools",
    "tool",
]
