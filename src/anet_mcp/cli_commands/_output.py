"""Shared CLI output and logging setup."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from anet_mcp.protocol.models import JsonRpcResponse, ToolDefinition

console = Console()
# stdout belongs to the stdio transport while serving
err_console = Console(stderr=True)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr at *level*."""
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)


def print_tools_table(tools: list[ToolDefinition]) -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for t in tools:
        params = ", ".join(t.input_schema.get("properties", {})) or "-"
        table.add_row(t.name, _truncate(t.description), params)

    console.print(table)


def print_response(response: JsonRpcResponse) -> None:
    console.print_json(json.dumps(response.to_wire()))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
