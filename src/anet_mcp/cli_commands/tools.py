"""``anet-mcp tools``: inspect the built-in tools."""

from __future__ import annotations

import json

import click

from anet_mcp.cli_commands._output import console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect the tools served by ``anet-mcp serve``."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print definitions as JSON.")
def list_tools(as_json: bool) -> None:
    """List built-in tool definitions."""
    from anet_mcp.tools.builtin import builtin_tools
    from anet_mcp.tools.registry import ToolRegistry

    definitions = ToolRegistry(builtin_tools()).list()

    if as_json:
        payload = [d.model_dump(mode="json", by_alias=True) for d in definitions]
        console.print_json(json.dumps(payload))
        return

    if not definitions:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(definitions)
