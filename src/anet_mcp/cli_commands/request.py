"""``anet-mcp request``: send one request to a NATS-served server."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from anet_mcp.cli_commands._output import err_console, print_response
from anet_mcp.transport.pubsub import DEFAULT_SUBJECT, DEFAULT_URL


def _parse_params(
    _ctx: click.Context,
    _param: click.Parameter,
    value: str | None,
) -> Any:
    if value is None:
        return {}
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}") from exc


@click.command()
@click.argument("method")
@click.option("--params", "-p", callback=_parse_params, default=None, help="JSON params object.")
@click.option("--nats-url", default=DEFAULT_URL, show_default=True, help="NATS server URL.")
@click.option("--subject", default=DEFAULT_SUBJECT, show_default=True, help="Request subject.")
@click.option("--timeout", type=float, default=5.0, show_default=True, help="Reply timeout.")
def request(method: str, params: Any, nats_url: str, subject: str, timeout: float) -> None:
    """Send METHOD with PARAMS and print the response."""
    from anet_mcp.client import BusClient

    async def _request() -> Any:
        async with BusClient(nats_url, subject, timeout=timeout) as client:
            return await client.request(method, params)

    try:
        response = asyncio.run(_request())
    except Exception as exc:
        err_console.print(f"[red]Request error:[/red] {exc}")
        sys.exit(1)

    print_response(response)
