"""``anet-mcp serve``: run a server with the built-in tools."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from anet_mcp.cli_commands._output import configure_logging, err_console
from anet_mcp.config import ConfigError, ServerSettings, SettingsLoader
from anet_mcp.protocol.errors import ProtocolError
from anet_mcp.server import Server, ServerConfig
from anet_mcp.tools.builtin import builtin_tools
from anet_mcp.transport.base import Transport
from anet_mcp.transport.pubsub import NatsTransport
from anet_mcp.transport.stdio import StdioTransport

logger = logging.getLogger(__name__)


def build_transport(settings: ServerSettings) -> Transport:
    """Create the transport named by *settings*."""
    if settings.transport == "nats":
        return NatsTransport(
            settings.nats.url,
            settings.nats.subject,
            connect_retries=settings.nats.connect_retries,
            retry_wait=settings.nats.retry_wait,
            connect_timeout=settings.nats.connect_timeout,
        )
    return StdioTransport(strict=settings.strict_framing)


def build_server(settings: ServerSettings) -> Server:
    """Assemble a :class:`Server` serving the built-in tools."""
    config = ServerConfig(
        transport=build_transport(settings),
        name=settings.name,
        version=settings.version,
        capabilities=settings.capabilities,
        tools=builtin_tools(),
        tool_timeout=settings.tool_timeout,
    )
    return Server(config)


async def _serve(server: Server) -> None:
    async with server:
        await server.run()


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Settings YAML file.",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "nats"]),
    default=None,
    help="Transport to serve on (default: stdio).",
)
@click.option("--nats-url", default=None, help="NATS server URL.")
@click.option("--subject", default=None, help="NATS subject to listen on.")
@click.option("--name", default=None, help="Server name reported by initialize.")
@click.option("--server-version", default=None, help="Server version reported by initialize.")
@click.option("--tool-timeout", type=float, default=None, help="Per-call tool deadline in seconds.")
@click.option("--lenient", is_flag=True, help="Skip undecodable stdio lines instead of exiting.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Export OpenTelemetry spans.")
def serve(
    config_path: str | None,
    transport: str | None,
    nats_url: str | None,
    subject: str | None,
    name: str | None,
    server_version: str | None,
    tool_timeout: float | None,
    lenient: bool,
    verbose: bool,
    telemetry: bool,
) -> None:
    """Serve the built-in tools until input ends or the process is stopped."""
    try:
        settings = SettingsLoader(Path(config_path)).load() if config_path else ServerSettings()
        settings = settings.merged(
            transport=transport,
            nats_url=nats_url,
            nats_subject=subject,
            name=name,
            version=server_version,
            tool_timeout=tool_timeout,
            strict_framing=False if lenient else None,
            log_level="DEBUG" if verbose else None,
        )
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    configure_logging(settings.log_level)

    if telemetry or settings.telemetry.enabled:
        from anet_mcp.utils.telemetry import configure_telemetry

        configure_telemetry(
            service_name=settings.name,
            export_to_console=settings.telemetry.otlp_endpoint is None,
            otlp_endpoint=settings.telemetry.otlp_endpoint,
        )

    server = build_server(settings)
    logger.info("Starting %s %s on %s", settings.name, settings.version, settings.transport)

    try:
        asyncio.run(_serve(server))
    except ProtocolError as exc:
        err_console.print(f"[red]Server error:[/red] {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("Interrupted")
        sys.exit(130)
