"""Tests for ``anet-mcp serve`` CLI command."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from anet_mcp.cli import main
from anet_mcp.cli_commands.serve import build_server, build_transport
from anet_mcp.config import NatsSettings, ServerSettings
from anet_mcp.protocol.errors import TransportIOError
from anet_mcp.transport.pubsub import NatsTransport
from anet_mcp.transport.stdio import StdioTransport


class TestBuildTransport:
    def test_stdio_default(self) -> None:
        transport = build_transport(ServerSettings())
        assert isinstance(transport, StdioTransport)
        assert transport.strict is True

    def test_stdio_lenient(self) -> None:
        transport = build_transport(ServerSettings(strict_framing=False))
        assert isinstance(transport, StdioTransport)
        assert transport.strict is False

    def test_nats(self) -> None:
        settings = ServerSettings(transport="nats", nats=NatsSettings(subject="tools.rpc"))
        transport = build_transport(settings)
        assert isinstance(transport, NatsTransport)
        assert transport.subject == "tools.rpc"


class TestBuildServer:
    def test_identity_and_tools(self) -> None:
        server = build_server(ServerSettings(name="example-mcp", version="9.9.9"))
        assert server.info.server_name == "example-mcp"
        assert server.info.server_version == "9.9.9"
        assert "example_tool" in server.registry
        assert "echo" in server.registry


class TestServeCommand:
    def test_runs_server_with_overrides(self) -> None:
        with (
            patch("anet_mcp.cli_commands.serve._serve", new_callable=AsyncMock) as mock_serve,
            patch("anet_mcp.cli_commands.serve.configure_logging") as mock_logging,
        ):
            result = CliRunner().invoke(
                main,
                ["serve", "--name", "cli-mcp", "--server-version", "2.0.0", "-v"],
            )

        assert result.exit_code == 0, result.output
        server = mock_serve.await_args.args[0]
        assert server.info.server_name == "cli-mcp"
        assert server.info.server_version == "2.0.0"
        mock_logging.assert_called_once_with("DEBUG")

    def test_nats_from_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("transport: nats\nnats:\n  subject: from.file\n", encoding="utf-8")

        with (
            patch("anet_mcp.cli_commands.serve._serve", new_callable=AsyncMock) as mock_serve,
            patch("anet_mcp.cli_commands.serve.configure_logging"),
        ):
            result = CliRunner().invoke(
                main,
                ["serve", "--config", str(path), "--subject", "from.flag"],
            )

        assert result.exit_code == 0, result.output
        transport = mock_serve.await_args.args[0].transport
        assert isinstance(transport, NatsTransport)
        assert transport.subject == "from.flag"

    def test_bad_config(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("transport: carrier-pigeon\n", encoding="utf-8")

        result = CliRunner().invoke(main, ["serve", "--config", str(path)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_invalid_flag_value(self) -> None:
        with patch("anet_mcp.cli_commands.serve._serve", new_callable=AsyncMock) as mock_serve:
            result = CliRunner().invoke(main, ["serve", "--tool-timeout", "0"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert "tool_timeout" in result.output
        mock_serve.assert_not_awaited()

    def test_server_error_exits_nonzero(self) -> None:
        with (
            patch(
                "anet_mcp.cli_commands.serve._serve",
                AsyncMock(side_effect=TransportIOError("write failed")),
            ),
            patch("anet_mcp.cli_commands.serve.configure_logging"),
        ):
            result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 1
        assert "Server error" in result.output
        assert "write failed" in result.output

    def test_telemetry_flag_configures_tracing(self) -> None:
        with (
            patch("anet_mcp.cli_commands.serve._serve", new_callable=AsyncMock),
            patch("anet_mcp.cli_commands.serve.configure_logging"),
            patch("anet_mcp.utils.telemetry.configure_telemetry") as mock_telemetry,
        ):
            result = CliRunner().invoke(main, ["serve", "--telemetry", "--name", "traced"])

        assert result.exit_code == 0, result.output
        mock_telemetry.assert_called_once_with(
            service_name="traced",
            export_to_console=True,
            otlp_endpoint=None,
        )
