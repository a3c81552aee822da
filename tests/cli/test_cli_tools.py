"""Tests for ``anet-mcp tools`` CLI command."""

from __future__ import annotations

import json
from unittest.mock import patch

from click.testing import CliRunner

from anet_mcp.cli import main


class TestToolsList:
    def test_table(self) -> None:
        result = CliRunner().invoke(main, ["tools", "list"])

        assert result.exit_code == 0
        assert "Registered Tools" in result.output
        assert "example_tool" in result.output
        assert "echo" in result.output
        assert "param" in result.output

    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["tools", "list", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [t["name"] for t in payload] == ["example_tool", "echo"]
        assert payload[0]["inputSchema"]["required"] == ["param"]

    def test_no_tools(self) -> None:
        with patch("anet_mcp.tools.builtin.builtin_tools", return_value=[]):
            result = CliRunner().invoke(main, ["tools", "list"])

        assert result.exit_code == 0
        assert "No tools registered" in result.output


class TestVersion:
    def test_version_option(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "anet-mcp" in result.output
        assert "0.1.0" in result.output
