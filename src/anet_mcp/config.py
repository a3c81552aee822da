"""Server settings: YAML file schema and loader used by ``anet-mcp serve``.

Example::

    name: example-mcp
    version: "0.1.0"
    transport: nats
    tool_timeout: 30
    capabilities:
      tools: {}
      prompts: {}
      resources: {}
    nats:
      url: ${NATS_URL}
      subject: mcp.requests
"""

from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from anet_mcp.protocol.models import ServerCapabilities
from anet_mcp.transport.pubsub import DEFAULT_SUBJECT, DEFAULT_URL


class ConfigError(Exception):
    """Raised when a settings file cannot be read, parsed or validated."""


class NatsSettings(BaseModel):
    url: str = DEFAULT_URL
    subject: str = DEFAULT_SUBJECT
    connect_retries: int = 10
    retry_wait: float = Field(default=2.0, ge=0)
    connect_timeout: float = Field(default=2.0, gt=0)


class TelemetrySettings(BaseModel):
    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Top-level settings document."""

    name: str = "mcp-server"
    version: str = "0.1.0"
    transport: Literal["stdio", "nats"] = "stdio"
    tool_timeout: float | None = Field(default=None, gt=0)
    strict_framing: bool = True
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    nats: NatsSettings = Field(default_factory=NatsSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    def merged(self, **overrides: Any) -> ServerSettings:
        """Return a copy with non-``None`` *overrides* applied.

        Keys of the form ``nats_url`` / ``nats_subject`` target the nested
        NATS settings. The result is validated like a settings file.

        Raises:
            ConfigError: An override violates the schema.
        """
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key.startswith("nats_"):
                data["nats"][key.removeprefix("nats_")] = value
            else:
                data[key] = value
        try:
            return ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`ServerSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerSettings:
        """Read YAML, interpolate env vars, and validate.

        ``${VAR}`` / ``$VAR`` references are expanded with
        :func:`os.path.expandvars` before parsing. An empty file yields the
        defaults.

        Raises:
            ConfigError: On read errors, YAML errors or schema violations.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        try:
            data: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Settings YAML must be a mapping")

        try:
            return ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
