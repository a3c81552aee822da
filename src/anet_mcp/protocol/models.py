"""Wire models: JSON-RPC 2.0 envelope and MCP payloads.

The envelope is shared by every transport. Payload models describe the
``result`` of each supported method.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator
from pydantic_core import to_jsonable_python

JSONRPC_VERSION = "2.0"

# Strict: a response echoes the id exactly as received.
RequestId = StrictStr | StrictInt

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A decoded JSON-RPC request. Immutable once decoded."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    method: str
    params: Any = None

    def params_dict(self) -> dict[str, Any]:
        """Return ``params`` as a mapping (``{}`` when absent or not an object)."""
        if isinstance(self.params, dict):
            return self.params
        return {}


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            wire["data"] = to_jsonable_python(self.data, by_alias=True)
        return wire


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response.

    A response carries exactly one of ``result`` or ``error``: when ``error``
    is set the response is a failure, otherwise ``result`` (possibly
    ``None``) is the success value.
    """

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> JsonRpcResponse:
        if self.error is not None and self.result is not None:
            msg = "response cannot carry both 'result' and 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: RequestId | None, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId | None, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=request_id, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready mapping sent over a transport."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            wire["id"] = self.id
        if self.error is not None:
            wire["error"] = self.error.to_wire()
        else:
            wire["result"] = to_jsonable_python(self.result, by_alias=True)
        return wire


# ---------------------------------------------------------------------------
# Content blocks
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


# Tagged on ``type``; new block kinds join this alias as a discriminated union.
Content = TextContent


# ---------------------------------------------------------------------------
# MCP payloads
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A tool as advertised by ``listTools``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ServerCapabilities(BaseModel):
    """Capabilities advertised during ``initialize``.

    ``tools``, ``prompts`` and ``resources`` are ``None`` when not offered.
    """

    tools: dict[str, Any] | None = Field(default_factory=dict)
    prompts: dict[str, Any] | None = None
    resources: dict[str, Any] | None = None
    notification_options: dict[str, Any] | None = None
    experimental_capabilities: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        wire = self.model_dump(mode="json")
        for key in ("notification_options", "experimental_capabilities"):
            if wire[key] is None:
                del wire[key]
        return wire


class ServerInfo(BaseModel):
    """Identity returned by ``initialize``."""

    server_name: str
    server_version: str
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)

    def to_wire(self) -> dict[str, Any]:
        return {
            "server_name": self.server_name,
            "server_version": self.server_version,
            "capabilities": self.capabilities.to_wire(),
        }


class Resource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    name: str
    description: str = ""
    mime_type: str = Field(default="text/plain", alias="mimeType")


class PromptArgument(BaseModel):
    name: str
    description: str = ""
    required: bool = False


class Prompt(BaseModel):
    name: str
    description: str = ""
    arguments: list[PromptArgument] = []


class PromptMessage(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: Content


class ListToolsResult(BaseModel):
    tools: list[ToolDefinition] = []


class CallToolResult(BaseModel):
    content: list[Content] = []


class ListResourcesResult(BaseModel):
    resources: list[Resource] = []
    next_cursor: str | None = None
    meta: dict[str, Any] | None = None


class ListPromptsResult(BaseModel):
    prompts: list[Prompt] = []


class GetPromptResult(BaseModel):
    description: str
    messages: list[PromptMessage] = []
