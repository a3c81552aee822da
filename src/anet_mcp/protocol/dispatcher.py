"""RequestDispatcher: maps each decoded request to exactly one response.

Every failure raised while handling a request is converted into an
error-bearing :class:`JsonRpcResponse`; nothing but cancellation escapes
:meth:`RequestDispatcher.handle`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from anet_mcp.protocol.codec import decode_request
from anet_mcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
)
from anet_mcp.protocol.models import (
    CallToolResult,
    GetPromptResult,
    JsonRpcRequest,
    JsonRpcResponse,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    PromptMessage,
    TextContent,
)
from anet_mcp.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from anet_mcp.protocol.models import ServerInfo
    from anet_mcp.tools.registry import ToolRegistry

    Handler = Callable[[Any], Awaitable[Any]]

_tracer = get_tracer(__name__)


class RequestDispatcher:
    """Routes requests to the built-in protocol methods and the tool registry.

    Supported methods: ``initialize``, ``listTools``, ``callTool``,
    ``listResources``, ``readResource``, ``listPrompts`` and ``getPrompt``.
    Method names match exactly and case-sensitively.

    Usage::

        dispatcher = RequestDispatcher(registry, ServerInfo(server_name="x", server_version="1"))
        response = await dispatcher.handle(JsonRpcRequest(id="1", method="listTools"))
    """

    def __init__(
        self,
        registry: ToolRegistry,
        info: ServerInfo,
        *,
        tool_timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._info = info
        self._tool_timeout = tool_timeout
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: dict[str, Handler] = {
            "initialize": self._initialize,
            "listTools": self._list_tools,
            "callTool": self._call_tool,
            "listResources": self._list_resources,
            "readResource": self._read_resource,
            "listPrompts": self._list_prompts,
            "getPrompt": self._get_prompt,
        }

    @property
    def methods(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def handle_message(self, payload: bytes | str) -> JsonRpcResponse:
        """Decode a raw payload and dispatch it.

        A document that parses as JSON but is not a valid request yields an
        ``InvalidRequest`` response.

        Raises:
            TransportDecodeError: The payload is not JSON at all.
        """
        try:
            request = decode_request(payload)
        except InvalidRequestError as exc:
            self._logger.warning("Rejected malformed request: %s", exc)
            return JsonRpcResponse.failure(exc.request_id, exc.to_error())
        return await self.handle(request)

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Produce the response for *request*, echoing its ``id``."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            if request.id is not None:
                span.set_attribute(ATTR_RPC_ID, str(request.id))

            try:
                handler = self._handlers.get(request.method)
                if handler is None:
                    raise MethodNotFoundError(request.method)
                result = await handler(request.params)
            except ProtocolError as exc:
                self._logger.error("Error handling %s: %s", request.method, exc)
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return JsonRpcResponse.failure(request.id, exc.to_error())
            except Exception as exc:
                self._logger.exception("Unexpected failure handling %s", request.method)
                err = InternalError(str(exc))
                span.set_attribute(ATTR_RPC_ERROR_CODE, err.code)
                return JsonRpcResponse.failure(request.id, err.to_error())

            return JsonRpcResponse.success(request.id, result)

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _initialize(self, params: Any) -> dict[str, Any]:
        client_info = params.get("clientInfo") if isinstance(params, dict) else None
        self._logger.info("Initializing with client: %s", client_info)
        return self._info.to_wire()

    async def _list_tools(self, _params: Any) -> dict[str, Any]:
        result = ListToolsResult(tools=self._registry.list())
        return result.model_dump(mode="json", by_alias=True)

    async def _call_tool(self, params: Any) -> dict[str, Any]:
        args = _object_params(params)
        name = _required_str(args, "name")
        arguments = args.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            raise InvalidParamsError("'arguments' must be an object")

        with _tracer.start_as_current_span("mcp.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            content = await self._registry.invoke(name, arguments, timeout=self._tool_timeout)
        return CallToolResult(content=content).model_dump(mode="json")

    async def _list_resources(self, _params: Any) -> dict[str, Any]:
        return ListResourcesResult().model_dump(mode="json")

    async def _read_resource(self, params: Any) -> str:
        uri = _required_str(_object_params(params), "uri")
        return f"Resource content for {uri}"

    async def _list_prompts(self, _params: Any) -> dict[str, Any]:
        return ListPromptsResult().model_dump(mode="json")

    async def _get_prompt(self, params: Any) -> dict[str, Any]:
        args = _object_params(params)
        name = _required_str(args, "name")
        if "arguments" not in args:
            raise InvalidParamsError("Missing 'arguments' in params")
        rendered = json.dumps(args["arguments"], sort_keys=True)
        result = GetPromptResult(
            description=f"Prompt '{name}'",
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(text=f"Prompt with args: {rendered}"),
                )
            ],
        )
        return result.model_dump(mode="json")


def _object_params(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise InvalidParamsError("params must be an object")
    return params


def _required_str(params: dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str):
        raise InvalidParamsError(f"Missing '{key}' in params")
    return value
