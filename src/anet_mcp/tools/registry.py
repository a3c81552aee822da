"""ToolRegistry: name-keyed store of tools consulted by the dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from anet_mcp.protocol.errors import ToolExecutionError, ToolNotFoundError, ToolTimeoutError
from anet_mcp.protocol.models import Content, ToolDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from anet_mcp.tools.base import Tool

logger = logging.getLogger(__name__)

_content_list = TypeAdapter(list[Content])


class ToolRegistry:
    """Maintains a name-to-tool map and invokes tools by name.

    Registration is last-write-wins: registering a second tool under an
    existing name replaces the first. The registry is populated while the
    server is built and only read while requests are served.

    Usage::

        registry = ToolRegistry()
        registry.register(echo_tool)

        definitions = registry.list()
        content = await registry.invoke("echo", {"param": "x"})
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for t in tools:
            self.register(t)

    def register(self, tool: Tool) -> None:
        """Add *tool* keyed by its name, replacing any previous holder."""
        if tool.name in self._tools:
            logger.debug("Replacing previously registered tool %r", tool.name)
        self._tools[tool.name] = tool

    def list(self) -> list[ToolDefinition]:
        """Return the definitions of all registered tools."""
        return [
            ToolDefinition(
                name=t.name,
                description=t.description,
                input_schema=t.input_schema,
            )
            for t in self._tools.values()
        ]

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> list[Content]:
        """Call the tool registered under *name*.

        Raises:
            ToolNotFoundError: No tool has that exact name.
            ToolTimeoutError: The call did not finish within *timeout* seconds.
            ToolExecutionError: The tool raised or returned something other
                than a list of content blocks; the original error is the cause.
        """
        target = self._tools.get(name)
        if target is None:
            raise ToolNotFoundError(name)

        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                result = await target.call(arguments)
        except TimeoutError as exc:
            if timeout is not None and deadline.expired():
                raise ToolTimeoutError(name, timeout) from exc
            raise ToolExecutionError(name, str(exc) or "TimeoutError") from exc
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise ToolExecutionError(name, str(exc)) from exc

        try:
            return _content_list.validate_python(result)
        except ValidationError as exc:
            raise ToolExecutionError(name, "returned invalid content") from exc

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
