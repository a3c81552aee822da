"""Tool protocol: the contract every pluggable tool satisfies.

A tool is any object exposing ``name``, ``description`` and ``input_schema``
plus an async ``call``. :class:`FunctionTool` adapts a plain function::

    @tool("greet", "Say hello", {"type": "object", "properties": {"who": {"type": "string"}}})
    def greet(arguments):
        return f"Hello, {arguments['who']}!"
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from anet_mcp.protocol.models import Content, TextContent

ToolFunc = Callable[[dict[str, Any] | None], Any]


@runtime_checkable
class Tool(Protocol):
    """A named, described, schema-declaring callable."""

    name: str
    description: str
    input_schema: dict[str, Any]

    async def call(self, arguments: dict[str, Any] | None) -> list[Content]:
        """Run the tool and return its content blocks, or raise on failure."""
        ...


class FunctionTool:
    """Wraps a sync or async function as a :class:`Tool`.

    The function receives the raw arguments mapping (or ``None``). Its return
    value is normalised to a list of content blocks: a ``str`` becomes one
    text block, a list may mix strings, dicts and content models.
    """

    def __init__(
        self,
        name: str,
        description: str,
        func: ToolFunc,
        input_schema: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self.input_schema = input_schema or {"type": "object", "properties": {}}
        self._func = func

    async def call(self, arguments: dict[str, Any] | None) -> list[Content]:
        result = self._func(arguments)
        if inspect.isawaitable(result):
            result = await result
        return to_content(result)

    def __repr__(self) -> str:
        return f"FunctionTool(name={self.name!r})"


def tool(
    name: str,
    description: str = "",
    input_schema: dict[str, Any] | None = None,
) -> Callable[[ToolFunc], FunctionTool]:
    """Decorator form of :class:`FunctionTool`."""

    def decorator(func: ToolFunc) -> FunctionTool:
        return FunctionTool(name, description or (func.__doc__ or "").strip(), func, input_schema)

    return decorator


def to_content(value: Any) -> list[Content]:
    """Normalise a tool's return value into content blocks."""
    if isinstance(value, (str, TextContent, dict)):
        value = [value]
    blocks: list[Content] = []
    for item in value or []:
        if isinstance(item, TextContent):
            blocks.append(item)
        elif isinstance(item, str):
            blocks.append(TextContent(text=item))
        elif isinstance(item, dict):
            blocks.append(TextContent.model_validate(item))
        else:
            msg = f"unsupported content block: {type(item).__name__}"
            raise TypeError(msg)
    return blocks
