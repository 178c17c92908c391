"""Tool registry: lists tool schemas and dispatches calls by name."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from prodsync_mcp.debug import DebugContext
from prodsync_mcp.exceptions import UnknownToolError
from prodsync_mcp.models import ToolResponse, ToolSchema

ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class RegisteredTool:
    """A tool's schema paired with the coroutine that runs it."""

    schema: ToolSchema
    handler: ToolHandler


class ToolRegistry:
    """Maps tool names to their schema and handler."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def register(self, schema: ToolSchema, handler: ToolHandler) -> RegisteredTool:
        if schema.name in self._tools:
            raise ValueError(f"Tool '{schema.name}' is already registered")
        tool = RegisteredTool(schema=schema, handler=handler)
        self._tools[schema.name] = tool
        return tool

    def get(self, name: str) -> RegisteredTool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> list[ToolSchema]:
        """Return the schema of every registered tool, in registration order."""
        return [tool.schema for tool in self._tools.values()]

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Run a tool by name.

        Raises:
            UnknownToolError: if no tool is registered under ``name``
            ToolError: any other per-call failure raised by the handler
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError()

        async with DebugContext():
            return await tool.handler(dict(arguments or {}))
