"""MCP server wiring for the tool registry."""

import logging
from typing import Any, Callable

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as MCPToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import FunctionTool

from prodsync_mcp.backend import DatadogLogsBackend, LogBackend
from prodsync_mcp.debug import timed_tool
from prodsync_mcp.exceptions import ToolError, UnknownToolError
from prodsync_mcp.models import ServerConfig
from prodsync_mcp.tools import ToolRegistry, build_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "ProdSync MCP Server"
SERVER_VERSION = "0.1.0"


def _create_tool_with_schema(
    name: str,
    description: str,
    input_schema: dict[str, Any],
    fn: Callable[..., Any],
) -> FunctionTool:
    """Create a FastMCP FunctionTool with a custom input schema.

    Args:
        name: Tool name
        description: Tool description
        input_schema: JSON Schema for tool inputs
        fn: The wrapper function to call

    Returns:
        A FunctionTool instance with the custom schema
    """
    return FunctionTool(
        name=name,
        description=description,
        fn=fn,
        parameters=input_schema,
    )


def _make_tool_wrapper(registry: ToolRegistry, tool_name: str) -> Callable[..., Any]:
    invoke = timed_tool(registry.invoke, tool_name=tool_name)

    async def tool_wrapper(**kwargs: Any) -> Any:
        """Dispatch an MCP tool call to the registry."""
        try:
            response = await invoke(name=tool_name, arguments=kwargs)
        except ToolError as e:
            # fastmcp passes ToolError messages through unchanged
            raise MCPToolError(str(e)) from e
        return response.content

    return tool_wrapper


class RegistryDispatchMiddleware(Middleware):
    """Answers calls for names the registry does not know.

    FastMCP would otherwise reply with its own not-found text.
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        if context.message.name not in self.registry:
            raise MCPToolError(str(UnknownToolError()))
        return await call_next(context)


def create_server(registry: ToolRegistry, name: str = SERVER_NAME) -> FastMCP:
    """Create a FastMCP server exposing every tool in the registry."""
    mcp = FastMCP(name, version=SERVER_VERSION)
    mcp.add_middleware(RegistryDispatchMiddleware(registry))

    for schema in registry.list_tools():
        tool = _create_tool_with_schema(
            name=schema.name,
            description=schema.description,
            input_schema=schema.to_input_schema(),
            fn=_make_tool_wrapper(registry, schema.name),
        )
        mcp.add_tool(tool)
        logger.debug(f"Registered tool {schema.name}")

    return mcp


def create_backend(config: ServerConfig, client: httpx.AsyncClient | None = None) -> LogBackend:
    return DatadogLogsBackend(config.datadog, client=client)


def create_server_from_config(config: ServerConfig) -> FastMCP:
    """Build backend, registry and server from loaded configuration."""
    registry = build_registry(create_backend(config))
    return create_server(registry)
