"""Tools exposed by the ProdSync MCP server.

Each tool is a (ToolSchema, handler) pair held by a ToolRegistry.
"""

from prodsync_mcp.backend import LogBackend
from prodsync_mcp.models import ToolSchema

from .get_logs import GET_LOGS_SCHEMA, GetLogsTool
from .registry import RegisteredTool, ToolRegistry

TOOL_SCHEMAS: list[ToolSchema] = [GET_LOGS_SCHEMA]


def build_registry(backend: LogBackend, log=None) -> ToolRegistry:
    """Create a registry holding every tool served by default.

    Args:
        backend: Log search backend shared by the tools
        log: Optional diagnostic sink (defaults to the debug log file)
    """
    registry = ToolRegistry()
    get_logs = GetLogsTool(backend) if log is None else GetLogsTool(backend, log=log)
    registry.register(GET_LOGS_SCHEMA, get_logs)
    return registry


__all__ = [
    "GET_LOGS_SCHEMA",
    "TOOL_SCHEMAS",
    "GetLogsTool",
    "RegisteredTool",
    "ToolRegistry",
    "build_registry",
]
