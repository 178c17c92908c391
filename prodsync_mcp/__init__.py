"""ProdSync MCP - Datadog log search exposed as an MCP tool."""

from prodsync_mcp.backend import DatadogLogsBackend, LogBackend
from prodsync_mcp.config import load_config
from prodsync_mcp.exceptions import (
    BackendError,
    ConfigurationError,
    ToolError,
    UnknownToolError,
    ValidationError,
)
from prodsync_mcp.models import (
    LogQueryRequest,
    NormalizedLogRecord,
    ServerConfig,
    TimeRange,
    ToolResponse,
    ToolSchema,
)
from prodsync_mcp.tools import ToolRegistry, build_registry

__all__ = [
    "BackendError",
    "ConfigurationError",
    "DatadogLogsBackend",
    "LogBackend",
    "LogQueryRequest",
    "NormalizedLogRecord",
    "ServerConfig",
    "TimeRange",
    "ToolError",
    "ToolRegistry",
    "ToolResponse",
    "ToolSchema",
    "UnknownToolError",
    "ValidationError",
    "build_registry",
    "load_config",
]
