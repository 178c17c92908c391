"""Data models for the ProdSync MCP server."""

from datetime import datetime
from typing import Any, Literal

from mcp.types import TextContent, Tool
from pydantic import BaseModel, ConfigDict, Field

NO_ERROR_DETAILS = "No error details available"


class DatadogConfig(BaseModel):
    """Credentials and endpoint settings for the Datadog Logs API."""

    api_key: str
    app_key: str
    site: str = "datadoghq.com"
    timeout: float = 30.0


class ServerConfig(BaseModel):
    """Root configuration for the server."""

    model_config = ConfigDict(extra="forbid")

    datadog: DatadogConfig
    log_dir: str = "logs"
    debug: bool = False


class ToolParameter(BaseModel):
    """A single parameter of a tool's input schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["string", "integer"]
    description: str
    enum: list[str] | None = None
    required: bool = False


class ToolSchema(BaseModel):
    """Static descriptor of a tool and its parameters.

    ``required`` is kept separately from the per-parameter flags so the
    published schema can list a parameter as required even when the handler
    gives it a default.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: list[ToolParameter] = []
    required: list[str] | None = None

    @property
    def required_names(self) -> list[str]:
        if self.required is not None:
            return list(self.required)
        return [p.name for p in self.parameters if p.required]

    def to_input_schema(self) -> dict[str, Any]:
        """Render the JSON Schema object for the tool's arguments."""
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum is not None:
                prop["enum"] = list(param.enum)
            properties[param.name] = prop
        return {
            "type": "object",
            "properties": properties,
            "required": self.required_names,
        }

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.to_input_schema(),
        )


class LogQueryRequest(BaseModel):
    """Coerced arguments of a single ``get_logs`` call."""

    service: str
    severity: str = "Error"
    env: str
    lookback_minutes: int = 60
    start_time_iso: str | None = None
    end_time_iso: str | None = None
    limit: int = 20


class TimeRange(BaseModel):
    """Search window sent to the backend."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class NormalizedLogRecord(BaseModel):
    """Simplified log record returned to the caller.

    Field order is part of the output contract.
    """

    # Error information
    status: Any = None
    message: Any = None
    error: Any = NO_ERROR_DETAILS

    # Service components and cadence
    activityType: Any = None
    workflowId: Any = None
    taskList: Any = None
    workerId: Any = None
    timestamp: Any = None
    domain: Any = None
    runId: Any = None

    # Infrastructure
    host: Any = None
    hostname: Any = None

    # Additional debugging information
    caller: Any = None
    stacktrace: Any = None


class ToolResponse(BaseModel):
    """Successful result of a tool invocation."""

    content: list[TextContent] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.content)
