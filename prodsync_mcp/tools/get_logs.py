"""The ``get_logs`` tool: Datadog log search by service, severity and env."""

# ruff: noqa: E501

import json
import sys
from typing import Any, Callable

from prodsync_mcp.backend import LogBackend
from prodsync_mcp.debug import debug_log
from prodsync_mcp.exceptions import BackendError, ValidationError
from prodsync_mcp.models import LogQueryRequest, ToolParameter, ToolResponse, ToolSchema
from prodsync_mcp.normalize import normalize
from prodsync_mcp.query import build_query_string, build_time_range, format_timestamp

from .utils import text_response

TOOL_NAME = "get_logs"

DEFAULT_SEVERITY = "Error"
DEFAULT_LOOKBACK_MINUTES = 60
DEFAULT_LIMIT = 20

REQUIRED_MESSAGE = (
    "Service and Env are required. \n"
    " Name of the service to get logs for \n"
    " Environment to get logs from (int, personal-dev, dev, prod)"
)

GET_LOGS_SCHEMA = ToolSchema(
    name=TOOL_NAME,
    description="Gets logs filtered by service name, severity level, and environment within a specified time range.",
    parameters=[
        ToolParameter(
            name="service",
            type="string",
            description="Name of the service to get logs for",
            required=True,
        ),
        ToolParameter(
            name="severity",
            type="string",
            description="Severity of the logs to get (Error, Warn, Info). Default: Error",
            enum=["Error", "Warn", "Info"],
        ),
        ToolParameter(
            name="env",
            type="string",
            description="Environment to get logs from (int, personal-dev, dev, prod)",
            enum=["int", "personal-dev", "dev", "prod"],
            required=True,
        ),
        ToolParameter(
            name="lookback_minutes",
            type="integer",
            description="Number of minutes to look back from now. Default: 60. Examples: 60, 30, 15",
        ),
        ToolParameter(
            name="start_time_iso",
            type="string",
            description="Start time in ISO format (YYYY-MM-DD HH:MM:SS). Leave empty to use lookback_minutes",
        ),
        ToolParameter(
            name="end_time_iso",
            type="string",
            description="End time in ISO format (YYYY-MM-DD HH:MM:SS). Leave empty to default to current time",
        ),
        ToolParameter(
            name="limit",
            type="integer",
            description="Maximum number of logs to return. Default: 20",
        ),
    ],
    # severity is listed although the handler defaults it; clients rely on this list
    required=["service", "severity", "env"],
)


def _string_arg(arguments: dict[str, Any], key: str, default: str = "") -> str:
    value = arguments.get(key)
    if value is None:
        return default
    return str(value)


def _optional_string_arg(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    return str(value) if value else None


def _int_arg(arguments: dict[str, Any], key: str, default: int) -> int:
    value = arguments.get(key)
    if not value:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid {key}: '{value}' is not an integer") from e


def parse_request(arguments: dict[str, Any]) -> LogQueryRequest:
    """Coerce raw tool arguments into a LogQueryRequest.

    The required-field check runs before any other coercion.
    """
    service = _string_arg(arguments, "service")
    env = _string_arg(arguments, "env")
    if not service or not env:
        raise ValidationError(REQUIRED_MESSAGE)

    return LogQueryRequest(
        service=service,
        severity=_string_arg(arguments, "severity", DEFAULT_SEVERITY),
        env=env,
        lookback_minutes=_int_arg(arguments, "lookback_minutes", DEFAULT_LOOKBACK_MINUTES),
        start_time_iso=_optional_string_arg(arguments, "start_time_iso"),
        end_time_iso=_optional_string_arg(arguments, "end_time_iso"),
        limit=_int_arg(arguments, "limit", DEFAULT_LIMIT),
    )


class GetLogsTool:
    """Handler for ``get_logs``.

    Args:
        backend: Log search backend (DatadogLogsBackend in production)
        log: Diagnostic sink; failures inside it are reported on stderr
    """

    schema = GET_LOGS_SCHEMA

    def __init__(self, backend: LogBackend, log: Callable[[str], None] = debug_log):
        self.backend = backend
        self.log = log

    def _trace(self, message: str) -> None:
        try:
            self.log(message)
        except Exception as e:
            sys.stderr.write(f"[LOGGER ERROR] {e}\n")

    async def __call__(self, arguments: dict[str, Any]) -> ToolResponse:
        self._trace(f"get_logs arguments: {json.dumps(arguments, default=str)}")
        request = parse_request(arguments)

        time_range = build_time_range(request)
        query = build_query_string(request)

        self._trace(
            f"Querying Datadog: {query} | from: {format_timestamp(time_range.start)} "
            f"| to: {format_timestamp(time_range.end)} | limit: {request.limit}"
        )
        try:
            records = await self.backend.search_logs(query, time_range, request.limit)
        except Exception as e:
            self._trace(f"Datadog error: {e}")
            raise BackendError(str(e) or type(e).__name__) from e

        self._trace(f"Datadog response: {json.dumps(records, indent=2, default=str)}")

        return text_response([record.model_dump() for record in normalize(records)])
