"""Builds Datadog search queries and time windows from tool requests."""

from datetime import datetime, timedelta, timezone

from prodsync_mcp.exceptions import ValidationError
from prodsync_mcp.models import LogQueryRequest, TimeRange

SEVERITY_STATUS = {"Error": "error", "Warn": "warn", "Info": "info"}
DEFAULT_STATUS = "error"


def map_severity(severity: str | None) -> str:
    """Map a severity label to Datadog's status vocabulary.

    Unrecognized values (including lowercase labels) fall back to "error".
    """
    return SEVERITY_STATUS.get(severity or "", DEFAULT_STATUS)


def build_query_string(request: LogQueryRequest) -> str:
    """Build the conjunctive search expression.

    Values are inserted as given; Datadog query syntax is not escaped.
    """
    status = map_severity(request.severity)
    return f"service:{request.service} AND status:{status} AND env:{request.env}"


def parse_timestamp(value: str, field: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: '{value}' is not an ISO-8601 timestamp") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_time_range(request: LogQueryRequest, now: datetime | None = None) -> TimeRange:
    """Compute the search window.

    end = end_time_iso or now; start = start_time_iso or end - lookback.
    No ordering check is made between start and end.
    """
    if request.end_time_iso:
        end = parse_timestamp(request.end_time_iso, "end_time_iso")
    else:
        end = now or datetime.now(timezone.utc)

    if request.start_time_iso:
        start = parse_timestamp(request.start_time_iso, "start_time_iso")
    else:
        try:
            start = end - timedelta(minutes=request.lookback_minutes)
        except OverflowError as e:
            raise ValidationError(
                f"Invalid lookback_minutes: {request.lookback_minutes} is out of range"
            ) from e

    return TimeRange(start=start, end=end)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
