"""Reshapes raw Datadog log events into NormalizedLogRecord objects."""

from typing import Any, Iterable, Mapping

from prodsync_mcp.models import NO_ERROR_DETAILS, NormalizedLogRecord

_MISSING = object()


def get_path(record: Any, *keys: str, default: Any = None) -> Any:
    """Read a nested value, returning ``default`` if any step is absent.

    A key whose value is None counts as absent.
    """
    current = record
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING or current is None:
            return default
    return current


def _custom(record: Any, key: str, default: Any = None) -> Any:
    # Event-specific attributes live under attributes.attributes
    return get_path(record, "attributes", "attributes", key, default=default)


def normalize_record(record: Any) -> NormalizedLogRecord:
    """Build one normalized record; never fails on missing fields."""
    message = get_path(record, "attributes", "msg")
    if not message:
        message = get_path(record, "attributes", "message", default=None)

    return NormalizedLogRecord(
        status=get_path(record, "attributes", "status"),
        message=message,
        error=_custom(record, "error", default=NO_ERROR_DETAILS),
        activityType=_custom(record, "ActivityType"),
        workflowId=_custom(record, "WorkflowID"),
        taskList=_custom(record, "TaskList"),
        workerId=_custom(record, "WorkerID"),
        timestamp=get_path(record, "attributes", "timestamp"),
        domain=_custom(record, "Domain"),
        runId=_custom(record, "RunID"),
        host=get_path(record, "attributes", "host"),
        hostname=_custom(record, "hostname"),
        caller=_custom(record, "caller"),
        stacktrace=_custom(record, "stacktrace"),
    )


def normalize(records: Iterable[Any] | None) -> list[NormalizedLogRecord]:
    """Normalize every record, preserving order and count."""
    return [normalize_record(record) for record in records or []]
