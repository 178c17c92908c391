"""Shared fixtures for prodsync_mcp tests."""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def datadog_env(monkeypatch):
    """Set the Datadog credentials in the environment."""
    monkeypatch.setenv("DATADOG_API_KEY", "test-api-key")
    monkeypatch.setenv("DATADOG_APP_KEY", "test-app-key")
    monkeypatch.delenv("DATADOG_SITE", raising=False)
    monkeypatch.delenv("PRODSYNC_LOG_DIR", raising=False)


@pytest.fixture
def log_lines():
    """A diagnostic sink that collects messages in a list."""
    lines: list[str] = []
    return lines


@pytest.fixture
def backend():
    """A backend double that records calls and returns no events."""
    mock = AsyncMock()
    mock.search_logs.return_value = []
    return mock


@pytest.fixture
def registry(backend, log_lines):
    """A registry with the default tools wired to the backend double."""
    from prodsync_mcp.tools import build_registry

    return build_registry(backend, log=log_lines.append)


def _make_event(**attributes) -> dict:
    """Build a raw Datadog event; ``custom`` becomes attributes.attributes."""
    custom = attributes.pop("custom", None)
    attrs = dict(attributes)
    if custom is not None:
        attrs["attributes"] = custom
    return {"id": "AAAA", "type": "log", "attributes": attrs}


@pytest.fixture
def sample_events():
    """Two raw events: one fully populated, one bare."""
    return [
        _make_event(
            status="error",
            message="workflow failed",
            timestamp="2024-05-01T12:00:00.000Z",
            host="i-0abc",
            custom={
                "error": "boom",
                "ActivityType": "ChargeCard",
                "WorkflowID": "wf-1",
                "TaskList": "payments",
                "WorkerID": "worker-7",
                "Domain": "billing",
                "RunID": "run-9",
                "hostname": "ip-10-0-0-1",
                "caller": "charge.go:42",
                "stacktrace": "goroutine 1 [running]",
            },
        ),
        _make_event(status="warn"),
    ]


@pytest.fixture
def make_event():
    """Factory for raw Datadog events."""
    return _make_event
