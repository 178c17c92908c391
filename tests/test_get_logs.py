"""Tests for the get_logs tool handler."""

import json
from datetime import timedelta

import pytest

from prodsync_mcp.exceptions import BackendError, ValidationError
from prodsync_mcp.models import TimeRange
from prodsync_mcp.tools.get_logs import REQUIRED_MESSAGE, GetLogsTool, parse_request


class TestParseRequest:
    """Tests for argument coercion and defaults."""

    def test_defaults(self):
        request = parse_request({"service": "checkout", "env": "prod"})

        assert request.severity == "Error"
        assert request.lookback_minutes == 60
        assert request.limit == 20
        assert request.start_time_iso is None
        assert request.end_time_iso is None

    def test_coerces_types(self):
        """Integers arrive as strings or floats from some clients."""
        request = parse_request(
            {"service": 42, "env": "dev", "lookback_minutes": "15", "limit": 5.0}
        )

        assert request.service == "42"
        assert request.lookback_minutes == 15
        assert request.limit == 5

    def test_zero_integers_take_default(self):
        request = parse_request({"service": "a", "env": "b", "lookback_minutes": 0, "limit": 0})
        assert request.lookback_minutes == 60
        assert request.limit == 20

    def test_empty_times_are_none(self):
        request = parse_request(
            {"service": "a", "env": "b", "start_time_iso": "", "end_time_iso": None}
        )
        assert request.start_time_iso is None
        assert request.end_time_iso is None

    @pytest.mark.parametrize(
        "arguments",
        [
            {"env": "prod"},
            {"service": "checkout"},
            {},
            {"service": "", "env": "prod"},
            {"service": "checkout", "env": ""},
            {"service": None, "env": None},
        ],
    )
    def test_missing_required_fields(self, arguments):
        with pytest.raises(ValidationError) as exc_info:
            parse_request(arguments)
        assert str(exc_info.value) == REQUIRED_MESSAGE

    def test_required_message_names_both_fields(self):
        assert "Service and Env are required" in REQUIRED_MESSAGE
        assert "int, personal-dev, dev, prod" in REQUIRED_MESSAGE

    def test_required_check_runs_first(self):
        """A missing service is reported even if other arguments are malformed."""
        with pytest.raises(ValidationError, match="Service and Env"):
            parse_request({"env": "prod", "limit": "lots"})

    def test_invalid_integer(self):
        with pytest.raises(ValidationError, match="limit"):
            parse_request({"service": "a", "env": "b", "limit": "lots"})

    def test_infinite_integer(self):
        with pytest.raises(ValidationError, match="limit"):
            parse_request({"service": "a", "env": "b", "limit": float("inf")})


class TestGetLogsTool:
    """Tests for GetLogsTool.__call__."""

    async def test_success_response_shape(self, backend, log_lines, sample_events):
        """A successful call returns one text item with the normalized list."""
        backend.search_logs.return_value = sample_events
        tool = GetLogsTool(backend, log=log_lines.append)

        response = await tool({"service": "checkout", "env": "prod"})

        assert len(response.content) == 1
        assert response.content[0].type == "text"
        records = json.loads(response.content[0].text)
        assert len(records) == 2
        assert records[0]["error"] == "boom"
        assert records[1]["error"] == "No error details available"
        assert records[1]["message"] is None

    async def test_output_is_pretty_printed_in_field_order(self, backend, log_lines, make_event):
        backend.search_logs.return_value = [make_event(status="info")]
        tool = GetLogsTool(backend, log=log_lines.append)

        response = await tool({"service": "checkout", "env": "prod"})

        text = response.content[0].text
        assert text.startswith('[\n  {\n    "status": "info",\n    "message": null,\n    "error"')
        assert list(json.loads(text)[0])[:3] == ["status", "message", "error"]

    async def test_backend_called_with_query_range_and_limit(self, backend, log_lines):
        tool = GetLogsTool(backend, log=log_lines.append)

        await tool(
            {
                "service": "checkout",
                "severity": "Warn",
                "env": "prod",
                "lookback_minutes": 30,
                "limit": 50,
            }
        )

        backend.search_logs.assert_awaited_once()
        query, time_range, limit = backend.search_logs.call_args.args
        assert query == "service:checkout AND status:warn AND env:prod"
        assert isinstance(time_range, TimeRange)
        assert time_range.end - time_range.start == timedelta(minutes=30)
        assert limit == 50

    async def test_missing_service_never_calls_backend(self, backend, log_lines):
        tool = GetLogsTool(backend, log=log_lines.append)

        with pytest.raises(ValidationError):
            await tool({"env": "prod"})

        backend.search_logs.assert_not_called()

    async def test_missing_env_never_calls_backend(self, backend, log_lines):
        tool = GetLogsTool(backend, log=log_lines.append)

        with pytest.raises(ValidationError):
            await tool({"service": "checkout", "severity": "Error"})

        backend.search_logs.assert_not_called()

    async def test_backend_failure_is_wrapped(self, backend, log_lines):
        backend.search_logs.side_effect = RuntimeError("timeout")
        tool = GetLogsTool(backend, log=log_lines.append)

        with pytest.raises(BackendError) as exc_info:
            await tool({"service": "checkout", "env": "prod"})

        assert str(exc_info.value) == "Failed to fetch logs: timeout"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        backend.search_logs.assert_awaited_once()
        assert "Datadog error: timeout" in log_lines

    async def test_traces_request_query_and_payload(self, backend, log_lines, sample_events):
        backend.search_logs.return_value = sample_events
        tool = GetLogsTool(backend, log=log_lines.append)

        await tool({"service": "checkout", "env": "prod"})

        assert log_lines[0].startswith("get_logs arguments:")
        assert log_lines[1].startswith(
            "Querying Datadog: service:checkout AND status:error AND env:prod | from: "
        )
        assert log_lines[2].startswith("Datadog response: ")
        assert '"WorkflowID": "wf-1"' in log_lines[2]

    async def test_failing_log_does_not_abort(self, backend, sample_events, capsys):
        """Errors raised by the diagnostic sink go to stderr only."""

        def broken_log(message):
            raise OSError("disk full")

        backend.search_logs.return_value = sample_events
        tool = GetLogsTool(backend, log=broken_log)

        response = await tool({"service": "checkout", "env": "prod"})

        assert len(json.loads(response.content[0].text)) == 2
        assert "[LOGGER ERROR] disk full" in capsys.readouterr().err

    async def test_empty_backend_result(self, backend, log_lines):
        backend.search_logs.return_value = []
        tool = GetLogsTool(backend, log=log_lines.append)

        response = await tool({"service": "checkout", "env": "prod"})

        assert json.loads(response.content[0].text) == []
