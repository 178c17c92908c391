"""Datadog Logs API adapter."""

import logging
from typing import Any, Protocol

import httpx

from prodsync_mcp.models import DatadogConfig, TimeRange
from prodsync_mcp.query import format_timestamp

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/v2/logs/events/search"


class LogBackend(Protocol):
    """Anything that can run a log search."""

    async def search_logs(
        self, query: str, time_range: TimeRange, limit: int
    ) -> list[dict[str, Any]]:
        ...


class DatadogAPIError(Exception):
    """Datadog answered with a non-success status."""

    def __init__(self, status_code: int, errors: list[str] | None = None):
        self.status_code = status_code
        self.errors = errors or []
        detail = "; ".join(self.errors) if self.errors else httpx.codes.get_reason_phrase(status_code)
        super().__init__(f"HTTP {status_code}: {detail}")


def _extract_errors(response: httpx.Response) -> list[str]:
    """Pull the ``errors`` list out of a Datadog error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return [response.text] if response.text else []
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        return [str(e) for e in body["errors"]]
    return []


class DatadogLogsBackend:
    """Runs log searches against the Datadog v2 Logs API.

    One request per search; no retries and no pagination.
    """

    def __init__(self, config: DatadogConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    @property
    def url(self) -> str:
        return f"https://api.{self.config.site}{SEARCH_PATH}"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "DD-API-KEY": self.config.api_key,
            "DD-APPLICATION-KEY": self.config.app_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def build_payload(self, query: str, time_range: TimeRange, limit: int) -> dict[str, Any]:
        return {
            "filter": {
                "query": query,
                "from": format_timestamp(time_range.start),
                "to": format_timestamp(time_range.end),
            },
            "page": {"limit": limit},
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        return await client.post(self.url, headers=self.headers, json=payload)

    async def search_logs(
        self, query: str, time_range: TimeRange, limit: int
    ) -> list[dict[str, Any]]:
        """Search logs and return the raw ``data`` events."""
        payload = self.build_payload(query, time_range, limit)
        logger.debug("POST %s %s", self.url, payload)

        if self._client is not None:
            response = await self._post(self._client, payload)
        else:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                response = await self._post(client, payload)

        if response.is_error:
            raise DatadogAPIError(response.status_code, _extract_errors(response))

        data = response.json().get("data")
        return data if data is not None else []
