"""Diagnostic logging for the ProdSync MCP server.

Two sinks:
- an append-only file (``<log_dir>/debug.log``) that records every request,
  query and backend payload, one ``[<ISO timestamp>] <message>`` line each
- the ``prodsync_mcp.debug`` logger, which also carries call timing when
  debug mode is on (PRODSYNC_DEBUG=1 or enable_debug())

Writes to the file never raise; failures are reported on stderr instead.
"""

import contextvars
import functools
import json
import logging
import os
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, TypeVar

from prodsync_mcp.exceptions import LoggingError

logger = logging.getLogger("prodsync_mcp.debug")

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_debug_enabled = False

# Milliseconds
SLOW_TOOL_THRESHOLD_MS = 2000

DEFAULT_LOG_DIR = "logs"
LOG_FILE_NAME = "debug.log"

T = TypeVar("T", bound=Callable[..., Any])


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled.

    Returns True if either:
    - enable_debug() was called
    - PRODSYNC_DEBUG env var is set to "1", "true", or "yes"
    """
    if _debug_enabled:
        return True
    env_val = os.environ.get("PRODSYNC_DEBUG", "").lower()
    return env_val in ("1", "true", "yes")


def enable_debug() -> None:
    """Enable debug logging programmatically."""
    global _debug_enabled
    _debug_enabled = True


def disable_debug() -> None:
    """Disable debug logging programmatically."""
    global _debug_enabled
    _debug_enabled = False


def current_request_id() -> str | None:
    """Return the request ID of the current context, if one is active."""
    return _request_id.get()


class DebugContext:
    """Context manager that scopes a request ID to one tool invocation.

    An ID already active in the enclosing context is reused, so nested
    scopes (timing wrapper, registry) log under the same ID.

    Usage:
        async with DebugContext():
            await registry.invoke("get_logs", {...})
    """

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or _request_id.get() or str(uuid.uuid4())[:8]
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "DebugContext":
        self._token = _request_id.set(self.request_id)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token:
            _request_id.reset(self._token)

    async def __aenter__(self) -> "DebugContext":
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)


def _truncate(value: str, max_len: int = 100) -> str:
    """Truncate a string with ellipsis if too long."""
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def _format_value(value: Any, max_len: int = 100) -> str:
    """Format a value for logging, truncating if needed."""
    if value is None:
        return "None"
    if isinstance(value, str):
        return _truncate(repr(value), max_len)
    if isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str)
            return _truncate(s, max_len)
        except (TypeError, ValueError):
            return _truncate(str(value), max_len)
    return _truncate(str(value), max_len)


def _format_args(args: dict[str, Any], max_len: int = 200) -> str:
    """Format tool arguments for logging."""
    if not args:
        return "{}"
    parts = []
    for k, v in args.items():
        parts.append(f"{k}={_format_value(v, 50)}")
    result = "{" + ", ".join(parts) + "}"
    return _truncate(result, max_len)


def _summarize_result(result: Any) -> str:
    """Create a brief summary of a tool result."""
    if result is None:
        return "None"
    if isinstance(result, list):
        return f"list({len(result)} items)"
    if isinstance(result, str):
        return f"str({len(result)} chars)"
    if hasattr(result, "content"):
        return f"ToolResponse({len(getattr(result, 'content', []))} items)"
    return type(result).__name__


class DebugFileLog:
    """Append-only diagnostic log file.

    ``write`` always succeeds from the caller's point of view.
    """

    def __init__(self, log_dir: str | Path | None = None):
        self._log_dir = Path(log_dir) if log_dir is not None else None

    @property
    def log_dir(self) -> Path:
        # Resolved per write so the default follows the working directory
        if self._log_dir is None:
            return Path.cwd() / DEFAULT_LOG_DIR
        return self._log_dir

    @property
    def path(self) -> Path:
        return self.log_dir / LOG_FILE_NAME

    def _append(self, line: str) -> None:
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            raise LoggingError(str(e)) from e

    def write(self, message: str) -> None:
        """Append ``[<timestamp>] <message>`` to the log file.

        Inside a DebugContext the message is prefixed with ``[req=<id>]``.
        """
        req_id = current_request_id()
        if req_id:
            message = f"[req={req_id}] {message}"
        timestamp = (
            datetime.now(timezone.utc).isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        logger.debug(message)
        try:
            self._append(f"[{timestamp}] {message}\n")
        except LoggingError as e:
            sys.stderr.write(f"[LOGGER ERROR] {e}\n")

    def __call__(self, message: str) -> None:
        self.write(message)


_file_log = DebugFileLog()


def set_log_dir(log_dir: str | Path) -> DebugFileLog:
    """Point the module-level diagnostic log at a new directory."""
    global _file_log
    _file_log = DebugFileLog(log_dir)
    return _file_log


def debug_log(message: str) -> None:
    """Write a line to the module-level diagnostic log."""
    _file_log.write(message)


def timed_tool(fn: T, *, tool_name: str | None = None) -> T:
    """Decorator that wraps an async tool function with timing and logging.

    The call runs inside a DebugContext, so the debug-file lines written by
    the tool carry the same request ID as the timing lines.

    Args:
        fn: The async function to wrap
        tool_name: Override the tool name (defaults to fn.__name__)

    Returns:
        Wrapped async function with timing instrumentation
    """
    name = tool_name or fn.__name__

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not is_debug_enabled():
            return await fn(*args, **kwargs)

        async with DebugContext() as ctx:
            req_id = ctx.request_id
            start = time.perf_counter()
            logger.debug(f"CALL [req={req_id}] {name}({_format_args(kwargs)})")

            try:
                result = await fn(*args, **kwargs)
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(
                    f"FAIL [req={req_id}] {name} failed in {elapsed:.1f}ms: "
                    f"{type(e).__name__}: {e}"
                )
                raise

            elapsed = (time.perf_counter() - start) * 1000
            result_summary = _summarize_result(result)
            if elapsed > SLOW_TOOL_THRESHOLD_MS:
                logger.warning(
                    f"SLOW [req={req_id}] {name} completed in {elapsed:.1f}ms "
                    f"-> {result_summary}"
                )
            else:
                logger.debug(
                    f"DONE [req={req_id}] {name} completed in {elapsed:.1f}ms "
                    f"-> {result_summary}"
                )
            return result

    return wrapper  # type: ignore[return-value]


def configure_debug_logging(level: int = logging.DEBUG) -> None:
    """Configure logging for debug output.

    Sets up the prodsync_mcp logger on stderr. Stdout is reserved for the
    stdio transport.

    Args:
        level: Logging level for the package logger
    """
    package_logger = logging.getLogger("prodsync_mcp")
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
