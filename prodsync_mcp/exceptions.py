"""Exceptions raised by the ProdSync MCP server."""


class ProdSyncError(Exception):
    """Base class for all ProdSync errors."""


class ConfigurationError(ProdSyncError):
    """Required configuration is missing or invalid.

    Raised at startup only; the server must not serve requests after it.
    """


class ToolError(ProdSyncError):
    """A single tool invocation failed.

    The message is returned to the calling agent verbatim.
    """


class UnknownToolError(ToolError):
    """The requested tool name is not registered."""

    def __init__(self, message: str = "Unknown tool"):
        super().__init__(message)


class ValidationError(ToolError):
    """Tool arguments are missing or cannot be coerced."""


class BackendError(ToolError):
    """The log backend call failed."""

    prefix = "Failed to fetch logs: "

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.prefix}{detail}")


class LoggingError(ProdSyncError):
    """Writing to the diagnostic log failed."""
