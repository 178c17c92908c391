"""Utility functions for tool handlers."""

import json
from typing import Any

from mcp.types import TextContent

from prodsync_mcp.models import ToolResponse


def _text(text: str) -> TextContent:
    """Wrap text in TextContent for MCP response."""
    return TextContent(type="text", text=text)


def text_response(payload: Any) -> ToolResponse:
    """Serialize a payload as pretty-printed JSON in a single text item.

    Keys keep their insertion order.
    """
    return ToolResponse(content=[_text(json.dumps(payload, indent=2, default=str))])
