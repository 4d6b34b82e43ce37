"""Shared formatting functions for MCP responses.

This module provides consistent formatting for both stdio and SSE MCP endpoints.
Every tool answers with a single text block holding the JSON envelope.
"""
import json
from typing import Any

from mcp.types import CallToolResult, TextContent
from pydantic_core import to_jsonable_python

from canvas_core.results import ToolResult


def result_payload(result: ToolResult) -> dict[str, Any]:
    """Envelope as a plain dict, dropping an empty success message."""
    if result.success:
        payload: dict[str, Any] = {"success": True}
        if result.message:
            payload["message"] = result.message
        payload["data"] = result.data
        return payload

    return {"success": False, "error": result.error, "code": result.code.value}


def format_result(result: ToolResult) -> str:
    """Render a result envelope as indented JSON text."""
    return json.dumps(
        to_jsonable_python(result_payload(result)),
        indent=2,
        ensure_ascii=False,
    )


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    """Wrap an envelope for the MCP ``tools/call`` response."""
    return CallToolResult(
        content=[TextContent(type="text", text=format_result(result))],
        isError=not result.success,
    )
