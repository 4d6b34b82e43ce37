"""Canvas MCP Server - Expose Limitless Canvas project management to AI assistants."""
import logging
import traceback
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from canvas_core import __version__
from canvas_core.context import Context
from canvas_core.results import ErrorCode, fail

from . import formatters
from . import handlers
from . import tools

logger = logging.getLogger("canvas-mcp")

SERVER_NAME = "limitless-canvas"
SERVER_VERSION = __version__


def create_server(ctx: Context) -> Server:
    """Build an MCP server bound to ``ctx``.

    The SSE transport builds one of these per connected client; all of them
    share the same context and therefore the same gateway.
    """
    app = Server(SERVER_NAME, version=SERVER_VERSION)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for project management."""
        return tools.get_tools()

    # Arguments are decoded by handlers.dispatch, which reports INVALID_STATUS
    # and INVALID_ARGUMENTS as envelopes instead of protocol errors.
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Any) -> CallToolResult:
        """Handle MCP tool calls by delegating to shared handlers."""
        logger.info(f"Tool call: {name} with arguments: {arguments}")
        try:
            result = await handlers.dispatch(ctx, name, arguments)
        except Exception as e:
            logger.error(f"Unhandled error during {name} call:\n{traceback.format_exc()}")
            result = fail(f"{type(e).__name__}: {str(e)}", ErrorCode.INTERNAL_ERROR)

        if not result.success:
            logger.info(f"Tool {name} failed with {result.code.value}: {result.error}")
        return formatters.to_call_tool_result(result)

    return app


async def run_stdio(ctx: Context) -> None:
    """Run one MCP server over stdin/stdout until the client disconnects."""
    app = create_server(ctx)
    logger.info(f"{SERVER_NAME} MCP server running on stdio")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await ctx.gateway.aclose()
