"""SSE transport: a FastAPI app serving one MCP server per connected client."""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from mcp.server.sse import SseServerTransport

from canvas_core.config import Settings
from canvas_core.context import Context

from . import tools
from .server import SERVER_NAME, SERVER_VERSION, create_server

logger = logging.getLogger("canvas-mcp.sse")

MESSAGE_ENDPOINT = "/message/"
LOCALHOST_ORIGIN_REGEX = r"^http://localhost:\d+$"


def create_app(ctx: Context, settings: Settings) -> FastAPI:
    """Build the SSE app.

    ``GET /sse`` opens a stream and spawns a dedicated MCP server for it;
    the client posts its requests to ``/message/?session_id=...``. Open
    streams are tracked in ``app.state.active_connections`` until the
    client disconnects.
    """
    transport = SseServerTransport(MESSAGE_ENDPOINT)
    started_at = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{SERVER_NAME} MCP server listening on {settings.host}:{settings.port}")
        yield
        await ctx.gateway.aclose()

    app = FastAPI(
        title="Limitless Canvas MCP Server",
        description="MCP server for managing projects and tasks in Limitless Canvas",
        version=SERVER_VERSION,
        lifespan=lifespan,
    )
    app.state.active_connections = {}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "mode": "sse",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "tools": len(tools.get_tools()),
            "activeConnections": len(app.state.active_connections),
            "uptime": round(time.monotonic() - started_at, 3),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/")
    def root():
        """Root endpoint with server info."""
        return {
            "name": "Limitless Canvas MCP Server",
            "version": SERVER_VERSION,
            "description": "MCP server for managing projects and tasks in Limitless Canvas",
            "endpoints": {
                "health": "/health",
                "sse": "/sse",
                "message": f"{MESSAGE_ENDPOINT} (POST)",
            },
            "tools": [tool.name for tool in tools.get_tools()],
            "usage": {
                "claude_code": "Use --stdio flag for local Claude Code integration",
                "claude_chat": "Connect to /sse endpoint",
            },
        }

    @app.get("/sse")
    async def handle_sse(request: Request):
        connection_id = uuid4().hex
        logger.info(f"SSE connection opened: {connection_id}")
        app.state.active_connections[connection_id] = request.client.host if request.client else None
        try:
            async with transport.connect_sse(request.scope, request.receive, request._send) as streams:
                server = create_server(ctx)
                await server.run(streams[0], streams[1], server.create_initialization_options())
        finally:
            app.state.active_connections.pop(connection_id, None)
            logger.info(f"SSE connection closed: {connection_id}")
        return Response()

    app.mount(MESSAGE_ENDPOINT.rstrip("/"), app=transport.handle_post_message)

    return app
