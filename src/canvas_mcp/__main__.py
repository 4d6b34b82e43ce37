"""Command-line entry point: ``canvas-mcp [--stdio]``."""
import argparse
import asyncio
import logging
import sys

import uvicorn

from canvas_core.config import get_settings
from canvas_core.context import ConfigurationError, build_context

from .server import SERVER_NAME, run_stdio
from .sse import create_app

logger = logging.getLogger("canvas-mcp")


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="canvas-mcp",
        description="MCP server for managing projects and tasks in Limitless Canvas",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Serve a single client over stdin/stdout instead of HTTP/SSE",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        ctx = build_context(settings)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.stdio:
        asyncio.run(run_stdio(ctx))
        return 0

    logger.info(f"Starting {SERVER_NAME} in SSE mode")
    uvicorn.run(
        create_app(ctx, settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
