"""Canvas MCP Server - Model Context Protocol integration.

This package exposes Limitless Canvas workspaces, projects and tasks to AI
assistants over MCP.

Modules:
- server: MCP server factory and stdio runner
- sse: FastAPI app serving the SSE transport
- formatters: Response formatting utilities
- tools: MCP tool definitions
- handlers: Tool dispatch to canvas_core operations
"""

__version__ = "1.0.0"

# Export shared modules for use by both transports
from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
