"""
MCP server exposing the sales tools and resources.

Bridges the dispatcher onto the low-level ``mcp`` Server. The dispatcher's
argument validation is authoritative, so the SDK's own input validation is
switched off for ``tools/call``.

Tools:
 - get_total_sales
 - get_sales_by_all_regions
 - get_top_products
 - describe_dataset

Resources:
 - sales://summary/regions
 - sales://top/products
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from sales_mcp.core.config import ServerConfig
from .dispatcher import Dispatcher
from .tools import build_registry

try:
    import mcp.types as types
    from mcp.server.lowlevel import Server
    from mcp.server.lowlevel.helper_types import ReadResourceContents
    from mcp.server.stdio import stdio_server
    from mcp.shared.exceptions import McpError
except Exception as exc:
    raise RuntimeError(
        "The 'mcp' package (1.x) is required for the MCP server. "
        "Install with: pip install 'mcp>=1.17,<2'"
    ) from exc

logger = logging.getLogger(__name__)


def create_dispatcher(config: ServerConfig) -> Dispatcher:
    """Build the registry for ``config`` and wrap it in a dispatcher."""
    return Dispatcher(build_registry(config), timeout=config.load_timeout)


def create_server(dispatcher: Dispatcher, name: str = "sales-mcp-server") -> Server:
    """Create a low-level MCP server backed by ``dispatcher``."""
    server: Server = Server(name)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [types.Tool(**tool) for tool in dispatcher.list_tools()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        response = await dispatcher.call_tool(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=block.text) for block in response.content],
            isError=response.is_error,
        )

    @server.list_resources()
    async def list_resources() -> List[types.Resource]:
        return [types.Resource(**resource) for resource in dispatcher.list_resources()]

    @server.read_resource()
    async def read_resource(uri: Any) -> List[ReadResourceContents]:
        response = await dispatcher.read_resource(str(uri))
        if response.is_error:
            code = types.INVALID_PARAMS if response.error_kind == "not_found" else types.INTERNAL_ERROR
            message = response.error or "Resource read failed"
            raise McpError(types.ErrorData(code=code, message=message))
        return [
            ReadResourceContents(content=block.text, mime_type=block.mime_type)
            for block in response.contents
        ]

    return server


async def _run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


# Transport functions
def run(config: Optional[ServerConfig] = None) -> None:
    """Run MCP server over stdio."""
    config = config or ServerConfig()
    logger.info("Starting MCP server with data file: %s", config.data_file)
    if not config.data_file.exists():
        # not fatal: every call reloads the file and reports a load error
        logger.warning("Sales dataset does not exist yet: %s", config.data_file)

    server = create_server(create_dispatcher(config), config.server_name)
    asyncio.run(_run_stdio(server))


def create_http_app(server: Server) -> Any:
    """Wrap ``server`` in a Starlette app serving streamable HTTP at /mcp."""
    from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
    from starlette.applications import Starlette
    from starlette.routing import Mount

    session_manager = StreamableHTTPSessionManager(app=server)

    async def handle_mcp(scope, receive, send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(app) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    return Starlette(routes=[Mount("/mcp", app=handle_mcp)], lifespan=lifespan)


async def _run_http(server: Server, host: str, port: int) -> None:
    """Start HTTP server with explicit uvicorn configuration."""
    try:
        import uvicorn
    except ImportError:
        raise RuntimeError("uvicorn is required for HTTP mode: pip install uvicorn")

    app = create_http_app(server)
    uv_config = uvicorn.Config(app, host=host, port=int(port), log_level="info")
    await uvicorn.Server(uv_config).serve()


def run_http(
    config: Optional[ServerConfig] = None, *, host: str = "127.0.0.1", port: int = 8765
) -> None:
    """Run MCP server over streamable HTTP."""
    config = config or ServerConfig()
    logger.info("Starting HTTP MCP server on %s:%d", host, port)
    logger.info("Data file: %s", config.data_file)

    server = create_server(create_dispatcher(config), config.server_name)
    asyncio.run(_run_http(server, host, port))


__all__ = ["create_dispatcher", "create_server", "create_http_app", "run", "run_http"]
