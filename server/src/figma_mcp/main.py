"""FastMCP server entry point for figma-mcp.

Creates and runs the MCP server with:
- Figma resource tools (list/read/search/watch/check) and the wider
  Figma API surface exposed as MCP tools
- MCP resource templates for figma:/// file, component and variable URIs
- In HTTP mode: an SSE transport, a JSON-RPC ``/rpc`` endpoint for the
  ``resources/*`` methods, a ``/health`` route, and CORS

The transport is chosen from configuration: when ``PORT`` is set the
server listens on HTTP + SSE, otherwise it speaks MCP over stdio.

Usage:
    python -m figma_mcp.main
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncIterator

from fastmcp import FastMCP

from . import __version__
from .config import settings
from .dispatch import dispatch
from .errors import FigmaMCPError
from .resources import get_all_resources
from .session import FigmaSession, close_session, get_session, set_session
from .tools import TOOL_REGISTRY, get_all_tools

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lightweight instrument_tool (no external telemetry dependency)
# ---------------------------------------------------------------------------

def instrument_tool(tool_name: str):
    """Decorator that wraps a tool or resource handler for logging.

    Uses ``@wraps`` so that ``inspect.signature()`` follows ``__wrapped__``
    and FastMCP sees the real typed parameter signature.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            logger.debug("Handler invoked: %s", tool_name)
            try:
                return await func(*args, **kwargs)
            except FigmaMCPError as exc:
                logger.info("%s failed: [%s] %s", tool_name, exc.kind, exc.message)
                raise
            except Exception:
                logger.exception("%s failed", tool_name)
                raise

        return wrapper

    return decorator


def configure_logging() -> None:
    # basicConfig writes to stderr, which keeps the stdio transport clean.
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app() -> FastMCP:
    """Create and configure the FastMCP application.

    Returns:
        Configured FastMCP instance.
    """
    configure_logging()
    logger.info("Starting figma-mcp server v%s", __version__)

    mcp = FastMCP(
        name="figma-mcp",
        instructions=(
            "This MCP server exposes the Figma REST API.\n\n"
            "Resources are addressed as figma:///file/<key>, "
            "figma:///component/<key>/<id> and figma:///variable/<key>/<id>.\n\n"
            "Available capabilities:\n"
            "- List, search and read resources (list_resources, search_resources, read_resource)\n"
            "- Poll for changes (watch_resource, then check_resource)\n"
            "- File documents, versions and rendered images (get_file, get_file_versions, get_images)\n"
            "- Comments (get_file_comments, post_file_comment)\n"
            "- Variables and collections (get_variables, get_variable_collections, "
            "create/update/delete_variable, create/update/delete_variable_collection)\n"
            "- Team libraries, styles and projects (get_team_components, "
            "get_component_node, get_style, get_project_files)\n"
        ),
    )

    # ------------------------------------------------------------------
    # Register MCP tools
    # ------------------------------------------------------------------
    logger.info("Registering tools...")
    for tool_cls in get_all_tools():
        tool = tool_cls()
        instrumented = instrument_tool(tool.name)(tool.execute)
        mcp.tool(name=tool.name, description=tool.description)(instrumented)
        logger.info("  Registered tool: %s", tool.name)

    # ------------------------------------------------------------------
    # Register resource templates
    # ------------------------------------------------------------------
    logger.info("Registering resources...")
    for resource in get_all_resources():
        instrumented = instrument_tool(f"resource:{resource.name}")(resource.read)
        mcp.resource(
            resource.uri_template,
            name=resource.name,
            description=resource.description,
            mime_type=resource.mime_type,
        )(instrumented)
        logger.info("  Registered resource: %s", resource.uri_template)

    # ------------------------------------------------------------------
    # Health-check tool (always present)
    # ------------------------------------------------------------------
    @mcp.tool(name="health", description="Health check for the figma-mcp server")
    async def health_check() -> dict:
        return {
            "status": "ok",
            "version": __version__,
            "tools": len(TOOL_REGISTRY),
            "watched_resources": len(get_session().watches),
        }

    logger.info("MCP server configured successfully")
    return mcp


# ---------------------------------------------------------------------------
# HTTP mode (SSE transport + REST routes)
# ---------------------------------------------------------------------------

def create_http_app(mcp: FastMCP):
    """Wrap *mcp* in a Starlette app with SSE, ``/rpc``, ``/health`` and CORS."""
    from starlette.applications import Starlette
    from starlette.middleware.cors import CORSMiddleware
    from starlette.requests import Request
    from starlette.responses import JSONResponse
    from starlette.routing import Route

    app = mcp.http_app(path=settings.sse_path, transport="sse")
    mcp_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(app_: Starlette) -> AsyncIterator[None]:
        try:
            async with mcp_lifespan(app_):
                yield
        finally:
            await close_session()

    app.router.lifespan_context = lifespan

    async def rest_health(request: Request) -> JSONResponse:
        """GET /health"""
        return JSONResponse({"status": "healthy", "version": __version__})

    async def rest_rpc(request: Request) -> JSONResponse:
        """POST /rpc -- JSON-RPC 2.0 access to the resources/* methods."""
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(
                {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": -32700, "message": "Parse error"},
                },
                status_code=400,
            )
        return JSONResponse(await dispatch(get_session(), body))

    app.routes.extend(
        [
            Route("/health", rest_health, methods=["GET"]),
            Route("/rpc", rest_rpc, methods=["POST"]),
        ]
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Figma-Token"],
    )
    return app


async def run_stdio(mcp: FastMCP) -> None:
    """Serve MCP over stdio, closing the Figma session on exit."""
    try:
        await mcp.run_async(transport="stdio")
    finally:
        await close_session()


def main() -> None:
    """Entry point: validate the token, build the app, run stdio or HTTP."""
    configure_logging()
    logger.info(
        "Environment: FIGMA_ACCESS_TOKEN=%s PORT=%s HOST=%s",
        "Present" if settings.figma_access_token else "Missing",
        settings.port,
        settings.host,
    )

    try:
        set_session(FigmaSession.from_settings())
    except FigmaMCPError as exc:
        logger.error("Fatal error starting server: %s", exc.message)
        sys.exit(1)

    mcp = create_app()

    if settings.port is None:
        logger.info("Starting in stdio mode...")
        asyncio.run(run_stdio(mcp))
        return

    import uvicorn

    app = create_http_app(mcp)
    logger.info("HTTP server listening on http://%s:%d", settings.host, settings.port)
    logger.info(
        "SSE endpoint available at http://%s:%d%s",
        settings.host,
        settings.port,
        settings.sse_path,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
