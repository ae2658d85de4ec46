"""Resource tools: the canonical ``resources/*`` surface as MCP tools.

Tools:
    list_resources    -- resources/list
    read_resource     -- resources/read
    search_resources  -- resources/search
    watch_resource    -- resources/watch
    check_resource    -- resources/check

Each tool forwards to ``figma_mcp.dispatch.call_method`` so the tool and
JSON-RPC paths share one implementation.
"""

from __future__ import annotations

from typing import Any, Dict

from figma_mcp.dispatch import call_method
from figma_mcp.session import FigmaSession, get_session
from figma_mcp.tools import register_tool
from figma_mcp.tools.base import BaseTool, ToolCategory, ToolResult


def _get_session() -> FigmaSession:
    return get_session()


class _ResourceMethodTool(BaseTool):
    """Shared plumbing: run ``rpc_method`` with the given params."""

    category = ToolCategory.RESOURCES
    rpc_method: str

    async def _call(self, message: str, params: Dict[str, Any]) -> ToolResult:
        return await self._run(
            message, lambda: call_method(_get_session(), self.rpc_method, params)
        )


@register_tool
class ListResources(_ResourceMethodTool):
    name = "list_resources"
    rpc_method = "resources/list"
    description = (
        "List Figma files available to the configured token as "
        "figma:///file/<key> resources with lastModified, thumbnailUrl "
        "and version metadata."
    )

    async def execute(self) -> ToolResult:
        return await self._call("Listed Figma resources", {})


@register_tool
class ReadResource(_ResourceMethodTool):
    name = "read_resource"
    rpc_method = "resources/read"
    description = (
        "Read a Figma resource by URI (figma:///file/<key>, "
        "figma:///component/<key>/<id> or figma:///variable/<key>/<id>) "
        "and return its JSON content."
    )

    async def execute(self, uri: str) -> ToolResult:
        return await self._call(f"Read {uri}", {"uri": uri})


@register_tool
class SearchResources(_ResourceMethodTool):
    name = "search_resources"
    rpc_method = "resources/search"
    description = "Search Figma files by name and return matching resources."

    async def execute(self, query: str = "") -> ToolResult:
        return await self._call(f"Searched Figma resources for {query!r}", {"query": query})


@register_tool
class WatchResource(_ResourceMethodTool):
    name = "watch_resource"
    rpc_method = "resources/watch"
    description = (
        "Start watching a Figma resource URI.  Records the file's current "
        "lastModified marker for later check_resource calls."
    )

    async def execute(self, uri: str) -> ToolResult:
        return await self._call(f"Watching {uri}", {"uri": uri})


@register_tool
class CheckResource(_ResourceMethodTool):
    name = "check_resource"
    rpc_method = "resources/check"
    description = (
        "Check a watched Figma resource for changes since the last "
        "watch/check.  Fails if the URI is not being watched."
    )

    async def execute(self, uri: str) -> ToolResult:
        return await self._call(f"Checked {uri}", {"uri": uri})
