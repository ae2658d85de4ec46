"""Library tools: team components, published component nodes, styles, projects.

Tools:
    get_team_components  -- published components of a team library
    get_component_node   -- one node of a published component
    get_style            -- style metadata by key
    get_project_files    -- files in a project
"""

from __future__ import annotations

from typing import Any, Dict

from figma_mcp.catalog import file_descriptors
from figma_mcp.models import FigmaComponent, decode_records
from figma_mcp.session import FigmaSession, get_session
from figma_mcp.tools import register_tool
from figma_mcp.tools.base import BaseTool, ToolCategory, ToolResult


def _get_session() -> FigmaSession:
    return get_session()


@register_tool
class GetTeamComponents(BaseTool):
    name = "get_team_components"
    description = "List the published components in a team library."
    category = ToolCategory.LIBRARY

    async def execute(self, team_id: str) -> ToolResult:
        err = self._require_params({"team_id": team_id}, "team_id")
        if err:
            return err

        async def _fetch() -> Dict[str, Any]:
            body = await _get_session().client.get_team_components(team_id)
            data: Dict[str, Any] = {
                "components": decode_records(body, FigmaComponent, "components")
            }
            cursor = (body.get("meta") or {}).get("cursor") if isinstance(body, dict) else None
            if cursor:
                data["cursor"] = cursor
            return data

        return await self._run(f"Fetched components of team {team_id}", _fetch)


@register_tool
class GetComponentNode(BaseTool):
    name = "get_component_node"
    description = "Get a node of a published component by component key and node id."
    category = ToolCategory.LIBRARY

    async def execute(self, component_key: str, node_id: str) -> ToolResult:
        err = self._require_params(
            {"component_key": component_key, "node_id": node_id},
            "component_key",
            "node_id",
        )
        if err:
            return err
        return await self._run(
            f"Fetched node {node_id} of component {component_key}",
            lambda: _get_session().client.get_component_node(component_key, node_id),
        )


@register_tool
class GetStyle(BaseTool):
    name = "get_style"
    description = "Get metadata for a published style by key."
    category = ToolCategory.LIBRARY

    async def execute(self, style_key: str) -> ToolResult:
        err = self._require_params({"style_key": style_key}, "style_key")
        if err:
            return err
        return await self._run(
            f"Fetched style {style_key}",
            lambda: _get_session().client.get_style(style_key),
        )


@register_tool
class GetProjectFiles(BaseTool):
    name = "get_project_files"
    description = (
        "List the files in a Figma project as figma:///file/<key> resources."
    )
    category = ToolCategory.LIBRARY

    async def execute(self, project_id: str) -> ToolResult:
        err = self._require_params({"project_id": project_id}, "project_id")
        if err:
            return err

        async def _fetch() -> Dict[str, Any]:
            body = await _get_session().client.get_project_files(project_id)
            return {
                "name": (body or {}).get("name", ""),
                "resources": [
                    d.model_dump(mode="json") for d in file_descriptors(body)
                ],
            }

        return await self._run(f"Fetched files of project {project_id}", _fetch)
