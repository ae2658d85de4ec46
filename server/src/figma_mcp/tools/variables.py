"""Variable tools: read and mutate Figma variables and variable collections.

Tools:
    get_variables                -- variables defined in a file
    get_variable_collections     -- variable collections in a file
    create_variable              -- POST a new variable
    update_variable              -- PUT changes to a variable
    delete_variable              -- DELETE a variable
    create_variable_collection   -- POST a new collection
    update_variable_collection   -- PUT changes to a collection
    delete_variable_collection   -- DELETE a collection

Read tools decode the upstream bodies into ``FigmaVariable`` /
``FigmaVariableCollection`` so clients get a stable shape regardless of
whether Figma nests the records under ``meta`` or returns them as a map.
"""

from __future__ import annotations

from typing import Any, Dict

from figma_mcp.models import FigmaVariable, FigmaVariableCollection, decode_records
from figma_mcp.session import FigmaSession, get_session
from figma_mcp.tools import register_tool
from figma_mcp.tools.base import BaseTool, ToolCategory, ToolResult

_RESOLVED_TYPES = {"BOOLEAN", "FLOAT", "STRING", "COLOR"}


def _get_session() -> FigmaSession:
    return get_session()


def _without_none(**fields: Any) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


# ---------------------------------------------------------------------- #
# Reads
# ---------------------------------------------------------------------- #


@register_tool
class GetVariables(BaseTool):
    name = "get_variables"
    description = "List the variables defined in a Figma file."
    category = ToolCategory.VARIABLES

    async def execute(self, file_key: str) -> ToolResult:
        err = self._require_params({"file_key": file_key}, "file_key")
        if err:
            return err

        async def _fetch() -> Dict[str, Any]:
            body = await _get_session().client.get_file_variables(file_key)
            return {"variables": decode_records(body, FigmaVariable, "variables")}

        return await self._run(f"Fetched variables of {file_key}", _fetch)


@register_tool
class GetVariableCollections(BaseTool):
    name = "get_variable_collections"
    description = "List the variable collections (and their modes) in a Figma file."
    category = ToolCategory.VARIABLES

    async def execute(self, file_key: str) -> ToolResult:
        err = self._require_params({"file_key": file_key}, "file_key")
        if err:
            return err

        async def _fetch() -> Dict[str, Any]:
            body = await _get_session().client.get_variable_collections(file_key)
            return {
                "variable_collections": decode_records(
                    body,
                    FigmaVariableCollection,
                    "variableCollections",
                    "variable_collections",
                )
            }

        return await self._run(f"Fetched variable collections of {file_key}", _fetch)


# ---------------------------------------------------------------------- #
# Variable mutations
# ---------------------------------------------------------------------- #


@register_tool
class CreateVariable(BaseTool):
    name = "create_variable"
    description = (
        "Create a variable in a collection.  resolved_type is one of "
        "BOOLEAN, FLOAT, STRING, COLOR."
    )
    category = ToolCategory.VARIABLES

    async def execute(
        self,
        file_key: str,
        name: str,
        variable_collection_id: str,
        resolved_type: str,
        description: str | None = None,
    ) -> ToolResult:
        err = self._require_params(
            {
                "file_key": file_key,
                "name": name,
                "variable_collection_id": variable_collection_id,
                "resolved_type": resolved_type,
            },
            "file_key",
            "name",
            "variable_collection_id",
            "resolved_type",
        )
        if err:
            return err
        if resolved_type.upper() not in _RESOLVED_TYPES:
            return self._error(f"Unsupported resolved_type '{resolved_type}'")

        payload = _without_none(
            name=name,
            variableCollectionId=variable_collection_id,
            resolvedType=resolved_type.upper(),
            description=description,
        )
        return await self._run(
            f"Created variable {name!r} in {file_key}",
            lambda: _get_session().client.create_variable(file_key, payload),
        )


@register_tool
class UpdateVariable(BaseTool):
    name = "update_variable"
    description = (
        "Update a variable's name, description or per-mode values "
        "(values_by_mode maps mode id -> value)."
    )
    category = ToolCategory.VARIABLES

    async def execute(
        self,
        file_key: str,
        variable_id: str,
        name: str | None = None,
        description: str | None = None,
        values_by_mode: Dict[str, Any] | None = None,
    ) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "variable_id": variable_id}, "file_key", "variable_id"
        )
        if err:
            return err
        payload = _without_none(
            name=name, description=description, valuesByMode=values_by_mode
        )
        if not payload:
            return self._error(
                "At least one of 'name', 'description' or 'values_by_mode' must be provided"
            )
        return await self._run(
            f"Updated variable {variable_id}",
            lambda: _get_session().client.update_variable(file_key, variable_id, payload),
        )


@register_tool
class DeleteVariable(BaseTool):
    name = "delete_variable"
    description = "Delete a variable from a Figma file."
    category = ToolCategory.VARIABLES

    async def execute(self, file_key: str, variable_id: str) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "variable_id": variable_id}, "file_key", "variable_id"
        )
        if err:
            return err
        return await self._run(
            f"Deleted variable {variable_id}",
            lambda: _get_session().client.delete_variable(file_key, variable_id),
        )


# ---------------------------------------------------------------------- #
# Collection mutations
# ---------------------------------------------------------------------- #


@register_tool
class CreateVariableCollection(BaseTool):
    name = "create_variable_collection"
    description = (
        "Create a variable collection.  modes is an optional comma-separated "
        "list of mode names."
    )
    category = ToolCategory.VARIABLES

    async def execute(
        self, file_key: str, name: str, modes: str | None = None
    ) -> ToolResult:
        err = self._require_params({"file_key": file_key, "name": name}, "file_key", "name")
        if err:
            return err
        mode_names = [m.strip() for m in (modes or "").split(",") if m.strip()]
        payload = _without_none(
            name=name,
            modes=[{"name": m} for m in mode_names] or None,
        )
        return await self._run(
            f"Created variable collection {name!r} in {file_key}",
            lambda: _get_session().client.create_variable_collection(file_key, payload),
        )


@register_tool
class UpdateVariableCollection(BaseTool):
    name = "update_variable_collection"
    description = "Rename a variable collection."
    category = ToolCategory.VARIABLES

    async def execute(self, file_key: str, collection_id: str, name: str) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "collection_id": collection_id, "name": name},
            "file_key",
            "collection_id",
            "name",
        )
        if err:
            return err
        return await self._run(
            f"Updated variable collection {collection_id}",
            lambda: _get_session().client.update_variable_collection(
                file_key, collection_id, {"name": name}
            ),
        )


@register_tool
class DeleteVariableCollection(BaseTool):
    name = "delete_variable_collection"
    description = "Delete a variable collection (and its variables) from a Figma file."
    category = ToolCategory.VARIABLES

    async def execute(self, file_key: str, collection_id: str) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "collection_id": collection_id},
            "file_key",
            "collection_id",
        )
        if err:
            return err
        return await self._run(
            f"Deleted variable collection {collection_id}",
            lambda: _get_session().client.delete_variable_collection(
                file_key, collection_id
            ),
        )
