"""Pydantic models for figma-mcp.

Two groups live here:

* The MCP-facing records (``ResourceDescriptor``, ``ResourceAddress``,
  ``ContentPayload``, ``WatchEntry`` and the watch results) returned by the
  catalog, reader and watch registry.
* The upstream response shapes for the Figma endpoints we actually consume.
  Only the fields we read are declared; everything else Figma sends is kept
  as opaque extra data so nothing is lost when a body is passed through.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Type, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

URI_SCHEME = "figma"
JSON_MIME_TYPE = "application/json"

M = TypeVar("M", bound=BaseModel)


class ResourceKind(str, Enum):
    """Addressable Figma resource types."""

    FILE = "file"
    COMPONENT = "component"
    VARIABLE = "variable"


# ---------------------------------------------------------------------------
# MCP-facing records
# ---------------------------------------------------------------------------

class ResourceAddress(BaseModel):
    """Decoded form of a ``figma:///kind/key[/id]`` URI."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    file_key: str
    resource_id: str | None = None

    def to_uri(self) -> str:
        uri = f"{URI_SCHEME}:///{self.kind.value}/{self.file_key}"
        if self.resource_id:
            uri += f"/{self.resource_id}"
        return uri


class ResourceDescriptor(BaseModel):
    """A listable resource, built from upstream listing data."""

    model_config = ConfigDict(frozen=True)

    uri: str
    kind: ResourceKind
    name: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ContentPayload(BaseModel):
    """Serialized content of a single resource read."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uri: str
    mime_type: str = Field(JSON_MIME_TYPE, alias="mimeType")
    text: str


class WatchEntry(BaseModel):
    """Last observed version marker for a watched URI."""

    uri: str
    last_modified: str | None = None


class WatchStatus(BaseModel):
    uri: str
    status: str = "watching"


class WatchCheck(BaseModel):
    uri: str
    changed: bool
    timestamp: str | None = Field(
        None, description="Upstream lastModified marker observed by this check"
    )


# ---------------------------------------------------------------------------
# Upstream response shapes
# ---------------------------------------------------------------------------

class _Upstream(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FigmaFile(_Upstream):
    key: str | None = None
    name: str = ""
    last_modified: str | None = Field(None, alias="lastModified")
    thumbnail_url: str | None = Field(None, alias="thumbnailUrl")
    version: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("key", "last_modified", "version", mode="before")
    @classmethod
    def _number_to_str(cls, value: Any) -> Any:
        # Accept numeric keys and versions.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class FigmaComponent(_Upstream):
    key: str | None = None
    name: str = ""
    description: str = ""
    file_key: str | None = Field(
        None, validation_alias=AliasChoices("file_key", "fileKey")
    )
    node_id: str | None = Field(
        None, validation_alias=AliasChoices("node_id", "nodeId")
    )


class FigmaVariable(_Upstream):
    id: str
    name: str = ""
    description: str = ""
    resolved_type: str | None = Field(None, alias="resolvedType")
    variable_collection_id: str | None = Field(None, alias="variableCollectionId")
    values_by_mode: Dict[str, Any] = Field(default_factory=dict, alias="valuesByMode")


class FigmaVariableCollection(_Upstream):
    id: str
    name: str = ""
    modes: List[Dict[str, Any]] = Field(default_factory=list)
    default_mode_id: str | None = Field(None, alias="defaultModeId")
    variable_ids: List[str] = Field(default_factory=list, alias="variableIds")


# ---------------------------------------------------------------------------
# Record decoding
# ---------------------------------------------------------------------------

def _records(body: Any, *keys: str) -> List[Dict[str, Any]]:
    """Pull a list of records out of *body* under the first matching key.

    Figma nests collections under ``meta`` on some endpoints and returns
    them as ``{id: record}`` maps on others; both are accepted.
    """
    if not isinstance(body, dict):
        return []
    container = body.get("meta") if isinstance(body.get("meta"), dict) else body
    for key in keys:
        raw = container.get(key)
        if isinstance(raw, dict):
            return [r for r in raw.values() if isinstance(r, dict)]
        if isinstance(raw, list):
            return [r for r in raw if isinstance(r, dict)]
    return []


def validate_records(body: Any, model: Type[M], *keys: str) -> List[M]:
    """Validate each record with *model*, skipping ones that do not fit."""
    records = []
    for raw in _records(body, *keys):
        try:
            records.append(model.model_validate(raw))
        except ValidationError:
            logger.debug("Skipping malformed %s record: %r", model.__name__, raw)
    return records


def decode_records(body: Any, model: Type[BaseModel], *keys: str) -> List[Dict[str, Any]]:
    """Like ``validate_records`` but dumped back to wire-shaped dicts."""
    return [
        record.model_dump(mode="json", by_alias=True)
        for record in validate_records(body, model, *keys)
    ]
