"""MCP resources: Figma files, components and variables.

Exposes the three addressable resource kinds as URI templates:

    figma:///file/{file_key}
    figma:///component/{file_key}/{component_id}
    figma:///variable/{file_key}/{variable_id}

Each read goes through ``ResourceReader`` and returns the pretty-printed
JSON body.  Errors propagate so the MCP runtime reports them as protocol
errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from figma_mcp.models import JSON_MIME_TYPE, ResourceAddress, ResourceKind
from figma_mcp.resources import register_resource
from figma_mcp.session import FigmaSession, get_session


def _get_session() -> FigmaSession:
    return get_session()


async def _read(address: ResourceAddress) -> str:
    contents = await _get_session().reader.read(address.to_uri())
    return contents[0].text


@dataclass
class FigmaFileResource:
    """Full document JSON of a Figma file."""

    uri_template: str = "figma:///file/{file_key}"
    name: str = "figma_file"
    description: str = "Document JSON of a Figma file."
    mime_type: str = JSON_MIME_TYPE

    async def read(self, file_key: str) -> str:
        return await _read(ResourceAddress(kind=ResourceKind.FILE, file_key=file_key))


@dataclass
class FigmaComponentResource:
    """A component inside a Figma file."""

    uri_template: str = "figma:///component/{file_key}/{component_id}"
    name: str = "figma_component"
    description: str = "JSON of a component inside a Figma file."
    mime_type: str = JSON_MIME_TYPE

    async def read(self, file_key: str, component_id: str) -> str:
        return await _read(
            ResourceAddress(
                kind=ResourceKind.COMPONENT, file_key=file_key, resource_id=component_id
            )
        )


@dataclass
class FigmaVariableResource:
    """A variable inside a Figma file."""

    uri_template: str = "figma:///variable/{file_key}/{variable_id}"
    name: str = "figma_variable"
    description: str = "JSON of a variable inside a Figma file."
    mime_type: str = JSON_MIME_TYPE

    async def read(self, file_key: str, variable_id: str) -> str:
        return await _read(
            ResourceAddress(
                kind=ResourceKind.VARIABLE, file_key=file_key, resource_id=variable_id
            )
        )


# Register the resources at import time
FILE_RESOURCE = register_resource(FigmaFileResource())
COMPONENT_RESOURCE = register_resource(FigmaComponentResource())
VARIABLE_RESOURCE = register_resource(FigmaVariableResource())
