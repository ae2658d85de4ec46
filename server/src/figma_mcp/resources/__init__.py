"""figma-mcp MCP resource templates.

Each addressable Figma resource kind is published as an MCP resource
template under the ``figma:///`` scheme, e.g.
``figma:///component/{file_key}/{component_id}``.  The template
parameters become the keyword arguments of the resource's ``read``.

``RESOURCE_REGISTRY`` maps template -> resource instance.  Modules in this
package call ``register_resource`` at import time; ``get_all_resources``
imports them on first use.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Any, Dict, List, Protocol

from figma_mcp.models import URI_SCHEME

logger = logging.getLogger(__name__)

_TEMPLATE_PREFIX = f"{URI_SCHEME}:///"


class BaseResource(Protocol):
    """What ``main.create_app`` needs to publish a resource template."""

    uri_template: str
    name: str
    description: str
    mime_type: str

    async def read(self, **kwargs: Any) -> str:
        """Return the resource body for the template parameters in *kwargs*."""
        ...


RESOURCE_REGISTRY: Dict[str, BaseResource] = {}

_discovered = False


def register_resource(resource: BaseResource) -> BaseResource:
    """Publish *resource* under its URI template.

    Raises:
        ValueError: The template is outside the ``figma:///`` scheme or is
            already taken by another resource.
    """
    template = resource.uri_template
    if not template.startswith(_TEMPLATE_PREFIX):
        raise ValueError(f"Resource template must start with {_TEMPLATE_PREFIX}: {template}")
    existing = RESOURCE_REGISTRY.get(template)
    if existing is not None and existing is not resource:
        raise ValueError(
            f"Resource template '{template}' is used by both "
            f"{existing.name} and {resource.name}"
        )
    RESOURCE_REGISTRY[template] = resource
    logger.debug("Registered resource template %s (%s)", template, resource.name)
    return resource


def discover_resources() -> Dict[str, BaseResource]:
    """Import every resource module in this package once."""
    global _discovered
    if not _discovered:
        for info in pkgutil.iter_modules(__path__):
            if not info.name.startswith("_"):
                importlib.import_module(f"{__name__}.{info.name}")
        _discovered = True
    return RESOURCE_REGISTRY


def get_all_resources() -> List[BaseResource]:
    """All registered resource templates."""
    return list(discover_resources().values())


__all__ = [
    "BaseResource",
    "RESOURCE_REGISTRY",
    "discover_resources",
    "get_all_resources",
    "register_resource",
]
