"""figma-mcp tool registry.

Every public module in this package holds tools for one slice of the Figma
API (resources, files, variables, library).  Tool classes are marked with
``@register_tool`` and keyed by their MCP tool name in ``TOOL_REGISTRY``.

``get_all_tools()`` imports the sibling modules found by ``pkgutil`` the
first time it is called, so a new module only has to exist here to be
picked up.  ``base`` holds the shared machinery and registers nothing.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING, Dict, List, Type

if TYPE_CHECKING:
    from .base import BaseTool, ToolCategory

logger = logging.getLogger(__name__)

TOOL_REGISTRY: Dict[str, Type["BaseTool"]] = {}

_NON_TOOL_MODULES = {"base"}
_discovered = False


def register_tool(cls: Type["BaseTool"]) -> Type["BaseTool"]:
    """Register *cls* under its ``name``.

    Raises:
        ValueError: *cls* has no ``name`` or another tool already uses it.
    """
    name = getattr(cls, "name", None)
    if not name:
        raise ValueError(f"{cls.__qualname__} is missing a 'name' class attribute")
    existing = TOOL_REGISTRY.get(name)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"Tool name '{name}' is used by both "
            f"{existing.__qualname__} and {cls.__qualname__}"
        )
    TOOL_REGISTRY[name] = cls
    logger.debug("Registered tool %s (%s)", name, cls.__qualname__)
    return cls


def tool_modules() -> List[str]:
    """Dotted names of the modules in this package that define tools."""
    return sorted(
        f"{__name__}.{info.name}"
        for info in pkgutil.iter_modules(__path__)
        if not info.name.startswith("_") and info.name not in _NON_TOOL_MODULES
    )


def discover_tools() -> Dict[str, Type["BaseTool"]]:
    """Import every tool module once and return the registry."""
    global _discovered
    if not _discovered:
        for module in tool_modules():
            importlib.import_module(module)
        _discovered = True
        logger.debug("Discovered %d Figma tools", len(TOOL_REGISTRY))
    return TOOL_REGISTRY


def get_all_tools() -> List[Type["BaseTool"]]:
    """All registered tool classes, in registration order."""
    return list(discover_tools().values())


def tools_in(category: "ToolCategory") -> List[Type["BaseTool"]]:
    """Registered tool classes belonging to *category*."""
    return [cls for cls in get_all_tools() if cls.category == category]


__all__ = [
    "TOOL_REGISTRY",
    "discover_tools",
    "get_all_tools",
    "register_tool",
    "tool_modules",
    "tools_in",
]
