"""Abstract base class and result model for figma-mcp tools.

All tools inherit from BaseTool and implement the execute() method with
explicit typed parameters.  Return types are Pydantic models so FastMCP
can auto-generate JSON schemas for clients.
"""

from __future__ import annotations

import abc
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict

from pydantic import BaseModel, Field

from figma_mcp.errors import INVALID_PARAMS, FigmaMCPError


# ---------------------------------------------------------------------------
# Tool categories
# ---------------------------------------------------------------------------

class ToolCategory(str, Enum):
    """Categories for organising figma-mcp tools."""

    RESOURCES = "resources"
    FILES = "files"
    VARIABLES = "variables"
    LIBRARY = "library"


# ---------------------------------------------------------------------------
# Common return-type model
# ---------------------------------------------------------------------------

class ToolResult(BaseModel):
    """Generic wrapper returned by every tool.

    On failure ``error`` holds ``{code, kind, message}`` from the raised
    ``FigmaMCPError`` so callers can branch on the error kind.
    """

    success: bool
    message: str
    data: dict | list | None = None
    error: Dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: float | None = None


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class BaseTool(abc.ABC):
    """Abstract base for all figma-mcp tools.

    Subclasses must set class-level ``name``, ``description``, and
    ``category`` attributes, and implement ``execute()`` with explicit
    typed parameters (not ``**kwargs``).

    Example::

        class GetFileVersions(BaseTool):
            name = "get_file_versions"
            description = "List the version history of a Figma file"
            category = ToolCategory.FILES

            async def execute(self, file_key: str) -> ToolResult:
                ...
    """

    name: str
    description: str
    category: ToolCategory

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"figma_mcp.tools.{self.name}")

    @abc.abstractmethod
    async def execute(self) -> ToolResult:
        """Execute the tool and return a typed result.

        Implementations must never raise -- return an error ToolResult
        instead so the MCP layer always gets a clean response.
        """
        ...

    # ------------------------------------------------------------------ #
    # Helpers available to every tool
    # ------------------------------------------------------------------ #

    async def _run(
        self, message: str, call: Callable[[], Awaitable[Any]]
    ) -> ToolResult:
        """Await ``call()`` and wrap its outcome in a ToolResult."""
        start = time.monotonic()
        try:
            data = await call()
        except FigmaMCPError as exc:
            result = self._failure(exc)
        except Exception as exc:
            self.logger.exception("%s failed", self.name)
            result = self._error(f"{self.name} failed: {exc}")
        else:
            result = self._ok(message, data)
        result.duration_ms = (time.monotonic() - start) * 1000
        return result

    @staticmethod
    def _require_params(params: dict, *names: str) -> ToolResult | None:
        """Return an error ToolResult if any of *names* are empty in params."""
        missing = [n for n in names if not params.get(n)]
        if missing:
            return ToolResult(
                success=False,
                message=f"Missing required parameter(s): {', '.join(missing)}",
                error={"code": INVALID_PARAMS, "kind": "invalid_params"},
            )
        return None

    def _failure(self, exc: FigmaMCPError) -> ToolResult:
        self.logger.info("%s failed: [%s] %s", self.name, exc.kind, exc.message)
        return ToolResult(success=False, message=exc.message, error=exc.to_dict())

    @staticmethod
    def _error(message: str) -> ToolResult:
        """Convenience wrapper for error responses."""
        return ToolResult(success=False, message=message)

    @staticmethod
    def _ok(message: str, data: dict | list | None = None) -> ToolResult:
        """Convenience wrapper for success responses."""
        return ToolResult(success=True, message=message, data=data)
