"""Shared per-process state for figma-mcp handlers.

A ``FigmaSession`` owns one ``FigmaClient`` and the components built on
it.  MCP tools, resource templates and the REST dispatcher all reach it
through ``get_session()`` so they share one connection pool and one watch
registry.
"""

from __future__ import annotations

import logging

import httpx

from .catalog import ResourceCatalog
from .config import settings, token_hint
from .figma_client import FigmaClient
from .reader import ResourceReader
from .watch_registry import WatchRegistry

logger = logging.getLogger(__name__)


class FigmaSession:
    """Bundle of the client, catalog, reader and watch registry."""

    def __init__(self, client: FigmaClient):
        self.client = client
        self.catalog = ResourceCatalog(client)
        self.reader = ResourceReader(client)
        self.watches = WatchRegistry(client)

    @classmethod
    def from_settings(
        cls, transport: httpx.AsyncBaseTransport | None = None
    ) -> "FigmaSession":
        """Build a session from the global settings.

        Raises:
            InvalidFigmaTokenError: No access token is configured.
        """
        token = settings.require_token()
        logger.info(
            "Initializing Figma session with token starting with: %s",
            token_hint(token),
        )
        return cls(FigmaClient(token, transport=transport))

    async def aclose(self) -> None:
        await self.client.aclose()


_session: FigmaSession | None = None


def get_session() -> FigmaSession:
    """Return the shared FigmaSession singleton."""
    global _session
    if _session is None:
        _session = FigmaSession.from_settings()
    return _session


def set_session(session: FigmaSession | None) -> None:
    """Replace the shared session (used at startup and by tests)."""
    global _session
    _session = session


async def close_session() -> None:
    """Close and forget the shared session, if one was created."""
    global _session
    session, _session = _session, None
    if session is not None:
        logger.info("Closing Figma session")
        await session.aclose()
