"""Watch registry: poll-on-demand change detection for Figma resources.

Each watched URI maps to the ``lastModified`` marker last seen upstream.
``establish`` records the current marker; ``check`` fetches again and
reports whether it moved.  There is no background polling and no TTL:
every call makes exactly one upstream round trip.

Calls for the same URI are serialized with a per-URI ``asyncio.Lock`` held
across fetch, compare and update, so concurrent checks cannot lose an
update.  Calls for different URIs run concurrently.

Usage:
    registry = WatchRegistry(client)
    await registry.establish("figma:///file/abc123")
    result = await registry.check("figma:///file/abc123")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from . import uri as uri_codec
from .errors import ResourceNotWatchedError
from .figma_client import FigmaClient
from .models import WatchCheck, WatchEntry, WatchStatus

logger = logging.getLogger(__name__)


class WatchRegistry:
    """In-memory map of watched URI -> last observed version marker.

    Entries live for the lifetime of the registry; there is no unwatch.
    """

    def __init__(self, client: FigmaClient):
        self._client = client
        self._entries: Dict[str, WatchEntry] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def establish(self, uri: str) -> WatchStatus:
        """Start (or restart) watching *uri*.

        Re-establishing an already watched URI overwrites its marker.

        Raises:
            InvalidUriError: *uri* is malformed.
        """
        address = uri_codec.parse(uri)
        lock = self._lock_for(uri)
        try:
            async with lock:
                marker = await self._fetch_marker(address.file_key)
                self._entries[uri] = WatchEntry(uri=uri, last_modified=marker)
        finally:
            # Only watched URIs keep a lock.
            if (
                uri not in self._entries
                and not lock.locked()
                and self._locks.get(uri) is lock
            ):
                del self._locks[uri]
        logger.info("Watching %s (lastModified=%s)", uri, marker)
        return WatchStatus(uri=uri)

    async def check(self, uri: str) -> WatchCheck:
        """Fetch *uri* once and report whether its marker changed.

        Raises:
            InvalidUriError: *uri* is malformed.
            ResourceNotWatchedError: ``establish`` was never called for *uri*.
        """
        address = uri_codec.parse(uri)
        if uri not in self._entries:
            raise ResourceNotWatchedError(uri)

        async with self._lock_for(uri):
            entry = self._entries[uri]
            marker = await self._fetch_marker(address.file_key)
            changed = marker != entry.last_modified
            if changed:
                logger.info(
                    "Change detected for %s: %s -> %s", uri, entry.last_modified, marker
                )
                entry.last_modified = marker

        return WatchCheck(uri=uri, changed=changed, timestamp=marker)

    def entries(self) -> List[WatchEntry]:
        """Snapshot of the current watch entries."""
        return [entry.model_copy() for entry in self._entries.values()]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lock_for(self, uri: str) -> asyncio.Lock:
        return self._locks.setdefault(uri, asyncio.Lock())

    async def _fetch_marker(self, file_key: str) -> str | None:
        body = await self._client.get_file(file_key)
        marker = body.get("lastModified") if isinstance(body, dict) else None
        return None if marker is None else str(marker)
