"""Resource catalog: map Figma file listings to resource descriptors."""

from __future__ import annotations

import logging
from typing import Any, List

from .figma_client import FigmaClient
from .models import FigmaFile, ResourceDescriptor, ResourceKind, validate_records
from .uri import file_uri

logger = logging.getLogger(__name__)


def file_descriptor(file: FigmaFile) -> ResourceDescriptor:
    """Build the descriptor for one upstream file entry."""
    return ResourceDescriptor(
        uri=file_uri(file.key or ""),
        kind=ResourceKind.FILE,
        name=file.name,
        metadata={
            "lastModified": file.last_modified,
            "thumbnailUrl": file.thumbnail_url,
            "version": file.version,
        },
    )


def file_descriptors(body: Any) -> List[ResourceDescriptor]:
    """Descriptors for the ``files`` of a listing body.

    Entries that fail validation or carry no key are skipped.
    """
    resources = []
    for file in validate_records(body, FigmaFile, "files"):
        if not file.key:
            logger.debug("Skipping listing entry without a key: %r", file.name)
            continue
        resources.append(file_descriptor(file))
    return resources


class ResourceCatalog:
    """``list`` and ``search`` over the Figma file collection."""

    def __init__(self, client: FigmaClient):
        self._client = client

    async def list(self) -> List[ResourceDescriptor]:
        logger.debug("Listing Figma resources")
        body = await self._client.list_files()
        return file_descriptors(body)

    async def search(self, query: str) -> List[ResourceDescriptor]:
        """Search files by *query*.  An empty query is sent as-is."""
        logger.debug("Searching Figma resources: %r", query)
        body = await self._client.search_files(query)
        return file_descriptors(body)
