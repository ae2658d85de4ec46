"""Resource reader: fetch a ``figma:///`` URI and serialize it as JSON text."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from . import uri as uri_codec
from .errors import MissingResourceIdError, UnsupportedResourceTypeError
from .figma_client import FigmaClient
from .models import JSON_MIME_TYPE, ContentPayload, ResourceAddress, ResourceKind

logger = logging.getLogger(__name__)


def to_json_text(body: Any) -> str:
    """Pretty-print an upstream body the way it is returned to callers."""
    return json.dumps(body, indent=2, ensure_ascii=False)


class ResourceReader:
    """Dispatch a resource URI to the matching Figma endpoint."""

    def __init__(self, client: FigmaClient):
        self._client = client

    async def read(self, uri: str) -> List[ContentPayload]:
        """Read *uri* and return its content as a single JSON payload.

        Raises:
            InvalidUriError: *uri* is malformed.
            MissingResourceIdError: component/variable URI without an id.
            UnsupportedResourceTypeError: unknown resource kind.
        """
        address = uri_codec.parse(uri)
        logger.debug(
            "Reading Figma resource: kind=%s file=%s id=%s",
            address.kind.value,
            address.file_key,
            address.resource_id,
        )
        body = await self.fetch(address)
        return [ContentPayload(uri=uri, mime_type=JSON_MIME_TYPE, text=to_json_text(body))]

    async def fetch(self, address: ResourceAddress) -> Any:
        if address.kind is ResourceKind.FILE:
            return await self._client.get_file(address.file_key)

        if address.kind is ResourceKind.COMPONENT:
            if not address.resource_id:
                raise MissingResourceIdError("component")
            return await self._client.get_file_component(
                address.file_key, address.resource_id
            )

        if address.kind is ResourceKind.VARIABLE:
            if not address.resource_id:
                raise MissingResourceIdError("variable")
            return await self._client.get_file_variable(
                address.file_key, address.resource_id
            )

        raise UnsupportedResourceTypeError(getattr(address.kind, "value", str(address.kind)))
