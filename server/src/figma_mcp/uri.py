"""Codec for ``figma:///`` resource URIs.

Grammar::

    figma:///(file|component|variable)/<key>[/<id>]

where ``<key>`` and ``<id>`` are one or more ASCII word characters or
hyphens.  Parsing is a pure function; anything that does not match the
whole grammar raises ``InvalidUriError`` and never yields an address.
"""

from __future__ import annotations

import re

from .errors import InvalidUriError
from .models import URI_SCHEME, ResourceAddress, ResourceKind

_URI_RE = re.compile(
    rf"{URI_SCHEME}:///(file|component|variable)/([\w-]+)(?:/([\w-]+))?",
    re.ASCII,
)


def parse(uri: str) -> ResourceAddress:
    """Decode *uri* into a ``ResourceAddress``.

    Raises:
        InvalidUriError: If *uri* does not match the grammar.
    """
    match = _URI_RE.fullmatch(uri) if isinstance(uri, str) else None
    if match is None:
        raise InvalidUriError(str(uri))
    kind, file_key, resource_id = match.groups()
    return ResourceAddress(
        kind=ResourceKind(kind), file_key=file_key, resource_id=resource_id
    )


def encode(address: ResourceAddress) -> str:
    """Inverse of ``parse``."""
    return address.to_uri()


def file_uri(file_key: str) -> str:
    return encode(ResourceAddress(kind=ResourceKind.FILE, file_key=file_key))


def is_valid(uri: str) -> bool:
    return isinstance(uri, str) and _URI_RE.fullmatch(uri) is not None
