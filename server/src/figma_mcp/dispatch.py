"""Method dispatcher for the ``resources/*`` RPC surface.

``METHODS`` maps each canonical method string to a coroutine taking the
session and the request params and returning the JSON result object:

    resources/list    {}          -> {"resources": [...]}
    resources/read    {uri}       -> {"contents": [...]}
    resources/search  {query}     -> {"resources": [...]}
    resources/watch   {uri}       -> {"uri", "status"}
    resources/check   {uri}       -> {"uri", "changed", "timestamp"}

``call_method`` raises figma-mcp errors; ``dispatch`` wraps a whole
JSON-RPC 2.0 request and always returns a response envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from .errors import (
    INTERNAL_ERROR,
    FigmaMCPError,
    InvalidParamsError,
    MethodNotFoundError,
)
from .session import FigmaSession

logger = logging.getLogger(__name__)

Params = Dict[str, Any]
MethodHandler = Callable[[FigmaSession, Params], Awaitable[Dict[str, Any]]]


def _require_str(params: Params, name: str, allow_empty: bool = False) -> str:
    value = params.get(name)
    if not isinstance(value, str) or (not value and not allow_empty):
        raise InvalidParamsError(f"Missing required parameter: {name}")
    return value


async def _list_resources(session: FigmaSession, params: Params) -> Dict[str, Any]:
    resources = await session.catalog.list()
    return {"resources": [r.model_dump(mode="json") for r in resources]}


async def _read_resource(session: FigmaSession, params: Params) -> Dict[str, Any]:
    contents = await session.reader.read(_require_str(params, "uri"))
    return {"contents": [c.model_dump(mode="json", by_alias=True) for c in contents]}


async def _search_resources(session: FigmaSession, params: Params) -> Dict[str, Any]:
    query = _require_str(params, "query", allow_empty=True)
    resources = await session.catalog.search(query)
    return {"resources": [r.model_dump(mode="json") for r in resources]}


async def _watch_resource(session: FigmaSession, params: Params) -> Dict[str, Any]:
    status = await session.watches.establish(_require_str(params, "uri"))
    return status.model_dump(mode="json")


async def _check_resource(session: FigmaSession, params: Params) -> Dict[str, Any]:
    result = await session.watches.check(_require_str(params, "uri"))
    return result.model_dump(mode="json")


METHODS: Dict[str, MethodHandler] = {
    "resources/list": _list_resources,
    "resources/read": _read_resource,
    "resources/search": _search_resources,
    "resources/watch": _watch_resource,
    "resources/check": _check_resource,
}


async def call_method(
    session: FigmaSession, method: str, params: Params | None = None
) -> Dict[str, Any]:
    """Run *method* and return its result object.

    Raises:
        MethodNotFoundError: *method* is not one of ``METHODS``.
        FigmaMCPError: Whatever the handler raises.
    """
    handler = METHODS.get(method)
    if handler is None:
        raise MethodNotFoundError(method)
    return await handler(session, params or {})


def error_response(request_id: Any, error: FigmaMCPError) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {
            "code": error.code,
            "message": error.message,
            "data": {"kind": error.kind, "retryable": error.retryable},
        },
    }


async def dispatch(session: FigmaSession, request: Any) -> Dict[str, Any]:
    """Handle one JSON-RPC 2.0 request object and build the response."""
    if not isinstance(request, dict):
        return error_response(None, InvalidParamsError("Request must be a JSON object"))

    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if request.get("jsonrpc") != "2.0" or not isinstance(method, str):
        return error_response(request_id, InvalidParamsError("Invalid JSON-RPC request"))
    if not isinstance(params, dict):
        return error_response(request_id, InvalidParamsError("params must be an object"))

    try:
        result = await call_method(session, method, params)
    except FigmaMCPError as exc:
        logger.info("%s failed: [%s] %s", method, exc.kind, exc.message)
        return error_response(request_id, exc)
    except Exception:
        logger.exception("Unhandled error in %s", method)
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {"code": INTERNAL_ERROR, "message": "Internal error"},
        }

    return {"jsonrpc": "2.0", "id": request_id, "result": result}
