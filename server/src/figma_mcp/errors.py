"""Error taxonomy for figma-mcp.

Every domain failure is a ``FigmaMCPError`` subclass carrying a JSON-RPC
error ``code`` and a stable ``kind`` string.  Core components raise these;
the tool layer and the method dispatcher turn them into typed responses.
"""

from __future__ import annotations

from typing import Any, Dict

# JSON-RPC 2.0 reserved codes
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Upstream resource codes
RESOURCE_NOT_FOUND = 100
RESOURCE_ACCESS_DENIED = 101
RESOURCE_TEMPORARILY_UNAVAILABLE = 102


class FigmaMCPError(Exception):
    """Base class for all errors surfaced to MCP callers."""

    code: int = INTERNAL_ERROR
    kind: str = "internal_error"
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "kind": self.kind, "message": self.message}


# ---------------------------------------------------------------------------
# Caller errors (rejected before or instead of an upstream call)
# ---------------------------------------------------------------------------

class InvalidUriError(FigmaMCPError):
    code = INVALID_PARAMS
    kind = "invalid_uri"

    def __init__(self, uri: str) -> None:
        super().__init__(f"Invalid Figma URI format: {uri}")
        self.uri = uri


class MissingResourceIdError(FigmaMCPError):
    """A component or variable URI without its trailing id segment."""

    code = INVALID_PARAMS
    kind = "missing_resource_id"

    def __init__(self, resource_kind: str) -> None:
        super().__init__(f"{resource_kind.capitalize()} ID required")
        self.resource_kind = resource_kind


class UnsupportedResourceTypeError(FigmaMCPError):
    code = INVALID_PARAMS
    kind = "unsupported_resource_type"

    def __init__(self, resource_kind: str) -> None:
        super().__init__(f"Unsupported resource type: {resource_kind}")
        self.resource_kind = resource_kind


class ResourceNotWatchedError(FigmaMCPError):
    code = INVALID_PARAMS
    kind = "resource_not_watched"

    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource not being watched: {uri}")
        self.uri = uri


class InvalidParamsError(FigmaMCPError):
    code = INVALID_PARAMS
    kind = "invalid_params"


class MethodNotFoundError(FigmaMCPError):
    code = METHOD_NOT_FOUND
    kind = "method_not_found"

    def __init__(self, method: str) -> None:
        super().__init__(f"Method not found: {method}")
        self.method = method


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------

class ResourceNotFoundError(FigmaMCPError):
    code = RESOURCE_NOT_FOUND
    kind = "resource_not_found"


class ResourceAccessDeniedError(FigmaMCPError):
    code = RESOURCE_ACCESS_DENIED
    kind = "resource_access_denied"


class ResourceTemporarilyUnavailableError(FigmaMCPError):
    """Network-level failure talking to Figma.  Safe for callers to retry."""

    code = RESOURCE_TEMPORARILY_UNAVAILABLE
    kind = "resource_temporarily_unavailable"
    retryable = True


class UpstreamError(FigmaMCPError):
    """Any other non-2xx response from the Figma API."""

    kind = "upstream_error"

    def __init__(self, status: int, detail: str) -> None:
        super().__init__(f"Figma API error ({status}): {detail}")
        self.status = status
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        return data


class InvalidFigmaTokenError(FigmaMCPError):
    kind = "invalid_figma_token"

    def __init__(self) -> None:
        super().__init__("Invalid or missing Figma access token")


__all__ = [
    "FigmaMCPError",
    "InvalidUriError",
    "MissingResourceIdError",
    "UnsupportedResourceTypeError",
    "ResourceNotWatchedError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "ResourceNotFoundError",
    "ResourceAccessDeniedError",
    "ResourceTemporarilyUnavailableError",
    "UpstreamError",
    "InvalidFigmaTokenError",
]
