"""Figma Client: async httpx wrapper around the Figma REST API.

All calls go through ``FigmaClient.request`` which attaches the access
token as an ``X-Figma-Token`` header and normalizes failures into the
figma-mcp error taxonomy:

    404                 -> ResourceNotFoundError
    403                 -> ResourceAccessDeniedError
    other non-2xx       -> UpstreamError (status + upstream error text)
    transport failures  -> ResourceTemporarilyUnavailableError

No retries are performed here; retry policy belongs to callers.

Usage:
    from figma_mcp.figma_client import FigmaClient

    client = FigmaClient(token)
    body = await client.get_file("abc123")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable
from urllib.parse import quote

import httpx

from .config import settings, token_hint
from .errors import (
    ResourceAccessDeniedError,
    ResourceNotFoundError,
    ResourceTemporarilyUnavailableError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Figma-Token"


def _seg(value: str) -> str:
    """Escape a single path segment."""
    return quote(str(value), safe="")


class FigmaClient:
    """Authenticated async client for ``https://api.figma.com/v1``.

    One ``httpx.AsyncClient`` is kept open for the lifetime of the
    instance so connections are pooled across MCP requests.  Pass a
    ``transport`` (e.g. ``httpx.MockTransport``) to stub the upstream.
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token = token
        self._base_url = base_url or settings.figma_api_url
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            headers={TOKEN_HEADER: token, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout or settings.request_timeout),
            transport=transport,
        )

    @property
    def token_hint(self) -> str:
        return token_hint(self._token)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Core request
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Issue one HTTP call and return the decoded JSON body.

        Returns ``None`` for empty (e.g. 204) responses.

        Raises:
            ResourceNotFoundError: Upstream answered 404.
            ResourceAccessDeniedError: Upstream answered 403.
            UpstreamError: Any other non-2xx answer, or a non-JSON body.
            ResourceTemporarilyUnavailableError: Network-level failure.
        """
        logger.debug("Figma API %s %s", method, path)
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.TransportError as exc:
            logger.warning(
                "Figma API unreachable (%s %s): %s", method, path, type(exc).__name__
            )
            raise ResourceTemporarilyUnavailableError(
                f"Figma API temporarily unavailable: {type(exc).__name__}"
            ) from exc

        self._raise_for_status(response, path)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                response.status_code, "Response body is not valid JSON"
            ) from exc

    def _raise_for_status(self, response: httpx.Response, path: str) -> None:
        status = response.status_code
        if response.is_success:
            return
        if status == 404:
            raise ResourceNotFoundError(f"Figma resource not found: {path}")
        if status == 403:
            logger.warning(
                "Figma API denied access to %s (token %s)", path, self.token_hint
            )
            raise ResourceAccessDeniedError(f"Access to Figma resource denied: {path}")

        detail = self._scrub(self._error_text(response))
        logger.error("Figma API error (HTTP %d) for %s: %s", status, path, detail)
        raise UpstreamError(status, detail)

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        """Pull Figma's ``err``/``message`` text out of an error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text.strip() or response.reason_phrase
        if isinstance(body, dict):
            for key in ("err", "message", "error"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return response.reason_phrase

    def _scrub(self, text: str) -> str:
        if self._token and self._token in text:
            return text.replace(self._token, self.token_hint)
        return text

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def get_me(self) -> Any:
        return await self.request("GET", "/me")

    async def list_files(self) -> Any:
        return await self.request("GET", "/files")

    async def search_files(self, query: str) -> Any:
        return await self.request("GET", "/search", params={"query": query})

    async def get_file(self, file_key: str, **params: Any) -> Any:
        params = {k: v for k, v in params.items() if v is not None}
        return await self.request("GET", f"/files/{_seg(file_key)}", params=params or None)

    async def get_file_component(self, file_key: str, component_id: str) -> Any:
        return await self.request(
            "GET", f"/files/{_seg(file_key)}/components/{_seg(component_id)}"
        )

    async def get_file_variable(self, file_key: str, variable_id: str) -> Any:
        return await self.request(
            "GET", f"/files/{_seg(file_key)}/variables/{_seg(variable_id)}"
        )

    async def get_file_versions(self, file_key: str) -> Any:
        return await self.request("GET", f"/files/{_seg(file_key)}/versions")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def get_file_comments(self, file_key: str) -> Any:
        return await self.request("GET", f"/files/{_seg(file_key)}/comments")

    async def post_file_comment(
        self,
        file_key: str,
        message: str,
        client_meta: Dict[str, Any] | None = None,
    ) -> Any:
        payload: Dict[str, Any] = {"message": message}
        if client_meta:
            payload["client_meta"] = client_meta
        return await self.request(
            "POST", f"/files/{_seg(file_key)}/comments", json=payload
        )

    # ------------------------------------------------------------------
    # Variables and variable collections
    # ------------------------------------------------------------------

    async def get_file_variables(self, file_key: str) -> Any:
        return await self.request("GET", f"/files/{_seg(file_key)}/variables")

    async def create_variable(self, file_key: str, payload: Dict[str, Any]) -> Any:
        return await self.request(
            "POST", f"/files/{_seg(file_key)}/variables", json=payload
        )

    async def update_variable(
        self, file_key: str, variable_id: str, payload: Dict[str, Any]
    ) -> Any:
        return await self.request(
            "PUT",
            f"/files/{_seg(file_key)}/variables/{_seg(variable_id)}",
            json=payload,
        )

    async def delete_variable(self, file_key: str, variable_id: str) -> Any:
        return await self.request(
            "DELETE", f"/files/{_seg(file_key)}/variables/{_seg(variable_id)}"
        )

    async def get_variable_collections(self, file_key: str) -> Any:
        return await self.request(
            "GET", f"/files/{_seg(file_key)}/variable_collections"
        )

    async def create_variable_collection(
        self, file_key: str, payload: Dict[str, Any]
    ) -> Any:
        return await self.request(
            "POST", f"/files/{_seg(file_key)}/variable_collections", json=payload
        )

    async def update_variable_collection(
        self, file_key: str, collection_id: str, payload: Dict[str, Any]
    ) -> Any:
        return await self.request(
            "PUT",
            f"/files/{_seg(file_key)}/variable_collections/{_seg(collection_id)}",
            json=payload,
        )

    async def delete_variable_collection(self, file_key: str, collection_id: str) -> Any:
        return await self.request(
            "DELETE",
            f"/files/{_seg(file_key)}/variable_collections/{_seg(collection_id)}",
        )

    # ------------------------------------------------------------------
    # Images, components, styles, projects
    # ------------------------------------------------------------------

    async def get_images(
        self,
        file_key: str,
        ids: Iterable[str],
        scale: float | None = None,
        format: str | None = None,
    ) -> Any:
        params: Dict[str, Any] = {"ids": ",".join(ids)}
        if scale is not None:
            params["scale"] = scale
        if format:
            params["format"] = format
        return await self.request("GET", f"/images/{_seg(file_key)}", params=params)

    async def get_component_node(self, component_key: str, node_id: str) -> Any:
        return await self.request(
            "GET", f"/components/{_seg(component_key)}/{_seg(node_id)}"
        )

    async def get_team_components(self, team_id: str) -> Any:
        return await self.request("GET", f"/teams/{_seg(team_id)}/components")

    async def get_style(self, style_key: str) -> Any:
        return await self.request("GET", f"/styles/{_seg(style_key)}")

    async def get_project_files(self, project_id: str) -> Any:
        return await self.request("GET", f"/projects/{_seg(project_id)}/files")
