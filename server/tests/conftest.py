"""Pytest configuration and fixtures for figma-mcp tests.

This module provides fixtures for:
- A stub Figma API served through ``httpx.MockTransport``
- A FigmaClient / FigmaSession wired to the stub
- Patching every ``_get_session()`` so tools and resources use the stub
"""

import asyncio
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

from figma_mcp.figma_client import FigmaClient
from figma_mcp.session import FigmaSession

TEST_TOKEN = "figd_test-token-0123456789abcdef"
BASE_URL = "https://api.figma.test/v1"


class StubFigma:
    """In-memory Figma API.

    Routes are keyed by ``(method, path)`` where path excludes the ``/v1``
    prefix.  A route value may be a JSON body, a callable taking the
    request and returning a body, a prepared ``httpx.Response``, or an
    exception instance to raise.
    Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def get(self, path: str, body: Any = None, status: int = 200) -> None:
        self.add("GET", path, body, status)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method.upper(), path)] = (0, exc)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and self._path(r) == path
        ]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/v1"):] if path.startswith("/v1") else path

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # Yield to the loop so concurrent callers can interleave.
        await asyncio.sleep(0)
        self.requests.append(request)
        key = (request.method, self._path(request))
        if key not in self.routes:
            return httpx.Response(404, json={"status": 404, "err": "Not found"})
        status, body = self.routes[key]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, httpx.Response):
            return body
        if callable(body):
            body = body(request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def file_body(key: str = "mock-key", last_modified: str = "2024-01-01T00:00:00Z") -> Dict[str, Any]:
    return {
        "name": f"File {key}",
        "lastModified": last_modified,
        "thumbnailUrl": f"https://cdn.figma.test/{key}.png",
        "version": "123",
        "document": {"id": "0:0", "type": "DOCUMENT", "children": []},
    }


@pytest.fixture
def upstream() -> StubFigma:
    """Fresh stub Figma API per test."""
    return StubFigma()


@pytest.fixture
def figma_client(upstream) -> FigmaClient:
    return FigmaClient(
        TEST_TOKEN,
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(upstream.handler),
    )


@pytest.fixture
def session(figma_client) -> FigmaSession:
    return FigmaSession(figma_client)


@pytest.fixture(autouse=True)
def mock_get_session(session, monkeypatch):
    """Auto-patch _get_session() in all tool/resource modules to use the stub session."""
    import figma_mcp.resources.figma_resources
    import figma_mcp.session
    import figma_mcp.tools.files
    import figma_mcp.tools.library
    import figma_mcp.tools.resources
    import figma_mcp.tools.variables

    for module in [
        figma_mcp.tools.resources,
        figma_mcp.tools.files,
        figma_mcp.tools.variables,
        figma_mcp.tools.library,
        figma_mcp.resources.figma_resources,
    ]:
        monkeypatch.setattr(module, "_get_session", lambda: session)
    monkeypatch.setattr(figma_mcp.session, "_session", session)


@pytest.fixture
def make_file_body() -> Callable[..., Dict[str, Any]]:
    return file_body


__all__ = ["StubFigma", "TEST_TOKEN", "BASE_URL", "file_body"]
