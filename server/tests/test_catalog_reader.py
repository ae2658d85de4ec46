"""Tests for ResourceCatalog (list/search) and ResourceReader (read)."""

from __future__ import annotations

import json

import pytest

from figma_mcp.errors import (
    InvalidUriError,
    MissingResourceIdError,
    ResourceAccessDeniedError,
    ResourceNotFoundError,
)
from figma_mcp.models import ResourceKind

from tests.conftest import file_body


def _listing(*keys: str) -> dict:
    return {
        "files": [
            {
                "key": key,
                "name": f"File {key}",
                "lastModified": "2024-02-02T10:00:00Z",
                "thumbnailUrl": f"https://cdn.figma.test/{key}.png",
                "version": "7",
            }
            for key in keys
        ]
    }


class TestCatalogList:
    @pytest.mark.asyncio
    async def test_maps_files_to_descriptors(self, session, upstream):
        upstream.get("/files", _listing("abc", "def"))
        resources = await session.catalog.list()

        assert [r.uri for r in resources] == ["figma:///file/abc", "figma:///file/def"]
        first = resources[0]
        assert first.kind is ResourceKind.FILE
        assert first.name == "File abc"
        assert first.metadata == {
            "lastModified": "2024-02-02T10:00:00Z",
            "thumbnailUrl": "https://cdn.figma.test/abc.png",
            "version": "7",
        }

    @pytest.mark.asyncio
    async def test_empty_listing_is_empty_sequence(self, session, upstream):
        upstream.get("/files", {"files": []})
        assert await session.catalog.list() == []

    @pytest.mark.asyncio
    async def test_listing_without_files_key(self, session, upstream):
        upstream.get("/files", {})
        assert await session.catalog.list() == []

    @pytest.mark.asyncio
    async def test_entries_without_key_are_skipped(self, session, upstream):
        body = _listing("abc")
        body["files"].append({"name": "orphan"})
        upstream.get("/files", body)
        resources = await session.catalog.list()
        assert [r.uri for r in resources] == ["figma:///file/abc"]

    @pytest.mark.asyncio
    async def test_numeric_version_and_null_name_accepted(self, session, upstream):
        upstream.get(
            "/files",
            {
                "files": [
                    {"key": "abc", "name": "A", "version": 7},
                    {"key": "def", "name": None, "version": "8"},
                ]
            },
        )
        resources = await session.catalog.list()

        assert [r.uri for r in resources] == ["figma:///file/abc", "figma:///file/def"]
        assert resources[0].metadata["version"] == "7"
        assert resources[1].name == ""

    @pytest.mark.asyncio
    async def test_malformed_entry_does_not_drop_listing(self, session, upstream):
        body = _listing("good")
        body["files"].insert(0, {"key": "bad", "name": {"not": "a string"}})
        upstream.get("/files", body)
        resources = await session.catalog.list()
        assert [r.uri for r in resources] == ["figma:///file/good"]

    @pytest.mark.asyncio
    async def test_access_denied_propagates(self, session, upstream):
        upstream.get("/files", {"status": 403}, status=403)
        with pytest.raises(ResourceAccessDeniedError):
            await session.catalog.list()


class TestCatalogSearch:
    @pytest.mark.asyncio
    async def test_search_maps_results(self, session, upstream):
        upstream.get("/search", _listing("hit"))
        resources = await session.catalog.search("button")

        assert [r.uri for r in resources] == ["figma:///file/hit"]
        assert upstream.requests[-1].url.params["query"] == "button"

    @pytest.mark.asyncio
    async def test_empty_query_passed_through(self, session, upstream):
        upstream.get("/search", {"files": []})
        assert await session.catalog.search("") == []
        assert upstream.requests[-1].url.params["query"] == ""

    @pytest.mark.asyncio
    async def test_search_access_denied(self, session, upstream):
        upstream.get("/search", {"status": 403}, status=403)
        with pytest.raises(ResourceAccessDeniedError):
            await session.catalog.search("button")

    @pytest.mark.asyncio
    async def test_search_404_is_not_found(self, session, upstream):
        with pytest.raises(ResourceNotFoundError):
            await session.catalog.search("anything")


class TestReader:
    @pytest.mark.asyncio
    async def test_read_file_returns_single_json_payload(self, session, upstream):
        body = file_body("mock-key")
        upstream.get("/files/mock-key", body)

        contents = await session.reader.read("figma:///file/mock-key")

        assert len(contents) == 1
        payload = contents[0]
        assert payload.uri == "figma:///file/mock-key"
        assert payload.mime_type == "application/json"
        assert payload.text == json.dumps(body, indent=2)
        assert payload.model_dump(by_alias=True)["mimeType"] == "application/json"

    @pytest.mark.asyncio
    async def test_read_component(self, session, upstream):
        upstream.get("/files/F/components/C1", {"key": "C1", "name": "Button"})
        contents = await session.reader.read("figma:///component/F/C1")
        assert json.loads(contents[0].text) == {"key": "C1", "name": "Button"}

    @pytest.mark.asyncio
    async def test_read_variable(self, session, upstream):
        upstream.get("/files/F/variables/V1", {"id": "V1", "name": "color/primary"})
        contents = await session.reader.read("figma:///variable/F/V1")
        assert json.loads(contents[0].text)["id"] == "V1"

    @pytest.mark.asyncio
    async def test_component_without_id_fails(self, session, upstream):
        with pytest.raises(MissingResourceIdError) as exc_info:
            await session.reader.read("figma:///component/F")
        assert "Component ID required" in str(exc_info.value)
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_variable_without_id_fails(self, session, upstream):
        with pytest.raises(MissingResourceIdError, match="Variable ID required"):
            await session.reader.read("figma:///variable/F")

    @pytest.mark.asyncio
    async def test_invalid_uri_rejected_before_upstream(self, session, upstream):
        with pytest.raises(InvalidUriError):
            await session.reader.read("invalid-uri")
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, session, upstream):
        with pytest.raises(ResourceNotFoundError):
            await session.reader.read("figma:///file/gone")

    @pytest.mark.asyncio
    async def test_access_denied_propagates(self, session, upstream):
        upstream.get("/files/F/components/C1", {"status": 403}, status=403)
        with pytest.raises(ResourceAccessDeniedError):
            await session.reader.read("figma:///component/F/C1")

    @pytest.mark.asyncio
    async def test_non_ascii_text_kept_readable(self, session, upstream):
        upstream.get("/files/intl", {"name": "Café"})
        contents = await session.reader.read("figma:///file/intl")
        assert "Café" in contents[0].text
