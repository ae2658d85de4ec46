"""Tests for WatchRegistry: watch lifecycle, change detection, concurrency."""

from __future__ import annotations

import asyncio

import pytest

from figma_mcp.errors import (
    InvalidUriError,
    ResourceAccessDeniedError,
    ResourceNotFoundError,
    ResourceNotWatchedError,
)

from tests.conftest import file_body

URI = "figma:///file/mock-key"
PATH = "/files/mock-key"


class TestEstablish:
    @pytest.mark.asyncio
    async def test_establish_returns_watching(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        status = await session.watches.establish(URI)

        assert status.model_dump() == {"uri": URI, "status": "watching"}
        assert URI in session.watches
        assert len(upstream.calls("GET", PATH)) == 1

    @pytest.mark.asyncio
    async def test_establish_invalid_uri(self, session, upstream):
        with pytest.raises(InvalidUriError):
            await session.watches.establish("figma:///unknown/X")
        assert len(session.watches) == 0
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_reestablish_overwrites_marker(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        upstream.get(PATH, file_body(last_modified="t2"))
        await session.watches.establish(URI)

        entries = session.watches.entries()
        assert len(entries) == 1
        assert entries[0].last_modified == "t2"

    @pytest.mark.asyncio
    async def test_component_uri_watches_its_file(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish("figma:///component/mock-key/C1")
        assert len(upstream.calls("GET", PATH)) == 1

    @pytest.mark.asyncio
    async def test_upstream_failure_creates_no_entry(self, session, upstream):
        upstream.get(PATH, {"status": 403}, status=403)
        with pytest.raises(ResourceAccessDeniedError):
            await session.watches.establish(URI)
        assert URI not in session.watches
        assert session.watches._locks == {}

    @pytest.mark.asyncio
    async def test_only_last_modified_is_read(self, session, upstream):
        upstream.get(PATH, {"lastModified": "t1", "version": 12345, "name": None})
        await session.watches.establish(URI)
        assert session.watches.entries()[0].last_modified == "t1"


class TestCheck:
    @pytest.mark.asyncio
    async def test_unchanged_then_changed_then_unchanged(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)

        first = await session.watches.check(URI)
        assert first.changed is False
        assert first.timestamp == "t1"

        upstream.get(PATH, file_body(last_modified="t2"))
        second = await session.watches.check(URI)
        assert second.changed is True
        assert second.timestamp == "t2"

        third = await session.watches.check(URI)
        assert third.changed is False

    @pytest.mark.asyncio
    async def test_every_check_hits_upstream_once(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        for _ in range(3):
            await session.watches.check(URI)
        assert len(upstream.calls("GET", PATH)) == 4

    @pytest.mark.asyncio
    async def test_check_unwatched_fails(self, session, upstream):
        with pytest.raises(ResourceNotWatchedError, match="not being watched"):
            await session.watches.check(URI)
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_check_result_shape(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        result = await session.watches.check(URI)
        assert result.model_dump(mode="json") == {
            "uri": URI,
            "changed": False,
            "timestamp": "t1",
        }

    @pytest.mark.asyncio
    async def test_check_invalid_uri(self, session, upstream):
        with pytest.raises(InvalidUriError):
            await session.watches.check("invalid-uri")
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_check_not_found_keeps_marker(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        del upstream.routes[("GET", PATH)]

        with pytest.raises(ResourceNotFoundError):
            await session.watches.check(URI)
        assert session.watches.entries()[0].last_modified == "t1"

    @pytest.mark.asyncio
    async def test_check_access_denied_keeps_marker(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        upstream.get(PATH, {"status": 403}, status=403)

        with pytest.raises(ResourceAccessDeniedError):
            await session.watches.check(URI)
        assert session.watches.entries()[0].last_modified == "t1"

        upstream.get(PATH, file_body(last_modified="t1"))
        result = await session.watches.check(URI)
        assert result.changed is False


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_checks_report_change_once(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="t1"))
        await session.watches.establish(URI)
        upstream.get(PATH, file_body(last_modified="t2"))

        results = await asyncio.gather(*(session.watches.check(URI) for _ in range(5)))

        assert sum(r.changed for r in results) == 1
        assert session.watches.entries()[0].last_modified == "t2"

    @pytest.mark.asyncio
    async def test_different_uris_are_independent(self, session, upstream):
        upstream.get(PATH, file_body(last_modified="a1"))
        upstream.get("/files/other", file_body("other", last_modified="b1"))
        await asyncio.gather(
            session.watches.establish(URI),
            session.watches.establish("figma:///file/other"),
        )
        assert len(session.watches) == 2
