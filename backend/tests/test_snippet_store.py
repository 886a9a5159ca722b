"""
Snippetbox — Snippet Store Tests
==================================

What:  Tests for SnippetStore against a real SQLite database.

What we test:
    ✅ insert → get round trip with the expiry window
    ✅ Expired and missing snippets are indistinguishable (NoRecord)
    ✅ latest(): newest first, live only, never more than ten
    ✅ Invalid expiry is rejected before touching the database
    ✅ Storage faults surface as PersistenceError
"""

from datetime import timedelta

import pytest

from snippetbox.database import create_engine, create_session_factory
from snippetbox.exceptions import NoRecord, PersistenceError
from snippetbox.stores import SnippetStore
from snippetbox.stores.snippets import LATEST_MAX


class TestInsertAndGet:

    @pytest.mark.asyncio
    async def test_round_trip(self, snippet_store, clock):
        snippet_id = await snippet_store.insert("An old silent pond", "A frog jumps in", 7)

        snippet = await snippet_store.get(snippet_id)

        assert snippet.id == snippet_id
        assert snippet.title == "An old silent pond"
        assert snippet.content == "A frog jumps in"
        assert snippet.created == clock.now
        assert snippet.expires - snippet.created == timedelta(days=7)

    @pytest.mark.asyncio
    async def test_ids_are_sequential(self, snippet_store):
        first = await snippet_store.insert("one", "1", 1)
        second = await snippet_store.insert("two", "2", 1)
        assert first == 1
        assert second == 2

    @pytest.mark.asyncio
    async def test_timestamps_come_back_as_utc(self, snippet_store):
        snippet_id = await snippet_store.insert("tz", "aware", 1)
        snippet = await snippet_store.get(snippet_id)
        assert snippet.created.utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_live_until_expiry(self, snippet_store, clock):
        snippet_id = await snippet_store.insert("haiku", "text", 7)

        clock.advance(seconds=1)
        assert (await snippet_store.get(snippet_id)).id == snippet_id

        clock.advance(days=7)
        with pytest.raises(NoRecord):
            await snippet_store.get(snippet_id)

    @pytest.mark.asyncio
    async def test_not_live_at_exact_expiry(self, snippet_store, clock):
        snippet_id = await snippet_store.insert("haiku", "text", 1)
        clock.advance(days=1)
        with pytest.raises(NoRecord):
            await snippet_store.get(snippet_id)

    @pytest.mark.asyncio
    async def test_missing_and_expired_look_the_same(self, snippet_store, clock):
        snippet_id = await snippet_store.insert("haiku", "text", 1)
        clock.advance(days=2)

        with pytest.raises(NoRecord) as expired:
            await snippet_store.get(snippet_id)
        with pytest.raises(NoRecord) as missing:
            await snippet_store.get(999)

        assert expired.value.message == missing.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, -1])
    async def test_non_positive_expiry_rejected(self, snippet_store, days):
        with pytest.raises(ValueError):
            await snippet_store.insert("t", "c", days)
        assert await snippet_store.latest() == []


class TestLatest:

    @pytest.mark.asyncio
    async def test_empty(self, snippet_store):
        assert await snippet_store.latest() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, snippet_store, clock):
        for title in ("first", "second", "third"):
            await snippet_store.insert(title, "c", 365)
            clock.advance(minutes=1)

        titles = [s.title for s in await snippet_store.latest()]
        assert titles == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_same_created_ordered_by_id(self, snippet_store):
        ids = [await snippet_store.insert(f"s{i}", "c", 1) for i in range(3)]
        assert [s.id for s in await snippet_store.latest()] == list(reversed(ids))

    @pytest.mark.asyncio
    async def test_capped_at_ten(self, snippet_store, clock):
        for i in range(12):
            await snippet_store.insert(f"s{i}", "c", 365)
            clock.advance(seconds=1)

        latest = await snippet_store.latest()

        assert len(latest) == LATEST_MAX == 10
        assert latest[0].title == "s11"
        assert latest[-1].title == "s2"

    @pytest.mark.asyncio
    async def test_limit_above_cap_is_clamped(self, snippet_store):
        for i in range(12):
            await snippet_store.insert(f"s{i}", "c", 365)
        assert len(await snippet_store.latest(limit=50)) == 10

    @pytest.mark.asyncio
    async def test_smaller_limit(self, snippet_store):
        for i in range(5):
            await snippet_store.insert(f"s{i}", "c", 365)
        assert len(await snippet_store.latest(limit=3)) == 3

    @pytest.mark.asyncio
    async def test_expired_excluded(self, snippet_store, clock):
        await snippet_store.insert("short", "c", 1)
        await snippet_store.insert("long", "c", 7)

        clock.advance(days=2)

        assert [s.title for s in await snippet_store.latest()] == ["long"]


class TestStorageFaults:

    @pytest.mark.asyncio
    async def test_missing_schema_is_persistence_error(self, settings, clock):
        engine = create_engine(settings)
        store = SnippetStore(create_session_factory(engine), clock=clock)
        try:
            with pytest.raises(PersistenceError):
                await store.insert("t", "c", 1)
            with pytest.raises(PersistenceError):
                await store.get(1)
            with pytest.raises(PersistenceError):
                await store.latest()
        finally:
            await engine.dispose()
