"""
Tests for the in-memory storage adapter.
"""

import pytest

from lingocache.core.models import CacheEntry
from lingocache.storage.memory import InMemoryCacheStorage


def make_entry(id: str, target: str = "he", **extra) -> CacheEntry:
    values = {
        "id": id,
        "source_text": "Hello",
        "source_language": "en",
        "target_language": target,
        "translated_text": "שלום",
        "provider": "fake",
    }
    values.update(extra)
    return CacheEntry(**values)


@pytest.fixture
def storage():
    return InMemoryCacheStorage()


class TestInMemoryCacheStorage:
    @pytest.mark.asyncio
    async def test_get_missing(self, storage):
        assert await storage.get("nope") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, storage):
        await storage.set(make_entry("hash:1:he"))

        entry = await storage.get("hash:1:he")
        assert entry.translated_text == "שלום"
        assert entry.last_used_at >= entry.updated_at >= entry.created_at

    @pytest.mark.asyncio
    async def test_get_many_omits_missing(self, storage):
        await storage.set_many([make_entry("a"), make_entry("b")])

        found = await storage.get_many(["a", "b", "c"])
        assert set(found) == {"a", "b"}

    @pytest.mark.asyncio
    async def test_overwrite_keeps_created_at(self, storage):
        await storage.set(make_entry("a"))
        first = await storage.get("a")

        await storage.set(make_entry("a", translated_text="היי"))
        second = await storage.get("a")

        assert second.translated_text == "היי"
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at

    @pytest.mark.asyncio
    async def test_touch_only_moves_last_used(self, storage):
        await storage.set(make_entry("a"))
        before = await storage.get("a")

        await storage.touch("a")
        await storage.touch_many(["a", "missing"])
        after = await storage.get("a")

        assert after.translated_text == before.translated_text
        assert after.updated_at == before.updated_at
        assert after.last_used_at >= before.last_used_at

    @pytest.mark.asyncio
    async def test_returned_entries_are_copies(self, storage):
        await storage.set(make_entry("a"))
        entry = await storage.get("a")
        entry.translated_text = "mutated"

        assert (await storage.get("a")).translated_text == "שלום"

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        await storage.set(make_entry("a"))
        await storage.delete("a")
        await storage.delete("a")  # idempotent

        assert await storage.get("a") is None

    @pytest.mark.asyncio
    async def test_delete_by_language(self, storage):
        await storage.set_many([
            make_entry("a", target="he"),
            make_entry("b", target="he"),
            make_entry("c", target="ar"),
        ])

        assert await storage.delete_by_language("he") == 2
        assert set(await storage.get_many(["a", "b", "c"])) == {"c"}

    @pytest.mark.asyncio
    async def test_delete_by_resource(self, storage):
        await storage.set_many([
            make_entry("res:property:123:title:he", resource_type="property", resource_id="123", field="title"),
            make_entry("res:property:456:title:he", resource_type="property", resource_id="456", field="title"),
            make_entry("res:user:123:name:he", resource_type="user", resource_id="123", field="name"),
            make_entry("hash:x:he"),
        ])

        assert await storage.delete_by_resource("property", "123") == 1
        assert len(storage) == 3

    @pytest.mark.asyncio
    async def test_delete_all(self, storage):
        await storage.set_many([make_entry("a"), make_entry("b")])

        assert await storage.delete_all() == 2
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_stats(self, storage):
        await storage.set_many([
            make_entry("a", target="he"),
            make_entry("b", target="ar"),
            make_entry("c", target="he", is_manual_override=True, provider="manual"),
        ])

        stats = await storage.get_stats()
        assert stats.total_entries == 3
        assert stats.by_language == {"he": 2, "ar": 1}
        assert stats.manual_overrides == 1
