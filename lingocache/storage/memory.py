"""
In-memory storage implementation for development and tests.

Works without any external services. Entries are copied on the way in and
out so callers can't mutate stored state behind the adapter's back.
"""

from __future__ import annotations

from lingocache.core.models import CacheEntry, CacheStats
from lingocache.core.utils import utc_now
from lingocache.storage.base import CacheStorage


class InMemoryCacheStorage(CacheStorage):
    """Dict-backed CacheStorage."""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _upsert(self, entry: CacheEntry) -> None:
        now = utc_now()
        existing = self._entries.get(entry.id)
        self._entries[entry.id] = entry.model_copy(
            update={
                "created_at": existing.created_at if existing else now,
                "updated_at": now,
                "last_used_at": now,
            }
        )

    async def get(self, id: str) -> CacheEntry | None:
        entry = self._entries.get(id)
        return entry.model_copy() if entry else None

    async def get_many(self, ids: list[str]) -> dict[str, CacheEntry]:
        return {
            id: self._entries[id].model_copy()
            for id in ids
            if id in self._entries
        }

    async def set(self, entry: CacheEntry) -> None:
        self._upsert(entry)

    async def set_many(self, entries: list[CacheEntry]) -> None:
        for entry in entries:
            self._upsert(entry)

    async def touch(self, id: str) -> None:
        entry = self._entries.get(id)
        if entry:
            entry.last_used_at = utc_now()

    async def touch_many(self, ids: list[str]) -> None:
        now = utc_now()
        for id in ids:
            entry = self._entries.get(id)
            if entry:
                entry.last_used_at = now

    async def delete(self, id: str) -> None:
        self._entries.pop(id, None)

    async def delete_by_resource(self, resource_type: str, resource_id: str) -> int:
        doomed = [
            key for key, entry in self._entries.items()
            if entry.resource_type == resource_type and entry.resource_id == resource_id
        ]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    async def delete_by_language(self, target_language: str) -> int:
        doomed = [
            key for key, entry in self._entries.items()
            if entry.target_language == target_language
        ]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    async def delete_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    async def get_stats(self) -> CacheStats:
        by_language: dict[str, int] = {}
        manual_overrides = 0

        for entry in self._entries.values():
            lang = entry.target_language
            by_language[lang] = by_language.get(lang, 0) + 1
            if entry.is_manual_override:
                manual_overrides += 1

        return CacheStats(
            total_entries=len(self._entries),
            by_language=by_language,
            manual_overrides=manual_overrides,
        )
