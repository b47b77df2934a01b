"""
Storage abstraction for cached translations.

All persistence goes through this interface so the cache layer never knows
whether entries live in memory, Redis or a SQL table. Adapters own their
own concurrency safety; callers treat them as opaque.

Integration points:
- InMemoryCacheStorage → development, tests, single process
- SQL / ORM tables     → provided by the application
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lingocache.core.models import CacheEntry, CacheStats


class CacheStorage(ABC):
    """
    Key-value store for CacheEntry records, keyed by entry id.

    `set` is an upsert. `touch` only moves `last_used_at` forward and must
    leave the translated content alone.
    """

    @abstractmethod
    async def get(self, id: str) -> CacheEntry | None:
        """Get an entry by id."""
        pass

    @abstractmethod
    async def get_many(self, ids: list[str]) -> dict[str, CacheEntry]:
        """Get several entries. Missing ids are simply absent from the result."""
        pass

    @abstractmethod
    async def set(self, entry: CacheEntry) -> None:
        """Insert or replace an entry."""
        pass

    @abstractmethod
    async def set_many(self, entries: list[CacheEntry]) -> None:
        """Insert or replace several entries."""
        pass

    @abstractmethod
    async def touch(self, id: str) -> None:
        """Mark an entry as used now."""
        pass

    @abstractmethod
    async def touch_many(self, ids: list[str]) -> None:
        """Mark several entries as used now."""
        pass

    @abstractmethod
    async def delete(self, id: str) -> None:
        """Delete an entry. Deleting a missing id is not an error."""
        pass

    @abstractmethod
    async def delete_by_resource(self, resource_type: str, resource_id: str) -> int:
        """Delete every entry for one (resource_type, resource_id). Returns count."""
        pass

    @abstractmethod
    async def delete_by_language(self, target_language: str) -> int:
        """Delete every entry for one target language. Returns count."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete everything. Returns count."""
        pass

    @abstractmethod
    async def get_stats(self) -> CacheStats:
        """Entry counts: total, per target language, manual overrides."""
        pass
