"""
Two-tier translation cache.

Resolves requests against a CacheStorage using two key spaces:

1. Resource keys (res:<type>:<id>:<field>:<lang>) pin a translation to an
   application field. Manual overrides only ever live here.
2. Hash keys (hash:<hash>:<lang>) identify a translation by content alone.

A resource hit always wins over a hash hit. Clearing a manual override
deletes only the resource key, so lookups fall back to whatever hash entry
exists for the same text.

Reads propagate storage errors. Touches are fire-and-forget; their failures
go to the error hook.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable

from lingocache.analytics import BackgroundTasks, ErrorHook
from lingocache.core.keys import cache_key, hash_key, has_resource_info, resource_key
from lingocache.core.models import MANUAL, BatchItem, CacheEntry, CacheResult
from lingocache.storage.base import CacheStorage


def _to_result(entry: CacheEntry, is_manual_override: bool | None = None) -> CacheResult:
    return CacheResult(
        text=entry.translated_text,
        source=entry.source_language,
        is_manual_override=(
            entry.is_manual_override if is_manual_override is None else is_manual_override
        ),
    )


def build_entry(
    source_text: str,
    source_language: str,
    target_language: str,
    translated_text: str,
    provider: str,
    model: str | None = None,
    resource_type: str | None = None,
    resource_id: str | None = None,
    field: str | None = None,
    is_manual_override: bool = False,
) -> CacheEntry:
    """Build an entry keyed by resource key when possible, hash key otherwise."""
    return CacheEntry(
        id=cache_key(source_text, target_language, resource_type, resource_id, field),
        source_text=source_text,
        source_language=source_language,
        target_language=target_language,
        translated_text=translated_text,
        resource_type=resource_type,
        resource_id=resource_id,
        field=field,
        is_manual_override=is_manual_override,
        provider=provider,
        model=model,
    )


class TranslationCache:
    """
    Cache layer over a CacheStorage.

    Usage:
        cache = TranslationCache(InMemoryCacheStorage())

        await cache.set_cache(
            source_text="Hello", source_language="en",
            target_language="he", translated_text="שלום", provider="openai",
        )
        hit = await cache.get_cached("Hello", "he")
        # CacheResult(text="שלום", source="en", is_manual_override=False)
    """

    def __init__(
        self,
        storage: CacheStorage,
        on_error: ErrorHook | None = None,
        background: BackgroundTasks | None = None,
    ):
        self.storage = storage
        self.background = background or BackgroundTasks(on_error)

    # =========================================================================
    # Lookups
    # =========================================================================

    async def get_cached(
        self,
        text: str,
        target: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
        field: str | None = None,
    ) -> CacheResult | None:
        """
        Look up a single translation.

        With resource info, the resource key and the hash key are fetched
        concurrently and the resource entry wins. Hash hits are never
        reported as manual overrides.
        """
        h_key = hash_key(text, target)

        if has_resource_info(resource_type, resource_id, field):
            r_key = resource_key(resource_type, resource_id, field, target)
            resource_entry, hash_entry = await asyncio.gather(
                self.storage.get(r_key),
                self.storage.get(h_key),
            )

            if resource_entry:
                self._touch(r_key)
                return _to_result(resource_entry)

            if hash_entry:
                self._touch(h_key)
                return _to_result(hash_entry, is_manual_override=False)

            return None

        hash_entry = await self.storage.get(h_key)
        if hash_entry:
            self._touch(h_key)
            return _to_result(hash_entry, is_manual_override=False)

        return None

    async def get_cached_batch(
        self,
        items: list[BatchItem],
        target: str,
    ) -> dict[int, CacheResult]:
        """
        Look up many translations with at most two storage round trips.

        Returns {index: CacheResult} for hits only; misses are absent.
        Several indices may share a key (duplicate texts) and all of them
        receive the result.
        """
        results: dict[int, CacheResult] = {}
        found_keys: list[str] = []

        resource_indices: dict[str, list[int]] = {}
        hash_indices: dict[str, list[int]] = {}

        for index, item in enumerate(items):
            if has_resource_info(item.resource_type, item.resource_id, item.field):
                key = resource_key(item.resource_type, item.resource_id, item.field, target)
                resource_indices.setdefault(key, []).append(index)
            hash_indices.setdefault(hash_key(item.text, target), []).append(index)

        if resource_indices:
            entries = await self.storage.get_many(list(resource_indices))
            for key, entry in entries.items():
                result = _to_result(entry)
                for index in resource_indices.get(key, []):
                    results[index] = result
                found_keys.append(key)

        # Hash keys still needed by at least one unresolved index
        missing = [
            key for key, indices in hash_indices.items()
            if any(index not in results for index in indices)
        ]

        if missing:
            entries = await self.storage.get_many(missing)
            for key, entry in entries.items():
                result = _to_result(entry, is_manual_override=False)
                for index in hash_indices.get(key, []):
                    if index not in results:
                        results[index] = result
                found_keys.append(key)

        if found_keys:
            self.background.spawn(self.storage.touch_many(found_keys), "cache touch")

        return results

    def _touch(self, key: str) -> None:
        self.background.spawn(self.storage.touch(key), "cache touch")

    # =========================================================================
    # Writes
    # =========================================================================

    async def set_cache(self, **params: Any) -> None:
        """Write one AI-derived translation. Accepts build_entry() arguments."""
        await self.storage.set(build_entry(**params))

    async def set_cache_batch(self, items: Iterable[dict[str, Any]]) -> None:
        """Write many translations in one storage call. No-op for empty input."""
        entries = [build_entry(**params) for params in items]
        if not entries:
            return
        await self.storage.set_many(entries)

    # =========================================================================
    # Manual overrides
    # =========================================================================

    async def set_manual_translation(
        self,
        text: str,
        translated_text: str,
        target: str,
        resource_type: str,
        resource_id: str,
        field: str,
    ) -> None:
        """
        Pin a human translation to a resource field.

        Always written under the resource key. Overwrites whatever was there.
        """
        if not has_resource_info(resource_type, resource_id, field):
            raise ValueError("Manual translations require resource_type, resource_id and field")

        await self.storage.set(CacheEntry(
            id=resource_key(resource_type, resource_id, field, target),
            source_text=text,
            source_language=MANUAL,
            target_language=target,
            translated_text=translated_text,
            resource_type=resource_type,
            resource_id=resource_id,
            field=field,
            is_manual_override=True,
            provider=MANUAL,
            model=None,
        ))

    async def clear_manual_translation(
        self,
        resource_type: str,
        resource_id: str,
        field: str,
        target: str,
    ) -> None:
        """Delete the resource key only; any hash entry for the text survives."""
        await self.storage.delete(resource_key(resource_type, resource_id, field, target))
