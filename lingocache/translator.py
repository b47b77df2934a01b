"""
Translation orchestrator.

Decides, for every request, whether to answer from cache, join an in-flight
backend call, or start a new one, and writes fresh translations back to the
cache without making the caller wait for the write.

Per-request flow (translate):
1. Empty / whitespace-only text -> returned as-is, cached=True
2. source == target             -> returned as-is, cached=True
3. Cache hit                    -> cached translation (or the original text
                                   when the entry says it already is in the
                                   target language)
4. Miss                         -> join or start a flight for the cache key
5. Success                      -> background cache write (unless the
                                   detected source is the target), analytics
6. Failure                      -> error analytics, exception re-raised to
                                   every joined caller
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from collections.abc import Mapping, MutableMapping
from typing import Any, Sequence, TypeVar

from lingocache.analytics import BackgroundTasks, emit_analytics
from lingocache.cache import TranslationCache
from lingocache.coalescing import InFlightRegistry
from lingocache.config import TranslatorConfig
from lingocache.core.keys import cache_key
from lingocache.core.models import (
    AnalyticsEvent,
    AnalyticsEventType,
    BatchItem,
    CacheResult,
    CacheStats,
    DetectionResult,
    TranslateResult,
)
from lingocache.core.utils import elapsed_ms
from lingocache.languages import is_rtl
from lingocache.providers.base import TranslationBackend
from lingocache.storage.base import CacheStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Object field access (mappings and plain objects alike)
# =============================================================================


def _get_field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _set_field(item: Any, name: str, value: Any) -> None:
    if isinstance(item, MutableMapping):
        item[name] = value
    else:
        setattr(item, name, value)


# =============================================================================
# Translator
# =============================================================================


class Translator:
    """
    Main translation service.

    Usage:
        translator = Translator(InMemoryCacheStorage(), DSPyTranslationBackend())

        # Single translation
        result = await translator.translate("Hello", target="he")
        result.text, result.source, result.cached

        # Field-scoped (enables manual overrides for this field)
        await translator.translate(
            "Sea view apartment", target="he",
            resource_type="property", resource_id="123", field="title",
        )

        # Batch (duplicates translate once)
        results = await translator.translate_batch(["Hi", "Bye", "Hi"], target="ru")

        # Objects (never raises; returns input on failure)
        listing = await translator.translate_object(
            listing, fields=["title", "description"], target="ar",
            resource_type="property", resource_id_field="id",
        )
    """

    def __init__(
        self,
        storage: CacheStorage,
        backend: TranslationBackend,
        config: TranslatorConfig | None = None,
    ):
        self.config = config or TranslatorConfig()
        self.backend = backend
        self.storage = storage
        self.background = BackgroundTasks(self.config.on_error)
        self.cache = TranslationCache(storage, background=self.background)
        self.flights: InFlightRegistry[TranslateResult] = InFlightRegistry()

    @property
    def languages(self) -> list[str]:
        return self.config.languages

    def is_rtl(self, lang: str) -> bool:
        return is_rtl(lang)

    # =========================================================================
    # Analytics
    # =========================================================================

    def _emit(
        self,
        event_type: AnalyticsEventType,
        text: str,
        start: float,
        cached: bool,
        **fields: Any,
    ) -> None:
        if self.config.on_analytics is None:
            return
        if event_type != AnalyticsEventType.CACHE_HIT:
            fields.setdefault("provider", self.backend.provider)
            fields.setdefault("model", self.backend.model)
        emit_analytics(
            self.config.on_analytics,
            AnalyticsEvent(
                type=event_type,
                text=text,
                cached=cached,
                duration=elapsed_ms(start),
                **fields,
            ),
        )

    def _from_cache(
        self,
        text: str,
        target: str,
        hit: CacheResult,
        start: float,
        **resource: Any,
    ) -> TranslateResult:
        # Entry says the text is already in the target language
        if hit.source == target:
            return TranslateResult(text=text, source=hit.source, target=target, cached=True)

        self._emit(
            AnalyticsEventType.CACHE_HIT,
            text,
            start,
            cached=True,
            translated_text=hit.text,
            source=hit.source,
            target=target,
            **resource,
        )
        return TranslateResult(
            text=hit.text,
            source=hit.source,
            target=target,
            cached=True,
            is_manual_override=hit.is_manual_override,
        )

    # =========================================================================
    # Single text
    # =========================================================================

    async def translate(
        self,
        text: str,
        target: str,
        source: str | None = None,
        context: str | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        field: str | None = None,
    ) -> TranslateResult:
        """
        Translate text to target language.

        Args:
            text: Text to translate
            target: Target language code
            source: Source language (auto-detect if None)
            context: Optional context for better translation
            resource_type, resource_id, field: Application field this text
                belongs to. All three enable resource-scoped caching and
                manual overrides.

        Raises:
            Whatever the backend or the storage read path raises.
        """
        start = time.monotonic()

        if not text.strip():
            return TranslateResult(
                text=text,
                source=source or self.config.default_language,
                target=target,
                cached=True,
            )

        if source and source == target:
            return TranslateResult(text=text, source=source, target=target, cached=True)

        resource = {"resource_type": resource_type, "resource_id": resource_id, "field": field}

        hit = await self.cache.get_cached(text, target, **resource)
        if hit:
            return self._from_cache(text, target, hit, start, **resource)

        key = cache_key(text, target, **resource)
        result = await self.flights.coalesce(
            key,
            lambda: self._execute(text, target, source, context, start, write_through=True, **resource),
        )
        # Joined callers share the flight result; each gets its own copy
        return result.model_copy()

    async def _execute(
        self,
        text: str,
        target: str,
        source: str | None,
        context: str | None,
        start: float,
        write_through: bool,
        resource_type: str | None = None,
        resource_id: str | None = None,
        field: str | None = None,
    ) -> TranslateResult:
        """One backend call. Runs inside a flight."""
        resource = {"resource_type": resource_type, "resource_id": resource_id, "field": field}

        try:
            result = await self.backend.translate(
                text,
                target,
                source=source,
                context=context,
                temperature=self.config.temperature,
            )
        except Exception as e:
            self._emit(
                AnalyticsEventType.ERROR,
                text,
                start,
                cached=False,
                target=target,
                error=str(e),
                **resource,
            )
            raise

        if write_through and result.source != target:
            self.background.spawn(
                self.cache.set_cache(
                    source_text=text,
                    source_language=result.source,
                    target_language=target,
                    translated_text=result.text,
                    provider=self.backend.provider,
                    model=self.backend.model,
                    **resource,
                ),
                "cache write",
            )

        self._emit(
            AnalyticsEventType.TRANSLATION,
            text,
            start,
            cached=False,
            translated_text=result.text,
            source=result.source,
            target=target,
            **resource,
        )

        return TranslateResult(text=result.text, source=result.source, target=target, cached=False)

    # =========================================================================
    # Batch
    # =========================================================================

    async def translate_batch(
        self,
        texts: Sequence[str],
        target: str,
        source: str | None = None,
        context: str | None = None,
    ) -> list[TranslateResult]:
        """
        Translate multiple texts.

        Output order matches input order. Each distinct text costs at most
        one backend call, however often it repeats.
        """
        return await self._translate_items(
            [BatchItem(text=text) for text in texts], target, source, context
        )

    async def _translate_items(
        self,
        items: list[BatchItem],
        target: str,
        source: str | None,
        context: str | None,
    ) -> list[TranslateResult]:
        start = time.monotonic()

        if source and source == target:
            return [
                TranslateResult(text=item.text, source=source, target=target, cached=True)
                for item in items
            ]

        results: list[TranslateResult | None] = [None] * len(items)
        lookup: list[int] = []

        for index, item in enumerate(items):
            if item.text.strip():
                lookup.append(index)
            else:
                results[index] = TranslateResult(
                    text=item.text,
                    source=source or self.config.default_language,
                    target=target,
                    cached=True,
                )

        if not lookup:
            return results

        hits = await self.cache.get_cached_batch([items[i] for i in lookup], target)

        # Cache misses grouped by flight key: resource key for resource-scoped
        # items, hash key (so one call per literal text) for the rest
        misses: dict[str, list[int]] = {}

        for position, index in enumerate(lookup):
            item = items[index]
            hit = hits.get(position)
            if hit is None:
                key = cache_key(item.text, target, item.resource_type, item.resource_id, item.field)
                misses.setdefault(key, []).append(index)
                continue
            results[index] = self._from_cache(
                item.text,
                target,
                hit,
                start,
                resource_type=item.resource_type,
                resource_id=item.resource_id,
                field=item.field,
            )

        if misses:
            await self._translate_misses(items, misses, results, target, source, context, start)

        return results

    async def _translate_misses(
        self,
        items: list[BatchItem],
        misses: dict[str, list[int]],
        results: list[TranslateResult | None],
        target: str,
        source: str | None,
        context: str | None,
        start: float,
    ) -> None:
        """
        Translate cache misses, one flight per key.

        Successful translations are written in one background batch even when
        other flights fail; the first failure is then re-raised.
        """
        keys = list(misses)

        def _factory(item: BatchItem):
            return lambda: self._execute(
                item.text,
                target,
                source,
                context,
                start,
                write_through=False,
                resource_type=item.resource_type,
                resource_id=item.resource_id,
                field=item.field,
            )

        translated = await asyncio.gather(
            *(self.flights.coalesce(key, _factory(items[misses[key][0]])) for key in keys),
            return_exceptions=True,
        )

        writes: dict[str, dict[str, Any]] = {}
        failure: BaseException | None = None

        for key, result in zip(keys, translated):
            if isinstance(result, BaseException):
                failure = failure or result
                continue
            for index in misses[key]:
                results[index] = result.model_copy()
            if result.source == target:
                continue
            item = items[misses[key][0]]
            writes[key] = {
                "source_text": item.text,
                "source_language": result.source,
                "target_language": target,
                "translated_text": result.text,
                "provider": self.backend.provider,
                "model": self.backend.model,
                "resource_type": item.resource_type,
                "resource_id": item.resource_id,
                "field": item.field,
            }

        if writes:
            self.background.spawn(
                self.cache.set_cache_batch(list(writes.values())),
                "cache batch write",
            )

        if failure is not None:
            raise failure

    # =========================================================================
    # Objects
    # =========================================================================

    async def translate_object(
        self,
        item: T,
        fields: Sequence[str],
        target: str,
        source: str | None = None,
        context: str | None = None,
        resource_type: str | None = None,
        resource_id_field: str | None = None,
    ) -> T:
        """
        Translate string fields of one object (dict or attribute object).

        Returns a shallow copy with translated fields, or the original item
        if there was nothing to translate or anything failed.
        """
        translated = await self.translate_objects(
            [item],
            fields,
            target,
            source=source,
            context=context,
            resource_type=resource_type,
            resource_id_field=resource_id_field,
        )
        return translated[0]

    async def translate_objects(
        self,
        items: Sequence[T],
        fields: Sequence[str],
        target: str,
        source: str | None = None,
        context: str | None = None,
        resource_type: str | None = None,
        resource_id_field: str | None = None,
    ) -> list[T]:
        """
        Translate string fields across many objects in one batch.

        Only non-empty string values are translated; anything else is left
        alone. With resource_type and resource_id_field, each field is cached
        under its own resource key (so manual overrides apply). Inputs are
        never mutated. Never raises: on failure the error is logged and the
        original items are returned.
        """
        try:
            requests: list[tuple[int, str, BatchItem]] = []

            for item_index, item in enumerate(items):
                resource_id = None
                if resource_type and resource_id_field:
                    raw_id = _get_field(item, resource_id_field)
                    resource_id = None if raw_id is None else str(raw_id)

                for name in fields:
                    value = _get_field(item, name)
                    if not isinstance(value, str) or not value.strip():
                        continue
                    requests.append((
                        item_index,
                        name,
                        BatchItem(
                            text=value,
                            resource_type=resource_type if resource_id else None,
                            resource_id=resource_id,
                            field=name if resource_id else None,
                        ),
                    ))

            if not requests:
                return items

            results = await self._translate_items(
                [request for _, _, request in requests], target, source, context
            )

            translated = [copy.copy(item) for item in items]
            for (item_index, name, _), result in zip(requests, results):
                _set_field(translated[item_index], name, result.text)

            return translated

        except Exception:
            logger.exception("Translation failed for objects")
            return items

    # =========================================================================
    # Detection
    # =========================================================================

    async def detect(self, text: str) -> DetectionResult:
        """Detect language of text. Deterministic (temperature 0), uncached."""
        start = time.monotonic()

        try:
            result = await self.backend.detect_language(text, temperature=0)
        except Exception as e:
            self._emit(AnalyticsEventType.ERROR, text, start, cached=False, error=str(e))
            raise

        self._emit(
            AnalyticsEventType.DETECTION,
            text,
            start,
            cached=False,
            source=result.language,
        )
        return result

    # =========================================================================
    # Manual overrides & cache management
    # =========================================================================

    async def set_manual(
        self,
        text: str,
        translated_text: str,
        target: str,
        resource_type: str,
        resource_id: str,
        field: str,
    ) -> None:
        """Pin a human translation to a resource field."""
        await self.cache.set_manual_translation(
            text=text,
            translated_text=translated_text,
            target=target,
            resource_type=resource_type,
            resource_id=resource_id,
            field=field,
        )

    async def clear_manual(
        self,
        resource_type: str,
        resource_id: str,
        field: str,
        target: str,
    ) -> None:
        """Remove a manual override; lookups fall back to the hash cache."""
        await self.cache.clear_manual_translation(
            resource_type=resource_type,
            resource_id=resource_id,
            field=field,
            target=target,
        )

    async def clear_cache(self, target: str | None = None) -> int:
        """Delete cached translations for one language, or everything."""
        if target:
            return await self.storage.delete_by_language(target)
        return await self.storage.delete_all()

    async def clear_resource_cache(self, resource_type: str, resource_id: str) -> int:
        return await self.storage.delete_by_resource(resource_type, resource_id)

    async def get_cache_stats(self) -> CacheStats:
        return await self.storage.get_stats()

    async def drain(self) -> None:
        """Wait for pending background cache writes and touches."""
        await self.background.drain()


# =============================================================================
# Factory
# =============================================================================


def create_translator(
    storage: CacheStorage | None = None,
    backend: TranslationBackend | None = None,
    config: TranslatorConfig | None = None,
    **overrides: Any,
) -> Translator:
    """
    Build a Translator from settings.

    Defaults to in-memory storage and the DSPy backend for the configured
    provider. Keyword overrides (on_analytics, temperature, ...) are applied
    on top of the environment settings.
    """
    from lingocache.providers.dspy_backend import DSPyTranslationBackend
    from lingocache.storage.memory import InMemoryCacheStorage

    config = config or TranslatorConfig.from_settings(**overrides)
    if backend is None:
        backend = DSPyTranslationBackend(languages=config.languages, verbose=config.verbose)
    return Translator(storage or InMemoryCacheStorage(), backend, config)
