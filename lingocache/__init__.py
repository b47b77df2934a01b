"""
lingocache - LLM-powered translation with caching.

Design:
1. Two-tier cache: content hash keys and resource/field keys
2. Manual overrides pinned to resource fields win over AI output
3. Concurrent identical requests share one backend call
4. Batches translate each distinct string once

Usage:
    from lingocache import create_translator

    translator = create_translator()

    # Simple
    result = await translator.translate("Hello world", target="he")

    # Field-scoped, with a human override
    await translator.set_manual(
        text="Sea view", translated_text="נוף לים", target="he",
        resource_type="property", resource_id="123", field="title",
    )

    # Batch
    results = await translator.translate_batch(["Hello", "Goodbye"], target="ru")
"""

from lingocache.cache import TranslationCache
from lingocache.coalescing import InFlightRegistry
from lingocache.config import Settings, TranslatorConfig, get_settings
from lingocache.core.models import (
    AnalyticsEvent,
    AnalyticsEventType,
    CacheEntry,
    CacheResult,
    CacheStats,
    DetectionResult,
    TranslateResult,
)
from lingocache.exceptions import BackendError, ConfigurationError, TranslationError
from lingocache.languages import (
    Language,
    RTL_LANGUAGES,
    SUPPORTED_LANGUAGES,
    get_language_name,
    is_rtl,
)
from lingocache.providers.base import TranslationBackend
from lingocache.storage import CacheStorage, InMemoryCacheStorage
from lingocache.translator import Translator, create_translator

__all__ = [
    # Core translation
    "Translator",
    "create_translator",
    "TranslationCache",
    "InFlightRegistry",
    # Ports
    "CacheStorage",
    "InMemoryCacheStorage",
    "TranslationBackend",
    # Config
    "Settings",
    "TranslatorConfig",
    "get_settings",
    # Models
    "AnalyticsEvent",
    "AnalyticsEventType",
    "CacheEntry",
    "CacheResult",
    "CacheStats",
    "DetectionResult",
    "TranslateResult",
    # Errors
    "TranslationError",
    "BackendError",
    "ConfigurationError",
    # Language utilities
    "Language",
    "SUPPORTED_LANGUAGES",
    "RTL_LANGUAGES",
    "get_language_name",
    "is_rtl",
]
