"""
Core building blocks: cache keys, data models and small utilities.
"""

from lingocache.core.keys import (
    cache_key,
    hash_key,
    hash_text,
    has_resource_info,
    resource_key,
)
from lingocache.core.models import (
    MANUAL,
    AnalyticsEvent,
    AnalyticsEventType,
    BackendTranslation,
    BatchItem,
    CacheEntry,
    CacheResult,
    CacheStats,
    DetectionResult,
    TranslateResult,
)
from lingocache.core.utils import utc_now

__all__ = [
    # Keys
    "cache_key",
    "hash_key",
    "hash_text",
    "has_resource_info",
    "resource_key",
    # Models
    "MANUAL",
    "AnalyticsEvent",
    "AnalyticsEventType",
    "BackendTranslation",
    "BatchItem",
    "CacheEntry",
    "CacheResult",
    "CacheStats",
    "DetectionResult",
    "TranslateResult",
    # Utils
    "utc_now",
]
