"""
Data models for the translation cache.

CacheEntry is the persisted unit. The remaining models are the values that
flow between the cache layer, the backend port and callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lingocache.core.utils import utc_now


MANUAL = "manual"


# =============================================================================
# Persisted entries
# =============================================================================


class CacheEntry(BaseModel):
    """
    A cached translation.

    `id` is a cache key (see lingocache.core.keys). Entries created through a
    manual override always live under a resource key and carry
    source_language == provider == "manual".
    """

    id: str
    source_text: str
    source_language: str
    target_language: str
    translated_text: str

    # Application-level location (all three or none)
    resource_type: str | None = None
    resource_id: str | None = None
    field: str | None = None

    is_manual_override: bool = False
    provider: str
    model: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_used_at: datetime = Field(default_factory=utc_now)


class CacheStats(BaseModel):
    """Aggregate counts reported by a storage adapter."""

    total_entries: int = 0
    by_language: dict[str, int] = Field(default_factory=dict)
    manual_overrides: int = 0


# =============================================================================
# Lookup / translation results
# =============================================================================


class CacheResult(BaseModel):
    """What the cache layer hands back on a hit."""

    text: str
    source: str
    is_manual_override: bool = False


class BatchItem(BaseModel):
    """One text in a batch lookup, optionally scoped to a resource field."""

    text: str
    resource_type: str | None = None
    resource_id: str | None = None
    field: str | None = None


class TranslateResult(BaseModel):
    """Result of a translate call. Dumps as {"from", "to"} with by_alias=True."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    source: str = Field(serialization_alias="from")
    target: str = Field(serialization_alias="to")
    cached: bool
    is_manual_override: bool | None = None


class BackendTranslation(BaseModel):
    """Raw output of a translation backend."""

    text: str
    source: str


class DetectionResult(BaseModel):
    language: str
    confidence: float


# =============================================================================
# Analytics
# =============================================================================


class AnalyticsEventType(str, Enum):
    TRANSLATION = "translation"
    CACHE_HIT = "cache_hit"
    DETECTION = "detection"
    ERROR = "error"


@dataclass
class AnalyticsEvent:
    """
    Observer payload fired at translation transition points.

    Events are informational only; nothing on the translation path depends on
    how (or whether) they are consumed.
    """

    type: AnalyticsEventType
    text: str
    cached: bool
    duration: int  # milliseconds

    translated_text: str | None = None
    source: str | None = None
    target: str | None = None
    provider: str | None = None
    model: str | None = None
    resource_type: str | None = None
    resource_id: str | None = None
    field: str | None = None
    error: str | None = None

    timestamp: datetime = dc_field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Serialize event to dictionary."""
        return {
            "type": self.type.value,
            "text": self.text,
            "translated_text": self.translated_text,
            "from": self.source,
            "to": self.target,
            "cached": self.cached,
            "duration": self.duration,
            "provider": self.provider,
            "model": self.model,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "field": self.field,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }
