"""
Shared fixtures: a scripted translation backend and in-memory storage.
"""

from __future__ import annotations

import asyncio

import pytest

from lingocache.config import TranslatorConfig
from lingocache.core.models import BackendTranslation, DetectionResult
from lingocache.providers.base import TranslationBackend
from lingocache.storage.memory import InMemoryCacheStorage
from lingocache.translator import Translator


class FakeBackend(TranslationBackend):
    """
    Deterministic backend that records every call.

    Translations default to "[<target>] <text>". Set `gate` to an
    asyncio.Event to hold calls in flight until the test releases them.
    """

    def __init__(self, translations: dict[tuple[str, str], str] | None = None, detected: str = "en"):
        self.translations = translations or {}
        self.detected = detected
        self.calls: list[dict] = []
        self.detect_calls: list[dict] = []
        self.gate: asyncio.Event | None = None
        self.error: Exception | None = None

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def model(self) -> str | None:
        return "fake-1"

    async def translate(self, text, target, source=None, context=None, temperature=None):
        self.calls.append({
            "text": text,
            "target": target,
            "source": source,
            "context": context,
            "temperature": temperature,
        })
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)

        if self.error is not None:
            raise self.error

        if source and source == target:
            return BackendTranslation(text=text, source=source)

        translated = self.translations.get((text, target), f"[{target}] {text}")
        return BackendTranslation(text=translated, source=source or self.detected)

    async def detect_language(self, text, temperature=None):
        self.detect_calls.append({"text": text, "temperature": temperature})
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return DetectionResult(language=self.detected, confidence=0.9)

    def texts(self) -> list[str]:
        return [call["text"] for call in self.calls]


@pytest.fixture
def storage():
    """Fresh in-memory storage."""
    return InMemoryCacheStorage()


@pytest.fixture
def backend():
    """Fresh fake backend."""
    return FakeBackend()


@pytest.fixture
def events():
    """Collected analytics events."""
    return []


@pytest.fixture
def errors():
    """Collected (error, operation) pairs from the error hook."""
    return []


@pytest.fixture
def translator(storage, backend, events, errors):
    """Translator wired to the fakes, recording analytics and errors."""
    config = TranslatorConfig(
        on_analytics=events.append,
        on_error=lambda exc, operation: errors.append((exc, operation)),
    )
    return Translator(storage, backend, config)
