"""
Translation backend interface.

Any AI client (DSPy, a vendor SDK, a test double) plugs in by implementing
TranslationBackend. The orchestrator depends on nothing else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lingocache.core.models import BackendTranslation, DetectionResult


class TranslationBackend(ABC):
    """
    Single-string translation and language detection.

    Implementations should return the input untouched when `source` is given
    and equals `target`; the orchestrator never asks for that, but direct
    callers might.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Provider name recorded on cache entries (e.g. "openai")."""
        pass

    @property
    @abstractmethod
    def model(self) -> str | None:
        """Model identifier recorded on cache entries."""
        pass

    @abstractmethod
    async def translate(
        self,
        text: str,
        target: str,
        source: str | None = None,
        context: str | None = None,
        temperature: float | None = None,
    ) -> BackendTranslation:
        """
        Translate text to target language.

        Args:
            text: Text to translate
            target: Target language code
            source: Source language (auto-detect if None)
            context: Optional context for better translation
            temperature: Sampling temperature

        Returns:
            Translated text and the (given or detected) source language
        """
        pass

    @abstractmethod
    async def detect_language(
        self,
        text: str,
        temperature: float | None = None,
    ) -> DetectionResult:
        """Detect the language of text."""
        pass
