"""
DSPy-backed translation backend.

Uses the same LM configuration as the rest of the stack (see
lingocache.providers.client). DSPy modules are synchronous, so calls run in
a worker thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re

import dspy

from lingocache.core.models import BackendTranslation, DetectionResult
from lingocache.exceptions import BackendError
from lingocache.languages import SUPPORTED_LANGUAGES, get_language_name
from lingocache.providers.base import TranslationBackend
from lingocache.config import get_settings
from lingocache.providers.client import default_model, get_lm
from lingocache.providers.signatures import DetectAndTranslate, DetectLanguage, TranslateText

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "general content"
DETECTION_CONFIDENCE = 0.9

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")


def parse_detect_response(raw: str, text: str, target: str) -> BackendTranslation:
    """
    Parse a detect-and-translate JSON reply.

    Unparseable replies mean no detection was possible: the original text is
    returned with source "en". If the detected source is the target, the
    original text is returned as-is.
    """
    try:
        data = json.loads(_CODE_FENCE.sub("", raw).strip())
    except (json.JSONDecodeError, TypeError):
        return BackendTranslation(text=text, source="en")

    if not isinstance(data, dict):
        return BackendTranslation(text=text, source="en")

    source = data.get("from") or "en"
    if source == target:
        return BackendTranslation(text=text, source=source)

    translated = data.get("text")
    if isinstance(translated, str):
        translated = translated.strip()
    else:
        translated = text

    return BackendTranslation(text=translated, source=source)


class DSPyTranslationBackend(TranslationBackend):
    """
    Translation backend over DSPy signatures.

    Usage:
        backend = DSPyTranslationBackend(provider="openai", model="gpt-4o-mini")
        result = await backend.translate("Hello", target="he", source="en")
    """

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        lm: dspy.LM | None = None,
        languages: list[str] | None = None,
        verbose: bool = False,
    ):
        self._lm = lm
        if lm is not None and "/" in (getattr(lm, "model", None) or ""):
            lm_provider, lm_model = lm.model.split("/", 1)
            provider = provider or lm_provider
            model = model or lm_model
        self._provider = provider or get_settings().llm_provider
        self._model = model or default_model(self._provider)
        self.languages = languages or list(SUPPORTED_LANGUAGES)
        self.verbose = verbose

        # DSPy modules (lazy initialized)
        self._translate_module: dspy.Predict | None = None
        self._detect_translate_module: dspy.Predict | None = None
        self._detect_module: dspy.Predict | None = None

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def lm(self) -> dspy.LM:
        if self._lm is None:
            self._lm = get_lm(self._provider, self._model)
        return self._lm

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str | None:
        return self._model

    # =========================================================================
    # Modules
    # =========================================================================

    @property
    def translate_module(self) -> dspy.Predict:
        if self._translate_module is None:
            self._translate_module = dspy.Predict(TranslateText)
        return self._translate_module

    @property
    def detect_translate_module(self) -> dspy.Predict:
        if self._detect_translate_module is None:
            self._detect_translate_module = dspy.Predict(DetectAndTranslate)
        return self._detect_translate_module

    @property
    def detect_module(self) -> dspy.Predict:
        if self._detect_module is None:
            self._detect_module = dspy.Predict(DetectLanguage)
        return self._detect_module

    async def _run(self, module: dspy.Predict, temperature: float, **inputs) -> dspy.Prediction:
        lm = self.lm

        def _call() -> dspy.Prediction:
            with dspy.context(lm=lm):
                return module(**inputs, config={"temperature": temperature})

        try:
            return await asyncio.to_thread(_call)
        except Exception as e:
            raise BackendError(f"{self.provider} call failed: {e}", provider=self.provider) from e

    # =========================================================================
    # TranslationBackend
    # =========================================================================

    async def translate(
        self,
        text: str,
        target: str,
        source: str | None = None,
        context: str | None = None,
        temperature: float | None = None,
    ) -> BackendTranslation:
        temperature = 0.3 if temperature is None else temperature

        if self.verbose:
            logger.debug(f"[Translate] Input: {text}")

        if source:
            if source == target:
                return BackendTranslation(text=text, source=source)

            result = await self._run(
                self.translate_module,
                temperature,
                text=text,
                source_language=get_language_name(source),
                target_language=get_language_name(target),
                context=context or DEFAULT_CONTEXT,
            )
            translation = BackendTranslation(text=result.translated_text.strip(), source=source)

        else:
            result = await self._run(
                self.detect_translate_module,
                temperature,
                text=text,
                target_language=get_language_name(target),
                context=context or DEFAULT_CONTEXT,
            )
            translation = parse_detect_response(result.response, text, target)

        if self.verbose:
            logger.debug(f"[Translate] Output: {translation.text} (from {translation.source})")

        return translation

    async def detect_language(
        self,
        text: str,
        temperature: float | None = None,
    ) -> DetectionResult:
        if self.verbose:
            logger.debug(f"[DetectLanguage] Input: {text}")

        result = await self._run(
            self.detect_module,
            0 if temperature is None else temperature,
            text=text[:500],  # Limit text length
            allowed_codes=", ".join(self.languages),
        )

        detected = (result.language_code or "").strip().lower()
        language = detected if detected in self.languages else "en"

        if self.verbose:
            logger.debug(f"[DetectLanguage] Output: {language}")

        return DetectionResult(language=language, confidence=DETECTION_CONFIDENCE)
