"""
Tests for the DSPy backend adapter.

No LM is called: the DSPy modules are swapped for stubs that return canned
predictions.
"""

from types import SimpleNamespace

import pytest

from lingocache.exceptions import BackendError
from lingocache.providers.dspy_backend import DSPyTranslationBackend, parse_detect_response


class StubModule:
    def __init__(self, **outputs):
        self.outputs = outputs
        self.calls = []
        self.error = None

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(**self.outputs)


@pytest.fixture
def backend():
    backend = DSPyTranslationBackend(provider="openai", model="gpt-4o-mini", lm=object())
    backend._translate_module = StubModule(translated_text="  שלום  ")
    backend._detect_translate_module = StubModule(response='{"from": "en", "text": "שלום"}')
    backend._detect_module = StubModule(language_code="RU\n")
    return backend


# =============================================================================
# Response parsing
# =============================================================================


class TestParseDetectResponse:
    def test_plain_json(self):
        result = parse_detect_response('{"from": "ru", "text": " Hello "}', "Привет", "en")
        assert result.text == "Hello"
        assert result.source == "ru"

    def test_code_fenced_json(self):
        raw = '```json\n{"from": "ru", "text": "Hello"}\n```'
        assert parse_detect_response(raw, "Привет", "en").text == "Hello"

    def test_unparseable_falls_back(self):
        result = parse_detect_response("Sure! Here you go: Hello", "Привет", "en")
        assert result.text == "Привет"
        assert result.source == "en"

    def test_non_object_falls_back(self):
        assert parse_detect_response('["Hello"]', "Привет", "en").source == "en"

    def test_detected_target_returns_original(self):
        result = parse_detect_response('{"from": "he", "text": "שלום!!"}', "שלום", "he")
        assert result.text == "שלום"
        assert result.source == "he"

    def test_missing_fields_default(self):
        result = parse_detect_response("{}", "Привет", "he")
        assert result.text == "Привет"
        assert result.source == "en"


# =============================================================================
# Backend
# =============================================================================


class TestDSPyTranslationBackend:
    def test_identity(self, backend):
        assert backend.provider == "openai"
        assert backend.model == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_known_source(self, backend):
        result = await backend.translate("Hello", "he", source="en", context="greeting", temperature=0.2)

        assert result.text == "שלום"
        assert result.source == "en"
        call = backend._translate_module.calls[0]
        assert call["source_language"] == "English"
        assert call["target_language"] == "Hebrew"
        assert call["context"] == "greeting"
        assert call["config"] == {"temperature": 0.2}

    @pytest.mark.asyncio
    async def test_same_language_short_circuits(self, backend):
        result = await backend.translate("Hello", "en", source="en")

        assert result.text == "Hello"
        assert backend._translate_module.calls == []

    @pytest.mark.asyncio
    async def test_auto_detect(self, backend):
        result = await backend.translate("Hello", "he")

        assert result.text == "שלום"
        assert result.source == "en"
        assert backend._detect_translate_module.calls[0]["context"] == "general content"

    @pytest.mark.asyncio
    async def test_failures_become_backend_errors(self, backend):
        backend._translate_module.error = ConnectionError("rate limited")

        with pytest.raises(BackendError) as exc_info:
            await backend.translate("Hello", "he", source="en")
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_detect_language(self, backend):
        result = await backend.detect_language("Привет")

        assert result.language == "ru"
        assert result.confidence == 0.9
        assert backend._detect_module.calls[0]["config"] == {"temperature": 0}

    @pytest.mark.asyncio
    async def test_detect_unknown_code_defaults_to_english(self, backend):
        backend._detect_module.outputs["language_code"] = "klingon"
        assert (await backend.detect_language("nuqneH")).language == "en"
