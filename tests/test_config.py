"""
Tests for settings, translator config and model resolution.
"""

import pytest

from lingocache.config import Settings, TranslatorConfig
from lingocache.exceptions import ConfigurationError
from lingocache.providers.client import default_model, resolve_model
from lingocache.storage.memory import InMemoryCacheStorage
from lingocache.translator import create_translator


@pytest.fixture
def settings():
    return Settings(_env_file=None)


class TestSettings:
    def test_defaults(self, settings):
        assert settings.llm_provider == "gemini"
        assert settings.default_language == "en"
        assert "he" in settings.languages_list

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("LINGOCACHE_LLM_PROVIDER", "openai")
        monkeypatch.setenv("LINGOCACHE_LANGUAGES", "en, he ,ar")

        settings = Settings(_env_file=None)

        assert settings.llm_provider == "openai"
        assert settings.languages_list == ["en", "he", "ar"]


class TestTranslatorConfig:
    def test_from_settings_with_overrides(self, settings):
        config = TranslatorConfig.from_settings(settings, temperature=0.0)

        assert config.temperature == 0.0
        assert config.default_language == "en"
        assert config.languages == settings.languages_list
        assert config.on_analytics is None


class TestResolveModel:
    def test_gemini_accepts_either_key(self):
        settings = Settings(_env_file=None, gemini_api_key="g-key")

        assert resolve_model("gemini", settings=settings) == ("gemini", "gemini-2.0-flash", "g-key")

    def test_explicit_model(self):
        settings = Settings(_env_file=None, openai_api_key="o-key")

        assert resolve_model("openai", "gpt-4o", settings) == ("openai", "gpt-4o", "o-key")

    def test_missing_key(self, settings):
        with pytest.raises(ConfigurationError):
            resolve_model("anthropic", settings=settings)

    def test_unknown_provider(self, settings):
        with pytest.raises(ConfigurationError):
            resolve_model("mystery", settings=settings)

    def test_default_model(self, settings):
        assert default_model("openai", settings) == "gpt-4o-mini"
        assert default_model("mystery", settings) is None


class TestCreateTranslator:
    def test_wires_given_parts(self, backend):
        storage = InMemoryCacheStorage()

        translator = create_translator(storage=storage, backend=backend, temperature=0.1)

        assert translator.storage is storage
        assert translator.backend is backend
        assert translator.config.temperature == 0.1
