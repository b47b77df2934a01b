"""
Configuration.

Settings are loaded from environment variables (prefix LINGOCACHE_) with
sensible defaults. TranslatorConfig carries the runtime options a Translator
is built with, including the optional observer hooks.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from lingocache.analytics import AnalyticsHook, ErrorHook
from lingocache.languages import SUPPORTED_LANGUAGES


class Settings(BaseSettings):
    """Settings loaded from environment."""

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Primary: Gemini (accepts either google_api_key or gemini_api_key)
    google_api_key: str = ""
    gemini_api_key: str = ""  # Alias for google_api_key
    gemini_model: str = "gemini-2.0-flash"

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-haiku-20240307"

    # Which provider to use
    llm_provider: str = "gemini"

    # ==========================================================================
    # Translation
    # ==========================================================================

    temperature: float = 0.3
    default_language: str = "en"
    languages: str = ",".join(SUPPORTED_LANGUAGES)
    verbose: bool = False

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def languages_list(self) -> list[str]:
        return [lang.strip() for lang in self.languages.split(",") if lang.strip()]

    class Config:
        env_prefix = "LINGOCACHE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class TranslatorConfig(BaseModel):
    """Runtime options for a Translator."""

    model_config = {"arbitrary_types_allowed": True}

    temperature: float = 0.3
    default_language: str = "en"
    languages: list[str] = Field(default_factory=lambda: list(SUPPORTED_LANGUAGES))
    verbose: bool = False

    on_analytics: AnalyticsHook | None = None
    on_error: ErrorHook | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides) -> TranslatorConfig:
        settings = settings or get_settings()
        values = {
            "temperature": settings.temperature,
            "default_language": settings.default_language,
            "languages": settings.languages_list,
            "verbose": settings.verbose,
        }
        values.update(overrides)
        return cls(**values)
