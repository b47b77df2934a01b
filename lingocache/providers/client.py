"""
LLM client configuration using DSPy.

Supports Gemini (primary), OpenAI, and Anthropic.
"""

from __future__ import annotations

from functools import lru_cache

import dspy

from lingocache.config import Settings, get_settings
from lingocache.exceptions import ConfigurationError


def default_model(provider: str, settings: Settings | None = None) -> str | None:
    """Configured model name for a provider, without checking API keys."""
    settings = settings or get_settings()
    return {
        "gemini": settings.gemini_model,
        "openai": settings.openai_model,
        "anthropic": settings.anthropic_model,
    }.get(provider)


def resolve_model(provider: str | None = None, model: str | None = None,
                  settings: Settings | None = None) -> tuple[str, str, str]:
    """
    Work out (provider, model, api_key) from arguments and settings.

    Raises:
        ConfigurationError: unknown provider or missing API key
    """
    settings = settings or get_settings()
    provider = provider or settings.llm_provider

    if provider == "gemini":
        model = model or settings.gemini_model
        # Accept both GOOGLE_API_KEY and GEMINI_API_KEY
        api_key = settings.google_api_key or settings.gemini_api_key
        if not api_key:
            raise ConfigurationError("LINGOCACHE_GOOGLE_API_KEY or LINGOCACHE_GEMINI_API_KEY not set")

    elif provider == "openai":
        model = model or settings.openai_model
        api_key = settings.openai_api_key
        if not api_key:
            raise ConfigurationError("LINGOCACHE_OPENAI_API_KEY not set")

    elif provider == "anthropic":
        model = model or settings.anthropic_model
        api_key = settings.anthropic_api_key
        if not api_key:
            raise ConfigurationError("LINGOCACHE_ANTHROPIC_API_KEY not set")

    else:
        raise ConfigurationError(f"Unknown provider: {provider}")

    return provider, model, api_key


@lru_cache
def get_lm(provider: str | None = None, model: str | None = None) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini', 'openai', or 'anthropic'. Defaults to settings.
        model: Model name. Defaults to the provider-specific setting.

    Returns:
        Configured DSPy LM instance.
    """
    provider, model, api_key = resolve_model(provider, model)

    # litellm-style "<provider>/<model>" names
    return dspy.LM(model=f"{provider}/{model}", api_key=api_key)
