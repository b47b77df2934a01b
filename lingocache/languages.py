"""
Supported languages and utilities.

The default set covers the languages the translation prompts are tuned for.
Arabic and Hebrew are right-to-left and need special UI handling.
"""

from enum import Enum


class Language(str, Enum):
    """Supported languages."""

    EN = "en"      # English
    AR = "ar"      # Arabic - RTL
    HE = "he"      # Hebrew - RTL
    RU = "ru"      # Russian
    JA = "ja"      # Japanese
    KO = "ko"      # Korean
    ZH = "zh"      # Chinese
    HI = "hi"      # Hindi
    EL = "el"      # Greek
    TH = "th"      # Thai
    FR = "fr"      # French
    DE = "de"      # German


# Human-readable names
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ar": "Arabic",
    "he": "Hebrew",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "hi": "Hindi",
    "el": "Greek",
    "th": "Thai",
    "fr": "French",
    "de": "German",
}


# RTL languages (need special UI handling)
RTL_LANGUAGES: list[Language] = [
    Language.AR,
    Language.HE,
]


# All supported (for API)
SUPPORTED_LANGUAGES: list[str] = [lang.value for lang in Language]


# Languages to pre-warm cache for
WARM_UP_LANGUAGES: list[Language] = [
    Language.AR,
    Language.HE,
    Language.RU,
    Language.FR,
    Language.DE,
]


# =============================================================================
# Utilities
# =============================================================================


def get_language_name(code: str) -> str:
    """Get human-readable language name, or the code itself if unknown."""
    return LANGUAGE_NAMES.get(code.lower(), code)


def normalize_language_code(code: str) -> str:
    """Normalize language code to standard form."""
    code = code.lower().strip()

    variants = {
        "english": "en",
        "arabic": "ar",
        "hebrew": "he",
        "russian": "ru",
        "japanese": "ja",
        "korean": "ko",
        "chinese": "zh",
        "hindi": "hi",
        "greek": "el",
        "thai": "th",
        "french": "fr",
        "german": "de",
    }

    return variants.get(code, code)


def is_rtl(code: str) -> bool:
    """Check if language is right-to-left."""
    return normalize_language_code(code) in RTL_LANGUAGES
