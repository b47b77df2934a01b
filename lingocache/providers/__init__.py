"""
Translation backends.

DSPy provides a structured way to define AI behaviors as "signatures";
DSPyTranslationBackend wraps them behind the TranslationBackend interface.
"""

from lingocache.providers.base import TranslationBackend
from lingocache.providers.client import default_model, get_lm, resolve_model
from lingocache.providers.dspy_backend import DSPyTranslationBackend, parse_detect_response

__all__ = [
    "TranslationBackend",
    "DSPyTranslationBackend",
    "default_model",
    "get_lm",
    "resolve_model",
    "parse_detect_response",
]
