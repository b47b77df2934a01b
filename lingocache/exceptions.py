"""
Exception types raised by lingocache.

Storage errors are not wrapped: whatever the storage adapter raises on a
read reaches the caller unchanged.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for lingocache errors."""


class ConfigurationError(TranslationError):
    """Missing API key, unknown provider, or similar setup problem."""


class BackendError(TranslationError):
    """A translation backend call failed."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider
