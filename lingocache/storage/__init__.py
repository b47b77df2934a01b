"""
Storage abstractions.

Integration points:
- CacheStorage → any key-value store with batch get/set/touch
- InMemoryCacheStorage → development and tests
"""

from lingocache.storage.base import CacheStorage
from lingocache.storage.memory import InMemoryCacheStorage

__all__ = [
    "CacheStorage",
    "InMemoryCacheStorage",
]
