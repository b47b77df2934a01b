"""
In-flight request coalescing.

At most one backend call runs per flight key at any time. Concurrent callers
asking for the same key join the pending flight and observe the same result
or the same exception. Keys are cache keys (resource key if resource-scoped,
hash key otherwise), so source-language hints and context are ignored.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class InFlightRegistry(Generic[T]):
    """
    Map of flight key -> pending task, owned by one Translator.

    Usage:
        registry = InFlightRegistry()
        result = await registry.coalesce(key, lambda: backend.translate(...))

    Registration and lookup happen with no await in between, so two callers
    on the same event loop can never both start a flight for one key. The
    entry removes itself when the task settles, before joined callers
    resume, so a later call after success or failure always starts fresh.
    """

    def __init__(self):
        self._flights: dict[str, asyncio.Task[T]] = {}

    def __len__(self) -> int:
        return len(self._flights)

    def __contains__(self, key: str) -> bool:
        return key in self._flights

    @property
    def pending(self) -> list[str]:
        """Keys with a flight currently running."""
        return list(self._flights)

    def join_or_start(self, key: str, factory: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        """Return the pending task for `key`, starting one via `factory` if none."""
        existing = self._flights.get(key)
        if existing is not None:
            return existing

        task = asyncio.ensure_future(factory())
        self._flights[key] = task

        def _settle(t: asyncio.Task[T]) -> None:
            if self._flights.get(key) is t:
                del self._flights[key]
            # Mark the exception retrieved; joined callers re-raise it themselves
            if not t.cancelled():
                t.exception()

        task.add_done_callback(_settle)
        return task

    async def coalesce(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the flight for `key`.

        Cancelling the caller does not cancel the flight; other joined
        callers still get the result.
        """
        task = self.join_or_start(key, factory)
        return await asyncio.shield(task)
