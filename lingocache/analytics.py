"""
Observer hooks.

Analytics and error hooks are optional callables supplied by the application.
They may be plain functions or coroutine functions. Whatever they do, they
never affect the translation path: exceptions (sync or async) are logged and
dropped, with no retry.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Coroutine

from lingocache.core.models import AnalyticsEvent

logger = logging.getLogger(__name__)

# Hook signatures; hooks may return an awaitable
AnalyticsHook = Callable[[AnalyticsEvent], Any]
ErrorHook = Callable[[BaseException, str], Any]


def _log_hook_failure(name: str, exc: BaseException) -> None:
    logger.warning(f"{name} callback error: {exc!r}")


# Hook tasks still running; held so they aren't garbage collected mid-flight
_hook_tasks: set[asyncio.Future] = set()


def _watch(awaitable: Awaitable[Any], name: str) -> None:
    task = asyncio.ensure_future(awaitable)
    _hook_tasks.add(task)

    def _done(t: asyncio.Future) -> None:
        _hook_tasks.discard(t)
        if not t.cancelled() and t.exception() is not None:
            _log_hook_failure(name, t.exception())

    task.add_done_callback(_done)


def _notify(name: str, hook: Callable[..., Any] | None, *args: Any) -> None:
    if hook is None:
        return
    try:
        result = hook(*args)
        if inspect.isawaitable(result):
            _watch(result, name)
    except Exception as e:
        _log_hook_failure(name, e)


def emit_analytics(hook: AnalyticsHook | None, event: AnalyticsEvent) -> None:
    """Fire an analytics event and ignore any failure."""
    _notify("Analytics", hook, event)


def report_error(hook: ErrorHook | None, error: BaseException, operation: str) -> None:
    """Report a suppressed error (failed cache write, touch...) to the error hook."""
    logger.warning(f"{operation} failed: {error}")
    _notify("Error", hook, error, operation)


class BackgroundTasks:
    """
    Spawn-and-detach runner for fire-and-forget work.

    Each task's failure is routed to the error hook. References are held
    until completion so tasks aren't garbage collected mid-flight, and
    `drain()` lets shutdown code (or tests) wait for stragglers.
    """

    def __init__(self, on_error: ErrorHook | None = None):
        self.on_error = on_error
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], operation: str) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)

        def _done(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            if t.exception() is not None:
                report_error(self.on_error, t.exception(), operation)

        task.add_done_callback(_done)
        return task

    async def drain(self) -> None:
        """Wait for every pending background task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
