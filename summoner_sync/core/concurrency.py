"""Keyed single-flight guard for coalescing concurrent work."""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Run at most one call per key at a time.

    Callers arriving while a call for the same key is in flight await that
    call's result (or exception) instead of starting their own. The shared
    task is shielded, so cancelling one waiter does not cancel the others.
    """

    def __init__(self) -> None:
        self._calls: Dict[str, "asyncio.Task[T]"] = {}

    def in_flight(self, key: str) -> bool:
        """Whether a call for ``key`` is currently running."""
        return key in self._calls

    async def run(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func`` for ``key`` or join the call already in flight."""
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._calls[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight call", key=key)

        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._calls.get(key) is task:
            del self._calls[key]
        if not task.cancelled():
            # Mark the exception retrieved when every waiter was cancelled
            task.exception()
