"""Scheduler backed by an asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from commitment.errors import SchedulingError
from commitment.scheduling.base import SchedulerMetrics


class AsyncioScheduler:
    """Defer callbacks with ``loop.call_soon``.

    When constructed without a loop, the loop running at scheduling time is
    used, so one instance can serve successive event loops (one per test, for
    instance). Exceptions raised by a callback are counted and then reach the
    loop's exception handler, as with any other ``call_soon`` callback.

    Args:
        loop: Event loop to schedule on. Defaults to the running loop.

    Example:
        ```python
        scheduler = AsyncioScheduler()

        async def main():
            commitment = Commitment(lambda fulfill, _: fulfill(1), scheduler=scheduler)
            assert await commitment == 1
        ```
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._scheduled = 0
        self._executed = 0
        self._failed = 0

    @property
    def loop(self) -> asyncio.AbstractEventLoop | None:
        """Bound event loop, or None when the running loop is used."""
        return self._loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            if self._loop.is_closed():
                raise SchedulingError("Bound event loop is closed; commitment callbacks cannot run.")
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise SchedulingError(
                "No running event loop to defer commitment callbacks; "
                "bind a loop or install a ManualScheduler."
            ) from exc

    def _run(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._executed += 1
        try:
            callback(*args)
        except Exception:
            self._failed += 1
            raise

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule ``callback(*args)`` on the next loop iteration.

        Raises:
            SchedulingError: If no loop is bound and none is running, or the
                bound loop is closed.
        """
        self._resolve_loop().call_soon(self._run, callback, args)
        self._scheduled += 1

    def get_metrics(self) -> SchedulerMetrics:
        """Get scheduling counters."""
        return SchedulerMetrics(
            scheduled=self._scheduled,
            executed=self._executed,
            failed=self._failed,
        )
