"""Deterministic scheduler drained explicitly by the caller."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from commitment.scheduling.base import SchedulerMetrics

logger = logging.getLogger(__name__)


class ManualScheduler:
    """FIFO queue of deferred callbacks, run only when ``run_until_idle`` is called.

    Useful in synchronous code and in tests that need to observe state between
    the moment a callback is scheduled and the moment it runs.

    Example:
        ```python
        scheduler = ManualScheduler()
        seen = []
        Commitment(lambda fulfill, _: fulfill(1), scheduler=scheduler).then(seen.append)
        assert seen == []
        scheduler.run_until_idle()
        assert seen == [1]
        ```
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._scheduled = 0
        self._executed = 0
        self._failed = 0
        self._peak_backlog = 0

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._queue)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback(*args)``."""
        self._queue.append((callback, args))
        self._scheduled += 1
        self._peak_backlog = max(self._peak_backlog, len(self._queue))

    def run_once(self) -> bool:
        """Run the oldest queued callback.

        Returns:
            bool: False if the queue was empty.
        """
        if not self._queue:
            return False

        callback, args = self._queue.popleft()
        self._executed += 1
        try:
            callback(*args)
        except Exception:
            self._failed += 1
            logger.exception("Exception in deferred callback %r", callback)
        return True

    def run_until_idle(self) -> int:
        """Run callbacks until the queue is empty, including ones queued meanwhile.

        Returns:
            int: Number of callbacks run.
        """
        count = 0
        while self.run_once():
            count += 1
        return count

    def get_metrics(self) -> SchedulerMetrics:
        """Get scheduling counters."""
        return SchedulerMetrics(
            scheduled=self._scheduled,
            executed=self._executed,
            failed=self._failed,
            peak_backlog=self._peak_backlog,
        )
