"""Base Protocol for the deferred-execution primitive behind commitments.

Every settlement notification is handed to a Scheduler instead of being
invoked synchronously, so a handler never runs inside the call that attached it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class SchedulerMetrics:
    """Counters describing deferred callback traffic."""

    scheduled: int
    executed: int
    failed: int = field(default=0)
    peak_backlog: int = field(default=0)


@runtime_checkable
class Scheduler(Protocol):
    """Protocol defining the "run later" primitive used by commitments.

    Implementations must run callbacks in the order they were scheduled and
    never inside the ``call_soon`` call itself.

    Example:
        >>> from commitment.scheduling import ManualScheduler, Scheduler
        >>> isinstance(ManualScheduler(), Scheduler)
        True
    """

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule ``callback(*args)`` to run on a later turn."""
        ...

    def get_metrics(self) -> SchedulerMetrics:
        """Return counters for this scheduler."""
        ...
