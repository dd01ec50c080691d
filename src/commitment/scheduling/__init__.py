"""Deferred-execution schedulers for commitment callbacks."""

from commitment.scheduling.asyncio_scheduler import AsyncioScheduler
from commitment.scheduling.base import Scheduler, SchedulerMetrics
from commitment.scheduling.manual import ManualScheduler

_default_scheduler: Scheduler = AsyncioScheduler()


def get_default_scheduler() -> Scheduler:
    """Return the scheduler used by commitments created without one."""
    return _default_scheduler


def set_default_scheduler(scheduler: Scheduler | None) -> Scheduler:
    """Install a process-wide default scheduler.

    Args:
        scheduler: New default, or None to restore an ``AsyncioScheduler``.

    Returns:
        Scheduler: The previous default.
    """
    global _default_scheduler
    previous = _default_scheduler
    _default_scheduler = scheduler if scheduler is not None else AsyncioScheduler()
    return previous


__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "SchedulerMetrics",
    "get_default_scheduler",
    "set_default_scheduler",
]
