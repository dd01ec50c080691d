"""Commitment: deferred values with exactly-once settlement.

A small promise library for asyncio and for explicitly driven schedulers,
with ``all``, ``all_settled``, ``any`` and ``race`` combinators.
"""

from commitment.core import (
    Commitment,
    CommitmentConfig,
    CommitmentStatus,
    FulfilledOutcome,
    RejectedOutcome,
    SettledOutcome,
)
from commitment.errors import (
    AggregateError,
    CommitmentError,
    RejectionError,
    SchedulingError,
)
from commitment.scheduling import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    get_default_scheduler,
    set_default_scheduler,
)

PENDING = CommitmentStatus.PENDING
FULFILLED = CommitmentStatus.FULFILLED
REJECTED = CommitmentStatus.REJECTED

__version__ = "0.1.0"

__all__ = [
    "FULFILLED",
    "PENDING",
    "REJECTED",
    "AggregateError",
    "AsyncioScheduler",
    "Commitment",
    "CommitmentConfig",
    "CommitmentError",
    "CommitmentStatus",
    "FulfilledOutcome",
    "ManualScheduler",
    "RejectedOutcome",
    "RejectionError",
    "Scheduler",
    "SchedulingError",
    "SettledOutcome",
    "get_default_scheduler",
    "set_default_scheduler",
]
