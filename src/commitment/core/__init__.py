"""Commitment state machine, combinators and their models."""

from commitment.core.combinators import (
    all_of,
    all_settled,
    any_of,
    race,
    reject,
    resolve,
)
from commitment.core.commitment import Commitment
from commitment.core.models import (
    CommitmentConfig,
    CommitmentStatus,
    FulfilledOutcome,
    RejectedOutcome,
    SettledOutcome,
    get_default_config,
    set_default_config,
)

__all__ = [
    # State machine
    "Commitment",
    "CommitmentStatus",
    # Combinators
    "all_of",
    "all_settled",
    "any_of",
    "race",
    "reject",
    "resolve",
    # Outcomes
    "FulfilledOutcome",
    "RejectedOutcome",
    "SettledOutcome",
    # Configuration
    "CommitmentConfig",
    "get_default_config",
    "set_default_config",
]
