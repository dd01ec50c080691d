"""Domain models shared by commitments and their combinators.

This module defines the settlement status, the outcome records produced by
``all_settled`` and the configuration consulted by every commitment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class CommitmentStatus(str, Enum):
    """Settlement status of a commitment.

    Attributes:
        PENDING: Not settled yet.
        FULFILLED: Settled with a value.
        REJECTED: Settled with a failure cause.
    """

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FulfilledOutcome:
    """Outcome record for an input that fulfilled.

    Attributes:
        value: The fulfillment value.
        status: Always ``CommitmentStatus.FULFILLED``.
    """

    value: Any
    status: CommitmentStatus = field(default=CommitmentStatus.FULFILLED, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Render as ``{"status": "fulfilled", "value": ...}``."""
        return {"status": self.status.value, "value": self.value}


@dataclass(frozen=True, slots=True)
class RejectedOutcome:
    """Outcome record for an input that rejected.

    Attributes:
        reason: The failure cause.
        status: Always ``CommitmentStatus.REJECTED``.
    """

    reason: Any
    status: CommitmentStatus = field(default=CommitmentStatus.REJECTED, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Render as ``{"status": "rejected", "reason": ...}``."""
        return {"status": self.status.value, "reason": self.reason}


type SettledOutcome = FulfilledOutcome | RejectedOutcome


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class CommitmentConfig:
    """Behavioural switches for commitments.

    Attributes:
        forward_unhandled: Forward the value or rejection through ``then`` when the
            matching handler is missing (default: False, the continuation stays pending).
        log_settlements: Emit a structured DEBUG record for every settlement (default: False).
    """

    forward_unhandled: bool = False
    log_settlements: bool = False

    @classmethod
    def from_env(cls) -> CommitmentConfig:
        """Build a configuration from ``COMMITMENT_*`` environment variables."""
        return cls(
            forward_unhandled=_env_flag("COMMITMENT_FORWARD_UNHANDLED"),
            log_settlements=_env_flag("COMMITMENT_LOG_SETTLEMENTS"),
        )


_default_config: CommitmentConfig | None = None


def get_default_config() -> CommitmentConfig:
    """Return the process-wide configuration, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = CommitmentConfig.from_env()
    return _default_config


def set_default_config(config: CommitmentConfig | None) -> None:
    """Replace the process-wide configuration; ``None`` reloads from the environment."""
    global _default_config
    _default_config = config
