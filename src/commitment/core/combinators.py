"""Combinators composing many commitments into one.

Every combinator normalizes its inputs with ``resolve`` first, so plain values
may be mixed freely with commitments. Inputs are observed in index order, which
makes ties between inputs settled on the same turn resolve by index.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from commitment.core.commitment import Commitment, Fulfill, Reject
from commitment.core.models import FulfilledOutcome, RejectedOutcome, SettledOutcome
from commitment.errors import AggregateError
from commitment.scheduling import Scheduler

logger = logging.getLogger(__name__)

ALL_REJECTED_MESSAGE = "All commitments were rejected"
EMPTY_INPUT_MESSAGE = "No commitments in the sequence"


def resolve[T](value: Commitment[T] | T, *, scheduler: Scheduler | None = None) -> Commitment[T]:
    """Normalize ``value`` into a commitment.

    Args:
        value: A commitment, returned unchanged, or any other value.
        scheduler: Scheduler for a newly created commitment.

    Returns:
        Commitment[T]: ``value`` itself, or a commitment fulfilled with it.
    """
    if isinstance(value, Commitment):
        return value
    return Commitment(lambda fulfill, _: fulfill(value), scheduler=scheduler)


def reject(reason: Any, *, scheduler: Scheduler | None = None) -> Commitment[Any]:
    """Create a commitment rejected with ``reason``."""
    return Commitment(lambda _, reject_: reject_(reason), scheduler=scheduler)


def _normalize[T](
    inputs: Iterable[Commitment[T] | T], scheduler: Scheduler | None
) -> list[Commitment[T]]:
    return [resolve(item, scheduler=scheduler) for item in inputs]


def all_of[T](
    inputs: Iterable[Commitment[T] | T], *, scheduler: Scheduler | None = None
) -> Commitment[list[T]]:
    """Wait for every input to fulfill.

    Fulfills with the values in input order. Rejects with the reason of the
    first input to reject; later settlements are ignored.

    Args:
        inputs: Commitments or plain values.
        scheduler: Scheduler for the returned commitment.

    Returns:
        Commitment[list[T]]: Combined commitment; an empty input fulfills with ``[]``.
    """
    commitments = _normalize(inputs, scheduler)

    def initializer(fulfill: Fulfill[list[T]], reject_: Reject) -> None:
        results: list[Any] = [None] * len(commitments)
        remaining = len(commitments)
        if remaining == 0:
            fulfill(results)
            return

        def on_fulfilled(index: int, value: T) -> None:
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0:
                fulfill(results)

        for index, commitment in enumerate(commitments):
            commitment.then(lambda value, index=index: on_fulfilled(index, value), reject_)

    return Commitment(initializer, scheduler=scheduler)


def all_settled[T](
    inputs: Iterable[Commitment[T] | T], *, scheduler: Scheduler | None = None
) -> Commitment[list[SettledOutcome]]:
    """Wait for every input to settle; never rejects.

    Args:
        inputs: Commitments or plain values.
        scheduler: Scheduler for the returned commitment.

    Returns:
        Commitment[list[SettledOutcome]]: One ``FulfilledOutcome`` or
        ``RejectedOutcome`` per input, in input order.
    """
    commitments = _normalize(inputs, scheduler)

    def initializer(fulfill: Fulfill[list[SettledOutcome]], _: Reject) -> None:
        outcomes: list[Any] = [None] * len(commitments)
        remaining = len(commitments)
        if remaining == 0:
            fulfill(outcomes)
            return

        def record(index: int, outcome: SettledOutcome) -> None:
            nonlocal remaining
            outcomes[index] = outcome
            remaining -= 1
            if remaining == 0:
                fulfill(outcomes)

        for index, commitment in enumerate(commitments):
            commitment.then(
                lambda value, index=index: record(index, FulfilledOutcome(value)),
                lambda reason, index=index: record(index, RejectedOutcome(reason)),
            )

    return Commitment(initializer, scheduler=scheduler)


def any_of[T](
    inputs: Iterable[Commitment[T] | T], *, scheduler: Scheduler | None = None
) -> Commitment[T]:
    """Fulfill with the first input to fulfill.

    Rejects only once every input has rejected, with an ``AggregateError``
    whose ``errors`` follow the order the rejections arrived in.

    Args:
        inputs: Commitments or plain values.
        scheduler: Scheduler for the returned commitment.

    Returns:
        Commitment[T]: Combined commitment; an empty input rejects with an
        empty ``AggregateError``.
    """
    commitments = _normalize(inputs, scheduler)

    def initializer(fulfill: Fulfill[T], reject_: Reject) -> None:
        if not commitments:
            reject_(AggregateError([], EMPTY_INPUT_MESSAGE))
            return

        errors: list[Any] = []

        def on_rejected(reason: Any) -> None:
            errors.append(reason)
            if len(errors) == len(commitments):
                logger.debug(
                    json.dumps(
                        {
                            "event": "commitment_any_exhausted",
                            "inputs": len(commitments),
                            "errors": [repr(error) for error in errors],
                        }
                    )
                )
                reject_(AggregateError(errors, ALL_REJECTED_MESSAGE))

        for commitment in commitments:
            commitment.then(fulfill, on_rejected)

    return Commitment(initializer, scheduler=scheduler)


def race[T](
    inputs: Iterable[Commitment[T] | T], *, scheduler: Scheduler | None = None
) -> Commitment[T]:
    """Settle like the first input to settle, fulfilled or rejected.

    Args:
        inputs: Commitments or plain values.
        scheduler: Scheduler for the returned commitment.

    Returns:
        Commitment[T]: Combined commitment; an empty input rejects with ``ValueError``.
    """
    commitments = _normalize(inputs, scheduler)

    def initializer(fulfill: Fulfill[T], reject_: Reject) -> None:
        if not commitments:
            reject_(ValueError(EMPTY_INPUT_MESSAGE))
            return

        for commitment in commitments:
            commitment.then(fulfill, reject_)

    return Commitment(initializer, scheduler=scheduler)


__all__ = [
    "ALL_REJECTED_MESSAGE",
    "EMPTY_INPUT_MESSAGE",
    "all_of",
    "all_settled",
    "any_of",
    "race",
    "reject",
    "resolve",
]
