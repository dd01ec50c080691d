"""Commitment: a deferred value settled exactly once, observed through callbacks."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Generator, Iterable
from datetime import UTC, datetime
from functools import partial
from typing import Any

from commitment.core.models import (
    CommitmentConfig,
    CommitmentStatus,
    SettledOutcome,
    get_default_config,
)
from commitment.errors import RejectionError
from commitment.scheduling import Scheduler, get_default_scheduler

logger = logging.getLogger(__name__)

type Fulfill[T] = Callable[[T], None]
type Reject = Callable[[Any], None]
type Initializer[T] = Callable[[Fulfill[T], Reject], object]


class Commitment[T]:
    """A value that becomes available later, or a reason why it never will.

    A commitment starts ``pending`` and moves once to ``fulfilled`` or
    ``rejected``; later settlement calls are ignored. Observers attached with
    ``then``, ``catch`` or ``finally_`` are always called on a later turn of the
    scheduler, never inside the call that attached them, and in the order they
    were attached.

    Args:
        initializer: Called synchronously with ``fulfill`` and ``reject``
            capabilities. An exception it raises rejects the commitment.
        scheduler: Deferred-execution primitive. Defaults to the process default.
        config: Behavioural switches. Defaults to the process default.

    Example:
        ```python
        async def main():
            loop = asyncio.get_running_loop()
            commitment = Commitment(lambda fulfill, _: loop.call_later(0.1, fulfill, 42))
            doubled = commitment.then(lambda value: value * 2)
            assert await doubled == 84
        ```
    """

    PENDING = CommitmentStatus.PENDING
    FULFILLED = CommitmentStatus.FULFILLED
    REJECTED = CommitmentStatus.REJECTED

    def __init__(
        self,
        initializer: Initializer[T],
        *,
        scheduler: Scheduler | None = None,
        config: CommitmentConfig | None = None,
    ) -> None:
        self._scheduler = scheduler if scheduler is not None else get_default_scheduler()
        self._config = config if config is not None else get_default_config()
        self._status = CommitmentStatus.PENDING
        self._result: Any = None
        self._fulfilled_callbacks: list[Callable[[T], object]] = []
        self._rejected_callbacks: list[Callable[[Any], object]] = []
        self._finally_callbacks: list[Callable[[], object]] = []

        try:
            initializer(self._fulfill, self._reject)
        except Exception as exc:
            self._reject(exc)

    @property
    def status(self) -> CommitmentStatus:
        """Current settlement status."""
        return self._status

    @property
    def result(self) -> Any:
        """Fulfillment value or rejection reason; None while pending."""
        return self._result

    @property
    def is_pending(self) -> bool:
        return self._status is CommitmentStatus.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._status is CommitmentStatus.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self._status is CommitmentStatus.REJECTED

    @property
    def scheduler(self) -> Scheduler:
        """Scheduler that dispatches this commitment's callbacks."""
        return self._scheduler

    def __repr__(self) -> str:
        if self._status is CommitmentStatus.PENDING:
            return f"<Commitment {self._status.value}>"
        return f"<Commitment {self._status.value}: {self._result!r}>"

    def _fulfill(self, value: T) -> None:
        self._settle(CommitmentStatus.FULFILLED, value)

    def _reject(self, reason: Any) -> None:
        self._settle(CommitmentStatus.REJECTED, reason)

    def _settle(self, status: CommitmentStatus, result: Any) -> None:
        """Move out of PENDING once and schedule every queued callback.

        Callbacks are handed to the scheduler before the state changes, so a
        scheduler that refuses them (no event loop) leaves the commitment
        pending with its queues intact and the error propagates to the caller.
        """
        if self._status is not CommitmentStatus.PENDING:
            if self._config.log_settlements:
                self._log_event("commitment_settlement_ignored", attempted=status.value)
            return

        callbacks: list[Callable[[Any], object]] = (
            self._fulfilled_callbacks
            if status is CommitmentStatus.FULFILLED
            else self._rejected_callbacks
        )
        finally_callbacks = self._finally_callbacks

        # Dispatch is deferred, so nothing runs before the state below is committed.
        for callback in callbacks:
            self._scheduler.call_soon(callback, result)
        for finally_callback in finally_callbacks:
            self._scheduler.call_soon(finally_callback)

        self._status = status
        self._result = result
        self._fulfilled_callbacks = []
        self._rejected_callbacks = []
        self._finally_callbacks = []

        if self._config.log_settlements:
            self._log_event(
                "commitment_settled",
                from_status=CommitmentStatus.PENDING.value,
                to_status=status.value,
                callbacks=len(callbacks) + len(finally_callbacks),
            )

    def _log_event(self, event: str, **fields: Any) -> None:
        log_entry = {
            "event": event,
            "commitment_id": hex(id(self)),
            "status": self._status.value,
            **fields,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        logger.debug(json.dumps(log_entry))

    def _subscribe(
        self,
        on_fulfilled: Callable[[T], object] | None,
        on_rejected: Callable[[Any], object] | None,
    ) -> None:
        """Queue raw callbacks, or schedule the matching one if already settled."""
        if self._status is CommitmentStatus.PENDING:
            if on_fulfilled is not None:
                self._fulfilled_callbacks.append(on_fulfilled)
            if on_rejected is not None:
                self._rejected_callbacks.append(on_rejected)
        elif self._status is CommitmentStatus.FULFILLED and on_fulfilled is not None:
            self._scheduler.call_soon(on_fulfilled, self._result)
        elif self._status is CommitmentStatus.REJECTED and on_rejected is not None:
            self._scheduler.call_soon(on_rejected, self._result)

    def _derive[U](self, initializer: Initializer[U]) -> Commitment[U]:
        return Commitment(initializer, scheduler=self._scheduler, config=self._config)

    def then[U](
        self,
        on_fulfilled: Callable[[T], U] | None = None,
        on_rejected: Callable[[Any], U] | None = None,
    ) -> Commitment[U]:
        """Attach handlers and return a commitment for the handler's outcome.

        The handler's return value fulfills the returned commitment as-is; an
        exception it raises rejects it. When the handler matching the
        settlement is missing, the returned commitment stays pending unless
        ``config.forward_unhandled`` is set, in which case the value or reason
        is passed through.

        Args:
            on_fulfilled: Called with the value on fulfillment.
            on_rejected: Called with the reason on rejection.

        Returns:
            Commitment[U]: A new commitment.
        """
        forward = self._config.forward_unhandled

        def initializer(fulfill: Fulfill[U], reject: Reject) -> None:
            def run(handler: Callable[[Any], U], argument: Any) -> None:
                try:
                    outcome = handler(argument)
                except Exception as exc:
                    reject(exc)
                else:
                    fulfill(outcome)

            fulfilled_callback: Callable[[T], object] | None = None
            rejected_callback: Callable[[Any], object] | None = None
            if on_fulfilled is not None:
                fulfilled_callback = partial(run, on_fulfilled)
            elif forward:
                fulfilled_callback = fulfill
            if on_rejected is not None:
                rejected_callback = partial(run, on_rejected)
            elif forward:
                rejected_callback = reject

            self._subscribe(fulfilled_callback, rejected_callback)

        return self._derive(initializer)

    def catch[U](self, on_rejected: Callable[[Any], U]) -> Commitment[U]:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    def finally_(self, callback: Callable[[], object]) -> Commitment[T]:
        """Run ``callback`` once when this commitment settles, whatever the outcome.

        The returned commitment settles like this one once ``callback`` has
        returned; if ``callback`` raises, it is rejected with that exception.

        Args:
            callback: Zero-argument callable.

        Returns:
            Commitment[T]: Pass-through of this commitment's value or reason.
        """

        def initializer(fulfill: Fulfill[T], reject: Reject) -> None:
            def run_then_forward() -> None:
                try:
                    callback()
                except Exception as exc:
                    reject(exc)
                    return
                if self._status is CommitmentStatus.FULFILLED:
                    fulfill(self._result)
                else:
                    reject(self._result)

            if self._status is CommitmentStatus.PENDING:
                self._finally_callbacks.append(run_then_forward)
            else:
                self._scheduler.call_soon(run_then_forward)

        return self._derive(initializer)

    def to_future(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[T]:
        """Mirror this commitment's settlement into an asyncio Future.

        A non-exception rejection reason is wrapped in ``RejectionError``.

        Args:
            loop: Loop owning the future. Defaults to the running loop.

        Returns:
            asyncio.Future[T]: Future completed on settlement.
        """
        future: asyncio.Future[T] = (loop or asyncio.get_running_loop()).create_future()

        def set_result(value: T) -> None:
            if not future.done():
                future.set_result(value)

        def set_exception(reason: Any) -> None:
            if future.done():
                return
            if isinstance(reason, BaseException):
                future.set_exception(reason)
            else:
                future.set_exception(RejectionError(reason))

        self._subscribe(set_result, set_exception)
        return future

    def __await__(self) -> Generator[Any, None, T]:
        return self.to_future().__await__()

    @classmethod
    def from_future(
        cls,
        awaitable: Awaitable[T],
        *,
        scheduler: Scheduler | None = None,
        config: CommitmentConfig | None = None,
    ) -> Commitment[T]:
        """Wrap a coroutine, task or future in a commitment.

        A cancelled future rejects the commitment with ``asyncio.CancelledError``.
        Requires a running loop when ``awaitable`` is a coroutine.
        """
        future = asyncio.ensure_future(awaitable)

        def initializer(fulfill: Fulfill[T], reject: Reject) -> None:
            def on_done(done: asyncio.Future[T]) -> None:
                if done.cancelled():
                    reject(asyncio.CancelledError())
                    return
                exc = done.exception()
                if exc is not None:
                    reject(exc)
                else:
                    fulfill(done.result())

            future.add_done_callback(on_done)

        return cls(initializer, scheduler=scheduler, config=config)

    @staticmethod
    def resolve[U](value: Commitment[U] | U, *, scheduler: Scheduler | None = None) -> Commitment[U]:
        """Return ``value`` if it is a commitment, else a commitment fulfilled with it."""
        from commitment.core.combinators import resolve

        return resolve(value, scheduler=scheduler)

    @staticmethod
    def reject(reason: Any, *, scheduler: Scheduler | None = None) -> Commitment[Any]:
        """Return a commitment already rejected with ``reason``."""
        from commitment.core.combinators import reject

        return reject(reason, scheduler=scheduler)

    @staticmethod
    def all[U](
        inputs: Iterable[Commitment[U] | U], *, scheduler: Scheduler | None = None
    ) -> Commitment[list[U]]:
        """Fulfill with every value in input order, or reject with the first reason."""
        from commitment.core.combinators import all_of

        return all_of(inputs, scheduler=scheduler)

    @staticmethod
    def all_settled[U](
        inputs: Iterable[Commitment[U] | U], *, scheduler: Scheduler | None = None
    ) -> Commitment[list[SettledOutcome]]:
        """Fulfill with one outcome record per input once all have settled."""
        from commitment.core.combinators import all_settled

        return all_settled(inputs, scheduler=scheduler)

    @staticmethod
    def any[U](
        inputs: Iterable[Commitment[U] | U], *, scheduler: Scheduler | None = None
    ) -> Commitment[U]:
        """Fulfill with the first value, or reject with an AggregateError of all reasons."""
        from commitment.core.combinators import any_of

        return any_of(inputs, scheduler=scheduler)

    @staticmethod
    def race[U](
        inputs: Iterable[Commitment[U] | U], *, scheduler: Scheduler | None = None
    ) -> Commitment[U]:
        """Settle like whichever input settles first."""
        from commitment.core.combinators import race

        return race(inputs, scheduler=scheduler)
