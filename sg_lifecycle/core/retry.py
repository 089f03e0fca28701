"""
Retry Policy Module
===================

Bounded poll-until-done retries for operations the remote provider may
refuse temporarily.

The policy calls an operation immediately and, as long as it fails with
an error the ``is_retryable`` predicate accepts, calls it again every
``interval`` seconds until it succeeds, fails with any other error, the
deadline measured from the first attempt passes, or the caller cancels.

Time is read and spent through a :class:`Clock`, so tests can drive the
loop with a fake clock instead of sleeping.

Classes
-------
RetryState
    States the loop moves through.
RetryOutcome
    What a successful run looked like.
Clock
    Time source protocol.
SystemClock
    Wall-clock implementation backed by ``time.monotonic``.
RetryPolicy
    The retry loop itself.

Example
-------
>>> policy = RetryPolicy(
...     interval=2.0,
...     timeout=120.0,
...     is_retryable=lambda err: isinstance(err, TransientDependencyError),
... )
>>> outcome = policy.run(lambda: client.delete_security_group("sg-123"))
>>> outcome.attempts
1
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, List, Optional, Protocol, TypeVar

from sg_lifecycle.core.cancellation import CancelToken
from sg_lifecycle.core.exceptions import (
    DeletionTimeoutError,
    OperationCancelledError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryState(Enum):
    """States of the retry loop."""

    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass
class RetryOutcome(Generic[T]):
    """
    Result of a successful :meth:`RetryPolicy.run`.

    Attributes:
        value: Return value of the final attempt
        attempts: Number of times the operation was called
        elapsed: Seconds between the first attempt and completion
        states: Every state the loop entered, in order
    """

    value: T
    attempts: int
    elapsed: float
    states: List[RetryState] = field(default_factory=list)


class Clock(Protocol):
    """Time source used by :class:`RetryPolicy`."""

    def monotonic(self) -> float:
        ...

    def sleep(self, seconds: float, cancel_token: CancelToken) -> bool:
        """Sleep up to ``seconds``; return True if woken by cancellation."""
        ...


class SystemClock:
    """Real time: ``time.monotonic`` and an interruptible sleep."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float, cancel_token: CancelToken) -> bool:
        return cancel_token.wait(seconds)


class RetryPolicy:
    """
    Retries an operation on retryable errors under a fixed deadline.

    Parameters
    ----------
    interval : float
        Seconds to wait between attempts. Must be positive.
    timeout : float
        Deadline in seconds, measured from the first attempt.
    is_retryable : callable
        Predicate deciding whether an exception should be retried.
    clock : Clock, optional
        Time source. Defaults to :class:`SystemClock`.

    Notes
    -----
    When the last sleep before the deadline is cut short to land exactly
    on it, one final attempt is still made at the deadline. Cancellation
    is checked before every attempt and while sleeping, and always wins
    over the deadline.
    """

    def __init__(
        self,
        interval: float,
        timeout: float,
        is_retryable: Callable[[BaseException], bool],
        clock: Optional[Clock] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if timeout < 0:
            raise ValueError(f"timeout must not be negative, got {timeout}")
        self.interval = interval
        self.timeout = timeout
        self.is_retryable = is_retryable
        self.clock = clock or SystemClock()

    def run(
        self,
        operation: Callable[[], T],
        cancel_token: Optional[CancelToken] = None,
        on_transition: Optional[Callable[[RetryState], None]] = None,
        description: str = "operation",
    ) -> RetryOutcome[T]:
        """
        Run ``operation`` until it succeeds or the policy gives up.

        Parameters
        ----------
        operation : callable
            Zero-argument callable to attempt.
        cancel_token : CancelToken, optional
            Token checked before each attempt and while waiting.
        on_transition : callable, optional
            Called with each state as the loop enters it.
        description : str
            Used in error messages and logs.

        Returns
        -------
        RetryOutcome
            The final value plus attempt bookkeeping.

        Raises
        ------
        OperationCancelledError
            If the token is cancelled before completion.
        DeletionTimeoutError
            If retryable errors persist past the deadline.
        Exception
            Any non-retryable error raised by ``operation``, unchanged.
        """
        token = cancel_token or CancelToken()
        states: List[RetryState] = []
        attempts = 0
        started = self.clock.monotonic()
        deadline = started + self.timeout

        def enter(state: RetryState) -> None:
            states.append(state)
            if on_transition is not None:
                on_transition(state)

        def bookkeeping() -> dict:
            return {
                "attempts": attempts,
                "elapsed_seconds": round(self.clock.monotonic() - started, 3),
                "states": [s.value for s in states],
            }

        def cancelled() -> OperationCancelledError:
            enter(RetryState.CANCELLED)
            return OperationCancelledError(
                f"{description} cancelled: {token.reason}",
                details=bookkeeping(),
            )

        while True:
            if token.cancelled:
                raise cancelled()

            enter(RetryState.ATTEMPTING)
            attempts += 1
            try:
                value = operation()
            except Exception as err:
                if not self.is_retryable(err):
                    enter(RetryState.FAILED)
                    raise
                last_error = err
            else:
                enter(RetryState.SUCCEEDED)
                return RetryOutcome(
                    value=value,
                    attempts=attempts,
                    elapsed=self.clock.monotonic() - started,
                    states=states,
                )

            enter(RetryState.WAITING)
            if token.cancelled:
                raise cancelled()
            remaining = deadline - self.clock.monotonic()
            if remaining <= 0:
                enter(RetryState.TIMED_OUT)
                raise DeletionTimeoutError(
                    f"timed out waiting for {description}",
                    details=bookkeeping(),
                ) from last_error

            logger.debug(
                "%s not done yet (%s), retrying in %.1fs",
                description,
                last_error,
                min(self.interval, remaining),
            )
            if self.clock.sleep(min(self.interval, remaining), token):
                raise cancelled()
