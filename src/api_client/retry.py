"""
Failure classification, linear backoff, and the retry state machine.

An attempt reports an explicit AttemptOutcome rather than raising; the
RetryPolicy consumes outcomes and walks

    ATTEMPTING → WAITING → ATTEMPTING → … → SUCCEEDED | EXHAUSTED

so the retry schedule can be unit tested without a network.  The wait after
failed attempt N is ``retry_delay * N``; no wait follows the final attempt.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

from .errors import (
    DecodeFailure,
    InvalidArgumentError,
    RetryExhaustedError,
    TransportFailure,
)

# Failures before any response was received that are worth another attempt.
TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    requests.ConnectionError,
    requests.Timeout,
)


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class FailureKind:
    """
    Failure category constants exposed to callers.

    Categories drive retry decisions: only transient transport failures
    (connection errors and timeouts) are retried.  A transport failure caused
    by any other ``requests`` error, such as an invalid URL, is a
    REQUEST_ERROR and is raised at once.  HTTP error statuses never reach
    this taxonomy; they are returned in the envelope.
    """

    INVALID_ARGUMENT = "invalid_argument"
    TRANSPORT_FAILURE = "transport_failure"
    REQUEST_ERROR = "request_error"
    DECODE_FAILURE = "decode_failure"
    OTHER = "other"

    RETRIABLE: frozenset[str] = frozenset({TRANSPORT_FAILURE})

    @staticmethod
    def categorize(error: Exception) -> str:
        """
        Map an exception raised while executing a call to a failure kind.

        A TransportFailure is classified by its ``__cause__``: a transient
        ``requests`` exception (or no cause at all) is TRANSPORT_FAILURE,
        any other ``requests`` exception is REQUEST_ERROR.

        Args:
            error: Exception raised during the call.

        Returns:
            One of the category constants.
        """
        if isinstance(error, InvalidArgumentError):
            return FailureKind.INVALID_ARGUMENT
        if isinstance(error, TransportFailure):
            cause = error.__cause__
            if isinstance(cause, requests.RequestException) and not isinstance(
                cause, TRANSIENT_EXCEPTIONS
            ):
                return FailureKind.REQUEST_ERROR
            return FailureKind.TRANSPORT_FAILURE
        if isinstance(error, DecodeFailure):
            return FailureKind.DECODE_FAILURE
        return FailureKind.OTHER


# ---------------------------------------------------------------------------
# Backoff helpers
# ---------------------------------------------------------------------------

def linear_backoff(attempt: int, retry_delay: float) -> float:
    """
    Return the wait time in seconds after a failed attempt.

    Attempt 1 waits ``retry_delay``, attempt 2 waits ``2 * retry_delay``.

    Args:
        attempt: 1-based attempt number that just failed.
        retry_delay: Base unit of the backoff in seconds.
    """
    return retry_delay * attempt


# ---------------------------------------------------------------------------
# Attempt results and states
# ---------------------------------------------------------------------------

class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of a single attempt: a value, or a failure tagged retryable or not."""

    value: Any = None
    failure: Exception | None = None
    retryable: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Any) -> "AttemptOutcome":
        return cls(value=value)

    @classmethod
    def failed(cls, failure: Exception, retryable: bool) -> "AttemptOutcome":
        return cls(failure=failure, retryable=retryable)

    @classmethod
    def from_exception(cls, failure: Exception) -> "AttemptOutcome":
        """Tag a failure as retryable according to FailureKind.RETRIABLE."""
        return cls.failed(failure, FailureKind.categorize(failure) in FailureKind.RETRIABLE)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

RetryCallback = Callable[[int, float, Exception], None]


class RetryPolicy:
    """
    Drive repeated attempts of one operation under a linear backoff schedule.

    The policy holds configuration only; each ``run`` owns its own attempt
    counter, so one policy can serve any number of concurrent calls.
    """

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        if max_retries < 1:
            raise InvalidArgumentError(f"max_retries must be at least 1, got {max_retries}")
        if retry_delay < 0:
            raise InvalidArgumentError(f"retry_delay must not be negative, got {retry_delay}")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return linear_backoff(attempt, self.retry_delay)

    def run(
        self,
        attempt_fn: Callable[[int], AttemptOutcome],
        on_retry: RetryCallback | None = None,
    ) -> Any:
        """
        Execute ``attempt_fn`` until it succeeds or the budget runs out.

        Args:
            attempt_fn: Called with the 1-based attempt number; returns an
                        AttemptOutcome.
            on_retry: Optional callback ``(attempt, delay, failure)`` invoked
                      before each backoff sleep.

        Returns:
            The value of the first successful outcome.

        Raises:
            Exception: The failure of a non-retryable outcome, unchanged.
            RetryExhaustedError: ``max_retries`` attempts all failed
                                 retryably; chained from the last failure.
        """
        state = RetryState.ATTEMPTING
        attempt = 0
        outcome = AttemptOutcome()

        while state in (RetryState.ATTEMPTING, RetryState.WAITING):
            if state is RetryState.ATTEMPTING:
                attempt += 1
                outcome = attempt_fn(attempt)
                state = self._next_state(outcome, attempt)
            else:
                delay = self.delay_for(attempt)
                if on_retry is not None:
                    on_retry(attempt, delay, outcome.failure)
                self.sleep(delay)
                state = RetryState.ATTEMPTING

        if state is RetryState.SUCCEEDED:
            return outcome.value
        if state is RetryState.FAILED:
            raise outcome.failure
        raise RetryExhaustedError(attempt, outcome.failure) from outcome.failure

    def _next_state(self, outcome: AttemptOutcome, attempt: int) -> RetryState:
        if outcome.ok:
            return RetryState.SUCCEEDED
        if not outcome.retryable:
            return RetryState.FAILED
        if attempt < self.max_retries:
            return RetryState.WAITING
        return RetryState.EXHAUSTED
