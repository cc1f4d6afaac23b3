"""
Unit tests for src/api_client/retry.py.

The policy is exercised directly with scripted AttemptOutcomes; no client,
no transport.
"""

from __future__ import annotations

import pytest
import requests

from src.api_client.errors import (
    DecodeFailure,
    InvalidArgumentError,
    RetryExhaustedError,
    TransportFailure,
)
from src.api_client.retry import (
    AttemptOutcome,
    FailureKind,
    RetryPolicy,
    RetryState,
    linear_backoff,
)

from .conftest import RecordingSleep


def scripted(outcomes: list[AttemptOutcome]):
    """attempt_fn that replays ``outcomes`` and records attempt numbers."""
    seen: list[int] = []

    def attempt(number: int) -> AttemptOutcome:
        seen.append(number)
        return outcomes[number - 1]

    return attempt, seen


def transient(msg: str = "refused") -> AttemptOutcome:
    return AttemptOutcome.failed(TransportFailure(msg), retryable=True)


def caused_by(cause: Exception) -> TransportFailure:
    """TransportFailure chained from ``cause``, as the client raises it."""
    try:
        raise TransportFailure(f"GET /objects/6 failed: {cause}", "GET", "/objects/6") from cause
    except TransportFailure as exc:
        return exc


# ---------------------------------------------------------------------------
# Backoff
# ---------------------------------------------------------------------------

class TestLinearBackoff:

    @pytest.mark.parametrize("attempt, expected", [(1, 2.0), (2, 4.0), (3, 6.0), (10, 20.0)])
    def test_delay_is_linear_in_attempt(self, attempt, expected):
        assert linear_backoff(attempt, 2.0) == expected

    def test_zero_delay(self):
        assert linear_backoff(5, 0) == 0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestFailureKind:

    def test_categories(self):
        assert FailureKind.categorize(InvalidArgumentError("x")) == FailureKind.INVALID_ARGUMENT
        assert FailureKind.categorize(TransportFailure("x")) == FailureKind.TRANSPORT_FAILURE
        assert FailureKind.categorize(DecodeFailure("x")) == FailureKind.DECODE_FAILURE
        assert FailureKind.categorize(RuntimeError("x")) == FailureKind.OTHER

    def test_only_transport_failures_are_retriable(self):
        assert FailureKind.RETRIABLE == frozenset({FailureKind.TRANSPORT_FAILURE})

    def test_from_exception_tags_retryable(self):
        assert AttemptOutcome.from_exception(TransportFailure("x")).retryable is True
        assert AttemptOutcome.from_exception(DecodeFailure("x")).retryable is False

    @pytest.mark.parametrize("cause", [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
        requests.exceptions.ConnectTimeout("slow connect"),
        requests.exceptions.ReadTimeout("slow read"),
    ])
    def test_transient_cause_is_retryable(self, cause):
        failure = caused_by(cause)

        assert FailureKind.categorize(failure) == FailureKind.TRANSPORT_FAILURE
        assert AttemptOutcome.from_exception(failure).retryable is True

    @pytest.mark.parametrize("cause", [
        requests.exceptions.InvalidURL("bad url"),
        requests.exceptions.MissingSchema("no scheme"),
        requests.exceptions.TooManyRedirects("loop"),
    ])
    def test_non_transient_request_error_is_not_retryable(self, cause):
        failure = caused_by(cause)

        assert FailureKind.categorize(failure) == FailureKind.REQUEST_ERROR
        assert FailureKind.REQUEST_ERROR not in FailureKind.RETRIABLE
        assert AttemptOutcome.from_exception(failure).retryable is False

    def test_invalid_url_failure_stops_policy(self):
        sleep = RecordingSleep()
        failure = caused_by(requests.exceptions.InvalidURL("bad url"))
        attempt, seen = scripted([AttemptOutcome.from_exception(failure)] * 3)

        with pytest.raises(TransportFailure) as exc_info:
            RetryPolicy(3, 1.0, sleep).run(attempt)

        assert exc_info.value is failure
        assert seen == [1]
        assert sleep.delays == []


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

class TestRetryPolicy:

    def test_success_first_attempt(self):
        sleep = RecordingSleep()
        attempt, seen = scripted([AttemptOutcome.success("ok")])

        assert RetryPolicy(3, 1.0, sleep).run(attempt) == "ok"
        assert seen == [1]
        assert sleep.delays == []

    @pytest.mark.parametrize("k", [1, 2, 3])
    def test_k_transient_failures_then_success(self, k):
        sleep = RecordingSleep()
        outcomes = [transient() for _ in range(k)] + [AttemptOutcome.success("done")]
        attempt, seen = scripted(outcomes)

        result = RetryPolicy(max_retries=k + 1, retry_delay=0.25, sleep=sleep).run(attempt)

        assert result == "done"
        assert seen == list(range(1, k + 2))
        assert sleep.total == pytest.approx(0.25 * sum(range(1, k + 1)))

    @pytest.mark.parametrize("max_retries", [1, 2, 3, 5])
    def test_exhaustion_after_exactly_max_retries(self, max_retries):
        sleep = RecordingSleep()
        attempt, seen = scripted([transient(f"fail {i}") for i in range(max_retries)])

        with pytest.raises(RetryExhaustedError) as exc_info:
            RetryPolicy(max_retries, 1.0, sleep).run(attempt)

        assert seen == list(range(1, max_retries + 1))
        assert exc_info.value.attempts == max_retries
        assert str(exc_info.value.last_failure) == f"fail {max_retries - 1}"
        # no wait after the last attempt
        assert len(sleep.delays) == max_retries - 1

    def test_non_retryable_failure_raised_unchanged(self):
        sleep = RecordingSleep()
        boom = DecodeFailure("boom")
        attempt, seen = scripted([AttemptOutcome.failed(boom, retryable=False)])

        with pytest.raises(DecodeFailure) as exc_info:
            RetryPolicy(3, 1.0, sleep).run(attempt)

        assert exc_info.value is boom
        assert seen == [1]
        assert sleep.delays == []

    def test_non_retryable_after_transient_stops_immediately(self):
        sleep = RecordingSleep()
        attempt, seen = scripted([
            transient(),
            AttemptOutcome.failed(TransportFailure("invalid url"), retryable=False),
            AttemptOutcome.success("never reached"),
        ])

        with pytest.raises(TransportFailure):
            RetryPolicy(5, 1.0, sleep).run(attempt)

        assert seen == [1, 2]
        assert sleep.delays == [1.0]

    def test_on_retry_callback_receives_attempt_delay_failure(self):
        calls = []
        first = transient("first")
        attempt, _ = scripted([first, transient("second"), AttemptOutcome.success(1)])

        RetryPolicy(3, 2.0, RecordingSleep()).run(
            attempt, on_retry=lambda n, d, f: calls.append((n, d, str(f)))
        )

        assert calls == [(1, 2.0, "first"), (2, 4.0, "second")]

    def test_policy_is_reusable_across_runs(self):
        sleep = RecordingSleep()
        policy = RetryPolicy(2, 1.0, sleep)

        first, _ = scripted([transient(), AttemptOutcome.success("a")])
        second, seen = scripted([AttemptOutcome.success("b")])

        assert policy.run(first) == "a"
        assert policy.run(second) == "b"
        assert seen == [1]

    @pytest.mark.parametrize("max_retries, delay", [(0, 1.0), (-1, 1.0), (3, -0.5)])
    def test_invalid_configuration(self, max_retries, delay):
        with pytest.raises(InvalidArgumentError):
            RetryPolicy(max_retries, delay)


class TestStateTransitions:

    def test_next_state_table(self):
        policy = RetryPolicy(2, 1.0, RecordingSleep())

        assert policy._next_state(AttemptOutcome.success(1), 1) is RetryState.SUCCEEDED
        assert policy._next_state(transient(), 1) is RetryState.WAITING
        assert policy._next_state(transient(), 2) is RetryState.EXHAUSTED
        assert (
            policy._next_state(AttemptOutcome.failed(DecodeFailure("x"), False), 1)
            is RetryState.FAILED
        )
