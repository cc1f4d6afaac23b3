"""
Exception types crossing the client boundary.

Only InvalidArgumentError and RetryExhaustedError ever reach a caller of
ResilientApiClient (plus a non-retryable TransportFailure for a malformed
request).  DecodeFailure is raised by the parser and always absorbed by the
client; HTTP error statuses are data in the envelope, never exceptions.
"""

from __future__ import annotations


class ApiClientError(Exception):
    """Base class for every error raised by the api_client package."""


class InvalidArgumentError(ApiClientError, ValueError):
    """A call was rejected locally, before any network round-trip."""


class TransportFailure(ApiClientError):
    """
    The request never produced an HTTP response.

    The underlying ``requests`` exception is attached as ``__cause__``.
    """

    def __init__(self, message: str, method: str | None = None, path: str | None = None):
        self.method = method
        self.path = path
        super().__init__(message)


class DecodeFailure(ApiClientError):
    """A response body could not be decoded into the expected shape."""


class RetryExhaustedError(ApiClientError):
    """Every allowed attempt ended in a transient transport failure."""

    def __init__(self, attempts: int, last_failure: Exception | None):
        self.attempts = attempts
        self.last_failure = last_failure
        super().__init__(
            f"Operation failed after {attempts} attempts. Last error: {last_failure}"
        )
