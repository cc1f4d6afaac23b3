"""
Resilient client for the restful-api.dev object endpoints.

Request flow for every operation:
  1. validate arguments locally (InvalidArgumentError, no network)
  2. run attempts under RetryPolicy; a transport failure is retried with
     linear backoff, anything that produced an HTTP response is final
  3. wrap the response in a ResponseEnvelope, decoding 2xx bodies and
     swallowing (but logging) decode failures

HTTP error statuses are returned as data, never raised.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar
from urllib.parse import quote

import requests

from .config import (
    BASE_URL,
    JSON_CONTENT_TYPE,
    MAX_RETRIES,
    OBJECTS_PATH,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_DELAY_SECONDS,
)
from .errors import DecodeFailure, InvalidArgumentError, TransportFailure
from .logger import ApiLogger, NullLogger
from .models import Resource, ResponseEnvelope, UpdateRequest
from .parser import (
    decode_resource,
    decode_resource_list,
    get_error_message,
    parse_error_payload,
    serialize_payload,
)
from .retry import AttemptOutcome, RetryPolicy

T = TypeVar("T")

Payload = UpdateRequest | Mapping[str, Any]


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------

def require_resource_id(resource_id: str | None) -> str:
    if resource_id is None or not isinstance(resource_id, str) or not resource_id.strip():
        raise InvalidArgumentError("Object ID cannot be null or empty")
    return resource_id


def require_payload(payload: Any, name: str = "payload") -> Any:
    if payload is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    return payload


def media_type(content_type: str | None) -> str | None:
    """``application/json; charset=utf-8`` → ``application/json``."""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class ResilientApiClient:
    """
    HTTP client for ``/objects`` with retry, timing and typed envelopes.

    Args:
        base_url: HTTPS origin of the API.
        session: ``requests.Session`` (or compatible object exposing
                 ``request``); a new session is created and owned if omitted.
        timeout: Per-attempt timeout in seconds.
        max_retries: Total attempts allowed per call.
        retry_delay: Base unit of the linear backoff, in seconds.
        logger: ApiLogger capability; NullLogger by default.
        sleep: Function used to wait out the backoff (injectable for tests).
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY_SECONDS,
        logger: ApiLogger | None = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        if not base_url or not base_url.strip():
            raise InvalidArgumentError("base_url cannot be empty")
        if timeout <= 0:
            raise InvalidArgumentError(f"timeout must be positive, got {timeout}")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger: ApiLogger = logger or NullLogger()
        self.policy = RetryPolicy(max_retries=max_retries, retry_delay=retry_delay, sleep=sleep)
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    @property
    def max_retries(self) -> int:
        return self.policy.max_retries

    @property
    def retry_delay(self) -> float:
        return self.policy.retry_delay

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ResilientApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ── Public operations ─────────────────────────────────────────────────

    def get(self, resource_id: str) -> ResponseEnvelope[Resource]:
        """GET /objects/{id}."""
        path = self._object_path(require_resource_id(resource_id))
        return self._execute("GET", path, decoder=decode_resource)

    def list_objects(self, ids: list[str] | None = None) -> ResponseEnvelope[list[Resource]]:
        """GET /objects, optionally filtered with repeated ``id`` parameters."""
        params = None
        if ids:
            params = [("id", require_resource_id(i)) for i in ids]
        return self._execute("GET", OBJECTS_PATH, decoder=decode_resource_list, params=params)

    def create(self, update_request: Payload) -> ResponseEnvelope[Resource]:
        """POST /objects with a serialized payload."""
        body = serialize_payload(require_payload(update_request, "update_request"))
        return self._execute("POST", OBJECTS_PATH, body=body, decoder=decode_resource)

    def patch(self, resource_id: str, payload: Payload | str) -> ResponseEnvelope[Resource]:
        """
        PATCH /objects/{id}.

        A ``str`` payload is sent verbatim (see :meth:`patch_raw`); anything
        else is serialized to JSON first.
        """
        require_resource_id(resource_id)
        if isinstance(payload, str):
            return self.patch_raw(resource_id, payload)
        body = serialize_payload(require_payload(payload))
        return self._execute("PATCH", self._object_path(resource_id), body=body, decoder=decode_resource)

    def patch_raw(self, resource_id: str, raw_json: str) -> ResponseEnvelope[Resource]:
        """
        PATCH /objects/{id} with a pre-encoded body.

        Any string is accepted, including empty and malformed JSON, so that
        server-side validation can be probed.
        """
        path = self._object_path(require_resource_id(resource_id))
        if raw_json is None:
            raise InvalidArgumentError("raw_json cannot be None")
        if not isinstance(raw_json, str):
            raise InvalidArgumentError(f"raw_json must be a str, got {type(raw_json).__name__}")
        return self._execute("PATCH", path, body=raw_json, decoder=decode_resource, raw=True)

    def put(self, resource_id: str, update_request: Payload) -> ResponseEnvelope[Resource]:
        """PUT /objects/{id} with a full replacement payload."""
        path = self._object_path(require_resource_id(resource_id))
        body = serialize_payload(require_payload(update_request, "update_request"))
        return self._execute("PUT", path, body=body, decoder=decode_resource)

    def delete(self, resource_id: str) -> ResponseEnvelope[None]:
        """DELETE /objects/{id}; the response body is ignored."""
        path = self._object_path(require_resource_id(resource_id))
        return self._execute("DELETE", path, decoder=None)

    # ── Internals ─────────────────────────────────────────────────────────

    def _object_path(self, resource_id: str) -> str:
        return f"{OBJECTS_PATH}/{quote(resource_id, safe='')}"

    def _execute(
        self,
        method: str,
        path: str,
        *,
        body: str | None = None,
        decoder: Callable[[str], T] | None = None,
        params: Any = None,
        raw: bool = False,
    ) -> ResponseEnvelope[T]:
        label = f"{method} {path}" + (" (raw)" if raw else "")

        def attempt(number: int) -> AttemptOutcome:
            try:
                return AttemptOutcome.success(
                    self._send(method, path, label, number, body=body, decoder=decoder, params=params)
                )
            except TransportFailure as exc:
                return AttemptOutcome.from_exception(exc)

        def on_retry(number: int, delay: float, failure: Exception) -> None:
            self.logger.warning(
                f"Retry attempt {number}/{self.max_retries} for {label} "
                f"in {delay:.2f}s after error: {failure}"
            )

        return self.policy.run(attempt, on_retry=on_retry)

    def _send(
        self,
        method: str,
        path: str,
        label: str,
        attempt: int,
        *,
        body: str | None,
        decoder: Callable[[str], T] | None,
        params: Any,
    ) -> ResponseEnvelope[T]:
        self.logger.info(f"{label} (attempt {attempt}/{self.max_retries})")
        headers = {"Accept": JSON_CONTENT_TYPE}
        data = None
        if body is not None:
            self.logger.debug(f"Payload: {body}")
            headers["Content-Type"] = JSON_CONTENT_TYPE
            data = body.encode("utf-8")

        start = time.monotonic()
        try:
            response = self.session.request(
                method,
                self.base_url + path,
                data=data,
                headers=headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            duration_ms = round((time.monotonic() - start) * 1000, 3)
            self.logger.error(
                f"{label} failed after {duration_ms:.0f}ms: {type(exc).__name__}: {exc}", exc
            )
            raise TransportFailure(f"{method} {path} failed: {exc}", method, path) from exc
        duration_ms = round((time.monotonic() - start) * 1000, 3)

        status = response.status_code
        reason = getattr(response, "reason", None) or ""
        status_line = f"{status} {reason}" if reason else str(status)
        self.logger.info(f"Response: {status_line} ({duration_ms:.0f}ms)")

        is_successful = 200 <= status < 300
        content_type = media_type(response.headers.get("Content-Type"))

        if not is_successful:
            text = response.text
            return ResponseEnvelope(
                status_code=status,
                data=None,
                content_type=content_type,
                is_successful=False,
                duration_ms=duration_ms,
                attempts=attempt,
                error=parse_error_payload(text),
                error_message=get_error_message(status, text, reason),
            )

        return ResponseEnvelope(
            status_code=status,
            data=self._safe_decode(response.text, decoder, label),
            content_type=content_type,
            is_successful=True,
            duration_ms=duration_ms,
            attempts=attempt,
        )

    def _safe_decode(self, text: str | None, decoder: Callable[[str], T] | None, label: str) -> T | None:
        if decoder is None:
            return None
        if not text or not text.strip():
            self.logger.warning(f"{label}: response content is empty")
            return None
        try:
            return decoder(text)
        except DecodeFailure as exc:
            self.logger.error(f"{label}: JSON deserialization failed: {exc}", exc)
            return None
