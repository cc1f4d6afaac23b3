"""
Data shapes exchanged with the object API.

Resource mirrors the remote JSON entity; UpdateRequest is the partial-update
payload; ResponseEnvelope wraps the outcome of every client call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class Resource:
    """An object stored by the remote API."""

    id: str | None = None
    name: str | None = None
    data: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class UpdateRequest:
    """
    Partial-update payload for POST, PUT and PATCH.

    Fields left as ``None`` are omitted from the wire body so the server
    leaves them untouched; an empty ``data`` mapping is sent as ``{}``.
    """

    name: str | None = None
    data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.name is not None:
            body["name"] = self.name
        if self.data is not None:
            body["data"] = self.data
        return body


@dataclass(frozen=True)
class ErrorPayload:
    """Best-effort decoded ``{error, message}`` body of a rejected call."""

    error: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """
    Outcome of one client call that reached the server.

    Attributes:
        status_code: Numeric HTTP status.
        data: Decoded payload; ``None`` for non-2xx responses, empty bodies
              and decode failures.
        content_type: Media type of the response without parameters.
        is_successful: ``True`` for statuses in [200, 300).
        duration_ms: Wall-clock time of the attempt that produced the response.
        attempts: 1-based number of that attempt.
        error: Decoded error body, when one was present and JSON-shaped.
        error_message: Human-readable failure text for unsuccessful calls.
    """

    status_code: int
    data: T | None = None
    content_type: str | None = None
    is_successful: bool = False
    duration_ms: float = 0.0
    attempts: int = 1
    error: ErrorPayload | None = None
    error_message: str | None = field(default=None)
