"""
Response decoding, field-name matching, error-body parsing, and payload
serialization.

No I/O occurs here; all functions are pure transformations of strings/dicts
to support easy unit testing.  Decoding problems raise DecodeFailure, which
the client turns into an envelope with absent data.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .errors import DecodeFailure, InvalidArgumentError
from .models import ErrorPayload, Resource, UpdateRequest

# Normalized wire key → Resource attribute
RESOURCE_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "data": "data",
    "createdat": "created_at",
    "updatedat": "updated_at",
}

# Fractional seconds of an ISO time, e.g. ".1234567" in "10:30:00.1234567Z"
FRACTION_RE = re.compile(r"(?<=\d{2}:\d{2}:\d{2})\.(\d+)")


# ---------------------------------------------------------------------------
# Field matching
# ---------------------------------------------------------------------------

def normalize_key(key: str) -> str:
    """
    Fold a JSON key for case-insensitive, camelCase/snake_case tolerant lookup.

    ``createdAt``, ``CreatedAt``, ``created_at`` and ``created-at`` all map
    to ``createdat``.
    """
    return key.replace("_", "").replace("-", "").lower()


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as sent by the API (``2024-10-04T10:30:00Z``).

    Raises:
        DecodeFailure: The value is neither null nor a parsable ISO string.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeFailure(f"Timestamp must be a string, got {type(value).__name__}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 accepts only 3 or 6 fractional digits
    text = FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise DecodeFailure(f"Invalid timestamp: {value!r}") from exc


# ---------------------------------------------------------------------------
# Resource decoding
# ---------------------------------------------------------------------------

def resource_from_dict(raw: Mapping[str, Any]) -> Resource:
    """
    Build a Resource from a decoded JSON object.

    Unknown keys are ignored.  A numeric ``id`` is accepted and stored as a
    string; a missing ``id`` decodes to None.

    Raises:
        DecodeFailure: A field has the wrong JSON type.
    """
    fields: dict[str, Any] = {}
    for key, value in raw.items():
        attr = RESOURCE_FIELDS.get(normalize_key(key))
        if attr is not None:
            fields[attr] = value

    resource_id = fields.get("id")
    if resource_id is not None and (
        isinstance(resource_id, bool) or not isinstance(resource_id, (str, int))
    ):
        raise DecodeFailure(f"Resource id must be a string, got {resource_id!r}")

    name = fields.get("name")
    if name is not None and not isinstance(name, str):
        raise DecodeFailure(f"Resource name must be a string, got {type(name).__name__}")

    data = fields.get("data")
    if data is not None and not isinstance(data, dict):
        raise DecodeFailure(f"Resource data must be an object, got {type(data).__name__}")

    return Resource(
        id=None if resource_id is None else str(resource_id),
        name=name,
        data=data,
        created_at=parse_timestamp(fields.get("created_at")),
        updated_at=parse_timestamp(fields.get("updated_at")),
    )


def load_json(text: str) -> Any:
    """json.loads that reports malformed bodies as DecodeFailure."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DecodeFailure(f"Response body is not valid JSON: {exc}") from exc


def decode_resource(text: str) -> Resource:
    """
    Decode a response body into a Resource.

    Raises:
        DecodeFailure: Body is not JSON, not an object, or has bad field types.
    """
    parsed = load_json(text)
    if not isinstance(parsed, dict):
        raise DecodeFailure(f"Expected a JSON object, got {type(parsed).__name__}")
    return resource_from_dict(parsed)


def decode_resource_list(text: str) -> list[Resource]:
    """Decode a JSON array of objects (``GET /objects``)."""
    parsed = load_json(text)
    if not isinstance(parsed, list):
        raise DecodeFailure(f"Expected a JSON array, got {type(parsed).__name__}")
    resources: list[Resource] = []
    for item in parsed:
        if not isinstance(item, dict):
            raise DecodeFailure(f"Expected array of objects, found {type(item).__name__}")
        resources.append(resource_from_dict(item))
    return resources


# ---------------------------------------------------------------------------
# Error bodies
# ---------------------------------------------------------------------------

def parse_error_payload(text: str | None) -> ErrorPayload | None:
    """
    Best-effort decode of an ``{error, message}`` body.

    Returns ``None`` when the body is empty, not JSON, or carries neither key.
    """
    if not text or not text.strip():
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None

    folded = {normalize_key(k): v for k, v in parsed.items()}
    error = folded.get("error")
    message = folded.get("message")
    if error is None and message is None:
        return None
    return ErrorPayload(
        error=None if error is None else str(error),
        message=None if message is None else str(message),
    )


def get_error_message(status_code: int, text: str | None, reason: str | None = None) -> str:
    """
    Human-readable message for an unsuccessful response.

    Preference order: ``message`` field, ``error`` field, raw body text, and
    finally a message synthesized from the status code.
    """
    if not text or not text.strip():
        return f"HTTP {status_code}: {reason or 'No response body'}"

    payload = parse_error_payload(text)
    if payload is not None:
        return payload.message or payload.error or text
    return text


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

def serialize_payload(payload: UpdateRequest | Mapping[str, Any]) -> str:
    """
    Encode a typed payload as a JSON request body.

    Raises:
        InvalidArgumentError: Payload is neither an UpdateRequest nor a mapping,
                              or holds values that cannot be JSON-encoded.
    """
    if isinstance(payload, UpdateRequest):
        body: Any = payload.to_dict()
    elif isinstance(payload, Mapping):
        body = dict(payload)
    else:
        raise InvalidArgumentError(
            f"Payload must be an UpdateRequest or a mapping, got {type(payload).__name__}"
        )

    try:
        return json.dumps(body, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Payload is not JSON-serializable: {exc}") from exc
