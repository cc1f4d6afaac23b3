"""
Small assertion and formatting helpers shared by the scenario runner and tests.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from .models import Resource


def is_success_status_code(status_code: int) -> bool:
    return 200 <= status_code < 300


def is_status_code_in_range(actual: int, expected: Iterable[int]) -> bool:
    """True if ``actual`` is one of the ``expected`` statuses."""
    return actual in set(expected)


def validate_object_structure(obj: Resource | None) -> bool:
    """A usable object has a non-empty id and a (possibly empty) name."""
    if obj is None:
        return False
    return bool(obj.id) and obj.name is not None


def are_data_dicts_equal(
    first: Mapping[str, Any] | None,
    second: Mapping[str, Any] | None,
) -> bool:
    """
    Compare two ``data`` mappings key by key on the string form of each value.

    The API may return ``99.99`` where ``"99.99"`` was sent (or vice versa),
    so values are compared as text; ``None`` compares equal only to ``None``.
    """
    if first is None and second is None:
        return True
    if first is None or second is None:
        return False
    if len(first) != len(second):
        return False

    for key, value in first.items():
        if key not in second:
            return False
        other = second[key]
        if (value is None) != (other is None):
            return False
        if value is not None and str(value) != str(other):
            return False
    return True


def is_response_time_acceptable(duration_ms: float, max_milliseconds: float = 2000) -> bool:
    return duration_ms <= max_milliseconds


def format_timestamp(timestamp: datetime | None) -> str:
    """``2024-10-04 10:30:00.000 UTC``, or ``N/A`` when absent."""
    if timestamp is None:
        return "N/A"
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return f"{timestamp:%Y-%m-%d %H:%M:%S}.{timestamp.microsecond // 1000:03d} UTC"


def sanitize_object_id(object_id: str | None) -> str:
    if object_id is None or not object_id.strip():
        return "unknown"
    return object_id.strip()


def is_json_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return "application/json" in content_type.lower()


def generate_test_run_id(now: datetime | None = None, token: str | None = None) -> str:
    """
    Unique label for a test run: ``TestRun_20241004_103000_<hex>``.

    Pass ``now`` and ``token`` to get a reproducible id.
    """
    now = now or datetime.now(timezone.utc)
    token = token or uuid.uuid4().hex
    return f"TestRun_{now:%Y%m%d_%H%M%S}_{token}"


def is_update_timestamp_valid(
    created_at: datetime | None,
    updated_at: datetime | None,
) -> bool:
    """
    ``updated_at`` must be present and not earlier than ``created_at``.

    Returns False when either timestamp is missing.
    """
    if created_at is None or updated_at is None:
        return False
    return updated_at >= created_at
