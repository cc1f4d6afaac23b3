"""
PATCH scenario catalog, execution ordering, and batch running.

Each scenario describes one PATCH call and the outcome the object API is
expected to produce.  Scenarios are plain data; run_scenario executes one
against a client and grades it, process_scenarios_batch runs a list and
prints a session summary.

generate_execution_order uses random.Random(seed) for an isolated RNG
instance rather than global random.seed() to avoid side effects.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .client import ResilientApiClient
from .config import DATA_SEED
from .data_builder import DataBuilder
from .errors import InvalidArgumentError, RetryExhaustedError, TransportFailure
from .models import UpdateRequest

OK = (200,)
REJECTED = (400, 422, 500)
NOT_FOUND = (404,)


@dataclass(frozen=True)
class PatchScenario:
    """
    One PATCH call and its expected outcome.

    Attributes:
        name: Label used in reports.
        payload: Typed body, serialized by the client.
        raw_body: Pre-encoded body sent verbatim (takes precedence).
        resource_id: Target id; the runner's own object is used when None.
        expected_statuses: Acceptable HTTP statuses.
        should_succeed: Expected ``is_successful``; None accepts either.
        check_name: When True and the call succeeds, the returned ``name``
                    must equal the name that was sent.
    """

    name: str
    payload: UpdateRequest | Mapping[str, Any] | None = None
    raw_body: str | None = None
    resource_id: str | None = None
    expected_statuses: tuple[int, ...] = OK
    should_succeed: bool | None = True
    check_name: bool = False

    def __post_init__(self):
        if self.payload is None and self.raw_body is None:
            raise InvalidArgumentError(f"Scenario {self.name!r} needs a payload or a raw_body")

    @property
    def sent_name(self) -> Any:
        if isinstance(self.payload, UpdateRequest):
            return self.payload.name
        if isinstance(self.payload, Mapping):
            return self.payload.get("name")
        return None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def valid_update_scenarios() -> list[PatchScenario]:
    """Name + data combinations the API must accept and echo back."""
    cases: list[tuple[str, dict[str, Any]]] = [
        ("Simple Name", {"color": "Red"}),
        ("Product 123", {"price": 99.99, "stock": 10}),
        ("Device XYZ", {"brand": "Apple", "model": "iPhone"}),
        ("Unicode 测试", {"language": "Chinese"}),
        ("Empty Data", {}),
        ("Complex Nested", {"level1": {"level2": "value"}}),
    ]
    return [
        PatchScenario(name=name, payload=UpdateRequest(name=name, data=data), check_name=True)
        for name, data in cases
    ]


def invalid_id_scenarios() -> list[PatchScenario]:
    """Ids that do not exist on the server."""
    cases = [
        ("Non-existent ID", "999999999"),
        ("Alphanumeric ID", "abc123"),
        ("Negative ID", "-1"),
        ("Zero ID", "0"),
        ("Very large ID", "9999999999999999999"),
    ]
    return [
        PatchScenario(
            name=label,
            payload=UpdateRequest(name="Test"),
            resource_id=object_id,
            expected_statuses=NOT_FOUND,
            should_succeed=False,
        )
        for label, object_id in cases
    ]


def malformed_json_scenarios() -> list[PatchScenario]:
    """Bodies that are not valid JSON objects; the API must reject them."""
    cases = [
        ("Missing closing brace", '{ "name": "test" '),
        ("Missing colon", '{ "name" "test" }'),
        ("Unquoted key", '{ name: "test" }'),
        ("Trailing comma", '{ "name": "test", }'),
        ("Single quotes", "{ \"name\": 'test' }"),
        ("Empty string", ""),
        ("JSON null", "null"),
        ("Undefined value", "undefined"),
        ("Plain text", "not json"),
        ("Missing value", '{ "name": }'),
    ]
    return [
        PatchScenario(name=label, raw_body=body, expected_statuses=REJECTED, should_succeed=False)
        for label, body in cases
    ]


def invalid_type_scenarios() -> list[PatchScenario]:
    """Well-formed JSON with wrong field types; the API may coerce or reject."""
    cases = [
        ("Number instead of string", '{ "name": 12345 }'),
        ("Boolean instead of string", '{ "name": true }'),
        ("Array instead of string", '{ "name": [] }'),
        ("Object instead of string", '{ "name": {} }'),
        ("String instead of object", '{ "data": "string" }'),
        ("Number instead of object", '{ "data": 123 }'),
        ("Array instead of object", '{ "data": [1,2,3] }'),
    ]
    return [
        PatchScenario(
            name=label,
            raw_body=body,
            expected_statuses=(200, 400, 422),
            should_succeed=None,
        )
        for label, body in cases
    ]


def unicode_scenarios() -> list[PatchScenario]:
    names = [
        "Chinese: 你好世界",
        "Arabic: مرحبا بك",
        "Russian: Привет мир",
        "Japanese: こんにちは",
        "Emoji: 🚀🎉✨🔥",
        "Mixed: Hello 世界 🌍",
        "Special: !@#$%^&*()",
        "Quotes: \"'`",
    ]
    return [
        PatchScenario(name=name, payload=UpdateRequest(name=name), check_name=True)
        for name in names
    ]


def field_combination_scenarios() -> list[PatchScenario]:
    return [
        PatchScenario(
            name="Name and Price",
            payload=UpdateRequest(name="Product A", data={"price": 99.99}),
        ),
        PatchScenario(
            name="Name and Multiple Fields",
            payload=UpdateRequest(
                name="Product B",
                data={"price": 149.99, "stock": 25, "category": "Electronics"},
            ),
        ),
        PatchScenario(name="Name Only", payload=UpdateRequest(name="Product C")),
        PatchScenario(name="Data Only", payload=UpdateRequest(data={"color": "Blue"})),
    ]


def dynamic_field_scenarios(
    builder: DataBuilder,
    counts: tuple[int, ...] = (10, 50, 100),
) -> list[PatchScenario]:
    """Large ``data`` mappings; the public API has been seen to answer 400/500."""
    return [
        PatchScenario(
            name=f"Dynamic_{count}",
            payload=UpdateRequest(name=f"Dynamic_{count}", data=builder.dynamic_data(count)),
            expected_statuses=(200, 400, 500),
            should_succeed=None,
        )
        for count in counts
    ]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def generate_execution_order(
    scenarios: list[PatchScenario],
    seed: int = DATA_SEED,
) -> list[PatchScenario]:
    """
    Reproducible shuffled copy of ``scenarios``.

    Args:
        scenarios: Scenarios in catalog order (not modified).
        seed: Random seed for reproducibility across runs.
    """
    rng = random.Random(seed)
    order = list(scenarios)
    rng.shuffle(order)
    return order


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def run_scenario(
    client: ResilientApiClient,
    resource_id: str,
    scenario: PatchScenario,
) -> dict:
    """
    Execute one scenario and grade the response.

    A transport failure that survives the retry budget is recorded as a
    failed result rather than raised, so one broken call does not abort a
    batch.

    Returns:
        Dict with keys ``scenario``, ``resource_id``, ``status_code``,
        ``is_successful``, ``passed``, ``duration_ms``, ``detail``.
    """
    target = scenario.resource_id or resource_id
    result: dict = {
        "scenario": scenario.name,
        "resource_id": target,
        "status_code": None,
        "is_successful": False,
        "passed": False,
        "duration_ms": None,
        "detail": None,
    }

    try:
        if scenario.raw_body is not None:
            envelope = client.patch_raw(target, scenario.raw_body)
        else:
            envelope = client.patch(target, scenario.payload)
    except (RetryExhaustedError, TransportFailure) as exc:
        result["detail"] = f"transport failure: {exc}"
        return result

    result.update(
        status_code=envelope.status_code,
        is_successful=envelope.is_successful,
        duration_ms=envelope.duration_ms,
    )

    problems: list[str] = []
    if envelope.status_code not in scenario.expected_statuses:
        problems.append(
            f"status {envelope.status_code} not in {list(scenario.expected_statuses)}"
        )
    if scenario.should_succeed is not None and envelope.is_successful != scenario.should_succeed:
        problems.append(f"is_successful={envelope.is_successful}, expected {scenario.should_succeed}")
    if scenario.check_name and envelope.is_successful:
        returned = envelope.data.name if envelope.data is not None else None
        if returned != scenario.sent_name:
            problems.append(f"name {returned!r} != sent {scenario.sent_name!r}")

    result["passed"] = not problems
    result["detail"] = "; ".join(problems) or envelope.error_message
    return result


def process_scenarios_batch(
    client: ResilientApiClient,
    scenarios: list[PatchScenario],
    resource_id_factory: Callable[[], str],
) -> dict:
    """
    Run every scenario, each against a fresh object from ``resource_id_factory``.

    Scenarios that carry their own ``resource_id`` do not consume a fresh
    object.

    Returns:
        Dict with ``results`` (list of result dicts), ``total``, ``passed``,
        ``failed`` and ``session_duration_seconds``.
    """
    session_start = datetime.now()
    results: list[dict] = []

    print(f"\nStarting scenario batch: {len(scenarios)} scenarios\n")

    for idx, scenario in enumerate(scenarios, start=1):
        resource_id = scenario.resource_id or resource_id_factory()
        result = run_scenario(client, resource_id, scenario)
        results.append(result)
        mark = "PASS" if result["passed"] else "FAIL"
        print(
            f"[{idx}/{len(scenarios)}] {mark} {scenario.name} "
            f"→ {result['status_code']}"
            + (f" ({result['detail']})" if not result["passed"] and result["detail"] else "")
        )

    passed = sum(1 for r in results if r["passed"])
    duration = (datetime.now() - session_start).total_seconds()
    summary = {
        "results": results,
        "total": len(results),
        "passed": passed,
        "failed": len(results) - passed,
        "session_duration_seconds": round(duration, 1),
    }

    sep = "=" * 60
    print(f"\n{sep}")
    print("SCENARIO BATCH COMPLETE")
    print(f"  Total:    {summary['total']}")
    print(f"  Passed:   {summary['passed']}")
    print(f"  Failed:   {summary['failed']}")
    print(f"  Duration: {duration:.1f} s")
    print(f"{sep}\n")

    return summary


# ---------------------------------------------------------------------------
# Cleanup
# ---------------------------------------------------------------------------

def delete_objects(client: ResilientApiClient, object_ids: list[str]) -> list[str]:
    """
    Delete every object in ``object_ids``, continuing past failures.

    A delete that exhausts its retries, fails in transport, or is answered
    with an error status is logged through the client's logger and does not
    stop the remaining deletes.

    Returns:
        Ids that could not be deleted.
    """
    failed: list[str] = []
    for object_id in object_ids:
        try:
            envelope = client.delete(object_id)
        except (RetryExhaustedError, TransportFailure) as exc:
            client.logger.error(f"Cleanup of object {object_id} failed", exc)
            failed.append(object_id)
            continue
        if not envelope.is_successful:
            client.logger.warning(
                f"Cleanup of object {object_id} returned {envelope.status_code}: "
                f"{envelope.error_message}"
            )
            failed.append(object_id)
    return failed
