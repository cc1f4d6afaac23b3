"""
Test data construction for object payloads.

All randomness flows through the ``random.Random`` instance handed to
DataBuilder (seeded from DATA_SEED by default), never the global ``random``
state, so a test run with a fixed seed always produces the same data.
"""

from __future__ import annotations

import random
import string
from datetime import datetime, timezone
from typing import Any

from .config import DATA_SEED, MOCK_OBJECT_IDS
from .models import UpdateRequest

COLORS: tuple[str, ...] = ("Red", "Blue", "Green", "Black", "White", "Silver")
CATEGORIES: tuple[str, ...] = ("Electronics", "Clothing", "Books", "Toys", "Sports")
LONG_STRING_ALPHABET = string.ascii_letters + string.digits

UNICODE_NAME = "Unicode Test: 你好世界 مرحبا العالم Здравствуй мир 🚀🎉✨"


class DataBuilder:
    """
    Builds names, ``data`` mappings and UpdateRequests for test scenarios.

    Args:
        rng: Random generator to draw from; created from ``seed`` if omitted.
        seed: Seed for the generator created when ``rng`` is not supplied.
    """

    def __init__(self, rng: random.Random | None = None, seed: int = DATA_SEED):
        self.rng = rng if rng is not None else random.Random(seed)

    # ── Names ─────────────────────────────────────────────────────────────

    def unique_name(self, prefix: str = "Test Object", now: datetime | None = None) -> str:
        """``{prefix}_{YYYYmmdd_HHMMSS}_{4-digit suffix}``."""
        now = now or datetime.now(timezone.utc)
        suffix = self.rng.randint(1000, 9999)
        return f"{prefix}_{now:%Y%m%d_%H%M%S}_{suffix}"

    def long_string(self, length: int) -> str:
        if length < 0:
            raise ValueError(f"length must not be negative, got {length}")
        return "".join(self.rng.choice(LONG_STRING_ALPHABET) for _ in range(length))

    def unicode_name(self) -> str:
        return UNICODE_NAME

    def random_mock_object_id(self) -> str:
        return self.rng.choice(MOCK_OBJECT_IDS)

    # ── Data mappings ─────────────────────────────────────────────────────

    def product_data(
        self,
        color: str | None = None,
        price: float | None = None,
        quantity: int | None = None,
    ) -> dict[str, Any]:
        """Only the supplied fields are included."""
        data: dict[str, Any] = {}
        if color is not None:
            data["color"] = color
        if price is not None:
            data["price"] = price
        if quantity is not None:
            data["quantity"] = quantity
        return data

    def device_data(
        self,
        brand: str | None = None,
        model: str | None = None,
        year: int | None = None,
        color: str | None = None,
    ) -> dict[str, Any]:
        return {
            "brand": brand or "Apple",
            "model": model or "iPhone 15",
            "year": year if year is not None else datetime.now(timezone.utc).year,
            "color": color or "Black",
        }

    def random_product_data(self) -> dict[str, Any]:
        return {
            "color": self.rng.choice(COLORS),
            "price": round(self.rng.random() * 1000, 2),
            "category": self.rng.choice(CATEGORIES),
            "inStock": self.rng.randint(0, 1) == 1,
            "quantity": self.rng.randint(0, 99),
        }

    def special_character_data(self) -> dict[str, Any]:
        return {
            "field1": "Value with spaces",
            "field2": "Value!@#$%^&*()",
            "field3": "Value_with-dashes.and.dots",
            "field4": "Value/with\\slashes",
        }

    def mixed_type_data(self) -> dict[str, Any]:
        return {
            "stringField": "text value",
            "intField": 42,
            "doubleField": 3.14159,
            "boolField": True,
            "nullField": None,
            "arrayField": [1, 2, 3],
        }

    def nested_data(self) -> dict[str, Any]:
        return {
            "level1": {
                "level2": {
                    "level3": "deeply nested value",
                    "level3_array": ["item1", "item2"],
                },
            },
            "simple_field": "simple value",
        }

    def empty_data(self) -> dict[str, Any]:
        return {}

    def null_value_data(self) -> dict[str, Any]:
        return {"field1": None, "field2": None, "field3": None}

    def dynamic_data(self, field_count: int) -> dict[str, Any]:
        """``{"field0": "value0", …}`` with ``field_count`` entries."""
        return {f"field{i}": f"value{i}" for i in range(field_count)}

    def seed_data(self, now: datetime | None = None) -> dict[str, Any]:
        """Default ``data`` for objects created by the harness itself."""
        now = now or datetime.now(timezone.utc)
        return {"test": True, "createdBy": "AutomatedTest", "timestamp": now.isoformat()}

    # ── Update requests ───────────────────────────────────────────────────

    def name_only_update(self, name: str) -> UpdateRequest:
        return UpdateRequest(name=name)

    def data_only_update(self, data: dict[str, Any]) -> UpdateRequest:
        return UpdateRequest(data=data)

    def complete_update(self, name: str, data: dict[str, Any]) -> UpdateRequest:
        return UpdateRequest(name=name, data=data)
