"""
Unit tests for src/api_client/data_builder.py.
"""

from __future__ import annotations

import random
import re
from datetime import datetime, timezone

import pytest

from src.api_client.config import MOCK_OBJECT_IDS
from src.api_client.data_builder import CATEGORIES, COLORS, UNICODE_NAME, DataBuilder
from src.api_client.models import UpdateRequest

NOW = datetime(2024, 10, 4, 10, 30, tzinfo=timezone.utc)


class TestReproducibility:

    def test_same_seed_same_data(self):
        a, b = DataBuilder(seed=7), DataBuilder(seed=7)

        assert [a.random_product_data() for _ in range(5)] == [b.random_product_data() for _ in range(5)]
        assert a.unique_name(now=NOW) == b.unique_name(now=NOW)
        assert a.long_string(30) == b.long_string(30)

    def test_injected_rng_is_used(self):
        rng = random.Random(99)
        expected = random.Random(99).choice(MOCK_OBJECT_IDS)

        assert DataBuilder(rng=rng).random_mock_object_id() == expected

    def test_global_random_state_untouched(self):
        random.seed(5)
        before = random.random()
        random.seed(5)
        DataBuilder(seed=1).random_product_data()
        assert random.random() == before


class TestNames:

    def test_unique_name_format(self, builder):
        name = builder.unique_name("Item", now=NOW)
        assert re.fullmatch(r"Item_20241004_103000_\d{4}", name)

    def test_long_string(self, builder):
        assert len(builder.long_string(1000)) == 1000
        assert builder.long_string(0) == ""
        assert builder.long_string(50).isalnum()

    def test_long_string_negative(self, builder):
        with pytest.raises(ValueError):
            builder.long_string(-1)

    def test_unicode_name(self, builder):
        assert builder.unicode_name() == UNICODE_NAME
        assert not UNICODE_NAME.isascii()


class TestDataMappings:

    def test_random_product_data(self, builder):
        data = builder.random_product_data()

        assert data["color"] in COLORS
        assert data["category"] in CATEGORIES
        assert 0 <= data["price"] <= 1000
        assert isinstance(data["inStock"], bool)
        assert 0 <= data["quantity"] <= 99

    def test_product_data_includes_only_given_fields(self, builder):
        assert builder.product_data(color="Red") == {"color": "Red"}
        assert builder.product_data() == {}

    def test_device_data_defaults(self, builder):
        data = builder.device_data(year=2023)
        assert data == {"brand": "Apple", "model": "iPhone 15", "year": 2023, "color": "Black"}

    def test_dynamic_data(self, builder):
        data = builder.dynamic_data(3)
        assert data == {"field0": "value0", "field1": "value1", "field2": "value2"}
        assert len(builder.dynamic_data(100)) == 100

    def test_fixed_shapes(self, builder):
        assert builder.empty_data() == {}
        assert all(v is None for v in builder.null_value_data().values())
        assert builder.nested_data()["level1"]["level2"]["level3"] == "deeply nested value"
        assert builder.mixed_type_data()["nullField"] is None
        assert len(builder.special_character_data()) == 4

    def test_seed_data(self, builder):
        data = builder.seed_data(now=NOW)
        assert data == {"test": True, "createdBy": "AutomatedTest", "timestamp": NOW.isoformat()}


class TestUpdateRequests:

    def test_builders(self, builder):
        assert builder.name_only_update("n") == UpdateRequest(name="n")
        assert builder.data_only_update({"a": 1}) == UpdateRequest(data={"a": 1})
        assert builder.complete_update("n", {}) == UpdateRequest(name="n", data={})
