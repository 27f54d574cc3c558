"""Tests for the inventory guard."""

import pytest

from jewelpos.core.exceptions import InsufficientStockError, InvalidInputError
from jewelpos.core.services.inventory_guard import aggregate_quantities, reserve


class TestReserve:
    def test_returns_remaining_stock(self):
        assert reserve(5, 2) == 3

    def test_last_unit(self):
        assert reserve(1, 1) == 0

    def test_short_stock_raises(self):
        with pytest.raises(InsufficientStockError) as exc_info:
            reserve(1, 2, product_id="p-1")
        assert exc_info.value.available == 1
        assert exc_info.value.requested == 2
        assert exc_info.value.product_id == "p-1"

    def test_negative_allowed_by_policy(self):
        assert reserve(1, 3, allow_negative=True) == -2

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity(self, qty):
        with pytest.raises(InvalidInputError):
            reserve(10, qty)


class TestAggregateQuantities:
    def test_sums_repeated_products(self):
        assert aggregate_quantities([("a", 1), ("b", 2), ("a", 3)]) == {"a": 4, "b": 2}

    def test_keeps_first_seen_order(self):
        assert list(aggregate_quantities([("b", 1), ("a", 1), ("b", 1)])) == ["b", "a"]
