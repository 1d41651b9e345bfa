"""Tests for currency map arithmetic."""

from decimal import Decimal

import pytest

from pvdot.rebalancing.vector import elementwise_product, normalize, total


class TestTotal:
    def test_empty_map_sums_to_zero(self):
        assert total({}) == Decimal(0)

    def test_sums_values(self):
        assert total({"BTC": Decimal("0.25"), "ETH": Decimal("0.5")}) == Decimal("0.75")


class TestNormalize:
    def test_sums_to_one(self):
        m = {"BTC": Decimal("3"), "ETH": Decimal("1"), "USDT": Decimal("4")}
        normalized = normalize(m)
        assert abs(total(normalized) - 1) < Decimal("1e-20")
        assert normalized["BTC"] == Decimal("0.375")
        assert normalized["USDT"] == Decimal("0.5")

    def test_already_normalized_returned_unchanged(self):
        m = {"BTC": Decimal("0.6"), "USDT": Decimal("0.4")}
        assert normalize(m) is m

    def test_idempotent(self):
        m = {"BTC": Decimal("2"), "ETH": Decimal("3"), "USDT": Decimal("5")}
        once = normalize(m)
        assert normalize(once) == once

    def test_does_not_mutate_input(self):
        m = {"BTC": Decimal("2"), "USDT": Decimal("2")}
        normalize(m)
        assert m == {"BTC": Decimal("2"), "USDT": Decimal("2")}

    def test_zero_sum_is_a_precondition_violation(self):
        with pytest.raises(ArithmeticError):
            normalize({"BTC": Decimal(0), "USDT": Decimal(0)})


class TestElementwiseProduct:
    def test_multiplies_matching_keys(self):
        prices = {"BTC": Decimal("100"), "USDT": Decimal("1")}
        quantities = {"BTC": Decimal("2"), "USDT": Decimal("50")}
        assert elementwise_product(prices, quantities) == {
            "BTC": Decimal("200"),
            "USDT": Decimal("50"),
        }

    def test_missing_key_in_second_map_is_zero(self):
        result = elementwise_product({"BTC": Decimal("100")}, {})
        assert result == {"BTC": Decimal(0)}

    def test_keys_only_in_second_map_are_ignored(self):
        result = elementwise_product(
            {"BTC": Decimal("100")},
            {"BTC": Decimal("1"), "ETH": Decimal("7")},
        )
        assert set(result) == {"BTC"}

    @pytest.mark.parametrize(
        "m1,m2",
        [
            ({}, {"BTC": Decimal(1)}),
            ({"BTC": Decimal(1), "ETH": Decimal(2)}, {}),
            ({"ETH": Decimal(2)}, {"BTC": Decimal(1), "ETH": Decimal(3)}),
        ],
    )
    def test_key_set_matches_first_map(self, m1, m2):
        assert set(elementwise_product(m1, m2)) == set(m1)
