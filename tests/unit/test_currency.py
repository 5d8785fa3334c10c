"""
Unit Tests for Currency Conversion
==================================
"""

from decimal import Decimal

import pytest

from ads_gateway.core.currency import to_major_units, to_minor_units


class TestToMinorUnits:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (12.34, 1234),
            (0.1 + 0.2, 30),
            ("19.999", 2000),
            (Decimal("5"), 500),
            (7, 700),
            (0.005, 1),
        ],
    )
    def test_conversion(self, amount, expected):
        assert to_minor_units(amount) == expected

    @pytest.mark.parametrize("amount", ["abc", -1, float("nan"), float("inf")])
    def test_invalid_amounts(self, amount):
        with pytest.raises(ValueError):
            to_minor_units(amount)


class TestToMajorUnits:
    def test_string_minor_units(self):
        assert to_major_units("1234") == pytest.approx(12.34)

    def test_integer_minor_units(self):
        assert to_major_units(250000) == pytest.approx(2500.0)

    @pytest.mark.parametrize("amount", [None, ""])
    def test_missing_values(self, amount):
        assert to_major_units(amount) is None

    def test_inverse_of_to_minor_units(self):
        assert to_major_units(to_minor_units(12.34)) == pytest.approx(12.34)
