"""Unit tests for the numeric widening/narrowing rules."""

import math
from decimal import Decimal

import pytest

from argbind.core.numeric import (
    INT32,
    INT64,
    NOT_NATIVE,
    UINT32,
    NumericBounds,
    is_number,
    to_decimal,
    to_float,
    to_int,
)
from argbind.exceptions import NumericOverflowError


class TestNumericBounds:
    def test_signed_ranges(self) -> None:
        assert (INT32.minimum, INT32.maximum) == (-(2**31), 2**31 - 1)
        assert (INT64.minimum, INT64.maximum) == (-(2**63), 2**63 - 1)
        assert UINT32.contains(0) and not UINT32.contains(-1)

    def test_invalid_range(self) -> None:
        with pytest.raises(ValueError):
            NumericBounds(10, 1)

    def test_invalid_width(self) -> None:
        with pytest.raises(ValueError):
            NumericBounds.signed(1)


class TestToInt:
    def test_int_within_range(self) -> None:
        assert to_int(42, INT32) == 42

    def test_int_out_of_range(self) -> None:
        with pytest.raises(NumericOverflowError) as exc:
            to_int(2**31, INT32, "id")
        assert exc.value.context["path"] == "id"
        assert exc.value.context["value"] == str(2**31)

    def test_no_bounds(self) -> None:
        assert to_int(2**80, None) == 2**80

    def test_integral_float(self) -> None:
        result = to_int(7.0, INT32)
        assert result == 7 and type(result) is int

    def test_fractional_float_not_native(self) -> None:
        assert to_int(7.5, INT32) is NOT_NATIVE

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("Infinity")])
    def test_non_finite(self, value: object) -> None:
        with pytest.raises(NumericOverflowError):
            to_int(value, INT64)

    def test_decimal(self) -> None:
        assert to_int(Decimal("12"), INT32) == 12
        assert to_int(Decimal("12.5"), INT32) is NOT_NATIVE

    def test_integral_float_out_of_range(self) -> None:
        with pytest.raises(NumericOverflowError):
            to_int(1e20, INT64)

    @pytest.mark.parametrize("value", [True, "12", None])
    def test_not_native(self, value: object) -> None:
        assert to_int(value, INT64) is NOT_NATIVE


class TestToFloat:
    def test_int_widens(self) -> None:
        assert to_float(2) == 2.0

    def test_huge_int_overflows(self) -> None:
        with pytest.raises(NumericOverflowError):
            to_float(10**400)

    def test_decimal(self) -> None:
        assert to_float(Decimal("1.5")) == 1.5

    def test_huge_decimal_overflows(self) -> None:
        with pytest.raises(NumericOverflowError):
            to_float(Decimal("1e400"))

    def test_non_finite_decimal_keeps_its_value(self) -> None:
        assert math.isnan(to_float(Decimal("NaN")))
        assert to_float(Decimal("Infinity")) == float("inf")
        assert to_float(Decimal("-Infinity")) == float("-inf")

    def test_bool_not_native(self) -> None:
        assert to_float(False) is NOT_NATIVE


class TestToDecimal:
    def test_values(self) -> None:
        assert to_decimal(3) == Decimal(3)
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(Decimal("2.50")) == Decimal("2.50")

    def test_nan_overflows(self) -> None:
        with pytest.raises(NumericOverflowError):
            to_decimal(float("nan"))

    def test_string_not_native(self) -> None:
        assert to_decimal("0.1") is NOT_NATIVE


def test_is_number() -> None:
    assert is_number(1) and is_number(1.5) and is_number(Decimal(1))
    assert not is_number(True)
    assert not is_number("1")


def test_not_native_is_falsy_singleton() -> None:
    assert not NOT_NATIVE
    assert repr(NOT_NATIVE) == "NOT_NATIVE"
