"""
Numeric widening/narrowing rules.

Raw numbers arrive from a JSON-like decoder as ``int``, ``float`` or
``Decimal``. The functions below implement the rule table applied when such a
value is bound to a numeric target:

==========  =====================  ==============================  ======================
target      raw int                raw float                       raw Decimal
==========  =====================  ==============================  ======================
int         identity + range       integral -> int + range         integral -> int + range
float       float(v), overflow     identity                        float(v), overflow
Decimal     Decimal(v)             finite -> Decimal(str(v))       identity
==========  =====================  ==============================  ======================

``bool`` is never a number here. Each rule returns :data:`NOT_NATIVE` when the
value cannot be bound without a registered converter (e.g. ``2.5`` to ``int``)
and raises :class:`NumericOverflowError` when the value is out of range. A
float target can hold nan and inf, so a non-finite ``Decimal`` becomes the
matching float; only a finite ``Decimal`` too large for a float overflows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Final

from ..exceptions import NumericOverflowError


class _NotNative:
    """Sentinel: the raw value needs a registered converter."""

    _instance: _NotNative | None = None

    def __new__(cls) -> _NotNative:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_NATIVE"

    def __bool__(self) -> bool:
        return False


NOT_NATIVE: Final = _NotNative()


@dataclass(frozen=True)
class NumericBounds:
    """Inclusive integer range, usable as ``Annotated[int, NumericBounds(...)]``."""

    minimum: int
    maximum: int
    label: str = "int"

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError("NumericBounds.minimum cannot exceed maximum")

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    @classmethod
    def signed(cls, bits: int) -> NumericBounds:
        """Range of a two's complement integer with the given width."""
        if bits < 2:
            raise ValueError("bits must be at least 2")
        return cls(-(2 ** (bits - 1)), 2 ** (bits - 1) - 1, f"int{bits}")


INT32: Final = NumericBounds.signed(32)
INT64: Final = NumericBounds.signed(64)
UINT32: Final = NumericBounds(0, 2**32 - 1, "uint32")


def is_number(value: Any) -> bool:
    """True for int, float and Decimal values; False for bool."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _check_range(value: int, bounds: NumericBounds | None, path: str | None) -> int:
    if bounds is not None and not bounds.contains(value):
        raise NumericOverflowError(
            f"Value {value} is out of range for {bounds.label} "
            f"[{bounds.minimum}, {bounds.maximum}]",
            path=path,
            expected_type=int,
            value=value,
        )
    return value


def to_int(value: Any, bounds: NumericBounds | None, path: str | None = None) -> Any:
    """Narrow a raw number to ``int`` or return :data:`NOT_NATIVE`."""
    if isinstance(value, bool):
        return NOT_NATIVE
    if isinstance(value, int):
        return _check_range(value, bounds, path)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise NumericOverflowError(
                f"Value {value} cannot be represented as an integer",
                path=path,
                expected_type=int,
                value=value,
            )
        if not value.is_integer():
            return NOT_NATIVE
        return _check_range(int(value), bounds, path)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise NumericOverflowError(
                f"Value {value} cannot be represented as an integer",
                path=path,
                expected_type=int,
                value=value,
            )
        if value != value.to_integral_value():
            return NOT_NATIVE
        return _check_range(int(value), bounds, path)
    return NOT_NATIVE


def to_float(value: Any, path: str | None = None) -> Any:
    """Widen a raw number to ``float`` or return :data:`NOT_NATIVE`."""
    if isinstance(value, bool):
        return NOT_NATIVE
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError as e:
            raise NumericOverflowError(
                "Integer value is too large for a float",
                path=path,
                expected_type=float,
                value=value,
            ) from e
    if isinstance(value, Decimal):
        converted = float(value)
        if math.isinf(converted) and value.is_finite():
            raise NumericOverflowError(
                "Decimal value is too large for a float",
                path=path,
                expected_type=float,
                value=value,
            )
        return converted
    return NOT_NATIVE


def to_decimal(value: Any, path: str | None = None) -> Any:
    """Convert a raw number to ``Decimal`` or return :data:`NOT_NATIVE`."""
    if isinstance(value, bool):
        return NOT_NATIVE
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise NumericOverflowError(
                f"Value {value} cannot be represented as a Decimal",
                path=path,
                expected_type=Decimal,
                value=value,
            )
        # str() keeps the shortest repr, avoiding binary float artefacts
        return Decimal(str(value))
    return NOT_NATIVE
