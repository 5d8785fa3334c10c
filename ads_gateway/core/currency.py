"""
Currency Units
==============

The Marketing API stores monetary amounts as integer minor units (cents),
frequently serialized as strings. The public API exposes decimal major units.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

MINOR_UNITS_PER_MAJOR = 100

Amount = Union[int, float, str, Decimal]


def to_minor_units(amount: Amount) -> int:
    """
    Convert a major-unit amount to integer minor units.

    Args:
        amount: Amount in major units, e.g. 12.34

    Returns:
        Amount in minor units, e.g. 1234

    Raises:
        ValueError: If the amount is not numeric or is negative
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    minor = (value * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


def to_major_units(amount: Optional[Amount]) -> Optional[float]:
    """Convert minor units (int or numeric string) to a major-unit float.

    Missing and empty values map to None.
    """
    if amount is None or amount == "":
        return None
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    return float(value / MINOR_UNITS_PER_MAJOR)
