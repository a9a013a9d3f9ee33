"""Range helpers shared by tier validation, lookup and the grid view.

Tier ranges are closed intervals ``[lower, upper]`` where ``upper=None`` means
unbounded above.
"""

from decimal import Decimal
from typing import Optional, Union

from quantum_rates.utils.money import format_currency

Number = Union[int, Decimal]

INFINITY = Decimal("Infinity")


def upper_or_infinity(upper: Optional[Number]) -> Decimal:
    return INFINITY if upper is None else Decimal(upper)


def ranges_intersect(
    lower_a: Number,
    upper_a: Optional[Number],
    lower_b: Number,
    upper_b: Optional[Number],
) -> bool:
    """
    Half-open intersection test used for conflict detection.

    Ranges that only touch at a boundary (``[0, 1000]`` and ``[1000, None]``)
    do not intersect.
    """
    return lower_a < upper_or_infinity(upper_b) and upper_or_infinity(upper_a) > lower_b


def ranges_touch_or_intersect(
    lower_a: Number,
    upper_a: Optional[Number],
    lower_b: Number,
    upper_b: Optional[Number],
) -> bool:
    """Closed-interval intersection: shared boundaries count"""
    return lower_a <= upper_or_infinity(upper_b) and upper_or_infinity(upper_a) >= lower_b


def contains(lower: Number, upper: Optional[Number], value: Number) -> bool:
    return value >= lower and (upper is None or value <= upper)


def bounds_equal(a: Optional[Number], b: Optional[Number], tolerance: Decimal) -> bool:
    """Numeric equality within tolerance; two open bounds are equal, open vs closed is not"""
    if a is None or b is None:
        return a is None and b is None
    return abs(Decimal(a) - Decimal(b)) < tolerance


def term_label(lower: int, upper: Optional[int]) -> str:
    if upper is None:
        return f"{lower} days or more"
    return f"{lower} - {upper} days"


def amount_label(lower: Decimal, upper: Optional[Decimal]) -> str:
    if upper is None:
        return f"{format_currency(lower)} onward"
    return f"{format_currency(lower)} - {format_currency(upper)}"
