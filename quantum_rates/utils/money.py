"""Decimal helpers for currency and rate values"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def is_number(value: Any) -> bool:
    """True for int/float/Decimal (not bool) holding a finite value"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return to_decimal(value).is_finite()


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert wire/user numbers to Decimal via str() so floats keep their printed digits"""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e


def format_currency(value: Decimal) -> str:
    """$1,234.50 style formatting"""
    return f"${value:,.2f}"
