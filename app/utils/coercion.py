"""Explicit coercion of loosely-typed request values.

Form posts and query strings deliver everything as text, so request models
run these helpers from ``mode="before"`` validators instead of relying on
implicit conversion rules.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

TRUE_STRINGS = {"true", "1", "yes", "on"}
FALSE_STRINGS = {"false", "0", "no", "off"}

TWO_PLACES = Decimal("0.01")


def parse_bool(value: Any) -> Optional[bool]:
    """Map ``"true"``/``"false"`` style strings onto bools.

    ``None`` passes through so optional fields stay unset. Integers are only
    accepted as 0/1; anything else raises ``ValueError``.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError("must be a boolean")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise ValueError("must be a boolean")


def parse_positive_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("must be a positive integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError("must be a positive integer")
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text.lstrip("+").isdigit():
            raise ValueError("must be a positive integer")
        number = int(text)
    else:
        raise ValueError("must be a positive integer")
    if number <= 0:
        raise ValueError("must be a positive integer")
    return number


def parse_price(value: Any) -> Optional[Decimal]:
    """Parse a non-negative price, rounded half-up to two decimal places."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Price must be a number")
    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("Price must be a number")
    if not amount.is_finite():
        raise ValueError("Price must be a number")
    if amount < 0:
        raise ValueError("Price cannot be negative")
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_date(value: Any) -> Optional[date]:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp and return the date part."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError("must be a date in YYYY-MM-DD format")
