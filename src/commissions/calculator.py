"""Commission earned on a single property."""
from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def _field(prop, name):
    if isinstance(prop, Mapping):
        return prop.get(name)
    return getattr(prop, name, None)


def _to_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def base_price(prop) -> Decimal:
    """Sold price when present, else the listed price, else 0."""
    sold = _to_decimal(_field(prop, "sold_price"))
    if sold is not None:
        return sold
    price = _to_decimal(_field(prop, "price"))
    return price if price is not None else ZERO


def commission(prop, rate=None) -> Decimal:
    """``base_price * rate / 100``; 0 when the rate or the base price is missing or non-positive.

    *rate* replaces ``commission_rate`` (used by the simulator).  Accepts a
    :class:`~listings.records.PropertyRecord` or a plain mapping.
    """
    if rate is None:
        rate = _field(prop, "commission_rate")
    rate = _to_decimal(rate)
    price = base_price(prop)
    if rate is None or not rate.is_finite() or not price.is_finite():
        return ZERO
    if rate <= ZERO or price <= ZERO:
        return ZERO
    return (price * rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
