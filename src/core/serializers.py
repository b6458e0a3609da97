"""Lenient DRF fields used to decode raw store rows into typed records.

Free-text forms let agents save targets such as ``""``, ``"12 "`` or
``"twenty"``.  Counts never fail validation: anything unusable becomes 0 and
a warning is logged, so one sloppy row cannot hide the rest of the data.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from rest_framework import serializers

logger = logging.getLogger(__name__)


def _is_blank(data) -> bool:
    return data is None or (isinstance(data, str) and not data.strip())


def parse_count(value, *, label: str = "count") -> int:
    """Non-negative integer from *value*; missing or malformed -> 0."""
    if _is_blank(value):
        return 0
    if isinstance(value, bool):
        logger.warning("Malformed %s %r, using 0", label, value)
        return 0
    try:
        parsed = int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, TypeError, OverflowError):
        logger.warning("Malformed %s %r, using 0", label, value)
        return 0
    return max(0, parsed)


def parse_decimal(value, *, label: str = "amount") -> Decimal | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        logger.warning("Malformed %s %r, ignoring", label, value)
        return None
    if not parsed.is_finite():
        logger.warning("Non-finite %s %r, ignoring", label, value)
        return None
    return parsed


class LenientCountField(serializers.Field):
    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("default", 0)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if _is_blank(data):
            return (True, 0)
        return super().validate_empty_values(data)

    def to_internal_value(self, data):
        return parse_count(data, label=self.field_name or "count")

    def to_representation(self, value):
        return value


class LenientDecimalField(serializers.Field):
    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("default", None)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if _is_blank(data):
            return (True, None)
        return super().validate_empty_values(data)

    def to_internal_value(self, data):
        return parse_decimal(data, label=self.field_name or "amount")

    def to_representation(self, value):
        return None if value is None else str(value)


class TextField(serializers.CharField):
    """CharField that reads ``None`` as an empty string."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("default", "")
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if data is None:
            return (True, "")
        return super().validate_empty_values(data)


class LenientDateField(serializers.DateField):
    """DateField that reads ``None`` / ``""`` as no date."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        kwargs.setdefault("default", None)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if _is_blank(data):
            return (True, None)
        return super().validate_empty_values(data)


def decode_rows(rows, serializer_class, *, source: str) -> list:
    """Decode every valid row with *serializer_class*; invalid rows are logged and skipped."""
    records = []
    for row in rows:
        serializer = serializer_class(data=row)
        if serializer.is_valid():
            records.append(serializer.to_record())
        else:
            logger.warning("Skipping %s row %s: %s", source, row.get("id"), serializer.errors)
    return records
