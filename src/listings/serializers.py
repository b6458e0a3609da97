"""Boundary decoder: raw property rows -> :class:`PropertyRecord`."""
from __future__ import annotations

from rest_framework import serializers

from core.serializers import LenientDateField, LenientDecimalField, TextField
from listings.records import PropertyRecord


class PropertyRowSerializer(serializers.Serializer):
    id = serializers.CharField()
    agency_name = TextField()
    agent_name = TextField()
    suburb = TextField()
    street_name = TextField()
    street_number = TextField()
    property_type = TextField()
    price = LenientDecimalField()
    sold_price = LenientDecimalField()
    commission_rate = LenientDecimalField()
    contract_status = TextField()
    listed_date = LenientDateField()
    sold_date = LenientDateField()

    def to_record(self) -> PropertyRecord:
        return PropertyRecord(**self.validated_data)
