"""Boundary decoders: raw plan / activity rows -> validated records."""
from __future__ import annotations

import logging

from rest_framework import serializers

from core.identifiers import normalize_street
from core.serializers import LenientCountField, LenientDateField, TextField
from marketing.records import Activity, ActivityType, DoorKnockStreet, Plan, PhoneCallStreet

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────
# Plans
# ────────────────────────────────────────────────────────────

class DoorKnockStreetSerializer(serializers.Serializer):
    name = serializers.CharField()
    why = TextField()
    house_count = LenientCountField()
    target_knocks = LenientCountField()
    target_answers = LenientCountField()


class PhoneCallStreetSerializer(serializers.Serializer):
    name = serializers.CharField()
    why = TextField()
    target_calls = LenientCountField()


def _decode_streets(entries, serializer_class, record_class, *, plan_id, kind):
    streets = []
    seen = set()
    for entry in entries or []:
        serializer = serializer_class(data=entry if isinstance(entry, dict) else {})
        if not serializer.is_valid():
            logger.warning("Skipping %s street in plan %s: %s", kind, plan_id, serializer.errors)
            continue
        data = dict(serializer.validated_data)
        data["name"] = normalize_street(data["name"])
        if data["name"] in seen:
            logger.warning("Duplicate %s street %r in plan %s ignored", kind, data["name"], plan_id)
            continue
        seen.add(data["name"])
        streets.append(record_class(**data))
    return tuple(streets)


class PlanRowSerializer(serializers.Serializer):
    id = serializers.CharField()
    agent_id = serializers.CharField()
    suburb = TextField()
    start_date = LenientDateField()
    end_date = LenientDateField()
    door_knock_streets = serializers.JSONField(required=False, default=list)
    phone_call_streets = serializers.JSONField(required=False, default=list)
    target_connects = LenientCountField()
    target_desktop_appraisals = LenientCountField()
    target_face_to_face_appraisals = LenientCountField()

    def validate_door_knock_streets(self, value):
        return value if isinstance(value, list) else []

    def validate_phone_call_streets(self, value):
        return value if isinstance(value, list) else []

    def to_record(self) -> Plan:
        data = dict(self.validated_data)
        plan_id = data["id"]
        data["door_knock_streets"] = _decode_streets(
            data["door_knock_streets"], DoorKnockStreetSerializer, DoorKnockStreet,
            plan_id=plan_id, kind="door knock",
        )
        data["phone_call_streets"] = _decode_streets(
            data["phone_call_streets"], PhoneCallStreetSerializer, PhoneCallStreet,
            plan_id=plan_id, kind="phone call",
        )
        return Plan(**data)


# ────────────────────────────────────────────────────────────
# Activities
# ────────────────────────────────────────────────────────────

def _decode_tags(raw, *, activity_id) -> tuple[str, ...]:
    """Tags are free-form JSON; only non-blank strings survive."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        logger.warning("Ignoring tags %r on activity %s", raw, activity_id)
        return ()
    tags = []
    for item in raw:
        if isinstance(item, str) and item.strip():
            tags.append(item.strip())
        else:
            logger.warning("Ignoring tag %r on activity %s", item, activity_id)
    return tuple(tags)


class ActivityRowSerializer(serializers.Serializer):
    id = serializers.CharField()
    agent_id = serializers.CharField()
    activity_type = serializers.ChoiceField(choices=ActivityType.ALL)
    suburb = TextField()
    street_name = TextField()
    activity_date = LenientDateField()
    knocks_made = LenientCountField()
    calls_connected = LenientCountField()
    calls_answered = LenientCountField()
    desktop_appraisals = LenientCountField()
    face_to_face_appraisals = LenientCountField()
    tags = serializers.JSONField(required=False, allow_null=True, default=list)
    property_id = serializers.CharField(required=False, allow_null=True, default=None)

    def to_record(self) -> Activity:
        data = dict(self.validated_data)
        data["street_name"] = normalize_street(data["street_name"])
        data["tags"] = _decode_tags(data.get("tags"), activity_id=data["id"])
        return Activity(**data)
