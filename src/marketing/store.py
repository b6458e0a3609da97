"""Read side of the plan / activity tables.

The only place the progress engine's inputs touch the ORM.  Rows are pulled
with ``values()`` and decoded through the boundary serializers, so callers
only ever see :mod:`marketing.records` values.
"""
from __future__ import annotations

import logging

from django.db import DatabaseError

from core.exceptions import DataFetchFailure
from core.identifiers import UNKNOWN, suburb_key
from core.serializers import decode_rows
from marketing.records import Activity, Plan
from marketing.serializers import ActivityRowSerializer, PlanRowSerializer

logger = logging.getLogger(__name__)

PLAN_FIELDS = (
    "id",
    "agent_id",
    "suburb",
    "start_date",
    "end_date",
    "door_knock_streets",
    "phone_call_streets",
    "target_connects",
    "target_desktop_appraisals",
    "target_face_to_face_appraisals",
)

ACTIVITY_FIELDS = (
    "id",
    "agent_id",
    "activity_type",
    "suburb",
    "street_name",
    "activity_date",
    "knocks_made",
    "calls_connected",
    "calls_answered",
    "desktop_appraisals",
    "face_to_face_appraisals",
    "tags",
    "property_id",
)


def _stringify_ids(row: dict) -> dict:
    for key in ("id", "agent_id", "property_id"):
        if row.get(key) is not None:
            row[key] = str(row[key])
    return row


def fetch_plans(agent_id) -> list[Plan]:
    """All plans owned by *agent_id*, most recently updated first."""
    from marketing.models import MarketingPlan

    try:
        rows = list(
            MarketingPlan.objects.filter(agent_id=agent_id)
            .order_by("-updated_at", "id")
            .values(*PLAN_FIELDS)
        )
    except DatabaseError as exc:
        logger.error("fetch_plans failed for agent=%s: %s", agent_id, exc)
        raise DataFetchFailure("marketing_plans", str(exc)) from exc
    return decode_rows((_stringify_ids(r) for r in rows), PlanRowSerializer, source="plan")


def fetch_activities(agent_id, suburb: str | None = None) -> list[Activity]:
    """Activities logged by *agent_id*, optionally limited to one suburb.

    Suburb equality is checked on the normalized key, not on the raw column,
    so "Moggill" and "Moggill QLD (4070)" land in the same view.
    """
    from marketing.models import AgentActivity

    try:
        rows = list(
            AgentActivity.objects.filter(agent_id=agent_id)
            .order_by("activity_date", "created_at", "id")
            .values(*ACTIVITY_FIELDS)
        )
    except DatabaseError as exc:
        logger.error("fetch_activities failed for agent=%s: %s", agent_id, exc)
        raise DataFetchFailure("agent_activities", str(exc)) from exc

    activities = decode_rows((_stringify_ids(r) for r in rows), ActivityRowSerializer, source="activity")
    if suburb is None:
        return activities
    wanted = suburb_key(suburb)
    if wanted == UNKNOWN:
        return []
    return [a for a in activities if suburb_key(a.suburb) == wanted]
