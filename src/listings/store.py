"""Read side of the property tables."""
from __future__ import annotations

import logging

from django.db import DatabaseError

from core.exceptions import DataFetchFailure
from core.identifiers import normalize_agency, normalize_agent
from core.serializers import decode_rows
from listings.records import PropertyRecord
from listings.serializers import PropertyRowSerializer

logger = logging.getLogger(__name__)

PROPERTY_FIELDS = (
    "id",
    "agency_name",
    "agent_name",
    "suburb",
    "street_name",
    "street_number",
    "property_type",
    "price",
    "sold_price",
    "commission_rate",
    "contract_status",
    "listed_date",
    "sold_date",
)


def _override_rates(property_ids) -> dict:
    """``{property_id: {normalized agent: rate}}`` from AgentCommission rows."""
    from listings.models import AgentCommission

    overrides: dict[str, dict[str, object]] = {}
    rows = (
        AgentCommission.objects.filter(property_id__in=property_ids)
        .order_by("-updated_at")
        .values_list("property_id", "agent_name", "commission_rate")
    )
    for property_id, agent_name, rate in rows:
        overrides.setdefault(str(property_id), {}).setdefault(normalize_agent(agent_name), rate)
    return overrides


def _effective_rate(row: dict, overrides: dict):
    by_agent = overrides.get(row["id"])
    if not by_agent:
        return row["commission_rate"]
    agent = normalize_agent(row["agent_name"])
    if agent in by_agent:
        return by_agent[agent]
    return next(iter(by_agent.values()))


def fetch_properties(agency: str | None = None) -> list[PropertyRecord]:
    """Every property, or only those whose normalized agency equals *agency*.

    Agent-specific commission overrides are folded into ``commission_rate``
    here so the rollup sees one effective rate per property.
    """
    from listings.models import Property

    try:
        rows = list(Property.objects.order_by("created_at", "id").values(*PROPERTY_FIELDS))
        for row in rows:
            row["id"] = str(row["id"])
        overrides = _override_rates([row["id"] for row in rows]) if rows else {}
    except DatabaseError as exc:
        logger.error("fetch_properties failed: %s", exc)
        raise DataFetchFailure("properties", str(exc)) from exc

    for row in rows:
        row["commission_rate"] = _effective_rate(row, overrides)
    if agency is not None:
        wanted = normalize_agency(agency)
        rows = [row for row in rows if normalize_agency(row["agency_name"]) == wanted]
    return decode_rows(rows, PropertyRowSerializer, source="property")
