"""Celery tasks for the progress module."""
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger("crm")


@shared_task
def audit_identifier_quality():
    """
    Scheduled daily (Celery Beat).
    Count identifiers that fall back to "Unknown" and activity logged against
    streets no plan declares, so data entry problems surface in the logs.
    """
    from django.contrib.auth import get_user_model

    from core.context import Session
    from core.identifiers import UNKNOWN, normalize_agency, normalize_agent, normalize_suburb
    from listings.store import fetch_properties
    from marketing.models import MarketingPlan
    from progress.services import ProgressService

    properties = fetch_properties()
    summary = {
        "properties": len(properties),
        "unknown_suburbs": sum(1 for p in properties if normalize_suburb(p.suburb) == UNKNOWN),
        "unknown_agencies": sum(1 for p in properties if normalize_agency(p.agency_name) == UNKNOWN),
        "unknown_agents": sum(1 for p in properties if normalize_agent(p.agent_name) == UNKNOWN),
        "unplanned": {},
    }

    agent_ids = MarketingPlan.objects.values_list("agent_id", flat=True).distinct()
    users = get_user_model().objects.filter(pk__in=list(agent_ids))
    for user in users:
        report = ProgressService(Session.for_user(user)).overall()
        if not report.available:
            continue
        unplanned = report.door_knocks.unplanned + report.phone_calls.unplanned
        if unplanned:
            summary["unplanned"][str(user.pk)] = unplanned

    logger.info(
        "Identifier audit: %d properties, %d unknown suburbs, %d unknown agencies, "
        "%d unknown agents, %d agents with unplanned activity",
        summary["properties"],
        summary["unknown_suburbs"],
        summary["unknown_agencies"],
        summary["unknown_agents"],
        len(summary["unplanned"]),
    )
    return summary
