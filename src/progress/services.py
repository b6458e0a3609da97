"""Session-scoped entry points for progress reports."""
from __future__ import annotations

import logging

from core.context import Session
from core.exceptions import DataFetchFailure
from core.identifiers import UNKNOWN, display_suburb, suburb_key
from progress.engine import (
    OVERALL_MODE,
    SUBURB_MODE,
    PlanProgress,
    ProgressReport,
    empty_report,
    plan_progresses,
    reconcile,
)

logger = logging.getLogger("crm")


class ProgressService:
    """Fetch an agent's plans and activities and reconcile them.

    Agents only ever see their own rows; the agent id comes from the session,
    never from ambient state.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    @property
    def agent_id(self) -> str:
        return self.session.user_id

    def report(self, suburb: str | None = None) -> ProgressReport:
        """Suburb view when *suburb* is given, overall view otherwise."""
        if suburb is None:
            return self.overall()
        return self.for_suburb(suburb)

    def for_suburb(self, suburb: str) -> ProgressReport:
        from marketing.store import fetch_activities, fetch_plans

        label = display_suburb(suburb)
        wanted = suburb_key(suburb)
        if wanted == UNKNOWN:
            return empty_report(SUBURB_MODE, label)
        try:
            plans = [p for p in fetch_plans(self.agent_id) if suburb_key(p.suburb) == wanted]
            if not plans:
                return empty_report(SUBURB_MODE, label)
            activities = fetch_activities(self.agent_id, suburb=suburb)
        except DataFetchFailure as exc:
            logger.warning("Progress unavailable for agent=%s suburb=%s: %s", self.agent_id, suburb, exc)
            return empty_report(SUBURB_MODE, label, available=False)
        # Plans come back most recently updated first.
        return reconcile(plans[0], activities)

    def overall(self) -> ProgressReport:
        from marketing.store import fetch_activities, fetch_plans

        try:
            plans = fetch_plans(self.agent_id)
            activities = fetch_activities(self.agent_id)
        except DataFetchFailure as exc:
            logger.warning("Overall progress unavailable for agent=%s: %s", self.agent_id, exc)
            return empty_report(OVERALL_MODE, available=False)
        return reconcile(plans, activities)

    def per_plan(self) -> tuple[PlanProgress, ...]:
        from marketing.store import fetch_activities, fetch_plans

        try:
            plans = fetch_plans(self.agent_id)
            activities = fetch_activities(self.agent_id)
        except DataFetchFailure as exc:
            logger.warning("Plan progress unavailable for agent=%s: %s", self.agent_id, exc)
            return ()
        return plan_progresses(plans, activities)
