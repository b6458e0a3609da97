"""Session-scoped entry points for commission figures."""
from __future__ import annotations

import logging
from datetime import date

from django.conf import settings

from commissions.rollup import (
    EMPTY_ROLLUP,
    CommissionRollup,
    CommissionSimulation,
    StreetStats,
    TrendPoint,
    monthly_commission_trend,
    rollup_commission,
    simulate_commission,
    street_suggestions,
)
from core.context import Session
from core.exceptions import DataFetchFailure

logger = logging.getLogger("crm")


class CommissionService:
    """Load properties in the caller's scope and fold them.

    Admins see every agency; agents only their own.  A failed fetch never
    produces a partial figure: the rollup comes back empty and unavailable.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _properties(self):
        from listings.store import fetch_properties

        return fetch_properties(agency=self.session.agency_scope)

    def rollup(self) -> CommissionRollup:
        try:
            properties = self._properties()
        except DataFetchFailure as exc:
            logger.warning("Commission rollup unavailable for user=%s: %s", self.session.user_id, exc)
            return CommissionRollup(available=False)
        if not properties:
            return EMPTY_ROLLUP
        return rollup_commission(properties, agency=self.session.agency_scope)

    def summary(self) -> dict:
        """Plain-data rollup with the configured top-N rankings."""
        return self.rollup().as_dict(top_n=getattr(settings, "COMMISSION_TOP_N", 5))

    def simulate(self, agency, rate) -> CommissionSimulation | None:
        try:
            properties = self._properties()
        except DataFetchFailure as exc:
            logger.warning("Commission simulation unavailable: %s", exc)
            return None
        return simulate_commission(properties, agency, rate)

    def trend(self, today: date | None = None) -> tuple[TrendPoint, ...]:
        months = getattr(settings, "COMMISSION_TREND_MONTHS", 12)
        try:
            properties = self._properties()
        except DataFetchFailure as exc:
            logger.warning("Commission trend unavailable: %s", exc)
            return ()
        return monthly_commission_trend(properties, months=months, today=today)

    def street_suggestions(self, suburb, limit: int = 10) -> tuple[StreetStats, ...]:
        try:
            properties = self._properties()
        except DataFetchFailure as exc:
            logger.warning("Street suggestions unavailable for %s: %s", suburb, exc)
            return ()
        return street_suggestions(properties, suburb, limit=limit)
