"""Plan versus activity reconciliation.

``reconcile`` folds an activity list against one plan (suburb mode) or every
plan of an agent (overall mode) and returns a frozen :class:`ProgressReport`.
Each call starts from fresh accumulators, so running it twice on the same
input gives an identical report.

Counters:
- door_knock activities add ``knocks_made`` to door knocks,
- phone_call activities add ``calls_connected`` to phone calls and
  ``calls_answered`` to connects,
- appraisal counters on any activity add to the appraisal totals.

Activities on a street the plan does not declare still count in the top-level
totals (tracked as ``unplanned``) but never get a per-street row.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from core.identifiers import UNKNOWN, display_suburb, normalize_street, street_key, suburb_key
from marketing.records import Activity, ActivityType, Plan

logger = logging.getLogger(__name__)

SUBURB_MODE = "suburb"
OVERALL_MODE = "overall"


def progress_percent(completed: int, target: int) -> int:
    """``min(100, round(completed / target * 100))``; 0 when there is no target."""
    if target <= 0 or completed <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(target)
    return min(100, int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


# ────────────────────────────────────────────────────────────
# Report types
# ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StreetProgress:
    street_name: str
    suburb: str
    completed: int = 0
    target: int = 0
    desktop_appraisals: int = 0
    face_to_face_appraisals: int = 0

    @property
    def percent(self) -> int:
        return progress_percent(self.completed, self.target)

    def as_dict(self) -> dict:
        return {
            "street_name": self.street_name,
            "suburb": self.suburb,
            "completed": self.completed,
            "target": self.target,
            "percent": self.percent,
            "desktop_appraisals": self.desktop_appraisals,
            "face_to_face_appraisals": self.face_to_face_appraisals,
        }


@dataclass(frozen=True)
class MetricProgress:
    completed: int = 0
    target: int = 0

    @property
    def percent(self) -> int:
        return progress_percent(self.completed, self.target)

    def as_dict(self) -> dict:
        return {"completed": self.completed, "target": self.target, "percent": self.percent}


@dataclass(frozen=True)
class StreetMetricProgress(MetricProgress):
    """A street-backed metric: totals plus the per-street breakdown."""

    streets: tuple[StreetProgress, ...] = ()
    unplanned: int = 0

    @property
    def planned(self) -> int:
        return self.completed - self.unplanned

    def street(self, name: str) -> StreetProgress | None:
        name = normalize_street(name)
        return next((s for s in self.streets if s.street_name == name), None)

    def as_dict(self) -> dict:
        data = super().as_dict()
        data["unplanned"] = self.unplanned
        data["streets"] = [s.as_dict() for s in self.streets]
        return data


@dataclass(frozen=True)
class ProgressReport:
    mode: str = SUBURB_MODE
    suburb: str | None = None
    plan_ids: tuple[str, ...] = ()
    door_knocks: StreetMetricProgress = StreetMetricProgress()
    phone_calls: StreetMetricProgress = StreetMetricProgress()
    connects: MetricProgress = MetricProgress()
    desktop_appraisals: MetricProgress = MetricProgress()
    face_to_face_appraisals: MetricProgress = MetricProgress()
    available: bool = True

    def as_dict(self) -> dict:
        return {
            "mode": self.mode,
            "suburb": self.suburb,
            "plan_ids": list(self.plan_ids),
            "available": self.available,
            "door_knocks": self.door_knocks.as_dict(),
            "phone_calls": self.phone_calls.as_dict(),
            "connects": self.connects.as_dict(),
            "desktop_appraisals": self.desktop_appraisals.as_dict(),
            "face_to_face_appraisals": self.face_to_face_appraisals.as_dict(),
        }


@dataclass(frozen=True)
class PlanProgress:
    plan_id: str
    suburb: str
    report: ProgressReport


# ────────────────────────────────────────────────────────────
# Accumulation
# ────────────────────────────────────────────────────────────

class _StreetRow:
    __slots__ = ("name", "suburb", "completed", "target", "desktop", "face_to_face")

    def __init__(self, name: str, suburb: str) -> None:
        self.name = name
        self.suburb = suburb
        self.completed = 0
        self.target = 0
        self.desktop = 0
        self.face_to_face = 0

    def freeze(self) -> StreetProgress:
        return StreetProgress(
            self.name, self.suburb, self.completed, self.target, self.desktop, self.face_to_face
        )


class _Tally:
    """Mutable state of one reconciliation pass."""

    def __init__(self, mode: str) -> None:
        self.mode = mode
        self.knock_rows: dict[str, _StreetRow] = {}
        self.call_rows: dict[str, _StreetRow] = {}
        self.knocks = 0
        self.calls = 0
        self.connects = 0
        self.desktop = 0
        self.face_to_face = 0
        self.unplanned_knocks = 0
        self.unplanned_calls = 0
        self.unplanned_streets: set[str] = set()
        self.targets = {"knocks": 0, "calls": 0, "connects": 0, "desktop": 0, "face_to_face": 0}

    def key(self, suburb, street) -> str:
        if self.mode == OVERALL_MODE:
            return street_key(suburb, street)
        return normalize_street(street)

    def row(self, rows: dict, suburb, street) -> _StreetRow:
        key = self.key(suburb, street)
        row = rows.get(key)
        if row is None:
            name = normalize_street(street)
            row = rows[key] = _StreetRow(key if self.mode == OVERALL_MODE else name, display_suburb(suburb))
        return row

    def add_plan(self, plan: Plan) -> None:
        for street in plan.door_knock_streets:
            self.row(self.knock_rows, plan.suburb, street.name).target += street.target_knocks
        for street in plan.phone_call_streets:
            self.row(self.call_rows, plan.suburb, street.name).target += street.target_calls
        self.targets["knocks"] += plan.target_knocks
        self.targets["calls"] += plan.target_calls
        self.targets["connects"] += plan.target_connects
        self.targets["desktop"] += plan.target_desktop_appraisals
        self.targets["face_to_face"] += plan.target_face_to_face_appraisals

    def add_activity(self, activity: Activity) -> None:
        street = normalize_street(activity.street_name)
        key = self.key(activity.suburb, street) if street else None
        knock_row = self.knock_rows.get(key) if key else None
        call_row = self.call_rows.get(key) if key else None

        if activity.activity_type == ActivityType.DOOR_KNOCK:
            self.knocks += activity.knocks_made
            if knock_row is not None:
                knock_row.completed += activity.knocks_made
            else:
                self.unplanned_knocks += activity.knocks_made
                self._note_unplanned(key or "(no street)")
        elif activity.activity_type == ActivityType.PHONE_CALL:
            self.calls += activity.calls_connected
            self.connects += activity.calls_answered
            if call_row is not None:
                call_row.completed += activity.calls_connected
            else:
                self.unplanned_calls += activity.calls_connected
                self._note_unplanned(key or "(no street)")

        self.desktop += activity.desktop_appraisals
        self.face_to_face += activity.face_to_face_appraisals
        for row in (knock_row, call_row):
            if row is not None:
                row.desktop += activity.desktop_appraisals
                row.face_to_face += activity.face_to_face_appraisals

    def _note_unplanned(self, key: str) -> None:
        if key not in self.unplanned_streets:
            self.unplanned_streets.add(key)
            logger.info("Activity on unplanned street %r counted in totals only", key)

    def freeze(self, suburb: str | None, plan_ids: tuple[str, ...]) -> ProgressReport:
        return ProgressReport(
            mode=self.mode,
            suburb=suburb,
            plan_ids=plan_ids,
            door_knocks=StreetMetricProgress(
                completed=self.knocks,
                target=self.targets["knocks"],
                streets=tuple(r.freeze() for r in self.knock_rows.values()),
                unplanned=self.unplanned_knocks,
            ),
            phone_calls=StreetMetricProgress(
                completed=self.calls,
                target=self.targets["calls"],
                streets=tuple(r.freeze() for r in self.call_rows.values()),
                unplanned=self.unplanned_calls,
            ),
            connects=MetricProgress(self.connects, self.targets["connects"]),
            desktop_appraisals=MetricProgress(self.desktop, self.targets["desktop"]),
            face_to_face_appraisals=MetricProgress(self.face_to_face, self.targets["face_to_face"]),
        )


# ────────────────────────────────────────────────────────────
# Public API
# ────────────────────────────────────────────────────────────

def reconcile(plan_or_plans, activities) -> ProgressReport:
    """Reconcile *activities* against one :class:`Plan` or a collection of plans.

    A single plan gives the suburb view: only activities whose suburb key
    equals the plan's count.  A collection gives the overall view, where
    street rows are namespaced by suburb and the same street declared by two
    plans of one suburb is merged.
    """
    if isinstance(plan_or_plans, Plan):
        return _reconcile_suburb(plan_or_plans, activities)
    return _reconcile_overall(tuple(plan_or_plans), activities)


def _reconcile_suburb(plan: Plan, activities) -> ProgressReport:
    tally = _Tally(SUBURB_MODE)
    tally.add_plan(plan)
    wanted = suburb_key(plan.suburb)
    if wanted != UNKNOWN:
        for activity in activities:
            if suburb_key(activity.suburb) == wanted:
                tally.add_activity(activity)
    else:
        logger.warning("Plan %s has no usable suburb %r; no activity matched", plan.id, plan.suburb)
    return tally.freeze(display_suburb(plan.suburb), (plan.id,))


def _reconcile_overall(plans: tuple[Plan, ...], activities) -> ProgressReport:
    tally = _Tally(OVERALL_MODE)
    for plan in plans:
        tally.add_plan(plan)
    for activity in activities:
        tally.add_activity(activity)
    return tally.freeze(None, tuple(p.id for p in plans))


def plan_progresses(plans, activities) -> tuple[PlanProgress, ...]:
    """One suburb-mode report per plan, in the order the plans were given."""
    activities = tuple(activities)
    return tuple(
        PlanProgress(plan.id, display_suburb(plan.suburb), _reconcile_suburb(plan, activities))
        for plan in plans
    )


def empty_report(mode: str = SUBURB_MODE, suburb: str | None = None, *, available: bool = True) -> ProgressReport:
    return ProgressReport(mode=mode, suburb=suburb, available=available)
