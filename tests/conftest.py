from datetime import date
from decimal import Decimal
from itertools import count

import pytest
from django.contrib.auth import get_user_model

from listings.records import PropertyRecord
from marketing.records import Activity, DoorKnockStreet, PhoneCallStreet, Plan

_ids = count(1)


@pytest.fixture
def agent_user(db):
    return get_user_model().objects.create_user(
        username="agent",
        email="agent@test.com",
        password="testpass123",
    )


@pytest.fixture
def other_agent(db):
    return get_user_model().objects.create_user(
        username="other",
        email="other@test.com",
        password="testpass123",
    )


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username="staff",
        email="staff@test.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def make_plan():
    def _make(suburb="Moggill", knocks=(), calls=(), agent_id="agent-1", **targets):
        return Plan(
            id=f"plan-{next(_ids)}",
            agent_id=agent_id,
            suburb=suburb,
            door_knock_streets=tuple(DoorKnockStreet(name, target_knocks=t) for name, t in knocks),
            phone_call_streets=tuple(PhoneCallStreet(name, target_calls=t) for name, t in calls),
            **targets,
        )

    return _make


@pytest.fixture
def make_activity():
    def _make(activity_type="door_knock", street="", suburb="Moggill", agent_id="agent-1", **counters):
        return Activity(
            id=f"activity-{next(_ids)}",
            agent_id=agent_id,
            activity_type=activity_type,
            suburb=suburb,
            street_name=street,
            activity_date=date(2024, 3, 1),
            **counters,
        )

    return _make


@pytest.fixture
def make_property():
    def _make(agency="Harcourts Success", agent="Jane Doe", price=None, rate=None, **fields):
        return PropertyRecord(
            id=f"property-{next(_ids)}",
            agency_name=agency,
            agent_name=agent,
            price=Decimal(str(price)) if price is not None else None,
            commission_rate=Decimal(str(rate)) if rate is not None else None,
            **fields,
        )

    return _make


class ManualScheduler:
    """Scheduler test double: timers only fire when the test says so."""

    class Handle:
        def __init__(self, callback):
            self.callback = callback
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.handles = []

    def schedule(self, delay, callback):
        handle = self.Handle(callback)
        self.handles.append(handle)
        return handle

    @property
    def armed(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self):
        armed = self.armed
        for handle in armed:
            handle.cancelled = True
            handle.callback()
        return len(armed)


@pytest.fixture
def scheduler():
    return ManualScheduler()
