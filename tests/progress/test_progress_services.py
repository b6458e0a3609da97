from datetime import date
from decimal import Decimal

import pytest
from django.db import DatabaseError

from commissions.services import CommissionService
from core.context import Session
from listings.models import Property
from marketing.models import AgentActivity, MarketingPlan
from progress.services import ProgressService
from progress.tasks import audit_identifier_quality


@pytest.fixture
def moggill_plan(agent_user):
    return MarketingPlan.objects.create(
        agent=agent_user,
        suburb="Moggill",
        door_knock_streets=[{"name": "Main St", "target_knocks": 20}],
        phone_call_streets=[{"name": "Bay Rd", "target_calls": 10}],
        target_connects=5,
    )


def _log(agent, **fields):
    defaults = {"activity_type": "door_knock", "activity_date": date(2024, 3, 1), "suburb": "Moggill"}
    defaults.update(fields)
    return AgentActivity.objects.create(agent=agent, **defaults)


@pytest.mark.django_db
def test_suburb_report(agent_user, moggill_plan):
    _log(agent_user, street_name="Main St", knocks_made=8)
    _log(agent_user, street_name="Main St", knocks_made=5, suburb="moggill qld")
    _log(agent_user, street_name="Main St", knocks_made=40, suburb="Kenmore")

    report = ProgressService(Session.for_user(agent_user)).report("MOGGILL 4070")

    street = report.door_knocks.street("Main St")
    assert (street.completed, street.target, street.percent) == (13, 20, 65)
    assert report.plan_ids == (str(moggill_plan.pk),)
    assert report.available


@pytest.mark.django_db
def test_overall_report_counts_every_suburb(agent_user, moggill_plan):
    _log(agent_user, street_name="Main St", knocks_made=8)
    _log(agent_user, street_name="Main St", knocks_made=40, suburb="Kenmore")

    report = ProgressService(Session.for_user(agent_user)).report()

    assert report.door_knocks.completed == 48
    assert report.door_knocks.unplanned == 40
    assert report.door_knocks.street("MOGGILL 4070: Main St").completed == 8


@pytest.mark.django_db
def test_suburb_without_plan_gives_empty_report(agent_user, moggill_plan):
    report = ProgressService(Session.for_user(agent_user)).report("Kenmore")
    assert report.plan_ids == ()
    assert report.available


@pytest.mark.django_db
def test_agents_never_see_each_others_rows(agent_user, other_agent, moggill_plan):
    _log(agent_user, street_name="Main St", knocks_made=8)

    assert ProgressService(Session.for_user(other_agent)).report().door_knocks.completed == 0
    assert ProgressService(Session.for_user(other_agent)).per_plan() == ()


@pytest.mark.django_db
def test_fetch_failure_gives_unavailable_report(agent_user, moggill_plan, monkeypatch):
    def broken(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(MarketingPlan.objects, "filter", broken)
    service = ProgressService(Session.for_user(agent_user))

    assert not service.report("Moggill").available
    assert not service.report().available
    assert service.per_plan() == ()


@pytest.fixture
def portfolio(db):
    Property.objects.create(
        agency_name="Harcourts Success", agent_name="Jane Doe", price=Decimal("500000"),
        commission_rate=Decimal("2"), suburb="Moggill", street_name="Main St",
    )
    Property.objects.create(
        agency_name="harcourts success", agent_name="John Smith", price=Decimal("250000"),
        commission_rate=Decimal("2"), suburb="Moggill", street_name="Main St",
    )
    Property.objects.create(
        agency_name="RE/MAX", agent_name="Amy Lee", price=Decimal("150000"),
        commission_rate=Decimal("2"), suburb="Nowhereville",
    )


@pytest.mark.django_db
def test_commission_scope_follows_session(portfolio, agent_user, staff_user):
    admin = CommissionService(Session.for_user(staff_user)).rollup()
    agent = CommissionService(Session.for_user(agent_user, agency_name="RE/MAX")).rollup()

    assert admin.summary.top_agency.name == "Harcourts Success"
    assert admin.summary.top_agency.total_commission == Decimal("15000.00")
    assert [a.key for a in agent.agency_totals] == ["Re/max"]
    assert agent.summary.total_commission == Decimal("3000.00")


@pytest.mark.django_db
def test_commission_fetch_failure_gives_unavailable_rollup(staff_user, monkeypatch):
    def broken(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(Property.objects, "order_by", broken)
    rollup = CommissionService(Session.for_user(staff_user)).rollup()

    assert not rollup.available
    assert rollup.agency_totals == ()


@pytest.mark.django_db
def test_audit_identifier_quality(portfolio, agent_user, moggill_plan):
    _log(agent_user, street_name="Unplanned Rd", knocks_made=3)

    summary = audit_identifier_quality()

    assert summary["properties"] == 3
    assert summary["unknown_suburbs"] == 1
    assert summary["unknown_agencies"] == 0
    assert summary["unplanned"] == {str(agent_user.pk): 3}


@pytest.mark.django_db
def test_commission_summary_uses_configured_top_n(portfolio, staff_user, settings):
    settings.COMMISSION_TOP_N = 1

    summary = CommissionService(Session.for_user(staff_user)).summary()

    assert summary["available"]
    assert summary["top_agencies"] == ["Harcourts Success"]
    assert summary["summary"]["total_commission"] == "18000.00"
    assert summary["summary"]["top_street"]["street_name"] == "Main St"


@pytest.mark.django_db
def test_commission_tools(portfolio, staff_user):
    service = CommissionService(Session.for_user(staff_user))

    simulation = service.simulate("RE/MAX", 3)
    assert simulation.simulated_total == Decimal("4500.00")
    assert [s.street_name for s in service.street_suggestions("Moggill")] == ["Main St"]
    assert len(service.trend(today=date(2024, 6, 30))) == 12
