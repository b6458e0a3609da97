from datetime import date
from decimal import Decimal

import pytest

from core.feed import Action, Table, change_feed
from listings.models import AgentCommission, Property
from marketing.models import AgentActivity, MarketingPlan


@pytest.fixture
def received():
    events = []
    subscriptions = [change_feed.subscribe(table, events.append) for table in Table.ALL]
    yield events
    for subscription in subscriptions:
        subscription.unsubscribe()


@pytest.mark.django_db
def test_activity_changes_publish_after_commit(agent_user, received, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        activity = AgentActivity.objects.create(
            agent=agent_user,
            activity_type=AgentActivity.ActivityType.DOOR_KNOCK,
            activity_date=date(2024, 3, 1),
            suburb="Moggill",
            street_name="Main St",
            knocks_made=8,
        )
    with django_capture_on_commit_callbacks(execute=True):
        activity.knocks_made = 9
        activity.save()
    with django_capture_on_commit_callbacks(execute=True):
        activity_id = str(activity.pk)
        activity.delete()

    assert [(e.table, e.action) for e in received] == [
        (Table.ACTIVITIES, Action.INSERT),
        (Table.ACTIVITIES, Action.UPDATE),
        (Table.ACTIVITIES, Action.DELETE),
    ]
    assert {e.row_id for e in received} == {activity_id}
    assert all(e.agent_id == str(agent_user.pk) for e in received)


@pytest.mark.django_db
def test_nothing_is_published_before_commit(agent_user, received, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        MarketingPlan.objects.create(agent=agent_user, suburb="Moggill")

    assert received == []
    assert len(callbacks) == 1


@pytest.mark.django_db
def test_property_and_override_changes_publish_property_events(received, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        prop = Property.objects.create(agency_name="RE/MAX", price=Decimal("100000"))
        AgentCommission.objects.create(property=prop, agent_name="Amy Lee", commission_rate=Decimal("2"))

    assert [(e.table, e.action, e.agent_id) for e in received] == [
        (Table.PROPERTIES, Action.INSERT, None),
        (Table.PROPERTIES, Action.UPDATE, None),
    ]
    assert all(e.row_id == str(prop.pk) for e in received)
