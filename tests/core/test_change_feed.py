import pytest

from core.feed import Action, ChangeEvent, ChangeFeed, Table


def _event(table=Table.ACTIVITIES, agent_id="a1"):
    return ChangeEvent(table=table, action=Action.INSERT, row_id="r1", agent_id=agent_id)


def test_publish_reaches_matching_subscribers_only():
    feed = ChangeFeed()
    seen = []
    feed.subscribe(Table.ACTIVITIES, seen.append, agent_id="a1")
    feed.subscribe(Table.ACTIVITIES, lambda e: seen.append("other"), agent_id="a2")
    feed.subscribe(Table.PLANS, lambda e: seen.append("plans"))

    delivered = feed.publish(_event())

    assert delivered == 1
    assert seen == [_event()]


def test_property_events_reach_agent_filtered_subscribers():
    feed = ChangeFeed()
    seen = []
    feed.subscribe(Table.PROPERTIES, seen.append, agent_id="a1")

    assert feed.publish(_event(Table.PROPERTIES, agent_id=None)) == 1


def test_unsubscribe_stops_delivery():
    feed = ChangeFeed()
    seen = []
    subscription = feed.subscribe(Table.ACTIVITIES, seen.append)

    subscription.unsubscribe()
    subscription.unsubscribe()

    assert feed.publish(_event()) == 0
    assert seen == []
    assert feed.subscriber_count == 0


def test_failing_listener_does_not_block_others():
    feed = ChangeFeed()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    feed.subscribe(Table.ACTIVITIES, broken)
    feed.subscribe(Table.ACTIVITIES, seen.append)

    assert feed.publish(_event()) == 1
    assert len(seen) == 1


def test_unknown_table_is_rejected():
    with pytest.raises(ValueError):
        ChangeFeed().subscribe("payments", lambda e: None)
