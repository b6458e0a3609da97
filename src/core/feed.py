"""In-process change feed for row-level notifications.

Django signal receivers publish a :class:`ChangeEvent` after the enclosing
transaction commits; consumers (the live progress coordinator) subscribe to a
table, optionally filtered on the owning agent, and keep the returned
:class:`Subscription` so they can release it when they go away.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from django.dispatch import Signal

logger = logging.getLogger(__name__)


class Table:
    PLANS = "marketing_plans"
    ACTIVITIES = "agent_activities"
    PROPERTIES = "properties"

    ALL = (PLANS, ACTIVITIES, PROPERTIES)


class Action:
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    row_id: str
    agent_id: str | None = None


Listener = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by :meth:`ChangeFeed.subscribe`; wraps one signal receiver."""

    def __init__(self, signal: Signal, table: str, listener: Listener, agent_id: str | None) -> None:
        self._signal = signal
        self.table = table
        self.listener = listener
        self.agent_id = agent_id
        self.active = True

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        # Property rows carry no agent; they reach every subscriber of the table.
        return self.agent_id is None or event.agent_id is None or event.agent_id == self.agent_id

    def receive(self, sender, event: ChangeEvent, **kwargs) -> bool:
        if not self.active or not self.matches(event):
            return False
        self.listener(event)
        return True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._signal.disconnect(self.receive)


class ChangeFeed:
    """One :class:`~django.dispatch.Signal` per table."""

    def __init__(self) -> None:
        self._signals = {table: Signal() for table in Table.ALL}

    def subscribe(self, table: str, listener: Listener, agent_id: str | None = None) -> Subscription:
        signal = self._signals.get(table)
        if signal is None:
            raise ValueError(f"Unknown table {table!r}")
        subscription = Subscription(signal, table, listener, str(agent_id) if agent_id else None)
        signal.connect(subscription.receive, weak=False)
        return subscription

    def publish(self, event: ChangeEvent) -> int:
        """Deliver *event* to matching listeners; returns how many were called."""
        signal = self._signals.get(event.table)
        if signal is None:
            raise ValueError(f"Unknown table {event.table!r}")
        delivered = 0
        for receiver, response in signal.send_robust(sender=self.__class__, event=event):
            if isinstance(response, Exception):
                # A broken consumer must not stop delivery to the others.
                logger.error("change feed listener failed for %s: %s", event.table, response, exc_info=response)
            elif response:
                delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        return sum(len(signal.receivers) for signal in self._signals.values())


change_feed = ChangeFeed()
