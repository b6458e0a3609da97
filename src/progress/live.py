"""Keeps progress and commission snapshots current while rows change.

A :class:`LiveUpdateCoordinator` listens on the change feed for one agent.
Every change event (re)arms a debounce timer; when the timer fires a single
recompute runs and the fresh :class:`LiveSnapshot` is handed to
``on_updated``.  Events that arrive while a recompute is running re-arm the
timer once it finishes, so a burst of N events costs one recompute and two
recomputes never overlap.

States::

    IDLE --event--> PENDING --timer--> RUNNING --done--> IDLE
                      ^  |                |
                      +--+ event          +--done with new events--> PENDING
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, Protocol

from django.conf import settings

from commissions.rollup import CommissionRollup
from core.context import Session
from core.feed import ChangeEvent, ChangeFeed, Table, change_feed
from progress.engine import ProgressReport

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs callbacks on :class:`threading.Timer` daemon threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class State:
    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"


@dataclass(frozen=True)
class LiveSnapshot:
    version: int
    progress: ProgressReport
    commissions: CommissionRollup | None = None


class LiveUpdateCoordinator:
    def __init__(
        self,
        agent_id,
        on_updated: Callable[[LiveSnapshot], None],
        *,
        feed: ChangeFeed = change_feed,
        scheduler: Scheduler | None = None,
        delay: float | None = None,
        suburb: str | None = None,
        session: Session | None = None,
        progress_source: Callable[[], ProgressReport] | None = None,
        commission_source: Callable[[], CommissionRollup] | None = None,
    ) -> None:
        self.agent_id = str(agent_id)
        self.session = session or Session(user_id=self.agent_id)
        self.on_updated = on_updated
        self.feed = feed
        self.scheduler = scheduler or ThreadingScheduler()
        if delay is None:
            delay = getattr(settings, "PROGRESS_DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS)
        self.delay = float(delay)
        self.suburb = suburb
        self._progress_source = progress_source or self._default_progress
        self._commission_source = commission_source or self._default_commissions

        self._lock = threading.Lock()
        # Held while a snapshot is handed out; stop() waits on it.
        self._deliver_lock = threading.RLock()
        self._generation = 0
        self._state = State.IDLE
        self._timer: TimerHandle | None = None
        self._pending: set[str] = set()
        self._subscriptions = []
        self._stopped = False
        self._version = 0
        self.snapshot: LiveSnapshot | None = None

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def _default_progress(self) -> ProgressReport:
        from progress.services import ProgressService

        return ProgressService(self.session).report(self.suburb)

    def _default_commissions(self) -> CommissionRollup:
        from commissions.services import CommissionService

        return CommissionService(self.session).rollup()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> str:
        return self._state

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self, *, initial: bool = True) -> "LiveUpdateCoordinator":
        for table in (Table.PLANS, Table.ACTIVITIES):
            self._subscriptions.append(self.feed.subscribe(table, self._on_event, agent_id=self.agent_id))
        self._subscriptions.append(self.feed.subscribe(Table.PROPERTIES, self._on_event))
        if initial:
            self._recompute(set(Table.ALL))
        return self

    def stop(self) -> None:
        with self._deliver_lock, self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()
            if self._state == State.PENDING:
                self._state = State.IDLE
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()
        logger.debug("Live sync stopped for agent=%s", self.agent_id)

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    def _on_event(self, event: ChangeEvent) -> None:
        with self._lock:
            if self._stopped:
                return
            self._pending.add(event.table)
            if self._state == State.RUNNING:
                # Picked up when the running recompute finishes.
                return
            self._arm()

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._generation += 1
        self._state = State.PENDING
        self._timer = self.scheduler.schedule(self.delay, partial(self._fire, self._generation))

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A replaced timer may still run if it could not be cancelled in time.
            if self._stopped or self._state != State.PENDING or generation != self._generation:
                return
            self._timer = None
            tables, self._pending = self._pending, set()
            self._state = State.RUNNING
        try:
            self._run(tables)
        finally:
            with self._lock:
                if self._stopped:
                    self._state = State.IDLE
                elif self._pending:
                    self._arm()
                else:
                    self._state = State.IDLE

    def _recompute(self, tables: set[str]) -> None:
        with self._lock:
            if self._stopped or self._state == State.RUNNING:
                return
            self._state = State.RUNNING
        try:
            self._run(tables)
        finally:
            with self._lock:
                self._state = State.IDLE
                if not self._stopped and self._pending:
                    self._arm()

    def _run(self, tables: set[str]) -> None:
        try:
            progress = self._progress_source()
            commissions = self.snapshot.commissions if self.snapshot else None
            if Table.PROPERTIES in tables or commissions is None:
                commissions = self._commission_source()
        except Exception as exc:
            logger.exception("Live recompute failed for agent=%s: %s", self.agent_id, exc)
            return

        with self._deliver_lock:
            with self._lock:
                if self._stopped:
                    return
                self._version += 1
                self.snapshot = LiveSnapshot(self._version, progress, commissions)
                snapshot = self.snapshot
            try:
                self.on_updated(snapshot)
            except Exception as exc:
                logger.error("Live update callback failed for agent=%s: %s", self.agent_id, exc, exc_info=True)


def start_live_sync(
    agent_id,
    on_updated: Callable[[LiveSnapshot], None],
    *,
    feed: ChangeFeed = change_feed,
    scheduler: Scheduler | None = None,
    delay: float | None = None,
    suburb: str | None = None,
    session: Session | None = None,
    initial: bool = True,
) -> Callable[[], None]:
    """Start keeping *agent_id*'s snapshot live; returns the stop callable."""
    coordinator = LiveUpdateCoordinator(
        agent_id,
        on_updated,
        feed=feed,
        scheduler=scheduler,
        delay=delay,
        suburb=suburb,
        session=session,
    )
    coordinator.start(initial=initial)
    return coordinator.stop
