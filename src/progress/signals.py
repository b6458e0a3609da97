"""Signals: publish plan, activity and property changes on the change feed."""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from core.feed import Action, ChangeEvent, Table, change_feed

logger = logging.getLogger(__name__)


def _publish(*, table: str, action: str, row_id, agent_id=None) -> None:
    event = ChangeEvent(
        table=table,
        action=action,
        row_id=str(row_id),
        agent_id=str(agent_id) if agent_id else None,
    )

    def _dispatch() -> None:
        try:
            change_feed.publish(event)
        except Exception as exc:
            # Never let a signal crash a business transaction.
            logger.error("change feed publish failed for %s: %s", table, exc, exc_info=True)

    # Publish after commit so subscribers re-read committed rows.
    try:
        transaction.on_commit(_dispatch)
    except Exception:
        _dispatch()


def _action(created: bool) -> str:
    return Action.INSERT if created else Action.UPDATE


@receiver(post_save, sender="marketing.MarketingPlan")
def on_plan_saved(sender, instance, created, **kwargs):
    _publish(table=Table.PLANS, action=_action(created), row_id=instance.pk, agent_id=instance.agent_id)


@receiver(post_delete, sender="marketing.MarketingPlan")
def on_plan_deleted(sender, instance, **kwargs):
    _publish(table=Table.PLANS, action=Action.DELETE, row_id=instance.pk, agent_id=instance.agent_id)


@receiver(post_save, sender="marketing.AgentActivity")
def on_activity_saved(sender, instance, created, **kwargs):
    _publish(table=Table.ACTIVITIES, action=_action(created), row_id=instance.pk, agent_id=instance.agent_id)


@receiver(post_delete, sender="marketing.AgentActivity")
def on_activity_deleted(sender, instance, **kwargs):
    _publish(table=Table.ACTIVITIES, action=Action.DELETE, row_id=instance.pk, agent_id=instance.agent_id)


@receiver(post_save, sender="listings.Property")
def on_property_saved(sender, instance, created, **kwargs):
    _publish(table=Table.PROPERTIES, action=_action(created), row_id=instance.pk)


@receiver(post_delete, sender="listings.Property")
def on_property_deleted(sender, instance, **kwargs):
    _publish(table=Table.PROPERTIES, action=Action.DELETE, row_id=instance.pk)


@receiver(post_save, sender="listings.AgentCommission")
@receiver(post_delete, sender="listings.AgentCommission")
def on_agent_commission_changed(sender, instance, **kwargs):
    # An override changes the effective rate of its property.
    _publish(table=Table.PROPERTIES, action=Action.UPDATE, row_id=instance.property_id)
