"""Marketing plans and the agent activity log."""
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.identifiers import normalize_street
from core.models import TimeStampedModel


class MarketingPlan(TimeStampedModel):
    """Per-street prospecting targets for one suburb and time window.

    Street lists are stored as JSON arrays exactly as the planning form sends
    them (``{"name", "why", "house_count", "target_knocks", ...}``); numeric
    values are decoded leniently at the store boundary.
    """

    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="marketing_plans",
        verbose_name="agent",
    )
    suburb = models.CharField("suburb", max_length=120)
    start_date = models.DateField("start date", null=True, blank=True)
    end_date = models.DateField("end date", null=True, blank=True)
    door_knock_streets = models.JSONField("door knock streets", default=list, blank=True)
    phone_call_streets = models.JSONField("phone call streets", default=list, blank=True)
    target_connects = models.PositiveIntegerField("target connects", default=0)
    target_desktop_appraisals = models.PositiveIntegerField("target desktop appraisals", default=0)
    target_face_to_face_appraisals = models.PositiveIntegerField(
        "target face-to-face appraisals", default=0
    )

    class Meta:
        verbose_name = "marketing plan"
        verbose_name_plural = "marketing plans"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["agent", "suburb"], name="mkt_plan_agent_suburb_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.suburb} ({self.agent})"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("The end date must not be before the start date.")
        errors = {}
        for field in ("door_knock_streets", "phone_call_streets"):
            streets = getattr(self, field) or []
            if not isinstance(streets, list):
                errors[field] = "Expected a list of streets."
                continue
            seen = set()
            for street in streets:
                name = normalize_street(street.get("name") if isinstance(street, dict) else None)
                if not name:
                    errors[field] = "Every street needs a name."
                    break
                if name in seen:
                    errors[field] = f"Street '{name}' is listed twice."
                    break
                seen.add(name)
        if errors:
            raise ValidationError(errors)


class AgentActivity(TimeStampedModel):
    """One logged unit of prospecting work."""

    class ActivityType(models.TextChoices):
        DOOR_KNOCK = "door_knock", "Door knock"
        PHONE_CALL = "phone_call", "Phone call"
        APPRAISAL = "appraisal", "Appraisal"
        CLIENT_MEETING = "client_meeting", "Client meeting"
        CONNECTION = "connection", "Connection"

    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activities",
        verbose_name="agent",
    )
    activity_type = models.CharField("activity type", max_length=20, choices=ActivityType.choices)
    activity_date = models.DateField("activity date")
    suburb = models.CharField("suburb", max_length=120, blank=True)
    street_name = models.CharField("street name", max_length=160, blank=True)
    knocks_made = models.PositiveIntegerField("knocks made", null=True, blank=True)
    calls_connected = models.PositiveIntegerField("calls connected", null=True, blank=True)
    calls_answered = models.PositiveIntegerField("calls answered", null=True, blank=True)
    desktop_appraisals = models.PositiveIntegerField("desktop appraisals", null=True, blank=True)
    face_to_face_appraisals = models.PositiveIntegerField(
        "face-to-face appraisals", null=True, blank=True
    )
    notes = models.TextField("notes", blank=True)
    tags = models.JSONField("tags", default=list, blank=True)
    property = models.ForeignKey(
        "listings.Property",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
        verbose_name="property",
    )

    class Meta:
        verbose_name = "agent activity"
        verbose_name_plural = "agent activities"
        ordering = ["-activity_date", "-created_at"]
        indexes = [
            models.Index(fields=["agent", "activity_date"], name="mkt_activity_agent_date_idx"),
            models.Index(fields=["agent", "suburb"], name="mkt_activity_agent_suburb_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.get_activity_type_display()} {self.street_name or '-'} ({self.activity_date})"
