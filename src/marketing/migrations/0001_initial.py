import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("listings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="MarketingPlan",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("suburb", models.CharField(max_length=120, verbose_name="suburb")),
                ("start_date", models.DateField(blank=True, null=True, verbose_name="start date")),
                ("end_date", models.DateField(blank=True, null=True, verbose_name="end date")),
                ("door_knock_streets", models.JSONField(blank=True, default=list, verbose_name="door knock streets")),
                ("phone_call_streets", models.JSONField(blank=True, default=list, verbose_name="phone call streets")),
                ("target_connects", models.PositiveIntegerField(default=0, verbose_name="target connects")),
                (
                    "target_desktop_appraisals",
                    models.PositiveIntegerField(default=0, verbose_name="target desktop appraisals"),
                ),
                (
                    "target_face_to_face_appraisals",
                    models.PositiveIntegerField(default=0, verbose_name="target face-to-face appraisals"),
                ),
                (
                    "agent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="marketing_plans",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="agent",
                    ),
                ),
            ],
            options={
                "verbose_name": "marketing plan",
                "verbose_name_plural": "marketing plans",
                "ordering": ["-updated_at"],
                "indexes": [
                    models.Index(fields=["agent", "suburb"], name="mkt_plan_agent_suburb_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AgentActivity",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "activity_type",
                    models.CharField(
                        choices=[
                            ("door_knock", "Door knock"),
                            ("phone_call", "Phone call"),
                            ("appraisal", "Appraisal"),
                            ("client_meeting", "Client meeting"),
                            ("connection", "Connection"),
                        ],
                        max_length=20,
                        verbose_name="activity type",
                    ),
                ),
                ("activity_date", models.DateField(verbose_name="activity date")),
                ("suburb", models.CharField(blank=True, max_length=120, verbose_name="suburb")),
                ("street_name", models.CharField(blank=True, max_length=160, verbose_name="street name")),
                ("knocks_made", models.PositiveIntegerField(blank=True, null=True, verbose_name="knocks made")),
                ("calls_connected", models.PositiveIntegerField(blank=True, null=True, verbose_name="calls connected")),
                ("calls_answered", models.PositiveIntegerField(blank=True, null=True, verbose_name="calls answered")),
                (
                    "desktop_appraisals",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="desktop appraisals"),
                ),
                (
                    "face_to_face_appraisals",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="face-to-face appraisals"),
                ),
                ("notes", models.TextField(blank=True, verbose_name="notes")),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="tags")),
                (
                    "agent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activities",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="agent",
                    ),
                ),
                (
                    "property",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="activities",
                        to="listings.property",
                        verbose_name="property",
                    ),
                ),
            ],
            options={
                "verbose_name": "agent activity",
                "verbose_name_plural": "agent activities",
                "ordering": ["-activity_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["agent", "activity_date"], name="mkt_activity_agent_date_idx"),
                    models.Index(fields=["agent", "suburb"], name="mkt_activity_agent_suburb_idx"),
                ],
            },
        ),
    ]
