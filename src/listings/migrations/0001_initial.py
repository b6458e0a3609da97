import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("agency_name", models.CharField(blank=True, max_length=160, verbose_name="agency")),
                ("agent_name", models.CharField(blank=True, max_length=160, verbose_name="agent")),
                ("suburb", models.CharField(blank=True, max_length=120, verbose_name="suburb")),
                ("postcode", models.CharField(blank=True, max_length=10, verbose_name="postcode")),
                ("street_name", models.CharField(blank=True, max_length=160, verbose_name="street name")),
                ("street_number", models.CharField(blank=True, max_length=20, verbose_name="street number")),
                ("property_type", models.CharField(blank=True, max_length=60, verbose_name="property type")),
                ("category", models.CharField(blank=True, max_length=60, verbose_name="category")),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="price")),
                ("sold_price", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="sold price")),
                (
                    "commission_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                        verbose_name="commission rate (%)",
                    ),
                ),
                (
                    "contract_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("listed", "Listed"),
                            ("under_offer", "Under offer"),
                            ("sold", "Sold"),
                            ("withdrawn", "Withdrawn"),
                        ],
                        max_length=20,
                        verbose_name="contract status",
                    ),
                ),
                ("listed_date", models.DateField(blank=True, null=True, verbose_name="listed date")),
                ("sold_date", models.DateField(blank=True, null=True, verbose_name="sold date")),
            ],
            options={
                "verbose_name": "property",
                "verbose_name_plural": "properties",
                "ordering": ["-listed_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["agency_name"], name="listings_property_agency_idx"),
                    models.Index(fields=["suburb", "street_name"], name="listings_property_street_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AgentCommission",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("agent_name", models.CharField(max_length=160, verbose_name="agent")),
                (
                    "commission_rate",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("10")),
                        ],
                        verbose_name="commission rate (%)",
                    ),
                ),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="agent_commissions",
                        to="listings.property",
                        verbose_name="property",
                    ),
                ),
            ],
            options={
                "verbose_name": "agent commission",
                "verbose_name_plural": "agent commissions",
                "ordering": ["-updated_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("property", "agent_name"),
                        name="uniq_agent_commission_per_property",
                    ),
                ],
            },
        ),
    ]
