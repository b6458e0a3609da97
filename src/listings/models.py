"""Property listings and per-agent commission overrides."""
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class Property(TimeStampedModel):
    """A listed (and possibly sold) property as imported from the portals.

    Agency and agent names are free text; they are normalized when rolled up,
    never on write.
    """

    class ContractStatus(models.TextChoices):
        LISTED = "listed", "Listed"
        UNDER_OFFER = "under_offer", "Under offer"
        SOLD = "sold", "Sold"
        WITHDRAWN = "withdrawn", "Withdrawn"

    agency_name = models.CharField("agency", max_length=160, blank=True)
    agent_name = models.CharField("agent", max_length=160, blank=True)
    suburb = models.CharField("suburb", max_length=120, blank=True)
    postcode = models.CharField("postcode", max_length=10, blank=True)
    street_name = models.CharField("street name", max_length=160, blank=True)
    street_number = models.CharField("street number", max_length=20, blank=True)
    property_type = models.CharField("property type", max_length=60, blank=True)
    category = models.CharField("category", max_length=60, blank=True)
    price = models.DecimalField("price", max_digits=14, decimal_places=2, null=True, blank=True)
    sold_price = models.DecimalField(
        "sold price", max_digits=14, decimal_places=2, null=True, blank=True
    )
    commission_rate = models.DecimalField(
        "commission rate (%)",
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    contract_status = models.CharField(
        "contract status",
        max_length=20,
        choices=ContractStatus.choices,
        blank=True,
    )
    listed_date = models.DateField("listed date", null=True, blank=True)
    sold_date = models.DateField("sold date", null=True, blank=True)

    class Meta:
        verbose_name = "property"
        verbose_name_plural = "properties"
        ordering = ["-listed_date", "-created_at"]
        indexes = [
            models.Index(fields=["agency_name"], name="listings_property_agency_idx"),
            models.Index(fields=["suburb", "street_name"], name="listings_property_street_idx"),
        ]

    def __str__(self) -> str:
        address = " ".join(p for p in (self.street_number, self.street_name) if p)
        return f"{address or '-'}, {self.suburb or '-'}"


class AgentCommission(TimeStampedModel):
    """Commission rate negotiated for one agent on one property.

    Takes precedence over ``Property.commission_rate`` when both exist.
    """

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="agent_commissions",
        verbose_name="property",
    )
    agent_name = models.CharField("agent", max_length=160)
    commission_rate = models.DecimalField(
        "commission rate (%)",
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("10"))],
    )

    class Meta:
        verbose_name = "agent commission"
        verbose_name_plural = "agent commissions"
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["property", "agent_name"],
                name="uniq_agent_commission_per_property",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.agent_name} {self.commission_rate}% ({self.property})"
