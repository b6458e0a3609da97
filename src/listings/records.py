"""Validated property values consumed by the commission rollup."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class PropertyRecord:
    id: str
    agency_name: str = ""
    agent_name: str = ""
    suburb: str = ""
    street_name: str = ""
    street_number: str = ""
    property_type: str = ""
    price: Decimal | None = None
    sold_price: Decimal | None = None
    commission_rate: Decimal | None = None
    contract_status: str = ""
    listed_date: date | None = None
    sold_date: date | None = None

    @property
    def is_sold(self) -> bool:
        return self.contract_status.strip().lower() == "sold" or self.sold_date is not None
