"""Commission rollup over a property collection.

Every pass rebuilds the agency / agent / street totals from the records it is
given; results are frozen dataclasses, so a snapshot handed to a caller can
never change underneath it.

Rankings are ordered by descending commission; equal commissions fall back
to the normalized key so the order does not depend on row fetch order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from commissions.calculator import ZERO, commission
from core.identifiers import (
    UNKNOWN,
    display_suburb,
    normalize_agency,
    normalize_agent,
    normalize_street,
    normalize_suburb,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5


# ────────────────────────────────────────────────────────────
# Result types
# ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AgentTotal:
    key: str
    name: str
    total_commission: Decimal = ZERO
    listed_count: int = 0
    sold_count: int = 0

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "key": self.key,
            "total_commission": str(self.total_commission),
            "listed_count": self.listed_count,
            "sold_count": self.sold_count,
        }


@dataclass(frozen=True)
class AgencyTotal:
    key: str
    name: str
    total_commission: Decimal = ZERO
    property_count: int = 0
    listed_count: int = 0
    sold_count: int = 0
    suburbs: tuple[str, ...] = ()
    agents: tuple[AgentTotal, ...] = ()
    commission_by_type: tuple[tuple[str, Decimal], ...] = ()

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "key": self.key,
            "total_commission": str(self.total_commission),
            "property_count": self.property_count,
            "listed_count": self.listed_count,
            "sold_count": self.sold_count,
            "suburbs": list(self.suburbs),
            "agents": [a.as_dict() for a in self.agents],
            "commission_by_type": {k: str(v) for k, v in self.commission_by_type},
        }


@dataclass(frozen=True)
class StreetTotal:
    street_name: str
    suburb: str
    listed_count: int = 0
    sold_count: int = 0
    total_commission: Decimal = ZERO

    def as_dict(self) -> dict:
        return {
            "street_name": self.street_name,
            "suburb": self.suburb,
            "listed_count": self.listed_count,
            "sold_count": self.sold_count,
            "total_commission": str(self.total_commission),
        }


@dataclass(frozen=True)
class CommissionSummary:
    total_commission: Decimal = ZERO
    total_properties: int = 0
    sold_count: int = 0
    top_agency: AgencyTotal | None = None
    top_agent: AgentTotal | None = None
    top_street: StreetTotal | None = None

    def as_dict(self) -> dict:
        return {
            "total_commission": str(self.total_commission),
            "total_properties": self.total_properties,
            "sold_count": self.sold_count,
            "top_agency": self.top_agency.name if self.top_agency else None,
            "top_agency_commission": str(self.top_agency.total_commission) if self.top_agency else None,
            "top_agent": self.top_agent.name if self.top_agent else None,
            "top_agent_commission": str(self.top_agent.total_commission) if self.top_agent else None,
            "top_street": self.top_street.as_dict() if self.top_street else None,
        }


@dataclass(frozen=True)
class CommissionRollup:
    summary: CommissionSummary = field(default_factory=CommissionSummary)
    agency_totals: tuple[AgencyTotal, ...] = ()
    agent_totals: tuple[AgentTotal, ...] = ()
    available: bool = True

    def top_agencies(self, n: int = DEFAULT_TOP_N) -> tuple[AgencyTotal, ...]:
        return self.agency_totals[:n]

    def top_agents(self, n: int = DEFAULT_TOP_N) -> tuple[AgentTotal, ...]:
        return self.agent_totals[:n]

    def agency(self, raw_name) -> AgencyTotal | None:
        key = normalize_agency(raw_name)
        return next((a for a in self.agency_totals if a.key == key), None)

    def as_dict(self, top_n: int = DEFAULT_TOP_N) -> dict:
        return {
            "available": self.available,
            "summary": self.summary.as_dict(),
            "agency_totals": [a.as_dict() for a in self.agency_totals],
            "agent_totals": [a.as_dict() for a in self.agent_totals],
            "top_agencies": [a.name for a in self.top_agencies(top_n)],
            "top_agents": [a.name for a in self.top_agents(top_n)],
        }


EMPTY_ROLLUP = CommissionRollup()


# ────────────────────────────────────────────────────────────
# Accumulators
# ────────────────────────────────────────────────────────────

class _AgentBucket:
    def __init__(self, key: str, name: str) -> None:
        self.key = key
        self.name = name
        self.commission = ZERO
        self.listed = 0
        self.sold = 0

    def add(self, amount: Decimal, sold: bool) -> None:
        self.commission += amount
        self.listed += 1
        self.sold += int(sold)

    def freeze(self) -> AgentTotal:
        return AgentTotal(self.key, self.name, self.commission, self.listed, self.sold)


class _AgencyBucket(_AgentBucket):
    def __init__(self, key: str, name: str) -> None:
        super().__init__(key, name)
        self.suburbs: set[str] = set()
        self.agents: dict[str, _AgentBucket] = {}
        self.by_type: dict[str, Decimal] = {}

    def freeze(self) -> AgencyTotal:
        return AgencyTotal(
            key=self.key,
            name=self.name,
            total_commission=self.commission,
            property_count=self.listed,
            listed_count=self.listed,
            sold_count=self.sold,
            suburbs=tuple(sorted(self.suburbs)),
            agents=_ranked(b.freeze() for b in self.agents.values()),
            commission_by_type=tuple(sorted(self.by_type.items())),
        )


def _ranked(totals) -> tuple:
    return tuple(sorted(totals, key=lambda t: (-t.total_commission, t.key)))


def _label(raw, key: str) -> str:
    text = " ".join(str(raw or "").split())
    return text or key


def _property_type(raw) -> str:
    return " ".join(str(raw or "").split()).lower() or "unknown"


# ────────────────────────────────────────────────────────────
# Public API
# ────────────────────────────────────────────────────────────

def rollup_commission(properties, agency: str | None = None) -> CommissionRollup:
    """Fold *properties* into agency, agent and street totals.

    *agency* limits the fold to one normalized agency (agent scope); admins
    pass ``None`` to see every agency.
    """
    wanted = normalize_agency(agency) if agency is not None else None

    agencies: dict[str, _AgencyBucket] = {}
    agents: dict[str, _AgentBucket] = {}
    streets: dict[tuple[str, str], list] = {}
    total = ZERO
    count = 0
    sold_count = 0

    for prop in properties:
        agency_key = normalize_agency(prop.agency_name)
        if wanted is not None and agency_key != wanted:
            continue
        agent_key = normalize_agent(prop.agent_name)
        amount = commission(prop)
        sold = prop.is_sold

        total += amount
        count += 1
        sold_count += int(sold)

        agency_bucket = agencies.get(agency_key)
        if agency_bucket is None:
            agency_bucket = agencies[agency_key] = _AgencyBucket(agency_key, _label(prop.agency_name, agency_key))
        agency_bucket.add(amount, sold)
        suburb = normalize_suburb(prop.suburb)
        if suburb != UNKNOWN:
            agency_bucket.suburbs.add(suburb)
        ptype = _property_type(prop.property_type)
        agency_bucket.by_type[ptype] = agency_bucket.by_type.get(ptype, ZERO) + amount

        nested = agency_bucket.agents.get(agent_key)
        if nested is None:
            nested = agency_bucket.agents[agent_key] = _AgentBucket(agent_key, _label(prop.agent_name, agent_key))
        nested.add(amount, sold)

        agent_bucket = agents.get(agent_key)
        if agent_bucket is None:
            agent_bucket = agents[agent_key] = _AgentBucket(agent_key, _label(prop.agent_name, agent_key))
        agent_bucket.add(amount, sold)

        street = normalize_street(prop.street_name)
        if street:
            entry = streets.setdefault((street, display_suburb(prop.suburb)), [0, 0, ZERO])
            entry[0] += 1
            entry[1] += int(sold)
            entry[2] += amount

    agency_totals = _ranked(b.freeze() for b in agencies.values())
    agent_totals = _ranked(b.freeze() for b in agents.values())

    top_agency = agency_totals[0] if agency_totals and agency_totals[0].total_commission > ZERO else None
    top_agent = agent_totals[0] if agent_totals and agent_totals[0].total_commission > ZERO else None

    top_street = None
    if streets:
        (street, suburb), (listed, sold, amount) = min(
            streets.items(),
            key=lambda item: (-item[1][0], -item[1][2], item[0][0], item[0][1]),
        )
        top_street = StreetTotal(street, suburb, listed, sold, amount)

    logger.debug(
        "Commission rollup: %d properties, %d agencies, %d agents, total=%s",
        count, len(agency_totals), len(agent_totals), total,
    )
    return CommissionRollup(
        summary=CommissionSummary(
            total_commission=total,
            total_properties=count,
            sold_count=sold_count,
            top_agency=top_agency,
            top_agent=top_agent,
            top_street=top_street,
        ),
        agency_totals=agency_totals,
        agent_totals=agent_totals,
    )


# ────────────────────────────────────────────────────────────
# Simulator, trend, street suggestions
# ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CommissionSimulation:
    agency: str
    rate: Decimal
    current_total: Decimal
    simulated_total: Decimal

    @property
    def difference(self) -> Decimal:
        return self.simulated_total - self.current_total


def simulate_commission(properties, agency, rate) -> CommissionSimulation:
    """Current agency commission next to what it would be at a flat *rate*."""
    key = normalize_agency(agency)
    rate = Decimal(str(rate))
    current = ZERO
    simulated = ZERO
    for prop in properties:
        if normalize_agency(prop.agency_name) != key:
            continue
        current += commission(prop)
        simulated += commission(prop, rate=rate)
    return CommissionSimulation(key, rate, current, simulated)


@dataclass(frozen=True)
class TrendPoint:
    period: str
    totals: tuple[tuple[str, Decimal], ...] = ()

    def total_for(self, agency) -> Decimal:
        key = normalize_agency(agency)
        return next((amount for name, amount in self.totals if name == key), ZERO)


def _last_periods(today: date, months: int) -> list[str]:
    periods = []
    year, month = today.year, today.month
    for _ in range(months):
        periods.append(f"{year}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(periods))


def monthly_commission_trend(properties, months: int = 12, today: date | None = None) -> tuple[TrendPoint, ...]:
    """Commission per agency for each of the last *months* months, by sold date."""
    today = today or date.today()
    periods = _last_periods(today, months)
    wanted = set(periods)
    buckets: dict[str, dict[str, Decimal]] = {p: {} for p in periods}
    for prop in properties:
        if prop.sold_date is None:
            continue
        period = prop.sold_date.strftime("%Y-%m")
        if period not in wanted:
            continue
        key = normalize_agency(prop.agency_name)
        buckets[period][key] = buckets[period].get(key, ZERO) + commission(prop)
    return tuple(TrendPoint(p, tuple(sorted(buckets[p].items()))) for p in periods)


@dataclass(frozen=True)
class StreetStats:
    street_name: str
    total_properties: int
    listed_count: int
    sold_count: int


def street_suggestions(properties, suburb, limit: int = 10) -> tuple[StreetStats, ...]:
    """Busiest streets of *suburb*: most properties, then most sold, then name."""
    key = normalize_suburb(suburb)
    if key == UNKNOWN:
        return ()
    counts: dict[str, list[int]] = {}
    for prop in properties:
        if normalize_suburb(prop.suburb) != key:
            continue
        street = normalize_street(prop.street_name) or "Unknown Street"
        entry = counts.setdefault(street, [0, 0, 0])
        entry[0] += 1
        entry[1] += int(prop.price is not None)
        entry[2] += int(prop.is_sold)
    ranked = sorted(counts.items(), key=lambda item: (-item[1][0], -item[1][2], item[0]))
    return tuple(StreetStats(name, *values) for name, values in ranked[:limit])
