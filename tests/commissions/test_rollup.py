from datetime import date
from decimal import Decimal

from commissions.rollup import (
    monthly_commission_trend,
    rollup_commission,
    simulate_commission,
    street_suggestions,
)


def _portfolio(make_property):
    return [
        make_property("Harcourts Success", "Jane Doe", price=500000, rate=2,
                      suburb="Moggill", street_name="Main St", contract_status="sold"),
        make_property("harcourts success", "john smith", price=250000, rate=2,
                      suburb="moggill qld", street_name="Main St", property_type="House"),
        make_property("RE/MAX", "Amy Lee", price=150000, rate=2,
                      suburb="Kenmore", street_name="High St", property_type="unit"),
    ]


def test_top_agency_is_harcourts(make_property):
    rollup = rollup_commission(_portfolio(make_property))

    top = rollup.summary.top_agency
    assert top.name == "Harcourts Success"
    assert top.total_commission == Decimal("15000.00")
    assert [a.key for a in rollup.agency_totals] == ["Harcourts success", "Re/max"]
    assert rollup.summary.total_commission == Decimal("18000.00")
    assert rollup.summary.total_properties == 3
    assert rollup.summary.sold_count == 1


def test_agency_totals(make_property):
    harcourts = rollup_commission(_portfolio(make_property)).agency("HARCOURTS SUCCESS")

    assert harcourts.property_count == 2
    assert harcourts.listed_count == 2
    assert harcourts.sold_count == 1
    assert harcourts.suburbs == ("MOGGILL 4070",)
    assert [a.name for a in harcourts.agents] == ["Jane Doe", "john smith"]
    assert dict(harcourts.commission_by_type) == {"house": Decimal("5000.00"), "unknown": Decimal("10000.00")}


def test_top_agent_and_street(make_property):
    rollup = rollup_commission(_portfolio(make_property))

    assert rollup.summary.top_agent.name == "Jane Doe"
    street = rollup.summary.top_street
    assert (street.street_name, street.suburb) == ("Main St", "MOGGILL 4070")
    assert street.listed_count == 2
    assert street.total_commission == Decimal("15000.00")


def test_sold_date_counts_as_sold(make_property):
    rollup = rollup_commission([make_property(price=100000, rate=2, sold_date=date(2024, 1, 5))])
    assert rollup.summary.sold_count == 1


def test_ties_break_on_key(make_property):
    props = [
        make_property("Zeta Realty", "Zed", price=100000, rate=2),
        make_property("Alpha Realty", "Al", price=100000, rate=2),
    ]
    rollup = rollup_commission(props)
    assert rollup.summary.top_agency.key == "Alpha realty"
    assert rollup_commission(list(reversed(props))) == rollup


def test_zero_commission_agencies_are_counted_but_never_top(make_property):
    rollup = rollup_commission([make_property("Ray White", "Bob", price=300000)])

    assert rollup.agency_totals[0].property_count == 1
    assert rollup.summary.top_agency is None
    assert rollup.summary.top_agent is None


def test_empty_rollup():
    rollup = rollup_commission([])

    assert rollup.summary.total_commission == 0
    assert rollup.summary.total_properties == 0
    assert rollup.agency_totals == ()
    assert rollup.agent_totals == ()
    assert rollup.top_agencies() == ()
    assert rollup.summary.top_street is None
    assert rollup.available


def test_agency_scope(make_property):
    rollup = rollup_commission(_portfolio(make_property), agency="re/max")
    assert [a.name for a in rollup.agency_totals] == ["RE/MAX"]
    assert rollup.summary.total_commission == Decimal("3000.00")


def test_top_n(make_property):
    props = [make_property(f"Agency {i}", f"Agent {i}", price=100000 * (i + 1), rate=2) for i in range(7)]
    rollup = rollup_commission(props)
    assert [a.name for a in rollup.top_agencies()] == [f"Agency {i}" for i in (6, 5, 4, 3, 2)]
    assert len(rollup.top_agents(3)) == 3


def test_simulation(make_property):
    simulation = simulate_commission(_portfolio(make_property), "Harcourts Success", "3")

    assert simulation.current_total == Decimal("15000.00")
    assert simulation.simulated_total == Decimal("22500.00")
    assert simulation.difference == Decimal("7500.00")


def test_monthly_trend(make_property):
    props = [
        make_property(price=100000, rate=2, sold_date=date(2024, 5, 3)),
        make_property(price=200000, rate=2, sold_date=date(2024, 5, 20)),
        make_property("RE/MAX", price=100000, rate=1, sold_date=date(2024, 3, 1)),
        make_property(price=100000, rate=2, sold_date=date(2022, 1, 1)),
    ]
    trend = monthly_commission_trend(props, months=3, today=date(2024, 5, 31))

    assert [p.period for p in trend] == ["2024-03", "2024-04", "2024-05"]
    assert trend[0].total_for("re/max") == Decimal("1000.00")
    assert trend[1].totals == ()
    assert trend[2].total_for("Harcourts Success") == Decimal("6000.00")


def test_trend_crosses_year_boundary():
    trend = monthly_commission_trend([], months=2, today=date(2024, 1, 15))
    assert [p.period for p in trend] == ["2023-12", "2024-01"]


def test_street_suggestions(make_property):
    props = [
        make_property(suburb="Moggill", street_name="Main St", price=1),
        make_property(suburb="Moggill", street_name="Main St", contract_status="sold"),
        make_property(suburb="Moggill QLD", street_name="Bay Rd", price=1),
        make_property(suburb="Kenmore", street_name="High St", price=1),
    ]
    suggestions = street_suggestions(props, "moggill")

    assert [s.street_name for s in suggestions] == ["Main St", "Bay Rd"]
    assert suggestions[0].total_properties == 2
    assert suggestions[0].listed_count == 1
    assert suggestions[0].sold_count == 1
    assert street_suggestions(props, "Nowhereville") == ()
