"""Tariff engine: monthly economics and the seasonal annual roll-up.

- test_worked_spring_fall_month: single flat device at 7200 kWh/month, hand-checked figures.
- test_public_device_cost_is_plan_invariant: public devices bypass the plan's rates.
- test_annual_is_month_weighted_sum: 5 / 3 / 4 weighting, exact.
"""

from dataclasses import FrozenInstanceError, replace

import pytest

from evtariffsim import pricing
from evtariffsim.types import SimulationSnapshot


def test_worked_spring_fall_month(worked_snapshot, plan_low_voltage):
    m = pricing.compute_monthly(worked_snapshot, "spring_fall", plan_low_voltage)
    assert m.revenue == pytest.approx(1_740_000.0)
    assert m.electricity_cost == pytest.approx(584_220.0)
    assert m.demand_charge == pytest.approx(23_900.0)
    assert m.fixed_cost == pytest.approx(20_000.0)
    assert m.cost == pytest.approx(628_120.0)
    assert m.profit == pytest.approx(1_111_880.0)
    assert m.pattern.total() == pytest.approx(100.0)


def test_no_demand_charge_without_contracted_power(worked_snapshot, plan_low_voltage):
    snap = replace(worked_snapshot, contracted_power_kw=0.0)
    m = pricing.compute_monthly(snap, "spring_fall", plan_low_voltage)
    assert m.demand_charge == 0.0
    assert m.cost == pytest.approx(584_220.0 + 20_000.0)


def test_public_device_cost_is_plan_invariant(worked_snapshot, catalog):
    device = replace(worked_snapshot.devices[0], public=True)
    snap = replace(worked_snapshot, devices=(device,), contracted_power_kw=0.0)
    for season in ("spring_fall", "summer", "winter"):
        costs = {
            plan.id: pricing.compute_monthly(snap, season, plan).electricity_cost
            for plan in catalog
        }
        assert len(set(costs.values())) == 1
        assert next(iter(costs.values())) == pytest.approx(7200.0 * snap.public_unit_cost)


def test_mixed_public_and_private_devices(default_snapshot, catalog):
    """Only the private devices' electricity cost moves between plans."""
    rapid = default_snapshot.devices[0]
    assert rapid.public
    public_cost = default_snapshot.total_usage_kwh * rapid.share / 100 * 167.0
    a = pricing.compute_monthly(default_snapshot, "summer", catalog[0])
    b = pricing.compute_monthly(default_snapshot, "summer", catalog[3])
    # flat plan: 100 per kWh for the 90% of usage that is private
    assert b.electricity_cost == pytest.approx(public_cost + 15000.0 * 0.9 * 100.0)
    assert a.electricity_cost != pytest.approx(b.electricity_cost)


def test_revenue_does_not_depend_on_plan(default_snapshot, catalog):
    revenues = [
        pricing.compute_monthly(default_snapshot, "winter", plan).revenue
        for plan in catalog
    ]
    assert revenues == pytest.approx([revenues[0]] * len(revenues))


def test_device_revenue_adds_up(default_snapshot, plan_low_voltage):
    m = pricing.compute_monthly(default_snapshot, "summer", plan_low_voltage)
    assert set(m.device_revenue) == {"rapid", "slow", "outlet"}
    assert sum(m.device_revenue.values()) == pytest.approx(m.revenue)
    # rapid charges 290 in every tier
    assert m.device_revenue["rapid"] == pytest.approx(1500.0 * 290.0)


def test_annual_is_month_weighted_sum(default_snapshot, plan_low_voltage):
    annual = pricing.compute_annual(default_snapshot, plan_low_voltage)
    sf = pricing.compute_monthly(default_snapshot, "spring_fall", plan_low_voltage)
    su = pricing.compute_monthly(default_snapshot, "summer", plan_low_voltage)
    wi = pricing.compute_monthly(default_snapshot, "winter", plan_low_voltage)
    assert annual.total_profit == 5 * sf.profit + 3 * su.profit + 4 * wi.profit
    assert annual.total_revenue == 5 * sf.revenue + 3 * su.revenue + 4 * wi.revenue
    assert annual.total_cost == 5 * sf.cost + 3 * su.cost + 4 * wi.cost
    assert annual.monthly_avg_profit == annual.total_profit / 12


def test_zero_usage_leaves_only_fixed_costs(worked_snapshot, plan_low_voltage):
    snap = replace(worked_snapshot, total_usage_kwh=0.0)
    m = pricing.compute_monthly(snap, "summer", plan_low_voltage)
    assert m.revenue == 0.0
    assert m.electricity_cost == 0.0
    assert m.cost == pytest.approx(23_900.0 + 20_000.0)
    assert m.profit == pytest.approx(-43_900.0)


def test_snapshot_is_frozen(worked_snapshot):
    assert isinstance(worked_snapshot, SimulationSnapshot)
    with pytest.raises(FrozenInstanceError):
        worked_snapshot.total_usage_kwh = 1.0  # frozen
