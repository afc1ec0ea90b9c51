"""Orchestrator: Dirty/Clean state, contracted power, snapshots and fee optimisation."""

import pytest

from evtariffsim import compare, defaults, pricing
from evtariffsim.exceptions import InputError
from evtariffsim.orchestrator import SimulationOrchestrator, derive_contracted_power
from evtariffsim.types import SimulationState, TierValues


@pytest.fixture
def orch(catalog):
    return SimulationOrchestrator(catalog)


def test_starts_dirty_with_derived_contracted_power(orch):
    assert orch.state is SimulationState.DIRTY
    assert orch.is_dirty
    assert orch.results == ()
    assert orch.best_plan_index == -1
    # rapid is public: 8 x 7 kW + 36 x 3 kW
    assert orch.inputs.contracted_power_kw == 164.0


def test_run_publishes_results_and_cleans(orch, catalog):
    results = orch.run()
    assert orch.state is SimulationState.CLEAN
    assert len(results) == len(catalog)
    assert orch.results is results
    assert orch.best_plan_index == compare.best_plan_index(results)
    assert orch.best_result is results[orch.best_plan_index]
    assert orch.snapshot.contracted_power_kw == 164.0


def test_any_tracked_change_dirties(orch):
    orch.run()
    orch.update(total_usage_kwh=12000.0)
    assert orch.is_dirty
    orch.run()
    orch.update(season="winter")
    assert orch.is_dirty
    orch.run()
    orch.update_device("slow", hourly_weights=(1,) * 24)
    assert orch.is_dirty
    orch.run()
    orch.set_fees({"outlet": {"light": 190, "mid": 230, "heavy": 280}})
    assert orch.is_dirty


def test_unchanged_values_keep_clean(orch):
    inputs = orch.inputs
    orch.run()
    orch.update(total_usage_kwh=inputs.total_usage_kwh, use_tou=inputs.use_tou)
    orch.update_device("slow", count=inputs.device("slow").count)
    assert orch.state is SimulationState.CLEAN


def test_contracted_power_follows_counts_and_public_flags(orch):
    orch.update_device("slow", count=10)
    assert orch.inputs.contracted_power_kw == 10 * 7 + 36 * 3
    orch.update_device("rapid", public=False)
    assert orch.inputs.contracted_power_kw == 2 * 50 + 10 * 7 + 36 * 3
    orch.update_device("outlet", public=True)
    assert orch.inputs.contracted_power_kw == 2 * 50 + 10 * 7


def test_explicit_contracted_power_until_devices_change(orch):
    orch.update(contracted_power_kw=300.0)
    assert orch.inputs.contracted_power_kw == 300.0
    orch.update_device("slow", count=9)
    assert orch.inputs.contracted_power_kw == derive_contracted_power(orch.inputs.devices)
    orch.update(contracted_power_kw=None)
    assert orch.inputs.contracted_power_kw == 9 * 7 + 36 * 3


def test_unknown_fields_and_devices_rejected(orch):
    with pytest.raises(InputError):
        orch.update(usage=1.0)
    with pytest.raises(InputError):
        orch.update_device("slow", colour="blue")
    with pytest.raises(InputError):
        orch.update_device("wireless", count=1)


def test_snapshot_isolated_from_later_edits(orch):
    results = orch.run()
    snap = orch.snapshot
    before = snap.fee_table()
    orch.set_fees({"slow": TierValues(999, 999, 999)})
    orch.update(total_usage_kwh=1.0)
    orch.inputs.devices.clear()
    assert orch.snapshot is snap
    assert snap.fee_table() == before
    assert snap.total_usage_kwh == 15000.0
    assert orch.results is results


def test_inputs_property_is_a_copy(orch):
    orch.run()
    copy = orch.inputs
    copy.total_usage_kwh = 1.0
    copy.devices.pop()
    assert orch.inputs.total_usage_kwh == 15000.0
    assert len(orch.inputs.devices) == 3
    assert orch.state is SimulationState.CLEAN


def test_rerun_is_idempotent(orch):
    first = orch.run()
    second = orch.run()
    assert first == second
    assert [r.annual.total_profit for r in first] == [r.annual.total_profit for r in second]


def test_optimize_commits_fees_and_reruns(orch):
    orch.update(target_monthly_profit=2_000_000.0)
    adj = orch.optimize_fees()
    assert adj.applied
    assert orch.state is SimulationState.CLEAN
    live = {d.name: d.fees for d in orch.inputs.devices}
    assert live == adj.fees
    assert orch.snapshot.fee_table() == adj.fees


def test_optimize_noop_leaves_state(catalog):
    inputs = defaults.default_inputs()
    probe = SimulationOrchestrator(catalog, inputs)
    _, annual = compare.min_cost_plan(probe.take_snapshot(), catalog)
    inputs.target_monthly_profit = (annual.total_revenue - annual.total_cost) / 12
    orch = SimulationOrchestrator(catalog, inputs)
    before = {d.name: d.fees for d in orch.inputs.devices}
    adj = orch.optimize_fees()
    assert not adj.applied
    assert orch.is_dirty
    assert {d.name: d.fees for d in orch.inputs.devices} == before


def test_strict_run_enforces_contract(orch):
    orch.update_device("slow", share=10.0)
    with pytest.raises(InputError):
        orch.run(strict=True)
    assert orch.is_dirty
    # the core itself takes shares as given
    orch.run()
    assert orch.state is SimulationState.CLEAN


def test_hourly_profile_uses_live_inputs(orch):
    frame = orch.hourly_profile()
    assert len(frame) == 24
    assert frame["tier"].tolist() == list(orch.config.simulation.schedule("summer"))
    orch.update(total_usage_kwh=30000.0)
    assert orch.hourly_profile("winter")["volume"].sum() == pytest.approx(1000.0)


def test_season_view_and_breakdown(orch, catalog):
    assert orch.season_view() is None
    assert orch.revenue_breakdown() == {}
    orch.run()
    view = orch.season_view()
    assert view == pricing.compute_monthly(orch.snapshot, "summer", catalog[0])
    breakdown = orch.revenue_breakdown()
    assert list(breakdown) == ["rapid", "slow", "outlet"]
    assert sum(breakdown.values()) == pytest.approx(view.revenue)
