from __future__ import annotations
import logging
from dataclasses import replace
from typing import Mapping, Optional, Sequence, Tuple

import pandas as pd

from . import allocation, compare, optimize, pricing, validate
from .config import EngineConfig, default_config
from .defaults import default_inputs
from .exceptions import InputError, require
from .types import (
    DeviceClass,
    FeeAdjustment,
    FeeSchedule,
    MonthlyResult,
    PlanResult,
    SimulationSnapshot,
    SimulationState,
    SiteInputs,
    TierValues,
)
from .tariffs.catalog import default_catalog
from .tariffs.schema import TariffPlan

logger = logging.getLogger(__name__)

SCALAR_FIELDS = frozenset(
    {
        "total_usage_kwh",
        "target_monthly_profit",
        "annual_fixed_cost",
        "contracted_power_kw",
        "season",
        "use_tou",
    }
)
DEVICE_FIELDS = frozenset(
    {"capacity_kw", "count", "public", "share", "hourly_weights", "fees"}
)
# Changing any of these re-derives contracted power
CAPACITY_FIELDS = frozenset({"capacity_kw", "count", "public"})


def derive_contracted_power(devices: Sequence[DeviceClass]) -> float:
    """Sum of count x capacity over non-public devices; public capacity is provisioned externally."""
    return float(sum(d.count * d.capacity_kw for d in devices if not d.public))


def _clone_inputs(inputs: SiteInputs) -> SiteInputs:
    return replace(inputs, devices=list(inputs.devices))


class SimulationOrchestrator:
    """
    Owns the live inputs, the last committed snapshot and the published results.

    State is DIRTY until a run, CLEAN after one, and DIRTY again on any change
    to a tracked input. Results are replaced as a whole on each run.
    """

    def __init__(
        self,
        plans: Optional[Sequence[TariffPlan]] = None,
        inputs: Optional[SiteInputs] = None,
        *,
        config: Optional[EngineConfig] = None,
    ):
        self._plans: Tuple[TariffPlan, ...] = tuple(
            plans if plans is not None else default_catalog()
        )
        self._config = config or default_config()
        self._inputs = _clone_inputs(inputs) if inputs is not None else default_inputs()
        if self._inputs.contracted_power_kw is None:
            self._inputs.contracted_power_kw = derive_contracted_power(self._inputs.devices)
        self._state = SimulationState.DIRTY
        self._snapshot: Optional[SimulationSnapshot] = None
        self._results: Tuple[PlanResult, ...] = ()

    # ------------------ read side ------------------

    @property
    def plans(self) -> Tuple[TariffPlan, ...]:
        return self._plans

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def inputs(self) -> SiteInputs:
        """A copy of the live inputs; change them through update()/update_device()."""
        return _clone_inputs(self._inputs)

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def is_dirty(self) -> bool:
        return self._state is SimulationState.DIRTY

    @property
    def snapshot(self) -> Optional[SimulationSnapshot]:
        return self._snapshot

    @property
    def results(self) -> Tuple[PlanResult, ...]:
        return self._results

    @property
    def best_plan_index(self) -> int:
        return compare.best_plan_index(self._results)

    @property
    def best_result(self) -> Optional[PlanResult]:
        return compare.best_plan(self._results)

    # ------------------ mutations ------------------

    def _mark_dirty(self, what: str) -> None:
        if self._state is not SimulationState.DIRTY:
            logger.debug("Input '%s' changed; results are stale", what)
        self._state = SimulationState.DIRTY

    def update(self, **changes) -> None:
        """Set scalar inputs, e.g. update(total_usage_kwh=9000, season="winter")."""
        unknown = sorted(set(changes) - SCALAR_FIELDS)
        require(not unknown, f"Unknown input fields: {', '.join(unknown)}", InputError)
        for name, value in changes.items():
            if name == "contracted_power_kw" and value is None:
                value = derive_contracted_power(self._inputs.devices)
            if getattr(self._inputs, name) != value:
                setattr(self._inputs, name, value)
                self._mark_dirty(name)

    def update_device(self, name: str, **changes) -> None:
        """Change fields of one device class, e.g. update_device("slow", count=10)."""
        unknown = sorted(set(changes) - DEVICE_FIELDS)
        require(not unknown, f"Unknown device fields: {', '.join(unknown)}", InputError)
        if "fees" in changes and not isinstance(changes["fees"], TierValues):
            changes["fees"] = TierValues.from_mapping(changes["fees"])

        names = self._inputs.device_names
        require(name in names, f"Unknown device class '{name}'.", InputError)
        pos = names.index(name)
        old = self._inputs.devices[pos]
        new = replace(old, **changes)
        if new == old:
            return
        self._inputs.devices[pos] = new
        self._mark_dirty(f"{name}.{','.join(sorted(changes))}")
        if CAPACITY_FIELDS & set(changes):
            self._inputs.contracted_power_kw = derive_contracted_power(
                self._inputs.devices
            )

    def set_fees(self, fees: Mapping[str, FeeSchedule | Mapping[str, float]]) -> None:
        for name, schedule in fees.items():
            self.update_device(name, fees=schedule)

    # ------------------ runs ------------------

    def take_snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot.from_inputs(
            self._inputs, public_unit_cost=self._config.simulation.public_unit_cost
        )

    def run(self, *, strict: bool = False) -> Tuple[PlanResult, ...]:
        """
        Snapshot the live inputs, evaluate every catalog plan and publish the results.

        strict=True applies the caller validation contract first.
        """
        if strict:
            validate.assert_inputs(self._inputs)
            validate.assert_catalog(self._plans)
        snapshot = self.take_snapshot()
        results = tuple(compare.compare_plans(snapshot, self._plans, self._config))
        self._snapshot, self._results = snapshot, results
        self._state = SimulationState.CLEAN
        logger.debug(
            "Simulation run over %d plans (season=%s)", len(results), snapshot.season
        )
        return results

    def optimize_fees(self) -> FeeAdjustment:
        """Re-price all device fees toward the target profit, commit them and re-run."""
        adjustment = optimize.adjust_fees(self.take_snapshot(), list(self._plans), self._config)
        if not adjustment.applied:
            return adjustment
        self.set_fees(adjustment.fees)
        self.run()
        logger.info(
            "Fees adjusted against plan %r (revenue gap %.0f)",
            adjustment.min_cost_plan.name,
            adjustment.revenue_gap,
        )
        return adjustment

    # ------------------ views ------------------

    def hourly_profile(self, season: Optional[str] = None) -> pd.DataFrame:
        """Average-day allocation of the live inputs (hour, volume, tier, per-device kWh)."""
        sim = self._config.simulation
        return allocation.hourly_frame(
            self._inputs.total_usage_kwh,
            self._inputs.devices,
            sim.schedule(season or self._inputs.season),
            sim.days_per_month,
        )

    def season_view(self) -> Optional[MonthlyResult]:
        """Committed snapshot's selected season under the reference plan; None before a run."""
        if self._snapshot is None or not self._plans:
            return None
        plan = self._plans[self._config.simulation.reference_plan_index]
        return pricing.compute_monthly(
            self._snapshot, self._snapshot.season, plan, self._config
        )

    def revenue_breakdown(self) -> dict[str, float]:
        view = self.season_view()
        return dict(view.device_revenue) if view is not None else {}
