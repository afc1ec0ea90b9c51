from __future__ import annotations
import logging
import math
from typing import Optional

import numpy as np

from . import allocation, canon, compare
from .config import EngineConfig, OptimizerConfig, default_config
from .types import FeeAdjustment, FeeSchedule, SimulationSnapshot, TierValues
from .tariffs.schema import TariffPlan

logger = logging.getLogger(__name__)


def round_fee(value: float, cfg: OptimizerConfig) -> float:
    """Round half-up to the configured step, then clamp to [fee_floor, fee_ceiling]."""
    rounded = math.floor(value / cfg.rounding_step + 0.5) * cfg.rounding_step
    return float(min(max(rounded, cfg.fee_floor), cfg.fee_ceiling))


def tier_weighted_volume(
    snapshot: SimulationSnapshot,
    weights: TierValues,
    config: Optional[EngineConfig] = None,
) -> float:
    """Annual kWh over every season, device and hour, each hour scaled by its tier weight."""
    sim = (config or default_config()).simulation
    daily = allocation.hourly_volumes(
        snapshot.total_usage_kwh, snapshot.devices, sim.days_per_month
    )
    total = 0.0
    for season, months in sim.season_months.items():
        hour_weights = np.array([weights[t] for t in sim.schedule(season)], dtype=float)
        annual = daily * sim.days_per_month * months
        total += float((annual * hour_weights).sum())
    return total


def adjust_fees(
    snapshot: SimulationSnapshot,
    plans: list[TariffPlan],
    config: Optional[EngineConfig] = None,
) -> FeeAdjustment:
    """
    Single-pass linear correction of every device's fee schedule.

    The revenue gap is measured against the plan that is cheapest under the
    current fees. Fees only move revenue, so that plan stays cheapest, but it
    is not re-checked after the edit; rounding and clamping also leave the
    recomputed profit near, not on, the target.
    """
    cfg = config or default_config()
    opt = cfg.optimizer
    current = snapshot.fee_table()

    plan, min_annual = compare.min_cost_plan(snapshot, plans, cfg)
    required = snapshot.target_monthly_profit * 12 + min_annual.total_cost
    gap = required - min_annual.total_revenue
    common = dict(
        min_cost_plan=plan,
        min_cost=min_annual.total_cost,
        required_revenue=required,
        current_revenue=min_annual.total_revenue,
        revenue_gap=gap,
    )

    if abs(gap) < opt.tolerance:
        logger.debug("Revenue gap %.2f within tolerance; fees unchanged", gap)
        return FeeAdjustment(applied=False, reason="on_target", fees=current, **common)

    weights = opt.increase_weights if gap > 0 else opt.decrease_weights
    weighted_volume = tier_weighted_volume(snapshot, weights, cfg)
    if weighted_volume == 0:
        logger.debug("No weighted volume to price against; fees unchanged")
        return FeeAdjustment(
            applied=False,
            reason="no_volume",
            fees=current,
            weights=weights,
            **common,
        )

    delta = gap / weighted_volume
    new_fees: dict[str, FeeSchedule] = {
        name: TierValues(
            **{t: round_fee(fees[t] + delta * weights[t], opt) for t in canon.TIERS}
        )
        for name, fees in current.items()
    }
    logger.debug(
        "Plan %r: gap %.2f over weighted volume %.2f -> base delta %.4f",
        plan.name,
        gap,
        weighted_volume,
        delta,
    )
    return FeeAdjustment(
        applied=True,
        reason="adjusted",
        fees=new_fees,
        weights=weights,
        total_weighted_volume=weighted_volume,
        base_price_delta=delta,
        **common,
    )
