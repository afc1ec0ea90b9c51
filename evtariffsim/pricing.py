from __future__ import annotations
from typing import Mapping, Optional

from . import allocation
from .config import EngineConfig, default_config
from .types import AnnualResult, MonthlyResult, SimulationSnapshot, TierValues
from .tariffs.schema import TariffPlan, TierRates


def blend(values: TierValues | TierRates, pattern: TierValues) -> float:
    """Pattern-weighted average of a per-tier price table (pattern in %)."""
    return (
        values.light * pattern.light
        + values.mid * pattern.mid
        + values.heavy * pattern.heavy
    ) / 100.0


def compute_monthly(
    snapshot: SimulationSnapshot,
    season: str,
    plan: TariffPlan,
    config: Optional[EngineConfig] = None,
) -> MonthlyResult:
    """
    Revenue, cost and profit of one representative month of a season under a plan.

    - revenue: each device's volume at its own fees, blended by the season's tier pattern
    - electricity: plan rate blended by the same pattern; public devices pay the
      external unit cost instead and never touch the plan
    - demand charge: contracted kW x base rate (0 when nothing is contracted)
    - fixed: annual fixed cost spread over 12 months
    """
    sim = (config or default_config()).simulation
    total = snapshot.total_usage_kwh
    pattern = allocation.tier_pattern(
        total, snapshot.devices, sim.schedule(season), sim.days_per_month
    )
    avg_kwh_cost = blend(plan.season_rates(season), pattern)

    revenue = 0.0
    electricity = 0.0
    device_revenue: dict[str, float] = {}
    for d in snapshot.devices:
        volume = total * (d.share / 100.0)
        device_revenue[d.name] = volume * blend(d.fees, pattern)
        revenue += device_revenue[d.name]
        unit_cost = snapshot.public_unit_cost if d.public else avg_kwh_cost
        electricity += volume * unit_cost

    demand = (
        snapshot.contracted_power_kw * plan.base_rate
        if snapshot.contracted_power_kw > 0
        else 0.0
    )
    fixed = snapshot.annual_fixed_cost / 12.0
    cost = electricity + demand + fixed

    return MonthlyResult(
        revenue=revenue,
        cost=cost,
        profit=revenue - cost,
        pattern=pattern,
        electricity_cost=electricity,
        demand_charge=demand,
        fixed_cost=fixed,
        device_revenue=device_revenue,
    )


def annual_from_seasons(
    seasons: Mapping[str, MonthlyResult], season_months: Mapping[str, int]
) -> AnnualResult:
    total_profit = total_revenue = total_cost = 0.0
    for season, months in season_months.items():
        r = seasons[season]
        total_profit += r.profit * months
        total_revenue += r.revenue * months
        total_cost += r.cost * months
    return AnnualResult(
        total_profit=total_profit,
        monthly_avg_profit=total_profit / 12,
        total_revenue=total_revenue,
        total_cost=total_cost,
    )


def compute_seasons(
    snapshot: SimulationSnapshot,
    plan: TariffPlan,
    config: Optional[EngineConfig] = None,
) -> dict[str, MonthlyResult]:
    cfg = config or default_config()
    return {
        season: compute_monthly(snapshot, season, plan, cfg)
        for season in cfg.simulation.season_months
    }


def compute_annual(
    snapshot: SimulationSnapshot,
    plan: TariffPlan,
    config: Optional[EngineConfig] = None,
) -> AnnualResult:
    """Month-weighted sum over spring/fall (5), summer (3) and winter (4)."""
    cfg = config or default_config()
    seasons = compute_seasons(snapshot, plan, cfg)
    return annual_from_seasons(seasons, cfg.simulation.season_months)
