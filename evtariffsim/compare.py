from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple

from . import pricing
from .config import EngineConfig, default_config
from .exceptions import PlanError, require
from .types import AnnualResult, PlanResult, SimulationSnapshot
from .tariffs.schema import TariffPlan

logger = logging.getLogger(__name__)


def evaluate_plan(
    snapshot: SimulationSnapshot,
    plan: TariffPlan,
    config: Optional[EngineConfig] = None,
) -> PlanResult:
    cfg = config or default_config()
    seasons = pricing.compute_seasons(snapshot, plan, cfg)
    annual = pricing.annual_from_seasons(seasons, cfg.simulation.season_months)
    return PlanResult(plan=plan, annual=annual, seasons=seasons)


def compare_plans(
    snapshot: SimulationSnapshot,
    plans: Sequence[TariffPlan],
    config: Optional[EngineConfig] = None,
) -> list[PlanResult]:
    """One PlanResult per catalog plan, in catalog order."""
    cfg = config or default_config()
    results = [evaluate_plan(snapshot, plan, cfg) for plan in plans]
    logger.debug("Compared %d plans; best index %d", len(results), best_plan_index(results))
    return results


def best_plan_index(results: Sequence[PlanResult]) -> int:
    """Index of the highest annual profit; the first occurrence wins ties. -1 if empty."""
    if not results:
        return -1
    best = 0
    for i, r in enumerate(results):
        if r.annual.total_profit > results[best].annual.total_profit:
            best = i
    return best


def best_plan(results: Sequence[PlanResult]) -> Optional[PlanResult]:
    idx = best_plan_index(results)
    return results[idx] if idx >= 0 else None


def min_cost_index(results: Sequence[PlanResult]) -> int:
    """Index of the lowest annual cost; the first occurrence wins ties. -1 if empty."""
    if not results:
        return -1
    best = 0
    for i, r in enumerate(results):
        if r.annual.total_cost < results[best].annual.total_cost:
            best = i
    return best


def min_cost_plan(
    snapshot: SimulationSnapshot,
    plans: Sequence[TariffPlan],
    config: Optional[EngineConfig] = None,
) -> Tuple[TariffPlan, AnnualResult]:
    require(len(plans) > 0, "Cannot pick a minimum-cost plan from an empty catalog.", PlanError)
    cfg = config or default_config()
    chosen, chosen_annual = None, None
    for plan in plans:
        annual = pricing.compute_annual(snapshot, plan, cfg)
        if chosen_annual is None or annual.total_cost < chosen_annual.total_cost:
            chosen, chosen_annual = plan, annual
    return chosen, chosen_annual
