from __future__ import annotations
from typing import Sequence

from .. import canon
from ..exceptions import PlanError, require
from .schema import TariffPlan


def validate_plan(plan: TariffPlan) -> None:
    missing = [s for s in canon.SEASONS if s not in plan.rates]
    if missing:
        raise PlanError(
            f"Plan '{plan.name}' is missing rates for: {', '.join(missing)}"
        )
    unknown = [s for s in plan.rates if s not in canon.SEASONS]
    if unknown:
        raise PlanError(f"Plan '{plan.name}' has unknown seasons: {', '.join(unknown)}")
    require(plan.base_rate >= 0, f"Plan '{plan.name}' has a negative base rate.", PlanError)
    for season, rates in plan.rates.items():
        for tier in canon.TIERS:
            if getattr(rates, tier) < 0:
                raise PlanError(
                    f"Plan '{plan.name}' has a negative {tier} rate in {season}."
                )


def validate_catalog(plans: Sequence[TariffPlan]) -> None:
    require(len(plans) > 0, "Plan catalog is empty.", PlanError)
    seen = set()
    for plan in plans:
        if plan.id in seen:
            raise PlanError(f"Duplicate plan id {plan.id!r} in catalog.")
        seen.add(plan.id)
        validate_plan(plan)
