from __future__ import annotations
from typing import Mapping, Sequence, cast

import pandas as pd

from . import canon, compare
from .types import HourlyRow, MonthlyResult, PlanResult


def plan_table(results: Sequence[PlanResult]) -> pd.DataFrame:
    """
    One row per plan, in catalog order:
      ['plan_id', 'plan_name', 'base_rate', 'total_revenue', 'total_cost',
       'total_profit', 'monthly_avg_profit', 'profit_rank', 'is_best']
    """
    cols = [
        "plan_id",
        "plan_name",
        "base_rate",
        "total_revenue",
        "total_cost",
        "total_profit",
        "monthly_avg_profit",
        "profit_rank",
        "is_best",
    ]
    if not results:
        return pd.DataFrame(columns=cols)

    out = pd.DataFrame(
        {
            "plan_id": [r.plan.id for r in results],
            "plan_name": [r.plan.name for r in results],
            "base_rate": [r.plan.base_rate for r in results],
            "total_revenue": [r.annual.total_revenue for r in results],
            "total_cost": [r.annual.total_cost for r in results],
            "total_profit": [r.annual.total_profit for r in results],
            "monthly_avg_profit": [r.annual.monthly_avg_profit for r in results],
        }
    )
    # ties keep catalog order, matching best_plan_index
    out["profit_rank"] = (
        out["total_profit"].rank(ascending=False, method="first").astype(int)
    )
    out["is_best"] = False
    out.loc[compare.best_plan_index(results), "is_best"] = True
    return out[cols]


def season_table(
    result: PlanResult, season_months: Mapping[str, int] = canon.SEASON_MONTHS
) -> pd.DataFrame:
    """Per-season breakdown of one plan, including the realised tier pattern (%)."""
    rows = []
    for season, months in season_months.items():
        m = result.seasons[season]
        rows.append(
            {
                "season": season,
                "months": months,
                "revenue": m.revenue,
                "cost": m.cost,
                "profit": m.profit,
                "electricity_cost": m.electricity_cost,
                "demand_charge": m.demand_charge,
                "fixed_cost": m.fixed_cost,
                **{f"{t}_pct": m.pattern[t] for t in canon.TIERS},
            }
        )
    return pd.DataFrame(rows)


def revenue_breakdown(monthly: MonthlyResult) -> pd.DataFrame:
    """Revenue per device class with its share of the month's revenue (%)."""
    out = pd.DataFrame(
        {
            "device": list(monthly.device_revenue),
            "revenue": list(monthly.device_revenue.values()),
        }
    )
    out["share_pct"] = (
        out["revenue"] / monthly.revenue * 100.0 if monthly.revenue else 0.0
    )
    return out


def hourly_records(frame: pd.DataFrame) -> list[HourlyRow]:
    records = frame[["hour", "volume", "tier"]].to_dict(orient="records")
    return cast(
        list[HourlyRow],
        [
            {"hour": int(r["hour"]), "volume": float(r["volume"]), "tier": str(r["tier"])}
            for r in records
        ],
    )
