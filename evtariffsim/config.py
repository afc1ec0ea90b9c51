from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from . import canon
from .exceptions import ConfigError, require
from .types import TierValues


@dataclass
class SimulationConfig:
    days_per_month: int = canon.DAYS_PER_MONTH
    # Representative months per season (must sum to 12)
    season_months: Dict[str, int] = field(
        default_factory=lambda: dict(canon.SEASON_MONTHS)
    )
    tier_schedules: Dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(canon.TIER_SCHEDULES)
    )
    public_unit_cost: float = canon.FIXED_PUBLIC_UNIT_COST
    # Catalog position of the plan used for the single-season view
    reference_plan_index: int = 0

    def __post_init__(self):
        require(self.days_per_month > 0, "days_per_month must be positive.", ConfigError)
        require(
            sum(self.season_months.values()) == 12,
            f"Season months must sum to 12, got {self.season_months}.",
            ConfigError,
        )
        for season in self.season_months:
            schedule = self.tier_schedules.get(season)
            require(
                schedule is not None, f"No tier schedule for season '{season}'.", ConfigError
            )
            require(
                len(schedule) == canon.HOURS,
                f"Tier schedule for '{season}' must have {canon.HOURS} hours.",
                ConfigError,
            )
            bad = sorted(set(schedule) - set(canon.TIERS))
            require(not bad, f"Unknown tiers in '{season}' schedule: {bad}", ConfigError)

    def schedule(self, season: str) -> Tuple[str, ...]:
        try:
            return tuple(self.tier_schedules[season])
        except KeyError:
            raise ConfigError(f"Unknown season '{season}'.") from None


@dataclass
class OptimizerConfig:
    # Revenue gap below which fees are left alone
    tolerance: float = 1000.0
    # Positive gap: push more of the increase onto heavy-load hours
    increase_weights: TierValues = field(
        default_factory=lambda: TierValues(light=0.6, mid=1.0, heavy=1.4)
    )
    decrease_weights: TierValues = field(
        default_factory=lambda: TierValues(light=1.4, mid=1.0, heavy=0.6)
    )
    fee_floor: float = 50.0
    fee_ceiling: float = 2000.0
    rounding_step: float = 10.0

    def __post_init__(self):
        require(self.fee_floor <= self.fee_ceiling, "fee_floor exceeds fee_ceiling.", ConfigError)
        require(self.rounding_step > 0, "rounding_step must be positive.", ConfigError)


@dataclass
class EngineConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)


def default_config() -> EngineConfig:
    return EngineConfig()
