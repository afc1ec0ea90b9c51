from __future__ import annotations
from typing import TypedDict, Literal, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field, replace
from enum import Enum

from . import canon
from .exceptions import InputError
from .tariffs.schema import TariffPlan

Tier = Literal["light", "mid", "heavy"]
Season = Literal["spring_fall", "summer", "winter"]


@dataclass(frozen=True)
class TierValues:
    """One value per load tier: a fee schedule, a rate table or a tier pattern (%)."""

    light: float = 0.0
    mid: float = 0.0
    heavy: float = 0.0

    def __getitem__(self, tier: str) -> float:
        if tier not in canon.TIERS:
            raise KeyError(tier)
        return getattr(self, tier)

    def total(self) -> float:
        return self.light + self.mid + self.heavy

    def as_dict(self) -> Dict[str, float]:
        return {"light": self.light, "mid": self.mid, "heavy": self.heavy}

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "TierValues":
        return cls(
            light=float(values["light"]),
            mid=float(values["mid"]),
            heavy=float(values["heavy"]),
        )


# Customer-facing price per kWh in each tier
FeeSchedule = TierValues


@dataclass(frozen=True)
class DeviceClass:
    name: str  # e.g. "rapid", "slow", "outlet"
    capacity_kw: float  # rated capacity per unit
    count: int
    public: bool  # billed through an external meter
    share: float  # % of total monthly energy
    hourly_weights: Tuple[float, ...]  # 24 nonnegative weights
    fees: FeeSchedule

    def __post_init__(self):
        object.__setattr__(
            self, "hourly_weights", tuple(float(w) for w in self.hourly_weights)
        )
        if not isinstance(self.fees, TierValues):
            object.__setattr__(self, "fees", TierValues.from_mapping(self.fees))


## Inputs
@dataclass
class SiteInputs:
    """Live, mutable input set. Owned by the orchestrator; snapshotted per run."""

    total_usage_kwh: float
    target_monthly_profit: float
    annual_fixed_cost: float  # e.g. insurance
    devices: List[DeviceClass]
    contracted_power_kw: Optional[float] = None  # None -> derived from devices
    season: str = "summer"  # selected display season
    use_tou: bool = True

    def device(self, name: str) -> DeviceClass:
        for d in self.devices:
            if d.name == name:
                return d
        raise InputError(f"Unknown device class '{name}'.")

    @property
    def device_names(self) -> List[str]:
        return [d.name for d in self.devices]


@dataclass(frozen=True)
class SimulationSnapshot:
    total_usage_kwh: float
    target_monthly_profit: float
    annual_fixed_cost: float
    devices: Tuple[DeviceClass, ...]
    contracted_power_kw: float
    season: str
    use_tou: bool
    public_unit_cost: float = canon.FIXED_PUBLIC_UNIT_COST

    @classmethod
    def from_inputs(
        cls,
        inputs: SiteInputs,
        *,
        public_unit_cost: float = canon.FIXED_PUBLIC_UNIT_COST,
    ) -> "SimulationSnapshot":
        """Copy every value out of the live inputs; nothing is shared with them."""
        devices = tuple(
            replace(
                d,
                hourly_weights=tuple(d.hourly_weights),
                fees=TierValues(d.fees.light, d.fees.mid, d.fees.heavy),
            )
            for d in inputs.devices
        )
        return cls(
            total_usage_kwh=float(inputs.total_usage_kwh),
            target_monthly_profit=float(inputs.target_monthly_profit),
            annual_fixed_cost=float(inputs.annual_fixed_cost),
            devices=devices,
            contracted_power_kw=float(inputs.contracted_power_kw or 0.0),
            season=inputs.season,
            use_tou=bool(inputs.use_tou),
            public_unit_cost=float(public_unit_cost),
        )

    def with_fees(self, fees: Mapping[str, FeeSchedule]) -> "SimulationSnapshot":
        devices = tuple(
            replace(d, fees=fees[d.name]) if d.name in fees else d
            for d in self.devices
        )
        return replace(self, devices=devices)

    def fee_table(self) -> Dict[str, FeeSchedule]:
        return {d.name: d.fees for d in self.devices}


## Results
@dataclass(frozen=True)
class MonthlyResult:
    revenue: float
    cost: float
    profit: float
    pattern: TierValues  # realised % of monthly energy per tier
    electricity_cost: float = 0.0
    demand_charge: float = 0.0
    fixed_cost: float = 0.0
    device_revenue: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class AnnualResult:
    total_profit: float
    monthly_avg_profit: float
    total_revenue: float
    total_cost: float


@dataclass(frozen=True)
class PlanResult:
    plan: TariffPlan
    annual: AnnualResult
    seasons: Dict[str, MonthlyResult]

    @property
    def spring_fall(self) -> MonthlyResult:
        return self.seasons["spring_fall"]

    @property
    def summer(self) -> MonthlyResult:
        return self.seasons["summer"]

    @property
    def winter(self) -> MonthlyResult:
        return self.seasons["winter"]


@dataclass(frozen=True)
class FeeAdjustment:
    applied: bool
    reason: Literal["adjusted", "on_target", "no_volume"]
    min_cost_plan: TariffPlan
    min_cost: float
    required_revenue: float
    current_revenue: float
    revenue_gap: float
    fees: Dict[str, FeeSchedule]  # fee table after the pass (unchanged unless applied)
    weights: Optional[TierValues] = None
    total_weighted_volume: float = 0.0
    base_price_delta: float = 0.0


class HourlyRow(TypedDict):
    hour: int
    volume: float  # kWh in that hour of an average day
    tier: str


class SimulationState(str, Enum):
    DIRTY = "dirty"
    CLEAN = "clean"
