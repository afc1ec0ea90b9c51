from __future__ import annotations
from typing import Dict
from pydantic import BaseModel, Field, field_validator

from .. import canon
from ..exceptions import PlanError

CurrencyPerKwh = float


class TierRates(BaseModel):
    light: CurrencyPerKwh
    mid: CurrencyPerKwh
    heavy: CurrencyPerKwh
    model_config = {"frozen": True}


class TariffPlan(BaseModel):
    """
    Utility tariff plan as supplied by the external catalog.

    Accepts both the catalog's camelCase keys ('baseRate', 'springFall')
    and snake_case; seasons are stored under their canonical names.
    """

    id: int | str
    name: str
    base_rate: float = Field(alias="baseRate")  # per contracted kW per month
    rates: Dict[str, TierRates]
    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("rates", mode="before")
    @classmethod
    def _canonical_seasons(cls, value):
        if isinstance(value, dict):
            return {canon.SEASON_ALIASES.get(k, k): v for k, v in value.items()}
        return value

    def season_rates(self, season: str) -> TierRates:
        try:
            return self.rates[season]
        except KeyError:
            raise PlanError(
                f"Plan '{self.name}' has no rates for season '{season}'."
            ) from None
