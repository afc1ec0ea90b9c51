"""Default site configuration: the rapid / slow / outlet device set."""

from __future__ import annotations
from typing import Dict, Tuple

from .types import DeviceClass, SiteInputs, TierValues

DEVICE_CAPACITY_KW: Dict[str, float] = {"rapid": 50.0, "slow": 7.0, "outlet": 3.0}

DEFAULT_WEIGHTS: Dict[str, Tuple[int, ...]] = {
    # daytime-heavy
    "rapid": (1, 1, 1, 1, 1, 2, 4, 6, 8, 9, 9, 9, 8, 8, 8, 9, 9, 8, 6, 4, 3, 2, 1, 1),
    # overnight-heavy
    "slow": (9, 8, 7, 6, 5, 4, 3, 2, 1, 1, 1, 1, 1, 2, 2, 3, 4, 6, 8, 9, 9, 9, 9, 9),
    "outlet": (9, 9, 8, 8, 8, 7, 7, 3, 2, 1, 0, 0, 0, 0, 0, 1, 4, 6, 8, 9, 9, 9, 9, 9),
}

DEFAULT_FEES: Dict[str, TierValues] = {
    "rapid": TierValues(light=290, mid=290, heavy=290),
    "slow": TierValues(light=200, mid=250, heavy=300),
    "outlet": TierValues(light=180, mid=230, heavy=280),
}

DEFAULT_SHARES: Dict[str, float] = {"rapid": 10.0, "slow": 50.0, "outlet": 40.0}
DEFAULT_COUNTS: Dict[str, int] = {"rapid": 2, "slow": 8, "outlet": 36}
DEFAULT_PUBLIC: Dict[str, bool] = {"rapid": True, "slow": False, "outlet": False}


def default_devices() -> list[DeviceClass]:
    return [
        DeviceClass(
            name=name,
            capacity_kw=DEVICE_CAPACITY_KW[name],
            count=DEFAULT_COUNTS[name],
            public=DEFAULT_PUBLIC[name],
            share=DEFAULT_SHARES[name],
            hourly_weights=DEFAULT_WEIGHTS[name],
            fees=DEFAULT_FEES[name],
        )
        for name in ("rapid", "slow", "outlet")
    ]


def default_inputs() -> SiteInputs:
    return SiteInputs(
        total_usage_kwh=15000.0,
        target_monthly_profit=1_250_000.0,
        annual_fixed_cost=2_250_000.0,
        devices=default_devices(),
        contracted_power_kw=None,
        season="summer",
        use_tou=True,
    )
