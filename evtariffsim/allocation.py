from __future__ import annotations
from typing import Sequence
import numpy as np
import pandas as pd

from . import canon
from .types import DeviceClass, TierValues


def _weight_matrix(devices: Sequence[DeviceClass]) -> np.ndarray:
    if not devices:
        return np.zeros((0, canon.HOURS), dtype=float)
    return np.asarray([d.hourly_weights for d in devices], dtype=float)


def hourly_volumes(
    monthly_kwh: float,
    devices: Sequence[DeviceClass],
    days_per_month: int = canon.DAYS_PER_MONTH,
) -> np.ndarray:
    """
    Spread a month's energy over an average day, per device class and hour.

    Returns an array of shape (n_devices, 24) in kWh. A device whose weights
    sum to 0 is divided by 1 instead, so every one of its hours reads 0.
    """
    weights = _weight_matrix(devices)
    sums = weights.sum(axis=1)
    sums[sums == 0] = 1.0

    daily = monthly_kwh / days_per_month
    device_daily = np.array([daily * (d.share / 100.0) for d in devices], dtype=float)
    return device_daily.reshape(-1, 1) * (weights / sums.reshape(-1, 1))


def tier_volumes(
    monthly_kwh: float,
    devices: Sequence[DeviceClass],
    schedule: Sequence[str],
    days_per_month: int = canon.DAYS_PER_MONTH,
) -> TierValues:
    """Monthly kWh falling into each load tier under the season's hour->tier map."""
    per_hour = hourly_volumes(monthly_kwh, devices, days_per_month).sum(axis=0)
    tiers = np.asarray(schedule)
    return TierValues(
        **{t: float(per_hour[tiers == t].sum()) * days_per_month for t in canon.TIERS}
    )


def tier_pattern(
    monthly_kwh: float,
    devices: Sequence[DeviceClass],
    schedule: Sequence[str],
    days_per_month: int = canon.DAYS_PER_MONTH,
) -> TierValues:
    """Tier volumes as % of the monthly total; all 0 when the total is 0."""
    if monthly_kwh == 0:
        return TierValues()
    vols = tier_volumes(monthly_kwh, devices, schedule, days_per_month)
    return TierValues(**{t: vols[t] / monthly_kwh * 100.0 for t in canon.TIERS})


def hourly_frame(
    monthly_kwh: float,
    devices: Sequence[DeviceClass],
    schedule: Sequence[str],
    days_per_month: int = canon.DAYS_PER_MONTH,
) -> pd.DataFrame:
    """
    Average-day allocation for charting.

    Columns: 'hour', 'volume' (all devices), 'tier', then one kWh column per device.
    """
    vols = hourly_volumes(monthly_kwh, devices, days_per_month)
    names = [d.name for d in devices]
    out = pd.DataFrame(vols.T, columns=names)
    out["hour"] = np.arange(canon.HOURS)
    out["volume"] = vols.sum(axis=0)
    out["tier"] = list(schedule)
    return out[["hour", "volume", "tier", *names]]
