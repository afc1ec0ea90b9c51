from __future__ import annotations
from typing import Final, Dict, Tuple

TIERS: Final[Tuple[str, ...]] = ("light", "mid", "heavy")
SEASONS: Final[Tuple[str, ...]] = ("spring_fall", "summer", "winter")
HOURS: Final[int] = 24
DAYS_PER_MONTH: Final[int] = 30

# Representative months per season; sums to 12
SEASON_MONTHS: Final[Dict[str, int]] = {"spring_fall": 5, "summer": 3, "winter": 4}

# Catalog season keys as they appear in external plan data
SEASON_ALIASES: Dict[str, str] = {
    "springFall": "spring_fall",
    "spring_fall": "spring_fall",
    "summer": "summer",
    "winter": "winter",
}

# Unit cost of energy drawn through an external (public) meter, per kWh
FIXED_PUBLIC_UNIT_COST: Final[float] = 167.0

_L, _M, _H = TIERS

# hour-of-day -> load tier
TIER_SCHEDULES: Dict[str, Tuple[str, ...]] = {
    "spring_fall": (
        _L, _L, _L, _L, _L, _L, _L, _L, _L, _M, _H, _H,
        _M, _H, _H, _H, _H, _M, _M, _M, _M, _M, _M, _L,
    ),
    "summer": (
        _L, _L, _L, _L, _L, _L, _L, _L, _L, _M, _H, _H,
        _M, _H, _H, _H, _H, _M, _M, _M, _M, _M, _M, _L,
    ),
    "winter": (
        _L, _L, _L, _L, _L, _L, _L, _L, _L, _M, _H, _H,
        _M, _M, _M, _M, _M, _H, _H, _H, _M, _M, _H, _L,
    ),
}
