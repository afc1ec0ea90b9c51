from .schema import TariffPlan, TierRates
from .catalog import default_catalog, load_catalog, DEFAULT_PLAN_RECORDS
from .validators import validate_plan, validate_catalog

__all__ = [
    "TariffPlan",
    "TierRates",
    "default_catalog",
    "load_catalog",
    "DEFAULT_PLAN_RECORDS",
    "validate_plan",
    "validate_catalog",
]
