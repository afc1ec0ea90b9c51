"""
Caller-side validation contract.

The engine takes its inputs as given: shares are not re-normalised, and numeric
edge cases (zero weights, zero usage) resolve to defined values instead of
raising. Callers that want to reject malformed inputs run these checks first;
a failure here is a caller error, not an engine fault.
"""

from __future__ import annotations
from typing import Sequence, Union

from . import canon
from .exceptions import InputError, require
from .types import SiteInputs, SimulationSnapshot
from .tariffs.schema import TariffPlan
from .tariffs.validators import validate_catalog

SHARE_TOLERANCE = 0.01


def assert_inputs(
    inputs: Union[SiteInputs, SimulationSnapshot],
    *,
    share_tolerance: float = SHARE_TOLERANCE,
) -> None:
    require(inputs.total_usage_kwh >= 0, "Total usage must be non-negative.", InputError)
    require(
        inputs.annual_fixed_cost >= 0, "Annual fixed cost must be non-negative.", InputError
    )
    require(
        inputs.season in canon.SEASONS,
        f"Unknown season '{inputs.season}'; expected one of {canon.SEASONS}.",
        InputError,
    )
    if inputs.contracted_power_kw is not None:
        require(
            inputs.contracted_power_kw >= 0,
            "Contracted power must be non-negative.",
            InputError,
        )

    names = [d.name for d in inputs.devices]
    dupes = sorted({n for n in names if names.count(n) > 1})
    require(not dupes, f"Duplicate device classes: {', '.join(dupes)}", InputError)

    for d in inputs.devices:
        require(
            len(d.hourly_weights) == canon.HOURS,
            f"Device '{d.name}' needs {canon.HOURS} hourly weights, got {len(d.hourly_weights)}.",
            InputError,
        )
        require(
            all(w >= 0 for w in d.hourly_weights),
            f"Device '{d.name}' has negative hourly weights.",
            InputError,
        )
        require(d.share >= 0, f"Device '{d.name}' has a negative share.", InputError)
        require(d.count >= 0, f"Device '{d.name}' has a negative count.", InputError)
        require(
            d.capacity_kw >= 0, f"Device '{d.name}' has a negative capacity.", InputError
        )
        for tier in canon.TIERS:
            require(
                d.fees[tier] >= 0,
                f"Device '{d.name}' has a negative {tier} fee.",
                InputError,
            )

    if inputs.devices:
        total_share = sum(d.share for d in inputs.devices)
        require(
            abs(total_share - 100.0) <= share_tolerance,
            f"Device shares must sum to 100%, got {total_share:g}%.",
            InputError,
        )


def assert_catalog(plans: Sequence[TariffPlan]) -> None:
    """Catalog contract; raises PlanError."""
    validate_catalog(plans)
