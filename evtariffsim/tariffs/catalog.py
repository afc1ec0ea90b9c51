from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Mapping, Union

from pydantic import TypeAdapter, ValidationError

from ..exceptions import CatalogError
from .schema import TariffPlan
from .validators import validate_catalog

_CATALOG = TypeAdapter(List[TariffPlan])

# Reference catalog: three time-of-use options and a flat-rate plan
DEFAULT_PLAN_RECORDS: list[dict] = [
    {
        "id": 0,
        "name": "Option I (low voltage)",
        "baseRate": 2390,
        "rates": {
            "springFall": {"light": 60.2, "mid": 85.3, "heavy": 110.5},
            "summer": {"light": 80.5, "mid": 135.2, "heavy": 170.8},
            "winter": {"light": 90.1, "mid": 125.4, "heavy": 155.3},
        },
    },
    {
        "id": 1,
        "name": "Option II (high voltage A)",
        "baseRate": 2580,
        "rates": {
            "springFall": {"light": 66.8, "mid": 88.3, "heavy": 109.1},
            "summer": {"light": 83.9, "mid": 145.3, "heavy": 181.5},
            "winter": {"light": 93.6, "mid": 133.5, "heavy": 161.9},
        },
    },
    {
        "id": 2,
        "name": "Option III (high voltage B)",
        "baseRate": 2230,
        "rates": {
            "springFall": {"light": 64.1, "mid": 85.4, "heavy": 105.7},
            "summer": {"light": 81.2, "mid": 140.2, "heavy": 175.8},
            "winter": {"light": 90.5, "mid": 128.7, "heavy": 156.3},
        },
    },
    {
        "id": 3,
        "name": "Flat rate",
        "baseRate": 2400,
        "rates": {
            "springFall": {"light": 100, "mid": 100, "heavy": 100},
            "summer": {"light": 100, "mid": 100, "heavy": 100},
            "winter": {"light": 100, "mid": 100, "heavy": 100},
        },
    },
]


def default_catalog() -> list[TariffPlan]:
    return load_catalog(DEFAULT_PLAN_RECORDS)


def load_catalog(source: Union[str, Path, Iterable[Mapping]]) -> list[TariffPlan]:
    """
    Build a validated plan catalog from a JSON file path or an iterable of records.

    Catalog order is preserved; it is the tie-break order for plan ranking.
    """
    try:
        if isinstance(source, (str, Path)):
            plans = _CATALOG.validate_json(Path(source).read_bytes())
        else:
            plans = _CATALOG.validate_python(list(source))
    except ValidationError as e:
        raise CatalogError(f"Invalid tariff plan catalog: {e}") from e
    except OSError as e:
        raise CatalogError(f"Cannot read tariff plan catalog: {e}") from e
    validate_catalog(plans)
    return plans
