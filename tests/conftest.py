import pytest

from evtariffsim import defaults
from evtariffsim.tariffs import default_catalog, load_catalog
from evtariffsim.types import DeviceClass, SimulationSnapshot, TierValues

FLAT = (1,) * 24


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def plan_low_voltage(catalog):
    # baseRate 2390; spring/fall rates 60.2 / 85.3 / 110.5
    return catalog[0]


@pytest.fixture
def flat_device():
    return DeviceClass(
        name="slow",
        capacity_kw=7.0,
        count=1,
        public=False,
        share=100.0,
        hourly_weights=FLAT,
        fees=TierValues(light=200, mid=250, heavy=300),
    )


@pytest.fixture
def worked_snapshot(flat_device):
    """Single flat-shaped device, 7200 kWh/month, 10 kW contracted, 240k/yr fixed."""
    return SimulationSnapshot(
        total_usage_kwh=7200.0,
        target_monthly_profit=0.0,
        annual_fixed_cost=240_000.0,
        devices=(flat_device,),
        contracted_power_kw=10.0,
        season="spring_fall",
        use_tou=True,
    )


@pytest.fixture
def default_snapshot():
    inputs = defaults.default_inputs()
    inputs.contracted_power_kw = 164.0
    return SimulationSnapshot.from_inputs(inputs)


@pytest.fixture
def twin_catalog():
    """Two plans with identical economics, for tie-break checks."""
    rates = {
        "springFall": {"light": 70, "mid": 90, "heavy": 120},
        "summer": {"light": 80, "mid": 130, "heavy": 170},
        "winter": {"light": 90, "mid": 120, "heavy": 150},
    }
    return load_catalog(
        [
            {"id": "a", "name": "Twin A", "baseRate": 2000, "rates": rates},
            {"id": "b", "name": "Twin B", "baseRate": 2000, "rates": rates},
        ]
    )
