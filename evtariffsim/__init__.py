import logging

from . import (
    canon,
    exceptions,
    types,
    config,
    tariffs,
    defaults,
    validate,
    allocation,
    pricing,
    compare,
    optimize,
    orchestrator,
    summary,
)
from .orchestrator import SimulationOrchestrator

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "canon",
    "exceptions",
    "types",
    "config",
    "tariffs",
    "defaults",
    "validate",
    "allocation",
    "pricing",
    "compare",
    "optimize",
    "orchestrator",
    "summary",
    "SimulationOrchestrator",
]
