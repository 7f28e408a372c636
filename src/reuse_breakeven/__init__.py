from .models import (
    PhysicalConstants,
    ScenarioParameters,
    Scenario,
    CyclePoint,
    AmortizationResult,
    InvalidInputError
)
from .constants import (
    PHYSICAL_CONSTANTS,
    DEFAULT_HORIZON
)
from .engine import compute

__all__ = [
    "PhysicalConstants",
    "ScenarioParameters",
    "Scenario",
    "CyclePoint",
    "AmortizationResult",
    "InvalidInputError",
    "PHYSICAL_CONSTANTS",
    "DEFAULT_HORIZON",
    "compute"
]
