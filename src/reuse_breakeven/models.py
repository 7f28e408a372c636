from dataclasses import dataclass, field
from typing import Optional, Tuple


class InvalidInputError(ValueError):
    """
    Raised when the engine receives input it cannot compute with:
    a horizon that is not an integer >= 1, or a parameter/constant
    that is not a finite real number.
    """


@dataclass(frozen=True)
class PhysicalConstants:
    """
    Fixed physical constants shared by every scenario (loaded once at start).
    All emissions in kg CO2e.
    - mass_per_unit: material mass of one reusable unit (kg)
    - emission_factor_primary: kg CO2e per kg of primary material
    - initial_logistics: one-time forward logistics for first deployment
    - single_use_reference: emissions of one single-use item (per use)
    - use_phase_emissions / cleaning_emissions: per cycle
    - transport_factor_per_100km: per unit and 100 km one-way
    """
    mass_per_unit: float
    emission_factor_primary: float
    initial_logistics: float
    single_use_reference: float
    use_phase_emissions: float
    cleaning_emissions: float
    transport_factor_per_100km: float


@dataclass(frozen=True)
class ScenarioParameters:
    """
    User-editable inputs for one scenario.
    Probabilities are stored as entered; the engine clamps them to [0, 1].
    end_of_life_balance may be negative (recycling credit).
    """
    manufacturing_emissions: float
    one_way_distance_km: float
    return_probability: float
    scrap_probability: float
    end_of_life_balance: float


@dataclass(frozen=True)
class Scenario:
    name: str
    color: str
    params: ScenarioParameters


@dataclass(frozen=True)
class CyclePoint:
    cycle_index: int
    amortized_emissions_per_use: float
    single_use_reference_emissions: float


@dataclass(frozen=True)
class AmortizationResult:
    """
    Output of one engine run (kg CO2e per use unless noted).
    break_even_cycle is None when the reusable option never reaches the
    single-use reference within the horizon.
    """
    survival_probability: float
    per_cycle_series: Tuple[CyclePoint, ...]
    first_cycle_cost: float
    last_cycle_cost: float
    break_even_cycle: Optional[int]
    start_cost: float
    cycle_cost: float
    end_of_life_balance: float
    single_use_reference: float
    horizon: int = field(default=0)

    @property
    def has_break_even(self) -> bool:
        return self.break_even_cycle is not None

    @property
    def asymptotic_emissions_per_use(self) -> float:
        """
        Limit of the amortized cost for N -> infinity.
        With q < 1 the effective utilization is bounded by 1/(1-q), so the
        one-time costs never fully dilute away.
        """
        q = self.survival_probability
        if q == 1.0:
            return self.cycle_cost
        return self.cycle_cost + (self.start_cost + self.end_of_life_balance) * (1.0 - q)
