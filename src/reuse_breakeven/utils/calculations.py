from typing import Dict
from ..constants import DECIMALS, GRAMS_PER_KG
from ..models import PhysicalConstants, ScenarioParameters, AmortizationResult


def f3(x: float) -> str:
    """
    Format a float with a fixed number of decimal places (DECIMALS).
    """
    return f"{x:.{DECIMALS}f}"


def kg_to_g(x: float) -> float:
    return x * GRAMS_PER_KG


def break_even_label(result: AmortizationResult) -> str:
    if result.break_even_cycle is None:
        return "No break-even"
    return f"Break-even N={result.break_even_cycle}"


def clamp_probability(x: float) -> float:
    """Clamp a probability into [0, 1]. Out-of-range values are corrected, not rejected."""
    return max(0.0, min(1.0, x))


def transport_emissions_per_trip(constants: PhysicalConstants, one_way_distance_km: float) -> float:
    """
    Emissions of one one-way trip (kg CO2e/unit).
    The return leg is assumed to cover the same distance.
    """
    transport_per_km = constants.transport_factor_per_100km / 100.0
    return transport_per_km * one_way_distance_km


def material_emissions(constants: PhysicalConstants) -> float:
    return constants.mass_per_unit * constants.emission_factor_primary


def start_cost(params: ScenarioParameters, constants: PhysicalConstants) -> float:
    """
    One-time emissions to put a reusable unit into service:
    material + manufacturing + initial logistics.
    """
    return material_emissions(constants) + params.manufacturing_emissions + constants.initial_logistics


def cycle_cost(params: ScenarioParameters, constants: PhysicalConstants) -> float:
    """
    Steady-state emissions of one use cycle:
    cleaning + forward transport + use phase + return transport.
    """
    forward = transport_emissions_per_trip(constants, params.one_way_distance_km)
    reverse = transport_emissions_per_trip(constants, params.one_way_distance_km)
    return constants.cleaning_emissions + forward + constants.use_phase_emissions + reverse


def survival_probability(params: ScenarioParameters) -> float:
    """q = p_return * (1 - p_scrap), both clamped to [0, 1]."""
    p_ret = clamp_probability(params.return_probability)
    p_scr = clamp_probability(params.scrap_probability)
    return p_ret * (1.0 - p_scr)


def effective_utilization(n: int, q: float) -> float:
    """
    Expected number of cycles a unit contributes over n attempted cycles
    when it survives each cycle with probability q (finite geometric sum).

    The closed form is 0/0 at q == 1; the limit there is exactly n.
    """
    if q == 1.0:
        return float(n)
    return (1.0 - q ** n) / (1.0 - q)


def cost_breakdown(params: ScenarioParameters, constants: PhysicalConstants) -> Dict[str, float]:
    """All intermediate quantities of the amortization formula, keyed by name."""
    trip = transport_emissions_per_trip(constants, params.one_way_distance_km)
    return {
        "material_emissions": material_emissions(constants),
        "forward_transport": trip,
        "return_transport": trip,
        "start_cost": start_cost(params, constants),
        "cycle_cost": cycle_cost(params, constants),
        "survival_probability": survival_probability(params),
    }
