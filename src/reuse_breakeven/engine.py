"""
Amortization and break-even engine.

For every reuse-cycle count N in 1..horizon the reusable unit's lifetime
emissions are spread over its effective utilization U(N, q):

    amortized(N) = (start_cost + U * cycle_cost + end_of_life_balance) / U

and the first N where amortized(N) <= single-use reference is the break-even.
"""
import math
import numbers
import logging
from dataclasses import fields

from .models import (
    PhysicalConstants, ScenarioParameters, AmortizationResult, CyclePoint, InvalidInputError
)
from .utils.calculations import (
    start_cost, cycle_cost, survival_probability, effective_utilization
)

logger = logging.getLogger(__name__)


def _require_finite(record, label: str) -> None:
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"{label}.{f.name} must be a real number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidInputError(f"{label}.{f.name} must be finite, got {value!r}")


def validate_horizon(horizon) -> int:
    """Return horizon unchanged if it is an integer >= 1, otherwise raise InvalidInputError."""
    if isinstance(horizon, bool) or not isinstance(horizon, numbers.Integral):
        raise InvalidInputError(f"horizon must be an integer >= 1, got {horizon!r}")
    if horizon < 1:
        raise InvalidInputError(f"horizon must be an integer >= 1, got {horizon}")
    return int(horizon)


def compute(params: ScenarioParameters, constants: PhysicalConstants, horizon: int) -> AmortizationResult:
    """
    Compute the per-cycle amortized emissions series and break-even cycle.

    Args:
        params: scenario inputs (probabilities are clamped to [0, 1])
        constants: fixed physical constants
        horizon: number of reuse cycles to evaluate, integer >= 1

    Raises:
        InvalidInputError: invalid horizon, or a non-finite / non-numeric field
    """
    horizon = validate_horizon(horizon)
    _require_finite(params, "params")
    _require_finite(constants, "constants")

    e_start = start_cost(params, constants)
    e_cycle = cycle_cost(params, constants)
    q = survival_probability(params)
    reference = constants.single_use_reference

    series = []
    first_cost = None
    last_cost = None
    break_even = None

    for n in range(1, horizon + 1):
        u = effective_utilization(n, q)
        total_lifetime = e_start + u * e_cycle + params.end_of_life_balance
        amortized = total_lifetime / u

        if first_cost is None:
            first_cost = amortized
        last_cost = amortized

        series.append(CyclePoint(
            cycle_index=n,
            amortized_emissions_per_use=amortized,
            single_use_reference_emissions=reference,
        ))

        if break_even is None and amortized <= reference:
            break_even = n

    logger.debug(
        f"Computed {horizon} cycles: q={q:.4f}, start={e_start:.6f}, cycle={e_cycle:.6f}, "
        f"break-even={break_even}"
    )

    return AmortizationResult(
        survival_probability=q,
        per_cycle_series=tuple(series),
        first_cycle_cost=first_cost,
        last_cycle_cost=last_cost,
        break_even_cycle=break_even,
        start_cost=e_start,
        cycle_cost=e_cycle,
        end_of_life_balance=params.end_of_life_balance,
        single_use_reference=reference,
        horizon=horizon,
    )
