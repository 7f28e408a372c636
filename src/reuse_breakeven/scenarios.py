import logging
import math
import numbers
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .config import load_scenario_rows
from .constants import PHYSICAL_CONSTANTS, DEFAULT_HORIZON, SCENARIO_PRESETS
from .engine import compute, validate_horizon
from .models import Scenario, ScenarioParameters, PhysicalConstants, AmortizationResult
from .utils.calculations import kg_to_g, clamp_probability
from .utils.input_helpers import parameters_from_fields, FIELD_MAP, PROBABILITY_FIELDS

logger = logging.getLogger(__name__)


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def scenario_from_row(row: Mapping[str, Any]) -> Scenario:
    """Build a Scenario from a raw row (preset dict or 'Scenarios' sheet row)."""
    name = str(row.get("Name", "")).strip()
    if not name:
        raise ValueError("Scenario row without a name")
    color = str(row.get("Color", "")).strip() or "#5D6D7E"
    return Scenario(name=name, color=color, params=parameters_from_fields(row))


def default_scenarios(config_path: Optional[str] = None) -> List[Scenario]:
    """
    Scenarios from the workbook's 'Scenarios' sheet if present, otherwise the
    built-in worst / expected / best presets.
    """
    rows = load_scenario_rows(config_path)
    if not rows:
        rows = SCENARIO_PRESETS

    scenarios = []
    seen = set()
    for row in rows:
        sc = scenario_from_row(row)
        if sc.name in seen:
            logger.warning(f"Duplicate scenario name '{sc.name}' ignored.")
            continue
        seen.add(sc.name)
        scenarios.append(sc)
    return scenarios


def run_scenarios(
    scenarios: List[Scenario],
    constants: PhysicalConstants,
    horizon: int
) -> Dict[str, AmortizationResult]:
    """Run the engine once per scenario. Results keep the scenario order."""
    return {sc.name: compute(sc.params, constants, horizon) for sc in scenarios}


def build_chart_frame(scenarios: List[Scenario], results: Mapping[str, AmortizationResult]) -> pd.DataFrame:
    """
    Merge all scenario series into one wide frame for charting (grams).
    Columns: cycle, SUP, MUP_<scenario name> ...
    """
    frame = None
    for sc in scenarios:
        res = results[sc.name]
        part = pd.DataFrame({
            "cycle": [p.cycle_index for p in res.per_cycle_series],
            "SUP": [kg_to_g(p.single_use_reference_emissions) for p in res.per_cycle_series],
            f"MUP_{sc.name}": [kg_to_g(p.amortized_emissions_per_use) for p in res.per_cycle_series],
        })
        if frame is None:
            frame = part
        else:
            frame = frame.merge(part.drop(columns=["SUP"]), on="cycle", how="outer")

    if frame is None:
        return pd.DataFrame(columns=["cycle", "SUP"])
    return frame.sort_values("cycle").reset_index(drop=True)


class ScenarioBoard:
    """
    Current scenarios, horizon and their results.
    Every change recomputes all results from scratch and replaces them wholesale.
    """

    def __init__(
        self,
        scenarios: Optional[List[Scenario]] = None,
        horizon: int = DEFAULT_HORIZON,
        constants: PhysicalConstants = PHYSICAL_CONSTANTS
    ):
        self.constants = constants
        self.scenarios = list(scenarios) if scenarios is not None else default_scenarios()
        self.horizon = validate_horizon(horizon)
        self.results: Dict[str, AmortizationResult] = {}
        self.recompute()

    def recompute(self) -> Dict[str, AmortizationResult]:
        self.results = run_scenarios(self.scenarios, self.constants, self.horizon)
        return self.results

    def get(self, name: str) -> Scenario:
        for sc in self.scenarios:
            if sc.name == name:
                return sc
        raise KeyError(f"Unknown scenario '{name}'")

    def update_scenario(self, name: str, params: ScenarioParameters) -> Dict[str, AmortizationResult]:
        self.get(name)
        scenarios = [replace(sc, params=params) if sc.name == name else sc for sc in self.scenarios]
        # Board state only changes once the engine accepts the new parameters
        results = run_scenarios(scenarios, self.constants, self.horizon)
        self.scenarios, self.results = scenarios, results
        logger.debug(f"Scenario '{name}' updated and recomputed.")
        return self.results

    def update_parameter(self, name: str, field_name: str, value: float) -> Dict[str, AmortizationResult]:
        """
        Change one form field (e.g. 'P_Return') of one scenario.
        Finite probabilities are clamped here, as a slider would; NaN and
        infinities reach the engine unchanged and are rejected there.
        """
        if field_name not in FIELD_MAP:
            raise KeyError(f"Unknown field '{field_name}'")
        if field_name in PROBABILITY_FIELDS and _is_finite_number(value):
            value = clamp_probability(value)
        params = replace(self.get(name).params, **{FIELD_MAP[field_name]: value})
        return self.update_scenario(name, params)

    def set_horizon(self, horizon: int) -> Dict[str, AmortizationResult]:
        horizon = validate_horizon(horizon)
        self.results = run_scenarios(self.scenarios, self.constants, horizon)
        self.horizon = horizon
        return self.results

    def chart_frame(self) -> pd.DataFrame:
        return build_chart_frame(self.scenarios, self.results)
