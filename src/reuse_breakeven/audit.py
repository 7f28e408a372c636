import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional

from .config import PROJECT_ROOT
from .models import Scenario, AmortizationResult
from .utils.calculations import cost_breakdown

logger = logging.getLogger(__name__)

report_directory = os.path.join(PROJECT_ROOT, 'reports')


class CalculationAudit:
    """
    Opt-in text trail of every formula step behind a scenario result.
    Nothing is written until enable() is called.
    """

    def __init__(self):
        self.enabled = False
        self.log_file: Optional[str] = None

    def enable(self, log_dir: str = report_directory) -> str:
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(log_dir, exist_ok=True)
        self.log_file = os.path.join(log_dir, f"audit_{session_id}.txt")
        with open(self.log_file, "w", encoding="utf-8") as f:
            f.write("=== AMORTIZATION CALCULATION AUDIT LOG ===\n")
            f.write(f"Session: {session_id}\n")
            f.write("==========================================\n\n")
        self.enabled = True
        logger.info(f"Calculation audit enabled: {self.log_file}")
        return self.log_file

    def disable(self):
        self.enabled = False

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: float, unit: str = ""):
        """
        Log a calculation step to the audit file.

        Args:
            context: What is being calculated (e.g., "Expected Case: start cost")
            formula: Text representation of the equation
            variables: Values used
            result: The final result
            unit: Unit of the result (e.g., "kgCO2e")
        """
        if not self.enabled:
            return

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {context}\n")
                f.write(f"  Formula: {formula}\n")
                vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
                f.write(f"  Inputs:  {vars_str}\n")
                f.write(f"  Result:  {result:.6f} {unit}\n")
                f.write("-" * 40 + "\n")
        except OSError as e:
            logger.error(f"Failed to write to audit log: {e}")

    def log_result(self, scenario: Scenario, result: AmortizationResult, constants) -> None:
        """Record the formula steps behind one scenario result."""
        if not self.enabled:
            return

        p = scenario.params
        parts = cost_breakdown(p, constants)
        self.log_calculation(
            f"{scenario.name}: start cost",
            "m_unit * EF_primary + E_manufacturing + E_initial_logistics",
            {"m_unit": constants.mass_per_unit, "EF_primary": constants.emission_factor_primary,
             "E_manufacturing": p.manufacturing_emissions, "E_initial_logistics": constants.initial_logistics},
            parts["start_cost"], "kgCO2e",
        )
        self.log_calculation(
            f"{scenario.name}: cycle cost",
            "E_clean + 2 * (T_per_100km / 100 * km_one_way) + E_use",
            {"E_clean": constants.cleaning_emissions, "T_per_100km": constants.transport_factor_per_100km,
             "km_one_way": p.one_way_distance_km, "E_use": constants.use_phase_emissions},
            parts["cycle_cost"], "kgCO2e",
        )
        self.log_calculation(
            f"{scenario.name}: survival probability",
            "clamp(p_ret) * (1 - clamp(p_scr))",
            {"p_ret": p.return_probability, "p_scr": p.scrap_probability},
            result.survival_probability,
        )
        self.log_calculation(
            f"{scenario.name}: amortized emissions at N={result.horizon}",
            "(E_start + U * E_cycle + E_EoL) / U",
            {"E_start": result.start_cost, "E_cycle": result.cycle_cost, "E_EoL": p.end_of_life_balance,
             "q": result.survival_probability, "break_even": result.break_even_cycle},
            result.last_cycle_cost, "kgCO2e/use",
        )


# Global Accessor
audit_logger = CalculationAudit()
