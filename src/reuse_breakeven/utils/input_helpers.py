import logging
import math
import numbers
import re
from typing import Any, Dict, List, Mapping, Optional

import colorama
from colorama import Fore, Style, Back

from ..models import ScenarioParameters, Scenario, AmortizationResult
from .calculations import clamp_probability, kg_to_g, break_even_label

colorama.init(autoreset=True)

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_RESET = Style.RESET_ALL

# Leading decimal literal, e.g. "12.5 km" -> "12.5", ".5" -> ".5", "1e-3" -> "1e-3"
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PREFIX = re.compile(r"[+-]?\d+")

# Form field -> ScenarioParameters attribute
FIELD_MAP = {
    "Manufacturing": "manufacturing_emissions",
    "Distance_km": "one_way_distance_km",
    "P_Return": "return_probability",
    "P_Scrap": "scrap_probability",
    "EoL_Balance": "end_of_life_balance",
}
PROBABILITY_FIELDS = ("P_Return", "P_Scrap")

FIELD_LABELS = {
    "Manufacturing": "Manufacturing MUP [kg CO2e/unit]",
    "Distance_km": "One-way Transport Distance [km]",
    "P_Return": "Return Rate p_ret (0-1)",
    "P_Scrap": "Scrap Rate p_scr (0-1)",
    "EoL_Balance": "Net EoL Balance [kg CO2e/unit]",
}


# ============================================================================
# NUMERIC TEXT POLICY
# ============================================================================

def normalize_numeric_text(text: str) -> str:
    """
    Normalization applied when the user leaves a field: trim, decimal comma -> dot.
    Only the first comma is replaced.
    """
    return str(text).replace(",", ".", 1).strip()


def parse_number(value: Any, fallback: float = 0.0) -> float:
    """
    Permissively turn a form value into a finite float.
    Numbers pass through; text is normalized and its leading decimal literal is used.
    Empty, unparsable or non-finite input yields the fallback.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else fallback
    if value is None:
        return fallback

    match = _NUMBER_PREFIX.match(normalize_numeric_text(value))
    if not match:
        return fallback
    number = float(match.group(0))
    return number if math.isfinite(number) else fallback


def coerce_horizon(value: Any) -> int:
    """
    Turn a horizon field into an integer >= 1.
    Empty or unparsable input becomes 1; smaller values are raised to 1.
    """
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return max(1, int(value))
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return max(1, int(value)) if math.isfinite(value) else 1

    text = str(value).strip() if value is not None else ""
    if not text:
        return 1
    match = _INTEGER_PREFIX.match(text)
    if not match:
        return 1
    return max(1, int(match.group(0)))


def parameters_from_fields(fields: Mapping[str, Any]) -> ScenarioParameters:
    """
    Build ScenarioParameters from raw form values (text or numbers).
    Missing or unparsable fields fall back to 0; probabilities are clamped.
    """
    values = {}
    for field_name, attr in FIELD_MAP.items():
        number = parse_number(fields.get(field_name, ""), fallback=0.0)
        if field_name in PROBABILITY_FIELDS:
            number = clamp_probability(number)
        values[attr] = number
    return ScenarioParameters(**values)


def fields_from_parameters(params: ScenarioParameters) -> Dict[str, float]:
    return {field_name: getattr(params, attr) for field_name, attr in FIELD_MAP.items()}


# ============================================================================
# PROMPTS
# ============================================================================

def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")
    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx - 1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_yes_no(label: str, default: bool) -> bool:
    """
    Prompt user for yes/no answer, returning True/False.
    """
    d = "y" if default else "n"
    opts = f"{C_CHOICE}y{C_PROMPT}/{C_CHOICE}n{C_PROMPT}"
    while True:
        s = input(style_prompt(f"{label} [{opts}] (default={d}): ")).strip().lower()
        if not s:
            return default
        if s in ("y", "yes"):
            return True
        if s in ("n", "no"):
            return False
        logger.warning("Please answer y or n.")


def prompt_number(label: str, default: float) -> float:
    """
    Prompt for a numeric field. Empty keeps the current value;
    text that cannot be read as a number counts as a cleared field (0).
    """
    s = input(style_prompt(f"{label} [current={default}]: "))
    if not s.strip():
        return default
    value = parse_number(s, fallback=0.0)
    if not _NUMBER_PREFIX.match(normalize_numeric_text(s)):
        logger.warning(f"Could not read '{s.strip()}' as a number. Using 0.")
    return value


def prompt_probability(label: str, default: float) -> float:
    """Prompt for a probability; values outside [0, 1] are clamped."""
    value = prompt_number(label, default)
    clamped = clamp_probability(value)
    if clamped != value:
        logger.warning(f"{label}: {value} is outside [0, 1]; using {clamped}.")
    return clamped


def prompt_horizon(default: int) -> int:
    """Prompt for the maximum number of technical cycles N_max (integer >= 1)."""
    s = input(style_prompt(f"Maximum technical cycles N_max [current={default}]: ")).strip()
    if not s:
        return default
    horizon = coerce_horizon(s)
    logger.info(f"  -> Horizon set to N_max = {horizon}")
    return horizon


def prompt_scenario_parameters(scenario: Scenario) -> ScenarioParameters:
    """
    Walk through every field of one scenario card.
    Returns the edited parameters; the caller recomputes.
    """
    print(f"\n{C_HEADER}Edit {scenario.name}{C_RESET} (press Enter to keep the current value)")
    current = fields_from_parameters(scenario.params)
    edited = {}
    for field_name in FIELD_MAP:
        label = FIELD_LABELS[field_name]
        if field_name in PROBABILITY_FIELDS:
            edited[field_name] = prompt_probability(label, current[field_name])
        else:
            edited[field_name] = prompt_number(label, current[field_name])
    return parameters_from_fields(edited)


# ============================================================================
# CONSOLE OUTPUT
# ============================================================================

def print_scenario_overview(scenario: Scenario, result: AmortizationResult):
    """
    Summary card for one scenario: q, cost at N=1, cost at N=horizon, break-even badge.
    """
    print(f"\n{Back.BLACK}{C_HEADER}{'='*60}")
    print(f"   {scenario.name.upper()}   [{break_even_label(result)}]")
    print(f"{'='*60}{Style.RESET_ALL}")

    print(f"  q = p_ret x (1 - p_scr)      : {result.survival_probability:.1%}")
    print(f"  Start (N=1)                  : {kg_to_g(result.first_cycle_cost):.2f} g")
    print(f"  At N = {result.horizon:<22}: {kg_to_g(result.last_cycle_cost):.2f} g")
    print(f"  Cycle cost (steady state)    : {kg_to_g(result.cycle_cost):.2f} g")
    print(f"  Single-use reference         : {kg_to_g(result.single_use_reference):.2f} g")

    if result.has_break_even:
        print(f"  {C_SUCCESS}Reusable option breaks even at cycle N={result.break_even_cycle}{C_RESET}")
    else:
        print(f"  {C_ERROR}No break-even within {result.horizon} cycles{C_RESET}")


def print_comparison_table(scenarios: List[Scenario], results: Mapping[str, AmortizationResult],
                           horizon: Optional[int] = None):
    print("\n" + "-" * 80)
    print(f"{'Scenario':<20} | {'q':<8} | {'N=1 (g)':<10} | {'N=max (g)':<10} | {'Break-even':<16}")
    print("-" * 80)
    for sc in scenarios:
        r = results[sc.name]
        be = str(r.break_even_cycle) if r.has_break_even else "none"
        print(f"{sc.name:<20} | {r.survival_probability:<8.3f} | {kg_to_g(r.first_cycle_cost):<10.2f} | "
              f"{kg_to_g(r.last_cycle_cost):<10.2f} | {be:<16}")
    print("-" * 80)
    if horizon is not None:
        print(f"Horizon: N_max = {horizon}")
