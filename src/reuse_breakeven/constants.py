import math
from .config import load_excel_config
from .models import PhysicalConstants, InvalidInputError

# ============================================================================
# SETTINGS & CONSTANTS
# ============================================================================

# Built-in values; any key present in project_parameters.xlsx overrides them.
DEFAULTS = {
    "MASS_PER_UNIT_KG": 0.00324,
    "EF_PRIMARY_KGCO2_PER_KG": 14.77,
    "INITIAL_LOGISTICS_KGCO2": 0.00037,
    "SINGLE_USE_REFERENCE_KGCO2": 0.00437,
    "USE_PHASE_KGCO2_PER_CYCLE": 0.0,
    "CLEANING_KGCO2_PER_CYCLE": 0.001,
    "TRANSPORT_KGCO2_PER_100KM": 0.00037,
    "DEFAULT_HORIZON": 50,
    "DECIMALS": 2,
}

# Load configuration immediately (blocking)
_config = load_excel_config()


def _get_float(key):
    raw = _config.get(key, DEFAULTS[key])
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Parameter '{key}' must be numeric, got {raw!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"Parameter '{key}' must be finite, got {raw!r}")
    return value


def _get_int(key):
    value = _get_float(key)
    if value != int(value):
        raise InvalidInputError(f"Parameter '{key}' must be a whole number, got {value}")
    return int(value)


PHYSICAL_CONSTANTS = PhysicalConstants(
    mass_per_unit=_get_float("MASS_PER_UNIT_KG"),
    emission_factor_primary=_get_float("EF_PRIMARY_KGCO2_PER_KG"),
    initial_logistics=_get_float("INITIAL_LOGISTICS_KGCO2"),
    single_use_reference=_get_float("SINGLE_USE_REFERENCE_KGCO2"),
    use_phase_emissions=_get_float("USE_PHASE_KGCO2_PER_CYCLE"),
    cleaning_emissions=_get_float("CLEANING_KGCO2_PER_CYCLE"),
    transport_factor_per_100km=_get_float("TRANSPORT_KGCO2_PER_100KM"),
)

DEFAULT_HORIZON = max(1, _get_int("DEFAULT_HORIZON"))
DECIMALS = _get_int("DECIMALS")

GRAMS_PER_KG = 1000.0

# ============================================================================
# SCENARIO PRESETS
# ============================================================================

# Raw form values; text fields stay text, as typed into an input card.
SCENARIO_PRESETS = [
    {
        "Name": "Worst Case",
        "Color": "#ef4444",
        "Manufacturing": "0.0010",
        "Distance_km": "500",
        "P_Return": 0.85,
        "P_Scrap": 0.06,
        "EoL_Balance": "0.0002",
    },
    {
        "Name": "Expected Case",
        "Color": "#0ea5e9",
        "Manufacturing": "0.0008",
        "Distance_km": "300",
        "P_Return": 0.95,
        "P_Scrap": 0.02,
        "EoL_Balance": "0.0000",
    },
    {
        "Name": "Best Case",
        "Color": "#10b981",
        "Manufacturing": "0.0006",
        "Distance_km": "150",
        "P_Return": 0.98,
        "P_Scrap": 0.01,
        "EoL_Balance": "-0.0015",
    },
]

SUP_REFERENCE_COLOR = "#6b7280"
