import os
import pandas as pd
import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

# Project root is two levels above src/reuse_breakeven/config.py
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "data", "parameters_config", "project_parameters.xlsx")

CONFIG_ENV_VAR = "REUSE_BREAKEVEN_CONFIG"
SCENARIO_SHEET = "Scenarios"
SCENARIO_COLUMNS = ["Name", "Color", "Manufacturing", "Distance_km", "P_Return", "P_Scrap", "EoL_Balance"]


def resolve_config_path(path: str = None) -> str:
    """Explicit path first, then the environment override, then the project default."""
    if path:
        return path
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_excel_config(path: str = None) -> Dict[str, Any]:
    """
    Load configuration from the first sheet of the parameters workbook.
    Expected columns: Key, Value (Section, Unit, Description are informative)
    Returns a dictionary of Key -> Value, empty if the workbook is unusable.
    """
    path = resolve_config_path(path)
    config = {}
    if not os.path.exists(path):
        logger.warning(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        df = pd.read_excel(path, sheet_name=0)
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")
        return config

    if "Key" in df.columns and "Value" in df.columns:
        for _, row in df.iterrows():
            if pd.isna(row["Key"]):
                continue
            key = str(row["Key"]).strip()
            config[key] = row["Value"]
        logger.info(f"Loaded {len(config)} parameters from {path}")
    else:
        logger.warning(f"Excel file {path} missing 'Key' or 'Value' columns.")

    return config


def load_scenario_rows(path: str = None) -> List[Dict[str, Any]]:
    """
    Load raw scenario rows from the optional 'Scenarios' sheet.
    Values are returned as read; numeric coercion happens at the input boundary.
    """
    path = resolve_config_path(path)
    if not os.path.exists(path):
        return []

    try:
        sheets = pd.read_excel(path, sheet_name=None)
    except Exception as e:
        logger.error(f"Failed to read scenarios from {path}: {e}")
        return []

    df = sheets.get(SCENARIO_SHEET)
    if df is None:
        logger.debug(f"No '{SCENARIO_SHEET}' sheet in {path}; using preset scenarios.")
        return []

    missing = [c for c in SCENARIO_COLUMNS if c not in df.columns]
    if missing:
        logger.warning(f"'{SCENARIO_SHEET}' sheet in {path} missing columns {missing}. Using preset scenarios.")
        return []

    df = df.dropna(subset=["Name"])
    # Empty cells behave like a cleared form field
    rows = df[SCENARIO_COLUMNS].astype(object).where(df[SCENARIO_COLUMNS].notna(), "").to_dict("records")
    logger.info(f"Loaded {len(rows)} scenarios from {path}")
    return rows
