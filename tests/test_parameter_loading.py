"""
Parameter workbook: template export, Key/Value loading, Scenarios sheet.
"""
import pandas as pd
import pytest

from reuse_breakeven import constants
from reuse_breakeven.config import (
    load_excel_config, load_scenario_rows, resolve_config_path, CONFIG_ENV_VAR, SCENARIO_COLUMNS
)
from reuse_breakeven.parameter_sheet import create_formatted_excel, PARAMS
from reuse_breakeven.scenarios import default_scenarios


@pytest.fixture
def workbook(tmp_path):
    return create_formatted_excel(str(tmp_path / "parameters_config" / "project_parameters.xlsx"))


def test_template_covers_every_default_key():
    assert {p["Key"] for p in PARAMS} == set(constants.DEFAULTS)


def test_missing_workbook_gives_empty_config(tmp_path):
    missing = str(tmp_path / "nope.xlsx")
    assert load_excel_config(missing) == {}
    assert load_scenario_rows(missing) == []


def test_template_round_trip(workbook):
    config = load_excel_config(workbook)

    assert set(config) == set(constants.DEFAULTS)
    for key, default in constants.DEFAULTS.items():
        assert float(config[key]) == pytest.approx(default)


def test_template_scenarios_sheet(workbook):
    rows = load_scenario_rows(workbook)

    assert [r["Name"] for r in rows] == ["Worst Case", "Expected Case", "Best Case"]
    assert all(set(SCENARIO_COLUMNS) <= set(r) for r in rows)


def test_default_scenarios_from_workbook(workbook):
    scenarios = default_scenarios(workbook)

    assert [sc.name for sc in scenarios] == ["Worst Case", "Expected Case", "Best Case"]
    best = scenarios[2]
    assert best.color == "#10b981"
    assert best.params.manufacturing_emissions == pytest.approx(0.0006)
    assert best.params.one_way_distance_km == pytest.approx(150.0)
    assert best.params.end_of_life_balance == pytest.approx(-0.0015)


def test_default_scenarios_fall_back_to_presets(tmp_path):
    scenarios = default_scenarios(str(tmp_path / "missing.xlsx"))

    assert [sc.name for sc in scenarios] == ["Worst Case", "Expected Case", "Best Case"]
    worst = scenarios[0]
    assert worst.params.return_probability == 0.85
    assert worst.params.scrap_probability == 0.06
    assert worst.params.one_way_distance_km == 500.0


def test_scenarios_sheet_with_blank_cells_and_duplicates(tmp_path):
    path = str(tmp_path / "custom.xlsx")
    params_df = pd.DataFrame({"Key": ["DECIMALS"], "Value": [3]})
    scenarios_df = pd.DataFrame([
        {"Name": "Depot", "Color": "", "Manufacturing": "0,001", "Distance_km": None,
         "P_Return": 0.9, "P_Scrap": 0.05, "EoL_Balance": None},
        {"Name": "Depot", "Color": "#000000", "Manufacturing": 1, "Distance_km": 1,
         "P_Return": 1, "P_Scrap": 0, "EoL_Balance": 0},
    ], columns=SCENARIO_COLUMNS)
    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        params_df.to_excel(writer, sheet_name="Parameters", index=False)
        scenarios_df.to_excel(writer, sheet_name="Scenarios", index=False)

    scenarios = default_scenarios(path)

    assert len(scenarios) == 1
    depot = scenarios[0]
    assert depot.color == "#5D6D7E"
    assert depot.params.manufacturing_emissions == pytest.approx(0.001)
    assert depot.params.one_way_distance_km == 0.0
    assert depot.params.end_of_life_balance == 0.0


def test_workbook_without_key_value_columns(tmp_path):
    path = str(tmp_path / "bad.xlsx")
    pd.DataFrame({"Name": ["x"], "Amount": [1]}).to_excel(path, index=False)

    assert load_excel_config(path) == {}
    assert load_scenario_rows(path) == []


def test_environment_override(monkeypatch, workbook):
    monkeypatch.setenv(CONFIG_ENV_VAR, workbook)
    assert resolve_config_path() == workbook
    assert resolve_config_path("explicit.xlsx") == "explicit.xlsx"
    assert "MASS_PER_UNIT_KG" in load_excel_config()


def test_constants_reject_non_numeric_values(monkeypatch):
    monkeypatch.setattr(constants, "_config", {"MASS_PER_UNIT_KG": "heavy", "DECIMALS": 2.5})

    with pytest.raises(constants.InvalidInputError, match="MASS_PER_UNIT_KG"):
        constants._get_float("MASS_PER_UNIT_KG")
    with pytest.raises(constants.InvalidInputError, match="DECIMALS"):
        constants._get_int("DECIMALS")


def test_constants_use_defaults_for_missing_keys(monkeypatch):
    monkeypatch.setattr(constants, "_config", {})
    assert constants._get_float("EF_PRIMARY_KGCO2_PER_KG") == 14.77
    assert constants._get_int("DEFAULT_HORIZON") == 50
