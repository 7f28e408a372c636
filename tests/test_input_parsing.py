import pytest

from reuse_breakeven.models import ScenarioParameters, Scenario
from reuse_breakeven.utils import input_helpers
from reuse_breakeven.utils.input_helpers import (
    normalize_numeric_text, parse_number, coerce_horizon,
    parameters_from_fields, fields_from_parameters,
    prompt_choice, prompt_yes_no, prompt_number, prompt_probability, prompt_horizon,
    prompt_scenario_parameters,
)


def feed_inputs(monkeypatch, answers):
    """Replace input() with a scripted sequence of answers."""
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


# ----------------------------------------------------------------------------
# Numeric text
# ----------------------------------------------------------------------------

def test_normalize_replaces_first_comma_and_trims():
    assert normalize_numeric_text(" 0,5 ") == "0.5"
    assert normalize_numeric_text("1,5,3") == "1.5,3"


@pytest.mark.parametrize("raw, expected", [
    (" 0,5 ", 0.5),
    ("0.0008", 0.0008),
    ("-0.0015", -0.0015),
    ("300", 300.0),
    ("12.5 km", 12.5),
    (".5", 0.5),
    ("1e-3", 0.001),
    ("1,5,3", 1.5),
    (0.3, 0.3),
    (7, 7.0),
])
def test_parse_number_reads_leading_literal(raw, expected):
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "   ", "abc", "inf", "NaN", "1e999", None, True,
                                 float("nan"), float("inf")])
def test_parse_number_falls_back_to_zero(raw):
    assert parse_number(raw) == 0.0


def test_parse_number_custom_fallback():
    assert parse_number("x", fallback=7.0) == 7.0


@pytest.mark.parametrize("raw, expected", [
    ("", 1),
    ("abc", 1),
    ("0", 1),
    ("-5", 1),
    ("75", 75),
    (" 12 ", 12),
    ("12.7", 12),
    ("40 cycles", 40),
    (40, 40),
    (0, 1),
    (3.9, 3),
    (float("nan"), 1),
    (None, 1),
])
def test_coerce_horizon(raw, expected):
    assert coerce_horizon(raw) == expected


def test_parameters_from_fields_is_permissive():
    params = parameters_from_fields({
        "Manufacturing": "0,0008",
        "Distance_km": "",
        "P_Return": 1.5,
        "P_Scrap": "abc",
        "EoL_Balance": "-0.0015",
    })
    assert params == ScenarioParameters(
        manufacturing_emissions=0.0008,
        one_way_distance_km=0.0,
        return_probability=1.0,
        scrap_probability=0.0,
        end_of_life_balance=-0.0015,
    )


def test_parameters_from_fields_missing_keys_are_zero():
    params = parameters_from_fields({"Distance_km": "150"})
    assert params.one_way_distance_km == 150.0
    assert params.manufacturing_emissions == 0.0
    assert params.return_probability == 0.0


def test_fields_round_trip(expected_params):
    assert parameters_from_fields(fields_from_parameters(expected_params)) == expected_params


# ----------------------------------------------------------------------------
# Prompts
# ----------------------------------------------------------------------------

def test_prompt_choice_by_number_after_invalid(monkeypatch):
    feed_inputs(monkeypatch, ["x", "9", "2"])
    assert prompt_choice("Mode", ["alpha", "beta"], default="alpha") == "beta"


def test_prompt_choice_by_name_and_default(monkeypatch):
    feed_inputs(monkeypatch, ["Expected Case"])
    assert prompt_choice("Edit", ["Worst Case", "Expected Case"], default="done") == "Expected Case"

    feed_inputs(monkeypatch, [""])
    assert prompt_choice("Edit", ["Worst Case", "Expected Case"], default="done") == "done"


def test_prompt_yes_no(monkeypatch):
    feed_inputs(monkeypatch, ["maybe", "YES"])
    assert prompt_yes_no("Continue?", default=False) is True

    feed_inputs(monkeypatch, [""])
    assert prompt_yes_no("Continue?", default=False) is False


def test_prompt_number_keeps_default_on_empty(monkeypatch):
    feed_inputs(monkeypatch, ["   "])
    assert prompt_number("Distance", 300.0) == 300.0


def test_prompt_number_unreadable_is_zero(monkeypatch, caplog):
    feed_inputs(monkeypatch, ["abc"])
    with caplog.at_level("WARNING"):
        assert prompt_number("Distance", 300.0) == 0.0
    assert "Could not read 'abc'" in caplog.text


def test_prompt_number_decimal_comma(monkeypatch):
    feed_inputs(monkeypatch, ["0,0006"])
    assert prompt_number("Manufacturing", 0.0008) == pytest.approx(0.0006)


def test_prompt_probability_clamps(monkeypatch):
    feed_inputs(monkeypatch, ["1.7"])
    assert prompt_probability("Return rate", 0.95) == 1.0

    feed_inputs(monkeypatch, ["-0.1"])
    assert prompt_probability("Scrap rate", 0.02) == 0.0


def test_prompt_horizon(monkeypatch):
    feed_inputs(monkeypatch, [""])
    assert prompt_horizon(50) == 50

    feed_inputs(monkeypatch, ["0"])
    assert prompt_horizon(50) == 1

    feed_inputs(monkeypatch, ["120"])
    assert prompt_horizon(50) == 120


def test_prompt_scenario_parameters_walks_all_fields(monkeypatch, expected_params):
    scenario = Scenario("Expected Case", "#0ea5e9", expected_params)
    # Manufacturing, Distance, P_Return, P_Scrap, EoL
    feed_inputs(monkeypatch, ["", "0", "2", "", "abc"])
    params = prompt_scenario_parameters(scenario)

    assert params.manufacturing_emissions == expected_params.manufacturing_emissions
    assert params.one_way_distance_km == 0.0
    assert params.return_probability == 1.0
    assert params.scrap_probability == expected_params.scrap_probability
    assert params.end_of_life_balance == 0.0


def test_print_comparison_table_shows_none_for_missing_break_even(capsys, preset_scenarios, reference_constants):
    from reuse_breakeven.scenarios import run_scenarios

    results = run_scenarios(preset_scenarios, reference_constants, 50)
    input_helpers.print_comparison_table(preset_scenarios, results, 50)
    out = capsys.readouterr().out

    expected_line = next(line for line in out.splitlines() if line.startswith("Expected Case"))
    assert expected_line.rstrip().endswith("none")
    assert "Horizon: N_max = 50" in out
