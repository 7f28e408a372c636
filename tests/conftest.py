"""
Shared pytest fixtures for the break-even calculator tests.
"""
import os

import matplotlib
matplotlib.use("Agg")

import pytest

os.environ.setdefault("NO_COLOR", "1")

from reuse_breakeven.models import PhysicalConstants, ScenarioParameters, Scenario


@pytest.fixture
def reference_constants():
    """The fixed constants of the calculator (aluminium capsule vs. single-use)."""
    return PhysicalConstants(
        mass_per_unit=0.00324,
        emission_factor_primary=14.77,
        initial_logistics=0.00037,
        single_use_reference=0.00437,
        use_phase_emissions=0.0,
        cleaning_emissions=0.001,
        transport_factor_per_100km=0.00037,
    )


@pytest.fixture
def expected_params():
    return ScenarioParameters(
        manufacturing_emissions=0.0008,
        one_way_distance_km=300.0,
        return_probability=0.95,
        scrap_probability=0.02,
        end_of_life_balance=-0.0015,
    )


@pytest.fixture
def unit_constants():
    """Round numbers: start cost 1, cycle cost 1, no transport."""
    return PhysicalConstants(
        mass_per_unit=1.0,
        emission_factor_primary=1.0,
        initial_logistics=0.0,
        single_use_reference=1.5,
        use_phase_emissions=0.0,
        cleaning_emissions=1.0,
        transport_factor_per_100km=0.0,
    )


@pytest.fixture
def perfect_return_params():
    return ScenarioParameters(
        manufacturing_emissions=0.0,
        one_way_distance_km=0.0,
        return_probability=1.0,
        scrap_probability=0.0,
        end_of_life_balance=0.0,
    )


@pytest.fixture
def preset_scenarios():
    return [
        Scenario("Worst Case", "#ef4444", ScenarioParameters(0.0010, 500.0, 0.85, 0.06, 0.0002)),
        Scenario("Expected Case", "#0ea5e9", ScenarioParameters(0.0008, 300.0, 0.95, 0.02, 0.0)),
        Scenario("Best Case", "#10b981", ScenarioParameters(0.0006, 150.0, 0.98, 0.01, -0.0015)),
    ]
