import logging

from .audit import audit_logger, report_directory
from .constants import PHYSICAL_CONSTANTS, DEFAULT_HORIZON
from .logging_conf import setup_logging
from .parameter_sheet import create_formatted_excel
from .reporting import export_reports
from .scenarios import ScenarioBoard, default_scenarios
from .utils.calculations import kg_to_g
from .utils.input_helpers import (
    prompt_choice, prompt_yes_no, prompt_horizon, prompt_scenario_parameters,
    print_header, print_scenario_overview, print_comparison_table, C_SUCCESS, C_RESET
)
from .visualization import Visualizer

logger = logging.getLogger(__name__)

MODE_QUICK = "Quick Run (Presets)"
MODE_EDIT = "Edit Scenarios (Interactive)"
MODE_TEMPLATE = "Export Parameter Template"


def print_constants():
    c = PHYSICAL_CONSTANTS
    logger.info("Fixed constants:")
    logger.info(f"  mass {c.mass_per_unit} kg · primary Al EF {c.emission_factor_primary} kgCO2e/kg")
    logger.info(f"  initial logistics {c.initial_logistics} kgCO2e/unit · "
                f"SUP reference {c.single_use_reference} kgCO2e/use ({kg_to_g(c.single_use_reference):.2f} g)")
    logger.info(f"  cleaning+refill {c.cleaning_emissions} kgCO2e/cycle · use phase {c.use_phase_emissions} kgCO2e/cycle · "
                f"transport {c.transport_factor_per_100km} kgCO2e/100km")


def run_interactive_edit(board: ScenarioBoard) -> ScenarioBoard:
    """
    Edit loop: pick a scenario card or the horizon, change it, see the
    recomputed result immediately. Ends when the user selects 'done'.
    """
    print_header("Step 2: Edit Scenarios")
    while True:
        options = [sc.name for sc in board.scenarios] + ["N_max (horizon)", "done"]
        choice = prompt_choice("Edit", options, default="done")

        if choice == "done":
            return board

        if choice == "N_max (horizon)":
            board.set_horizon(prompt_horizon(board.horizon))
            print_comparison_table(board.scenarios, board.results, board.horizon)
            continue

        scenario = board.get(choice)
        params = prompt_scenario_parameters(scenario)
        board.update_scenario(choice, params)
        print_scenario_overview(board.get(choice), board.results[choice])


def report_results(board: ScenarioBoard):
    print_header(f"Results (N_max = {board.horizon})")
    for sc in board.scenarios:
        print_scenario_overview(sc, board.results[sc.name])
    print_comparison_table(board.scenarios, board.results, board.horizon)

    if any(r.has_break_even for r in board.results.values()):
        print(f"\n{C_SUCCESS}Break-even (if any) shown in chart{C_RESET}")


def audit_results(board: ScenarioBoard):
    for sc in board.scenarios:
        audit_logger.log_result(sc, board.results[sc.name], board.constants)


def export_outputs(board: ScenarioBoard, choice: str, reports_dir: str = None):
    """
    a) chart only, b) chart + CSV/Markdown/Excel reports.
    Failures are logged; the computed results stay valid.
    """
    reports_dir = reports_dir or report_directory
    try:
        vis = Visualizer(mode="comparison", output_root=reports_dir)
        vis.generate_all_plots(board.scenarios, board.results)
    except (OSError, ValueError) as e:
        logger.error(f"Chart generation failed: {e}")

    if choice == "b":
        try:
            written = export_reports(board.scenarios, board.results, reports_dir, board.horizon)
            for path in written:
                print(f"Report saved to: {path}")
        except OSError as e:
            logger.error(f"Report export failed: {e}")


def main():
    # 1. LOGGING SETUP
    setup_logging(console_level=logging.INFO)

    # 2. PROCESS START BANNER
    print_header("CO2 per use: Single-Use vs. Multi-Use – Start")
    print_constants()

    print("Welcome! Select operation mode:")
    mode = prompt_choice("Mode", [MODE_QUICK, MODE_EDIT, MODE_TEMPLATE], default=MODE_QUICK)

    if mode == MODE_TEMPLATE:
        path = create_formatted_excel()
        print(f"{C_SUCCESS}Parameter template written to: {path}{C_RESET}")
        return

    board = ScenarioBoard(scenarios=default_scenarios(), horizon=DEFAULT_HORIZON)

    print_header("Step 1: Horizon")
    board.set_horizon(prompt_horizon(board.horizon))

    if mode == MODE_EDIT:
        run_interactive_edit(board)

    report_results(board)

    if prompt_yes_no("Write calculation audit log?", default=False):
        audit_logger.enable(report_directory)
        audit_results(board)

    print("\n" + "=" * 60)
    print("Post-Analysis Output")
    print("=" * 60)
    print("Would you like to:")
    print("  a) Save the comparison chart")
    print("  b) Save the chart and CSV / Markdown / Excel reports")
    print("  c) Exit")

    out_choice = prompt_choice("Select option", ["a", "b", "c"], default="c")
    if out_choice in ("a", "b"):
        export_outputs(board, out_choice)


if __name__ == "__main__":
    main()
