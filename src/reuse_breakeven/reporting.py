import os
import logging
from datetime import datetime
from typing import List, Mapping

import pandas as pd

from .models import Scenario, AmortizationResult
from .scenarios import build_chart_frame
from .utils.calculations import kg_to_g, break_even_label, f3

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "Scenario",
    "Manufacturing (kgCO2e)",
    "Distance one-way (km)",
    "Return Rate",
    "Scrap Rate",
    "EoL Balance (kgCO2e)",
    "Survival q",
    "Start cost (g)",
    "Cycle cost (g)",
    "N=1 (g/use)",
    "N=max (g/use)",
    "Asymptote (g/use)",
    "SUP reference (g/use)",
    "Break-even N",
]


def summary_frame(scenarios: List[Scenario], results: Mapping[str, AmortizationResult]) -> pd.DataFrame:
    """
    One row per scenario. 'Break-even N' is a nullable integer column:
    scenarios without break-even hold <NA>, never 0.
    """
    rows = []
    for sc in scenarios:
        r = results[sc.name]
        p = sc.params
        rows.append({
            "Scenario": sc.name,
            "Manufacturing (kgCO2e)": p.manufacturing_emissions,
            "Distance one-way (km)": p.one_way_distance_km,
            "Return Rate": p.return_probability,
            "Scrap Rate": p.scrap_probability,
            "EoL Balance (kgCO2e)": p.end_of_life_balance,
            "Survival q": r.survival_probability,
            "Start cost (g)": kg_to_g(r.start_cost),
            "Cycle cost (g)": kg_to_g(r.cycle_cost),
            "N=1 (g/use)": kg_to_g(r.first_cycle_cost),
            "N=max (g/use)": kg_to_g(r.last_cycle_cost),
            "Asymptote (g/use)": kg_to_g(r.asymptotic_emissions_per_use),
            "SUP reference (g/use)": kg_to_g(r.single_use_reference),
            "Break-even N": r.break_even_cycle,
        })

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df["Break-even N"] = df["Break-even N"].astype("Int64")
    return df


def save_series_csv(scenarios: List[Scenario], results: Mapping[str, AmortizationResult], path: str) -> str:
    """Write the merged per-cycle chart data (grams) to CSV."""
    frame = build_chart_frame(scenarios, results)
    frame.to_csv(path, index=False)
    logger.info(f"Series saved to: {path}")
    return path


def save_summary_markdown(
    scenarios: List[Scenario],
    results: Mapping[str, AmortizationResult],
    path: str,
    horizon: int
) -> str:
    """Human-readable report of inputs, summary figures and break-even status."""
    lines = [
        "# Single-use vs. reusable: amortized CO₂ per use",
        "",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}  ",
        f"Horizon: N_max = {horizon}",
        "",
        "| Scenario | q | N=1 (g) | N=max (g) | Cycle cost (g) | Asymptote (g) | Break-even |",
        "|---|---|---|---|---|---|---|",
    ]
    for sc in scenarios:
        r = results[sc.name]
        lines.append(
            f"| {sc.name} | {r.survival_probability:.3f} | {f3(kg_to_g(r.first_cycle_cost))} | "
            f"{f3(kg_to_g(r.last_cycle_cost))} | {f3(kg_to_g(r.cycle_cost))} | "
            f"{f3(kg_to_g(r.asymptotic_emissions_per_use))} | {break_even_label(r)} |"
        )

    if scenarios:
        ref = kg_to_g(results[scenarios[0].name].single_use_reference)
        lines += ["", f"Single-use reference: {f3(ref)} g CO₂e per use."]

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    logger.info(f"Summary saved to: {path}")
    return path


def save_excel_report(scenarios: List[Scenario], results: Mapping[str, AmortizationResult], path: str) -> str:
    """
    Two-sheet workbook: 'Summary' (one row per scenario) and 'Series' (per cycle, grams).
    """
    summary = summary_frame(scenarios, results)
    series = build_chart_frame(scenarios, results)

    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        summary.to_excel(writer, sheet_name="Summary", index=False)
        series.to_excel(writer, sheet_name="Series", index=False)

        workbook = writer.book
        header_fmt = workbook.add_format({
            'bold': True,
            'text_wrap': True,
            'valign': 'top',
            'fg_color': '#4F81BD',
            'font_color': '#FFFFFF',
            'border': 1
        })
        for sheet_name, df in (("Summary", summary), ("Series", series)):
            worksheet = writer.sheets[sheet_name]
            for col_num, value in enumerate(df.columns.values):
                worksheet.write(0, col_num, value, header_fmt)
            worksheet.set_column(0, len(df.columns) - 1, 16)
        writer.sheets["Summary"].set_column(0, 0, 22)

    logger.info(f"Excel report saved to: {path}")
    return path


def export_reports(
    scenarios: List[Scenario],
    results: Mapping[str, AmortizationResult],
    reports_dir: str,
    horizon: int
) -> List[str]:
    """Write CSV, Markdown and Excel reports into a timestamped folder."""
    out_dir = os.path.join(reports_dir, datetime.now().strftime("%Y%m%d_%H%M%S"))
    os.makedirs(out_dir, exist_ok=True)

    written = [
        save_series_csv(scenarios, results, os.path.join(out_dir, "amortization_series.csv")),
        save_summary_markdown(scenarios, results, os.path.join(out_dir, "summary.md"), horizon),
    ]
    try:
        written.append(save_excel_report(scenarios, results, os.path.join(out_dir, "amortization_report.xlsx")))
    except PermissionError:
        logger.warning(f"Could not write Excel report in {out_dir} (file locked?). CSV and Markdown were saved.")
    return written
