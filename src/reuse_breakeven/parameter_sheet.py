import os
import logging
import pandas as pd

from .config import DEFAULT_CONFIG_PATH, SCENARIO_SHEET, SCENARIO_COLUMNS
from .constants import DEFAULTS, SCENARIO_PRESETS

logger = logging.getLogger(__name__)

# KEY: identical to the names read by constants.py
PARAMS = [
    # --- SECTION: GLOBAL ---
    {
        "Key": "DEFAULT_HORIZON",
        "Unit": "Cycles",
        "Section": "1. Global Settings",
        "Description": "Default maximum number of technical reuse cycles (N_max) evaluated."
    },
    {
        "Key": "DECIMALS",
        "Unit": "Integer",
        "Section": "1. Global Settings",
        "Description": "Number of decimal places used in reports."
    },

    # --- SECTION: MATERIAL ---
    {
        "Key": "MASS_PER_UNIT_KG",
        "Unit": "kg",
        "Section": "2. Material",
        "Description": "Mass of aluminium per reusable unit."
    },
    {
        "Key": "EF_PRIMARY_KGCO2_PER_KG",
        "Unit": "kgCO2e/kg",
        "Section": "2. Material",
        "Description": "Embodied emissions of primary aluminium."
    },

    # --- SECTION: LIFECYCLE ---
    {
        "Key": "INITIAL_LOGISTICS_KGCO2",
        "Unit": "kgCO2e/unit",
        "Section": "3. Lifecycle",
        "Description": "One-time forward logistics for the first deployment."
    },
    {
        "Key": "USE_PHASE_KGCO2_PER_CYCLE",
        "Unit": "kgCO2e/cycle",
        "Section": "3. Lifecycle",
        "Description": "Emissions incurred during use."
    },
    {
        "Key": "CLEANING_KGCO2_PER_CYCLE",
        "Unit": "kgCO2e/cycle",
        "Section": "3. Lifecycle",
        "Description": "Cleaning and refill between cycles."
    },
    {
        "Key": "TRANSPORT_KGCO2_PER_100KM",
        "Unit": "kgCO2e/(unit*100km)",
        "Section": "3. Lifecycle",
        "Description": "Transport emissions per 100 km one-way; applied to the forward and return trip."
    },

    # --- SECTION: REFERENCE ---
    {
        "Key": "SINGLE_USE_REFERENCE_KGCO2",
        "Unit": "kgCO2e/use",
        "Section": "4. Reference",
        "Description": "Emissions of one single-use item (the break-even threshold)."
    },
]


def create_formatted_excel(output_path: str = DEFAULT_CONFIG_PATH) -> str:
    """
    Write the parameters workbook with the built-in defaults:
    a formatted 'Parameters' sheet and an editable 'Scenarios' sheet.
    """
    df = pd.DataFrame([{**p, "Value": DEFAULTS[p["Key"]]} for p in PARAMS])
    df = df[["Section", "Key", "Value", "Unit", "Description"]]
    scenarios_df = pd.DataFrame(SCENARIO_PRESETS, columns=SCENARIO_COLUMNS)

    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

    with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name='Parameters', index=False)
        scenarios_df.to_excel(writer, sheet_name=SCENARIO_SHEET, index=False)

        workbook = writer.book
        worksheet = writer.sheets['Parameters']

        header_fmt = workbook.add_format({
            'bold': True,
            'text_wrap': True,
            'valign': 'top',
            'fg_color': '#4F81BD',
            'font_color': '#FFFFFF',
            'border': 1
        })
        section_fmt = workbook.add_format({
            'bold': True,
            'bg_color': '#DCE6F1',
            'border': 1
        })
        key_fmt = workbook.add_format({
            'bold': True,
            'font_color': '#333333',
            'bg_color': '#F2F2F2',
            'border': 1
        })
        value_fmt = workbook.add_format({
            'bg_color': '#FFFFCC',  # Editable
            'border': 1
        })
        text_fmt = workbook.add_format({
            'text_wrap': True,
            'valign': 'top',
            'border': 1
        })

        worksheet.set_column('A:A', 22)
        worksheet.set_column('B:B', 32)
        worksheet.set_column('C:C', 12, value_fmt)
        worksheet.set_column('D:D', 20)
        worksheet.set_column('E:E', 70, text_fmt)

        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_fmt)

        for row_num, row_data in enumerate(df.to_dict("records"), start=1):
            worksheet.write(row_num, 0, row_data["Section"], section_fmt)
            worksheet.write(row_num, 1, row_data["Key"], key_fmt)
            worksheet.write(row_num, 2, row_data["Value"], value_fmt)
            worksheet.write(row_num, 3, row_data["Unit"], text_fmt)
            worksheet.write(row_num, 4, row_data["Description"], text_fmt)

        sc_sheet = writer.sheets[SCENARIO_SHEET]
        for col_num, value in enumerate(scenarios_df.columns.values):
            sc_sheet.write(0, col_num, value, header_fmt)
        sc_sheet.set_column(0, 0, 18)
        sc_sheet.set_column(1, len(SCENARIO_COLUMNS) - 1, 14, value_fmt)

    logger.info(f"Formatted parameter workbook created at {output_path}")
    return output_path
