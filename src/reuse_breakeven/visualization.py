import matplotlib.pyplot as plt
import os
import re
from datetime import datetime
from typing import List, Mapping, Optional
from .audit import report_directory
from .models import Scenario, AmortizationResult
from .constants import SUP_REFERENCE_COLOR
from .scenarios import build_chart_frame
from .utils.calculations import kg_to_g
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================


class Visualizer:
    def __init__(self, mode: str = "single_run", output_root: Optional[str] = None):
        """
        Initialize Visualizer.
        mode: 'single_run' (one scenario) or 'comparison' (all scenarios)
        """
        self.mode = mode
        self.output_root = output_root or report_directory
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Configure matplotlib for clean, publication-quality plots."""
        # Reset everything except the backend
        plt.style.use("default")

        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'xtick.labelsize': 11,
            'ytick.labelsize': 11,
            'legend.fontsize': 11,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#475569',
            'xtick.color': '#475569',
            'ytick.color': '#475569'
        })

        plt.rcParams.update({
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.linewidth': 1.2,
            'grid.color': '#CBD5E1',
            'grid.linestyle': '--',
            'grid.linewidth': 0.8,
            'axes.grid': True,
            'axes.axisbelow': True
        })

        self.colors = {
            'reference': SUP_REFERENCE_COLOR,
            'neutral': '#5D6D7E',
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        """Create the specific directory for this session's plots."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        subdir = "comparison" if self.mode == "comparison" else "single_run"
        path = os.path.join(self.output_root, subdir, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def _draw_break_even_marker(self, ax, scenario: Scenario, result: AmortizationResult):
        """Vertical marker at the break-even cycle; scenarios without one get none."""
        if result.break_even_cycle is None:
            return
        ax.axvline(x=result.break_even_cycle, color=scenario.color, linestyle=':', linewidth=1.5)
        ax.annotate(
            f"{scenario.name} N={result.break_even_cycle}",
            xy=(result.break_even_cycle, 1.0), xycoords=('data', 'axes fraction'),
            xytext=(0, 4), textcoords='offset points',
            ha='center', va='bottom', fontsize=10, color=scenario.color, fontweight='bold'
        )

    def plot_amortization_curves(
        self,
        scenarios: List[Scenario],
        results: Mapping[str, AmortizationResult],
        title: str = "CO₂ per use over reuse cycles (g)"
    ) -> Optional[str]:
        """
        Amortized emissions per use (g) over N for every scenario, with the
        single-use reference as a dashed line and break-even markers.
        """
        if not scenarios:
            return None

        frame = build_chart_frame(scenarios, results)

        fig, ax = plt.subplots(figsize=(12, 7), dpi=150)

        for sc in scenarios:
            ax.plot(frame["cycle"], frame[f"MUP_{sc.name}"], color=sc.color, linewidth=2.5, label=sc.name)

        ax.plot(frame["cycle"], frame["SUP"], color=self.colors['reference'], linestyle='--',
                linewidth=2, label="SUP reference")

        for sc in scenarios:
            self._draw_break_even_marker(ax, sc, results[sc.name])

        ax.set_xlabel("Max technical cycles (N_max)")
        ax.set_ylabel("g CO₂e / use")
        ax.set_title(title, pad=28, loc='left')
        ax.legend(loc='upper right', frameon=False)

        plt.tight_layout()
        filepath = self.get_save_path("amortization_curves.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        print(f"   [Plot] Saved amortization curves to: {filepath}")
        return filepath

    def plot_single_scenario(self, scenario: Scenario, result: AmortizationResult) -> str:
        """One scenario against the reference, with its asymptote as a faint line."""
        cycles = [p.cycle_index for p in result.per_cycle_series]
        values = [kg_to_g(p.amortized_emissions_per_use) for p in result.per_cycle_series]

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        ax.plot(cycles, values, color=scenario.color, linewidth=2.5, label=scenario.name)
        ax.axhline(y=kg_to_g(result.single_use_reference), color=self.colors['reference'],
                   linestyle='--', linewidth=2, label="SUP reference")
        ax.axhline(y=kg_to_g(result.asymptotic_emissions_per_use), color=scenario.color,
                   linestyle='-.', linewidth=1, alpha=0.5, label="Asymptote (N→∞)")
        self._draw_break_even_marker(ax, scenario, result)

        ax.set_xlabel("Reuse cycle N")
        ax.set_ylabel("g CO₂e / use")
        ax.set_title(f"Amortized emissions per use\n{scenario.name}", pad=28, loc='left')
        ax.legend(loc='upper right', frameon=False)

        plt.tight_layout()
        safe_name = re.sub(r"[^\w\-]+", "_", scenario.name).strip("_").lower() or "scenario"
        filepath = self.get_save_path(f"curve_{safe_name}.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        print(f"   [Plot] Saved scenario curve to: {filepath}")
        return filepath

    def generate_all_plots(self, scenarios: List[Scenario], results: Mapping[str, AmortizationResult]) -> List[str]:
        """Comparison chart plus one chart per scenario."""
        paths = []
        combined = self.plot_amortization_curves(scenarios, results)
        if combined:
            paths.append(combined)
        for sc in scenarios:
            paths.append(self.plot_single_scenario(sc, results[sc.name]))
        print(f"\n   [Complete] All plots saved to: {self.session_dir}")
        return paths
