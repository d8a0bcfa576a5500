"""
Analyzer for comparing flight results across repeated runs.
"""

from typing import Any, Dict, List, Optional
import json

import numpy as np
from rich.console import Console
from rich.table import Table

from .result import FlightResult

_METRICS = {
    "completion_ratio": "Completion [%]",
    "charged_energy": "Charged [Wh]",
    "flight_time": "Time [h]",
    "flight_distance": "Distance [m]",
    "remaining_energy": "Remaining [Wh]",
}


class FlightAnalyzer:
    """Collects flight results and summarises them."""

    def __init__(self):
        self.results: List[FlightResult] = []
        self.labels: List[str] = []

    def add_result(self, result: FlightResult, label: Optional[str] = None):
        """Add a result to analyze."""
        self.results.append(result)
        self.labels.append(label if label is not None else f"run {len(self.results)}")

    def clear_results(self):
        """Clear all stored results."""
        self.results = []
        self.labels = []

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistical summary of all results.

        Returns:
            Dictionary with min/max/avg per metric, or an empty dict without results
        """
        if not self.results:
            return {}

        stats: Dict[str, Any] = {"num_runs": len(self.results)}
        for metric in _METRICS:
            values = np.array([getattr(r, metric) for r in self.results], dtype=float)
            stats[metric] = {
                "min": float(values.min()),
                "max": float(values.max()),
                "avg": float(values.mean()),
            }
        stats["energy_exhausted"] = sum(1 for r in self.results if r.energy_exhausted)
        stats["rth_triggered"] = sum(1 for r in self.results if r.rth_triggered)
        return stats

    def export_to_json(self, filepath: str):
        """
        Export per-run summaries and statistics to a JSON file.

        Args:
            filepath: Path to the output JSON file
        """
        data = {
            "runs": [
                {"label": label, **result.get_summary()}
                for label, result in zip(self.labels, self.results)
            ],
            "statistics": self.get_statistics(),
        }
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def build_table(self) -> Table:
        """Build a rich table with one row per run."""
        table = Table(title="Flight Runs")
        table.add_column("Run")
        table.add_column("State")
        for header in _METRICS.values():
            table.add_column(header, justify="right")
        table.add_column("Exhausted", justify="center")

        for label, result in zip(self.labels, self.results):
            table.add_row(
                label,
                result.terminal_state.name,
                f"{result.completion_ratio:.2f}",
                f"{result.charged_energy:.4f}",
                f"{result.flight_time:.4f}",
                f"{result.flight_distance:.1f}",
                f"{result.remaining_energy:.3f}",
                "[red]yes[/red]" if result.energy_exhausted else "no",
            )
        return table

    def print_summary(self, console: Optional[Console] = None):
        """Print a formatted table of all results."""
        console = console or Console()
        if not self.results:
            console.print("No results to summarise.")
            return
        console.print(self.build_table())
