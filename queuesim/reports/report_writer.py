"""
Report writer for simulation results - state tables and text summaries.
"""
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from ..utils.io import slugify


class ReportWriter:
    """Generates human-readable reports and tables from simulation results."""

    def __init__(self, precision: int = 4, separator: str = ";"):
        self.precision = precision
        self.separator = separator

    def generate_report(self, results: Dict[str, Any], title: str = None) -> str:
        """Generate a text report covering every stage of one run."""
        lines = []
        title = title or results.get('name', 'Simulation')

        lines.append("=" * 60)
        lines.append(f"   {title} ({results.get('mode', 'single')})")
        lines.append("=" * 60)
        lines.append(f"Simulated time:     {results['total_time']:.{self.precision}f}")
        lines.append(f"Events processed:   {results.get('events_processed', 0)}")
        lines.append(f"Random draws used:  {results.get('draws_used', 0)}")
        lines.append("")

        for stage in results['stages']:
            lines.extend(self._stage_section(stage))
            lines.append("")

        return "\n".join(lines)

    def _stage_section(self, stage: Dict[str, Any]) -> List[str]:
        p = self.precision
        sep = self.separator

        lines = [f"{stage['name']} - G/G/{stage['servers']}/{stage['capacity']}"]
        lines.append("━" * 60)
        lines.append(f"State{sep}Time{sep}Probability")
        for entry in stage['states']:
            lines.append(f"{entry['state']}{sep}{entry['time']:.{p}f}{sep}"
                         f"{entry['probability']:.{p}f}")
        lines.append(f"Lost customers:     {stage['loss_count']}")
        lines.append(f"Completed:          {stage['completed_count']}")
        lines.append(f"Mean response time: {stage['mean_response_time']:.{p}f}")
        return lines

    def states_dataframe(self, stage: Dict[str, Any]) -> pd.DataFrame:
        """Tabulate one stage's occupancy distribution."""
        return pd.DataFrame(stage['states'], columns=['state', 'time', 'probability'])

    def save_state_tables(self, results: Dict[str, Any], output_dir: Path) -> List[Path]:
        """Write one CSV per stage with the occupancy distribution.

        Returns:
            Paths of the written files
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        scenario = slugify(results.get('name', 'simulation'))
        paths = []
        for stage in results['stages']:
            path = output_dir / f"{scenario}_{slugify(stage['name'])}_states.csv"
            self.states_dataframe(stage).to_csv(
                path, sep=self.separator, index=False,
                float_format=f"%.{self.precision}f",
            )
            paths.append(path)
        return paths

    def generate_comparison_table(self, all_results: List[Dict[str, Any]]) -> pd.DataFrame:
        """One row per (scenario, stage) with the headline numbers."""
        rows = []
        for results in all_results:
            for stage in results['stages']:
                rows.append({
                    'scenario': results.get('name', 'simulation'),
                    'stage': stage['name'],
                    'servers': stage['servers'],
                    'capacity': stage['capacity'],
                    'loss_count': stage['loss_count'],
                    'completed_count': stage['completed_count'],
                    'mean_response_time': stage['mean_response_time'],
                    'p_full': stage['states'][-1]['probability'],
                })
        return pd.DataFrame(rows)