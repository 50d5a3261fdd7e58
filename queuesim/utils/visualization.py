"""Visualization utilities for simulation results."""

import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from typing import Dict

from .io import slugify

sns.set_style("whitegrid")
sns.set_palette("husl")


def plot_results(results: Dict, output_dir: Path) -> None:
    """Generate all visualization plots for one scenario.

    Args:
        results: Results dictionary from simulation
        output_dir: Directory to save plots
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = slugify(results.get('name', 'simulation'))

    plot_state_probabilities(results, output_dir / f"{prefix}_state_probabilities.png")

    if results.get('trace'):
        plot_occupancy_trace(results, output_dir / f"{prefix}_occupancy_trace.png")


def plot_state_probabilities(results: Dict, output_path: Path) -> None:
    """Plot the steady-state occupancy distribution, one panel per stage.

    Args:
        results: Results dictionary
        output_path: Output file path
    """
    stages = results['stages']
    fig, axes = plt.subplots(1, len(stages), figsize=(6 * len(stages), 5), squeeze=False)

    for ax, stage in zip(axes[0], stages):
        states = [entry['state'] for entry in stage['states']]
        probabilities = [entry['probability'] for entry in stage['states']]

        sns.barplot(x=states, y=probabilities, ax=ax, color='steelblue')
        ax.set_xlabel('Customers in stage')
        ax.set_ylabel('Probability')
        ax.set_title(f"{stage['name']} (G/G/{stage['servers']}/{stage['capacity']})")
        ax.set_ylim([0, 1])
        ax.grid(axis='y', alpha=0.3)

        ax.text(0.98, 0.95,
                f"Lost: {stage['loss_count']}\n"
                f"Mean response: {stage['mean_response_time']:.2f}",
                transform=ax.transAxes, ha='right', va='top', family='monospace')

    plt.tight_layout()
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    plt.close(fig)


def plot_occupancy_trace(results: Dict, output_path: Path) -> None:
    """Plot the recorded occupancy of each stage over simulated time.

    Args:
        results: Results dictionary with a ``trace`` entry
        output_path: Output file path
    """
    trace = results.get('trace')
    if not trace:
        return

    times = [entry[0] for entry in trace]
    fig, ax = plt.subplots(figsize=(12, 4))

    for idx, stage in enumerate(results['stages']):
        occupancy = [entry[2][idx] for entry in trace]
        ax.step(times, occupancy, where='post', label=stage['name'], linewidth=1)

    ax.set_xlabel('Simulated time')
    ax.set_ylabel('Customers')
    ax.set_title('Occupancy Over Time')
    ax.legend()
    ax.grid(alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    plt.close(fig)