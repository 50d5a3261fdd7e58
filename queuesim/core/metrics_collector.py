"""Metrics collection and aggregation."""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .queue_stage import QueueStage
from ..utils.logger import setup_logger


class MetricsCollector:
    """Turn raw stage counters into the simulation result.

    Tracks the optional occupancy trace while the simulation runs and
    normalizes the state-time histograms once it has finished.
    """

    def __init__(self, config: Dict):
        """Initialize metrics collector.

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)

        self.record_trace = bool(config.get('metrics', {}).get('record_trace', False))
        self.trace: List[Tuple[float, str, Tuple[int, ...]]] = []

    def record_snapshot(self, time: float, event_type: str,
                        stages: Sequence[QueueStage]) -> None:
        """Record per-stage occupancy after an event has been processed.

        Args:
            time: Current simulation time
            event_type: Name of the processed event type
            stages: Stages in network order
        """
        if not self.record_trace:
            return
        self.trace.append((time, event_type, tuple(s.customers for s in stages)))

    @staticmethod
    def state_distribution(stage: QueueStage, total_time: float) -> List[Dict]:
        """Normalize a stage's state-time histogram.

        Args:
            stage: Stage to summarize
            total_time: Network clock at the end of the run

        Returns:
            One entry per occupancy level with its time and probability
        """
        times = np.asarray(stage.state_time, dtype=float)
        if total_time > 0:
            probabilities = times / total_time
        else:
            probabilities = np.zeros_like(times)

        return [
            {
                'state': state,
                'time': float(times[state]),
                'probability': float(probabilities[state]),
            }
            for state in range(len(times))
        ]

    @staticmethod
    def mean_response_time(stage: QueueStage) -> float:
        """Average time from admission to departure, 0 with no completions."""
        if stage.completed_count == 0:
            return 0.0
        return stage.response_time_sum / stage.completed_count

    def compute_metrics(self, stages: Sequence[QueueStage], total_time: float) -> List[Dict]:
        """Compute per-stage results.

        Args:
            stages: Stages in network order
            total_time: Network clock at the end of the run

        Returns:
            List of per-stage result dictionaries
        """
        results = []
        for stage in stages:
            results.append({
                'name': stage.name,
                'servers': stage.servers,
                'capacity': stage.capacity,
                'states': self.state_distribution(stage, total_time),
                'loss_count': stage.loss_count,
                'admitted_count': stage.admitted_count,
                'completed_count': stage.completed_count,
                'mean_response_time': self.mean_response_time(stage),
            })
        return results

    def get_summary(self, stage_results: Sequence[Dict]) -> str:
        """Get human-readable summary of stage results.

        Returns:
            Formatted string, one line per stage
        """
        if not stage_results:
            return "No metrics collected"

        lines = ["=== Metrics Summary ==="]
        for result in stage_results:
            lines.append(
                f"{result['name']}: completed={result['completed_count']} "
                f"lost={result['loss_count']} "
                f"mean response={result['mean_response_time']:.4f}"
            )
        return "\n".join(lines)
