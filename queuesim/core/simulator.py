"""Main simulator class orchestrating the discrete event simulation."""

import logging
import time
from typing import Dict, List, Optional

from .event_queue import Event, EventType, EventQueue
from .metrics_collector import MetricsCollector
from .queue_stage import Admission, QueueStage
from .random_source import LinearCongruentialGenerator
from ..models.stage_config import validate_config
from ..utils.logger import setup_logger


class Simulator:
    """Discrete event simulator for one G/G/c/K stage or a two-stage tandem.

    This class owns everything that is shared across the network:
    - the event queue
    - the simulation clock used to weight every stage's histogram
    - the random number generator and its draw budget

    With two stages, completions at the first stage are PASSAGE events that
    offer the customer to the second stage at the same instant. The second
    stage has no arrival stream of its own.
    """

    def __init__(self, config: Dict, rng: Optional[LinearCongruentialGenerator] = None):
        """Initialize simulator.

        Args:
            config: Scenario configuration dictionary
            rng: Generator to draw from; built from ``config['random']`` if omitted
        """
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)
        self.name = config.get('name', 'simulation')

        stage_configs = validate_config(config)
        self.stages: List[QueueStage] = [QueueStage(c) for c in stage_configs]
        self.tandem = len(self.stages) == 2

        self.rng = rng if rng is not None else LinearCongruentialGenerator.from_config(
            config.get('random')
        )

        # Simulation state
        self.event_queue = EventQueue()
        self.current_time = 0.0
        self.last_event_time = 0.0
        self.draw_budget = int(config.get('simulation', {}).get('draw_budget', 100000))
        self.draws_used = 0
        self.events_processed = 0
        self._has_run = False

        self.metrics_collector = MetricsCollector(config)

        self._handlers = {
            EventType.ARRIVAL: self._handle_arrival,
            EventType.DEPARTURE: self._handle_departure,
            EventType.PASSAGE: self._handle_passage,
        }

        topology = " -> ".join(
            f"{s.name} (G/G/{s.servers}/{s.capacity})" for s in self.stages
        )
        self.logger.info(f"Simulator initialized: {topology}")

    @property
    def mode(self) -> str:
        return 'tandem' if self.tandem else 'single'

    def run(self) -> Dict:
        """Run the simulation until the queue drains or the budget runs out.

        Returns:
            Dictionary containing simulation results and metrics

        Raises:
            RuntimeError: If called a second time on the same simulator
        """
        if self._has_run:
            raise RuntimeError("Simulator.run() may only be called once; build a new Simulator")
        self._has_run = True

        start_time = time.time()
        self.logger.info(f"Starting {self.mode} simulation '{self.name}' "
                         f"with a budget of {self.draw_budget} draws")
        debug = self.logger.isEnabledFor(logging.DEBUG)

        self._initialize()

        # Main simulation loop
        while not self.event_queue.is_empty() and self.draw_budget > 0:
            event = self.event_queue.pop()
            self._advance_clock(event.time)
            self._handlers[event.event_type](event)
            self.events_processed += 1
            self.metrics_collector.record_snapshot(
                self.current_time, event.event_type.value, self.stages
            )
            if debug:
                self.logger.debug(
                    f"t={self.current_time:.4f} {event.event_type.value} at "
                    f"{event.stage.name}: "
                    + ", ".join(f"{s.name}={s.customers}" for s in self.stages)
                )

        if self.draw_budget <= 0:
            self.logger.debug(f"Draw budget exhausted; discarding "
                              f"{self.event_queue.size()} pending events")
        self.event_queue.clear()

        results = self._finalize()

        elapsed_time = time.time() - start_time
        self.logger.info(f"Simulation completed in {elapsed_time:.2f}s "
                         f"({self.events_processed} events, simulated time "
                         f"{self.last_event_time:.4f})")

        return results

    def _initialize(self) -> None:
        """Schedule the first external arrival."""
        if self.draw_budget <= 0:
            self.logger.warning("Draw budget is zero; nothing to simulate")
            return

        entry = self.stages[0]
        self._schedule_arrival(entry)

    def _draw(self, low: float, high: float) -> float:
        """Draw a uniform interval, charging one unit of the budget."""
        self.draw_budget -= 1
        self.draws_used += 1
        return self.rng.uniform(low, high)

    def _advance_clock(self, event_time: float) -> None:
        """Credit elapsed time to every stage, then move the clock."""
        elapsed = event_time - self.last_event_time
        for stage in self.stages:
            stage.accumulate(elapsed)
        self.current_time = self.last_event_time = event_time

    def _schedule_arrival(self, stage: QueueStage) -> None:
        low, high = stage.arrival_range
        self.event_queue.schedule(
            self.current_time + self._draw(low, high), EventType.ARRIVAL, stage
        )

    def _schedule_completion(self, stage: QueueStage) -> None:
        """Schedule the end of a service that has just started at ``stage``."""
        low, high = stage.service_range
        if self.tandem and stage is self.stages[0]:
            event_type = EventType.PASSAGE
        else:
            event_type = EventType.DEPARTURE
        self.event_queue.schedule(
            self.current_time + self._draw(low, high), event_type, stage
        )

    def _handle_arrival(self, event: Event) -> None:
        """Handle an external arrival."""
        stage = event.stage
        # Service time is drawn before the next interarrival time
        if stage.try_admit(self.current_time) is Admission.SERVICE_STARTED:
            self._schedule_completion(stage)

        # The arrival stream renews whether or not this customer got in
        self._schedule_arrival(stage)

    def _handle_departure(self, event: Event) -> None:
        """Handle a customer leaving the network."""
        stage = event.stage
        if stage.release(self.current_time):
            self._schedule_completion(stage)

    def _handle_passage(self, event: Event) -> None:
        """Handle a stage 1 completion that feeds stage 2."""
        upstream = event.stage
        downstream = self.stages[1]

        if upstream.release(self.current_time):
            self._schedule_completion(upstream)

        # A full downstream stage loses the customer; there is no retry
        if downstream.try_admit(self.current_time) is Admission.SERVICE_STARTED:
            self._schedule_completion(downstream)

    def _finalize(self) -> Dict:
        """Finalize simulation and compute results.

        Returns:
            Dictionary containing all results and metrics
        """
        stage_results = self.metrics_collector.compute_metrics(
            self.stages, self.last_event_time
        )
        self.logger.debug(self.metrics_collector.get_summary(stage_results))

        results = {
            'name': self.name,
            'mode': self.mode,
            'total_time': self.last_event_time,
            'draws_used': self.draws_used,
            'draw_budget_remaining': max(self.draw_budget, 0),
            'events_processed': self.events_processed,
            'stages': stage_results,
        }
        if self.metrics_collector.record_trace:
            results['trace'] = self.metrics_collector.trace

        return results
