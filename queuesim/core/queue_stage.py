"""Finite-capacity multi-server service station."""

from collections import deque
from enum import Enum
from typing import Tuple

import numpy as np

from ..models.stage_config import StageConfig


class Admission(Enum):
    """Outcome of an arrival attempt at a stage."""
    REJECTED = "rejected"
    QUEUED = "queued"
    SERVICE_STARTED = "service_started"

    @property
    def admitted(self) -> bool:
        return self is not Admission.REJECTED


class QueueStage:
    """State of one G/G/c/K station.

    The stage never schedules events itself; the simulator calls the
    transition primitives and schedules whatever follow-up events they imply.
    Customers are served in arrival order across the whole stage, so the
    oldest admission time always belongs to the next departing customer.
    """

    def __init__(self, config: StageConfig):
        """Initialize stage.

        Args:
            config: Stage configuration
        """
        self.config = config
        self.name = config.name
        self.servers = config.servers
        self.capacity = config.capacity
        self.arrival_range: Tuple[float, float] = config.arrival_range
        self.service_range: Tuple[float, float] = config.service_range

        self.customers = 0
        self.busy_servers = 0
        self.loss_count = 0
        self.admitted_count = 0
        self.completed_count = 0
        self.response_time_sum = 0.0
        self.state_time = np.zeros(self.capacity + 1, dtype=float)
        self.pending_arrivals = deque()

    @property
    def has_external_arrivals(self) -> bool:
        return self.config.has_external_arrivals

    def try_admit(self, now: float) -> Admission:
        """Attempt to admit a customer at time ``now``.

        Returns:
            REJECTED if the stage is full (the loss is counted), SERVICE_STARTED
            if a server was free and is now busy, QUEUED otherwise
        """
        if self.customers >= self.capacity:
            self.loss_count += 1
            return Admission.REJECTED

        self.customers += 1
        self.admitted_count += 1
        self.pending_arrivals.append(now)

        if self.busy_servers < self.servers:
            self.busy_servers += 1
            return Admission.SERVICE_STARTED
        return Admission.QUEUED

    def release(self, now: float) -> bool:
        """Complete service for the oldest customer at time ``now``.

        Returns:
            True if the freed server picks up a waiting customer right away
            (the caller must schedule its completion), False if it goes idle
        """
        self.customers -= 1
        admitted_at = self.pending_arrivals.popleft()
        self.response_time_sum += now - admitted_at
        self.completed_count += 1

        if self.customers >= self.busy_servers:
            return True
        self.busy_servers -= 1
        return False

    def accumulate(self, elapsed: float) -> None:
        """Credit ``elapsed`` simulated time to the current occupancy level."""
        self.state_time[min(self.customers, self.capacity)] += elapsed

    def __repr__(self) -> str:
        return (f"QueueStage(name={self.name!r}, G/G/{self.servers}/{self.capacity}, "
                f"customers={self.customers}, busy={self.busy_servers}, "
                f"loss={self.loss_count})")
