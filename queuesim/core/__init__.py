"""Core simulation components."""

from .simulator import Simulator
from .event_queue import Event, EventType, EventQueue, EmptyQueueError
from .metrics_collector import MetricsCollector
from .queue_stage import Admission, QueueStage
from .random_source import LinearCongruentialGenerator

__all__ = [
    "Simulator",
    "Event",
    "EventType",
    "EventQueue",
    "EmptyQueueError",
    "MetricsCollector",
    "Admission",
    "QueueStage",
    "LinearCongruentialGenerator",
]
