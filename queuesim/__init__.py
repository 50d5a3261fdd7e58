"""QueueSim: finite-capacity queueing network simulator."""

from .core.simulator import Simulator
from .core.event_queue import Event, EventType, EventQueue, EmptyQueueError
from .core.metrics_collector import MetricsCollector
from .core.queue_stage import Admission, QueueStage
from .core.random_source import LinearCongruentialGenerator
from .models.stage_config import InvalidConfigurationError, StageConfig, validate_config
from .utils.logger import setup_logger

__version__ = "0.1.0"
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
    "InvalidConfigurationError",
    "StageConfig",
    "validate_config",
    "setup_logger",
]
