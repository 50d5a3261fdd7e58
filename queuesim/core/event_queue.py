"""Event queue implementation for discrete event simulation."""

import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class EventType(Enum):
    """Types of events in the simulation."""
    # Customer enters a stage from outside the network
    ARRIVAL = "arrival"
    # Customer leaves the network
    DEPARTURE = "departure"
    # Stage 1 completion that is simultaneously a stage 2 arrival
    PASSAGE = "passage"


class EmptyQueueError(IndexError):
    """Raised when popping from an empty event queue."""


@dataclass(order=True, frozen=True)
class Event:
    """Event in the discrete event simulation.

    Attributes:
        time: Event timestamp
        sequence: Insertion counter, breaks ties between equal times
        event_type: Type of event
        stage: Stage the event concerns
    """
    time: float
    sequence: int = field(default=0)
    event_type: EventType = field(default=EventType.ARRIVAL, compare=False)
    stage: Any = field(default=None, compare=False)


class EventQueue:
    """Priority queue for managing simulation events.

    Events are ordered by time, with earlier events processed first.
    Events scheduled for the same instant come out in the order they
    were pushed.
    """

    def __init__(self):
        """Initialize empty event queue."""
        self._queue = []
        self._counter = itertools.count()

    def schedule(self, time: float, event_type: EventType, stage: Any = None) -> Event:
        """Create an event stamped with the next sequence number and push it.

        Args:
            time: Event timestamp
            event_type: Type of event
            stage: Stage the event concerns

        Returns:
            The scheduled event
        """
        event = Event(time=time, sequence=next(self._counter),
                      event_type=event_type, stage=stage)
        heapq.heappush(self._queue, event)
        return event

    def push(self, event: Event) -> None:
        """Add an already built event to the queue.

        The event is re-stamped so that insertion order is kept among
        equal-time events.

        Args:
            event: Event to add
        """
        self.schedule(event.time, event.event_type, event.stage)

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Next event to process

        Raises:
            EmptyQueueError: If queue is empty
        """
        if self.is_empty():
            raise EmptyQueueError("Cannot pop from empty event queue")
        return heapq.heappop(self._queue)

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        return self._queue[0] if self._queue else None

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return len(self._queue) == 0

    def size(self) -> int:
        """Get number of events in queue."""
        return len(self._queue)

    def clear(self) -> None:
        """Remove all events from queue."""
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        """String representation of event queue."""
        return f"EventQueue(size={len(self._queue)}, next={self.peek()})"
