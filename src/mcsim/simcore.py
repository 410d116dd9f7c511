# -*- coding: utf-8 -*-
"""
Discrete-event clock used as the host timeline.

Events live in a heap ordered by (timestamp, sequence); events registered for
the same time run in registration order, one at a time, to completion.
"""
import heapq
import itertools
import logging
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class EventKind(Enum):
    WARMUP_SNAPSHOT = "warmup_snapshot"
    REWARD_CALC = "reward_calc"
    RESULTS_REPORT = "results_report"
    BEHAVIOUR = "behaviour"
    CUSTOM_CALC = "custom_calc"
    CUSTOM_WARMUP = "custom_warmup"
    END_CHECK = "end_check"
    EXTERNAL = "external"


class Task:
    def __init__(self, event, timestamp, seq, action):
        self.event = event
        self.timestamp = timestamp
        self.seq = seq
        self.action = action

    def __lt__(self, other):
        # heapq ordering: time first, then registration order
        return (self.timestamp, self.seq) < (other.timestamp, other.seq)

    def __repr__(self):
        return f"Task(event={self.event.value}, timestamp={self.timestamp}, seq={self.seq})"


class Simulator:
    """
    Single-threaded simulated timeline.

    `schedule_at` is the only way work enters the timeline; `run` pops tasks
    until the queue drains, the stop time passes or `stop` is called.
    """

    def __init__(self):
        self.now = 0.0
        self.event_queue: List[Task] = []
        self._counter = itertools.count()
        self._stopped = False
        self.executed = 0

    def schedule_at(self, timestamp: float, action: Callable[[], None],
                    event: EventKind = EventKind.EXTERNAL) -> Task:
        if timestamp < self.now:
            raise ValueError(f"Cannot schedule in the past: {timestamp} < {self.now}")
        task = Task(event, float(timestamp), next(self._counter), action)
        heapq.heappush(self.event_queue, task)
        return task

    def schedule_in(self, delay: float, action: Callable[[], None],
                    event: EventKind = EventKind.EXTERNAL) -> Task:
        return self.schedule_at(self.now + delay, action, event)

    def stop(self):
        """Halt after the running event; every pending event is abandoned."""
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def pending(self, event: Optional[EventKind] = None) -> List[Task]:
        """Pending tasks in execution order, optionally filtered by kind"""
        tasks = sorted(self.event_queue)
        if event is None:
            return tasks
        return [t for t in tasks if t.event is event]

    def run(self, until: Optional[float] = None):
        """
        Execute events in (timestamp, sequence) order.

        Args:
            until: events scheduled strictly after this time are left unexecuted
        """
        while self.event_queue and not self._stopped:
            if until is not None and self.event_queue[0].timestamp > until:
                break
            task = heapq.heappop(self.event_queue)
            self.now = task.timestamp
            task.action()
            self.executed += 1
        if self._stopped:
            logger.info("Simulation stopped at t=%.6f, %d pending events abandoned",
                        self.now, len(self.event_queue))
            self.event_queue.clear()
        elif until is not None:
            self.now = max(self.now, until)
