"""
Event Log Core - Recent Alert History.

Bounded, newest-first list of emitted alerts. The poller thread writes
while the web layer reads, so all access goes through a lock.
"""

import threading
from collections import deque

from feeder.interfaces.notification import AlertEvent

EVENT_LOG_CAPACITY = 25


class EventLog:
    """
    Keeps the most recent alerts for display.

    Insertion is always at the head; once capacity is reached the oldest
    entry is dropped from the tail.
    """

    def __init__(self, capacity: int = EVENT_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._events: deque[AlertEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, event: AlertEvent) -> None:
        """Insert an event at the head, evicting the oldest beyond capacity."""
        with self._lock:
            # appendleft on a bounded deque discards from the right end.
            self._events.appendleft(event)

    def events(self) -> list[AlertEvent]:
        """Return a newest-first copy of the log."""
        with self._lock:
            return list(self._events)

    def latest(self) -> AlertEvent | None:
        with self._lock:
            return self._events[0] if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
