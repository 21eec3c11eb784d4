"""Event log — queryable, thread-safe store for discovery events.

Stores a bounded ring buffer of ``DiscoveryEvent`` objects for inspection.
Supports querying by event type and path.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Discovery appends
    from the event loop, but one log may be shared by apps built on
    different threads and read from any of them.

"""

import threading
from collections import deque
from typing import Any

from warren.observability.events import DiscoveryEvent


class EventLog:
    """Bounded event store with query support.

    Events are stored in a ring buffer (deque with maxlen).  When the
    buffer is full, the oldest events are discarded automatically.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[DiscoveryEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: DiscoveryEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[DiscoveryEvent]:
        """Query events with optional filters.

        Args:
            event_type: Only return events of this type.
            path: Only return events whose path or source contains this string.
            limit: Maximum number of events to return.

        Returns:
            List of matching events, most recent first.

        """
        with self._lock:
            results: list[DiscoveryEvent] = []
            for event in reversed(self._events):
                if len(results) >= limit:
                    break

                if event_type is not None and not isinstance(event, event_type):
                    continue

                if path is not None:
                    event_path = getattr(event, "source", None) or getattr(event, "path", "")
                    if path not in event_path:
                        continue

                results.append(event)

            return results

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)

        type_counts: dict[str, int] = {}
        for event in events:
            name = type(event).__name__
            type_counts[name] = type_counts.get(name, 0) + 1

        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": type_counts,
        }
