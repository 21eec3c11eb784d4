"""Discovery events.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class RouteDiscovered:
    """A route file produced at least one method slot.

    Attributes:
        path: Directory the route is served for.
        source: The route file that was loaded.
        methods: Populated HTTP methods, sorted.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    source: str
    methods: tuple[str, ...]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModuleSkipped:
    """A file matched a convention but contributed no route.

    Attributes:
        source: The matched file.
        reason: ``not_found`` when the loader found nothing to load,
            ``missing_export`` when the module exported no usable handler.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    reason: Literal["not_found", "missing_export"]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class DiscoveryCompleted:
    """A discovery run finished and its routes were registered.

    Attributes:
        path: The routes root.
        route_count: Number of resolved routes.
        handler_count: Number of registered (path, method) pairs.
        duration_ms: Wall time for discovery and registration.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    route_count: int
    handler_count: int
    duration_ms: float
    timestamp_ns: int


type DiscoveryEvent = RouteDiscovered | ModuleSkipped | DiscoveryCompleted


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
