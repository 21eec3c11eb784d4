"""Discovery observability — events recorded while routes are discovered.

Quick Start:
    >>> from warren.observability import EventLog
    >>> log = EventLog()
    >>> app = await get_routes("/srv/app/routes", event_log=log)
    >>> log.query(event_type=ModuleSkipped)

"""

from warren.observability.events import (
    DiscoveryCompleted,
    DiscoveryEvent,
    ModuleSkipped,
    RouteDiscovered,
    now_ns,
)
from warren.observability.log import EventLog

__all__ = [
    "DiscoveryCompleted",
    "DiscoveryEvent",
    "EventLog",
    "ModuleSkipped",
    "RouteDiscovered",
    "now_ns",
]
