"""Warren entry points — discover a routes directory and build a chirp App.

``get_routes`` is the one call a server needs::

    from pathlib import Path
    from warren import get_routes

    app = await get_routes(Path(__file__).parent / "routes")
    app.run()

The caller owns the server lifecycle; warren only returns the composed App.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from warren.config import RoutingConfig
from warren.observability.events import DiscoveryCompleted, now_ns
from warren.routes.assembler import ResolvedRoute, assemble, resolve_routes
from warren.routes.discovery import DirectoryLister, discover, list_directory

if TYPE_CHECKING:
    from chirp import App

    from warren.observability.log import EventLog
    from warren.routes.loader import ModuleLoader


def _as_config(config: RoutingConfig | str | Path, options: dict[str, object]) -> RoutingConfig:
    if isinstance(config, RoutingConfig):
        return config
    return RoutingConfig(root=Path(config), **options)  # type: ignore[arg-type]


async def discover_routes(
    config: RoutingConfig | str | Path,
    *,
    loader: ModuleLoader | None = None,
    lister: DirectoryLister = list_directory,
    event_log: EventLog | None = None,
    **options: object,
) -> list[ResolvedRoute]:
    """Discover and resolve every route under the configured root.

    Returns the resolved routes sorted by URL path.  Nothing is registered.

    Raises:
        ConfigError: If the root is not absolute (before any I/O).

    """
    config = _as_config(config, options)
    results = await discover(
        config.root, config, loader=loader, lister=lister, event_log=event_log,
    )
    return resolve_routes(results, config.root)


async def get_routes(
    config: RoutingConfig | str | Path,
    *,
    app: App | None = None,
    loader: ModuleLoader | None = None,
    lister: DirectoryLister = list_directory,
    event_log: EventLog | None = None,
    **options: object,
) -> App:
    """Build a chirp App from a file-system routes directory.

    Args:
        config: A :class:`RoutingConfig`, or the absolute routes root (in which
            case *options* are passed to ``RoutingConfig``).
        app: Register on this App instead of creating one.
        loader: Module loader override (tests use ``StaticModuleLoader``).
        lister: Directory listing override.
        event_log: Optional sink for discovery events.

    Returns:
        The App with every discovered route registered.

    Raises:
        ConfigError: If the root is not absolute (before any I/O).
        StructuralConflictError: If route files conflict.
        ModuleLoadError: If a route module raises while loading.
        DiscoveryError: If a routes directory cannot be read.

    """
    config = _as_config(config, options)
    t0 = time.perf_counter()

    routes = await discover_routes(config, loader=loader, lister=lister, event_log=event_log)
    app = assemble(routes, app)

    if event_log is not None:
        event_log.append(DiscoveryCompleted(
            path=str(config.root),
            route_count=len(routes),
            handler_count=sum(len(r.methods) for r in routes),
            duration_ms=(time.perf_counter() - t0) * 1000,
            timestamp_ns=now_ns(),
        ))
    return app
