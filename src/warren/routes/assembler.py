"""Router assembler — turn discovered routes into a chirp App.

Discovery results carry filesystem paths; :func:`resolve_routes` rewrites them
as URL paths and :func:`assemble` registers one chirp route per populated
method slot.  A method without a handler registers nothing, so chirp answers
it with 405 (or 404 when the path has no handlers at all).

Each registered handler runs its pre-processors first, in order, using chirp's
middleware shape::

    async def step(request, next):
        ...
        return await next(request)

The value ``next`` returns is whatever the next step (ultimately the handler)
returned; chirp turns the final value into a response.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from warren._errors import StructuralConflictError
from warren._types import HttpMethod, PreProcessor, RoutePath
from warren.routes.handlers import HandlerSet, call_handler
from warren.routes.paths import normalize_path

if TYPE_CHECKING:
    from chirp import App

    from warren.routes.discovery import RouteResult

logger = logging.getLogger("warren.assembler")

type _Next = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """A route result addressed by URL path.

    Attributes:
        url_path: ``"/"`` or a ``/``-prefixed path without a trailing slash.
        methods: Populated method slots.
        source: The file the handlers were loaded from.

    """

    url_path: RoutePath
    methods: Mapping[HttpMethod, HandlerSet]
    source: Path


def resolve_routes(results: Iterable[RouteResult], root: Path) -> list[ResolvedRoute]:
    """Normalize each result's filesystem path against *root*, sorted by URL path."""
    resolved = [
        ResolvedRoute(
            url_path=normalize_path(result.filesystem_path, root),
            methods=result.methods,
            source=result.source,
        )
        for result in results
    ]
    resolved.sort(key=lambda r: (r.url_path, str(r.source)))
    return resolved


def assemble(routes: Iterable[ResolvedRoute], app: App | None = None) -> App:
    """Register every populated method slot of *routes* on a chirp App.

    Args:
        routes: Resolved routes to register.
        app: App to register on (default: a new ``chirp.App``).

    Returns:
        The app with all routes registered.

    Raises:
        StructuralConflictError: If two routes define the same path and
            method.  Nothing is registered in that case.

    """
    from chirp import App

    routes = list(routes)
    _check_unique(routes)

    if app is None:
        app = App()

    for route in routes:
        for method in sorted(route.methods):
            handler_set = route.methods[method]
            app.route(
                route.url_path,
                methods=[method],
                name=f"route:{route.url_path}:{method}",
                referenced=True,
            )(compose(handler_set))
            logger.debug("Registered %s %s -> %s", method, route.url_path, route.source)

    return app


def compose(handler_set: HandlerSet) -> Callable[[Any], Awaitable[Any]]:
    """Chain a handler set's pre-processors in front of its handler.

    The returned coroutine function takes a single ``request`` parameter, which
    is how chirp recognises where to pass the Request.

    """
    handler = handler_set.handler

    async def call(request: Any) -> Any:
        return await call_handler(handler, request)

    chain: _Next = call
    for step in reversed(handler_set.pre_processors):
        chain = _bind_step(step, chain)

    async def route_handler(request: Any) -> Any:
        return await chain(request)

    route_handler.__name__ = getattr(handler, "__name__", "route_handler")
    route_handler.__qualname__ = getattr(handler, "__qualname__", "route_handler")
    return route_handler


def _bind_step(step: PreProcessor, next_: _Next) -> _Next:
    async def run_step(request: Any) -> Any:
        return await call_handler(step, request, next_)

    return run_step


def _check_unique(routes: list[ResolvedRoute]) -> None:
    seen: dict[tuple[str, str], Path] = {}
    for route in routes:
        for method in route.methods:
            key = (route.url_path, method)
            if key in seen:
                raise StructuralConflictError(
                    route.url_path,
                    tuple(sorted((str(seen[key]), str(route.source)))),
                    f"both define {method} {route.url_path}",
                )
            seen[key] = route.source
