"""Handler sets — a handler plus the steps that run before it.

Route modules export one value per HTTP method.  The value is either a bare
handler or the result of :func:`create_handler`::

    from warren import create_handler

    async def require_json(request, next):
        if "json" not in request.content_type:
            return Response("expected JSON").with_status(415)
        return await next(request)

    async def create_user(request):
        return {"created": True}

    POST = create_handler(require_json, create_user)
    GET = list_users  # bare handler, no pre-processors

Pre-processors use chirp's middleware shape ``(request, next)``.  They run in
the order given; each may short-circuit by returning a response without
calling ``next``.
"""

import inspect
from dataclasses import dataclass
from pathlib import Path

from warren._errors import ConfigError
from warren._types import HandlerFunc, PreProcessor


@dataclass(frozen=True, slots=True)
class HandlerSet:
    """A method slot's handler and its ordered pre-processing steps.

    Attributes:
        handler: Callable receiving the chirp ``Request``.
        pre_processors: Steps executed before *handler*, first to last.

    """

    handler: HandlerFunc
    pre_processors: tuple[PreProcessor, ...] = ()


def create_handler(*steps: object) -> HandlerSet:
    """Bundle pre-processors and a handler into a :class:`HandlerSet`.

    The last argument is the handler; every preceding argument is a
    pre-processor.

    Raises:
        TypeError: If no steps are given or any step is not callable.

    """
    if not steps:
        msg = "create_handler() requires at least a handler"
        raise TypeError(msg)
    for step in steps:
        if not callable(step):
            msg = f"create_handler() arguments must be callable, got {type(step).__name__}"
            raise TypeError(msg)
    *pre, handler = steps
    return HandlerSet(handler=handler, pre_processors=tuple(pre))  # type: ignore[arg-type]


def as_handler_set(value: object, name: str, source: Path) -> HandlerSet | None:
    """Coerce a module export into a :class:`HandlerSet`.

    Returns *None* when the export is missing or not callable, so a module
    that happens to define ``GET = "..."`` contributes no method slot.

    Raises:
        ConfigError: If a callable handler cannot accept the request argument.

    """
    if isinstance(value, HandlerSet):
        _validate_handler(value.handler, name, source)
        return value
    if value is None or not callable(value):
        return None
    _validate_handler(value, name, source)
    return HandlerSet(handler=value)


def _validate_handler(func: object, name: str, source: Path) -> None:
    """Validate that a handler accepts the request argument.

    Raises:
        ConfigError: If the handler cannot be called with one positional argument.

    """
    try:
        sig = inspect.signature(func)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        # Builtins and some C callables expose no signature; trust them.
        return

    try:
        sig.bind(object())
    except TypeError:
        msg = (
            f"Route handler '{name}' in {source} must accept one "
            f"positional parameter (the chirp Request object)."
        )
        raise ConfigError(msg) from None


async def call_handler(func: HandlerFunc, *args: object) -> object:
    """Call a sync or async callable, awaiting the result if needed."""
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def template_handler(render: HandlerFunc) -> HandlerSet:
    """Build a GET handler whose response body is ``render()``'s return value.

    The render function takes no arguments; it may be sync or async.

    """

    async def render_template(request: object) -> object:
        from chirp import Response

        body = await call_handler(render)
        return Response(body=str(body), content_type="text/html; charset=utf-8")

    render_template.__name__ = getattr(render, "__name__", "render_template")
    return HandlerSet(handler=render_template)
