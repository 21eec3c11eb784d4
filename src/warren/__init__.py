"""Warren — file-system routing for chirp.

Point warren at a directory; every route file below it becomes a chirp route
at its directory's URL.

Quick start::

    from pathlib import Path
    from warren import get_routes

    app = await get_routes(Path(__file__).parent.resolve() / "routes")
    app.run()

Layout::

    routes/
        page.py           GET  /            (exports ``default``)
        users/
            route.py      GET, POST /users  (exports ``GET``, ``POST``)
        orders/
            get.py        GET  /orders      (exports ``GET``)
            delete.py     DELETE /orders    (exports ``DELETE``)

Handlers with pre-processing steps::

    from warren import create_handler

    POST = create_handler(require_json, create_user)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigError",
    "DiscoveryError",
    "HandlerSet",
    "MethodFiles",
    "ModuleLoadError",
    "PageRouteFiles",
    "RoutingConfig",
    "StructuralConflictError",
    "TemplatePattern",
    "WarrenError",
    "__version__",
    "create_handler",
    "discover_routes",
    "get_routes",
]

_LAZY: dict[str, str] = {
    "RoutingConfig": "warren.config",
    "get_routes": "warren.app",
    "discover_routes": "warren.app",
    "create_handler": "warren.routes.handlers",
    "HandlerSet": "warren.routes.handlers",
    "MethodFiles": "warren.routes.conventions",
    "PageRouteFiles": "warren.routes.conventions",
    "TemplatePattern": "warren.routes.conventions",
    "WarrenError": "warren._errors",
    "ConfigError": "warren._errors",
    "StructuralConflictError": "warren._errors",
    "ModuleLoadError": "warren._errors",
    "DiscoveryError": "warren._errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import warren`` fast; chirp is only imported once routes are assembled.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
