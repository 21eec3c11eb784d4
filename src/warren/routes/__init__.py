"""File-system route discovery.

Walks a routes directory, matches file names against routing conventions,
loads the handlers each file exports, and registers them on a chirp App.

Public API::

    from warren.routes import discover, resolve_routes, assemble

    results = await discover(config.root, config)
    app = assemble(resolve_routes(results, config.root))
"""

from warren.routes.assembler import ResolvedRoute, assemble, compose, resolve_routes
from warren.routes.conventions import (
    DEFAULT_CONVENTIONS,
    Convention,
    ConventionMatch,
    MethodFiles,
    PageRouteFiles,
    TemplatePattern,
    check_directory,
    classify,
)
from warren.routes.discovery import DirectoryEntry, RouteResult, discover, list_directory
from warren.routes.handlers import HandlerSet, create_handler
from warren.routes.loader import (
    FileModuleLoader,
    Found,
    LoadFailed,
    ModuleLoader,
    NotFound,
    RouteExports,
    StaticModuleLoader,
)
from warren.routes.paths import compact, flatten, normalize_path

__all__ = [
    "DEFAULT_CONVENTIONS",
    "Convention",
    "ConventionMatch",
    "DirectoryEntry",
    "FileModuleLoader",
    "Found",
    "HandlerSet",
    "LoadFailed",
    "MethodFiles",
    "ModuleLoader",
    "NotFound",
    "PageRouteFiles",
    "ResolvedRoute",
    "RouteExports",
    "RouteResult",
    "StaticModuleLoader",
    "TemplatePattern",
    "assemble",
    "check_directory",
    "classify",
    "compact",
    "compose",
    "create_handler",
    "discover",
    "flatten",
    "list_directory",
    "normalize_path",
    "resolve_routes",
]
