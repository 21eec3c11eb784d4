"""Module loader — load a matched route file and resolve its exports.

Loading has three outcomes, modelled as a tagged union rather than a broad
``try``/``except`` around the import:

    Found(exports)      the module loaded; ``exports`` holds typed handler slots
    NotFound(path)      nothing to load at *path*; the caller skips it
    LoadFailed(cause)   the module exists but raised while executing

``FileModuleLoader`` is the production loader.  Python files are imported with
``importlib.util`` without touching ``sys.path``; Markdown files are rendered
with patitas and expose a ``render()`` export.  ``StaticModuleLoader`` serves
pre-built namespaces so discovery can be tested without real imports.

Each directory between the routes root and a module is registered as a
package, so route files can import private siblings relatively::

    # routes/users/route.py
    from ._queries import list_users
"""

import asyncio
import importlib.machinery
import importlib.util
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace

from warren._types import HttpMethod
from warren.routes.conventions import ConventionMatch
from warren.routes.handlers import HandlerSet, as_handler_set


@dataclass(frozen=True, slots=True)
class RouteExports:
    """The route-relevant exports of one loaded module.

    Attributes:
        methods: Handler sets keyed by the method they serve.
        default: ``page`` default export (served as GET), if present.
        render: ``template`` render function, if present.

    """

    methods: Mapping[HttpMethod, HandlerSet] = field(default_factory=dict)
    default: HandlerSet | None = None
    render: Callable[[], object] | None = None

    @property
    def is_empty(self) -> bool:
        """True when the module exported nothing usable."""
        return not self.methods and self.default is None and self.render is None


@dataclass(frozen=True, slots=True)
class Found:
    path: Path
    exports: RouteExports


@dataclass(frozen=True, slots=True)
class NotFound:
    path: Path


@dataclass(frozen=True, slots=True)
class LoadFailed:
    path: Path
    cause: Exception


type LoadResult = Found | NotFound | LoadFailed


class ModuleLoader(ABC):
    """Base loader: runs :meth:`import_module` off the event loop and classifies the outcome.

    Subclasses implement :meth:`import_module`, returning a namespace object
    or *None* when there is nothing at the path.  Any exception it raises is
    reported as :class:`LoadFailed`.

    """

    __slots__ = ()

    async def load(self, path: Path, match: ConventionMatch) -> LoadResult:
        return await asyncio.to_thread(self.load_now, path, match)

    def load_now(self, path: Path, match: ConventionMatch) -> LoadResult:
        """Import *path* on the calling thread and classify the outcome."""
        try:
            namespace = self.import_module(path)
        except Exception as exc:
            return LoadFailed(path, exc)
        if namespace is None:
            return NotFound(path)
        return Found(path, extract_exports(namespace, match, path))

    @abstractmethod
    def import_module(self, path: Path) -> object | None:
        """Return the module namespace at *path*, or *None* if there is none."""


class FileModuleLoader(ModuleLoader):
    """Load ``.py`` route modules and ``.md`` content files from disk.

    Args:
        root: The routes root; module names are derived relative to it.
        module_prefix: Namespace for registered modules
            (``routes/users/route.py`` -> ``warren_routes.users.route``).
        markdown_plugins: Patitas plugins enabled for ``.md`` files.

    """

    __slots__ = ("_markdown_plugins", "_module_prefix", "_root")

    def __init__(
        self,
        root: Path,
        *,
        module_prefix: str = "warren_routes",
        markdown_plugins: tuple[str, ...] = ("table",),
    ) -> None:
        self._root = root
        self._module_prefix = module_prefix
        self._markdown_plugins = markdown_plugins

    def import_module(self, path: Path) -> object | None:
        if not path.is_file():
            return None
        if path.suffix == ".md":
            return self._load_markdown(path)
        return self._load_python(path)

    def _module_name(self, path: Path) -> str:
        try:
            relative = path.relative_to(self._root)
        except ValueError:
            relative = Path(path.name)
        parts = list(relative.with_suffix("").parts)
        return ".".join([self._module_prefix, *parts])

    def _load_python(self, path: Path) -> object | None:
        module_name = self._module_name(path)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            return None

        self._register_packages(module_name, path.parent)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module

    def _register_packages(self, module_name: str, directory: Path) -> None:
        """Register the parents of *module_name* as packages rooted at *directory*.

        ``warren_routes.users.route`` in ``routes/users`` registers
        ``warren_routes.users`` -> ``routes/users`` and ``warren_routes`` -> ``routes``.
        """
        package = module_name.rpartition(".")[0]
        while package:
            location = [str(directory)]
            existing = sys.modules.get(package)
            if getattr(existing, "__path__", None) != location:
                spec = importlib.machinery.ModuleSpec(package, None, is_package=True)
                spec.submodule_search_locations = location
                sys.modules[package] = importlib.util.module_from_spec(spec)
            package = package.rpartition(".")[0]
            directory = directory.parent

    def _load_markdown(self, path: Path) -> object:
        from patitas import Markdown

        source = path.read_text(encoding="utf-8")
        html = Markdown(plugins=list(self._markdown_plugins))(source)

        def render() -> str:
            return html

        return SimpleNamespace(render=render, source=source)


class StaticModuleLoader(ModuleLoader):
    """Serve pre-built module namespaces keyed by path.

    Paths absent from *modules* load as :class:`NotFound`.  A value that is an
    exception instance is raised, which loads as :class:`LoadFailed`.

    """

    __slots__ = ("_modules",)

    def __init__(self, modules: Mapping[Path | str, object]) -> None:
        self._modules = {Path(k): v for k, v in modules.items()}

    async def load(self, path: Path, match: ConventionMatch) -> LoadResult:
        return self.load_now(path, match)

    def import_module(self, path: Path) -> object | None:
        namespace = self._modules.get(path)
        if isinstance(namespace, Exception):
            raise namespace
        return namespace


def extract_exports(namespace: object, match: ConventionMatch, source: Path) -> RouteExports:
    """Resolve the exports *match* expects from a loaded namespace.

    Exports that are missing or not callable resolve to empty slots.

    Raises:
        ConfigError: If a callable handler cannot accept the request argument.

    """
    methods: dict[HttpMethod, HandlerSet] = {}
    for export_name, method in match.method_exports.items():
        handler_set = as_handler_set(getattr(namespace, export_name, None), export_name, source)
        if handler_set is not None:
            methods[method] = handler_set

    default = None
    if match.default_export is not None:
        default = as_handler_set(
            getattr(namespace, match.default_export, None), match.default_export, source,
        )

    render = None
    if match.render_export is not None:
        render = getattr(namespace, match.render_export, None)
        if not callable(render):
            render = None

    return RouteExports(methods=methods, default=default, render=render)
