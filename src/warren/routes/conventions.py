"""Routing conventions — which file names define routes, and what they export.

Three convention families are supported:

Method files (one file per HTTP method)::

    users/get.py      -> GET    /users   (exports ``GET``)
    users/post.py     -> POST   /users   (exports ``POST``)
    users/delete.py   -> DELETE /users   (exports ``DELETE``; ``del.py`` exports ``DEL``)

Page and route files (one file, many methods)::

    users/route.py    -> every method it exports (``GET``, ``POST``, ...)
    about/page.py     -> GET    /about   (exports ``default``)

Template patterns (content files rendered to HTML)::

    TemplatePattern("post.md")                   # literal file name
    TemplatePattern(re.compile(r"(.+)\\.md"))     # regular expression
    blog/post.md      -> GET    /blog    (``render()`` return value is the body)

Files always map to their *directory's* URL.  Method files and page/route
files may be active together, but never in the same directory; a template
pattern is a separate mode and cannot be combined with the other two.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

from warren._errors import ConfigError, StructuralConflictError
from warren._types import HttpMethod

type MatchKind = Literal["single", "multi", "page", "template"]

# Export names a ``route.py`` may define, mapped to the method they serve
ROUTE_EXPORTS: Mapping[str, HttpMethod] = {
    "GET": "GET",
    "POST": "POST",
    "PUT": "PUT",
    "PATCH": "PATCH",
    "DELETE": "DELETE",
}

# ``<stem>.py`` -> (export name, method)
METHOD_FILES: Mapping[str, tuple[str, HttpMethod]] = {
    "get": ("GET", "GET"),
    "post": ("POST", "POST"),
    "put": ("PUT", "PUT"),
    "patch": ("PATCH", "PATCH"),
    "delete": ("DELETE", "DELETE"),
    "del": ("DEL", "DELETE"),
}


@dataclass(frozen=True, slots=True)
class ConventionMatch:
    """How a matched file should be loaded and what it is expected to export.

    Attributes:
        kind: ``single`` (one method per file), ``multi`` (one export per
            method), ``page`` (default export served as GET) or ``template``
            (render export whose return value is the GET body).
        name: The matched entry name.
        method_exports: Export name -> HTTP method, for ``single``/``multi``.
        default_export: Export served as GET, for ``page``.
        render_export: Export producing HTML, for ``template``.
        capture: Portion of the name captured by a template pattern.

    """

    kind: MatchKind
    name: str
    method_exports: Mapping[str, HttpMethod] = field(default_factory=dict)
    default_export: str | None = None
    render_export: str | None = None
    capture: str | None = None

    @property
    def export_names(self) -> tuple[str, ...]:
        """Every export name the loader should look up."""
        names = list(self.method_exports)
        if self.default_export is not None:
            names.append(self.default_export)
        if self.render_export is not None:
            names.append(self.render_export)
        return tuple(names)


class Convention(Protocol):
    """A naming rule that recognises route files by entry name."""

    @property
    def family(self) -> str: ...

    def classify(self, name: str) -> ConventionMatch | None: ...


@dataclass(frozen=True, slots=True)
class MethodFiles:
    """One file per HTTP method: ``get.py``, ``post.py``, ``put.py``, ..."""

    suffix: str = ".py"

    @property
    def family(self) -> str:
        return "methods"

    def classify(self, name: str) -> ConventionMatch | None:
        if not name.endswith(self.suffix):
            return None
        entry = METHOD_FILES.get(name.removesuffix(self.suffix))
        if entry is None:
            return None
        export, method = entry
        return ConventionMatch(kind="single", name=name, method_exports={export: method})


@dataclass(frozen=True, slots=True)
class PageRouteFiles:
    """``route.py`` exporting one handler per method, ``page.py`` exporting ``default``."""

    route_name: str = "route.py"
    page_name: str = "page.py"
    default_export: str = "default"

    @property
    def family(self) -> str:
        return "pages"

    def classify(self, name: str) -> ConventionMatch | None:
        if name == self.route_name:
            return ConventionMatch(kind="multi", name=name, method_exports=ROUTE_EXPORTS)
        if name == self.page_name:
            return ConventionMatch(kind="page", name=name, default_export=self.default_export)
        return None


@dataclass(frozen=True, slots=True)
class TemplatePattern:
    """Content files matched by literal name or regular expression.

    A string pattern must equal the entry name.  A compiled pattern must match
    the whole name; its first group (or the whole name) is the capture.

    """

    pattern: str | re.Pattern[str]
    export: str = "render"

    @property
    def family(self) -> str:
        return "template"

    def classify(self, name: str) -> ConventionMatch | None:
        if isinstance(self.pattern, str):
            if name != self.pattern:
                return None
            capture = name
        else:
            match = self.pattern.fullmatch(name)
            if match is None:
                return None
            capture = match.group(1) if match.groups() else match.group(0)
        return ConventionMatch(
            kind="template", name=name, render_export=self.export, capture=capture,
        )


DEFAULT_CONVENTIONS: tuple[Convention, ...] = (MethodFiles(), PageRouteFiles())


def classify(name: str, conventions: Iterable[Convention]) -> ConventionMatch | None:
    """Return the first convention match for *name*, or *None*."""
    for convention in conventions:
        match = convention.classify(name)
        if match is not None:
            return match
    return None


def validate_conventions(conventions: tuple[Convention, ...]) -> None:
    """Reject empty or incompatible convention sets.

    Raises:
        ConfigError: If no conventions are given, or a template pattern is
            combined with method or page/route conventions.

    """
    if not conventions:
        msg = "At least one routing convention must be active"
        raise ConfigError(msg)
    families = {c.family for c in conventions}
    if "template" in families and len(families) > 1:
        msg = (
            "Template patterns cannot be combined with method or page/route "
            f"conventions (got: {', '.join(sorted(families))})"
        )
        raise ConfigError(msg)


def check_directory(
    directory: Path,
    file_names: Iterable[str],
    conventions: Iterable[Convention],
) -> dict[str, ConventionMatch]:
    """Classify the files of one directory and enforce its structural rules.

    Returns the matched file names mapped to their :class:`ConventionMatch`.

    Raises:
        StructuralConflictError: If the directory holds both ``page`` and
            ``route`` files, mixes method files with either, defines one
            method twice, or matches more than one template.

    """
    conventions = tuple(conventions)
    matches: dict[str, ConventionMatch] = {}
    for name in file_names:
        match = classify(name, conventions)
        if match is not None:
            matches[name] = match

    by_kind: dict[MatchKind, list[str]] = {}
    for name, match in matches.items():
        by_kind.setdefault(match.kind, []).append(name)

    whole = by_kind.get("page", []) + by_kind.get("multi", [])
    if len(whole) > 1:
        raise StructuralConflictError(
            directory, tuple(sorted(whole)), "page and route files cannot coexist",
        )

    singles = by_kind.get("single", [])
    if singles and whole:
        raise StructuralConflictError(
            directory,
            tuple(sorted(singles + whole)),
            "method files cannot coexist with page or route files",
        )

    seen_methods: dict[HttpMethod, str] = {}
    for name in sorted(singles):
        for method in matches[name].method_exports.values():
            if method in seen_methods:
                raise StructuralConflictError(
                    directory,
                    (seen_methods[method], name),
                    f"both define {method}",
                )
            seen_methods[method] = name

    templates = by_kind.get("template", [])
    if len(templates) > 1:
        raise StructuralConflictError(
            directory, tuple(sorted(templates)), "more than one template matches",
        )

    return matches
