"""Discovery engine — walk a routes directory and collect route results.

Each directory is handled in three steps:

1. List its entries (off the event loop).
2. Classify the files and enforce the directory's structural rules before
   anything is loaded (see :func:`warren.routes.conventions.check_directory`).
3. Concurrently recurse into subdirectories and load matched files, then
   concatenate the results.

A directory never produces a result of its own; only files do.  Sibling order
is not guaranteed, so callers that display results should sort them.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from warren._errors import DiscoveryError, ModuleLoadError
from warren._types import HttpMethod
from warren.observability.events import ModuleSkipped, RouteDiscovered, now_ns
from warren.routes.conventions import ConventionMatch, check_directory
from warren.routes.handlers import HandlerSet, template_handler
from warren.routes.loader import FileModuleLoader, LoadFailed, ModuleLoader, NotFound, RouteExports
from warren.routes.paths import compact, flatten

if TYPE_CHECKING:
    from warren.config import RoutingConfig
    from warren.observability.log import EventLog

logger = logging.getLogger("warren.discovery")


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One row of a directory listing."""

    name: str
    is_dir: bool


@dataclass(frozen=True, slots=True)
class RouteResult:
    """A route file's method table, keyed to the directory it serves.

    Attributes:
        filesystem_path: The directory whose URL this route answers.
        methods: Populated method slots.
        source: The file the handlers were loaded from.

    """

    filesystem_path: Path
    methods: Mapping[HttpMethod, HandlerSet]
    source: Path


type DirectoryLister = Callable[[Path], Sequence[DirectoryEntry]]


def list_directory(path: Path) -> list[DirectoryEntry]:
    """List *path* with ``os.scandir``.

    Symlinks are never reported as directories, so a link back up the tree
    cannot make discovery recurse.

    Raises:
        DiscoveryError: If *path* is missing, not a directory, or unreadable.

    """
    try:
        with os.scandir(path) as it:
            return [
                DirectoryEntry(entry.name, entry.is_dir(follow_symlinks=False)) for entry in it
            ]
    except OSError as exc:
        msg = f"Cannot read routes directory {path}: {exc.strerror or exc}"
        raise DiscoveryError(msg) from exc


@dataclass(frozen=True, slots=True)
class _Walk:
    config: RoutingConfig
    loader: ModuleLoader
    lister: DirectoryLister
    event_log: EventLog | None


async def discover(
    directory: Path,
    config: RoutingConfig,
    *,
    loader: ModuleLoader | None = None,
    lister: DirectoryLister = list_directory,
    event_log: EventLog | None = None,
) -> list[RouteResult]:
    """Discover every route below *directory* (normally ``config.root``).

    Args:
        directory: Directory to walk.
        config: Active conventions and policies.
        loader: Module loader (default: :class:`FileModuleLoader` rooted at
            ``config.root``).
        lister: Filesystem listing function.
        event_log: Optional sink for discovery events.

    Raises:
        StructuralConflictError: If any directory breaks the layout rules.
        ModuleLoadError: If a route module raises while loading.
        DiscoveryError: If a directory cannot be listed.
        ConfigError: If a module exports a handler that cannot take the request.

    """
    if loader is None:
        loader = FileModuleLoader(config.root, module_prefix=config.module_prefix)
    return await _walk_directory(Path(directory), _Walk(config, loader, lister, event_log))


async def _walk_directory(directory: Path, walk: _Walk) -> list[RouteResult]:
    entries = await asyncio.to_thread(walk.lister, directory)
    entries = [e for e in entries if not _is_skipped(e.name)]

    matches = check_directory(
        directory,
        (e.name for e in entries if not e.is_dir),
        walk.config.conventions,
    )

    pending = [_walk_directory(directory / e.name, walk) for e in entries if e.is_dir]
    pending += [_load_route(directory, match, walk) for match in matches.values()]

    results = await asyncio.gather(*pending)
    return flatten(compact(results))


async def _load_route(directory: Path, match: ConventionMatch, walk: _Walk) -> RouteResult | None:
    path = directory / match.name
    outcome = await walk.loader.load(path, match)

    if isinstance(outcome, NotFound):
        logger.debug("Skipping %s: nothing to load", path)
        _record(walk, ModuleSkipped(str(path), "not_found", now_ns()))
        return None

    if isinstance(outcome, LoadFailed):
        msg = f"Failed to load route module {path}: {outcome.cause}"
        raise ModuleLoadError(msg) from outcome.cause

    if outcome.exports.is_empty:
        if walk.config.missing_export == "warn":
            logger.warning(
                "%s matches a route convention but exports none of: %s",
                path, ", ".join(match.export_names),
            )
            _record(walk, ModuleSkipped(str(path), "missing_export", now_ns()))
        return None

    methods = _method_table(match, outcome.exports)
    if match.kind == "template":
        logger.debug("Template %s (%s) serves GET for %s", path, match.capture, directory)
    else:
        logger.debug("Discovered %s for %s from %s", ", ".join(sorted(methods)), directory, path)
    _record(walk, RouteDiscovered(str(directory), str(path), tuple(sorted(methods)), now_ns()))
    return RouteResult(filesystem_path=directory, methods=methods, source=path)


def _method_table(match: ConventionMatch, exports: RouteExports) -> dict[HttpMethod, HandlerSet]:
    if match.kind == "page":
        return {"GET": exports.default} if exports.default is not None else {}
    if match.kind == "template":
        return {"GET": template_handler(exports.render)} if exports.render is not None else {}
    return dict(exports.methods)


def _is_skipped(name: str) -> bool:
    # Private helpers, caches, and dotfiles never define routes
    return name.startswith(("_", "."))


def _record(walk: _Walk, event: ModuleSkipped | RouteDiscovered) -> None:
    if walk.event_log is not None:
        walk.event_log.append(event)
