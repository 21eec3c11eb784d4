"""Path helpers — flatten traversal results and turn filesystem paths into URL paths.

    normalize_path(Path("/app/routes"), Path("/app/routes"))            -> "/"
    normalize_path(Path("/app/routes/users"), Path("/app/routes"))      -> "/users"
    normalize_path(Path("/app/routes/blog/{slug}"), Path("/app/routes")) -> "/blog/{slug}"

"""

from collections.abc import Iterable
from pathlib import PurePath

from warren._types import RoutePath


def flatten[T](items: Iterable[T | Iterable[T]]) -> list[T]:
    """Flatten arbitrarily nested lists/tuples into one flat list.

    Strings and other non-list iterables are treated as leaves.

    """
    flat: list[T] = []
    stack = [iter(items)]
    while stack:
        for item in stack[-1]:
            if isinstance(item, (list, tuple)):
                stack.append(iter(item))
                break
            flat.append(item)  # type: ignore[arg-type]
        else:
            stack.pop()
    return flat


def compact[T](items: Iterable[T | None]) -> list[T]:
    """Drop *None* and other empty results, keeping order."""
    return [item for item in items if item]


def normalize_path(filesystem_path: PurePath | str, root: PurePath | str) -> RoutePath:
    """Rewrite *filesystem_path* as a URL path relative to *root*.

    The root itself becomes ``"/"``; anything below it becomes the remaining
    segments joined with ``/``.  Segment text is left untouched.

    Raises:
        ValueError: If *root* is not a prefix of *filesystem_path*.

    """
    path = PurePath(filesystem_path)
    root_path = PurePath(root)
    relative = path.relative_to(root_path)
    if not relative.parts:
        return "/"
    return "/" + "/".join(relative.parts)
