"""Shared type definitions for warren."""

from collections.abc import Awaitable, Callable
from typing import Any, Literal

# HTTP methods a route file can populate.  ``DEL`` is the short export name
# used by ``del.py`` and registers as DELETE.
type HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Route URL path (e.g., "/", "/users", "/blog/{slug}")
type RoutePath = str

# Handler for a single method slot.  Receives the chirp Request.
type HandlerFunc = Callable[..., Any]

# Step run before a handler, in chirp's middleware shape:
# ``async def step(request, next) -> response``
type PreProcessor = Callable[[Any, Callable[[Any], Awaitable[Any]]], Awaitable[Any]]

# Behaviour when a file matches a convention but exports nothing usable
type MissingExportPolicy = Literal["ignore", "warn"]
