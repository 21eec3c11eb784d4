"""Shared test fixtures for warren."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture
def routes_dir(tmp_path: Path) -> Path:
    """Create an empty routes/ directory for testing."""
    d = tmp_path / "routes"
    d.mkdir()
    return d


@pytest.fixture(autouse=True)
def _forget_route_modules() -> Iterator[None]:
    """Drop route modules registered by a test so each test loads fresh ones."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        if name.startswith("warren_routes"):
            del sys.modules[name]


def write_route(routes_dir: Path, name: str, content: str = "") -> Path:
    """Write a route file (creating parent directories) and return its path."""
    p = routes_dir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


USERS_ROUTE = (
    "async def GET(request):\n"
    "    return 'all users'\n"
    "\n"
    "async def POST(request):\n"
    "    return 'created'\n"
)

HOME_PAGE = (
    "async def default(request):\n"
    "    return 'home'\n"
)
