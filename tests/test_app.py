"""End-to-end tests for warren.app — directory tree to live chirp routes."""

from pathlib import Path

import pytest
from chirp import App
from chirp.testing import TestClient

from warren._errors import ConfigError, StructuralConflictError
from warren.app import discover_routes, get_routes
from warren.config import RoutingConfig
from warren.observability import DiscoveryCompleted, EventLog
from warren.routes.conventions import TemplatePattern

from .conftest import HOME_PAGE, USERS_ROUTE, write_route


def _text(response) -> str:
    body = response.body
    return body.decode() if isinstance(body, bytes) else body


class TestGetRoutesConfig:
    @pytest.mark.asyncio
    async def test_relative_path_rejected(self) -> None:
        with pytest.raises(ConfigError, match="is not absolute"):
            await get_routes("routes")

    @pytest.mark.asyncio
    async def test_relative_path_rejected_before_io(self) -> None:
        def lister(path):
            raise AssertionError("no I/O expected")

        with pytest.raises(ConfigError):
            await get_routes(Path("relative/routes"), lister=lister)

    @pytest.mark.asyncio
    async def test_options_forwarded_to_config(self, routes_dir: Path) -> None:
        write_route(routes_dir, "blog/post.md", "# Post\n")
        routes = await discover_routes(routes_dir, conventions=(TemplatePattern("post.md"),))
        assert [r.url_path for r in routes] == ["/blog"]

    @pytest.mark.asyncio
    async def test_returns_chirp_app(self, routes_dir: Path) -> None:
        assert isinstance(await get_routes(routes_dir), App)


class TestEndToEnd:
    """Requests served by routes discovered from a directory tree."""

    @pytest.mark.asyncio
    async def test_route_file_methods(self, routes_dir: Path) -> None:
        write_route(routes_dir, "users/route.py", USERS_ROUTE)

        routes = await discover_routes(routes_dir)
        assert len(routes) == 1
        assert routes[0].url_path == "/users"
        assert set(routes[0].methods) == {"GET", "POST"}

        app = await get_routes(routes_dir)
        async with TestClient(app) as client:
            get = await client.get("/users")
            post = await client.post("/users")
            delete = await client.delete("/users")
            put = await client.put("/users")

        assert get.status == 200
        assert "all users" in _text(get)
        assert post.status == 200
        assert "created" in _text(post)
        assert delete.status == 405
        assert put.status == 405

    @pytest.mark.asyncio
    async def test_root_page(self, routes_dir: Path) -> None:
        write_route(routes_dir, "page.py", HOME_PAGE)

        routes = await discover_routes(routes_dir)
        assert [(r.url_path, set(r.methods)) for r in routes] == [("/", {"GET"})]

        async with TestClient(await get_routes(routes_dir)) as client:
            response = await client.get("/")
        assert response.status == 200
        assert "home" in _text(response)

    @pytest.mark.asyncio
    async def test_markdown_template(self, routes_dir: Path) -> None:
        write_route(routes_dir, "blog/post.md", "# First post\n\nHello *world*.\n")
        config = RoutingConfig(root=routes_dir, conventions=(TemplatePattern("post.md"),))

        app = await get_routes(config)
        async with TestClient(app) as client:
            response = await client.get("/blog")
        assert response.status == 200
        assert response.content_type.startswith("text/html")
        body = _text(response)
        assert "First post" in body
        assert "<em>world</em>" in body

    @pytest.mark.asyncio
    async def test_python_render_template(self, routes_dir: Path) -> None:
        write_route(routes_dir, "about/about.py", "def render():\n    return '<h1>About</h1>'\n")
        config = RoutingConfig(root=routes_dir, conventions=(TemplatePattern("about.py"),))

        async with TestClient(await get_routes(config)) as client:
            response = await client.get("/about")
        assert _text(response) == "<h1>About</h1>"

    @pytest.mark.asyncio
    async def test_method_files(self, routes_dir: Path) -> None:
        write_route(routes_dir, "orders/get.py", "async def GET(request):\n    return 'orders'\n")
        write_route(routes_dir, "orders/del.py", "async def DEL(request):\n    return 'deleted'\n")

        async with TestClient(await get_routes(routes_dir)) as client:
            get = await client.get("/orders")
            delete = await client.delete("/orders")
        assert "orders" in _text(get)
        assert "deleted" in _text(delete)

    @pytest.mark.asyncio
    async def test_pre_processor_short_circuits(self, routes_dir: Path) -> None:
        write_route(routes_dir, "secret/route.py", (
            "from chirp import Response\n"
            "from warren import create_handler\n"
            "\n"
            "async def require_token(request, next):\n"
            "    if request.headers.get('x-token') != 'letmein':\n"
            "        return Response(body='forbidden').with_status(403)\n"
            "    return await next(request)\n"
            "\n"
            "async def reveal(request):\n"
            "    return 'the secret'\n"
            "\n"
            "GET = create_handler(require_token, reveal)\n"
        ))

        async with TestClient(await get_routes(routes_dir)) as client:
            denied = await client.get("/secret")
            allowed = await client.get("/secret", headers={"x-token": "letmein"})
        assert denied.status == 403
        assert allowed.status == 200
        assert "the secret" in _text(allowed)

    @pytest.mark.asyncio
    async def test_path_parameter_directory(self, routes_dir: Path) -> None:
        write_route(routes_dir, "users/{user_id}/route.py", (
            "async def GET(request):\n"
            "    return 'user ' + request.path_params['user_id']\n"
        ))

        async with TestClient(await get_routes(routes_dir)) as client:
            response = await client.get("/users/42")
        assert "user 42" in _text(response)

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, routes_dir: Path) -> None:
        write_route(routes_dir, "page.py", HOME_PAGE)
        async with TestClient(await get_routes(routes_dir)) as client:
            response = await client.get("/missing")
        assert response.status == 404


class TestGetRoutesFailures:
    @pytest.mark.asyncio
    async def test_conflict_registers_nothing(self, routes_dir: Path) -> None:
        write_route(routes_dir, "users/route.py", USERS_ROUTE)
        write_route(routes_dir, "users/page.py", HOME_PAGE)
        app = App()
        with pytest.raises(StructuralConflictError):
            await get_routes(routes_dir, app=app)
        assert app._pending_routes == []

    @pytest.mark.asyncio
    async def test_completion_event(self, routes_dir: Path) -> None:
        write_route(routes_dir, "page.py", HOME_PAGE)
        write_route(routes_dir, "users/route.py", USERS_ROUTE)
        log = EventLog()
        await get_routes(routes_dir, event_log=log)
        (done,) = log.query(event_type=DiscoveryCompleted)
        assert done.route_count == 2
        assert done.handler_count == 3
        assert done.path == str(routes_dir)
