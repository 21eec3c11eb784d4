"""Tests for warren.routes.handlers — handler sets and create_handler."""

from pathlib import Path

import pytest

from warren._errors import ConfigError
from warren.routes.handlers import (
    HandlerSet,
    as_handler_set,
    call_handler,
    create_handler,
    template_handler,
)


async def _step(request, next):  # noqa: A002
    return await next(request)


async def _handler(request):
    return "ok"


class TestCreateHandler:
    def test_handler_only(self) -> None:
        hs = create_handler(_handler)
        assert hs == HandlerSet(handler=_handler)
        assert hs.pre_processors == ()

    def test_pre_processors_keep_order(self) -> None:
        async def other(request, next):  # noqa: A002
            return await next(request)

        hs = create_handler(_step, other, _handler)
        assert hs.handler is _handler
        assert hs.pre_processors == (_step, other)

    def test_requires_handler(self) -> None:
        with pytest.raises(TypeError, match="requires at least a handler"):
            create_handler()

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError, match="must be callable"):
            create_handler("nope", _handler)

    def test_frozen(self) -> None:
        hs = create_handler(_handler)
        with pytest.raises(AttributeError):
            hs.handler = _step  # type: ignore[misc]


class TestAsHandlerSet:
    source = Path("/r/route.py")

    def test_none_is_missing(self) -> None:
        assert as_handler_set(None, "GET", self.source) is None

    def test_bare_function_wrapped(self) -> None:
        hs = as_handler_set(_handler, "GET", self.source)
        assert hs == HandlerSet(handler=_handler)

    def test_handler_set_passed_through(self) -> None:
        original = create_handler(_step, _handler)
        assert as_handler_set(original, "GET", self.source) is original

    def test_sync_handler_accepted(self) -> None:
        def sync(request):
            return "ok"

        assert as_handler_set(sync, "GET", self.source) is not None

    def test_non_callable_is_absent(self) -> None:
        assert as_handler_set(42, "GET", self.source) is None
        assert as_handler_set("x", "GET", self.source) is None

    def test_missing_is_absent(self) -> None:
        assert as_handler_set(None, "GET", self.source) is None

    def test_no_params_rejected(self) -> None:
        async def no_params():
            return "x"

        with pytest.raises(ConfigError, match="must accept one positional parameter"):
            as_handler_set(no_params, "GET", self.source)

    def test_invalid_handler_inside_set_rejected(self) -> None:
        async def two_required(request, extra):
            return "x"

        with pytest.raises(ConfigError):
            as_handler_set(create_handler(two_required), "POST", self.source)


class TestCallHandler:
    @pytest.mark.asyncio
    async def test_sync(self) -> None:
        assert await call_handler(lambda x: x * 2, 4) == 8

    @pytest.mark.asyncio
    async def test_async(self) -> None:
        assert await call_handler(_handler, object()) == "ok"


class TestTemplateHandler:
    @pytest.mark.asyncio
    async def test_body_is_render_result(self) -> None:
        hs = template_handler(lambda: "<h1>Hi</h1>")
        response = await hs.handler(object())
        assert response.body == "<h1>Hi</h1>"
        assert response.content_type.startswith("text/html")

    @pytest.mark.asyncio
    async def test_async_render(self) -> None:
        async def render():
            return "<p>async</p>"

        hs = template_handler(render)
        response = await hs.handler(object())
        assert response.body == "<p>async</p>"
        assert hs.handler.__name__ == "render"
