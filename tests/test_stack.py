"""Tests for perch.middleware.stack — layer matching and next() semantics."""

import logging
from typing import Any

import pytest

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.stack import Layer, NextCall, run_stack


def make_request(path: str = "/", method: str = "GET") -> Request:
    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request.from_asgi({"type": "http", "method": method, "path": path}, receive)


def noop(request, response, next) -> None:
    next()


class TestLayerMatching:
    @pytest.mark.parametrize("path", ["/", "/users", "/users/7/posts"])
    def test_root_matches_everything(self, path: str) -> None:
        assert Layer("/", noop).matches(path)

    @pytest.mark.parametrize("path", ["/users", "/users/", "/users/7"])
    def test_prefix_matches_self_and_below(self, path: str) -> None:
        assert Layer("/users", noop).matches(path)

    @pytest.mark.parametrize("path", ["/", "/user", "/usersx", "/admin/users"])
    def test_prefix_rejects_siblings(self, path: str) -> None:
        assert not Layer("/users/", noop).matches(path)


class TestNextCall:
    def test_first_call_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        call = NextCall(Layer("/", noop))
        first = ValueError("first")
        with caplog.at_level(logging.WARNING, logger="perch.server"):
            call(first)
            call()
        assert call.called
        assert call.error is first
        assert "more than once" in caplog.text


class TestRunStack:
    @pytest.mark.asyncio
    async def test_runs_in_order_until_chain_ends(self) -> None:
        calls: list[str] = []

        def first(request, response, next):
            calls.append("first")
            next()

        async def second(request, response, next):
            calls.append("second")
            response.send("done")

        def third(request, response, next):
            calls.append("third")

        layers = (Layer("/", first), Layer("/", second), Layer("/", third))
        result = await run_stack(layers, make_request(), Response())

        assert calls == ["first", "second"]
        assert result.error is None
        assert not result.exhausted

    @pytest.mark.asyncio
    async def test_exhausted_when_everyone_passes(self) -> None:
        result = await run_stack((Layer("/", noop),), make_request(), Response())
        assert result.exhausted
        assert result.error is None

    @pytest.mark.asyncio
    async def test_skips_unmatched_paths(self) -> None:
        calls: list[str] = []

        def admin(request, response, next):
            calls.append("admin")

        def users(request, response, next):
            calls.append("users")

        layers = (Layer("/admin", admin), Layer("/users", users))
        await run_stack(layers, make_request("/users/7"), Response())
        assert calls == ["users"]

    @pytest.mark.asyncio
    async def test_error_skips_to_error_layers(self) -> None:
        calls: list[str] = []
        boom = RuntimeError("boom")

        def failing(request, response, next):
            next(boom)

        def skipped(request, response, next):
            calls.append("skipped")

        def on_error(error, request, response, next):
            calls.append(f"on_error:{error}")
            response.set_status(503).send("oh no")

        layers = (
            Layer("/", failing),
            Layer("/", skipped),
            Layer("/", on_error, handles_errors=True),
        )
        response = Response()
        result = await run_stack(layers, make_request(), response)

        assert calls == ["on_error:boom"]
        assert result.error is None
        assert response.status == 503

    @pytest.mark.asyncio
    async def test_error_layers_skipped_without_error(self) -> None:
        calls: list[str] = []

        def on_error(error, request, response, next):
            calls.append("on_error")

        layers = (Layer("/", on_error, handles_errors=True), Layer("/", noop))
        result = await run_stack(layers, make_request(), Response())
        assert calls == []
        assert result.exhausted

    @pytest.mark.asyncio
    async def test_raise_counts_as_next_error(self) -> None:
        boom = RuntimeError("boom")

        async def failing(request, response, next):
            raise boom

        result = await run_stack((Layer("/", failing),), make_request(), Response())
        assert result.error is boom
        assert result.exhausted

    @pytest.mark.asyncio
    async def test_error_middleware_can_clear_error(self) -> None:
        def failing(request, response, next):
            next(RuntimeError("boom"))

        def recover(error, request, response, next):
            next()

        def tail(request, response, next):
            response.send("recovered")

        layers = (
            Layer("/", failing),
            Layer("/", recover, handles_errors=True),
            Layer("/", tail),
        )
        response = Response()
        await run_stack(layers, make_request(), response)
        assert response.text == "recovered"

    @pytest.mark.asyncio
    async def test_error_middleware_can_pass_error_on(self) -> None:
        boom = RuntimeError("boom")

        def failing(request, response, next):
            next(boom)

        def annotate(error, request, response, next):
            next(error)

        layers = (Layer("/", failing), Layer("/", annotate, handles_errors=True))
        result = await run_stack(layers, make_request(), Response())
        assert result.error is boom

    @pytest.mark.asyncio
    async def test_raise_after_next_keeps_first_outcome(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def sloppy(request, response, next):
            next()
            raise RuntimeError("late")

        with caplog.at_level(logging.ERROR, logger="perch.server"):
            result = await run_stack((Layer("/", sloppy),), make_request(), Response())

        assert result.exhausted
        assert result.error is None
        assert "raised after calling next()" in caplog.text
