"""Tests for structured logging."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from modelkit.observability import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
)
from modelkit.session import SessionManager
from modelkit.testing import ScriptedModel


def json_lines(buf: io.StringIO) -> list[dict[str, object]]:
    return [orjson.loads(line) for line in buf.getvalue().splitlines()]


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging("none")


class TestBoundLogger:
    def test_bound_context_is_rendered(self) -> None:
        buf = io.StringIO()
        log = BoundLogger(_renderer=JsonRenderer(output=buf)).bind(session_id="s1")
        log.info("generation completed", rounds=2)

        (entry,) = json_lines(buf)
        assert entry["event"] == "generation completed"
        assert entry["level"] == "info"
        assert entry["session_id"] == "s1"
        assert entry["rounds"] == 2

    def test_bind_returns_a_new_logger(self) -> None:
        base = get_logger("modelkit.test")
        bound = base.bind_tool("get_weather", call_id="c1")
        assert bound.context == {"logger": "modelkit.test", "tool": "get_weather", "call_id": "c1"}
        assert base.context == {"logger": "modelkit.test"}
        assert bound.unbind("call_id").context == {"logger": "modelkit.test", "tool": "get_weather"}

    def test_level_filter(self) -> None:
        buf = io.StringIO()
        log = BoundLogger(_renderer=JsonRenderer(output=buf), _level=logging.WARNING)
        log.info("hidden")
        log.warning("shown")
        assert [e["event"] for e in json_lines(buf)] == ["shown"]

    def test_scope_adds_context(self) -> None:
        buf = io.StringIO()
        log = BoundLogger(_renderer=JsonRenderer(output=buf))
        with log.scope(request_id="r1"):
            log.info("inside")
        log.info("outside")
        inside, outside = json_lines(buf)
        assert inside["request_id"] == "r1"
        assert "request_id" not in outside

    def test_exception_includes_traceback(self) -> None:
        buf = io.StringIO()
        log = BoundLogger(_renderer=JsonRenderer(output=buf))
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("tool crashed")
        (entry,) = json_lines(buf)
        assert entry["level"] == "error"
        assert "RuntimeError: boom" in entry["exc_info"]


class TestRenderers:
    def test_console_format(self) -> None:
        buf = io.StringIO()
        log = BoundLogger(_renderer=ConsoleRenderer(output=buf, colors=False, show_timestamp=False))
        log.info("hello", key="v", n=3, ok=True)
        assert buf.getvalue() == '[info] hello key="v" n=3 ok=true\n'

    def test_configure_logging(self) -> None:
        assert isinstance(configure_logging("json", output=io.StringIO()), JsonRenderer)
        assert isinstance(configure_logging("none"), NoOpRenderer)

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            configure_logging("xml")

    def test_global_level(self) -> None:
        buf = io.StringIO()
        configure_logging("json", "warning", output=buf)
        log = get_logger("modelkit.test")
        log.info("hidden")
        log.error("shown")
        assert [e["event"] for e in json_lines(buf)] == ["shown"]


class TestSessionLogging:
    @pytest.mark.asyncio
    async def test_session_lifecycle_is_logged(self) -> None:
        buf = io.StringIO()
        configure_logging("json", output=buf)
        manager = SessionManager(ScriptedModel(["hi"]))
        await manager.initialize()
        await manager.generate("hello")

        events = {e["event"]: e for e in json_lines(buf)}
        assert "session initialized" in events
        assert events["generation completed"]["logger"] == "modelkit.session"
        assert events["generation completed"]["session_id"] == events["session initialized"]["session_id"]
