"""Tests for structured logging and the engines' log points."""

from __future__ import annotations

import io
from collections.abc import Iterator

import orjson
import pytest

from lazyseq import aio, map_async
from lazyseq import sync as it
from lazyseq.foundation.config import clear_settings_cache
from lazyseq.runtime.observability import (
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
    log_context,
)


def lines(buffer: io.StringIO) -> list[dict]:
    return [orjson.loads(line) for line in buffer.getvalue().splitlines()]


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()
    configure_logging(format="none", level="INFO")


class TestConfigure:
    def test_json_renderer(self) -> None:
        buffer = io.StringIO()
        assert isinstance(configure_logging("json", "DEBUG", output=buffer), JsonRenderer)
        get_logger("lazyseq.test").debug("hello", n=1)
        [entry] = lines(buffer)
        assert entry["event"] == "hello"
        assert entry["level"] == "debug"
        assert entry["n"] == 1
        assert entry["logger"] == "lazyseq.test"
        assert "timestamp" in entry

    def test_level_filters(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "WARNING", output=buffer)
        log = get_logger("lazyseq.test")
        log.info("hidden")
        log.warning("shown")
        assert [e["event"] for e in lines(buffer)] == ["shown"]

    def test_console_renderer(self) -> None:
        buffer = io.StringIO()
        renderer = configure_logging("console", "INFO", output=buffer, colors=False)
        assert isinstance(renderer, ConsoleRenderer)
        get_logger("lazyseq.test").info("started", items=3, name="x")
        out = buffer.getvalue()
        assert "[info]" in out
        assert "started" in out
        assert "items=3" in out
        assert 'name="x"' in out

    def test_none_format(self) -> None:
        assert isinstance(configure_logging("none"), NoOpRenderer)

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            configure_logging("xml")

    def test_settings_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAZYSEQ_LOG_FORMAT", "json")
        monkeypatch.setenv("LAZYSEQ_LOG_LEVEL", "ERROR")
        clear_settings_cache()
        buffer = io.StringIO()
        assert isinstance(configure_logging(output=buffer), JsonRenderer)
        log = get_logger()
        log.warning("hidden")
        log.error("shown")
        assert [e["event"] for e in lines(buffer)] == ["shown"]


class TestContext:
    def test_bind_and_unbind(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "INFO", output=buffer)
        log = get_logger("lazyseq.test").bind(batch="b1", extra=True)
        log.info("one")
        log.unbind("extra").info("two")
        first, second = lines(buffer)
        assert first["batch"] == "b1" and first["extra"] is True
        assert second["batch"] == "b1" and "extra" not in second

    def test_log_context_scope(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "INFO", output=buffer)
        log = get_logger()
        with log_context(request="r1"):
            log.info("inside")
        log.info("outside")
        inside, outside = lines(buffer)
        assert inside["request"] == "r1"
        assert "request" not in outside

    def test_exception_includes_traceback(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "INFO", output=buffer)
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            get_logger().exception("failed")
        [entry] = lines(buffer)
        assert "RuntimeError: kaput" in entry["exc_info"]


class TestEngineLogPoints:
    def test_sync_tee_logs_creation(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "DEBUG", output=buffer)
        it.tee(3, [1])
        [entry] = lines(buffer)
        assert entry["event"] == "tee created"
        assert entry["branches"] == 3
        assert entry["engine"] == "sync"

    def test_no_per_item_logging(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "DEBUG", output=buffer)
        it.to_list(it.map(str, it.range(50)))
        assert buffer.getvalue() == ""

    @pytest.mark.asyncio
    async def test_aio_tee_logs_creation(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "DEBUG", output=buffer)
        branches = aio.tee(2, [1])
        assert [await aio.to_list(b) for b in branches] == [[1], [1]]
        [entry] = lines(buffer)
        assert entry["engine"] == "aio"

    @pytest.mark.asyncio
    async def test_scheduler_batch_and_rejections(self) -> None:
        buffer = io.StringIO()
        configure_logging("json", "DEBUG", output=buffer)

        def check(x: int) -> int:
            if x < 0:
                raise ValueError("negative")
            return x

        await map_async(check, [1, -1], limit=2, return_exceptions=True)
        events = lines(buffer)
        assert [e["event"] for e in events] == ["batch started", "task rejected", "batch finished"]
        rejected = events[1]
        assert rejected["level"] == "warning"
        assert rejected["index"] == 1
        assert rejected["code"] == "INVALID_ARGUMENT"
        assert events[2]["failed"] == 1
