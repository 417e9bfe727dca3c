"""Tests for settings and task error records."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from lazyseq.foundation.config import LazyseqSettings, clear_settings_cache, get_settings
from lazyseq.foundation.errors import ErrorCode, TaskError, classify_exception


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


# ═════════════════════════════════════════════════════════════════════════════
# Settings
# ═════════════════════════════════════════════════════════════════════════════


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("LAZYSEQ_DEBUG", "LAZYSEQ_LOG_LEVEL", "LAZYSEQ_LOG_FORMAT", "LAZYSEQ_SCHEDULER_DEFAULT_LIMIT"):
            monkeypatch.delenv(var, raising=False)
        settings = LazyseqSettings(_env_file=None)
        assert settings.debug is False
        assert settings.logging.level == "INFO"
        assert settings.logging.format == "console"
        assert settings.scheduler.default_limit is None
        assert settings.scheduler.is_bounded is False
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAZYSEQ_LOG_LEVEL", "warning")
        monkeypatch.setenv("LAZYSEQ_LOG_FORMAT", "json")
        monkeypatch.setenv("LAZYSEQ_SCHEDULER_DEFAULT_LIMIT", "8")
        settings = get_settings()
        assert settings.logging.level == "WARNING"
        assert settings.logging.format == "json"
        assert settings.scheduler.default_limit == 8
        assert settings.scheduler.is_bounded is True

    def test_debug_forces_debug_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAZYSEQ_DEBUG", "true")
        monkeypatch.setenv("LAZYSEQ_LOG_LEVEL", "ERROR")
        assert get_settings().log_level == "DEBUG"

    def test_invalid_limit_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAZYSEQ_SCHEDULER_DEFAULT_LIMIT", "0")
        with pytest.raises(ValidationError):
            get_settings()

    def test_invalid_format_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAZYSEQ_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            get_settings()

    def test_cached_until_cleared(self) -> None:
        first = get_settings()
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings() is not first


# ═════════════════════════════════════════════════════════════════════════════
# Error records
# ═════════════════════════════════════════════════════════════════════════════


class TestClassifyException:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (ValueError("x"), ErrorCode.INVALID_ARGUMENT),
            (TypeError("x"), ErrorCode.INVALID_ARGUMENT),
            (KeyError("x"), ErrorCode.LOOKUP),
            (IndexError("x"), ErrorCode.LOOKUP),
            (TimeoutError(), ErrorCode.TIMEOUT),
            (asyncio.CancelledError(), ErrorCode.CANCELLED),
            (StopIteration(), ErrorCode.EXHAUSTED),
            (StopAsyncIteration(), ErrorCode.EXHAUSTED),
            (RuntimeError("x"), ErrorCode.USER_FUNCTION),
            (KeyboardInterrupt(), ErrorCode.UNKNOWN),
        ],
    )
    def test_codes(self, exc: BaseException, code: ErrorCode) -> None:
        assert classify_exception(exc) == code


class TestTaskError:
    def test_from_exception(self) -> None:
        err = TaskError.from_exception(2, RuntimeError("boom"))
        assert err.index == 2
        assert err.code == ErrorCode.USER_FUNCTION
        assert err.exc_type == "RuntimeError"
        assert err.details is None
        assert err.render() == "task[2] USER_FUNCTION: RuntimeError(boom)"
        assert str(err) == err.render()

    def test_include_trace(self) -> None:
        err = TaskError.from_exception(0, ValueError("bad"), include_trace=True)
        assert err.details is not None
        assert "ValueError: bad" in err.details

    def test_message_accepts_exception(self) -> None:
        assert TaskError(index=0, message=ValueError("why")).message == "why"

    def test_cancellation_flag(self) -> None:
        assert TaskError.from_exception(0, asyncio.CancelledError()).is_cancellation is True
        assert TaskError.from_exception(0, ValueError()).is_cancellation is False

    def test_frozen(self) -> None:
        err = TaskError(index=0, message="m")
        with pytest.raises(ValidationError):
            err.index = 1  # type: ignore[misc]

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TaskError(index=-1)

    def test_serializes(self) -> None:
        data = TaskError.from_exception(1, KeyError("k")).model_dump(mode="json")
        assert data["code"] == "LOOKUP"
        assert data["is_cancellation"] is False
