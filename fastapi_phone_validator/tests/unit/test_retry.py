from __future__ import annotations

import asyncio

import pytest

from app.core import retry
from app.core.retry import PhoneAPIError, run_with_retry


def _flaky(failures: int, *, retryable: bool = True):
    calls = {"count": 0}

    async def _call() -> str:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise PhoneAPIError(f"boom {calls['count']}", retryable=retryable)
        return "ok"

    return _call, calls


@pytest.fixture()
def recorded_sleeps(monkeypatch):
    delays: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(retry.asyncio, "sleep", _fake_sleep)
    return delays


def test_returns_first_success_without_sleeping(recorded_sleeps):
    call, calls = _flaky(0)
    assert asyncio.run(run_with_retry("op", call, attempts=3, delay=1.0)) == "ok"
    assert calls["count"] == 1
    assert recorded_sleeps == []


def test_retries_with_fixed_delay_until_success(recorded_sleeps):
    call, calls = _flaky(2)
    assert asyncio.run(run_with_retry("op", call, attempts=3, delay=1.0)) == "ok"
    assert calls["count"] == 3
    assert recorded_sleeps == [1.0, 1.0]


def test_raises_after_final_attempt(recorded_sleeps):
    call, calls = _flaky(5)
    with pytest.raises(PhoneAPIError, match="boom 3"):
        asyncio.run(run_with_retry("op", call, attempts=3, delay=1.0))
    assert calls["count"] == 3
    assert recorded_sleeps == [1.0, 1.0]


def test_non_retryable_error_is_not_retried(recorded_sleeps):
    call, calls = _flaky(1, retryable=False)
    with pytest.raises(PhoneAPIError):
        asyncio.run(run_with_retry("op", call, attempts=3, delay=1.0))
    assert calls["count"] == 1
    assert recorded_sleeps == []


def test_other_exceptions_propagate(recorded_sleeps):
    async def _broken() -> None:
        raise KeyError("unexpected")

    with pytest.raises(KeyError):
        asyncio.run(run_with_retry("op", _broken))
    assert recorded_sleeps == []
