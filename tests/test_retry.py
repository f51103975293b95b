import asyncio

import pytest

from shared.decorators import retry as retry_module
from shared.decorators.retry import retry
from shared.decorators.timing import Stopwatch, time_execution


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr(retry_module.time, "sleep", lambda _delay: None)


def test_sync_retry_succeeds_after_transient_failures() -> None:
    calls = []

    @retry(max_attempts=3, delay=0.01, exceptions=[ConnectionError])
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionResetError("reset")  # subclass of ConnectionError
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3


def test_sync_retry_gives_up_and_reraises() -> None:
    calls = []

    @retry(max_attempts=2, delay=0.01)
    def broken():
        calls.append(1)
        raise TimeoutError("slow")

    with pytest.raises(TimeoutError):
        broken()
    assert len(calls) == 2


def test_unlisted_exceptions_are_not_retried() -> None:
    calls = []

    @retry(max_attempts=5, exceptions=[ConnectionError])
    def wrong():
        calls.append(1)
        raise KeyError("nope")

    with pytest.raises(KeyError):
        wrong()
    assert len(calls) == 1


def test_async_retry(monkeypatch) -> None:
    async def no_sleep(_delay):
        return None

    monkeypatch.setattr(retry_module.asyncio, "sleep", no_sleep)
    calls = []

    @retry(max_attempts=2, delay=0.01)
    async def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise ConnectionError("once")
        return 42

    assert asyncio.run(flaky()) == 42
    assert len(calls) == 2


def test_time_execution_logs_duration(caplog) -> None:
    @time_execution
    def work():
        return "done"

    with caplog.at_level("DEBUG"):
        assert work() == "done"
    assert "work executed in" in caplog.text


def test_stopwatch_lap_restarts() -> None:
    stopwatch = Stopwatch()
    first = stopwatch.lap()
    assert first >= 0.0
    assert stopwatch.elapsed_ms >= 0.0
