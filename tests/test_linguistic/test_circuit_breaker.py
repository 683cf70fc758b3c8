"""Tests for the text classifier circuit breaker."""

import pytest

from trustlens.linguistic.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
    CircuitState,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def _success() -> str:
    return "ok"


async def _failure() -> str:
    raise RuntimeError("boom")


async def _trip(breaker: CircuitBreaker, times: int) -> None:
    for _ in range(times):
        with pytest.raises(RuntimeError):
            await breaker.call(_failure)


class TestClosedState:
    async def test_passthrough(self) -> None:
        breaker = CircuitBreaker(failure_threshold=3)
        assert await breaker.call(_success) == "ok"
        assert breaker.state is CircuitState.CLOSED

    async def test_success_resets_failures(self) -> None:
        breaker = CircuitBreaker(failure_threshold=3)
        await _trip(breaker, 2)
        assert breaker.consecutive_failures == 2

        await breaker.call(_success)
        assert breaker.consecutive_failures == 0
        assert breaker.state is CircuitState.CLOSED


class TestOpenState:
    async def test_opens_at_threshold(self) -> None:
        breaker = CircuitBreaker(failure_threshold=3)
        await _trip(breaker, 3)
        assert breaker.state is CircuitState.OPEN

    async def test_rejects_while_open(self) -> None:
        clock = FakeClock()
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=30.0, clock=clock)
        await _trip(breaker, 1)

        clock.now += 29.0
        with pytest.raises(CircuitOpenError, match="text_classifier"):
            await breaker.call(_success)


class TestHalfOpenState:
    async def test_probe_success_closes(self) -> None:
        clock = FakeClock()
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=30.0, clock=clock)
        await _trip(breaker, 1)

        clock.now += 30.0
        assert await breaker.call(_success) == "ok"
        assert breaker.state is CircuitState.CLOSED
        assert breaker.consecutive_failures == 0

    async def test_probe_failure_reopens(self) -> None:
        clock = FakeClock()
        breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=30.0, clock=clock)
        await _trip(breaker, 3)

        clock.now += 31.0
        await _trip(breaker, 1)
        assert breaker.state is CircuitState.OPEN

        with pytest.raises(CircuitOpenError):
            await breaker.call(_success)

    async def test_reset(self) -> None:
        breaker = CircuitBreaker(failure_threshold=1)
        await _trip(breaker, 1)
        breaker.reset()
        assert breaker.state is CircuitState.CLOSED
