"""Circuit breaker guarding calls to the hosted text classifier.

CLOSED: calls pass through and consecutive failures are counted.
OPEN: calls are rejected with CircuitOpenError until the recovery
timeout elapses.
HALF_OPEN: one probe call is let through; success closes the circuit,
failure reopens it.

Usage:
    breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60.0)
    try:
        result = await breaker.call(fetch, text)
    except CircuitOpenError:
        ...
"""

import enum
import logging
import time
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised when calling through an open circuit."""


class CircuitBreaker:
    """Consecutive-failure circuit breaker for async callables.

    Args:
        failure_threshold: Consecutive failures that open the circuit.
        recovery_timeout: Seconds an open circuit waits before probing.
        name: Used in log lines.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        name: str = "text_classifier",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._name = name
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._failures

    def reset(self) -> None:
        """Force the circuit closed and forget past failures."""
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _before_call(self) -> None:
        if self._state is not CircuitState.OPEN:
            return
        if self._clock() - self._opened_at < self._recovery_timeout:
            raise CircuitOpenError(f"Circuit {self._name} is open")
        self._state = CircuitState.HALF_OPEN
        logger.info("Circuit %s half-open, probing", self._name)

    def _on_success(self) -> None:
        if self._state is CircuitState.HALF_OPEN:
            logger.info("Circuit %s closed after successful probe", self._name)
        self.reset()

    def _on_failure(self) -> None:
        self._failures += 1
        if self._state is CircuitState.HALF_OPEN or self._failures >= self._failure_threshold:
            if self._state is not CircuitState.OPEN:
                logger.warning(
                    "Circuit %s opened after %d consecutive failures",
                    self._name,
                    self._failures,
                )
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()

    async def call(
        self,
        fn: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run ``fn`` through the breaker.

        Raises:
            CircuitOpenError: If the circuit is open and not yet due a probe.
        """
        self._before_call()
        try:
            result = await fn(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result
