from __future__ import annotations
import time
from enum import Enum
from typing import Awaitable, Callable, Any, TypeVar

# Generic return type for wrapped functions.
T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitOpenError(Exception):
    """Raised instead of calling the wrapped function while the circuit is open."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Circuit '{name}' is open")
        self.name = name


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout_seconds: float = 30.0,
        name: str = "default_circuit",
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout_seconds = recovery_timeout_seconds
        self.name = name

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = 0.0

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Executes the function with circuit breaker logic.
        Raises CircuitOpenError if the circuit is open; failures are recorded
        and re-raised.
        """
        self._before_call()
        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    async def acall(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Async variant of `call`."""
        self._before_call()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _before_call(self) -> None:
        self._update_state()
        if self.state == CircuitState.OPEN:
            raise CircuitOpenError(self.name)

    def _update_state(self) -> None:
        if self.state == CircuitState.OPEN:
            if time.time() - self.last_failure_time > self.recovery_timeout_seconds:
                self.state = CircuitState.HALF_OPEN

    def _on_success(self) -> None:
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def _on_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()
        # A failed probe in HALF_OPEN re-opens immediately.
        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
