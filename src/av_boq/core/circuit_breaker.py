"""
Tiny circuit breaker for context-cache creation.
Why: stop paying for a cache call that keeps failing (quota, content too short);
the inline path keeps working while the breaker is open.
"""

import time
from enum import Enum
from typing import Callable


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout: int = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._opened_at: float = 0.0

    def allow(self) -> bool:
        if self.state is CircuitState.CLOSED:
            return True
        if (
            self.state is CircuitState.OPEN
            and (self._clock() - self._opened_at) >= self.recovery_timeout
        ):
            self.state = CircuitState.HALF_OPEN
            return True
        return self.state is CircuitState.HALF_OPEN

    def record_success(self) -> None:
        self.state = CircuitState.CLOSED
        self.failure_count = 0

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.state is CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
            self._opened_at = self._clock()
