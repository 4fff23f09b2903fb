"""
Reliability utilities.

Circuit breaker guarding calls to the SMS provider.
"""

import time
from typing import Callable, Any

from shuttle_backend.app.core.config import settings


class CircuitOpenError(Exception):
    pass


class CircuitBreaker:
    """
    Counts consecutive failures of an async callable.

    After 'failure_threshold' failures the circuit opens and every call is
    rejected until 'reset_timeout' seconds have passed; the next call is then
    let through (HALF_OPEN) and closes the circuit again if it succeeds.
    """
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"

    def __init__(self, failure_threshold: int = 5, reset_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failures = 0
        self.last_failure_time = 0.0
        self.state = self.CLOSED

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        if self.state == self.OPEN:
            if time.monotonic() - self.last_failure_time > self.reset_timeout:
                self.state = self.HALF_OPEN
            else:
                raise CircuitOpenError("Circuit is OPEN")

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self.record_failure()
            raise

        self.reset_state()
        return result

    def record_failure(self):
        self.failures += 1
        self.last_failure_time = time.monotonic()
        if self.state == self.HALF_OPEN or self.failures >= self.failure_threshold:
            self.state = self.OPEN

    def reset_state(self):
        self.failures = 0
        self.state = self.CLOSED


sms_circuit_breaker = CircuitBreaker(
    failure_threshold=settings.sms_failure_threshold,
    reset_timeout=settings.sms_reset_timeout,
)
