"""
Reliability utilities.

Circuit breaker guarding calls to the external route service.
"""

import time
import logging
from typing import Callable, Any

from egzit.app.core.config import settings

logger = logging.getLogger("egzit.reliability")


class CircuitOpenError(Exception):
    pass


class CircuitBreaker:
    """
    Simple Circuit Breaker implementation.
    After 'failure_threshold' consecutive failures the circuit opens and
    rejects calls for 'reset_timeout' seconds, then lets one trial call through.
    """
    def __init__(self, name: str, failure_threshold: int = 5, reset_timeout: float = 60):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failures = 0
        self.last_failure_time = 0.0
        self.state = "CLOSED"  # CLOSED, OPEN, HALF_OPEN

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        if self.state == "OPEN":
            if time.monotonic() - self.last_failure_time >= self.reset_timeout:
                self.state = "HALF_OPEN"
            else:
                raise CircuitOpenError(f"Circuit '{self.name}' is OPEN")

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self.record_failure()
            raise

        if self.state == "HALF_OPEN" or self.failures:
            self.reset_state()
        return result

    def record_failure(self):
        self.failures += 1
        self.last_failure_time = time.monotonic()
        if self.state == "HALF_OPEN" or self.failures >= self.failure_threshold:
            if self.state != "OPEN":
                logger.warning(
                    "Circuit opened",
                    extra={"circuit": self.name, "failures": self.failures}
                )
            self.state = "OPEN"

    def reset_state(self):
        self.failures = 0
        self.state = "CLOSED"


route_circuit_breaker = CircuitBreaker(
    "route_service",
    failure_threshold=settings.route_circuit_failure_threshold,
    reset_timeout=settings.route_circuit_reset_seconds,
)
