"""Circuit breaker for vendor transports.

Each channel sender owns one breaker. When a vendor keeps failing the
breaker opens and the sender reports a failed attempt immediately, so the
dispatcher moves to the user's next channel instead of waiting out another
transport timeout.

    CLOSED --(failure_threshold consecutive failures)--> OPEN
    OPEN --(timeout_seconds elapsed)--> HALF_OPEN
    HALF_OPEN --(probe succeeds)--> CLOSED
    HALF_OPEN --(probe fails)--> OPEN
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """The breaker rejected the call without running it."""


class CircuitBreaker:
    """Count consecutive failures of a callable and stop calling it.

    A call fails when it raises, or when ``is_failure`` flags its return
    value. Senders pass a predicate over OperationResult so that a vendor
    5xx trips the breaker while still being returned to the caller.

    Args:
        name: Registry name, e.g. ``notification_sms``
        failure_threshold: Consecutive failures that open the circuit
        timeout_seconds: Time spent OPEN before a probe is allowed
        half_open_max_calls: Concurrent probes allowed while HALF_OPEN
        is_failure: Predicate over return values
        clock: Monotonic time source

    Example:
        breaker = CircuitBreaker(
            "notification_email",
            failure_threshold=5,
            is_failure=lambda r: not r.is_success,
        )
        result = breaker.call(client.send_email, to=to, subject=s, html=body)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: int = 60,
        half_open_max_calls: int = 1,
        is_failure: Optional[Callable[[Any], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls
        self._is_failure = is_failure
        self._clock = clock

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at: Optional[float] = None
        self._probes_in_flight = 0

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Run ``func`` unless the circuit is open.

        Raises:
            CircuitBreakerOpenError: The call was rejected
            Exception: Whatever ``func`` raised
        """
        probing = self._admit()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._record(failed=True, probing=probing, error=str(e))
            raise

        failed = self._is_failure is not None and self._is_failure(result)
        error = getattr(result, "message", repr(result)) if failed else None
        self._record(failed=failed, probing=probing, error=error)
        return result

    def _admit(self) -> bool:
        """Decide whether a call may run. Returns True for a HALF_OPEN probe."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                waited = self._clock() - (self._opened_at or 0.0)
                if waited < self.timeout_seconds:
                    retry_in = int(self.timeout_seconds - waited)
                    logger.warning(
                        "circuit_breaker_open",
                        name=self.name,
                        failure_count=self._failures,
                        retry_in_seconds=retry_in,
                    )
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is OPEN. "
                        f"Retry in {retry_in} seconds."
                    )
                self._set_state(CircuitState.HALF_OPEN)

            if self._state == CircuitState.HALF_OPEN:
                if self._probes_in_flight >= self.half_open_max_calls:
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is HALF_OPEN "
                        f"(probe already in flight)."
                    )
                self._probes_in_flight += 1
                return True
            return False

    def _record(self, failed: bool, probing: bool, error: Optional[str]) -> None:
        with self._lock:
            if probing:
                self._probes_in_flight = max(self._probes_in_flight - 1, 0)

            if not failed:
                if self._state == CircuitState.HALF_OPEN:
                    self._set_state(CircuitState.CLOSED)
                self._failures = 0
                return

            self._failures += 1
            if self._state == CircuitState.HALF_OPEN:
                logger.warning("circuit_breaker_probe_failed", name=self.name, error=error)
                self._set_state(CircuitState.OPEN)
            elif self._failures >= self.failure_threshold:
                self._set_state(CircuitState.OPEN)
            else:
                logger.warning(
                    "circuit_breaker_failure",
                    name=self.name,
                    failure_count=self._failures,
                    threshold=self.failure_threshold,
                    error=error,
                )

    def _set_state(self, state: CircuitState) -> None:
        """Transition; caller holds the lock."""
        previous, self._state = self._state, state
        if state == CircuitState.OPEN:
            self._opened_at = self._clock()
            self._probes_in_flight = 0
            logger.error(
                "circuit_breaker_opened",
                name=self.name,
                failure_count=self._failures,
                timeout_seconds=self.timeout_seconds,
            )
        elif state == CircuitState.HALF_OPEN:
            self._probes_in_flight = 0
            logger.info("circuit_breaker_half_open", name=self.name)
        else:
            self._failures = 0
            self._probes_in_flight = 0
            if previous != CircuitState.CLOSED:
                logger.info("circuit_breaker_closed", name=self.name)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failures,
                "failure_threshold": self.failure_threshold,
                "half_open_calls": self._probes_in_flight,
            }

    def reset(self) -> None:
        """Force CLOSED (admin and tests)."""
        with self._lock:
            self._set_state(CircuitState.CLOSED)


_circuit_breaker_registry: Dict[str, CircuitBreaker] = {}


def register_circuit_breaker(cb: CircuitBreaker) -> None:
    _circuit_breaker_registry[cb.name] = cb


def get_circuit_breaker(name: str) -> Optional[CircuitBreaker]:
    return _circuit_breaker_registry.get(name)


def get_all_circuit_breaker_stats() -> Dict[str, Dict[str, Any]]:
    return {name: cb.get_stats() for name, cb in _circuit_breaker_registry.items()}


def get_open_circuit_breakers() -> List[str]:
    return [
        name
        for name, cb in _circuit_breaker_registry.items()
        if cb.state == CircuitState.OPEN
    ]
