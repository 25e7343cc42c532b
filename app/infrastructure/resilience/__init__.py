"""Circuit breakers for the vendor transports.

Each channel sender gets its own breaker so an outage at one vendor skips
that channel immediately and delivery fails over to the next one.
"""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
    get_all_circuit_breaker_stats,
    get_circuit_breaker,
    get_open_circuit_breakers,
    register_circuit_breaker,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    "get_all_circuit_breaker_stats",
    "get_circuit_breaker",
    "get_open_circuit_breakers",
    "register_circuit_breaker",
]
