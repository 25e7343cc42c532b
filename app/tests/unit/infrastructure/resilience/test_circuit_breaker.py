"""Unit tests for CircuitBreaker."""

import pytest

from infrastructure.operations import OperationResult
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
    get_all_circuit_breaker_stats,
    get_circuit_breaker,
    get_open_circuit_breakers,
    register_circuit_breaker,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _fail():
    raise RuntimeError("vendor down")


def _ok():
    return "ok"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker("test", failure_threshold=3, timeout_seconds=30, clock=clock)


@pytest.mark.unit
class TestCircuitBreakerStates:
    def test_opens_after_threshold(self, breaker):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(_ok)

    def test_success_resets_failure_count(self, breaker):
        for _ in range(2):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)
        breaker.call(_ok)
        for _ in range(2):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)

        assert breaker.state == CircuitState.CLOSED

    def test_half_open_after_timeout_then_closes(self, breaker, clock):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)

        clock.advance(30)

        assert breaker.call(_ok) == "ok"
        assert breaker.state == CircuitState.CLOSED

    def test_failed_probe_reopens(self, breaker, clock):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)
        clock.advance(31)

        with pytest.raises(RuntimeError):
            breaker.call(_fail)

        assert breaker.state == CircuitState.OPEN

    def test_is_failure_predicate_counts_return_values(self, clock):
        breaker = CircuitBreaker(
            "predicate",
            failure_threshold=2,
            is_failure=lambda r: not r.is_success,
            clock=clock,
        )
        failure = OperationResult.transient_error("503")

        assert breaker.call(lambda: failure) is failure
        breaker.call(lambda: failure)

        assert breaker.state == CircuitState.OPEN

    def test_reset(self, breaker):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)

        breaker.reset()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.get_stats()["failure_count"] == 0


@pytest.mark.unit
class TestCircuitBreakerRegistry:
    def test_register_and_stats(self, breaker):
        register_circuit_breaker(breaker)

        assert get_circuit_breaker("test") is breaker
        assert get_all_circuit_breaker_stats()["test"]["state"] == "closed"
        assert get_open_circuit_breakers() == []

    def test_open_breakers_listed(self, breaker):
        register_circuit_breaker(breaker)
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(_fail)

        assert get_open_circuit_breakers() == ["test"]

    def test_unknown_breaker(self):
        assert get_circuit_breaker("missing") is None
