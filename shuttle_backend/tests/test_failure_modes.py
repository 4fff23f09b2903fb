"""
Failure Injection Tests.

Validates resilience of notification against SMS provider failures.
"""

import time

import pytest

from shuttle_backend.app.core.reliability import CircuitBreaker, CircuitOpenError
from shuttle_backend.app.services.sms_gateway import SmsGateway


async def failing_func():
    raise ValueError("Boom")


async def working_func():
    return "ok"


@pytest.mark.asyncio
async def test_circuit_breaker_activates():
    """Test that circuit breaker opens after threshold failures."""
    cb = CircuitBreaker(failure_threshold=2, reset_timeout=60)

    # Fail 1
    with pytest.raises(ValueError):
        await cb.call(failing_func)
    assert cb.state == CircuitBreaker.CLOSED

    # Fail 2 (Threshold reached)
    with pytest.raises(ValueError):
        await cb.call(failing_func)
    assert cb.state == CircuitBreaker.OPEN

    # Call 3 is rejected without reaching the function
    with pytest.raises(CircuitOpenError):
        await cb.call(working_func)


@pytest.mark.asyncio
async def test_success_resets_failure_count():
    cb = CircuitBreaker(failure_threshold=2, reset_timeout=60)

    with pytest.raises(ValueError):
        await cb.call(failing_func)
    assert await cb.call(working_func) == "ok"
    with pytest.raises(ValueError):
        await cb.call(failing_func)

    assert cb.state == CircuitBreaker.CLOSED
    assert cb.failures == 1


@pytest.mark.asyncio
async def test_half_open_recovers_after_timeout():
    cb = CircuitBreaker(failure_threshold=1, reset_timeout=10)

    with pytest.raises(ValueError):
        await cb.call(failing_func)
    assert cb.state == CircuitBreaker.OPEN

    # Pretend the timeout elapsed
    cb.last_failure_time -= 11
    assert await cb.call(working_func) == "ok"
    assert cb.state == CircuitBreaker.CLOSED


@pytest.mark.asyncio
async def test_half_open_failure_reopens():
    cb = CircuitBreaker(failure_threshold=3, reset_timeout=10)
    cb.state = CircuitBreaker.OPEN
    cb.last_failure_time = time.monotonic() - 11

    with pytest.raises(ValueError):
        await cb.call(failing_func)

    assert cb.state == CircuitBreaker.OPEN


@pytest.mark.asyncio
async def test_open_circuit_does_not_break_notify(client, seeded, sms_gateway, monkeypatch):
    """An open circuit marks sends as failed; the request itself succeeds."""
    from shuttle_backend.app.core.reliability import sms_circuit_breaker

    monkeypatch.setattr(sms_circuit_breaker, "state", CircuitBreaker.OPEN)
    monkeypatch.setattr(sms_circuit_breaker, "last_failure_time", float("inf"))
    await client.put("/v1/dispatch/trips/2024-05-01/08:00/assignment", json={"vehicleId": 4, "driverId": 1})

    response = await client.post("/v1/dispatch/trips/2024-05-01/08:00/notify")

    assert response.status_code == 200
    data = response.json()
    assert (data["recipients"], data["failed"], data["notified"]) == (0, 3, False)
    assert sms_gateway.sent == []

    # Once the provider is back the dispatcher can retry
    monkeypatch.setattr(sms_circuit_breaker, "state", CircuitBreaker.CLOSED)
    retry = await client.post("/v1/dispatch/trips/2024-05-01/08:00/notify")
    assert retry.json()["notified"] is True


def test_gateway_without_send_cannot_be_built():
    class SilentGateway(SmsGateway):
        pass

    with pytest.raises(TypeError):
        SilentGateway()
