"""Tests for the upstream retry policy."""

from unittest.mock import AsyncMock

import httpx
import pytest

from lie_detector.infrastructure.http.retry import RetryConfig, RetryPolicy


def status_error(status_code: int) -> httpx.HTTPStatusError:
    """Create an HTTPStatusError with a proper request and response."""
    request = httpx.Request("GET", "https://upstream.test/resource")
    response = httpx.Response(status_code=status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


@pytest.fixture
def sleep():
    """Provide a sleep that returns immediately."""
    return AsyncMock()


@pytest.fixture
def policy(sleep) -> RetryPolicy:
    """Provide a policy with the default three attempts and no real waiting."""
    return RetryPolicy(RetryConfig(), sleep=sleep, name="Test")


@pytest.mark.asyncio
async def test_returns_first_success(policy, sleep):
    """Test that a successful call is not retried."""
    func = AsyncMock(return_value={"ok": True})

    assert await policy.call(func, "a", key="b") == {"ok": True}
    func.assert_awaited_once_with("a", key="b")
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_retries_transient_errors(policy, sleep):
    """Test that 429 and 503 are retried until success."""
    func = AsyncMock(side_effect=[status_error(429), status_error(503), "done"])

    assert await policy.call(func) == "done"
    assert func.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(policy, sleep):
    """Test that the last transient error is raised once attempts run out."""
    func = AsyncMock(side_effect=[status_error(503)] * 3)

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await policy.call(func)

    assert exc_info.value.response.status_code == 503
    assert func.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_permanent_errors_not_retried(policy, sleep):
    """Test that other status codes propagate immediately."""
    func = AsyncMock(side_effect=status_error(404))

    with pytest.raises(httpx.HTTPStatusError):
        await policy.call(func)

    func.assert_awaited_once()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_transport_errors_not_retried(policy, sleep):
    """Test that non-HTTP-status failures propagate immediately."""
    func = AsyncMock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(httpx.ConnectError):
        await policy.call(func)

    func.assert_awaited_once()
    sleep.assert_not_awaited()


def test_backoff_doubles_and_caps():
    """Test exponential backoff without jitter."""
    policy = RetryPolicy(RetryConfig(base_delay=1.0, max_delay=10.0, max_jitter=0.0))

    assert [policy.backoff_delay(n) for n in range(5)] == [1.0, 2.0, 4.0, 8.0, 10.0]


def test_backoff_jitter_bounded():
    """Test that jitter stays within its configured range."""
    policy = RetryPolicy(RetryConfig(base_delay=1.0, max_jitter=0.5))

    for _ in range(50):
        assert 1.0 <= policy.backoff_delay(0) <= 1.5


def test_is_transient():
    """Test which errors count as transient."""
    policy = RetryPolicy()

    assert policy.is_transient(status_error(429))
    assert policy.is_transient(status_error(503))
    assert not policy.is_transient(status_error(500))
    assert not policy.is_transient(ValueError("bad json"))
