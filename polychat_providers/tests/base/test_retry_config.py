from __future__ import annotations

import httpx
import pytest

from polychat_providers.base.cancellation import CancelledError
from polychat_providers.base.resilience import RetryConfig


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.test/x")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("err", request=request, response=response)


def test_default_backoff_schedule():
    cfg = RetryConfig()
    assert cfg.max_attempts == 4  # nosec B101
    assert list(cfg.delays()) == [1000, 2000, 4000]  # nosec B101


def test_delay_is_capped():
    cfg = RetryConfig(max_retries=6)
    assert cfg.delay_ms(3) == 8000  # nosec B101
    assert cfg.delay_ms(4) == 10000  # nosec B101
    assert list(cfg.delays())[-1] == 10000  # nosec B101


@pytest.mark.parametrize(
    "status, expected",
    [(408, True), (429, True), (500, True), (502, True), (503, True), (504, True),
     (400, False), (401, False), (403, False), (404, False)],
)
def test_status_retry_predicate(status, expected):
    assert RetryConfig().is_retryable(_status_error(status)) is expected  # nosec B101


def test_network_errors_are_retryable_and_cancellation_is_not():
    request = httpx.Request("GET", "https://api.test/x")
    cfg = RetryConfig()
    assert cfg.is_retryable(httpx.ConnectError("down", request=request))  # nosec B101
    assert cfg.is_retryable(httpx.ReadTimeout("slow", request=request))  # nosec B101
    assert not cfg.is_retryable(CancelledError("user abort"))  # nosec B101
    assert not cfg.is_retryable(ValueError("nope"))  # nosec B101
