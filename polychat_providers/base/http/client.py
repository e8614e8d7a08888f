"""Async HTTP client with timeout, interceptors and retry/backoff.

Purpose:
    Execute provider REST calls with one uniform policy regardless of the
    backend: per-request timeout, header injection through interceptors, and
    exponential-backoff retries for transient failures.

External dependencies:
    - ``httpx.AsyncClient`` for I/O. Tests inject ``httpx.MockTransport``.

Retry semantics:
    - Retryable: no response (``httpx.TransportError``, timeouts included) or
      a status in ``RetryConfig.retryable_statuses``. Everything else is
      terminal on the first attempt.
    - Before retry ``n + 1`` the client awaits ``RetryConfig.delay_ms(n)``.
      The request is rebuilt from the same method, path, body and headers.
    - ``stream`` retries only while opening the response; once the body is
      being consumed a failure is terminal.
    - A cancelled token stops the loop and interrupts an in-flight send or
      backoff sleep; aborted requests are never retried.

Failure modes:
    - Terminal or exhausted failures raise :class:`HttpRequestError` chained
      from the last ``httpx`` error.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

import httpx

from ..cancellation import CancellationToken
from ..errors import HttpRequestError, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from ..resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig
from ..timeouts import get_timeout_config
from .interceptors import RequestInterceptor, ResponseInterceptor

Sleep = Callable[[float], Awaitable[None]]
T = TypeVar("T")

# Query parameters that may carry credentials; stripped from logs and errors.
_SECRET_PARAMS = ("key", "api_key")


def _redact(url: httpx.URL) -> str:
    for param in _SECRET_PARAMS:
        if param in url.params:
            url = url.copy_remove_param(param)
    return str(url)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort human message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:500] if text else response.reason_phrase
    if isinstance(body, list) and body:
        body = body[0]
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict):
            message = err.get("message") or err.get("detail")
            if message:
                return str(message)
        elif isinstance(err, str):
            return err
        if body.get("message"):
            return str(body["message"])
    return response.reason_phrase


class HttpRetryClient:
    """Async request executor with interceptors and retry/backoff."""

    def __init__(
        self,
        *,
        base_url: str = "",
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        retry: RetryConfig = DEFAULT_RETRY_CONFIG,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
        log_context: Optional[LogContext] = None,
    ) -> None:
        if timeout is None:
            timeout = get_timeout_config().http_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._retry = retry
        self._sleep = sleep
        self._logger = logger or get_logger("polychat.http")
        self._ctx = log_context
        self._handles = itertools.count(1)
        self._request_interceptors: Dict[int, RequestInterceptor] = {}
        self._response_interceptors: Dict[int, ResponseInterceptor] = {}
        self.last_attempts = 0

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    # ---- interceptors ---------------------------------------------------
    def add_request_interceptor(self, interceptor: RequestInterceptor) -> int:
        handle = next(self._handles)
        self._request_interceptors[handle] = interceptor
        return handle

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> int:
        handle = next(self._handles)
        self._response_interceptors[handle] = interceptor
        return handle

    def remove_interceptor(self, handle: int) -> None:
        self._request_interceptors.pop(handle, None)
        self._response_interceptors.pop(handle, None)

    def clear_interceptors(self) -> None:
        """Revoke every registered request and response interceptor."""
        self._request_interceptors.clear()
        self._response_interceptors.clear()

    # ---- requests -------------------------------------------------------
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> httpx.Response:
        """Send a request and return the fully read, successful response."""
        return await self._send(
            method, path, json=json, params=params, headers=headers,
            stream=False, token=cancellation_token,
        )

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        response = await self.request("GET", path, **kwargs)
        return response.json()

    async def post_json(self, path: str, body: Any, **kwargs: Any) -> Any:
        response = await self.request("POST", path, json=body, **kwargs)
        return response.json()

    @asynccontextmanager
    async def stream(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming response (retrying the open) and close it on exit."""
        response = await self._send(
            method, path, json=json, params=params, headers=headers,
            stream=True, token=cancellation_token,
        )
        try:
            yield response
        finally:
            await response.aclose()

    def _build_request(
        self,
        method: str,
        path: str,
        *,
        json: Any,
        params: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
    ) -> httpx.Request:
        request = self._client.build_request(
            method, path, json=json, params=params, headers=headers
        )
        for interceptor in list(self._request_interceptors.values()):
            replaced = interceptor(request)
            if replaced is not None:
                request = replaced
        return request

    @staticmethod
    async def _guarded(awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
        if token is None:
            return await awaitable
        return await token.run_until_cancelled(awaitable)

    async def _attempt(self, request: httpx.Request, stream: bool) -> httpx.Response:
        response = await self._client.send(request, stream=stream)
        for interceptor in list(self._response_interceptors.values()):
            interceptor(response)
        if response.is_error:
            if stream:
                await response.aread()
                await response.aclose()
            response.raise_for_status()
        return response

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any,
        params: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
        stream: bool,
        token: Optional[CancellationToken],
    ) -> httpx.Response:
        config = self._retry
        attempt = 0
        while True:
            if token is not None:
                token.raise_if_cancelled()
            request = self._build_request(method, path, json=json, params=params, headers=headers)
            url = _redact(request.url)
            self.last_attempts = attempt + 1
            normalized_log_event(
                self._logger, "http.request", self._ctx,
                phase="request", attempt=attempt + 1, method=request.method, url=url,
                level=logging.DEBUG,
            )
            try:
                response = await self._guarded(self._attempt(request, stream), token)
            except (httpx.HTTPStatusError, httpx.TransportError) as exc:
                retryable = config.is_retryable(exc)
                exhausted = attempt >= config.max_retries
                delay_ms = config.delay_ms(attempt) if retryable and not exhausted else None
                normalized_log_event(
                    self._logger, "http.failure", self._ctx,
                    phase="request", attempt=attempt + 1,
                    error_code=classify_exception(exc).value,
                    method=request.method, url=url,
                    status=exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None,
                    retryable=retryable, delay_ms=delay_ms,
                    level=logging.WARNING,
                )
                if config.attempt_logger is not None:
                    config.attempt_logger(
                        attempt=attempt, max_attempts=config.max_attempts,
                        delay_ms=delay_ms, error=exc,
                    )
                if delay_ms is None:
                    raise self._enrich(exc, request, attempt + 1) from exc
                await self._guarded(self._sleep(delay_ms / 1000.0), token)
                attempt += 1
                continue
            normalized_log_event(
                self._logger, "http.response", self._ctx,
                phase="response", attempt=attempt + 1, method=request.method, url=url,
                status=response.status_code, level=logging.DEBUG,
            )
            if config.attempt_logger is not None:
                config.attempt_logger(
                    attempt=attempt, max_attempts=config.max_attempts, delay_ms=None, error=None,
                )
            return response

    @staticmethod
    def _enrich(exc: httpx.HTTPError, request: httpx.Request, attempts: int) -> HttpRequestError:
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            return HttpRequestError(
                status=response.status_code,
                status_text=response.reason_phrase,
                detail=_error_detail(response),
                method=request.method,
                url=_redact(request.url),
                attempts=attempts,
                original=exc,
            )
        return HttpRequestError(
            status=None,
            status_text=type(exc).__name__,
            detail=str(exc) or "no response received",
            method=request.method,
            url=_redact(request.url),
            attempts=attempts,
            original=exc,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpRetryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["HttpRetryClient"]
