import asyncio
import time

import httpx
import structlog

from .errors import TransportError
from .retry import RetryPolicy

logger = structlog.get_logger(__name__)

# no overall deadline, only a bound on establishing the connection
DEFAULT_TIMEOUT = httpx.Timeout(None, connect=30.0)


def _give_up(
    request: httpx.Request,
    policy: RetryPolicy,
    *,
    status_code: int | None = None,
    body: str | None = None,
) -> TransportError:
    attempts = policy.max_attempts
    logger.error(
        "HTTP request failed after all retries",
        method=request.method,
        url=str(request.url),
        attempts=attempts,
        status_code=status_code,
    )
    message = f"{request.method} {request.url} giving up after {attempts} attempt(s)"
    if status_code is not None:
        message += f": last status {status_code}"
    return TransportError(
        message,
        url=str(request.url),
        attempts=attempts,
        status_code=status_code,
        body=body,
    )


def _not_retryable(request: httpx.Request, attempt: int, exc: Exception) -> TransportError:
    return TransportError(
        f"error sending request: {exc}",
        url=str(request.url),
        attempts=attempt + 1,
    )


def _log_retry(
    request: httpx.Request,
    policy: RetryPolicy,
    attempt: int,
    wait: float,
    *,
    response: httpx.Response | None,
    error: Exception | None,
) -> None:
    logger.warning(
        "HTTP request failed, retrying",
        method=request.method,
        url=str(request.url),
        attempt=attempt + 1,
        max_attempts=policy.max_attempts,
        status_code=response.status_code if response is not None else None,
        error=str(error) if error is not None else None,
        backoff_seconds=wait,
    )


class HttpTransport:
    """Blocking httpx client that retries transient failures."""

    def __init__(self, *, transport: httpx.BaseTransport | None = None):
        self._client = httpx.Client(
            timeout=DEFAULT_TIMEOUT,
            follow_redirects=True,
            transport=transport,
        )

    def build_request(
        self,
        method: str,
        url: httpx.URL,
        *,
        headers: dict[str, str],
        content: bytes | None = None,
    ) -> httpx.Request:
        return self._client.build_request(method, url, headers=headers, content=content)

    def send(self, request: httpx.Request, policy: RetryPolicy) -> httpx.Response:
        """Send ``request`` until it succeeds or ``policy`` gives up.

        The returned response is unread; the caller must close it.
        """
        last_error: Exception | None = None

        attempt = 0
        while True:
            logger.debug(
                "Making HTTP request",
                method=request.method,
                url=str(request.url),
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
            )
            response = None
            try:
                response = self._client.send(request, stream=True)
            except httpx.RequestError as e:
                if not policy.should_retry(error=e):
                    raise _not_retryable(request, attempt, e) from e
                last_error = e
            else:
                logger.debug(
                    "HTTP response received",
                    method=request.method,
                    url=str(request.url),
                    status_code=response.status_code,
                )
                if not policy.should_retry(response=response):
                    return response
                last_error = None

            if attempt + 1 == policy.max_attempts:
                if response is None:
                    raise _give_up(request, policy) from last_error
                try:
                    body = response.read().decode("utf-8", errors="replace")
                except (httpx.HTTPError, httpx.StreamError):
                    body = None
                finally:
                    response.close()
                raise _give_up(request, policy, status_code=response.status_code, body=body)

            if response is not None:
                response.close()
            wait = policy.backoff(attempt, response)
            _log_retry(request, policy, attempt, wait, response=response, error=last_error)
            time.sleep(wait)
            attempt += 1

    def close(self):
        self._client.close()


class AsyncHttpTransport:
    """asyncio flavour of :class:`HttpTransport`."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(
            timeout=DEFAULT_TIMEOUT,
            follow_redirects=True,
            transport=transport,
        )

    def build_request(
        self,
        method: str,
        url: httpx.URL,
        *,
        headers: dict[str, str],
        content: bytes | None = None,
    ) -> httpx.Request:
        return self._client.build_request(method, url, headers=headers, content=content)

    async def send(self, request: httpx.Request, policy: RetryPolicy) -> httpx.Response:
        last_error: Exception | None = None

        attempt = 0
        while True:
            logger.debug(
                "Making HTTP request",
                method=request.method,
                url=str(request.url),
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
            )
            response = None
            try:
                response = await self._client.send(request, stream=True)
            except httpx.RequestError as e:
                if not policy.should_retry(error=e):
                    raise _not_retryable(request, attempt, e) from e
                last_error = e
            else:
                logger.debug(
                    "HTTP response received",
                    method=request.method,
                    url=str(request.url),
                    status_code=response.status_code,
                )
                if not policy.should_retry(response=response):
                    return response
                last_error = None

            if attempt + 1 == policy.max_attempts:
                if response is None:
                    raise _give_up(request, policy) from last_error
                try:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                except (httpx.HTTPError, httpx.StreamError):
                    body = None
                finally:
                    await response.aclose()
                raise _give_up(request, policy, status_code=response.status_code, body=body)

            if response is not None:
                await response.aclose()
            wait = policy.backoff(attempt, response)
            _log_retry(request, policy, attempt, wait, response=response, error=last_error)
            await asyncio.sleep(wait)
            attempt += 1

    async def close(self):
        await self._client.aclose()
