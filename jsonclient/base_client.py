from datetime import timedelta
from threading import Lock
from typing import Any, Generic, TypeVar

import httpx

from .codec import decode_response, encode_request
from .errors import InvalidURLError, RequestError
from .retry import RetryPolicy

Req = TypeVar("Req")
Res = TypeVar("Res")

DEFAULT_HEADERS = {"Content-Type": "application/json"}


def parse_url(url: str) -> httpx.URL:
    try:
        return httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURLError(url, str(e)) from e


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


class JsonBaseClient(Generic[Req, Res]):
    """Configuration and request plumbing shared by the sync and async clients.

    Headers and the retry policy may be changed at any time; every call works
    on a snapshot taken when it starts, so changes made from another thread
    apply to the next call and never to one already in flight.
    """

    _transport: Any

    def __init__(self, request_type: type[Req], response_type: type[Res]):
        self.request_type = request_type
        self.response_type = response_type
        self._headers = dict(DEFAULT_HEADERS)
        self._retry_policy = RetryPolicy()
        self._lock = Lock()

    @property
    def headers(self) -> dict[str, str]:
        with self._lock:
            return dict(self._headers)

    @property
    def retry_policy(self) -> RetryPolicy:
        with self._lock:
            return self._retry_policy.model_copy()

    def set_timeout(self, timeout: float | timedelta):
        """Set the longest wait between two retries.

        Kept under its historical name: this is *not* a request deadline, it
        is the same setting as :meth:`set_retry_wait_max`.
        """
        self.set_retry_wait_max(timeout)

    def set_retry_wait_max(self, wait: float | timedelta):
        with self._lock:
            self._retry_policy.retry_wait_max = _seconds(wait)

    def set_retry_wait_min(self, wait: float | timedelta):
        with self._lock:
            self._retry_policy.retry_wait_min = _seconds(wait)

    def set_retries(self, retries: int):
        with self._lock:
            self._retry_policy.retry_max = retries

    def add_header(self, key: str, value: str):
        """Set a header, replacing any existing value under the same name.

        Names compare case-insensitively, so only one value goes on the wire.
        """
        with self._lock:
            for existing in [k for k in self._headers if k.lower() == key.lower()]:
                del self._headers[existing]
            self._headers[key] = value

    def _encode(self, request: Req) -> bytes:
        return encode_request(self.request_type, request)

    def _decode(self, body: bytes, encoding: str) -> Res:
        return decode_response(self.response_type, body, encoding)

    def _prepare(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
    ) -> tuple[httpx.Request, RetryPolicy]:
        target = parse_url(url)

        with self._lock:
            headers = dict(self._headers)
            policy = self._retry_policy.model_copy()

        try:
            request = self._transport.build_request(
                method,
                target,
                headers=headers,
                content=content,
            )
        except (TypeError, ValueError, httpx.HTTPError) as e:
            raise RequestError(str(target), str(e)) from e

        return request, policy
