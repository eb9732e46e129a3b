import ssl
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx
from pydantic import BaseModel, ConfigDict, Field

# exponents beyond this always hit the ceiling
_MAX_EXPONENT = 62

_UNRECOVERABLE_ERRORS = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.TooManyRedirects,
)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given either as seconds or as an HTTP date."""
    if not value:
        return None

    value = value.strip()
    if value.isascii() and value.isdigit():
        return float(value)

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)


def _caused_by_certificate_failure(error: BaseException) -> bool:
    seen = set()
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        if isinstance(cause, ssl.SSLCertVerificationError):
            return True
        seen.add(id(cause))
        cause = cause.__cause__ or cause.__context__
    return False


def is_retryable_error(error: Exception) -> bool:
    if isinstance(error, _UNRECOVERABLE_ERRORS):
        return False
    if isinstance(error, httpx.ConnectError) and _caused_by_certificate_failure(error):
        return False
    return isinstance(error, httpx.TransportError)


def is_retryable_status(status_code: int) -> bool:
    if status_code == 429:
        return True
    # 501 is a permanent answer
    return status_code == 0 or (status_code >= 500 and status_code != 501)


class RetryPolicy(BaseModel):
    """How many times a request is retried and how long to wait in between.

    Waits grow exponentially from ``retry_wait_min`` and never exceed
    ``retry_wait_max``, except when a 429/503 response carries a
    ``Retry-After`` header, which is honoured as is.
    """

    model_config = ConfigDict(validate_assignment=True)

    retry_max: int = Field(default=3, ge=0)
    retry_wait_min: float = Field(default=1.0, ge=0)
    retry_wait_max: float = Field(default=30.0, ge=0)

    @property
    def max_attempts(self) -> int:
        return self.retry_max + 1

    def should_retry(
        self,
        *,
        response: httpx.Response | None = None,
        error: Exception | None = None,
    ) -> bool:
        if error is not None:
            return is_retryable_error(error)
        if response is None:
            return False
        return is_retryable_status(response.status_code)

    def backoff(self, attempt: int, response: httpx.Response | None = None) -> float:
        if response is not None and response.status_code in (429, 503):
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if retry_after is not None:
                return retry_after

        if attempt > _MAX_EXPONENT:
            return self.retry_wait_max
        return min(self.retry_wait_min * (2 ** attempt), self.retry_wait_max)
