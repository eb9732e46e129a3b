class ClientError(Exception):
    """Base class for every error raised by jsonclient."""


class InvalidURLError(ClientError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"invalid url {url}: {reason}")
        self.url = url


class RequestError(ClientError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"error creating http request for {url!r}: {reason}")
        self.url = url


class TransportError(ClientError):
    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        attempts: int = 0,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.attempts = attempts
        self.status_code = status_code
        self.body = body


class ReadError(ClientError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"read error: {reason}")
        self.url = url


class DecodeError(ClientError):
    def __init__(self, reason: str, body: str):
        # message carries the raw body verbatim
        super().__init__(f"decode error: {reason}; raw:{body}")
        self.body = body


class EncodeError(ClientError):
    def __init__(self, reason: str):
        super().__init__(f"error json-encoding request: {reason}")
