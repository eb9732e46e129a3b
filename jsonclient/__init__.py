from .client import AsyncJsonClient, JsonClient
from .base_client import JsonBaseClient
from .retry import RetryPolicy
from .logging_setup import setup_logging
from .transport import AsyncHttpTransport, HttpTransport
from .errors import (
    ClientError,
    InvalidURLError,
    RequestError,
    TransportError,
    ReadError,
    DecodeError,
    EncodeError,
)

__all__ = [
    "JsonClient",
    "AsyncJsonClient",
    "JsonBaseClient",
    "RetryPolicy",
    "setup_logging",
    "HttpTransport",
    "AsyncHttpTransport",
    "ClientError",
    "InvalidURLError",
    "RequestError",
    "TransportError",
    "ReadError",
    "DecodeError",
    "EncodeError",
]
