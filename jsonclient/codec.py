import json
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import DecodeError, EncodeError


@lru_cache(maxsize=None)
def _adapter(payload_type: Any) -> TypeAdapter:
    return TypeAdapter(payload_type)


def encode_request(request_type: Any, request: Any) -> bytes:
    """Serialize ``request`` to single-space indented UTF-8 JSON."""
    if request is None:
        raise EncodeError("request must not be None")

    try:
        payload = _adapter(request_type).dump_python(
            request,
            mode="json",
            by_alias=True,
            warnings="error",
        )
        text = json.dumps(payload, indent=1, ensure_ascii=False, allow_nan=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError(str(e)) from e

    return text.encode("utf-8")


def decode_response(response_type: Any, body: bytes, encoding: str = "utf-8") -> Any:
    """Validate ``body`` as JSON of ``response_type``.

    On failure the body, decoded with the charset the server declared, is
    quoted verbatim in the error.
    """
    try:
        return _adapter(response_type).validate_json(body)
    except ValidationError as e:
        raise DecodeError(str(e), body.decode(encoding, errors="replace")) from e
