from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field

from jsonclient.codec import decode_response, encode_request
from jsonclient.errors import DecodeError, EncodeError


class Search(BaseModel):
    query: str
    page_size: int = Field(alias="pageSize")


@dataclass
class Point:
    x: int
    y: int


def test_encode_uses_aliases_and_single_space_indent():
    body = encode_request(Search, Search(query="café", pageSize=10))

    assert body == '{\n "query": "café",\n "pageSize": 10\n}'.encode("utf-8")


def test_encode_dataclass():
    assert encode_request(Point, Point(1, 2)) == b'{\n "x": 1,\n "y": 2\n}'


def test_encode_rejects_none():
    with pytest.raises(EncodeError):
        encode_request(Point, None)


def test_encode_rejects_unserializable_value():
    with pytest.raises(EncodeError) as exc_info:
        encode_request(Point, object())

    assert isinstance(exc_info.value.__cause__, Exception)


def test_decode_dataclass():
    assert decode_response(Point, b'{"x": 3, "y": 4}') == Point(3, 4)


def test_decode_error_carries_raw_text():
    with pytest.raises(DecodeError) as exc_info:
        decode_response(Point, b"<html>502 Bad Gateway</html>")

    err = exc_info.value
    assert err.body == "<html>502 Bad Gateway</html>"
    assert str(err).endswith("; raw:<html>502 Bad Gateway</html>")


def test_decode_error_uses_declared_charset():
    with pytest.raises(DecodeError) as exc_info:
        decode_response(Point, "Fehler: ungültig".encode("latin-1"), "latin-1")

    assert exc_info.value.body == "Fehler: ungültig"
