import httpx
import pytest
import respx
from httpx import Response

from conftest import BASE_URL, EchoRequest, EchoResponse
from jsonclient import AsyncJsonClient, DecodeError, ReadError, TransportError

ECHO_URL = f"{BASE_URL}/echo"


@pytest.mark.asyncio
async def test_post_echo(async_client, echo_request):
    with respx.mock:
        route = respx.post(ECHO_URL).mock(
            return_value=Response(200, text='{"out_1":"foo","out_2":"bar"}')
        )
        result = await async_client.post(ECHO_URL, echo_request)

    assert result == EchoResponse(out_1="foo", out_2="bar")
    assert route.calls.last.request.content == b'{\n "in_1": "foo",\n "in_2": "bar"\n}'


@pytest.mark.asyncio
async def test_post_stream_behaves_like_post(async_client, echo_request):
    with respx.mock:
        respx.post(ECHO_URL).mock(
            return_value=Response(200, json={"out_1": "foo", "out_2": "bar"})
        )
        result = await async_client.post_stream(ECHO_URL, echo_request)

    assert result.out2 == "bar"


@pytest.mark.asyncio
async def test_server_error_exhausts_retries(async_client, echo_request):
    async_client.set_retries(2)

    with respx.mock:
        route = respx.post(ECHO_URL).mock(
            return_value=Response(500, text="Internal Server Error")
        )

        with pytest.raises(TransportError) as exc_info:
            await async_client.post(ECHO_URL, echo_request)

    assert route.call_count == 3
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_invalid_json(async_client):
    with respx.mock:
        respx.get(ECHO_URL).mock(return_value=Response(200, text="not a json"))

        with pytest.raises(DecodeError) as exc_info:
            await async_client.get(ECHO_URL)

    assert "raw:not a json" in str(exc_info.value)


@pytest.mark.asyncio
async def test_connection_failure_is_retried(async_client):
    async_client.set_retries(1)

    with respx.mock:
        route = respx.get(ECHO_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError):
            await async_client.get(ECHO_URL)

    assert route.call_count == 2


@pytest.mark.asyncio
async def test_added_headers_are_sent(async_client):
    async_client.add_header("Authorization", "Bearer token")

    with respx.mock:
        route = respx.get(ECHO_URL).mock(
            return_value=Response(200, json={"out_1": "foo", "out_2": "bar"})
        )
        await async_client.get(ECHO_URL)

    assert route.calls.last.request.headers["Authorization"] == "Bearer token"


class BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b'{"out_1":'
        raise httpx.ReadError("connection reset by peer")


@pytest.mark.asyncio
async def test_read_failure_is_read_error():
    transport = httpx.MockTransport(lambda request: Response(200, stream=BrokenStream()))

    async with AsyncJsonClient(EchoRequest, EchoResponse, transport=transport) as client:
        with pytest.raises(ReadError):
            await client.get(ECHO_URL)
