import pytest
import pytest_asyncio
from pydantic import BaseModel, Field

from jsonclient import AsyncJsonClient, JsonClient

BASE_URL = "https://api.test"


class EchoRequest(BaseModel):
    in_1: str
    in_2: str


class EchoResponse(BaseModel):
    out1: str = Field(alias="out_1")
    out2: str = Field(alias="out_2")


@pytest.fixture
def echo_request():
    return EchoRequest(in_1="foo", in_2="bar")


@pytest.fixture
def client():
    c = JsonClient(EchoRequest, EchoResponse)
    # retries still happen, they just do not wait
    c.set_retry_wait_min(0)
    yield c
    c.close()


@pytest_asyncio.fixture
async def async_client():
    c = AsyncJsonClient(EchoRequest, EchoResponse)
    c.set_retry_wait_min(0)
    yield c
    await c.close()
