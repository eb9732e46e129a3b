import httpx

from .base_client import JsonBaseClient, Req, Res
from .errors import ReadError
from .transport import AsyncHttpTransport, HttpTransport


class JsonClient(JsonBaseClient[Req, Res]):
    """Blocking JSON client bound to one request type and one response type.

    Usage::

        client = JsonClient(EchoRequest, EchoResponse)
        client.add_header("Authorization", "Bearer ...")
        reply = client.post("https://api.example.com/echo", EchoRequest(in_1="foo"))
    """

    def __init__(
        self,
        request_type: type[Req],
        response_type: type[Res],
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(request_type, response_type)
        self._transport = HttpTransport(transport=transport)

    def get(self, url: str) -> Res:
        request, policy = self._prepare("GET", url)
        return self._execute(request, policy)

    def post(self, url: str, request: Req) -> Res:
        content = self._encode(request)
        http_request, policy = self._prepare("POST", url, content=content)
        return self._execute(http_request, policy)

    def post_stream(self, url: str, request: Req) -> Res:
        """Same as :meth:`post`.

        Placeholder for incremental decoding; the body is still read in full
        before it is decoded.
        """
        return self.post(url, request)

    def _execute(self, request: httpx.Request, policy) -> Res:
        response = self._transport.send(request, policy)
        try:
            body = response.read()
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise ReadError(str(request.url), str(e)) from e
        finally:
            response.close()

        return self._decode(body, response.encoding or "utf-8")

    def close(self):
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class AsyncJsonClient(JsonBaseClient[Req, Res]):
    def __init__(
        self,
        request_type: type[Req],
        response_type: type[Res],
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(request_type, response_type)
        self._transport = AsyncHttpTransport(transport=transport)

    async def get(self, url: str) -> Res:
        request, policy = self._prepare("GET", url)
        return await self._execute(request, policy)

    async def post(self, url: str, request: Req) -> Res:
        content = self._encode(request)
        http_request, policy = self._prepare("POST", url, content=content)
        return await self._execute(http_request, policy)

    async def post_stream(self, url: str, request: Req) -> Res:
        """Same as :meth:`post`.

        Placeholder for incremental decoding; the body is still read in full
        before it is decoded.
        """
        return await self.post(url, request)

    async def _execute(self, request: httpx.Request, policy) -> Res:
        response = await self._transport.send(request, policy)
        try:
            body = await response.aread()
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise ReadError(str(request.url), str(e)) from e
        finally:
            await response.aclose()

        return self._decode(body, response.encoding or "utf-8")

    async def close(self):
        await self._transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
