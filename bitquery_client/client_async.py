"""
Async Bitquery Client Class responsible for posting GraphQL queries
Framework built on Bitquery's API Documentation
https://docs.bitquery.io/docs/start/first-query/
"""

from __future__ import annotations

import asyncio
import ssl
from typing import TYPE_CHECKING, Any, Self

import certifi
from aiohttp import (
    ClientError,
    ClientResponse,
    ClientSession,
    ClientTimeout,
    InvalidURL,
    TCPConnector,
)

from bitquery_client.api.base import DEFAULT_REQUEST_TIMEOUT, BaseBitqueryClient
from bitquery_client.models import (
    RequestConstructionError,
    ResponseReadError,
    TransportError,
    decode_response,
)

if TYPE_CHECKING:
    from bitquery_client.query import QueryDescriptor


class AsyncBitqueryClient(BaseBitqueryClient):
    """
    An asynchronous interface for Bitquery API

    Must be used as an async context manager:
        async with AsyncBitqueryClient(api_key) as client:
            data = await client.execute_and_decode(query)
    """

    def __init__(
        self,
        api_key: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        connection_limit: int = 3,
    ):
        """
        api_key - Bitquery API key
        connection_limit - number of parallel requests to execute.
        """
        super().__init__(api_key, request_timeout)
        self._connection_limit = connection_limit
        self._session: ClientSession | None = None

    async def __aenter__(self) -> Self:
        if self._session is not None:
            raise RuntimeError("AsyncBitqueryClient session already active")
        await self.connect()
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        await self.disconnect()

    async def connect(self) -> None:
        if self._session is not None:
            raise RuntimeError("AsyncBitqueryClient session already active")
        self._session = self._create_session()

    async def disconnect(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _create_session(self) -> ClientSession:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = TCPConnector(limit=self._connection_limit, ssl=ssl_context)
        return ClientSession(
            connector=connector,
            timeout=ClientTimeout(total=self.request_timeout),
        )

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError(
                "AsyncBitqueryClient has no active session, use `async with` or call connect()"
            )
        return self._session

    async def _read_body(self, response: ClientResponse) -> bytes:
        async with response:
            self.logger.debug(f"received status {response.status} from {response.url}")
            try:
                return await response.read()
            except asyncio.TimeoutError as err:
                raise TransportError(f"the HTTP request timed out: {err}") from err
            except ClientError as err:
                raise ResponseReadError(f"failed reading response body: {err}") from err

    async def _post(self, url: str, body: bytes) -> bytes:
        session = self._require_session()
        self.logger.debug(f"POST received input url={url}, body={body!r}")
        try:
            response = await session.post(url, data=body, headers=self.default_headers())
        except InvalidURL as err:
            raise RequestConstructionError(f"bad request: {err}") from err
        except (ClientError, asyncio.TimeoutError) as err:
            raise TransportError(f"the HTTP request failed with error {err}") from err
        return await self._read_body(response)

    async def execute(self, query: QueryDescriptor) -> bytes:
        """POST `query` to its endpoint and return the response body as bytes"""
        body = self._request_body(query)
        url = self._endpoint(query)
        return await self._post(url, body)

    async def execute_and_decode(self, query: QueryDescriptor, target: Any = None) -> Any:
        """Executes `query` and decodes the `data` field of the response into `target`"""
        body = await self.execute(query)
        self.logger.debug(f"decoding {len(body)} bytes from {query.endpoint()}")
        return decode_response(body, target)
