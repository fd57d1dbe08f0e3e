"""
Basic Bitquery Client Class responsible for posting GraphQL queries
Framework built on Bitquery's API Documentation
https://docs.bitquery.io/docs/start/first-query/
"""

from __future__ import annotations

import json
import logging.config
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import requests
from requests import Response, Session
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ReadTimeoutError

from bitquery_client.models import (
    RequestConstructionError,
    ResponseReadError,
    SerializationError,
    TransportError,
)
from bitquery_client.query import request_format
from bitquery_client.util import get_package_version, is_valid_endpoint

if TYPE_CHECKING:
    from bitquery_client.query import QueryDescriptor

# Every request is aborted after this many seconds
DEFAULT_REQUEST_TIMEOUT = 40.0
API_KEY_HEADER = "X-API-KEY"

_shared_session: Session | None = None
_shared_session_lock = threading.Lock()
_exchanges: ThreadPoolExecutor | None = None
_exchanges_lock = threading.Lock()


def shared_session() -> Session:
    """
    Process wide Session reused by all clients that don't bring their own.
    Requests are never retried, the adapter only pools connections.
    """
    global _shared_session  # pylint: disable=global-statement
    with _shared_session_lock:
        if _shared_session is None:
            adapter = HTTPAdapter(max_retries=0)
            session = Session()
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            _shared_session = session
        return _shared_session


def _exchange_pool() -> ThreadPoolExecutor:
    """Worker threads running request exchanges, so callers can wait with a deadline"""
    global _exchanges  # pylint: disable=global-statement
    with _exchanges_lock:
        if _exchanges is None:
            _exchanges = ThreadPoolExecutor(max_workers=32, thread_name_prefix="bitquery-client")
        return _exchanges


class BaseBitqueryClient:
    """
    A Base Client for Bitquery which sets up default values
    and provides some convenient functions to use in other clients
    """

    def __init__(
        self,
        api_key: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.token = api_key
        self.request_timeout = request_timeout
        self.logger = logging.getLogger(__name__)

    def default_headers(self) -> dict[str, str]:
        """Return default headers containing Bitquery Api key"""
        client_version = get_package_version("bitquery-client") or "0.1.0"
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.token,
            "User-Agent": f"bitquery-client/{client_version}",
        }

    ############
    # Utilities:
    ############

    @staticmethod
    def _request_body(query: QueryDescriptor) -> bytes:
        """
        JSON body posted for `query`. Variable names must be strings so
        that serialization can't collapse two keys into one.
        """
        payload = request_format(query)
        variables: dict[Any, Any] = payload["variables"]
        bad_keys = [key for key in variables if not isinstance(key, str)]
        if bad_keys:
            raise SerializationError(f"variable names must be strings, got {bad_keys!r}")
        try:
            return json.dumps(payload, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as err:
            raise SerializationError(f"variables are not JSON serializable: {err}") from err

    @staticmethod
    def _endpoint(query: QueryDescriptor) -> str:
        url = query.endpoint()
        if not is_valid_endpoint(url):
            raise RequestConstructionError(f"bad request: invalid endpoint {url!r}")
        return str(url)


class BaseRouter(BaseBitqueryClient):
    """Extending the Base Client with the single POST route GraphQL needs"""

    def __init__(
        self,
        api_key: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Session | None = None,
    ):
        super().__init__(api_key, request_timeout)
        self.http = session if session is not None else shared_session()

    def _read_body(self, response: Response) -> bytes:
        """Reads the whole body, whatever the status code. Always closes the response."""
        with response:
            self.logger.debug(f"received status {response.status_code} from {response.url}")
            try:
                return response.content
            except requests.exceptions.ConnectionError as err:
                # requests wraps read timeouts on streamed bodies in a ConnectionError
                if err.args and isinstance(err.args[0], ReadTimeoutError):
                    raise TransportError(f"the HTTP request timed out: {err}") from err
                raise ResponseReadError(f"failed reading response body: {err}") from err
            except (
                requests.exceptions.ChunkedEncodingError,
                requests.exceptions.ContentDecodingError,
                requests.exceptions.StreamConsumedError,
            ) as err:
                raise ResponseReadError(f"failed reading response body: {err}") from err

    def _exchange(self, url: str, body: bytes, pending: list[Response]) -> bytes:
        """Sends the request and reads the body. `pending` exposes the response for aborts."""
        try:
            response = self.http.post(
                url=url,
                data=body,
                headers=self.default_headers(),
                timeout=self.request_timeout,
                stream=True,
            )
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ) as err:
            raise RequestConstructionError(f"bad request: {err}") from err
        except requests.exceptions.RequestException as err:
            raise TransportError(f"the HTTP request failed with error {err}") from err
        pending.append(response)
        return self._read_body(response)

    def _post(self, url: str, body: bytes) -> bytes:
        """
        Generic interface for the POST method of a Bitquery API request.
        requests only bounds single socket reads, so the whole exchange runs
        on a worker and is abandoned once `request_timeout` has elapsed.
        """
        self.logger.debug(f"POST received input url={url}, body={body!r}")
        deadline = time.monotonic() + self.request_timeout
        pending: list[Response] = []
        future = _exchange_pool().submit(self._exchange, url, body, pending)
        try:
            return future.result(timeout=max(deadline - time.monotonic(), 0))
        except TimeoutError as err:
            future.cancel()
            for response in pending:
                response.close()
            raise TransportError(
                f"the HTTP request to {url} exceeded {self.request_timeout}s"
            ) from err
