"""
Execution API posts a GraphQL query and hands back the raw response body.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bitquery_client.api.base import BaseRouter

if TYPE_CHECKING:
    from bitquery_client.query import QueryDescriptor


class ExecutionAPI(BaseRouter):
    """
    Query execution.
    Methods:
        execute(): posts a query and returns the unaltered response body.
    """

    def execute(self, query: QueryDescriptor) -> bytes:
        """
        POST `query` to its endpoint and return the response body as bytes.
        The HTTP status is not interpreted: error pages come back like any other body.

        Raises:
            SerializationError: variables can't be encoded as JSON
            RequestConstructionError: the endpoint is not a valid URL
            TransportError: the request could not be sent or timed out
            ResponseReadError: the body could not be read completely
        """
        body = self._request_body(query)
        url = self._endpoint(query)
        return self._post(url, body)
