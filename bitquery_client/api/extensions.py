"""
Extended functionality for the Bitquery client.
Combines execution with unwrapping of the GraphQL response envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bitquery_client.api.execution import ExecutionAPI
from bitquery_client.models import decode_response

if TYPE_CHECKING:
    from bitquery_client.query import QueryDescriptor


class ExtendedAPI(ExecutionAPI):
    """
    Provides higher level helper methods for faster
    and easier development on top of the base ExecutionAPI.
    """

    def execute_and_decode(self, query: QueryDescriptor, target: Any = None) -> Any:
        """
        Executes `query` and decodes the `data` field of the response into `target`.

        Args:
            query: any object implementing `QueryDescriptor`
            target: None for plain JSON, a DataClassJsonMixin/dataclass type,
                or any callable taking the parsed JSON value

        Raises everything `execute` does, plus:
            UnexpectedResponseFormatError: the server returned HTML instead of JSON
            QueryError: the server reported GraphQL errors
            DecodeError: the payload doesn't fit `target`
        """
        body = self.execute(query)
        self.logger.debug(f"decoding {len(body)} bytes from {query.endpoint()}")
        return decode_response(body, target)
