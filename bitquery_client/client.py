"""
Basic Bitquery Client Class responsible for posting GraphQL queries
Framework built on Bitquery's API Documentation
https://docs.bitquery.io/docs/start/first-query/
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bitquery_client.api.extensions import ExtendedAPI
from bitquery_client.interface import BitqueryInterface

if TYPE_CHECKING:
    from bitquery_client.query import QueryDescriptor


class BitqueryClient(ExtendedAPI, BitqueryInterface):
    """
    An interface for Bitquery API with a convenience method
    combining execution and decoding (execute_and_decode)

    Inheritance Hierarchy sketched as follows:

        BitqueryClient
        |
        |--- ExtendedAPI
                |   - Unwraps the GraphQL envelope (`execute_and_decode`)
                |
                |--- ExecutionAPI(BaseRouter)
                        - Posts queries and returns raw bodies (`execute`)
    """


def execute(api_key: str, query: QueryDescriptor) -> bytes:
    """Posts `query` with `api_key` over the shared session and returns the body"""
    return BitqueryClient(api_key=api_key).execute(query)


def execute_and_decode(api_key: str, query: QueryDescriptor, target: Any = None) -> Any:
    """Posts `query` with `api_key` over the shared session and decodes its data"""
    return BitqueryClient(api_key=api_key).execute_and_decode(query, target)
