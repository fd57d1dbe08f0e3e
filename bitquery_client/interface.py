"""
Abstract class for a basic Bitquery Interface.
"""

import abc
from typing import Any

from bitquery_client.query import QueryDescriptor


class BitqueryInterface(abc.ABC):
    """
    User Facing Methods for a Bitquery Client
    """

    @abc.abstractmethod
    def execute(self, query: QueryDescriptor) -> bytes:
        """
        Posts a GraphQL query and returns the raw response body.
        """

    @abc.abstractmethod
    def execute_and_decode(self, query: QueryDescriptor, target: Any = None) -> Any:
        """
        Posts a GraphQL query, unwraps the data/errors envelope
        and decodes the data into `target`
        """
