"""
Query descriptors: anything that can tell the client what to send and where.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from bitquery_client.models import SerializationError
from bitquery_client.types import Endpoint, Variables


def request_format(query: QueryDescriptor) -> dict[str, Any]:
    """
    Builds the JSON object posted to the API for any `QueryDescriptor`.
    Raises TypeError when `query` does not expose the descriptor methods,
    SerializationError when its variables are not a mapping. None means no variables.
    """
    if not isinstance(query, QueryDescriptor):
        raise TypeError(f"expected a QueryDescriptor, got {type(query).__name__}")
    variables = query.to_map()
    if variables is None:
        variables = {}
    if not isinstance(variables, Mapping):
        raise SerializationError(
            f"variables must be a mapping, got {type(variables).__name__}"
        )
    return {"query": query.query(), "variables": dict(variables)}


@runtime_checkable
class QueryDescriptor(Protocol):
    """
    Capability set expected by the client. Callers may implement it on any
    object, no base class required.
    """

    def to_map(self) -> Mapping[str, Any]:
        """GraphQL variables, keyed by variable name"""

    def query(self) -> str:
        """The GraphQL document"""

    def endpoint(self) -> str:
        """URL the query is posted to (usually one of `Endpoint`)"""


@dataclass
class GraphQLQuery:
    """Basic data structure constituting a Bitquery GraphQL query."""

    text: str
    variables: Variables | None = None
    url: str = Endpoint.V1.value

    def to_map(self) -> Variables:
        """Non-null copy of self.variables"""
        return dict(self.variables or {})

    def query(self) -> str:
        return self.text

    def endpoint(self) -> str:
        return str(self.url)

