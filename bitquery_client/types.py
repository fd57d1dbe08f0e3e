"""
Types shared across the client: known service endpoints and variable mappings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

Variables = dict[str, Any]


class Endpoint(str, Enum):
    """
    Known Bitquery GraphQL endpoints.
    V1 serves the classic schema, V2 the streaming schema.
    """

    V1 = "https://graphql.bitquery.io"
    V2 = "https://streaming.bitquery.io/graphql"

    def __str__(self) -> str:
        return str(self.value)
