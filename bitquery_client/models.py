"""
Dataclasses encoding response data from Bitquery GraphQL API,
along with the errors raised by the client.
"""

from __future__ import annotations

import dataclasses
import json
import logging.config
from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import DataClassJsonMixin

log = logging.getLogger(__name__)


class BitqueryError(Exception):
    """Base class for everything raised by the client"""


class SerializationError(BitqueryError):
    """Query variables can't be represented as JSON"""


class RequestConstructionError(BitqueryError):
    """The endpoint of a query is not a usable URL"""


class TransportError(BitqueryError):
    """DNS, TLS, connection or timeout failure while sending the request"""


class ResponseReadError(BitqueryError):
    """The response body could not be read completely"""


class DecodeError(BitqueryError):
    """Response JSON could not be converted into the requested target"""


class UnexpectedResponseFormatError(BitqueryError):
    """
    The API answered with something other than JSON,
    typically an HTML page from a gateway or an auth failure.
    """

    def __init__(self, body: str):
        self.body = body
        super().__init__(f"unexpected non-JSON response: {body}")


@dataclass
class Location(DataClassJsonMixin):
    """Position in the query document an error refers to"""

    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass
class GraphQLError(DataClassJsonMixin):
    """
    Single error reported by the GraphQL server.

    Example:
    {
        "message": "Cannot query field \"ethereum\" on type \"RootQuery\".",
        "locations": [{"line": 3, "column": 2}]
    }
    """

    message: str = ""
    locations: list[Location] = field(default_factory=list)
    path: list[Any] | None = None
    extensions: dict[str, Any] | None = None

    def __str__(self) -> str:
        if not self.locations:
            return self.message
        where = "; ".join(str(location) for location in self.locations)
        return f"{self.message} ({where})"


class QueryError(BitqueryError):
    """The server reported one or more errors for the query"""

    def __init__(self, errors: list[GraphQLError]):
        self.errors = errors
        super().__init__("query error: " + " | ".join(str(err) for err in errors))

    @property
    def messages(self) -> list[str]:
        """Messages of all reported errors, in order"""
        return [err.message for err in self.errors]


@dataclass
class Envelope:
    """
    Standard GraphQL response shape.
    `data` is kept as parsed JSON and converted into a caller's type later.
    """

    data: Any = None
    errors: list[GraphQLError] = field(default_factory=list)

    @staticmethod
    def is_envelope(document: Any) -> bool:
        """Documents without `data` and `errors` keys are bare JSON"""
        return isinstance(document, dict) and ("data" in document or "errors" in document)

    @classmethod
    def from_dict(cls, document: dict[str, Any]) -> Envelope:
        """Constructor from a parsed response. Raises DecodeError on malformed errors."""
        errors = document.get("errors") or []
        if not isinstance(errors, list) or not all(isinstance(err, dict) for err in errors):
            raise DecodeError(f"malformed errors field in response: {errors!r}")
        try:
            parsed = [GraphQLError.from_dict(err) for err in errors]
        except (KeyError, TypeError, ValueError) as err:
            raise DecodeError(f"malformed errors field in response: {errors!r}") from err
        return cls(data=document.get("data"), errors=parsed)


def decode_into(value: Any, target: Any = None) -> Any:
    """
    Converts parsed JSON `value` into `target`:
      - None returns the value as is
      - classes with `from_dict` (e.g. DataClassJsonMixin) use it
      - plain dataclasses are built from the keys matching their fields
      - any other callable is applied to the value
    """
    if target is None:
        return value
    try:
        if hasattr(target, "from_dict"):
            return target.from_dict(value)
        if isinstance(target, type) and dataclasses.is_dataclass(target):
            names = {f.name for f in dataclasses.fields(target) if f.init}
            return target(**{key: item for key, item in value.items() if key in names})
        if callable(target):
            return target(value)
    except (KeyError, TypeError, ValueError, AttributeError) as err:
        name = getattr(target, "__name__", repr(target))
        raise DecodeError(f"Can't build {name} from {value!r}") from err
    raise DecodeError(f"unsupported decode target {target!r}")


def decode_response(body: bytes, target: Any = None) -> Any:
    """
    Unwraps the `data` field of a GraphQL response and decodes it into `target`.
    Bodies without an envelope are decoded directly.
    """
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        text = body.decode("utf-8-sig", errors="replace")
        if text.lstrip().startswith("<"):
            raise UnexpectedResponseFormatError(text) from err
        raise DecodeError(f"response is not valid JSON: {err}") from err

    if not Envelope.is_envelope(document):
        log.debug("response has no data/errors envelope, decoding it as is")
        return decode_into(document, target)

    envelope = Envelope.from_dict(document)
    if envelope.errors:
        raise QueryError(envelope.errors)
    return decode_into(envelope.data, target)
