"""HTTP verbs understood by the dispatcher.

The set is closed: a schema can only declare these four, and every other
value is rejected when parsed.
"""

from __future__ import annotations

from enum import Enum

from via.core.domain.errors import ContractError, ContractErrorKind


class HttpVerb(str, Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "HttpVerb | str") -> "HttpVerb":
        """Accept an enum member or a case-insensitive method name."""

        if isinstance(value, HttpVerb):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ContractError(ContractErrorKind.UNSUPPORTED_VERB, verb=str(value)) from None

    @property
    def sends_body(self) -> bool:
        return self in (HttpVerb.POST, HttpVerb.PUT)
