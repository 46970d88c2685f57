"""Error taxonomy.

Two disjoint families reach callers of the dispatcher:

- `ContractError`: the call is illegal for the schema. Raised before any I/O.
- `RequestError`: the call was legal but the exchange failed (HTTP status,
  transport, JSON decoding).

The generator and the registry have their own errors so they are never
mistaken for a failed API call.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ViaError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }


class ContractErrorKind(str, Enum):
    UNKNOWN_ROUTE = "unknown_route"
    UNSUPPORTED_VERB = "unsupported_verb"
    INVALID_BODY = "invalid_body"
    UNEXPECTED_BODY = "unexpected_body"
    MALFORMED_SHAPE = "malformed_shape"


class ContractError(ViaError):
    """The requested (route, verb, body) is not allowed by the schema."""

    def __init__(
        self,
        kind: ContractErrorKind,
        *,
        route: str | None = None,
        verb: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.kind = kind
        self.route = route
        self.verb = verb
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        if self.kind is ContractErrorKind.UNKNOWN_ROUTE:
            text = f"[Contract Error]: unknown route {self.route}"
        elif self.kind is ContractErrorKind.UNSUPPORTED_VERB:
            if self.route is None:
                text = f"[Contract Error]: unsupported verb {self.verb}"
            else:
                text = f"[Contract Error]: {self.verb} is not declared for {self.route}"
        elif self.kind is ContractErrorKind.INVALID_BODY:
            text = f"[Contract Error]: invalid body for {self.verb} {self.route}"
        elif self.kind is ContractErrorKind.UNEXPECTED_BODY:
            text = f"[Contract Error]: {self.verb} {self.route} does not accept a body"
        else:
            text = f"[Contract Error]: malformed shape for {self.verb} {self.route}"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "kind": self.kind.value,
                "route": self.route,
                "verb": self.verb,
                "detail": self.detail,
            }
        )
        return data


class RequestErrorKind(str, Enum):
    HTTP_STATUS = "http_status"
    NETWORK_FAILURE = "network_failure"
    DECODE_FAILURE = "decode_failure"


class RequestError(ViaError):
    """The network exchange for a legal call did not produce a usable result.

    `status_code` is set only for `HTTP_STATUS`; `cause` holds the underlying
    exception for the other kinds.
    """

    def __init__(
        self,
        kind: RequestErrorKind,
        *,
        route: str,
        verb: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.route = route
        self.verb = verb
        self.status_code = status_code
        self.cause = cause
        super().__init__(self._format())

    @classmethod
    def http_status(cls, status_code: int, route: str, *, verb: str | None = None) -> "RequestError":
        return cls(RequestErrorKind.HTTP_STATUS, route=route, verb=verb, status_code=status_code)

    @classmethod
    def network_failure(cls, route: str, cause: BaseException, *, verb: str | None = None) -> "RequestError":
        return cls(RequestErrorKind.NETWORK_FAILURE, route=route, verb=verb, cause=cause)

    @classmethod
    def decode_failure(cls, route: str, cause: BaseException, *, verb: str | None = None) -> "RequestError":
        return cls(RequestErrorKind.DECODE_FAILURE, route=route, verb=verb, cause=cause)

    def _format(self) -> str:
        if self.kind is RequestErrorKind.HTTP_STATUS:
            return f"[API Error]: {self.status_code} from: {self.route}"
        if self.kind is RequestErrorKind.NETWORK_FAILURE:
            return f"[API Error]: network failure from: {self.route}: {self.cause}"
        return f"[API Error]: invalid JSON from: {self.route}: {self.cause}"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "kind": self.kind.value,
                "route": self.route,
                "verb": self.verb,
                "status_code": self.status_code,
                "cause": str(self.cause) if self.cause is not None else None,
            }
        )
        return data


class SchemaGenerationError(ViaError):
    """The API description could not be fetched or compiled."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"[Schema Error]: {source}: {reason}")


class RegistryError(ViaError):
    """Duplicate, unknown or unreadable registry entries."""

    def __init__(self, base_url: str | None, reason: str) -> None:
        self.base_url = base_url
        self.reason = reason
        target = base_url if base_url is not None else "registry"
        super().__init__(f"[Registry Error]: {target}: {reason}")
