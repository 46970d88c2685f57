"""Contract resolution over an `ApiSchema`.

Every function here is pure and runs before any network I/O: a call that the
schema does not allow fails with `ContractError` and never reaches the
transport.

Shapes are JSON Schema documents; bodies are checked with `jsonschema`,
picking the validator class from the shape's `$schema` (Draft 2020-12 when
absent).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonschema.exceptions import SchemaError, best_match
from jsonschema.validators import Draft202012Validator, validator_for

from via.core.domain.errors import ContractError, ContractErrorKind
from via.core.domain.models import ApiSchema, Operation, Shape
from via.core.domain.verbs import HttpVerb


@dataclass(frozen=True)
class Contract:
    """Resolved companions of a (route, verb) pair."""

    route: str
    verb: HttpVerb
    body_shape: Shape | None
    response_shape: Shape


def routes_for(schema: ApiSchema, verb: HttpVerb | str) -> frozenset[str]:
    """Every route that declares `verb`."""

    method = HttpVerb.parse(verb)
    return frozenset(route for route, operations in schema.routes.items() if method in operations)


def operation_for(schema: ApiSchema, route: str, verb: HttpVerb | str) -> Operation:
    method = HttpVerb.parse(verb)
    operations = schema.routes.get(route)
    if operations is None:
        raise ContractError(ContractErrorKind.UNKNOWN_ROUTE, route=route, verb=method.value)
    operation = operations.get(method)
    if operation is None:
        raise ContractError(ContractErrorKind.UNSUPPORTED_VERB, route=route, verb=method.value)
    return operation


def body_shape_for(schema: ApiSchema, route: str, verb: HttpVerb | str) -> Shape | None:
    """Declared request-body shape, or `None` when the operation takes no body."""

    return operation_for(schema, route, verb).request_body


def response_shape_for(schema: ApiSchema, route: str, verb: HttpVerb | str) -> Shape:
    return operation_for(schema, route, verb).response


def resolve(schema: ApiSchema, route: str, verb: HttpVerb | str) -> Contract:
    method = HttpVerb.parse(verb)
    operation = operation_for(schema, route, method)
    return Contract(
        route=route,
        verb=method,
        body_shape=operation.request_body,
        response_shape=operation.response,
    )


def _validator_class(shape: Shape) -> Any:
    return validator_for(shape, default=Draft202012Validator)


def validate_body(contract: Contract, body: Any) -> None:
    """Check `body` against the contract's request shape.

    `None` stands for "no body". It is only legal when the operation declares
    no request body, and a real body is only legal when it does.
    """

    shape = contract.body_shape
    if shape is None:
        if body is not None:
            raise ContractError(
                ContractErrorKind.UNEXPECTED_BODY,
                route=contract.route,
                verb=contract.verb.value,
            )
        return

    if body is None:
        raise ContractError(
            ContractErrorKind.INVALID_BODY,
            route=contract.route,
            verb=contract.verb.value,
            detail="a request body is required",
        )

    validator = _validator_class(shape)(shape)
    error = best_match(validator.iter_errors(body))
    if error is not None:
        raise ContractError(
            ContractErrorKind.INVALID_BODY,
            route=contract.route,
            verb=contract.verb.value,
            detail=f"{error.json_path}: {error.message}",
        )


def check_schema(schema: ApiSchema) -> None:
    """Reject schemas whose shapes are not valid JSON Schema documents."""

    for route, operations in schema.routes.items():
        for verb, operation in operations.items():
            shapes = [operation.response]
            if operation.request_body is not None:
                shapes.append(operation.request_body)
            for shape in shapes:
                try:
                    _validator_class(shape).check_schema(shape)
                except SchemaError as exc:
                    raise ContractError(
                        ContractErrorKind.MALFORMED_SHAPE,
                        route=route,
                        verb=verb.value,
                        detail=exc.message,
                    ) from exc
