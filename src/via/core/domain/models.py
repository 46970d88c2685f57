"""Schema Model (Pydantic v2).

Describes *which* routes and methods an API exposes and the shape of the data
each one exchanges. Shapes are JSON Schema objects; the model never looks
inside them, validation happens in the contract resolver.

The models are frozen: once a schema is built (by the generator, by a file
load or by hand) it is read-only.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from via.core.domain.verbs import HttpVerb

Shape = dict[str, Any]


class Operation(BaseModel):
    """One (route, verb) pair of the API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    request_body: Shape | None = Field(
        default=None,
        description="JSON Schema of the request body; absent when the verb carries no body.",
    )
    response: Shape = Field(
        default_factory=dict,
        description="JSON Schema of the success response. `{}` accepts anything.",
    )
    summary: str | None = Field(
        default=None,
        description="Short description copied from the API document.",
    )
    operation_id: str | None = Field(
        default=None,
        description="operationId from the API document, if any.",
    )


class ApiSchema(BaseModel):
    """Route -> verb -> operation.

    A route with no verbs is legal; it is simply unreachable.
    """

    model_config = ConfigDict(frozen=True)

    routes: dict[str, dict[HttpVerb, Operation]] = Field(
        default_factory=dict,
        description="Declared operations keyed by route path and HTTP verb.",
    )

    @field_validator("routes", mode="before")
    @classmethod
    def _normalize_verbs(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        out: dict[Any, Any] = {}
        for route, operations in value.items():
            if isinstance(operations, dict):
                operations = {HttpVerb.parse(verb): op for verb, op in operations.items()}
            out[route] = operations
        return out


class RegistryEntry(BaseModel):
    """Binds a base URL to a stored schema document."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        ...,
        min_length=8,
        description="Absolute base URL, used as registry key and request prefix.",
    )
    schema_name: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Name of the schema document (file stem).",
    )
    schema_path: str = Field(
        ...,
        min_length=1,
        description="Path of the schema JSON, relative to the registry file.",
    )

    @field_validator("base_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value


class RegistryFile(BaseModel):
    entries: list[RegistryEntry] = Field(default_factory=list)
