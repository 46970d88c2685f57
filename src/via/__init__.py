"""Via: contract-checked HTTP calls against a described API.

Typical use:

    schema = load_registry(Path("via/registry.json")).schema_for(BASE_URL)
    api = Dispatcher(BASE_URL, schema)
    pet = await api.get("/pet/{petId}")
"""

from via.adapters.dispatcher import Dispatcher
from via.adapters.openapi_generator import OpenApiSchemaGenerator, generate
from via.adapters.registry_store import load_registry
from via.core.domain.errors import (
    ContractError,
    ContractErrorKind,
    RegistryError,
    RequestError,
    RequestErrorKind,
    SchemaGenerationError,
    ViaError,
)
from via.core.domain.models import ApiSchema, Operation, RegistryEntry
from via.core.domain.verbs import HttpVerb
from via.core.services.contract_resolver import (
    Contract,
    body_shape_for,
    resolve,
    response_shape_for,
    routes_for,
)
from via.core.services.registry import Registry

__all__ = [
    "ApiSchema",
    "Contract",
    "ContractError",
    "ContractErrorKind",
    "Dispatcher",
    "HttpVerb",
    "OpenApiSchemaGenerator",
    "Operation",
    "Registry",
    "RegistryEntry",
    "RegistryError",
    "RequestError",
    "RequestErrorKind",
    "SchemaGenerationError",
    "ViaError",
    "body_shape_for",
    "generate",
    "load_registry",
    "resolve",
    "response_shape_for",
    "routes_for",
]
