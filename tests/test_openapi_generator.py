from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from via.adapters.openapi_generator import OpenApiSchemaGenerator, compile_document, generate
from via.core.domain.errors import SchemaGenerationError
from via.core.domain.verbs import HttpVerb
from via.core.interfaces.schema_source import SchemaSource
from via.core.services.contract_resolver import body_shape_for, check_schema, response_shape_for, routes_for

PET_COMPONENT = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "id": {"type": "integer"},
        "name": {"type": "string"},
        "tag": {"type": "string", "nullable": True},
    },
}

OPENAPI3 = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pet": {
            "post": {
                "operationId": "addPet",
                "summary": "Add a new pet",
                "requestBody": {"$ref": "#/components/requestBodies/Pet"},
                "responses": {
                    "201": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                    "200": {"description": "no content"},
                    "405": {"description": "Invalid input"},
                },
            },
            "patch": {"responses": {"200": {"description": "ignored"}}},
        },
        "/pet/{petId}": {
            "parameters": [{"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}}],
            "get": {
                "responses": {
                    "200": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                    "404": {"description": "not found"},
                }
            },
            "delete": {"responses": {"400": {"description": "Invalid pet value"}}},
        },
        "/category": {
            "get": {
                "responses": {
                    "2XX": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Category"}}}}
                }
            }
        },
        "/store/order": {
            "put": {
                "requestBody": {"content": {"application/x-www-form-urlencoded": {"schema": {"type": "object"}}}},
                "responses": {"200": {"content": {"application/json": {"schema": {"type": "integer", "minimum": 0, "exclusiveMinimum": True}}}}},
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": PET_COMPONENT,
            "Category": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "parent": {"$ref": "#/components/schemas/Category"},
                },
            },
        },
        "requestBodies": {
            "Pet": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
        },
    },
}

SWAGGER2 = {
    "swagger": "2.0",
    "paths": {
        "/pet": {
            "put": {
                "parameters": [{"in": "body", "name": "body", "schema": {"$ref": "#/definitions/Pet"}}],
                "responses": {"200": {"schema": {"$ref": "#/definitions/Pet"}}},
            }
        },
        "/pet/{petId}/uploadImage": {
            "post": {
                "parameters": [{"in": "formData", "name": "file", "type": "file"}],
                "responses": {"200": {"description": "ok"}},
            }
        },
    },
    "definitions": {"Pet": {"type": "object", "properties": {"name": {"type": "string"}}}},
}


def test_openapi3_keeps_only_supported_verbs():
    schema = compile_document(OPENAPI3)

    assert routes_for(schema, HttpVerb.POST) == {"/pet"}
    assert routes_for(schema, HttpVerb.GET) == {"/pet/{petId}", "/category"}
    assert routes_for(schema, HttpVerb.DELETE) == {"/pet/{petId}"}
    assert set(schema.routes["/pet"]) == {HttpVerb.POST}


def test_openapi3_inlines_refs_and_picks_lowest_json_2xx():
    schema = compile_document(OPENAPI3)

    body = body_shape_for(schema, "/pet", HttpVerb.POST)
    assert body["properties"]["name"] == {"type": "string"}
    assert body["properties"]["tag"] == {"type": ["string", "null"]}
    assert response_shape_for(schema, "/pet", HttpVerb.POST) == body
    operation = schema.routes["/pet"][HttpVerb.POST]
    assert operation.operation_id == "addPet"
    assert operation.summary == "Add a new pet"


def test_openapi3_operation_without_success_content_gets_open_shape():
    schema = compile_document(OPENAPI3)

    assert body_shape_for(schema, "/pet/{petId}", HttpVerb.DELETE) is None
    assert response_shape_for(schema, "/pet/{petId}", HttpVerb.DELETE) == {}


def test_recursive_refs_collapse_to_open_shapes():
    schema = compile_document(OPENAPI3)

    category = response_shape_for(schema, "/category", HttpVerb.GET)
    assert category["properties"]["parent"] == {}


def test_openapi30_keywords_become_valid_json_schema():
    schema = compile_document(OPENAPI3)

    assert response_shape_for(schema, "/store/order", HttpVerb.PUT) == {"type": "integer", "exclusiveMinimum": 0}
    assert body_shape_for(schema, "/store/order", HttpVerb.PUT) == {}
    check_schema(schema)


def test_swagger2_body_parameters_and_responses():
    schema = compile_document(SWAGGER2)

    pet = {"type": "object", "properties": {"name": {"type": "string"}}}
    assert body_shape_for(schema, "/pet", HttpVerb.PUT) == pet
    assert response_shape_for(schema, "/pet", HttpVerb.PUT) == pet
    assert body_shape_for(schema, "/pet/{petId}/uploadImage", HttpVerb.POST) is None
    check_schema(schema)


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"info": {}, "paths": {}},
        {"openapi": "3.1.0"},
        {"openapi": "3.1.0", "paths": {"/a": {"get": {"responses": {"200": {"$ref": "#/components/responses/Missing"}}}}}},
        {"openapi": "3.1.0", "paths": {"/a": {"$ref": "https://example.com/other.json#/a"}}},
    ],
)
def test_malformed_documents_raise_schema_generation_error(document):
    with pytest.raises(SchemaGenerationError):
        compile_document(document, source="test.json")


def test_generate_fetches_over_http():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=json.dumps(OPENAPI3))

    generator = OpenApiSchemaGenerator(transport=httpx.MockTransport(handler))
    schema = asyncio.run(generator.generate("https://petstore3.swagger.io/api/v3/openapi.json"))

    assert "/pet" in schema.routes
    assert seen[0].url.path == "/api/v3/openapi.json"
    assert isinstance(generator, SchemaSource)


def test_generate_accepts_yaml_documents():
    text = "openapi: 3.0.0\npaths:\n  /health:\n    get:\n      responses:\n        200:\n          description: ok\n"
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=text))

    schema = asyncio.run(generate("https://example.com/openapi.yaml", transport=transport))

    assert routes_for(schema, HttpVerb.GET) == {"/health"}


def test_generate_reads_local_files(tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(SWAGGER2), encoding="utf-8")

    schema = asyncio.run(generate(str(path)))

    assert routes_for(schema, HttpVerb.PUT) == {"/pet"}


def test_generate_reports_http_failures():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    with pytest.raises(SchemaGenerationError, match="HTTP 404"):
        asyncio.run(generate("https://example.com/openapi.json", transport=transport))


def test_generate_reports_network_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("getaddrinfo ENOTFOUND")

    with pytest.raises(SchemaGenerationError, match="ENOTFOUND"):
        asyncio.run(generate("https://example.com/openapi.json", transport=httpx.MockTransport(handler)))


def test_generate_reports_redirect_loops():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, headers={"Location": str(request.url)})

    with pytest.raises(SchemaGenerationError, match="request failed"):
        asyncio.run(generate("https://example.com/openapi.json", transport=httpx.MockTransport(handler)))


def test_generate_reports_missing_files(tmp_path):
    with pytest.raises(SchemaGenerationError, match="cannot read file"):
        asyncio.run(generate(str(tmp_path / "missing.json")))


def test_generate_reports_unparseable_documents():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="{not: [valid"))

    with pytest.raises(SchemaGenerationError):
        asyncio.run(generate("https://example.com/openapi.json", transport=transport))
