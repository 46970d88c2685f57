"""OpenAPI -> `ApiSchema` generator.

Fetches an OpenAPI 3.x or Swagger 2.0 document (URL or local path, JSON or
YAML) and keeps what the dispatcher needs:

- only GET/POST/PUT/DELETE operations;
- the JSON request body schema, if any;
- the schema of the lowest 2xx response that declares JSON content (`{}` when
  none does).

Local `$ref`s are inlined. A reference that points back into itself is
replaced with `{}`, which accepts anything. OpenAPI 3.0 keywords that are not
valid JSON Schema 2020-12 (`nullable`, boolean `exclusiveMinimum`, ...) are
translated so the resulting shapes pass `check_schema`.

Any failure is reported as `SchemaGenerationError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from via.adapters.http_client import build_async_client
from via.core.config import AppSettings
from via.core.domain.errors import SchemaGenerationError
from via.core.domain.models import ApiSchema, Operation, Shape
from via.core.domain.verbs import HttpVerb

logger = logging.getLogger(__name__)

_DOCUMENT_ACCEPT = "application/json, application/yaml;q=0.9, */*;q=0.5"


class _RefInliner:
    def __init__(self, document: dict[str, Any], source: str) -> None:
        self._document = document
        self._source = source

    def lookup(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            raise SchemaGenerationError(self._source, f"unsupported non-local $ref {ref!r}")
        node: Any = self._document
        for raw in ref[2:].split("/"):
            part = raw.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                raise SchemaGenerationError(self._source, f"unresolvable $ref {ref!r}")
        return node

    def inline(self, node: Any, seen: tuple[str, ...] = ()) -> Any:
        if isinstance(node, list):
            return [self.inline(item, seen) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return {}
            return self.inline(self.lookup(ref), seen + (ref,))

        return _to_json_schema({key: self.inline(value, seen) for key, value in node.items()})


def _to_json_schema(node: dict[str, Any]) -> dict[str, Any]:
    nullable = node.pop("nullable") if isinstance(node.get("nullable"), bool) else False
    if nullable and "type" in node:
        kind = node["type"]
        kinds = list(kind) if isinstance(kind, list) else [kind]
        if "null" not in kinds:
            kinds.append("null")
        node["type"] = kinds

    for bound in ("Minimum", "Maximum"):
        flag = node.get(f"exclusive{bound}")
        if isinstance(flag, bool):
            limit = node.get(bound.lower())
            if flag and limit is not None:
                node[f"exclusive{bound}"] = node.pop(bound.lower())
            else:
                node.pop(f"exclusive{bound}")

    # Swagger 2.0 uploads
    if node.get("type") == "file":
        node.pop("type")
    return node


def _json_media_schema(content: Any) -> Shape | None:
    if not isinstance(content, dict):
        return None
    chosen = None
    for media_type, media in content.items():
        if media_type == "application/json" or media_type.endswith("+json"):
            chosen = media
            break
    if chosen is None:
        chosen = content.get("*/*")
    if not isinstance(chosen, dict):
        return None
    schema = chosen.get("schema")
    return schema if isinstance(schema, dict) else {}


def _success_codes(responses: dict[str, Any]) -> list[str]:
    codes = [code for code in responses if str(code).isdigit() and 200 <= int(code) < 300]
    codes.sort(key=int)
    codes.extend(code for code in responses if str(code).upper() == "2XX")
    return [str(code) for code in codes]


def _openapi3_operation(op: dict[str, Any]) -> Operation:
    body: Shape | None = None
    request_body = op.get("requestBody")
    if isinstance(request_body, dict):
        body = _json_media_schema(request_body.get("content"))
        if body is None:
            body = {}

    response: Shape = {}
    responses = op.get("responses") if isinstance(op.get("responses"), dict) else {}
    for code in _success_codes(responses):
        entry = responses.get(code, responses.get(int(code)) if code.isdigit() else None)
        shape = _json_media_schema(entry.get("content")) if isinstance(entry, dict) else None
        if shape is not None:
            response = shape
            break

    return Operation(
        request_body=body,
        response=response,
        summary=op.get("summary"),
        operation_id=op.get("operationId"),
    )


def _swagger2_operation(op: dict[str, Any], shared_parameters: list[Any]) -> Operation:
    body: Shape | None = None
    for parameter in [*shared_parameters, *(op.get("parameters") or [])]:
        if isinstance(parameter, dict) and parameter.get("in") == "body":
            schema = parameter.get("schema")
            body = schema if isinstance(schema, dict) else {}

    response: Shape = {}
    responses = op.get("responses") if isinstance(op.get("responses"), dict) else {}
    for code in _success_codes(responses):
        entry = responses.get(code, responses.get(int(code)) if code.isdigit() else None)
        if isinstance(entry, dict) and isinstance(entry.get("schema"), dict):
            response = entry["schema"]
            break

    return Operation(
        request_body=body,
        response=response,
        summary=op.get("summary"),
        operation_id=op.get("operationId"),
    )


def compile_document(document: Any, *, source: str = "<document>") -> ApiSchema:
    """Compile a parsed OpenAPI/Swagger document into an `ApiSchema`."""

    if not isinstance(document, dict):
        raise SchemaGenerationError(source, "document is not a JSON/YAML object")
    swagger2 = str(document.get("swagger", "")).startswith("2")
    if not swagger2 and "openapi" not in document:
        raise SchemaGenerationError(source, "missing 'openapi' or 'swagger' version field")
    paths = document.get("paths")
    if not isinstance(paths, dict):
        raise SchemaGenerationError(source, "missing 'paths' object")

    inliner = _RefInliner(document, source)
    routes: dict[str, dict[HttpVerb, Operation]] = {}
    for route, raw_item in paths.items():
        item = inliner.inline(raw_item)
        if not isinstance(item, dict):
            raise SchemaGenerationError(source, f"path item {route!r} is not an object")
        shared = item.get("parameters") or []
        operations: dict[HttpVerb, Operation] = {}
        for verb in HttpVerb:
            op = item.get(verb.value.lower())
            if not isinstance(op, dict):
                continue
            operations[verb] = _swagger2_operation(op, shared) if swagger2 else _openapi3_operation(op)
        routes[str(route)] = operations

    logger.debug("compiled %d routes from %s", len(routes), source)
    return ApiSchema(routes=routes)


def parse_document(text: str, *, source: str = "<document>") -> Any:
    try:
        return json.loads(text)
    except ValueError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaGenerationError(source, f"document is neither JSON nor YAML: {exc}") from exc


class OpenApiSchemaGenerator:
    """`SchemaSource` implementation for OpenAPI/Swagger documents."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def generate(self, description_url: str) -> ApiSchema:
        text = await self._read(description_url)
        document = parse_document(text, source=description_url)
        return compile_document(document, source=description_url)

    async def _read(self, location: str) -> str:
        if not location.startswith(("http://", "https://")):
            try:
                return Path(location).read_text(encoding="utf-8")
            except OSError as exc:
                raise SchemaGenerationError(location, f"cannot read file: {exc}") from exc

        logger.debug("fetching API description %s", location)
        try:
            async with build_async_client(
                self._settings,
                extra_headers={"Accept": _DOCUMENT_ACCEPT},
                transport=self._transport,
            ) as client:
                response = await client.get(location)
        except (httpx.RequestError, OSError) as exc:
            raise SchemaGenerationError(location, f"request failed: {exc}") from exc

        if not response.is_success:
            raise SchemaGenerationError(location, f"HTTP {response.status_code}")
        return response.text


async def generate(
    description_url: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApiSchema:
    """Fetch and compile an API description into an `ApiSchema`."""

    return await OpenApiSchemaGenerator(settings, transport=transport).generate(description_url)
