"""Dispatcher: contract-checked HTTP calls against one base URL.

Each call runs the same linear sequence:

1. resolve the (route, verb) contract and validate the body;
2. build the request (base URL + route verbatim, JSON headers);
3. send it through a fresh httpx client;
4. return the decoded JSON on 2xx, raise `RequestError` otherwise.

Contract violations raise `ContractError` before step 2, so an illegal call
never touches the network. There are no retries and no caching.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel

from via.adapters.http_client import build_async_client
from via.core.config import AppSettings
from via.core.domain.errors import ContractError, ContractErrorKind, RequestError
from via.core.domain.models import ApiSchema
from via.core.domain.verbs import HttpVerb
from via.core.services.contract_resolver import check_schema, resolve, validate_body

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def _normalize_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True)
    return body


class Dispatcher:
    """Bound to one base URL and one schema for its whole lifetime.

    The instance holds no per-call state, so a single dispatcher can serve
    any number of concurrent calls.
    """

    def __init__(
        self,
        base_url: str,
        schema: ApiSchema,
        *,
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        parts = urlsplit(base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {base_url!r}")
        check_schema(schema)

        self._base_url = base_url
        self._schema = schema
        self._settings = settings or AppSettings()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def schema(self) -> ApiSchema:
        return self._schema

    async def get(self, route: str) -> Any:
        return await self._request(route, HttpVerb.GET)

    async def post(self, route: str, body: Any) -> Any:
        return await self._request(route, HttpVerb.POST, body)

    async def put(self, route: str, body: Any) -> Any:
        return await self._request(route, HttpVerb.PUT, body)

    async def delete(self, route: str) -> Any:
        return await self._request(route, HttpVerb.DELETE)

    async def _request(self, route: str, verb: HttpVerb, body: Any = None) -> Any:
        contract = resolve(self._schema, route, verb)
        payload = _normalize_body(body)
        validate_body(contract, payload)

        url = self._base_url + route
        headers = {"Accept": JSON_MEDIA_TYPE}
        content: bytes | None = None
        if payload is not None:
            try:
                content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise ContractError(
                    ContractErrorKind.INVALID_BODY,
                    route=route,
                    verb=verb.value,
                    detail=f"body is not JSON serializable: {exc}",
                ) from exc
            headers["Content-Type"] = JSON_MEDIA_TYPE

        logger.debug("dispatch %s %s", verb.value, url)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.request(verb.value, url, headers=headers, content=content)
        except (httpx.RequestError, OSError) as exc:
            logger.debug("transport failure for %s %s: %s", verb.value, url, exc)
            raise RequestError.network_failure(route, exc, verb=verb.value) from exc

        logger.debug("%s %s -> %s", verb.value, url, response.status_code)
        if not response.is_success:
            raise RequestError.http_status(response.status_code, route, verb=verb.value)

        try:
            return response.json()
        except ValueError as exc:
            raise RequestError.decode_failure(route, exc, verb=verb.value) from exc
