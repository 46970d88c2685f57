from __future__ import annotations

from typing import Callable

import httpx
import pytest

from via.core.domain.models import ApiSchema, Operation

BASE_URL = "https://petstore3.swagger.io"

PET_SHAPE = {
    "type": "object",
    "properties": {
        "id": {"type": "number"},
        "name": {"type": "string"},
        "status": {"type": "string"},
    },
    "required": ["id", "name", "status"],
}

PET = {"id": 1, "name": "Fluffy", "status": "available"}


@pytest.fixture
def petstore_schema() -> ApiSchema:
    return ApiSchema(
        routes={
            "/pet": {
                "POST": Operation(request_body=PET_SHAPE, response=PET_SHAPE, summary="Add a pet"),
            },
            "/pet/{petId}": {
                "GET": Operation(response=PET_SHAPE, summary="Find pet by ID"),
                "PUT": Operation(request_body=PET_SHAPE, response=PET_SHAPE),
                "DELETE": Operation(),
            },
            "/store/inventory": {},
        }
    )


class Recorder:
    """Collects the requests a `httpx.MockTransport` receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def recorder() -> Callable[..., Recorder]:
    def make(
        status_code: int = 200,
        *,
        json: object = None,
        content: bytes | None = None,
        raises: Exception | None = None,
    ) -> Recorder:
        def handler(_request: httpx.Request) -> httpx.Response:
            if raises is not None:
                raise raises
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json if json is not None else {})

        return Recorder(handler)

    return make
