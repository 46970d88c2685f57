"""Contract for schema generators.

A generator turns an API description document into an `ApiSchema`. It is
asynchronous because it usually fetches the document over HTTP. Failures must
surface as `SchemaGenerationError` so they are never confused with errors of a
dispatched call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from via.core.domain.models import ApiSchema


@runtime_checkable
class SchemaSource(Protocol):
    async def generate(self, description_url: str) -> ApiSchema:
        """Fetch and compile the document at `description_url`."""

        ...
