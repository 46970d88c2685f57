"""In-memory registry: base URL -> schema.

Each base URL maps to at most one schema. The registry is populated by the
file store (`via.adapters.registry_store`) or by hand, and hands out
dispatchers bound to a registered base URL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from via.core.domain.errors import RegistryError
from via.core.domain.models import ApiSchema

if TYPE_CHECKING:
    from via.adapters.dispatcher import Dispatcher


class Registry:
    def __init__(self, schemas: dict[str, ApiSchema] | None = None) -> None:
        self._schemas: dict[str, ApiSchema] = {}
        for base_url, schema in (schemas or {}).items():
            self.register(base_url, schema)

    def register(self, base_url: str, schema: ApiSchema) -> None:
        if base_url in self._schemas:
            raise RegistryError(base_url, "base URL already registered")
        self._schemas[base_url] = schema

    def schema_for(self, base_url: str) -> ApiSchema:
        try:
            return self._schemas[base_url]
        except KeyError:
            raise RegistryError(base_url, "base URL is not registered") from None

    def dispatcher_for(self, base_url: str, **kwargs: Any) -> "Dispatcher":
        """Build a `Dispatcher` for a registered base URL.

        Extra keyword arguments (`settings`, `transport`) are passed through.
        """

        from via.adapters.dispatcher import Dispatcher  # noqa: PLC0415

        return Dispatcher(base_url, self.schema_for(base_url), **kwargs)

    def base_urls(self) -> list[str]:
        return sorted(self._schemas)

    def __contains__(self, base_url: object) -> bool:
        return base_url in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self.base_urls())

    def __len__(self) -> int:
        return len(self._schemas)
