"""Registry persistence (JSON files).

Layout:

    via/registry.json        {"entries": [{"base_url", "schema_name", "schema_path"}]}
    via/schema/<name>.json   ApiSchema documents

`schema_path` is stored relative to the registry file so the directory can be
moved or committed as a whole. Files are written UTF-8 with stable formatting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from via.core.domain.errors import RegistryError
from via.core.domain.models import ApiSchema, RegistryEntry, RegistryFile
from via.core.services.registry import Registry

logger = logging.getLogger(__name__)


def _write_json(path: Path, payload: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return path


def ensure_registry_exists(path: Path) -> bool:
    """Create an empty registry file. Returns False if one already exists."""

    if path.exists():
        return False
    _write_json(path, RegistryFile().model_dump(mode="json"))
    logger.info("created registry %s", path)
    return True


def load_registry_file(path: Path) -> RegistryFile:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise RegistryError(None, f"registry file {path} does not exist") from None
    try:
        return RegistryFile.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        raise RegistryError(None, f"malformed registry file {path}: {exc}") from exc


def add_registry_entry(path: Path, entry: RegistryEntry) -> bool:
    """Append `entry` to the registry file.

    A base URL that is already present is left untouched and False is
    returned.
    """

    ensure_registry_exists(path)
    registry = load_registry_file(path)
    if any(existing.base_url == entry.base_url for existing in registry.entries):
        logger.warning("base URL %s already exists in registry, skipping", entry.base_url)
        return False
    updated = RegistryFile(entries=[entry, *registry.entries])
    _write_json(path, updated.model_dump(mode="json"))
    return True


def registered_entries(path: Path) -> list[RegistryEntry]:
    """Entries of the registry file at `path`, or none if it does not exist yet."""

    if not path.exists():
        return []
    return load_registry_file(path).entries


def write_schema(schema: ApiSchema, path: Path) -> Path:
    return _write_json(path, schema.model_dump(mode="json", exclude_none=True))


def load_schema(path: Path) -> ApiSchema:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistryError(None, f"cannot read schema {path}: {exc}") from exc
    try:
        return ApiSchema.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        raise RegistryError(None, f"malformed schema {path}: {exc}") from exc


def schema_location(registry_path: Path, entry: RegistryEntry) -> Path:
    return registry_path.parent / entry.schema_path


def load_registry(path: Path) -> Registry:
    """Load the registry file and every schema it references."""

    registry = Registry()
    for entry in load_registry_file(path).entries:
        registry.register(entry.base_url, load_schema(schema_location(path, entry)))
    return registry
