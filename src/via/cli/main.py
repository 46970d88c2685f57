"""Command-line interface.

Commands:
- `setup`: interactive mode selection (OpenAPI generation or manual registry).
- `init`: create an empty registry file to be edited by hand.
- `generate`: compile an OpenAPI document and register it under a base URL.
- `routes`: list the routes a registered base URL declares.
- `call`: dispatch one contract-checked request and print the JSON result.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from via.adapters.openapi_generator import generate as generate_schema
from via.adapters.registry_store import (
    add_registry_entry,
    ensure_registry_exists,
    load_registry,
    registered_entries,
    schema_location,
    write_schema,
)
from via.cli.ui_components import build_routes_table, print_banner
from via.core.config import AppSettings
from via.core.domain.errors import RegistryError, ViaError
from via.core.domain.models import RegistryEntry
from via.core.domain.verbs import HttpVerb

app = typer.Typer(no_args_is_help=True, help="Via: typed API registry and contract-checked dispatcher.")

_console = Console()

DEFAULT_SCHEMA_NAME = "openapi-types"

RegistryOption = typer.Option(None, "--registry", "-r", help="Registry file (defaults to VIA_REGISTRY_PATH).")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _http_url(value: str) -> str:
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise typer.BadParameter("must start with http:// or https://")
    return value


def _mode(value: str) -> str:
    value = value.strip().lower()
    if value not in ("openapi", "manual"):
        raise typer.BadParameter("choose openapi or manual")
    return value


def _fail(exc: ViaError) -> typer.Exit:
    _console.print(f"[red]{escape(exc.message)}[/red]")
    return typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override VIA_LOG_LEVEL."),
) -> None:
    settings = AppSettings()
    _configure_logging(log_level or settings.log_level)


@app.command()
def init(registry: Optional[Path] = RegistryOption) -> None:
    """Create an empty registry file (manual mode)."""

    path = registry or AppSettings().registry_path
    _console.print("Creating registry file...")
    if ensure_registry_exists(path):
        _console.print(f"[green]Created[/green] {path}")
    else:
        _console.print(f"[yellow]Registry already exists:[/yellow] {path}")
    _console.print(f"You can now add schemas and edit {path} manually.")


@app.command()
def generate(
    url: Optional[str] = typer.Option(None, "--url", help="OpenAPI document URL or local path."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base API URL used at runtime."),
    schema_name: Optional[str] = typer.Option(None, "--schema-name", help="Schema name (file stem)."),
    registry: Optional[Path] = RegistryOption,
    schema_dir: Optional[Path] = typer.Option(None, "--schema-dir", help="Defaults to VIA_SCHEMA_DIR."),
) -> None:
    """Generate a schema from an OpenAPI document and register it."""

    settings = AppSettings()
    url = url or typer.prompt("OpenApi JSON URL", value_proc=_http_url)
    base_url = _http_url(base_url) if base_url else typer.prompt("Base API URL (used at runtime)", value_proc=_http_url)
    schema_name = schema_name or typer.prompt("Schema name", default=DEFAULT_SCHEMA_NAME)

    registry_path = registry or settings.registry_path
    schema_file = (schema_dir or settings.schema_dir) / f"{schema_name}.json"
    try:
        entry = RegistryEntry(
            base_url=base_url,
            schema_name=schema_name,
            schema_path=Path(os.path.relpath(schema_file, registry_path.parent)).as_posix(),
        )
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid registry entry: {exc.errors()[0]['msg']}") from exc

    try:
        existing = registered_entries(registry_path)
    except ViaError as exc:
        raise _fail(exc) from exc
    if any(known.base_url == entry.base_url for known in existing):
        _console.print("[yellow]Base URL already exists in registry, skipping.[/yellow]")
        return
    for known in existing:
        if schema_location(registry_path, known).resolve() == schema_file.resolve():
            raise _fail(RegistryError(base_url, f"schema name {schema_name!r} is already used by {known.base_url}"))

    _console.print("\nGenerating OpenAPI schema...")
    try:
        schema = asyncio.run(generate_schema(url, settings=settings))
        write_schema(schema, schema_file)
        added = add_registry_entry(registry_path, entry)
    except ViaError as exc:
        raise _fail(exc) from exc

    _console.print(f"Wrote {len(schema.routes)} routes to {schema_file}")
    if added:
        _console.print("\n[green]Done! Registry updated.[/green]")
    else:
        _console.print("[yellow]Base URL already exists in registry, skipping.[/yellow]")


@app.command()
def setup(registry: Optional[Path] = RegistryOption) -> None:
    """Interactive mode selection."""

    print_banner(_console)
    mode = typer.prompt("Choose generation mode (openapi/manual)", default="openapi", value_proc=_mode)
    if mode == "openapi":
        generate(url=None, base_url=None, schema_name=None, registry=registry, schema_dir=None)
    else:
        _console.print("Manual mode selected.")
        init(registry=registry)


@app.command()
def routes(
    base_url: str = typer.Argument(..., help="Registered base URL."),
    verb: Optional[str] = typer.Option(None, "--verb", help="Only routes declaring this verb."),
    registry: Optional[Path] = RegistryOption,
) -> None:
    """List the routes declared for a base URL."""

    path = registry or AppSettings().registry_path
    try:
        schema = load_registry(path).schema_for(base_url)
        method = HttpVerb.parse(verb) if verb else None
    except ViaError as exc:
        raise _fail(exc) from exc
    _console.print(build_routes_table(base_url, schema, method))


@app.command()
def call(
    verb: str = typer.Argument(..., help="GET, POST, PUT or DELETE."),
    base_url: str = typer.Argument(..., help="Registered base URL."),
    route: str = typer.Argument(..., help="Route exactly as declared, e.g. /pet/{petId}."),
    body: Optional[str] = typer.Option(None, "--body", help="JSON request body (POST/PUT)."),
    registry: Optional[Path] = RegistryOption,
) -> None:
    """Dispatch one request and print the decoded JSON response."""

    settings = AppSettings()
    path = registry or settings.registry_path

    payload: Any = None
    if body is not None:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise typer.BadParameter(f"--body is not valid JSON: {exc}") from exc

    try:
        method = HttpVerb.parse(verb)
    except ViaError as exc:
        raise _fail(exc) from exc
    if payload is not None and not method.sends_body:
        raise typer.BadParameter(f"{method.value} does not take --body")

    try:
        dispatcher = load_registry(path).dispatcher_for(base_url, settings=settings)
        if method is HttpVerb.GET:
            result = asyncio.run(dispatcher.get(route))
        elif method is HttpVerb.DELETE:
            result = asyncio.run(dispatcher.delete(route))
        elif method is HttpVerb.POST:
            result = asyncio.run(dispatcher.post(route, payload))
        else:
            result = asyncio.run(dispatcher.put(route, payload))
    except ViaError as exc:
        raise _fail(exc) from exc

    _console.print_json(data=result)


def run() -> None:
    app()
