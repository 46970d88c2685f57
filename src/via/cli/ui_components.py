"""Rich components for the CLI.

Kept apart from the commands so tables and panels can be reused.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from via.core.domain.models import ApiSchema
from via.core.domain.verbs import HttpVerb
from via.core.services.contract_resolver import routes_for


def print_banner(console: Console) -> None:
    title = Text("Via", style="bold cyan")
    subtitle = Text("Typed API Registry Generator", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_routes_table(base_url: str, schema: ApiSchema, verb: HttpVerb | None = None) -> Table:
    """One row per declared (route, verb); optionally filtered to one verb."""

    table = Table(title=base_url)
    table.add_column("Verb", style="cyan", no_wrap=True)
    table.add_column("Route", style="white")
    table.add_column("Body", style="green")
    table.add_column("Summary", style="dim")

    verbs = [verb] if verb is not None else list(HttpVerb)
    for method in verbs:
        for route in sorted(routes_for(schema, method)):
            operation = schema.routes[route][method]
            table.add_row(
                method.value,
                route,
                "yes" if operation.request_body is not None else "-",
                operation.summary or "",
            )
    return table
