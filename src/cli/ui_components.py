"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from core.domain.models import EmbeddedResponse
from core.errors import LinkwalkError


def render_document(doc: Any) -> Syntax:
    """Documento JSON con resaltado."""

    return Syntax(json.dumps(doc, indent=2, ensure_ascii=False), "json", word_wrap=True)


def build_response_panel(response: Any, *, uri: str | None = None) -> Panel:
    """Panel con status y body de una respuesta (real o sintética)."""

    synthetic = isinstance(response, EmbeddedResponse)
    title = Text(f"HTTP {response.status_code}", style="bold green" if response.status_code < 400 else "bold red")
    if uri:
        title.append(f"  {uri}", style="dim")

    try:
        body: Any = render_document(response.json())
    except ValueError:
        body = Text(response.text)

    subtitle = Text(response.remark, style="yellow") if synthetic else None
    return Panel(body, title=title, subtitle=subtitle, border_style="yellow" if synthetic else "cyan")


def build_error_panel(error: LinkwalkError) -> Panel:
    """Panel para un error con el contexto parcial del recorrido."""

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Error", f"{type(error).__name__}: {error}")
    if error.uri:
        table.add_row("Last URI", error.uri)
    status = getattr(error.response, "status_code", None)
    if status is not None:
        table.add_row("Last status", str(status))
    if error.__cause__ is not None:
        table.add_row("Cause", f"{type(error.__cause__).__name__}: {error.__cause__}")
    if error.doc is not None:
        table.add_row("Document", render_document(error.doc) if not isinstance(error.doc, str) else error.doc)
    return Panel(table, title=Text("Traversal failed", style="bold red"), border_style="red")


def print_error(console: Console, error: LinkwalkError) -> None:
    console.print(build_error_panel(error))
