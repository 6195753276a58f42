"""CLI de linkwalk (Typer).

Por qué una CLI fina:
- Toda la lógica vive en `core.services.traversal`; aquí solo se parsean
  argumentos, se ejecuta un recorrido y se presenta el resultado con Rich.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Coroutine, List, Optional

import typer
from rich.console import Console

from cli.ui_components import build_response_panel, print_error, render_document
from core.config import AppSettings
from core.domain.media_types import MediaType
from core.errors import LinkwalkError
from core.logging_utils import configure_logging
from core.services.traversal import Traversal

app = typer.Typer(no_args_is_help=True, help="Follow hypermedia links from a start URI.")

_console = Console()

_LINKS = typer.Argument(None, help="Link relations to follow, in order.")
_HAL = typer.Option(False, "--hal/--json", help="Treat documents as JSON-HAL instead of plain JSON.")
_PARAMS = typer.Option(None, "--param", "-p", help="URI template parameter as key=value (repeatable).")
_HEADERS = typer.Option(None, "--header", "-H", help='Extra request header as "Name: value" (repeatable).')
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Log every hop (debug level).")


def _parse_params(values: List[str] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got {raw!r}", param_hint="--param")
        key, value = raw.split("=", 1)
        params[key.strip()] = value
    return params


def _parse_headers(values: List[str] | None) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values or []:
        if ":" not in raw:
            raise typer.BadParameter(f'expected "Name: value", got {raw!r}', param_hint="--header")
        name, value = raw.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def _build(
    uri: str,
    links: List[str] | None,
    *,
    hal: bool,
    params: List[str] | None,
    headers: List[str] | None,
    verbose: bool,
) -> Traversal:
    settings = AppSettings()
    configure_logging(level="DEBUG" if verbose else None, settings=settings)

    traversal = Traversal(MediaType.from_bool(hal), uri, settings=settings).follow(list(links or []))
    template_parameters = _parse_params(params)
    if template_parameters:
        traversal.with_template_parameters(template_parameters)
    extra_headers = _parse_headers(headers)
    if extra_headers:
        traversal.with_request_options(headers=extra_headers)
    return traversal


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        return asyncio.run(coro)
    except LinkwalkError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=1) from exc


@app.command()
def get(
    uri: str = typer.Argument(..., help="Start URI."),
    links: Optional[List[str]] = _LINKS,
    hal: bool = _HAL,
    param: Optional[List[str]] = _PARAMS,
    header: Optional[List[str]] = _HEADERS,
    verbose: bool = _VERBOSE,
) -> None:
    """Follow the links and print the final HTTP response."""

    traversal = _build(uri, links, hal=hal, params=param, headers=header, verbose=verbose)
    response = _run(traversal.get())
    _console.print(build_response_panel(response))


@app.command()
def resource(
    uri: str = typer.Argument(..., help="Start URI."),
    links: Optional[List[str]] = _LINKS,
    hal: bool = _HAL,
    param: Optional[List[str]] = _PARAMS,
    header: Optional[List[str]] = _HEADERS,
    verbose: bool = _VERBOSE,
) -> None:
    """Follow the links and print the final resource as JSON."""

    traversal = _build(uri, links, hal=hal, params=param, headers=header, verbose=verbose)
    doc = _run(traversal.get_resource())
    _console.print(render_document(doc))


@app.command(name="uri")
def uri_command(
    uri: str = typer.Argument(..., help="Start URI."),
    links: Optional[List[str]] = _LINKS,
    hal: bool = _HAL,
    param: Optional[List[str]] = _PARAMS,
    header: Optional[List[str]] = _HEADERS,
    verbose: bool = _VERBOSE,
) -> None:
    """Follow the links and print the final URI without requesting it."""

    traversal = _build(uri, links, hal=hal, params=param, headers=header, verbose=verbose)
    _console.print(_run(traversal.get_uri()), soft_wrap=True, highlight=False)


@app.command()
def send(
    method: str = typer.Argument(..., help="POST, PUT, PATCH or DELETE."),
    uri: str = typer.Argument(..., help="Start URI."),
    links: Optional[List[str]] = _LINKS,
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
    hal: bool = _HAL,
    param: Optional[List[str]] = _PARAMS,
    header: Optional[List[str]] = _HEADERS,
    verbose: bool = _VERBOSE,
) -> None:
    """Follow the links and send a write request to the final URI."""

    verb = method.strip().lower()
    if verb not in ("post", "put", "patch", "delete"):
        raise typer.BadParameter("method must be one of POST, PUT, PATCH, DELETE", param_hint="METHOD")
    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except ValueError as exc:
            raise typer.BadParameter(f"--data is not valid JSON: {exc}", param_hint="--data") from exc
    if verb == "delete" and body is not None:
        raise typer.BadParameter("DELETE does not take a body", param_hint="--data")

    traversal = _build(uri, links, hal=hal, params=param, headers=header, verbose=verbose)
    action = traversal.delete() if verb == "delete" else getattr(traversal, verb)(body)
    result = _run(action)
    _console.print(build_response_panel(result.response, uri=result.uri))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
