"""CLI `plantnet-tools` (Typer + Rich).

Comandos:
- identify: identifica una planta a partir de URLs de imágenes.
- projects: lista las floras (proyectos) disponibles.
- quota: explica la cuota diaria de la API.
- serve: publica las herramientas como servidor MCP por stdio.
- doctor: diagnósticos de configuración.
"""

from __future__ import annotations

import asyncio
import logging

import typer
from pydantic import ValidationError as SchemaError
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown

from adapters.mcp_server import build_mcp_server
from adapters.plantnet_client import PlantNetClient
from adapters.report_formatter import QUOTA_GUIDE, render_identification
from cli import doctor
from cli.ui_components import build_projects_table, build_report_panel, print_error
from core.config import AppSettings, load_settings
from core.domain.models import MAX_RESULTS, IdentificationRequest
from core.domain.organ import Organ
from core.errors import ConfigurationError, PlantNetError, ValidationError
from core.services.tool_registry import ToolRegistry

app = typer.Typer(no_args_is_help=True, help="Pl@ntNet plant identification tools.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    # stdout queda libre para el transporte stdio de MCP.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_client(settings: AppSettings | None = None) -> PlantNetClient:
    try:
        return PlantNetClient.from_settings(settings or load_settings())
    except ConfigurationError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=2) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    _configure_logging(verbose)


@app.command()
def identify(
    image_urls: list[str] = typer.Argument(..., help="Publicly accessible image URLs (max 5)."),
    organs: list[Organ] | None = typer.Option(
        None,
        "--organ",
        "-o",
        help="Organ shown in each image, in order. Defaults to 'auto' for every image.",
    ),
    project: str = typer.Option("all", "--project", "-p", help="Flora project ID."),
    lang: str = typer.Option("en", "--lang", "-l", help="Language for common names."),
    nb_results: int = typer.Option(5, "--nb-results", "-n", min=1, max=MAX_RESULTS),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
) -> None:
    """Identify a plant from one or more photos."""

    organs = organs or [Organ.default()] * len(image_urls)
    try:
        request = IdentificationRequest(
            images=tuple(image_urls),
            organs=tuple(organs),
            project=project,
            lang=lang,
            nb_results=nb_results,
        )
    except SchemaError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        print_error(_err_console, ValidationError(f"Invalid request: {problems}"))
        raise typer.Exit(code=1) from exc
    client = _build_client()

    try:
        result = asyncio.run(client.identify(request))
    except PlantNetError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc

    if as_json:
        _console.print_json(data=result.model_dump(mode="json", by_alias=True, exclude_unset=True))
        return
    _console.print(build_report_panel(render_identification(result)))


@app.command()
def projects(
    lang: str = typer.Option("en", "--lang", "-l", help="Language for project names."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON mapping."),
) -> None:
    """List the available flora projects."""

    client = _build_client()
    try:
        directory = asyncio.run(client.list_projects(lang))
    except PlantNetError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc

    if as_json:
        _console.print_json(data=directory.model_dump(mode="json"))
        return
    _console.print(build_projects_table(directory))


@app.command()
def quota() -> None:
    """Explain the daily API quota (no network call)."""

    _console.print(Markdown(QUOTA_GUIDE))


@app.command()
def serve() -> None:
    """Serve the tools over MCP (stdio)."""

    registry = ToolRegistry(_build_client())
    build_mcp_server(registry).run()


def run() -> None:
    app()
