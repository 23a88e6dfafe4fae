"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import API_KEY_ENV, AppSettings, get_user_env_file, load_settings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = load_settings()

    table = Table(title="plantnet-tools Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.api_key:
        table.add_row("API key", "OK", f"{API_KEY_ENV} is set")
    else:
        table.add_row("API key", "MISSING", f"Set {API_KEY_ENV} or run `plantnet-tools doctor setup`")
    table.add_row("Base URL", "OK", settings.base_url)
    timeout = f"{settings.http_timeout_seconds}s" if settings.http_timeout_seconds else "none"
    table.add_row("HTTP timeout", "OK", timeout)
    table.add_row("User config", "OK" if get_user_env_file().exists() else "ABSENT", str(get_user_env_file()))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings.base_url, settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not settings.api_key:
        _console.print("\n[yellow]Note:[/yellow] Get a free API key at https://my.plantnet.org/")


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores the API key in the user config .env)."""

    api_key = typer.prompt("Pl@ntNet API key", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("api key is required")

    env_path = write_user_env_vars({API_KEY_ENV: api_key})
    _console.print(f"[green]Saved config to:[/green] {env_path}")
