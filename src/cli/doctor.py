"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from cli.ui_components import print_error
from core.config import AppSettings, get_user_env_file, load_settings
from core.domain.errors import ConfigError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


@app.callback()
def main() -> None:
    """Environment diagnostics and configuration checks."""


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """Any HTTP answer from the API base URL counts as reachable."""

    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings()
    except ConfigError as exc:
        print_error(Console(stderr=True), exc.message)
        raise typer.Exit(code=int(exc.code))

    table = Table(title="jamsocket doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Config file", "OK" if get_user_env_file().exists() else "MISSING", str(get_user_env_file()))
    if settings.account:
        table.add_row("Account", "OK", settings.account)
    else:
        table.add_row("Account", "MISSING", "Run `jamsocket login` or set JAMSOCKET_ACCOUNT")
    if settings.api_token:
        table.add_row("API token", "OK", "Configured")
    else:
        table.add_row("API token", "MISSING", "Run `jamsocket login` or set JAMSOCKET_API_TOKEN")
    table.add_row("API base_url", "OK", settings.api_base_url)

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not (settings.account and settings.api_token):
        _console.print("\n[yellow]Note:[/yellow] `spawn` needs both an account and an API token.")
