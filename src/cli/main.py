"""CLI entry point (Typer).

Commands only translate between the terminal and the Core: flags are handed
to `core.services.spawn_request`, the network call goes through a
`SpawnClient`, and rendering lives in `cli.ui_components`.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer
from rich.console import Console

from adapters.api_client import build_spawn_client
from adapters.json_exporter import render_response_json
from cli.doctor import app as doctor_app
from cli.ui_components import print_error, print_report
from core.config import load_settings, write_user_env_vars
from core.domain.errors import ConfigError, JamsocketError
from core.logging import configure_logging, get_logger
from core.services.spawn_request import format_report, prepare_spawn

app = typer.Typer(no_args_is_help=True, help="Spawn and inspect session backends.")
service_app = typer.Typer(no_args_is_help=True, help="Commands for working with services.")
app.add_typer(service_app, name="service")
app.add_typer(doctor_app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

logger = get_logger(__name__)

_SPAWN_HELP = "Spawns a session backend with the provided service/environment's docker image."

_SPAWN_EPILOG = (
    "Examples:\n\n"
    "  jamsocket service spawn my-service\n\n"
    "  jamsocket service spawn my-service/prod\n\n"
    "  jamsocket service spawn my-service -e SOME_ENV_VAR=foo -e ANOTHER_ENV_VAR=bar\n\n"
    "  jamsocket service spawn my-service -g 60\n\n"
    "  jamsocket service spawn my-service -t latest"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    """Spawn and inspect session backends."""

    level = "DEBUG"
    if not verbose:
        try:
            level = load_settings().log_level
        except ConfigError:
            # Reported by the command that needs the settings.
            level = "WARNING"
    configure_logging(level)


def parse_env_pair(value: str) -> tuple[str, str]:
    """Split `KEY=VALUE` on the first `=`. The key must be non-empty."""

    key, sep, val = value.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"Expected KEY=VALUE, received: {value}", param_hint="'--env'")
    return key, val


def spawn(
    service: str = typer.Argument(
        ...,
        help=(
            "Name of service/environment to spawn. (Providing the environment is optional "
            "if service only has one environment, otherwise it is required)"
        ),
    ),
    env: Optional[List[str]] = typer.Option(
        None,
        "--env",
        "-e",
        metavar="KEY=VALUE",
        help="Environment variable for the backend. Repeatable; the last value for a key wins.",
    ),
    grace: Optional[int] = typer.Option(
        None,
        "--grace",
        "-g",
        help=(
            "Optional grace period (in seconds) to wait after last connection is closed "
            "before shutting down container (default is 300)."
        ),
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        hidden=True,
        help="Optional port to proxy requests to (default is 8080).",
    ),
    tag: Optional[str] = typer.Option(
        None,
        "--tag",
        "-t",
        help="Optional image tag or digest for the service to spawn.",
    ),
    require_bearer_token: bool = typer.Option(
        False,
        "--require-bearer-token",
        "-r",
        help=(
            "Require a bearer token to access the service. A random bearer token will be "
            "generated and returned in the result."
        ),
    ),
    lock: Optional[str] = typer.Option(
        None,
        "--lock",
        "-l",
        help="Optional lock to spawn the service with.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON."),
) -> None:
    env_pairs = [parse_env_pair(item) for item in env or []]

    try:
        request, options = prepare_spawn(
            service,
            env_pairs=env_pairs,
            grace_period_seconds=grace,
            port=port,
            image_tag=tag,
            require_bearer_token=require_bearer_token,
            lock=lock,
        )
        client = build_spawn_client(load_settings())
        response = asyncio.run(client.spawn(request))
    except JamsocketError as exc:
        logger.debug("spawn aborted: %s (exit %s)", exc.__class__.__name__, int(exc.code))
        print_error(_err_console, exc.message)
        raise typer.Exit(code=int(exc.code))

    if as_json:
        typer.echo(render_response_json(response))
        return
    print_report(_console, format_report(response, options))


service_app.command("spawn", help=_SPAWN_HELP, epilog=_SPAWN_EPILOG)(spawn)
app.command("spawn", help=_SPAWN_HELP, epilog=_SPAWN_EPILOG)(spawn)


@app.command()
def login() -> None:
    """Store the account and API token in the user config .env."""

    account = typer.prompt("Account").strip()
    token = typer.prompt("API token", hide_input=True).strip()
    if not account or not token:
        raise typer.BadParameter("account and API token are required")

    env_path = write_user_env_vars(
        {
            "JAMSOCKET_ACCOUNT": account,
            "JAMSOCKET_API_TOKEN": token,
        }
    )
    _console.print(f"[green]Saved credentials to:[/green] {env_path}")


def run() -> None:
    app(prog_name="jamsocket")


if __name__ == "__main__":
    run()
