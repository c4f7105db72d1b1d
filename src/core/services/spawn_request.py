"""Spawn request construction and report formatting.

The CLI delegates every decision about *what* gets sent and *what* gets
printed to these helpers. They never perform I/O, so validation failures
are always raised before a network client exists.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.domain.errors import InvalidIdentifier, InvalidPort
from core.domain.models import (
    ReportLine,
    ServiceIdentifier,
    SpawnOptions,
    SpawnRequest,
    SpawnResponse,
)

MAX_PORT = 2**16 - 1

MISSING_VALUE = "-"


def parse_identifier(raw: str) -> ServiceIdentifier:
    """Parse `service` or `service/environment`."""

    parts = raw.split("/")
    if len(parts) > 2 or parts[0] == "" or (len(parts) == 2 and parts[1] == ""):
        raise InvalidIdentifier(message=f"Invalid service/environment name: {raw}", raw=raw)

    environment = parts[1] if len(parts) == 2 else None
    return ServiceIdentifier(service=parts[0], environment=environment)


def validate_port(port: int | None) -> None:
    """Reject ports outside the 16-bit unsigned range. `None` lets the server choose."""

    if port is None:
        return
    if port < 1 or port > MAX_PORT:
        raise InvalidPort(
            message=(
                f"Error parsing port. Must be an integer >= 1 and <= {MAX_PORT}. "
                f"Received for --port: {port}"
            ),
            port=port,
        )


def normalize_env(pairs: Iterable[tuple[str, str]]) -> dict[str, str] | None:
    """Collapse repeated `-e KEY=VALUE` occurrences into a mapping.

    Pairs are applied in order, so the last occurrence of a key wins.
    An empty sequence yields `None` (the field is then omitted).
    """

    env: dict[str, str] = {}
    for key, value in pairs:
        env[key] = value
    return env or None


def build_request(identifier: ServiceIdentifier, options: SpawnOptions) -> SpawnRequest:
    return SpawnRequest(
        service=identifier.service,
        environment=identifier.environment,
        env=options.env,
        grace_period_seconds=options.grace_period_seconds,
        port=options.port,
        image_tag=options.image_tag,
        require_bearer_token=options.require_bearer_token,
        lock=options.lock,
    )


def prepare_spawn(
    raw_service: str,
    *,
    env_pairs: Sequence[tuple[str, str]] = (),
    grace_period_seconds: int | None = None,
    port: int | None = None,
    image_tag: str | None = None,
    require_bearer_token: bool = False,
    lock: str | None = None,
) -> tuple[SpawnRequest, SpawnOptions]:
    """Validate raw CLI input and build the request.

    Raises:
        InvalidIdentifier: malformed `service/environment`.
        InvalidPort: port outside [1, 65535].
    """

    identifier = parse_identifier(raw_service)
    validate_port(port)
    options = SpawnOptions(
        env=normalize_env(env_pairs),
        grace_period_seconds=grace_period_seconds,
        port=port,
        image_tag=image_tag,
        require_bearer_token=require_bearer_token,
        lock=lock,
    )
    return build_request(identifier, options), options


def _format_spawned(spawned: bool | None) -> str:
    if spawned is None:
        return MISSING_VALUE
    return "true" if spawned else "false"


def format_report(response: SpawnResponse, options: SpawnOptions) -> list[ReportLine]:
    """Build the success report.

    The five base lines are always present and ordered. The bearer token line
    follows when the response carries a non-empty one; the spawned line follows
    when a non-empty lock was *supplied as input*, whatever the response says.
    """

    has_bearer_token = bool(response.bearer_token)
    had_lock_input = bool(options.lock)

    lines = [
        ReportLine(label="backend name", value=response.name),
        ReportLine(label="backend status", value=response.status or MISSING_VALUE),
        ReportLine(label="backend url", value=response.url),
        ReportLine(label="status url", value=response.status_url),
        ReportLine(label="ready url", value=response.ready_url),
    ]
    if has_bearer_token:
        lines.append(ReportLine(label="bearer token", value=response.bearer_token))
    if had_lock_input:
        lines.append(ReportLine(label="spawned", value=_format_spawned(response.spawned)))
    return lines
