"""Orchestration API client: spawn over HTTP.

Implements `core.interfaces.api_client.SpawnClient`. Every failure (network,
authorization, server-side rejection, unexpected payload) becomes a
`TransportError` whose message is the server's own wording when it gives one.
No retries happen here.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import ConfigError, TransportError
from core.domain.models import SpawnRequest, SpawnResponse
from core.interfaces.api_client import SpawnClient
from core.logging import get_logger

logger = get_logger(__name__)


def spawn_path(account: str, service: str) -> str:
    return f"/user/{quote(account, safe='')}/service/{quote(service, safe='')}/spawn"


def to_wire_body(request: SpawnRequest) -> dict[str, Any]:
    """Map a `SpawnRequest` to the API's JSON body. Absent fields are omitted."""

    body: dict[str, Any] = {
        "env": request.env,
        "grace_period_seconds": request.grace_period_seconds,
        "port": request.port,
        "tag": request.image_tag,
        "require_bearer_token": request.require_bearer_token,
        "lock": request.lock,
        "service_environment": request.environment,
    }
    return {k: v for k, v in body.items() if v is not None}


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    text = response.text.strip()
    return text or f"HTTP {response.status_code} {response.reason_phrase}".strip()


class HttpSpawnClient(SpawnClient):
    """Spawns backends through the orchestration HTTP API."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "HttpSpawnClient":
        """Build a client, failing early when credentials are missing."""

        if not settings.account:
            raise ConfigError(message="No account configured. Run `jamsocket login` or set JAMSOCKET_ACCOUNT")
        if not settings.api_token:
            raise ConfigError(message="No API token configured. Run `jamsocket login` or set JAMSOCKET_API_TOKEN")
        return cls(settings)

    async def spawn(self, request: SpawnRequest) -> SpawnResponse:
        path = spawn_path(self._settings.account or "", request.service)
        body = to_wire_body(request)
        logger.debug("POST %s fields=%s", path, sorted(body))

        if self._client is not None:
            response = await self._post(self._client, path, body)
        else:
            async with build_async_client(self._settings) as client:
                response = await self._post(client, path, body)

        if response.is_error:
            message = _error_message(response)
            logger.info("spawn rejected: HTTP %s", response.status_code)
            raise TransportError(message=message, status_code=response.status_code)

        try:
            return SpawnResponse.model_validate(response.json())
        except ValueError as exc:
            # pydantic.ValidationError is a ValueError; so is a JSON decode failure.
            detail = "unexpected response payload" if isinstance(exc, ValidationError) else "invalid JSON response"
            raise TransportError(
                message=f"Spawn failed: {detail}",
                status_code=response.status_code,
            ) from exc

    async def _post(self, client: httpx.AsyncClient, path: str, body: dict[str, Any]) -> httpx.Response:
        try:
            return await client.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.info("spawn request failed: %s", exc)
            raise TransportError(message=str(exc) or exc.__class__.__name__) from exc


def build_spawn_client(settings: AppSettings) -> SpawnClient:
    """Factory used by the CLI to obtain the configured client."""

    return HttpSpawnClient.from_settings(settings)
