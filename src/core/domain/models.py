"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict, self-documenting value objects (Field) without coupling the Core
  to HTTP or CLI libraries.
- Frozen models: every invocation builds fresh values and never mutates them.

Note:
- These models describe *what* a spawn is, not *how* it is requested.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ServiceIdentifier(BaseModel):
    """A `service` optionally scoped to an `environment` (`name[/env]`)."""

    model_config = ConfigDict(frozen=True)

    service: str = Field(
        ...,
        min_length=1,
        description="Service name (first segment of the identifier).",
    )
    environment: str | None = Field(
        default=None,
        min_length=1,
        description="Environment name; optional when the service has exactly one.",
    )


class SpawnOptions(BaseModel):
    """Optional runtime parameters collected from CLI flags."""

    model_config = ConfigDict(frozen=True)

    env: dict[str, str] | None = Field(
        default=None,
        description="Environment variables for the backend (last occurrence wins).",
    )
    grace_period_seconds: int | None = Field(
        default=None,
        description="Seconds to keep the backend alive after its last connection closes.",
    )
    port: int | None = Field(
        default=None,
        description="Port the proxy forwards to; range-checked by the request builder.",
    )
    image_tag: str | None = Field(
        default=None,
        description="Image tag or digest to spawn.",
    )
    require_bearer_token: bool = Field(
        default=False,
        description="Ask the server to generate a bearer token for the backend.",
    )
    lock: str | None = Field(
        default=None,
        description="Lock token: reusing it returns the existing backend.",
    )


class SpawnRequest(BaseModel):
    """Validated payload handed to the API client."""

    model_config = ConfigDict(frozen=True)

    service: str = Field(..., min_length=1)
    environment: str | None = None
    env: dict[str, str] | None = None
    grace_period_seconds: int | None = None
    port: int | None = None
    image_tag: str | None = None
    require_bearer_token: bool = False
    lock: str | None = None

    def payload(self) -> dict[str, Any]:
        """Fields to send; absent values are omitted so the server applies its defaults."""

        return self.model_dump(exclude_none=True)


class SpawnResponse(BaseModel):
    """Result reported by the orchestration API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(
        ...,
        description="Backend name.",
    )
    status: str | None = Field(
        default=None,
        description="Backend status at spawn time, if reported.",
    )
    url: str = Field(
        ...,
        description="Public URL of the backend.",
    )
    status_url: str = Field(
        ...,
        description="URL to poll for the backend status.",
    )
    ready_url: str = Field(
        ...,
        description="URL that blocks until the backend is ready.",
    )
    bearer_token: str | None = Field(
        default=None,
        description="Generated bearer token (only when one was required).",
    )
    spawned: bool | None = Field(
        default=None,
        description="With a lock: whether this call created the backend or reused one.",
    )


class ReportLine(BaseModel):
    """One `label: value` line of the success report."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str

    @property
    def padded_label(self) -> str:
        return f"{self.label}:".ljust(16)

    @property
    def text(self) -> str:
        return f"{self.padded_label}{self.value}"
