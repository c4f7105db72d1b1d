"""Orchestration API contract.

Why Protocol:
- A structural contract (duck typing) instead of inheritance, so the HTTP
  adapter and test doubles are interchangeable.
- Keeps the Core free of transport concerns (auth, retries, timeouts).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import SpawnRequest, SpawnResponse


@runtime_checkable
class SpawnClient(Protocol):
    """Minimal contract for spawning a backend.

    Design rules:
    - `spawn` is async because it performs network I/O.
    - Failures are raised as `core.domain.errors.TransportError`; the caller
      surfaces the message unchanged.
    """

    async def spawn(self, request: SpawnRequest) -> SpawnResponse:
        """Ask the orchestration API to spawn a backend for `request`."""

        ...
