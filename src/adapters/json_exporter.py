"""JSON rendering of a spawn response.

Why JSON:
- Interoperability with scripts and pipelines (`--json`).
- Stable key order so output can be diffed.
"""

from __future__ import annotations

import json

from core.domain.models import SpawnResponse


def render_response_json(response: SpawnResponse) -> str:
    """Serialize `SpawnResponse` to stable, indented JSON (absent fields omitted)."""

    payload = response.model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
