"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP) read configuration consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import ConfigError


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "jamsocket"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "jamsocket"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "jamsocket"
    return Path.home() / ".config" / "jamsocket"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# jamsocket user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars, .env files).
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="JAMSOCKET_",
        extra="ignore",
        case_sensitive=False,
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="https://api.jamsocket.com",
        min_length=8,
        description="Base URL of the orchestration API.",
    )
    account: str | None = Field(
        default=None,
        description="Account that owns the services.",
    )
    api_token: str | None = Field(
        default=None,
        description="API token, sent as a bearer token.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="jamsocket-cli-python/0.1",
        min_length=1,
        description="User-Agent sent to the API.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the `jamsocket` logger (DEBUG, INFO, WARNING, ERROR).",
    )

    def __init__(self, **values: Any) -> None:
        # Project .env first (dev), then the user's global config (written by `login`).
        # Resolved per instance so XDG_CONFIG_HOME/APPDATA changes are honoured.
        values.setdefault("_env_file", (".env", str(get_user_env_file())))
        super().__init__(**values)


def load_settings(**values: Any) -> AppSettings:
    """Build `AppSettings`, reporting invalid values as a `ConfigError`."""

    try:
        return AppSettings(**values)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error.get("loc") else "settings"
            problems.append(f"JAMSOCKET_{field.upper()}: {error['msg']}")
        raise ConfigError(message="Invalid configuration: " + "; ".join(problems)) from exc
