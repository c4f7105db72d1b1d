"""Error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    TRANSPORT_ERROR = 1
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3


@dataclass
class JamsocketError(Exception):
    message: str
    code: ExitCode = ExitCode.TRANSPORT_ERROR

    def __str__(self) -> str:
        return self.message


@dataclass
class InvalidIdentifier(JamsocketError):
    """Malformed `service/environment` argument. Detected before any I/O."""

    raw: str = ""
    code: ExitCode = ExitCode.VALIDATION_ERROR


@dataclass
class InvalidPort(JamsocketError):
    """Port outside [1, 65535]. Detected before any I/O."""

    port: int = 0
    code: ExitCode = ExitCode.VALIDATION_ERROR


@dataclass
class ConfigError(JamsocketError):
    code: ExitCode = ExitCode.CONFIG_ERROR


@dataclass
class TransportError(JamsocketError):
    """Any failure reported by the API client; the message is shown as-is."""

    status_code: int | None = None


def user_facing_error(message: str) -> str:
    return f"Error: {message}"
