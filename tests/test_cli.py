"""CLI tests: flag handling, output contract and exit codes."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

import adapters.api_client as api_client
import cli.main as cli_main
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import SpawnRequest, SpawnResponse

runner = CliRunner()

_RESPONSE = SpawnResponse(
    name="backend-abc",
    status=None,
    url="https://backend-abc.example.net/",
    status_url="https://api.example.net/backend/backend-abc/status",
    ready_url="https://api.example.net/backend/backend-abc/ready",
    bearer_token="tok-123",
    spawned=False,
)


class FakeSpawnClient:
    def __init__(self, response: SpawnResponse = _RESPONSE, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[SpawnRequest] = []

    async def spawn(self, request: SpawnRequest) -> SpawnResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> FakeSpawnClient:
    client = FakeSpawnClient()
    monkeypatch.setattr(cli_main, "build_spawn_client", lambda settings: client)
    return client


@pytest.fixture
def forbidden_client(monkeypatch: pytest.MonkeyPatch) -> None:
    def factory(settings: AppSettings) -> FakeSpawnClient:
        raise AssertionError("no client may be built after a validation error")

    monkeypatch.setattr(cli_main, "build_spawn_client", factory)


def _report_lines(output: str) -> list[str]:
    lines = output.splitlines()
    start = lines.index("Backend spawned!")
    return lines[start + 1 :]


def test_spawn_builds_request_from_flags(fake_client: FakeSpawnClient) -> None:
    result = runner.invoke(
        cli_main.app,
        ["spawn", "my-service/prod", "-e", "FOO=bar", "-e", "FOO=baz", "-e", "X=a=b", "-g", "60", "-t", "latest"],
    )

    assert result.exit_code == 0, result.output
    assert len(fake_client.requests) == 1
    assert fake_client.requests[0].payload() == {
        "service": "my-service",
        "environment": "prod",
        "env": {"FOO": "baz", "X": "a=b"},
        "grace_period_seconds": 60,
        "image_tag": "latest",
        "require_bearer_token": False,
    }


def test_service_spawn_alias_is_equivalent(fake_client: FakeSpawnClient) -> None:
    result = runner.invoke(cli_main.app, ["service", "spawn", "my-service", "-r", "-l", "lock-1", "-p", "9000"])

    assert result.exit_code == 0, result.output
    request = fake_client.requests[0]
    assert request.require_bearer_token is True
    assert request.lock == "lock-1"
    assert request.port == 9000


def test_spawn_prints_report_with_bearer_token_and_spawned(fake_client: FakeSpawnClient) -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service", "--lock", "lock-1"])

    assert result.exit_code == 0, result.output
    assert _report_lines(result.output) == [
        "backend name:   backend-abc",
        "backend status: -",
        "backend url:    https://backend-abc.example.net/",
        "status url:     https://api.example.net/backend/backend-abc/status",
        "ready url:      https://api.example.net/backend/backend-abc/ready",
        "bearer token:   tok-123",
        "spawned:        false",
    ]


def test_spawn_without_lock_hides_spawned_line(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeSpawnClient(response=_RESPONSE.model_copy(update={"bearer_token": None}))
    monkeypatch.setattr(cli_main, "build_spawn_client", lambda settings: client)

    result = runner.invoke(cli_main.app, ["spawn", "my-service"])

    assert result.exit_code == 0, result.output
    assert len(_report_lines(result.output)) == 5


def test_spawn_json_output(fake_client: FakeSpawnClient) -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["name"] == "backend-abc"
    assert "status" not in payload


@pytest.mark.usefixtures("forbidden_client")
def test_invalid_port_aborts_before_any_request() -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service", "--port", "70000"])

    assert result.exit_code == 2
    assert "Error: Error parsing port. Must be an integer >= 1 and <= 65535. Received for --port: 70000" in result.output


@pytest.mark.usefixtures("forbidden_client")
def test_invalid_identifier_aborts_before_any_request() -> None:
    result = runner.invoke(cli_main.app, ["spawn", "a/b/c"])

    assert result.exit_code == 2
    assert "Error: Invalid service/environment name: a/b/c" in result.output


@pytest.mark.usefixtures("forbidden_client")
def test_malformed_env_flag_is_usage_error() -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service", "-e", "NOVALUE"])

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_transport_error_is_surfaced_verbatim(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeSpawnClient(error=TransportError(message="Service my-service not found.", status_code=404))
    monkeypatch.setattr(cli_main, "build_spawn_client", lambda settings: client)

    result = runner.invoke(cli_main.app, ["spawn", "my-service"])

    assert result.exit_code == 1
    assert "Error: Service my-service not found." in result.output
    assert "Backend spawned!" not in result.output


def test_missing_credentials_is_config_error() -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service"])

    assert result.exit_code == 3
    assert "jamsocket login" in result.output


def test_port_flag_is_hidden_from_help() -> None:
    result = runner.invoke(cli_main.app, ["spawn", "--help"])

    assert result.exit_code == 0
    assert "--grace" in result.output
    assert "--port" not in result.output


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG config dir on Linux only")
def test_login_writes_user_config(tmp_path: Path) -> None:
    result = runner.invoke(cli_main.app, ["login"], input="acme\nsecret-token\n")

    assert result.exit_code == 0, result.output
    env_file = tmp_path / "config" / "jamsocket" / ".env"
    content = env_file.read_text(encoding="utf-8")
    assert "JAMSOCKET_ACCOUNT=acme" in content
    assert "JAMSOCKET_API_TOKEN=secret-token" in content


@pytest.mark.usefixtures("forbidden_client")
def test_invalid_settings_do_not_mask_identifier_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JAMSOCKET_HTTP_TIMEOUT_SECONDS", "0")

    result = runner.invoke(cli_main.app, ["spawn", "a/b/c"])

    assert result.exit_code == 2
    assert "Error: Invalid service/environment name: a/b/c" in result.output


@pytest.mark.usefixtures("forbidden_client")
def test_invalid_settings_are_reported_as_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JAMSOCKET_HTTP_TIMEOUT_SECONDS", "abc")

    result = runner.invoke(cli_main.app, ["spawn", "svc"])

    assert result.exit_code == 3
    assert "Error: Invalid configuration: JAMSOCKET_HTTP_TIMEOUT_SECONDS" in result.output
    assert "Traceback" not in result.output


def test_verbose_logs_request_without_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JAMSOCKET_API_BASE_URL", "https://api.example.net")
    monkeypatch.setenv("JAMSOCKET_ACCOUNT", "acme")
    monkeypatch.setenv("JAMSOCKET_API_TOKEN", "secret-token")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_RESPONSE.model_dump(exclude_none=True))

    real_build = api_client.build_async_client
    monkeypatch.setattr(
        api_client,
        "build_async_client",
        lambda settings, **kwargs: real_build(settings, transport=httpx.MockTransport(handler)),
    )

    result = runner.invoke(cli_main.app, ["-v", "spawn", "my-service"])

    assert result.exit_code == 0, result.output
    assert seen[0].headers["Authorization"] == "Bearer secret-token"
    assert "DEBUG jamsocket.adapters.api_client: POST /user/acme/service/my-service/spawn" in result.output
    assert "secret-token" not in result.output


def test_empty_lock_hides_spawned_line(fake_client: FakeSpawnClient) -> None:
    result = runner.invoke(cli_main.app, ["spawn", "my-service", "-l", ""])

    assert result.exit_code == 0, result.output
    assert fake_client.requests[0].lock == ""
    assert not any(line.startswith("spawned:") for line in _report_lines(result.output))
