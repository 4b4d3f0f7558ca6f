from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterator

import httpx
import pytest
from typer.testing import CliRunner

import serpstat_mcp.cli as cli_mod
from serpstat_mcp.cli import app
from serpstat_mcp.core import SerpstatConfig, build_default_registry
from serpstat_mcp.core.upstream import SerpstatClient

runner = CliRunner()


def _mock_client(config: SerpstatConfig) -> SerpstatClient:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content.decode())
        return httpx.Response(200, json={"id": payload["id"], "result": {"data": {"left_lines": 5}}})

    transport = httpx.MockTransport(handler)
    return SerpstatClient(config.upstream_settings(), client=httpx.AsyncClient(transport=transport))


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture()
def configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERPSTAT_API_TOKEN", "test-token")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setattr(cli_mod, "_build_client", _mock_client)


def test_version_command_runs() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "Serpstat MCP server version" in result.stdout


def test_tools_json_lists_discovery_documents() -> None:
    result = runner.invoke(app, ["tools", "--json"])

    assert result.exit_code == 0
    entries = json.loads(result.stdout)
    assert {entry["name"] for entry in entries} >= {"get_keywords", "delete_project", "get_credits_stats"}
    assert all(set(entry) == {"name", "description", "inputSchema"} for entry in entries)


def test_tools_table_renders() -> None:
    result = runner.invoke(app, ["tools"])

    assert result.exit_code == 0
    assert "Serpstat tools" in result.stdout


def test_call_prints_success_envelope(configured: None) -> None:
    result = runner.invoke(app, ["call", "get_credits_stats"])

    assert result.exit_code == 0
    envelope = json.loads(result.stdout)
    assert "isError" not in envelope
    assert json.loads(envelope["content"][0]["text"]) == {"data": {"left_lines": 5}}


def test_call_error_envelope_exits_nonzero(configured: None) -> None:
    result = runner.invoke(app, ["call", "delete_project", "--args", '{"project_id": 0}'])

    assert result.exit_code == 1
    assert "Invalid parameters" in result.output
    assert '"isError": true' in result.output


@pytest.mark.parametrize("args", ["{not json", "[1, 2]"])
def test_call_rejects_bad_arguments(configured: None, args: str) -> None:
    result = runner.invoke(app, ["call", "get_keywords", "--args", args])

    assert result.exit_code == 2


def test_missing_token_exits_with_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SERPSTAT_API_TOKEN", raising=False)

    result = runner.invoke(app, ["call", "get_credits_stats"])

    assert result.exit_code == 2


def test_repeated_invocations_reconfigure_logging(configured: None, monkeypatch: pytest.MonkeyPatch) -> None:
    first = runner.invoke(app, ["call", "delete_project", "--args", '{"project_id": 0}'])
    monkeypatch.delenv("SERPSTAT_API_TOKEN")
    second = runner.invoke(app, ["call", "get_credits_stats"])

    assert first.exit_code == 1
    assert second.exit_code == 2


def test_no_subcommand_starts_server(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(cli_mod, "_run_server", lambda: calls.append("serve"))

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert calls == ["serve"]


@pytest.mark.asyncio
async def test_stop_signal_cancels_server_and_closes_client(monkeypatch: pytest.MonkeyPatch) -> None:
    started = asyncio.Event()
    cancelled: list[bool] = []

    async def fake_serve(_registry: object) -> None:
        started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    monkeypatch.setattr(cli_mod, "serve_stdio", fake_serve)
    client = _mock_client(SerpstatConfig(api_token="t"))
    registry = build_default_registry(client)
    stop = asyncio.Event()

    async def trigger() -> None:
        await started.wait()
        stop.set()

    trigger_task = asyncio.create_task(trigger())
    await cli_mod._serve_until_stopped(registry, stop)
    await trigger_task

    assert cancelled == [True]
    assert client.closed


@pytest.mark.asyncio
async def test_server_exit_closes_client(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_serve(_registry: object) -> None:
        return None

    monkeypatch.setattr(cli_mod, "serve_stdio", fake_serve)
    client = _mock_client(SerpstatConfig(api_token="t"))

    await cli_mod._serve_until_stopped(build_default_registry(client))

    assert client.closed
