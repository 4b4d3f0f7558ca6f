from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from serpstat_mcp.core.errors import (
    SchemaDefinitionError,
    ToolAlreadyRegisteredError,
    ToolkitAlreadyRegisteredError,
    ToolRegistryError,
    UnknownToolError,
    ValidationError,
)
from serpstat_mcp.core.tool_registry import (
    CallPhase,
    ToolCall,
    ToolRegistry,
    build_default_registry,
)
from serpstat_mcp.core.tools.base import Tool, Toolkit
from serpstat_mcp.core.upstream import RetryPolicy, SerpstatClient, UpstreamSettings
from serpstat_mcp.core.validation import required_fields, validate_arguments

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler) -> SerpstatClient:
    settings = UpstreamSettings(
        base_url="https://api.serpstat.test/v4",
        api_token="token",
        retry=RetryPolicy(max_retries=0),
    )
    return SerpstatClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _respond_with(body: dict[str, Any], sent: list[dict[str, Any]] | None = None) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content.decode())
        if sent is not None:
            sent.append(payload)
        return httpx.Response(200, json={"id": payload["id"], **body})

    return handler


def _echo_tool(name: str = "echo") -> Tool:
    return Tool(
        name=name,
        description="Echo tool",
        input_schema={"type": "object", "properties": {"text": {"type": "string"}}},
        method="Test.echo",
    )


def _missing_when_empty(schema: dict[str, Any]) -> set[str]:
    try:
        validate_arguments(schema, {})
    except ValidationError as exc:
        return {item.path for item in exc.violations if item.reason == "is required"}
    return set()


def test_discovery_schemas_demand_exactly_their_required_fields() -> None:
    registry = build_default_registry()

    entries = registry.describe()

    assert len(entries) == len(registry.available_tools())
    for entry in entries:
        schema = entry["inputSchema"]
        assert entry["description"]
        assert schema["type"] == "object"
        assert _missing_when_empty(schema) == set(required_fields(schema)), entry["name"]



def test_discovery_is_stable_across_calls() -> None:
    registry = build_default_registry()

    assert registry.describe() == registry.describe()


def test_duplicate_registration_raises() -> None:
    registry = ToolRegistry()
    registry.register(_echo_tool())

    with pytest.raises(ToolAlreadyRegisteredError):
        registry.register(_echo_tool())


def test_duplicate_toolkit_raises_unless_overwritten() -> None:
    registry = ToolRegistry()
    toolkit = Toolkit(name="test.echo", version="1.0.0", description="", tools=[_echo_tool()])
    registry.add_toolkit(toolkit)

    with pytest.raises(ToolkitAlreadyRegisteredError):
        registry.add_toolkit(toolkit)

    registry.add_toolkit(toolkit, overwrite=True)
    assert list(registry.available_tools()) == ["echo"]


def test_failed_toolkit_registration_rolls_back() -> None:
    registry = ToolRegistry()
    broken = Tool(
        name="broken",
        description="Broken",
        input_schema={"type": "object", "properties": {"x": {"type": "whatever"}}},
        method="Test.broken",
    )
    toolkit = Toolkit(name="test.mixed", version="1.0.0", description="", tools=[_echo_tool(), broken])

    with pytest.raises(SchemaDefinitionError):
        registry.add_toolkit(toolkit)

    assert registry.available_tools() == {}
    assert registry.available_toolkits() == {}


def test_get_unknown_tool() -> None:
    with pytest.raises(UnknownToolError):
        ToolRegistry().get("missing")


@pytest.mark.asyncio
async def test_unknown_tool_returns_error_envelope() -> None:
    registry = build_default_registry(_client(_respond_with({"result": {}})))

    envelope = await registry.invoke("get_everything", {})

    assert envelope.is_error
    assert envelope.text == "Error: Unknown tool: get_everything"


@pytest.mark.asyncio
async def test_credits_call_succeeds_with_empty_arguments() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": {"data": {"left_lines": 42}}}, sent)))

    envelope = await registry.invoke("get_credits_stats", {})

    assert "isError" not in envelope.as_dict()
    assert json.loads(envelope.text) == {"data": {"left_lines": 42}}
    assert sent[0]["method"] == "SerpstatLimitsProcedure.getStats"
    assert sent[0]["params"] == {}
    assert sent[0]["id"].startswith("credits_stats_")


@pytest.mark.asyncio
async def test_validation_failure_never_reaches_upstream() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": True}, sent)))

    envelope = await registry.invoke("delete_project", {"project_id": 0})

    assert envelope.is_error
    assert envelope.text.startswith("Error: Invalid parameters: ")
    assert "project_id" in envelope.text
    assert "minimum 1" in envelope.text
    assert sent == []


@pytest.mark.asyncio
async def test_defaults_are_sent_upstream() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": {"data": []}}, sent)))

    await registry.invoke("list_projects", {})

    assert sent[0]["params"] == {"page": 1, "size": 20}
    assert sent[0]["id"].startswith("get_projects_")


@pytest.mark.asyncio
async def test_missing_result_is_reported() -> None:
    registry = build_default_registry(_client(_respond_with({})))

    envelope = await registry.invoke("get_credits_stats", {})

    assert envelope.is_error
    assert envelope.text == "Error: No result data received from Serpstat API"


@pytest.mark.asyncio
async def test_null_result_is_reported_as_missing() -> None:
    registry = build_default_registry(_client(_respond_with({"result": None})))

    envelope = await registry.invoke("get_site_audit_project_default_settings", {})

    assert envelope.is_error
    assert "No result data received" in envelope.text


@pytest.mark.asyncio
async def test_upstream_error_object_is_rendered() -> None:
    registry = build_default_registry(
        _client(_respond_with({"error": {"code": 32014, "message": "Invalid token"}}))
    )

    envelope = await registry.invoke("get_credits_stats", {})

    assert envelope.is_error
    assert envelope.text == "Error: Serpstat API error: Invalid token (code: 32014)"


@pytest.mark.asyncio
async def test_malformed_result_is_rejected() -> None:
    registry = build_default_registry(_client(_respond_with({"result": {"unexpected": 1}})))

    envelope = await registry.invoke("get_credits_stats", {})

    assert envelope.is_error
    assert "Malformed result data" in envelope.text


@pytest.mark.asyncio
async def test_delete_project_false_is_a_success() -> None:
    registry = build_default_registry(_client(_respond_with({"result": False})))

    envelope = await registry.invoke("delete_project", {"project_id": 7})

    assert not envelope.is_error
    assert json.loads(envelope.text) == {"success": False}


@pytest.mark.asyncio
async def test_stop_site_audit_unwraps_result_flag() -> None:
    registry = build_default_registry(_client(_respond_with({"result": {"result": True}})))

    envelope = await registry.invoke("stop_site_audit", {"projectId": 12})

    assert json.loads(envelope.text) == {"success": True}


def _audit_settings(**main_overrides: Any) -> dict[str, Any]:
    main = {
        "domain": "example.com",
        "name": "Example",
        "subdomainsCheck": False,
        "pagesLimit": 500,
        "scanSpeed": 3,
        "autoSpeed": True,
        "scanNoIndex": False,
        "autoUserAgent": False,
        "scanWrongCanonical": True,
        "scanDuration": 6,
        "folderDepth": 10,
        "urlDepth": 10,
        "userAgent": 1,
        "robotsTxt": True,
        "withImages": False,
    }
    main.update(main_overrides)
    return {
        "projectId": 12,
        "mainSettings": main,
        "dontScanKeywordsBlock": {"checked": False, "keywords": ""},
        "onlyScanKeywordsBlock": {"checked": False, "keywords": ""},
        "baseAuthBlock": {"login": "", "password": ""},
        "mailTriggerSettings": {"emails": [], "interval": 0, "enabled": False},
        "scheduleSettings": {"scheduleRepeatOption": 0},
        "scanSetting": {"type": 1, "list": []},
    }


@pytest.mark.asyncio
async def test_set_site_audit_settings_accepts_null_result() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": None}, sent)))

    envelope = await registry.invoke("set_site_audit_settings", _audit_settings())

    assert not envelope.is_error
    assert json.loads(envelope.text) == {"success": True, "result": None}
    assert sent[0]["method"] == "AuditSite.setSettings"
    assert sent[0]["params"]["mainSettings"]["domain"] == "example.com"


@pytest.mark.asyncio
async def test_set_site_audit_settings_reports_nested_violations() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": None}, sent)))
    arguments = _audit_settings(scanSpeed=31)
    del arguments["mainSettings"]["withImages"]

    envelope = await registry.invoke("set_site_audit_settings", arguments)

    assert envelope.is_error
    assert "mainSettings.withImages: is required" in envelope.text
    assert "mainSettings.scanSpeed: maximum 30, got 31" in envelope.text
    assert sent == []


@pytest.mark.asyncio
async def test_error_elements_drill_down_applies_defaults() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": {"totalCount": 0, "data": []}}, sent)))

    envelope = await registry.invoke(
        "get_site_audit_pages_spec_errors",
        {"reportId": 5, "compareReportId": 4, "projectId": 12, "errorName": "image_no_alt"},
    )

    assert not envelope.is_error
    params = sent[0]["params"]
    assert sent[0]["method"] == "AuditSite.getErrorElements"
    assert (params["mode"], params["limit"], params["offset"]) == ("all", 100, 0)


@pytest.mark.asyncio
async def test_transport_failure_is_rendered() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": {"message": "maintenance"}})

    registry = build_default_registry(_client(handler))

    envelope = await registry.invoke("get_credits_stats", {})

    assert envelope.is_error
    assert "status 503: maintenance" in envelope.text
    assert envelope.text.endswith("(after 1 attempt)")


@pytest.mark.asyncio
async def test_request_ids_are_distinct_across_calls() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": {"data": {}}}, sent)))

    for _ in range(5):
        await registry.invoke("get_credits_stats", {})

    assert len({payload["id"] for payload in sent}) == 5


@pytest.mark.asyncio
async def test_concurrent_calls_get_distinct_request_ids() -> None:
    sent: list[dict[str, Any]] = []
    registry = build_default_registry(_client(_respond_with({"result": {"data": {}}}, sent)))

    envelopes = await asyncio.gather(*(registry.invoke("get_credits_stats", {}) for _ in range(20)))

    assert not any(envelope.is_error for envelope in envelopes)
    assert len(sent) == 20
    assert len({payload["id"] for payload in sent}) == 20


@pytest.mark.asyncio
async def test_missing_client_is_a_configuration_error() -> None:
    registry = build_default_registry()

    envelope = await registry.invoke("get_credits_stats", {})

    assert envelope.is_error
    assert envelope.text == "Error: Serpstat client is not configured"


@pytest.mark.asyncio
async def test_unexpected_exception_is_contained() -> None:
    def explode(_arguments: Any) -> dict[str, Any]:
        raise KeyError("boom")

    tool = Tool(
        name="explode",
        description="Explodes",
        input_schema={"type": "object", "properties": {}},
        method="Test.explode",
        build_params=explode,
    )
    registry = ToolRegistry(client=_client(_respond_with({"result": {}})))
    registry.register(tool)

    envelope = await registry.invoke("explode", {})

    assert envelope.is_error
    assert "boom" in envelope.text


def test_call_phases_advance_in_order() -> None:
    call = ToolCall(name="get_keywords")

    call.advance(CallPhase.VALIDATED)
    call.advance(CallPhase.DISPATCHED)
    call.complete("success")

    assert call.phase is CallPhase.COMPLETED
    assert call.outcome == "success"
    assert call.elapsed_ms >= 0


def test_call_can_complete_from_any_phase() -> None:
    call = ToolCall(name="get_keywords")

    call.complete("error")

    assert call.phase is CallPhase.COMPLETED


def test_call_phases_cannot_skip_or_repeat() -> None:
    call = ToolCall(name="get_keywords")

    with pytest.raises(ToolRegistryError):
        call.advance(CallPhase.DISPATCHED)

    call.complete("error")
    with pytest.raises(ToolRegistryError):
        call.complete("success")
