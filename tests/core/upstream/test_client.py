from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from serpstat_mcp.core.errors import TransportError
from serpstat_mcp.core.upstream import (
    OutboundRequest,
    RetryPolicy,
    SerpstatClient,
    UpstreamSettings,
    new_correlation_id,
)


def _settings(max_retries: int = 2, timeout: float = 5.0) -> UpstreamSettings:
    return UpstreamSettings(
        base_url="https://api.serpstat.test/v4/",
        api_token="secret-token",
        retry=RetryPolicy(timeout_seconds=timeout, max_retries=max_retries, backoff_base_seconds=0.5),
    )


def _client(handler, settings: UpstreamSettings, delays: list[float] | None = None) -> SerpstatClient:
    async def fake_sleep(delay: float) -> None:
        if delays is not None:
            delays.append(delay)

    transport = httpx.MockTransport(handler)
    return SerpstatClient(settings, client=httpx.AsyncClient(transport=transport), sleep=fake_sleep)


def _request() -> OutboundRequest:
    return OutboundRequest.build("credits_stats", "SerpstatLimitsProcedure.getStats", {})


@pytest.mark.asyncio
async def test_execute_posts_rpc_envelope_with_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        payload = json.loads(request.content.decode())
        return httpx.Response(200, json={"id": payload["id"], "result": {"data": {"left_lines": 10}}})

    client = _client(handler, _settings())
    request = _request()

    result = await client.execute(request)

    assert result.has_result
    assert result.result == {"data": {"left_lines": 10}}
    assert result.attempts == 1
    sent = seen[0]
    assert sent.method == "POST"
    assert sent.url.path == "/v4"
    assert sent.url.params["token"] == "secret-token"
    assert sent.headers["Authorization"] == "Bearer secret-token"
    assert json.loads(sent.content.decode()) == {
        "id": request.id,
        "method": "SerpstatLimitsProcedure.getStats",
        "params": {},
    }


@pytest.mark.asyncio
async def test_transient_status_is_retried_max_retries_times() -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    delays: list[float] = []
    client = _client(handler, _settings(max_retries=3), delays)

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert calls == 4
    assert exc_info.value.attempts == 4
    assert exc_info.value.status_code == 503
    assert "overloaded" in str(exc_info.value)
    assert str(exc_info.value).endswith("(after 4 attempts)")
    assert delays == [0.5, 1.0, 2.0]


@pytest.mark.asyncio
async def test_network_errors_are_retried_then_succeed() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"result": [1, 2, 3]})

    client = _client(handler, _settings(max_retries=1), [])

    result = await client.execute(_request())

    assert calls == 2
    assert result.attempts == 2
    assert result.result == [1, 2, 3]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 403, 404, 429])
async def test_client_errors_are_not_retried(status: int) -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(status, json={"error": {"message": "nope"}})

    client = _client(handler, _settings(max_retries=5), [])

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert calls == 1
    assert exc_info.value.attempts == 1
    assert exc_info.value.status_code == status
    assert f"status {status}: nope" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_json_is_permanent() -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, content=b"<html>gateway</html>")

    client = _client(handler, _settings(max_retries=2), [])

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert calls == 1
    assert "Invalid JSON" in str(exc_info.value)


@pytest.mark.asyncio
async def test_attempt_deadline_counts_as_transient() -> None:
    calls = 0

    async def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        await asyncio.sleep(1)
        return httpx.Response(200, json={"result": {}})

    client = _client(handler, _settings(max_retries=1, timeout=0.01), [])

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert calls == 2
    assert exc_info.value.attempts == 2
    assert "timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_zero_retries_means_single_attempt() -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500)

    client = _client(handler, _settings(max_retries=0), [])

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert calls == 1
    assert str(exc_info.value).endswith("(after 1 attempt)")


@pytest.mark.asyncio
async def test_policy_override_and_elapsed_budget() -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(502)

    client = _client(handler, _settings(max_retries=0), [])
    policy = RetryPolicy(max_retries=5, backoff_base_seconds=10.0, max_elapsed_seconds=1.0)

    with pytest.raises(TransportError):
        await client.execute(_request(), policy)

    assert calls == 1


@pytest.mark.asyncio
async def test_error_envelope_and_missing_result_are_passed_through() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        method = json.loads(request.content.decode())["method"]
        if method == "broken":
            return httpx.Response(200, json={"error": {"code": 32014, "message": "Invalid token"}})
        return httpx.Response(200, json={"id": "x"})

    client = _client(handler, _settings(), [])

    errored = await client.execute(OutboundRequest.build("t", "broken", {}))
    empty = await client.execute(OutboundRequest.build("t", "empty", {}))

    assert errored.is_error
    assert errored.error == {"code": 32014, "message": "Invalid token"}
    assert not empty.is_error
    assert not empty.has_result


@pytest.mark.asyncio
async def test_falsy_results_count_as_present() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": False})

    client = _client(handler, _settings(), [])

    result = await client.execute(_request())

    assert result.has_result
    assert result.result is False


@pytest.mark.asyncio
async def test_closed_client_refuses_new_attempts() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = _client(handler, _settings(), [])
    await client.aclose()

    with pytest.raises(TransportError) as exc_info:
        await client.execute(_request())

    assert client.closed
    assert "shutting down" in str(exc_info.value)
    assert exc_info.value.attempts == 0


@pytest.mark.asyncio
async def test_shutdown_interrupts_backoff() -> None:
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503)

    settings = UpstreamSettings(
        base_url="https://api.serpstat.test/v4",
        api_token="secret-token",
        retry=RetryPolicy(max_retries=3, backoff_base_seconds=30.0, backoff_max_seconds=30.0),
    )
    client = SerpstatClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    task = asyncio.create_task(client.execute(_request()))
    while calls == 0:
        await asyncio.sleep(0.01)
    await client.aclose()

    with pytest.raises(TransportError) as exc_info:
        await asyncio.wait_for(task, timeout=2)

    assert calls == 1
    assert exc_info.value.attempts == 1


def test_correlation_ids_are_unique() -> None:
    ids = {new_correlation_id("get_keywords") for _ in range(500)}

    assert len(ids) == 500
    assert all(item.startswith("get_keywords_") for item in ids)


def test_backoff_is_exponential_and_capped() -> None:
    policy = RetryPolicy(backoff_base_seconds=1.0, backoff_max_seconds=5.0)

    assert [policy.delay_for(attempt) for attempt in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]
