"""Tests for HttpConnectorGateway using an in-process HTTP transport."""

from __future__ import annotations

import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from decision_engine.core.enums import ConnectorType
from decision_engine.core.exceptions import (
    ConnectorCallError,
    ConnectorError,
    ConnectorInactiveError,
    ConnectorNotFoundError,
)
from decision_engine.models.domain.connector import Connector
from decision_engine.services.connectors import HttpConnectorGateway, ResponseCache

CONNECTOR_ID = str(uuid.uuid4())
API_URL = "https://bureau.example.com/v1/report"


def _connector(is_active: bool = True, **config) -> Connector:
    return Connector(
        id=uuid.UUID(CONNECTOR_ID),
        name="bureau",
        type=ConnectorType.BUREAU,
        config={"api_url": API_URL, **config},
        is_active=is_active,
    )


class _Recorder:
    """Transport handler replaying queued responses and recording requests."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def _session() -> AsyncMock:
    """AsyncSession stand-in whose begin_nested() is an async context manager."""
    db = AsyncMock()
    db.begin_nested = MagicMock()
    return db


def _gateway(recorder: _Recorder, connector: Connector | None) -> HttpConnectorGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    gateway = HttpConnectorGateway(
        _session(), client=client, cache=ResponseCache(), backoff_base_seconds=0
    )
    gateway.connector_repo = AsyncMock()
    gateway.connector_repo.get_by_connector_id.return_value = connector
    gateway.log_repo = AsyncMock()
    return gateway


# ---------------------------------------------------------------------------
# Successful calls
# ---------------------------------------------------------------------------


class TestCall:

    @pytest.mark.asyncio
    async def test_posts_params_and_returns_payload(self):
        recorder = _Recorder(httpx.Response(200, json={"score": 720}))
        gateway = _gateway(recorder, _connector(auth_type="api_key", api_key="secret"))

        result = await gateway.call(CONNECTOR_ID, {"ssn": "123"})

        assert result == {"score": 720}
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == API_URL
        assert json.loads(request.content) == {"ssn": "123"}
        assert request.headers["X-API-Key"] == "secret"

    @pytest.mark.asyncio
    async def test_logs_successful_call(self):
        recorder = _Recorder(httpx.Response(200, json={"score": 720}))
        connector = _connector()
        gateway = _gateway(recorder, connector)

        await gateway.call(CONNECTOR_ID, {"ssn": "123"})

        gateway.log_repo.log_call.assert_awaited_once()
        kwargs = gateway.log_repo.log_call.await_args.kwargs
        assert kwargs["connector_id"] == connector.id
        assert kwargs["request_data"] == {"ssn": "123"}
        assert kwargs["response_data"] == {"score": 720}
        assert kwargs["status_code"] == 200
        assert kwargs["error_message"] is None

    @pytest.mark.asyncio
    async def test_bearer_auth_and_custom_headers(self):
        recorder = _Recorder(httpx.Response(200, json={}))
        gateway = _gateway(
            recorder, _connector(auth_type="bearer", api_key="tok", headers={"X-Tenant": "acme"})
        )

        await gateway.call(CONNECTOR_ID, {})

        headers = recorder.requests[0].headers
        assert headers["Authorization"] == "Bearer tok"
        assert headers["X-Tenant"] == "acme"

    @pytest.mark.asyncio
    async def test_basic_auth(self):
        recorder = _Recorder(httpx.Response(200, json={}))
        gateway = _gateway(recorder, _connector(auth_type="basic", username="u", password="p"))

        await gateway.call(CONNECTOR_ID, {})

        assert recorder.requests[0].headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_log_failure_does_not_fail_call(self):
        recorder = _Recorder(httpx.Response(200, json={"ok": True}))
        gateway = _gateway(recorder, _connector())
        gateway.log_repo.log_call.side_effect = RuntimeError("db down")

        assert await gateway.call(CONNECTOR_ID, {}) == {"ok": True}

    @pytest.mark.asyncio
    async def test_log_write_runs_in_savepoint(self):
        recorder = _Recorder(httpx.Response(200, json={"ok": True}))
        gateway = _gateway(recorder, _connector())

        await gateway.call(CONNECTOR_ID, {})

        gateway.db.begin_nested.assert_called_once()
        gateway.db.begin_nested.return_value.__aenter__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_log_write_leaves_session_usable(self):
        recorder = _Recorder(httpx.Response(200, json={"ok": True}))
        gateway = _gateway(recorder, _connector())
        gateway.log_repo.log_call.side_effect = [RuntimeError("flush failed"), None]
        savepoint = gateway.db.begin_nested.return_value

        assert await gateway.call(CONNECTOR_ID, {"ssn": "1"}) == {"ok": True}
        assert await gateway.call(CONNECTOR_ID, {"ssn": "2"}) == {"ok": True}

        # The failed write is rolled back at its savepoint, not in the outer transaction
        first_exit = savepoint.__aexit__.await_args_list[0]
        assert first_exit.args[0] is RuntimeError
        assert gateway.connector_repo.get_by_connector_id.await_count == 2
        assert gateway.log_repo.log_call.await_count == 2
        gateway.db.rollback.assert_not_awaited()


# ---------------------------------------------------------------------------
# Retries
# ---------------------------------------------------------------------------


class TestRetries:

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self):
        recorder = _Recorder(
            httpx.Response(500), httpx.Response(502), httpx.Response(200, json={"score": 1})
        )
        gateway = _gateway(recorder, _connector(retry_count=3))

        assert await gateway.call(CONNECTOR_ID, {}) == {"score": 1}
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_raises_after_all_attempts(self):
        recorder = _Recorder(httpx.Response(503))
        gateway = _gateway(recorder, _connector(retry_count=2))

        with pytest.raises(ConnectorCallError) as exc_info:
            await gateway.call(CONNECTOR_ID, {})

        assert exc_info.value.attempts == 2
        assert exc_info.value.status_code == 503
        assert exc_info.value.connector_id == CONNECTOR_ID
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert len(recorder.requests) == 2
        kwargs = gateway.log_repo.log_call.await_args.kwargs
        assert kwargs["status_code"] == 503
        assert kwargs["error_message"]

    @pytest.mark.asyncio
    async def test_default_retry_count(self):
        recorder = _Recorder(httpx.Response(500))
        gateway = _gateway(recorder, _connector())

        with pytest.raises(ConnectorCallError):
            await gateway.call(CONNECTOR_ID, {})

        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_invalid_json_is_a_failed_attempt(self):
        recorder = _Recorder(httpx.Response(200, content=b"<html>"))
        gateway = _gateway(recorder, _connector(retry_count=1))

        with pytest.raises(ConnectorCallError):
            await gateway.call(CONNECTOR_ID, {})


# ---------------------------------------------------------------------------
# Registry lookups
# ---------------------------------------------------------------------------


class TestRegistry:

    @pytest.mark.asyncio
    async def test_unknown_connector(self):
        recorder = _Recorder(httpx.Response(200, json={}))
        gateway = _gateway(recorder, None)

        with pytest.raises(ConnectorNotFoundError):
            await gateway.call(CONNECTOR_ID, {})

        assert recorder.requests == []
        gateway.log_repo.log_call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_connector(self):
        recorder = _Recorder(httpx.Response(200, json={}))
        gateway = _gateway(recorder, _connector(is_active=False))

        with pytest.raises(ConnectorInactiveError):
            await gateway.call(CONNECTOR_ID, {})

    @pytest.mark.asyncio
    async def test_connector_without_url(self):
        recorder = _Recorder(httpx.Response(200, json={}))
        connector = _connector()
        connector.config = {}
        gateway = _gateway(recorder, connector)

        with pytest.raises(ConnectorError, match="no api_url"):
            await gateway.call(CONNECTOR_ID, {})


# ---------------------------------------------------------------------------
# Response cache
# ---------------------------------------------------------------------------


class TestResponseCaching:

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self):
        recorder = _Recorder(httpx.Response(200, json={"score": 700}))
        gateway = _gateway(recorder, _connector(cache_ttl=60))

        first = await gateway.call(CONNECTOR_ID, {"ssn": "1"})
        second = await gateway.call(CONNECTOR_ID, {"ssn": "1"})

        assert first == second == {"score": 700}
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_cache_disabled_by_caller(self):
        recorder = _Recorder(httpx.Response(200, json={"score": 700}))
        gateway = _gateway(recorder, _connector(cache_ttl=60))

        await gateway.call(CONNECTOR_ID, {"ssn": "1"}, cache_enabled=False)
        await gateway.call(CONNECTOR_ID, {"ssn": "1"}, cache_enabled=False)

        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_no_ttl_means_no_caching(self):
        recorder = _Recorder(httpx.Response(200, json={"score": 700}))
        gateway = _gateway(recorder, _connector())

        await gateway.call(CONNECTOR_ID, {"ssn": "1"})
        await gateway.call(CONNECTOR_ID, {"ssn": "1"})

        assert len(recorder.requests) == 2
