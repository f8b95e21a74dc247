"""Shared fixtures for engine and service tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from decision_engine.services.connectors.gateway import ConnectorGateway
from decision_engine.services.workflow_engine import ExecutionContext, WorkflowEngine


@pytest.fixture
def gateway() -> AsyncMock:
    """Connector gateway stub returning a fixed bureau report."""
    stub = AsyncMock(spec=ConnectorGateway)
    stub.call.return_value = {"report": {"score": 720, "accounts": [{"balance": 1500}]}}
    return stub


@pytest.fixture
def engine(gateway: AsyncMock) -> WorkflowEngine:
    return WorkflowEngine(connector_gateway=gateway, max_steps_per_node=10)


@pytest.fixture
def context() -> ExecutionContext:
    return ExecutionContext.create(
        input_data={"income": 60000, "ssn": "123-45-6789"},
        policy_id="policy-1",
        application_id="app-1",
    )
