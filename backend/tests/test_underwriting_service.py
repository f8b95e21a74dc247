"""Tests for UnderwritingService."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from decision_engine.core.enums import Decision
from decision_engine.services.connectors import HttpConnectorGateway
from decision_engine.services.underwriting_service import UnderwritingService
from tests.factories import graph, income_policy


class TestUnderwritingService:

    def test_defaults_to_http_gateway(self):
        service = UnderwritingService(AsyncMock())

        assert isinstance(service.gateway, HttpConnectorGateway)
        assert service.engine.connector_gateway is service.gateway

    @pytest.mark.asyncio
    async def test_evaluate_commits(self, gateway):
        db = AsyncMock()
        service = UnderwritingService(db, gateway=gateway)

        result = await service.evaluate(income_policy(), {"income": 75000}, "policy-1", "app-1")

        assert result.decision == Decision.APPROVED
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failures_are_returned_as_manual_review(self, gateway):
        db = AsyncMock()
        service = UnderwritingService(db, gateway=gateway)

        result = await service.evaluate(graph([], []), {}, "policy-1", "app-1")

        assert result.decision == Decision.MANUAL_REVIEW
        assert result.success is False
        db.commit.assert_awaited_once()
