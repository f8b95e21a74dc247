"""Tests for PolicyTestService."""

from __future__ import annotations

import asyncio

import pytest

from decision_engine.core.enums import Decision
from decision_engine.models.schemas.testing import PolicyTestCase
from decision_engine.services.connectors.gateway import ConnectorGateway
from decision_engine.services.policy_testing_service import PolicyTestService
from decision_engine.services.workflow_engine import WorkflowEngine
from tests.factories import decision, edge, graph, income_policy, node


@pytest.fixture
def service(engine) -> PolicyTestService:
    return PolicyTestService(engine)


class TestRunTestCase:

    @pytest.mark.asyncio
    async def test_matching_decision_passes(self, service):
        case = PolicyTestCase(
            name="high income", test_data={"income": 80000}, expected_decision=Decision.APPROVED
        )

        result = await service.run_test_case(income_policy(), case, "policy-1")

        assert result.passed is True
        assert result.actual_decision == Decision.APPROVED
        assert result.actual_reason == "Income meets requirements"
        assert [entry.node_id for entry in result.execution_trace] == ["start", "check", "approve"]
        assert result.error_message is None

    @pytest.mark.asyncio
    async def test_mismatched_decision_fails(self, service):
        case = PolicyTestCase(
            name="low income", test_data={"income": 1000}, expected_decision=Decision.APPROVED
        )

        result = await service.run_test_case(income_policy(), case, "policy-1")

        assert result.passed is False
        assert result.actual_decision == Decision.REJECTED

    @pytest.mark.asyncio
    async def test_expected_reason_must_match(self, service):
        matching = PolicyTestCase(
            name="reason ok",
            test_data={"income": 1000},
            expected_decision=Decision.REJECTED,
            expected_reason="Income 1000 below minimum",
        )
        mismatching = matching.model_copy(update={"name": "reason off", "expected_reason": "Other"})

        assert (await service.run_test_case(income_policy(), matching, "p")).passed is True
        assert (await service.run_test_case(income_policy(), mismatching, "p")).passed is False

    @pytest.mark.asyncio
    async def test_execution_error_is_reported(self, service):
        case = PolicyTestCase(name="broken", expected_decision=Decision.MANUAL_REVIEW)

        result = await service.run_test_case(graph([node("x", "end")], []), case, "p")

        assert result.passed is True
        assert result.error_message == "No start node found in workflow"


class TestRunAll:

    @pytest.mark.asyncio
    async def test_summary(self, service):
        cases = [
            PolicyTestCase(name="a", test_data={"income": 90000}, expected_decision=Decision.APPROVED),
            PolicyTestCase(name="b", test_data={"income": 10000}, expected_decision=Decision.REJECTED),
            PolicyTestCase(name="c", test_data={"income": 10000}, expected_decision=Decision.APPROVED),
        ]

        suite = await service.run_all(income_policy(), cases, "policy-1")

        assert suite.total == 3
        assert suite.passed == 2
        assert suite.failed == 1
        assert suite.pass_rate == 66.67
        assert [r.name for r in suite.results] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_empty_suite(self, service):
        suite = await service.run_all(income_policy(), [], "policy-1")

        assert suite.total == 0
        assert suite.pass_rate == 0

    @pytest.mark.asyncio
    async def test_cases_do_not_overlap_on_shared_gateway(self):
        gateway = _InFlightGateway()
        service = PolicyTestService(WorkflowEngine(connector_gateway=gateway))
        policy = graph(
            [
                node("start", "start"),
                node("bureau", "dataSource", connectorId="bureau", params={"ssn": "ssn"}),
                decision("approve", "approved"),
            ],
            [edge("start", "bureau"), edge("bureau", "approve")],
        )
        cases = [
            PolicyTestCase(
                name=f"case {i}", test_data={"ssn": str(i)}, expected_decision=Decision.APPROVED
            )
            for i in range(5)
        ]

        suite = await service.run_all(policy, cases, "policy-1")

        assert suite.passed == 5
        assert gateway.calls == 5
        assert gateway.max_in_flight == 1


class _InFlightGateway(ConnectorGateway):
    """Counts calls that are awaiting a response at the same time."""

    def __init__(self):
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def call(self, connector_id, params, cache_enabled=True):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            return {"ok": True}
        finally:
            self.in_flight -= 1
