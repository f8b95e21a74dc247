"""Run expected-outcome test cases against a policy graph."""

import logging
import time
from typing import Any, Mapping, Sequence, Union

from decision_engine.models.schemas.testing import (
    PolicyTestCase,
    PolicyTestResult,
    PolicyTestSuiteResult,
)
from decision_engine.models.schemas.workflow import WorkflowGraph
from decision_engine.services.workflow_engine import WorkflowEngine

logger = logging.getLogger(__name__)

GraphInput = Union[WorkflowGraph, Mapping[str, Any]]


class PolicyTestService:
    """
    Executes policy test cases and compares outcomes with expectations.

    A case passes when the actual decision equals the expected one and, if an
    expected reason is given, the actual reason equals it too.
    """

    def __init__(self, engine: WorkflowEngine):
        self.engine = engine

    async def run_test_case(
        self,
        graph: GraphInput,
        case: PolicyTestCase,
        policy_id: str,
    ) -> PolicyTestResult:
        """
        Run a single test case.

        Args:
            graph: Policy graph under test
            case: Test data and expected outcome
            policy_id: Id of the policy under test

        Returns:
            PolicyTestResult with the comparison and the execution trace
        """
        started = time.perf_counter()
        result = await self.engine.execute(
            graph, case.test_data, policy_id, f"test:{case.name}"
        )
        elapsed_ms = round((time.perf_counter() - started) * 1000, 3)

        passed = result.decision == case.expected_decision and (
            not case.expected_reason or result.reason == case.expected_reason
        )

        if not passed:
            logger.info(
                f"Test case '{case.name}' failed: expected {case.expected_decision.value}, "
                f"got {result.decision.value} ({result.reason})"
            )

        return PolicyTestResult(
            name=case.name,
            passed=passed,
            expected_decision=case.expected_decision,
            expected_reason=case.expected_reason,
            actual_decision=result.decision,
            actual_reason=result.reason,
            execution_time_ms=elapsed_ms,
            execution_trace=result.trace,
            error_message=None if result.success else result.details.get("error"),
        )

    async def run_all(
        self,
        graph: GraphInput,
        cases: Sequence[PolicyTestCase],
        policy_id: str,
    ) -> PolicyTestSuiteResult:
        """
        Run every test case in order and summarize.

        Args:
            graph: Policy graph under test
            cases: Test cases to run
            policy_id: Id of the policy under test

        Returns:
            PolicyTestSuiteResult with totals and pass rate in percent
        """
        # Cases share the engine's connector gateway and its database session,
        # which does not allow concurrent operations
        results = []
        for case in cases:
            results.append(await self.run_test_case(graph, case, policy_id))

        total = len(results)
        passed = sum(1 for r in results if r.passed)
        pass_rate = round(passed / total * 100, 2) if total else 0.0

        logger.info(f"Policy {policy_id}: {passed}/{total} test cases passed ({pass_rate}%)")

        return PolicyTestSuiteResult(
            policy_id=str(policy_id),
            total=total,
            passed=passed,
            failed=total - passed,
            pass_rate=pass_rate,
            results=list(results),
        )
