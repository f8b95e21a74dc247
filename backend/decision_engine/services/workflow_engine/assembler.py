"""Packaging of terminal outcomes into ExecutionResult."""

from decision_engine.core.enums import Decision
from decision_engine.models.schemas.execution import ExecutionResult
from decision_engine.services.workflow_engine.base import ExecutionContext, NodeResult


class ResultAssembler:
    """Builds the caller-facing result from an execution context."""

    @staticmethod
    def success(context: ExecutionContext, decision_result: NodeResult) -> ExecutionResult:
        """Result for an execution that reached a decision node."""
        return ExecutionResult(
            success=True,
            execution_id=context.execution_id,
            policy_id=context.policy_id,
            application_id=context.application_id,
            decision=decision_result["decision"],
            reason=decision_result["reason"],
            details=decision_result.get("details") or {},
            trace=list(context.trace),
            total_duration_ms=context.elapsed_ms(),
            variables=context.snapshot_variables(),
        )

    @staticmethod
    def failure(context: ExecutionContext, error: Exception) -> ExecutionResult:
        """Manual review result for any execution that could not reach a decision."""
        message = str(error) or type(error).__name__
        return ExecutionResult(
            success=False,
            execution_id=context.execution_id,
            policy_id=context.policy_id,
            application_id=context.application_id,
            decision=Decision.MANUAL_REVIEW,
            reason=f"Workflow execution error: {message}",
            details={"error": message},
            trace=list(context.trace),
            total_duration_ms=context.elapsed_ms(),
            variables=context.snapshot_variables(),
        )
