"""Handler for condition nodes."""

from typing import Optional

from decision_engine.models.schemas.workflow import ConditionNode
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.conditions import ConditionEvaluator


class ConditionHandler(NodeHandler):
    """Evaluates the node's condition tree; the engine branches on the result."""

    def __init__(self, evaluator: Optional[ConditionEvaluator] = None):
        self.evaluator = evaluator or ConditionEvaluator()

    async def handle(self, node: ConditionNode, context: ExecutionContext) -> NodeResult:
        result = self.evaluator.evaluate(node.config.condition, context.variables)
        return {"success": True, "condition_result": result}
