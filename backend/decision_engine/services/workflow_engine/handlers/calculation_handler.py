"""Handler for calculation nodes."""

from typing import Optional

from decision_engine.models.schemas.workflow import CalculationNode
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.expressions import ExpressionEvaluator


class CalculationHandler(NodeHandler):
    """Evaluates the node's formula and stores the result in its output variable."""

    def __init__(self, evaluator: Optional[ExpressionEvaluator] = None):
        self.evaluator = evaluator or ExpressionEvaluator()

    async def handle(self, node: CalculationNode, context: ExecutionContext) -> NodeResult:
        config = node.config
        value = self.evaluator.evaluate(config.formula, context.variables)
        context.variables[config.output_variable] = value
        return {"success": True, "calculated_value": value}
