"""Handler for decision nodes."""

from decision_engine.models.schemas.workflow import DecisionNode
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.variables import interpolate


class DecisionHandler(NodeHandler):
    """
    Produces the terminal decision.

    The reason template may reference variables as ``{name}``; placeholders are
    replaced textually with the variables' current values.
    """

    async def handle(self, node: DecisionNode, context: ExecutionContext) -> NodeResult:
        config = node.config
        return {
            "success": True,
            "decision": config.decision.value,
            "reason": interpolate(config.reason, context.variables),
            "details": {
                "conditions": list(config.conditions),
                "variables": context.snapshot_variables(),
            },
        }
