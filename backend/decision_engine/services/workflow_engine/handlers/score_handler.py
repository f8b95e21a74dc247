"""Handler for score nodes."""

from decision_engine.models.schemas.workflow import ScoreNode
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.scoring import ScoringEngine


class ScoreHandler(NodeHandler):
    """Accumulates weighted factor scores into the output variable (risk_score by default)."""

    async def handle(self, node: ScoreNode, context: ExecutionContext) -> NodeResult:
        config = node.config
        total, breakdown = ScoringEngine.score_factors(config.factors, context.variables)
        context.variables[config.output_variable] = total
        return {"success": True, "total_score": total, "breakdown": breakdown}
