"""Handlers for nodes that only route traversal: start, end and dbQuery."""

import logging

from decision_engine.models.schemas.workflow import BaseNode
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)

logger = logging.getLogger(__name__)


class PassThroughHandler(NodeHandler):
    """No-op handler; traversal continues along the node's first outgoing edge."""

    async def handle(self, node: BaseNode, context: ExecutionContext) -> NodeResult:
        return {"success": True}


class EndHandler(PassThroughHandler):
    """
    End nodes are not terminal: only a decision node finishes an execution.

    An end node with no outgoing edge therefore ends the run without a
    decision, which is routed to manual review.
    """

    async def handle(self, node: BaseNode, context: ExecutionContext) -> NodeResult:
        logger.warning(
            f"Execution {context.execution_id} reached end node {node.id}; "
            f"end nodes do not produce a decision"
        )
        return await super().handle(node, context)
