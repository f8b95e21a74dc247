"""Workflow engine driving node-by-node traversal of a policy graph."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from decision_engine.config import settings
from decision_engine.core.enums import NodeKind
from decision_engine.core.exceptions import ConfigurationError, TraversalError, WorkflowError
from decision_engine.models.schemas.execution import ExecutionResult, TraceEntry
from decision_engine.models.schemas.workflow import BaseNode, WorkflowGraph
from decision_engine.services.connectors.gateway import ConnectorGateway
from decision_engine.services.workflow_engine.assembler import ResultAssembler
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.handlers import (
    ApiCallHandler,
    CalculationHandler,
    ConditionHandler,
    DataSourceHandler,
    DecisionHandler,
    EndHandler,
    PassThroughHandler,
    ScoreHandler,
)

logger = logging.getLogger(__name__)

NO_DECISION_MESSAGE = "Workflow ended without reaching a decision node"


class WorkflowEngine:
    """
    Interpreter for policy graphs.

    This class:
    - Maintains a registry of node handlers keyed by node kind
    - Walks the graph from its start node until a decision node runs
    - Records a trace entry for every node execution attempt
    - Converts every failure into a manual review result

    One engine may serve many concurrent executions: all per-execution state
    lives in the ExecutionContext created inside execute().
    """

    def __init__(
        self,
        connector_gateway: Optional[ConnectorGateway] = None,
        max_steps_per_node: Optional[int] = None,
    ):
        """
        Initialize the engine with its handler registry.

        Args:
            connector_gateway: Gateway used by dataSource and apiCall nodes
            max_steps_per_node: Step budget multiplier; an execution may run at
                most len(graph.nodes) * max_steps_per_node nodes
        """
        self.connector_gateway = connector_gateway
        self.max_steps_per_node = (
            settings.ENGINE_MAX_STEPS_PER_NODE
            if max_steps_per_node is None
            else max_steps_per_node
        )
        self._handlers: Dict[str, NodeHandler] = {}
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        """Register default handlers for all node kinds."""
        pass_through = PassThroughHandler()
        self._handlers[NodeKind.START] = pass_through
        self._handlers[NodeKind.DB_QUERY] = pass_through
        self._handlers[NodeKind.END] = EndHandler()

        self._handlers[NodeKind.CONDITION] = ConditionHandler()
        self._handlers[NodeKind.CALCULATION] = CalculationHandler()
        self._handlers[NodeKind.SCORE] = ScoreHandler()
        self._handlers[NodeKind.DECISION] = DecisionHandler()

        self._handlers[NodeKind.DATA_SOURCE] = DataSourceHandler(self.connector_gateway)
        self._handlers[NodeKind.API_CALL] = ApiCallHandler(self.connector_gateway)

    def register_handler(self, kind: NodeKind, handler: NodeHandler) -> None:
        """
        Register a custom handler for a node kind.

        Args:
            kind: The node kind to handle
            handler: The handler instance
        """
        self._handlers[kind] = handler

    async def execute(
        self,
        graph: Union[WorkflowGraph, Mapping[str, Any]],
        input_data: Optional[Mapping[str, Any]],
        policy_id: str,
        application_id: str,
    ) -> ExecutionResult:
        """
        Execute a policy graph against an application.

        Never raises: a missing start node, a dead end, an exhausted step
        budget, an invalid graph or any node failure yields a manual review
        result carrying the error message.

        Args:
            graph: Loaded graph or its raw JSON form
            input_data: Applicant data; seeds the variable map
            policy_id: Id of the policy the graph belongs to
            application_id: Id of the application being decided

        Returns:
            ExecutionResult with decision, reason, trace and final variables
        """
        context = ExecutionContext.create(
            input_data=dict(input_data or {}),
            policy_id=policy_id,
            application_id=application_id,
        )

        logger.info(
            f"Starting execution {context.execution_id} of policy {policy_id} "
            f"for application {application_id}"
        )

        try:
            workflow = WorkflowGraph.load(graph)

            current = workflow.find_start_node()
            if current is None:
                raise TraversalError("No start node found in workflow")

            max_steps = len(workflow.nodes) * self.max_steps_per_node
            steps = 0

            while current is not None:
                if steps >= max_steps:
                    raise TraversalError(
                        f"{NO_DECISION_MESSAGE} (step budget of {max_steps} exhausted)"
                    )
                steps += 1

                context.current_node = current.id
                node_result = await self._execute_node(current, context)

                if current.kind == NodeKind.DECISION:
                    result = ResultAssembler.success(context, node_result)
                    logger.info(
                        f"Execution {context.execution_id} decided {result.decision.value} "
                        f"after {steps} steps in {result.total_duration_ms}ms"
                    )
                    return result

                current = self._find_next_node(current, node_result, workflow)

            raise TraversalError(NO_DECISION_MESSAGE)

        except Exception as e:
            expected = isinstance(e, (WorkflowError, ValidationError))
            logger.error(
                f"Workflow execution error in {context.execution_id} "
                f"(node {context.current_node}): {e}",
                exc_info=not expected,
            )
            return ResultAssembler.failure(context, e)

    async def _execute_node(self, node: BaseNode, context: ExecutionContext) -> NodeResult:
        """Run one node through its handler and append its trace entry."""
        handler = self._handlers.get(node.kind)
        if handler is None:
            raise ConfigurationError(f"Unknown node type: {node.kind}")

        snapshot = context.snapshot_variables()
        timestamp = datetime.now(timezone.utc).isoformat()
        started = time.perf_counter()

        try:
            result = await handler.handle(node, context)
        except Exception as e:
            context.record(
                TraceEntry(
                    node_id=node.id,
                    node_kind=node.kind,
                    timestamp=timestamp,
                    variables=snapshot,
                    output=None,
                    duration_ms=_elapsed_ms(started),
                    error=str(e) or type(e).__name__,
                )
            )
            raise

        context.record(
            TraceEntry(
                node_id=node.id,
                node_kind=node.kind,
                timestamp=timestamp,
                variables=snapshot,
                output=result,
                duration_ms=_elapsed_ms(started),
            )
        )
        return result

    def _find_next_node(
        self,
        node: BaseNode,
        node_result: NodeResult,
        workflow: WorkflowGraph,
    ) -> Optional[BaseNode]:
        """
        Select the next node.

        Condition nodes follow the edge whose source handle matches their
        boolean result; every other node follows its first outgoing edge in
        graph order. None when no edge qualifies or its target does not exist.
        """
        outgoing = workflow.outgoing_edges(node.id)

        if node.kind == NodeKind.CONDITION:
            handle = "true" if node_result.get("condition_result") else "false"
            edge = next((e for e in outgoing if e.source_handle == handle), None)
        else:
            edge = outgoing[0] if outgoing else None

        if edge is None:
            return None
        return workflow.get_node(edge.target)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)
