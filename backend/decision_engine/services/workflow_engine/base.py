"""Execution context and the node handler interface."""

import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from decision_engine.models.schemas.execution import TraceEntry
from decision_engine.models.schemas.workflow import BaseNode

NodeResult = dict[str, Any]


@dataclass
class ExecutionContext:
    """
    All mutable state of a single workflow execution.

    A context is created by WorkflowEngine.execute for exactly one invocation
    and handed down to node handlers; it is never stored on the engine or
    shared between executions.

    Attributes:
        execution_id: Unique id of this execution
        policy_id: Policy whose graph is being executed
        application_id: Application being decided
        input_data: Applicant data as submitted
        variables: Variable bindings, seeded from input_data and written by handlers
        connector_cache: Connector responses fetched during this execution only
        trace: Append-only record of node execution attempts
        current_node: Id of the node currently executing
        started_at: perf_counter() reading when the execution began
    """

    execution_id: str
    policy_id: str
    application_id: str
    input_data: dict[str, Any]
    variables: dict[str, Any]
    connector_cache: dict[str, Any] = field(default_factory=dict)
    trace: list[TraceEntry] = field(default_factory=list)
    current_node: Optional[str] = None
    started_at: float = field(default_factory=time.perf_counter)

    @classmethod
    def create(
        cls,
        input_data: Optional[dict[str, Any]],
        policy_id: str,
        application_id: str,
    ) -> "ExecutionContext":
        input_data = dict(input_data or {})
        return cls(
            execution_id=str(uuid.uuid4()),
            policy_id=str(policy_id),
            application_id=str(application_id),
            input_data=input_data,
            variables=dict(input_data),
        )

    def snapshot_variables(self) -> dict[str, Any]:
        return dict(self.variables)

    def record(self, entry: TraceEntry) -> None:
        self.trace.append(entry)

    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started_at) * 1000, 3)


class NodeHandler(ABC):
    """
    Abstract base class for node handlers using the Strategy pattern.

    Each concrete handler implements the behaviour of one node kind. Handlers
    may read and write context.variables; anything they raise aborts the
    execution and is turned into a manual review result by the engine.
    """

    @abstractmethod
    async def handle(self, node: BaseNode, context: ExecutionContext) -> NodeResult:
        """
        Execute a node against the execution context.

        Args:
            node: The validated node to execute
            context: ExecutionContext of the running execution

        Returns:
            Handler-specific result dictionary

        Raises:
            WorkflowError: If the node cannot be executed
        """
        pass
