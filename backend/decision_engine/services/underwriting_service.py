"""Underwriting service wiring the workflow engine to the connector registry."""

import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from decision_engine.core.enums import Decision
from decision_engine.core.logging import setup_logging
from decision_engine.db.session import SessionLocal
from decision_engine.models.schemas.execution import ExecutionResult
from decision_engine.models.schemas.workflow import WorkflowGraph
from decision_engine.services.connectors import ConnectorGateway, HttpConnectorGateway
from decision_engine.services.workflow_engine import WorkflowEngine

logger = logging.getLogger(__name__)


class UnderwritingService:
    """
    Underwriting service to decide loan applications against a policy.

    This service:
    - Builds a workflow engine backed by the HTTP connector gateway
    - Executes a policy graph for one application
    - Commits connector call logs written during the execution
    """

    def __init__(self, db: AsyncSession, gateway: Optional[ConnectorGateway] = None):
        """
        Initialize the underwriting service.

        Args:
            db: Async database session
            gateway: Connector gateway; defaults to HttpConnectorGateway over db
        """
        self.db = db
        self.gateway = gateway if gateway is not None else HttpConnectorGateway(db)
        self.engine = WorkflowEngine(connector_gateway=self.gateway)

    async def evaluate(
        self,
        graph: Union[WorkflowGraph, Mapping[str, Any]],
        input_data: Mapping[str, Any],
        policy_id: str,
        application_id: str,
    ) -> ExecutionResult:
        """
        Decide an application.

        Args:
            graph: Policy graph, loaded or raw
            input_data: Applicant data
            policy_id: Id of the policy
            application_id: Id of the application

        Returns:
            ExecutionResult from the engine
        """
        result = await self.engine.execute(graph, input_data, policy_id, application_id)
        await self.db.commit()

        if result.decision == Decision.MANUAL_REVIEW:
            logger.warning(
                f"Application {application_id} sent to manual review by policy {policy_id}: "
                f"{result.reason}"
            )
        else:
            logger.info(
                f"Application {application_id} {result.decision.value} by policy {policy_id}"
            )
        return result


async def evaluate_application(
    graph: Union[WorkflowGraph, Mapping[str, Any]],
    input_data: Mapping[str, Any],
    policy_id: str,
    application_id: str,
) -> ExecutionResult:
    """Entry point for callers without a session: opens one, evaluates, closes it."""
    setup_logging()
    async with SessionLocal() as db:
        service = UnderwritingService(db)
        return await service.evaluate(graph, input_data, policy_id, application_id)
