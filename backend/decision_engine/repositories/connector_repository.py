"""Repositories for the connector registry and connector call logs."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from decision_engine.models.domain.connector import Connector, ConnectorLog
from decision_engine.repositories.base import BaseRepository


class ConnectorRepository(BaseRepository[Connector]):
    """Lookup of configured connectors."""

    def __init__(self, db: AsyncSession):
        super().__init__(Connector, db)

    async def get_by_connector_id(self, connector_id: str) -> Optional[Connector]:
        """
        Resolve a connector id as written in a policy graph.

        Args:
            connector_id: Connector UUID in string form

        Returns:
            The connector, or None if the id is malformed or unknown
        """
        try:
            uid = UUID(str(connector_id))
        except ValueError:
            return None
        return await self.get_by_id(uid)


class ConnectorLogRepository(BaseRepository[ConnectorLog]):
    """Audit trail of outbound connector calls."""

    def __init__(self, db: AsyncSession):
        super().__init__(ConnectorLog, db)

    async def log_call(
        self,
        connector_id: UUID,
        request_data: Optional[dict[str, Any]],
        response_data: Any,
        status_code: int,
        error_message: Optional[str],
        execution_time_ms: int,
    ) -> ConnectorLog:
        """Record one connector call, successful or not."""
        return await self.create(
            connector_id=connector_id,
            request_data=request_data,
            response_data=response_data,
            status_code=status_code,
            error_message=error_message,
            execution_time_ms=execution_time_ms,
        )
