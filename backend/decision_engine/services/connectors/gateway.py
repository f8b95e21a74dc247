"""Connector gateway interface consumed by the workflow engine."""

from abc import ABC, abstractmethod
from typing import Any


class ConnectorGateway(ABC):
    """
    Resolves a named external data source.

    Implementations may cache across executions and retry failed calls; the
    engine only relies on a payload being returned or an exception raised.
    """

    @abstractmethod
    async def call(
        self,
        connector_id: str,
        params: dict[str, Any],
        cache_enabled: bool = True,
    ) -> Any:
        """
        Call a connector.

        Args:
            connector_id: Id of the connector as configured in the policy graph
            params: Resolved request parameters
            cache_enabled: Whether a cached response may be returned and stored

        Returns:
            The connector's response payload

        Raises:
            Exception: Any failure to obtain a response
        """
        pass
