"""Handlers that resolve external data through the connector gateway."""

import logging
from typing import Any, Optional

from decision_engine.core.enums import OnErrorPolicy
from decision_engine.core.exceptions import ConfigurationError, DataSourceError
from decision_engine.models.schemas.workflow import (
    ApiCallNode,
    DataSourceNode,
    DataSourceNodeConfig,
)
from decision_engine.services.connectors.cache import canonical_json
from decision_engine.services.connectors.gateway import ConnectorGateway
from decision_engine.services.workflow_engine.base import (
    ExecutionContext,
    NodeHandler,
    NodeResult,
)
from decision_engine.services.workflow_engine.variables import (
    get_nested_value,
    resolve_variable,
)

logger = logging.getLogger(__name__)


def build_cache_key(connector_id: str, params: dict[str, Any]) -> str:
    """Key for the per-execution connector cache."""
    return f"{connector_id}_{canonical_json(params)}"


class DataSourceHandler(NodeHandler):
    """
    Fetches connector data and maps response fields into variables.

    Responses are cached in the execution context, so a second request for the
    same connector and parameters within one execution never reaches the
    gateway. Gateway failures are handled according to the node's on_error
    policy: skip, use_cached, manual_review, or re-raise when unset.
    """

    def __init__(self, gateway: Optional[ConnectorGateway] = None):
        self.gateway = gateway

    async def handle(self, node: DataSourceNode, context: ExecutionContext) -> NodeResult:
        return await self._fetch(node.id, node.config, context)

    async def _fetch(
        self,
        node_id: str,
        config: DataSourceNodeConfig,
        context: ExecutionContext,
    ) -> NodeResult:
        params = {
            key: resolve_variable(value, context.variables)
            for key, value in config.params.items()
        }

        cache_key = build_cache_key(config.connector_id, params)
        if cache_key in context.connector_cache:
            logger.debug(f"Node {node_id}: connector {config.connector_id} served from execution cache")
            return {
                "success": True,
                "data": context.connector_cache[cache_key],
                "from_cache": True,
            }

        try:
            if self.gateway is None:
                raise ConfigurationError(
                    f"No connector gateway available for connector {config.connector_id}"
                )
            response = await self.gateway.call(
                config.connector_id, params, config.cache_response
            )
        except Exception as e:
            return self._handle_failure(node_id, config, cache_key, context, e)

        if config.field_mapping:
            for variable_name, response_path in config.field_mapping.items():
                context.variables[variable_name] = get_nested_value(response, response_path)

        context.connector_cache[cache_key] = response

        return {"success": True, "data": response, "from_cache": False}

    def _handle_failure(
        self,
        node_id: str,
        config: DataSourceNodeConfig,
        cache_key: str,
        context: ExecutionContext,
        error: Exception,
    ) -> NodeResult:
        logger.warning(
            f"Node {node_id}: connector {config.connector_id} failed "
            f"(on_error={config.on_error.value if config.on_error else 'raise'}): {error}"
        )

        if config.on_error == OnErrorPolicy.SKIP:
            return {"success": True, "skipped": True}

        if config.on_error == OnErrorPolicy.USE_CACHED and cache_key in context.connector_cache:
            return {
                "success": True,
                "data": context.connector_cache[cache_key],
                "from_cache": True,
            }

        if config.on_error == OnErrorPolicy.MANUAL_REVIEW:
            raise DataSourceError(
                f"Data source failed: {error}. Sending to manual review."
            ) from error

        raise error


class ApiCallHandler(DataSourceHandler):
    """API call nodes share the data source contract; without a connector they are no-ops."""

    async def handle(self, node: ApiCallNode, context: ExecutionContext) -> NodeResult:
        if not node.config.connector_id:
            return {"success": True}
        return await self._fetch(node.id, node.config, context)
