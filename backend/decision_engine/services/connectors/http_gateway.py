"""HTTP connector gateway backed by the connector registry."""

import asyncio
import logging
import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from decision_engine.config import settings
from decision_engine.core.enums import AuthType
from decision_engine.core.exceptions import (
    ConnectorCallError,
    ConnectorError,
    ConnectorInactiveError,
    ConnectorNotFoundError,
)
from decision_engine.models.domain.connector import Connector
from decision_engine.models.schemas.connector import ConnectorConfig
from decision_engine.repositories.connector_repository import (
    ConnectorLogRepository,
    ConnectorRepository,
)
from decision_engine.services.connectors.cache import ResponseCache, response_cache
from decision_engine.services.connectors.gateway import ConnectorGateway

logger = logging.getLogger(__name__)


class HttpConnectorGateway(ConnectorGateway):
    """
    Calls registered connectors over HTTP.

    This gateway:
    - Looks connectors up in the registry and rejects unknown or inactive ones
    - POSTs request parameters as JSON with the connector's authentication
    - Retries failed calls with exponential backoff
    - Caches successful responses for the connector's configured TTL
    - Logs every completed call to connector_logs
    """

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[ResponseCache] = None,
        backoff_base_seconds: Optional[float] = None,
    ):
        """
        Initialize the gateway.

        Args:
            db: Async database session for the registry and call logs
            client: HTTP client to use; a short-lived client is created per call if omitted
            cache: Response cache; defaults to the process-wide cache
            backoff_base_seconds: Base of the retry backoff (2**attempt * base)
        """
        self.db = db
        self.client = client
        self.cache = cache if cache is not None else response_cache
        self.backoff_base_seconds = (
            settings.CONNECTOR_BACKOFF_BASE_SECONDS
            if backoff_base_seconds is None
            else backoff_base_seconds
        )
        self.connector_repo = ConnectorRepository(db)
        self.log_repo = ConnectorLogRepository(db)

    async def call(
        self,
        connector_id: str,
        params: dict[str, Any],
        cache_enabled: bool = True,
    ) -> Any:
        """
        Call a connector, serving from cache when allowed.

        Raises:
            ConnectorNotFoundError: If no connector has this id
            ConnectorInactiveError: If the connector is disabled
            ConnectorError: If the connector has no usable endpoint configuration
            ConnectorCallError: If every attempt failed
        """
        cache_key = ResponseCache.build_key(connector_id, params)
        if cache_enabled:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Connector {connector_id} served from response cache")
                return cached

        connector = await self.connector_repo.get_by_connector_id(connector_id)
        if connector is None:
            raise ConnectorNotFoundError(f"Connector {connector_id} not found", connector_id)
        if not connector.is_active:
            raise ConnectorInactiveError(f"Connector {connector.name} is not active", connector_id)

        try:
            config = ConnectorConfig.model_validate(connector.config or {})
        except ValidationError as e:
            raise ConnectorError(
                f"Connector {connector.name} has invalid configuration: {e}", connector_id
            ) from e
        if not config.api_url:
            raise ConnectorError(f"Connector {connector.name} has no api_url configured", connector_id)

        attempts = config.retry_count or settings.CONNECTOR_DEFAULT_RETRY_COUNT
        started = time.perf_counter()
        last_error: Optional[Exception] = None
        status_code = 0

        for attempt in range(attempts):
            try:
                logger.info(
                    f"Calling connector {connector.name} (attempt {attempt + 1}/{attempts})"
                )
                response = await self._send(config, params)
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                if isinstance(e, httpx.HTTPStatusError):
                    status_code = e.response.status_code
                logger.warning(f"Connector {connector.name} failed on attempt {attempt + 1}: {e}")
                if attempt < attempts - 1:
                    delay = self.backoff_base_seconds * (2 ** attempt)
                    logger.info(f"Retrying in {delay} seconds...")
                    await asyncio.sleep(delay)
                continue

            if cache_enabled and config.cache_ttl:
                self.cache.set(cache_key, payload, config.cache_ttl)

            await self._log_call(
                connector,
                params,
                payload,
                response.status_code,
                None,
                started,
            )
            return payload

        logger.error(f"Connector {connector.name} failed after {attempts} attempts: {last_error}")
        await self._log_call(connector, params, None, status_code, str(last_error), started)
        raise ConnectorCallError(
            f"Connector {connector.name} failed after {attempts} attempts: {last_error}",
            connector_id,
            attempts=attempts,
            status_code=status_code or None,
        ) from last_error

    async def _send(self, config: ConnectorConfig, params: dict[str, Any]) -> httpx.Response:
        headers = {"Content-Type": "application/json", **config.headers}
        auth = None

        if config.auth_type == AuthType.API_KEY and config.api_key:
            headers["X-API-Key"] = config.api_key
        elif config.auth_type == AuthType.BEARER and config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        elif config.auth_type == AuthType.BASIC and config.username:
            auth = httpx.BasicAuth(config.username, config.password or "")

        timeout = (config.timeout or settings.CONNECTOR_DEFAULT_TIMEOUT_MS) / 1000

        if self.client is not None:
            response = await self.client.post(
                config.api_url, json=params, headers=headers, auth=auth, timeout=timeout
            )
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    config.api_url, json=params, headers=headers, auth=auth, timeout=timeout
                )

        response.raise_for_status()
        return response

    async def _log_call(
        self,
        connector: Connector,
        request_data: dict[str, Any],
        response_data: Any,
        status_code: int,
        error_message: Optional[str],
        started: float,
    ) -> None:
        # A failed audit write must not change the outcome of the call. The
        # savepoint keeps the session usable for later lookups and the commit.
        try:
            async with self.db.begin_nested():
                await self.log_repo.log_call(
                    connector_id=connector.id,
                    request_data=request_data,
                    response_data=response_data,
                    status_code=status_code,
                    error_message=error_message,
                    execution_time_ms=int((time.perf_counter() - started) * 1000),
                )
        except Exception as e:
            logger.error(f"Failed to log call for connector {connector.name}: {e}", exc_info=True)
