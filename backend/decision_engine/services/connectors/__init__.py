"""Connector gateway interface and implementations."""

from .cache import ResponseCache, canonical_json, response_cache
from .gateway import ConnectorGateway
from .http_gateway import HttpConnectorGateway

__all__ = [
    "ConnectorGateway",
    "HttpConnectorGateway",
    "ResponseCache",
    "canonical_json",
    "response_cache",
]
