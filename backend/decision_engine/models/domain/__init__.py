"""SQLAlchemy domain models."""

from .connector import Connector, ConnectorLog

__all__ = [
    "Connector",
    "ConnectorLog",
]
