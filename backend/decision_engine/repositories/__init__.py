from .base import BaseRepository
from .connector_repository import ConnectorLogRepository, ConnectorRepository

__all__ = [
    "BaseRepository",
    "ConnectorLogRepository",
    "ConnectorRepository",
]
