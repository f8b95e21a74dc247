"""Connector registry domain models for external data sources."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from decision_engine.core.enums import ConnectorStatus, ConnectorType
from decision_engine.db.base import BaseModel


class Connector(BaseModel):
    """External data source (credit bureau, verification API, LOS) reachable by policies."""

    __tablename__ = "connectors"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ConnectorType] = mapped_column(
        SQLEnum(ConnectorType, name="connector_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    provider: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True
    )  # e.g., "CIBIL", "Experian"

    # Endpoint, credentials and retry/cache settings (see ConnectorConfig)
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    status: Mapped[ConnectorStatus] = mapped_column(
        SQLEnum(ConnectorStatus, name="connector_status", values_callable=lambda e: [m.value for m in e]),
        default=ConnectorStatus.NOT_TESTED,
        nullable=False,
        index=True,
    )
    last_tested_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    logs: Mapped[list["ConnectorLog"]] = relationship(
        "ConnectorLog",
        back_populates="connector",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Connector(id={self.id}, name={self.name!r}, active={self.is_active})>"


class ConnectorLog(BaseModel):
    """One outbound call made through a connector."""

    __tablename__ = "connector_logs"

    connector_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("connectors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    request_data: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    response_data: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    status_code: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    execution_time_ms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    connector: Mapped["Connector"] = relationship("Connector", back_populates="logs")

    def __repr__(self) -> str:
        return (
            f"<ConnectorLog(id={self.id}, connector_id={self.connector_id}, "
            f"status_code={self.status_code})>"
        )
