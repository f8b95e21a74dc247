"""Pydantic schema for connector endpoint configuration."""

from typing import Optional

from pydantic import BaseModel, Field

from decision_engine.core.enums import AuthType


class ConnectorConfig(BaseModel):
    """Endpoint, credentials and call policy stored in Connector.config."""

    api_url: Optional[str] = None
    api_key: Optional[str] = None
    auth_type: Optional[AuthType] = None
    username: Optional[str] = Field(None, description="Basic auth user name")
    password: Optional[str] = Field(None, description="Basic auth password")
    timeout: Optional[int] = Field(None, gt=0, description="Request timeout in milliseconds")
    retry_count: Optional[int] = Field(None, ge=1, description="Total attempts per call")
    cache_ttl: Optional[int] = Field(None, ge=0, description="Response cache lifetime in seconds")
    headers: dict[str, str] = Field(default_factory=dict)
