"""Pydantic schemas for execution traces and results."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from decision_engine.core.enums import Decision


class TraceEntry(BaseModel):
    """One node execution attempt, successful or not."""

    node_id: str
    node_kind: str
    timestamp: str = Field(..., description="ISO-8601 UTC time the node started")
    variables: dict[str, Any] = Field(
        default_factory=dict, description="Variable snapshot taken before the node ran"
    )
    output: Optional[dict[str, Any]] = None
    duration_ms: float = 0.0
    error: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ExecutionResult(BaseModel):
    """Caller-facing outcome of one workflow execution."""

    success: bool
    execution_id: str
    policy_id: str
    application_id: str
    decision: Decision
    reason: str
    details: dict[str, Any] = Field(default_factory=dict)
    trace: list[TraceEntry] = Field(default_factory=list)
    total_duration_ms: float = 0.0
    variables: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
