"""Pydantic schemas for policy test cases and their results."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from decision_engine.core.enums import Decision
from decision_engine.models.schemas.execution import TraceEntry


class PolicyTestCase(BaseModel):
    """Applicant data with the decision a policy is expected to reach."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    test_data: dict[str, Any] = Field(default_factory=dict)
    expected_decision: Decision
    expected_reason: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class PolicyTestResult(BaseModel):
    """Outcome of running one test case."""

    name: str
    passed: bool
    expected_decision: Decision
    expected_reason: Optional[str] = None
    actual_decision: Decision
    actual_reason: str
    execution_time_ms: float
    execution_trace: list[TraceEntry] = Field(default_factory=list)
    error_message: Optional[str] = None


class PolicyTestSuiteResult(BaseModel):
    """Summary of running every test case for a policy."""

    policy_id: str
    total: int
    passed: int
    failed: int
    pass_rate: float = Field(..., ge=0, le=100)
    results: list[PolicyTestResult] = Field(default_factory=list)
