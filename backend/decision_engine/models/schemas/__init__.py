"""Pydantic schemas for graph validation and result serialization."""

from decision_engine.models.schemas.connector import ConnectorConfig
from decision_engine.models.schemas.execution import ExecutionResult, TraceEntry
from decision_engine.models.schemas.testing import (
    PolicyTestCase,
    PolicyTestResult,
    PolicyTestSuiteResult,
)
from decision_engine.models.schemas.workflow import (
    ComparisonCondition,
    ConditionGroup,
    ScoreFactor,
    ScoreRange,
    WorkflowEdge,
    WorkflowGraph,
)

__all__ = [
    "ComparisonCondition",
    "ConditionGroup",
    "ConnectorConfig",
    "ExecutionResult",
    "PolicyTestCase",
    "PolicyTestResult",
    "PolicyTestSuiteResult",
    "ScoreFactor",
    "ScoreRange",
    "TraceEntry",
    "WorkflowEdge",
    "WorkflowGraph",
]
