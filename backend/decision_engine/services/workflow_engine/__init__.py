"""Policy workflow execution engine."""

from .assembler import ResultAssembler
from .base import ExecutionContext, NodeHandler, NodeResult
from .conditions import ConditionEvaluator
from .engine import WorkflowEngine
from .expressions import ExpressionEvaluator
from .scoring import ScoringEngine

__all__ = [
    "ConditionEvaluator",
    "ExecutionContext",
    "ExpressionEvaluator",
    "NodeHandler",
    "NodeResult",
    "ResultAssembler",
    "ScoringEngine",
    "WorkflowEngine",
]
