"""Node handlers, one per node kind."""

from .calculation_handler import CalculationHandler
from .condition_handler import ConditionHandler
from .control_handlers import EndHandler, PassThroughHandler
from .data_source_handler import ApiCallHandler, DataSourceHandler
from .decision_handler import DecisionHandler
from .score_handler import ScoreHandler

__all__ = [
    "ApiCallHandler",
    "CalculationHandler",
    "ConditionHandler",
    "DataSourceHandler",
    "DecisionHandler",
    "EndHandler",
    "PassThroughHandler",
    "ScoreHandler",
]
