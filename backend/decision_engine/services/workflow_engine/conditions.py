"""Condition evaluator for condition node branching."""

import logging
import operator
from typing import Any, Callable, Dict, Mapping, Union

from pydantic import TypeAdapter, ValidationError

from decision_engine.core.enums import ComparisonOperator, LogicalOperator
from decision_engine.core.exceptions import ConditionEvaluationError
from decision_engine.models.schemas.workflow import (
    ComparisonCondition,
    ConditionExpression,
    ConditionGroup,
)
from decision_engine.services.workflow_engine.variables import resolve_variable, to_number

logger = logging.getLogger(__name__)

_condition_adapter = TypeAdapter(ConditionExpression)

_NUMERIC = (bool, int, float)


def _equality_number(value: Any) -> Any:
    # A blank string equals 0 when compared with a number or boolean
    if isinstance(value, str) and not value.strip():
        return 0
    return to_number(value)


def loose_equals(left: Any, right: Any) -> bool:
    """
    Equality that coerces between numbers, booleans and numeric strings.

    "5" == 5, True == 1 and "" == 0 hold; None only equals None.
    """
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, _NUMERIC) or isinstance(right, _NUMERIC):
        left_number, right_number = _equality_number(left), _equality_number(right)
        if left_number is not None and right_number is not None:
            return left_number == right_number
    return left == right


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(left: Any, right: Any) -> bool:
        # Missing or non-numeric operands never satisfy an ordering comparison
        if left is None or right is None:
            return False
        if isinstance(left, str) and isinstance(right, str):
            return compare(left, right)
        left_number, right_number = to_number(left), to_number(right)
        if left_number is None or right_number is None:
            return False
        return compare(left_number, right_number)

    return evaluate


def _contains(left: Any, right: Any) -> bool:
    return isinstance(right, (list, tuple, set, frozenset)) and left in right


def _not_contains(left: Any, right: Any) -> bool:
    return isinstance(right, (list, tuple, set, frozenset)) and left not in right


class ConditionEvaluator:
    """
    Evaluates condition trees against the execution's variable bindings.

    A tree is either a group ``{"operator": "AND" | "OR", "conditions": [...]}``
    or a leaf ``{"left": ..., "operator": ..., "right": ...}``. Leaf operands
    naming a variable are replaced by its value; other operands are literals.
    """

    _OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
        ComparisonOperator.GT.value: _ordered(operator.gt),
        ComparisonOperator.LT.value: _ordered(operator.lt),
        ComparisonOperator.GTE.value: _ordered(operator.ge),
        ComparisonOperator.LTE.value: _ordered(operator.le),
        ComparisonOperator.EQ.value: loose_equals,
        ComparisonOperator.NEQ.value: lambda left, right: not loose_equals(left, right),
        ComparisonOperator.IN.value: _contains,
        ComparisonOperator.NOT_IN.value: _not_contains,
    }

    def evaluate(
        self,
        condition: Union[ConditionGroup, ComparisonCondition, Mapping[str, Any]],
        variables: Mapping[str, Any],
    ) -> bool:
        """
        Evaluate a condition tree.

        Args:
            condition: Parsed condition or its raw mapping form
            variables: Current variable bindings

        Returns:
            Whether the condition holds

        Raises:
            ConditionEvaluationError: On a malformed tree or an unknown operator
        """
        if isinstance(condition, Mapping):
            try:
                condition = _condition_adapter.validate_python(dict(condition))
            except ValidationError as e:
                raise ConditionEvaluationError(f"Invalid condition: {e}") from e

        if isinstance(condition, ConditionGroup):
            results = (self.evaluate(child, variables) for child in condition.conditions)
            if condition.operator == LogicalOperator.AND:
                return all(results)
            return any(results)

        compare = self._OPERATORS.get(condition.operator)
        if compare is None:
            raise ConditionEvaluationError(f"Unknown operator: {condition.operator}")

        left = resolve_variable(condition.left, variables)
        right = resolve_variable(condition.right, variables)
        result = compare(left, right)

        logger.debug(f"Condition {left!r} {condition.operator} {right!r} -> {result}")
        return result
