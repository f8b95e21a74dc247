"""Arithmetic formula evaluation for calculation nodes."""

import ast
import math
from decimal import Decimal
from typing import Any, Mapping

from simpleeval import DEFAULT_OPERATORS, InvalidExpression, SimpleEval, safe_power

from decision_engine.core.exceptions import ExpressionEvaluationError
from decision_engine.services.workflow_engine.variables import Number, to_number

FUNCTIONS = {
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "sqrt": math.sqrt,
    "pow": math.pow,
    "floor": math.floor,
    "ceil": math.ceil,
    "log": math.log,
    "log10": math.log10,
    "exp": math.exp,
}

# "^" is exponentiation in policy formulas, not bitwise xor
OPERATORS = {**DEFAULT_OPERATORS, ast.BitXor: safe_power}


def _bind(value: Any) -> Any:
    if isinstance(value, str):
        number = to_number(value)
        return value if number is None else number
    return value


class ExpressionEvaluator:
    """
    Evaluates arithmetic formulas such as ``income / 12`` or ``sqrt(debt) * 2``.

    Variables are passed to the evaluator as a name binding, never spliced into
    the formula text, so a value can't be re-read as another variable's name.
    """

    def evaluate(self, formula: str, variables: Mapping[str, Any]) -> Number:
        """
        Evaluate a formula against the current variable bindings.

        Args:
            formula: Arithmetic expression with standard precedence and parentheses
            variables: Current variable bindings

        Returns:
            The numeric result

        Raises:
            ExpressionEvaluationError: If the formula is malformed, references an
                unknown name, fails arithmetically or yields a non-number
        """
        if not formula or not formula.strip():
            raise ExpressionEvaluationError("Formula evaluation error: formula is empty")

        evaluator = SimpleEval(
            operators=OPERATORS,
            functions=FUNCTIONS,
            names={name: _bind(value) for name, value in variables.items()},
        )

        try:
            result = evaluator.eval(formula.strip())
        except (InvalidExpression, SyntaxError, ArithmeticError, TypeError, ValueError) as e:
            raise ExpressionEvaluationError(f"Formula evaluation error: {e}") from e

        if isinstance(result, bool) or not isinstance(result, (int, float, Decimal)):
            raise ExpressionEvaluationError(
                f"Formula evaluation error: '{formula}' did not produce a number (got {result!r})"
            )
        return result
