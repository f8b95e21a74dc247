"""Variable resolution and rendering helpers shared by handlers and evaluators."""

import re
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

Number = Union[int, float, Decimal]

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def resolve_variable(value: Any, variables: Mapping[str, Any]) -> Any:
    """
    Resolve an operand or parameter against the variable map.

    A string naming a bound variable is replaced by that variable's current
    value; anything else is returned as a literal.
    """
    if isinstance(value, str) and value in variables:
        return variables[value]
    return value


def to_number(value: Any) -> Optional[Number]:
    """Coerce numbers, booleans and numeric strings to a number, else None."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None


def get_nested_value(obj: Any, path: str) -> Any:
    """Follow a dot-separated path into nested mappings/lists; None when a step is missing."""
    current = obj
    for key in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, (list, tuple)) and key.lstrip("-").isdigit():
            index = int(key)
            current = current[index] if -len(current) <= index < len(current) else None
        else:
            return None
    return current


def render_value(value: Any) -> str:
    """Render a variable for interpolation into a human-readable reason."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def interpolate(template: Optional[str], variables: Mapping[str, Any]) -> str:
    """Replace {name} placeholders with variable values; unknown placeholders are kept."""
    if not template:
        return ""

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return render_value(variables[name])
        return match.group(0)

    return _PLACEHOLDER.sub(substitute, template)
