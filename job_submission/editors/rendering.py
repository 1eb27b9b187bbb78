"""Text rendering helpers shared by editors and coercion warnings."""

from __future__ import annotations

import math
from typing import Any


def editor_describe_value_type(value: Any) -> str:
    """Return a JSON-flavoured type label for coercion warnings.

    Args:
        value: Arbitrary decoded value.

    Returns:
        str: One of `null`, `boolean`, `number`, `string`, `array`, `object`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def editor_render_number(value: int | float) -> str:
    """Render a number the way JSON clients display it.

    Integral floats below 1e21 render without a fractional part so that
    `1.0` and `1` share the text `1`.

    Args:
        value: Integer or float.

    Returns:
        str: Display text.

    Raises:
        TypeError: Raised when value is not a number.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)
