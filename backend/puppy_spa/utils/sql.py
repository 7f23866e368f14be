"""
SQL utilities for consistent handling of aggregate results.

MAX/COUNT over an empty waiting list come back as None, and depending on how
the statement was built SQLModel may hand back an int or a 1-tuple/Row.
Use scalar_int() to coerce either shape to int.
"""
from typing import Any


def scalar_int(x: Any, default: int = 0) -> int:
    """Convert a COUNT/MAX result to int. Handles int, None, or 1-tuple/Row."""
    if x is None:
        return default
    if isinstance(x, int):
        return x
    try:
        value = x[0]
    except (TypeError, IndexError, KeyError):
        return int(x)
    return default if value is None else int(value)
