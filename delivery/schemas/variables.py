"""Shared coercion for template variable maps."""

from typing import Any


def coerce_variables(value: Any) -> dict[str, str]:
    """Turn an arbitrary mapping into the str -> str map templates expect.

    None values become empty strings; everything else is passed through
    str(). A missing map is treated as empty.
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("variables must be an object")
    return {
        str(key): "" if item is None else str(item) for key, item in value.items()
    }
