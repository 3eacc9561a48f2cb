"""
Key-case conversion between Firestore/JSON documents and Python records.
"""

from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_camel, to_snake


def convert_keys(data: Any, direction: str) -> Any:
    """
    Recursively rename dict keys.

    Args:
        data: A dict, list or scalar value.
        direction: Either "snake_to_camel" or "camel_to_snake".

    Returns:
        A copy of `data` with every dict key converted. Non-string keys and
        non-container values are returned as-is.
    """
    if direction == "snake_to_camel":
        convert = to_camel
    elif direction == "camel_to_snake":
        convert = to_snake
    else:
        raise ValueError(f"Unknown key conversion direction: {direction}")

    if isinstance(data, dict):
        return {
            (convert(k) if isinstance(k, str) else k): convert_keys(v, direction)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [convert_keys(item, direction) for item in data]
    return data
