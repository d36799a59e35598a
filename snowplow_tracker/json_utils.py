"""
JSON helpers used when attaching context and unstructured event data.
"""

import json
from typing import Any


class MalformedJsonError(ValueError):
    """Raised when text is not valid JSON or a value cannot be serialized."""


def parse_json(text: str) -> Any:
    """
    Parse JSON text into Python objects.

    Args:
        text: JSON document

    Returns:
        Parsed value (usually a dict)

    Raises:
        MalformedJsonError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedJsonError(f"Invalid JSON: {e}") from e


def serialize_json(value: Any) -> str:
    """Serialize a value to compact JSON text, preserving key order."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MalformedJsonError(f"Value is not JSON serializable: {e}") from e
