"""
JSON rendering of change results.

Key order is the engine's insertion order (lexicographic properties,
primary keys first in element entries, removed before added), so keys
are never re-sorted here.
"""

import json
from typing import Any, Optional

from .models import ChangeRecord, ChangeResult


def to_json(changes: ChangeResult, indent: Optional[int] = 2) -> str:
    """
    Serialize a ChangeResult deterministically.

    Args:
        changes: Result of compute_diff()
        indent: JSON indentation (None for compact output)

    Returns:
        JSON string; identical inputs always give identical output
    """
    return json.dumps(changes, indent=indent, ensure_ascii=False)


def record_to_json(record: ChangeRecord, indent: Optional[int] = 2) -> str:
    """Serialize a ChangeRecord, keeping the order of its change mapping."""
    payload: dict[str, Any] = record.model_dump(mode="json")
    return json.dumps(payload, indent=indent, ensure_ascii=False)
