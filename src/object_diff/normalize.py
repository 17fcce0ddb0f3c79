"""
Value normalization helpers.

Values are compared through a canonical form: mappings with sorted keys,
integral floats folded to ints and booleans kept distinct from numbers.
"""

import json
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from .errors import DataShapeError


def get_property(obj: Any, name: str) -> Any:
    """
    Read a property from a mapping or an attribute-bearing object.

    Absent properties read as None.
    """
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def canonicalize(value: Any) -> Any:
    """
    Convert a value to its canonical JSON-compatible form.

    Args:
        value: Any JSON-representable value (pydantic models are dumped)

    Returns:
        Canonical value suitable for json.dumps(sort_keys=True)

    Raises:
        DataShapeError: If the value is not JSON-representable
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, BaseModel):
        return canonicalize(value.model_dump())
    if isinstance(value, Mapping):
        return {str(k): canonicalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [canonicalize(v) for v in value]

    raise DataShapeError(f"Unsupported value type: {type(value).__name__}")


JSON_TYPES = (str, int, float, Mapping, list, tuple, BaseModel)


def is_foreign_scalar(value: Any) -> bool:
    """True for non-null values outside the JSON types, such as UUIDs."""
    return value is not None and not isinstance(value, JSON_TYPES)


def canonical_json(value: Any) -> str:
    """Compact, key-sorted JSON of the canonical form."""
    return json.dumps(
        canonicalize(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def values_equal(left: Any, right: Any) -> bool:
    """
    Structural equality over canonical forms.

    None equals None (absent and explicit null are the same) and nothing
    else. 1 equals 1.0; True does not equal 1. Scalars outside the JSON
    types use their own equality.
    """
    if left is None or right is None:
        return left is None and right is None
    if is_foreign_scalar(left) or is_foreign_scalar(right):
        return left == right
    return canonical_json(left) == canonical_json(right)


def sort_key(value: Any) -> tuple:
    """Total order over mixed primitive values: bools, numbers, strings, others, nulls."""
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if value is None:
        return (4, "")
    return (3, canonical_json(value))


def sorted_values(values: Iterable[Any]) -> list[Any]:
    """Deterministically sorted copy of a primitive sequence."""
    return sorted(values, key=sort_key)


def key_component(value: Any) -> str:
    """
    Lower-cased string form of one primary-key value.

    None renders as an empty string; booleans render as 'true'/'false'.
    Scalars outside the JSON types (UUIDs, enums, dates) are string-coerced.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_foreign_scalar(value):
        return str(value).lower()
    canonical = canonicalize(value)
    if isinstance(canonical, str):
        return canonical.lower()
    if isinstance(canonical, (int, float)):
        return str(canonical).lower()
    return canonical_json(canonical).lower()


def primary_key_value(item: Any, primary_key: Iterable[str]) -> str:
    """
    Canonical identity string of an array element.

    Keys are visited in lexicographic order and rendered as
    'name:value;' so element identity is independent of the declared key
    order and of letter case.

    Example:
        >>> primary_key_value({"id": "Car_1", "vin": 7}, ["vin", "id"])
        'id:car_1;vin:7;'
    """
    return "".join(
        f"{key}:{key_component(get_property(item, key))};"
        for key in sorted(primary_key)
    )
