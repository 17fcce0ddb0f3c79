"""
Array reconciliation.

Matches the elements of two arrays by primary key rather than by
position, splitting them into removed, added and matched pairs.
"""

from typing import Any, Optional, Sequence

from .errors import DataShapeError, DuplicateKeyError, ReconciliationError
from .models import ArrayChanges, MatchedPair
from .normalize import primary_key_value


def compute_keys(
    items: Sequence[Any],
    primary_key: Sequence[str],
    path: str = ""
) -> list[str]:
    """
    Compute the canonical key of every element.

    Args:
        items: Array elements
        primary_key: Primary-key property names
        path: Property path (for error reporting)

    Returns:
        Canonical keys, index-aligned with `items`

    Raises:
        DataShapeError: If an element is null
        DuplicateKeyError: If two elements share a canonical key
    """
    keys: list[str] = []
    seen: set[str] = set()

    for index, item in enumerate(items):
        if item is None:
            raise DataShapeError(
                f"Null element at {path or '/'}[{index}]", path=path
            )
        key = primary_key_value(item, primary_key)
        if key in seen:
            raise DuplicateKeyError(
                f"Duplicate primary key '{key}' at {path or '/'}[{index}]",
                path=path,
            )
        seen.add(key)
        keys.append(key)

    return keys


def find_by_key(items: Sequence[Any], keys: Sequence[str], key: str) -> Optional[Any]:
    """First element whose canonical key equals `key`."""
    for item, item_key in zip(items, keys):
        if item_key == key:
            return item
    return None


def reconcile_arrays(
    from_array: Sequence[Any],
    to_array: Sequence[Any],
    primary_key: Sequence[str],
    path: str = ""
) -> ArrayChanges:
    """
    Reconcile two arrays of the same element type by primary key.

    Key comparison is case-insensitive and independent of element order.
    Removed and added elements keep their source order; matched pairs are
    ordered by canonical key.

    Args:
        from_array: Elements of the old version
        to_array: Elements of the new version
        primary_key: Primary-key property names
        path: Property path (for error reporting)

    Returns:
        ArrayChanges with removed, added and matched elements

    Raises:
        DuplicateKeyError: If a key repeats within one array
        ReconciliationError: If a matched key cannot be resolved

    Example:
        >>> changes = reconcile_arrays(
        ...     [{"id": "a"}, {"id": "B"}],
        ...     [{"id": "b"}, {"id": "c"}],
        ...     ["id"],
        ... )
        >>> [item["id"] for item in changes.removed]
        ['a']
        >>> [pair.to_item["id"] for pair in changes.matched]
        ['b']
    """
    from_keys = compute_keys(from_array, primary_key, path)
    to_keys = compute_keys(to_array, primary_key, path)
    matched_keys = sorted(set(from_keys) & set(to_keys))
    matched_set = set(matched_keys)

    removed = [
        item for item, key in zip(from_array, from_keys) if key not in matched_set
    ]
    added = [
        item for item, key in zip(to_array, to_keys) if key not in matched_set
    ]

    matched: list[MatchedPair] = []
    for key in matched_keys:
        from_item = find_by_key(from_array, from_keys, key)
        to_item = find_by_key(to_array, to_keys, key)

        if from_item is None or to_item is None:
            raise ReconciliationError(
                f"Matched primary key '{key}' not found on both sides of {path or '/'}"
            )

        matched.append(MatchedPair(key=key, from_item=from_item, to_item=to_item))

    return ArrayChanges(removed=removed, added=added, matched=matched)
