"""
Object diff service.

Main entry point for computing schema-driven structural differences
between two versions of a nested data graph.
"""

import logging
from copy import deepcopy
from typing import Any, Optional

from . import __engine_version__
from .errors import DataShapeError
from .models import (
    ADDED_MARKER,
    REMOVED_MARKER,
    ChangeRecord,
    ChangeResult,
    DiffLogger,
    PropertyDescriptor,
    PropertyKind,
    TypeDescriptor,
)
from .normalize import canonical_json, get_property, sorted_values, values_equal
from .reconcile import reconcile_arrays
from .snapshot import project_snapshot
from .validation import traversal_problem

logger = logging.getLogger(__name__)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def diff_primitive(from_value: Any, to_value: Any) -> Any:
    """
    Diff one primitive property.

    Two arrays are compared as unordered sets of values and produce a
    list holding a removed entry and/or an added entry, each sorted.
    Anything else is compared as a scalar and produces a two-sided marker
    with null sides omitted.

    Args:
        from_value: Old value
        to_value: New value

    Returns:
        Change entry, or None if the values are equal

    Example:
        >>> diff_primitive(["a", "b"], ["b", "c"])
        [{'-': ['a']}, {'+': ['c']}]
        >>> diff_primitive(15000, 16000)
        {'-': 15000, '+': 16000}
    """
    if _is_array(from_value) and _is_array(to_value):
        from_set = {canonical_json(v) for v in from_value}
        to_set = {canonical_json(v) for v in to_value}

        removed = [v for v in from_value if canonical_json(v) not in to_set]
        added = [v for v in to_value if canonical_json(v) not in from_set]

        entries: list[dict[str, Any]] = []
        if removed:
            entries.append({REMOVED_MARKER: sorted_values(deepcopy(removed))})
        if added:
            entries.append({ADDED_MARKER: sorted_values(deepcopy(added))})

        return entries or None

    if values_equal(from_value, to_value):
        return None

    marker: dict[str, Any] = {}
    if from_value is not None:
        marker[REMOVED_MARKER] = deepcopy(from_value)
    if to_value is not None:
        marker[ADDED_MARKER] = deepcopy(to_value)

    return marker


def diff_complex(
    from_value: Any,
    to_value: Any,
    owner: TypeDescriptor,
    prop: PropertyDescriptor,
    log: DiffLogger,
    path: str
) -> Optional[list[dict[str, Any]]]:
    """
    Diff one complex (array-of-objects) property.

    Elements are matched by the nested descriptor's primary key. Entries
    are emitted in this order: removed snapshots, added snapshots, then
    one partial record per matched element that changed, holding its
    primary-key values followed by the changed sub-properties.
    When a key value itself changed (only possible in letter case, since
    keys match case-insensitively) its slot holds the {"-", "+"} marker
    instead of the plain value, so the entry still leads with the key.

    Args:
        from_value: Old array (or None)
        to_value: New array (or None)
        owner: Descriptor owning the property
        prop: The complex property descriptor
        log: Error sink for configuration problems
        path: Property path (for error reporting)

    Returns:
        List of entries, or None if nothing changed

    Raises:
        DataShapeError: If the values are not both arrays or both null
    """
    if from_value is None and to_value is None:
        return None

    if not (_is_array(from_value) and _is_array(to_value)):
        raise DataShapeError(
            f"Unexpected non-array complex type: '{owner.name}.{prop.name}'",
            path=path,
        )

    nested = prop.descriptor
    changes = reconcile_arrays(from_value, to_value, nested.primary_key, path)

    entries: list[dict[str, Any]] = []
    entries.extend(
        {REMOVED_MARKER: project_snapshot(item, nested, log, path)}
        for item in changes.removed
    )
    entries.extend(
        {ADDED_MARKER: project_snapshot(item, nested, log, path)}
        for item in changes.added
    )

    for pair in changes.matched:
        item_changes = diff_object(
            pair.from_item, pair.to_item, nested, log, f"{path}[{pair.key}]"
        )
        if not item_changes:
            continue

        entry = {
            key: deepcopy(get_property(pair.from_item, key))
            for key in nested.primary_key
        }
        entry.update(item_changes)
        entries.append(entry)

    return entries or None


def diff_object(
    from_obj: Any,
    to_obj: Any,
    descriptor: TypeDescriptor,
    log: DiffLogger,
    path: str = ""
) -> ChangeResult:
    """
    Recursively diff two objects of the type described by `descriptor`.

    Properties are visited in lexicographic order. A misconfigured
    property is reported through `log.error` and skipped; its siblings are
    still diffed.
    """
    result: ChangeResult = {}

    for key, prop in descriptor.sorted_properties():
        is_complex = prop.kind is PropertyKind.COMPLEX
        problem = traversal_problem(descriptor, key, prop, require_primary_key=is_complex)
        if problem:
            log.error(problem)
            continue

        from_value = get_property(from_obj, key)
        to_value = get_property(to_obj, key)

        if is_complex:
            entry = diff_complex(
                from_value, to_value, descriptor, prop, log, f"{path}/{key}"
            )
        else:
            entry = diff_primitive(from_value, to_value)

        if entry:
            result[key] = entry

    return result


def compute_diff(
    from_obj: Any,
    to_obj: Any,
    descriptor: TypeDescriptor,
    log: Optional[DiffLogger] = None
) -> ChangeResult:
    """
    Compute the structural difference between two object versions.

    The result is sparse: it only holds properties that differ, at every
    nesting level. Scalar changes render as {"-": old, "+": new};
    array elements are matched by primary key, so reordering an array
    produces no change.

    Args:
        from_obj: The old version (mapping or attribute-bearing object)
        to_obj: The new version
        descriptor: Descriptor of the root type
        log: Error sink for configuration problems (defaults to this
            module's logger)

    Returns:
        A fresh ChangeResult owned by the caller

    Raises:
        DataShapeError: If the data does not match the descriptor
        ReconciliationError: If array reconciliation breaks an invariant

    Example:
        >>> car = create_type_descriptor(
        ...     "Car", primary_key="id",
        ...     properties={"id": string(), "msrp": number()},
        ... )
        >>> fleet = create_type_descriptor("Fleet", properties={"cars": complex_(car)})
        >>> compute_diff(
        ...     {"cars": [{"id": "c1", "msrp": 15000}]},
        ...     {"cars": [{"id": "C1", "msrp": 16000}]},
        ...     fleet,
        ... )
        {'cars': [{'id': 'c1', 'msrp': {'-': 15000, '+': 16000}}]}
    """
    changes = diff_object(from_obj, to_obj, descriptor, log or logger)

    logger.debug(
        "Diffed %s | changed_properties=%d", descriptor.name, len(changes)
    )

    return changes


def create_change_record(
    from_obj: Any,
    to_obj: Any,
    descriptor: TypeDescriptor,
    log: Optional[DiffLogger] = None
) -> ChangeRecord:
    """
    Diff two object versions and wrap the result for an audit trail.

    Args:
        from_obj: The old version
        to_obj: The new version
        descriptor: Descriptor of the root type
        log: Error sink for configuration problems

    Returns:
        ChangeRecord carrying the root type name and engine version
    """
    changes = compute_diff(from_obj, to_obj, descriptor, log)

    return ChangeRecord(
        descriptor=descriptor.name,
        engine_version=__engine_version__,
        has_changes=bool(changes),
        changes=changes,
    )
