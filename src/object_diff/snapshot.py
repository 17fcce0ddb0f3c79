"""
Snapshot projection.

Renders an array element that exists on only one side of a diff as a
full nested mapping, so the change record shows what was removed or
added without the original dataset.
"""

import logging
from copy import deepcopy
from typing import Any, Optional

from .errors import DataShapeError
from .models import DiffLogger, PropertyKind, TypeDescriptor
from .normalize import get_property
from .validation import traversal_problem

logger = logging.getLogger(__name__)


def project_snapshot(
    item: Any,
    descriptor: TypeDescriptor,
    log: Optional[DiffLogger] = None,
    path: str = ""
) -> dict[str, Any]:
    """
    Project an element into a sparse snapshot under its descriptor.

    Primitive values are copied verbatim; null and absent values are
    omitted. Complex arrays are projected element by element and kept only
    when non-empty. Misconfigured properties are reported through
    `log.error` and skipped.

    Args:
        item: The element to project
        descriptor: The element's type descriptor
        log: Error sink with an `error(msg, *args)` method
        path: Property path (for error reporting)

    Returns:
        Snapshot mapping with keys in lexicographic order

    Raises:
        DataShapeError: If a complex property holds a non-array value
    """
    log = log or logger
    snapshot: dict[str, Any] = {}

    for key, prop in descriptor.sorted_properties():
        problem = traversal_problem(descriptor, key, prop)
        if problem:
            log.error(problem)
            continue

        value = get_property(item, key)
        prop_path = f"{path}/{key}"

        if prop.kind is PropertyKind.COMPLEX:
            if isinstance(value, (list, tuple)):
                projected = []
                for index, element in enumerate(value):
                    if element is None:
                        raise DataShapeError(
                            f"Null element at {prop_path}[{index}]", path=prop_path
                        )
                    projected.append(
                        project_snapshot(element, prop.descriptor, log, prop_path)
                    )
                if projected:
                    snapshot[key] = projected
            elif value is not None:
                raise DataShapeError(
                    f"Unexpected non-array complex type: '{descriptor.name}.{key}'",
                    path=prop_path,
                )
        elif value is not None:
            snapshot[key] = deepcopy(value)

    return snapshot
