"""
Descriptor factories.

Build property descriptors with boolean(), number(), string() and
complex_(), then assemble them into a TypeDescriptor with
create_type_descriptor(), which binds names and runs the
construction-time checks in one step.

Example:
    >>> feature = create_type_descriptor(
    ...     "AutomobileFeature",
    ...     primary_key="id",
    ...     properties={
    ...         "id": string(),
    ...         "name": string(),
    ...         "tags": string(),
    ...     },
    ... )
    >>> feature.properties["tags"].name
    'tags'
"""

from typing import Mapping, Optional, Sequence, Union

from .errors import DescriptorError
from .models import PropertyDescriptor, PropertyKind, TypeDescriptor
from .validation import (
    validate_completeness,
    validate_primary_key,
    validate_property_names,
)


PrimaryKeySpec = Union[str, Sequence[str], None]


def boolean() -> PropertyDescriptor:
    """Boolean property (or array of booleans)."""
    return PropertyDescriptor(kind=PropertyKind.BOOLEAN)


def number() -> PropertyDescriptor:
    """Numeric property (or array of numbers)."""
    return PropertyDescriptor(kind=PropertyKind.NUMBER)


def string() -> PropertyDescriptor:
    """String property (or array of strings)."""
    return PropertyDescriptor(kind=PropertyKind.STRING)


def complex_(descriptor: TypeDescriptor) -> PropertyDescriptor:
    """
    Array-of-objects property whose elements are described by `descriptor`.

    Raises:
        DescriptorError: If no element descriptor is given
    """
    if descriptor is None:
        raise DescriptorError("complex properties require a nested type descriptor")
    return PropertyDescriptor(kind=PropertyKind.COMPLEX, descriptor=descriptor)


def normalize_primary_key(primary_key: PrimaryKeySpec) -> tuple[str, ...]:
    """Accept a single name, a sequence of names or None."""
    if primary_key is None:
        return ()
    if isinstance(primary_key, str):
        return (primary_key,)
    return tuple(primary_key)


def create_type_descriptor(
    name: str,
    properties: Mapping[str, PropertyDescriptor],
    primary_key: PrimaryKeySpec = None,
    model: Optional[type] = None
) -> TypeDescriptor:
    """
    Build a fully bound, immutable TypeDescriptor.

    Each property descriptor is copied with its `name` set to its key in
    `properties`; the descriptors passed in are left untouched, so a
    factory result may be shared between types.

    Args:
        name: Diagnostic type name
        properties: Every property of the type, keyed by name
        primary_key: Property name(s) identifying an instance in an array
        model: Optional described type; when given, the property keys must
            match its declared fields exactly

    Returns:
        A new TypeDescriptor

    Raises:
        DescriptorError: If any construction check fails
    """
    keys = normalize_primary_key(primary_key)

    problems = validate_property_names(name, properties)
    problems.extend(validate_primary_key(name, properties, keys))
    if model is not None:
        try:
            problems.extend(validate_completeness(name, properties, model))
        except TypeError as e:
            raise DescriptorError(str(e)) from e

    if problems:
        raise DescriptorError("; ".join(problems))

    bound = {
        key: prop.model_copy(update={"name": key})
        for key, prop in properties.items()
    }

    return TypeDescriptor(name=name, properties=bound, primary_key=keys)
