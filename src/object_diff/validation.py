"""
Checks for type descriptors.

The validate_* checks run once, when a descriptor is built, and return a
list of problem messages (empty if valid) so the caller can report every
problem at once. traversal_problem() is the per-property guard the diff
engine applies while walking a descriptor.
"""

import dataclasses
import typing
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel

from .models import RESERVED_TOKENS, PropertyDescriptor, PropertyKind, TypeDescriptor


def declared_fields(model: type) -> set[str]:
    """
    Collect the declared field names of a model type.

    Supports pydantic models, dataclasses and annotated classes such as
    TypedDict. Optional fields count as declared.

    Args:
        model: The type being described

    Returns:
        Set of field names

    Raises:
        TypeError: If the type declares no inspectable fields
    """
    if isinstance(model, type) and issubclass(model, BaseModel):
        return set(model.model_fields)

    if dataclasses.is_dataclass(model):
        return {f.name for f in dataclasses.fields(model)}

    try:
        hints = typing.get_type_hints(model)
    except (NameError, TypeError):
        hints = getattr(model, "__annotations__", {})

    if not hints:
        raise TypeError(f"Cannot determine declared fields of {model!r}")

    return {name for name in hints if not name.startswith("_")}


def validate_completeness(
    type_name: str,
    properties: Mapping[str, Any],
    model: type
) -> list[str]:
    """
    Check that the described properties match the model's fields exactly.

    Args:
        type_name: Descriptor name (for messages)
        properties: Property mapping being described
        model: The described type

    Returns:
        List of problems (empty if complete)
    """
    fields = declared_fields(model)
    described = set(properties)
    problems: list[str] = []

    missing = sorted(fields - described)
    if missing:
        problems.append(
            f"'{type_name}' does not describe properties: {', '.join(missing)}"
        )

    unknown = sorted(described - fields)
    if unknown:
        problems.append(
            f"'{type_name}' describes unknown properties: {', '.join(unknown)}"
        )

    return problems


def validate_property_names(type_name: str, names: Iterable[str]) -> list[str]:
    """Property names must be non-empty strings and not marker tokens."""
    problems: list[str] = []

    for name in names:
        if not isinstance(name, str) or not name:
            problems.append(f"'{type_name}' has an invalid property name: {name!r}")
        elif name in RESERVED_TOKENS:
            problems.append(
                f"'{type_name}' uses reserved marker token '{name}' as a property name"
            )

    return problems


def validate_primary_key(
    type_name: str,
    properties: Mapping[str, PropertyDescriptor],
    primary_key: tuple[str, ...]
) -> list[str]:
    """
    Check that every primary-key name is a described primitive property.

    Args:
        type_name: Descriptor name (for messages)
        properties: Property mapping being described
        primary_key: Normalized primary-key names

    Returns:
        List of problems (empty if valid)
    """
    problems: list[str] = []

    if len(set(primary_key)) != len(primary_key):
        problems.append(f"'{type_name}' repeats a primary key property")

    for key in primary_key:
        prop = properties.get(key)
        if prop is None:
            problems.append(
                f"'{type_name}' primary key '{key}' is not a described property"
            )
        elif prop.kind is PropertyKind.COMPLEX:
            problems.append(
                f"'{type_name}' primary key '{key}' cannot be a complex property"
            )

    return problems


def traversal_problem(
    owner: TypeDescriptor,
    key: str,
    prop: PropertyDescriptor,
    require_primary_key: bool = False
) -> Optional[str]:
    """
    Check a property descriptor right before it is traversed.

    Descriptors built with create_type_descriptor() always pass; this
    guards against hand-assembled or unvalidated descriptors.

    Args:
        owner: Descriptor that owns the property
        key: Key of the property in owner.properties
        prop: The property descriptor
        require_primary_key: Whether the nested type must declare a
            primary key (arrays being reconciled)

    Returns:
        Problem message, or None if the property can be traversed
    """
    if not prop.name:
        return f"Property descriptors need a property name (property: '{owner.name}.{key}')."

    if prop.name != key:
        return (
            f"Property descriptor name '{prop.name}' does not match its key "
            f"(property: '{owner.name}.{key}')."
        )

    if prop.kind is not PropertyKind.COMPLEX:
        return None

    if prop.descriptor is None:
        return (
            "Property descriptors for complex properties need a type descriptor "
            f"(property: '{owner.name}.{key}')."
        )

    if require_primary_key and not prop.descriptor.primary_key:
        return (
            "Property descriptors for complex arrays need a primary key "
            f"(property: '{owner.name}.{key}')."
        )

    return None
