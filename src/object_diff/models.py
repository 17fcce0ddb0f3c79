"""
Pydantic models for schema-driven object diffing.

Type descriptors declare the properties of a data type, the kind of each
property and the primary key used to match array elements across versions.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


REMOVED_MARKER = "-"
ADDED_MARKER = "+"
RESERVED_TOKENS = frozenset({REMOVED_MARKER, ADDED_MARKER})

# Property name -> scalar marker, primitive-set entries or element entries.
ChangeResult = dict[str, Any]


class DiffLogger(Protocol):
    """Error sink the engine reports configuration problems to."""

    def error(self, msg: str, *args: Any) -> None: ...


class PropertyKind(str, Enum):
    """
    Kind of a described property.

    Arrays are not a kind of their own: an array-valued property has the
    kind of its elements.
    """

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    COMPLEX = "complex"

    @property
    def is_primitive(self) -> bool:
        return self is not PropertyKind.COMPLEX


class PropertyDescriptor(BaseModel):
    """
    Describes one property of a TypeDescriptor.

    The name is bound by create_type_descriptor() from the key the
    descriptor is registered under; it is never supplied by hand.
    """

    model_config = ConfigDict(frozen=True)

    kind: PropertyKind = Field(description="Primitive kind or 'complex'")
    descriptor: Optional["TypeDescriptor"] = Field(
        default=None,
        description="Element type descriptor (complex properties only)"
    )
    name: Optional[str] = Field(
        default=None,
        description="Property name, bound at type construction"
    )

    @model_validator(mode="after")
    def check_nested_descriptor(self) -> "PropertyDescriptor":
        """Complex properties need a nested descriptor; primitives must not have one."""
        if self.kind is PropertyKind.COMPLEX and self.descriptor is None:
            raise ValueError("complex properties require a nested type descriptor")
        if self.kind is not PropertyKind.COMPLEX and self.descriptor is not None:
            raise ValueError(
                f"'{self.kind.value}' properties cannot carry a nested type descriptor"
            )
        return self


class TypeDescriptor(BaseModel):
    """
    Describes one complex type.

    Instances are immutable, property mapping included, and meant to be
    built once and reused across many diff calls. Build them with create_type_descriptor() so property
    names are bound and the construction checks run.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Diagnostic name used in error messages")
    properties: Mapping[str, PropertyDescriptor] = Field(
        default_factory=dict,
        validate_default=True,
        description="Every property of the described type, keyed by name"
    )
    primary_key: tuple[str, ...] = Field(
        default=(),
        description="Property names that identify an instance within an array"
    )

    @field_validator("properties", mode="after")
    @classmethod
    def freeze_properties(
        cls, v: Mapping[str, PropertyDescriptor]
    ) -> Mapping[str, PropertyDescriptor]:
        """Store properties as a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("properties")
    def serialize_properties(
        self, v: Mapping[str, PropertyDescriptor]
    ) -> dict[str, PropertyDescriptor]:
        return dict(v)

    def sorted_properties(self) -> list[tuple[str, PropertyDescriptor]]:
        """Properties in lexicographic name order."""
        return sorted(self.properties.items())


PropertyDescriptor.model_rebuild()
TypeDescriptor.model_rebuild()


class ChangeRecord(BaseModel):
    """
    Audit envelope around a ChangeResult.

    Holds the root descriptor name and the engine version alongside the
    sparse change mapping so a stored record stays self-describing.
    """

    descriptor: str = Field(description="Name of the root type descriptor")
    engine_version: str = Field(description="Diff engine version")
    has_changes: bool = Field(description="Whether any property differs")
    changes: ChangeResult = Field(
        default_factory=dict,
        description="Sparse change mapping"
    )


class MatchedPair(BaseModel):
    """Two versions of the same array element, matched by primary key."""

    key: str = Field(description="Canonical primary key string")
    from_item: Any = Field(description="Element from the 'from' array")
    to_item: Any = Field(description="Element from the 'to' array")


class ArrayChanges(BaseModel):
    """Outcome of reconciling two arrays by primary key."""

    removed: list[Any] = Field(
        default_factory=list,
        description="Elements only present in the 'from' array"
    )
    added: list[Any] = Field(
        default_factory=list,
        description="Elements only present in the 'to' array"
    )
    matched: list[MatchedPair] = Field(
        default_factory=list,
        description="Elements present on both sides, in canonical key order"
    )
