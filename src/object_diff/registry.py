"""
Descriptor registry.

Descriptors are built once and looked up by name for every diff call.
"""

from typing import Iterable

from pydantic import BaseModel, Field

from .models import TypeDescriptor


class DescriptorRegistry(BaseModel):
    """Name -> TypeDescriptor lookup for long-lived descriptors."""

    items: dict[str, TypeDescriptor] = Field(default_factory=dict)

    def register(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Register a descriptor under its own name."""
        if descriptor.name in self.items:
            raise ValueError(f"Duplicate registration: {descriptor.name}")
        self.items[descriptor.name] = descriptor
        return descriptor

    def get(self, name: str) -> TypeDescriptor:
        if name not in self.items:
            available = ", ".join(sorted(self.items.keys()))
            raise KeyError(f"Unknown descriptor: {name}. Available: {available}")
        return self.items[name]

    def names(self) -> list[str]:
        return sorted(self.items.keys())

    def all(self) -> Iterable[TypeDescriptor]:
        return self.items.values()

    def __contains__(self, name: object) -> bool:
        return name in self.items
