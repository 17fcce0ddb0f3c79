"""
Exception taxonomy for the diff engine.

Configuration problems found while building descriptors raise
DescriptorError. Problems found while diffing are split into data-shape
errors (bad input) and reconciliation errors (engine invariant broken).
"""


class ObjectDiffError(Exception):
    """Base class for all diff engine errors."""


class DescriptorError(ObjectDiffError, ValueError):
    """A type descriptor is malformed and cannot be constructed."""


class DataShapeError(ObjectDiffError, ValueError):
    """Input data does not have the shape its descriptor declares."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class DuplicateKeyError(DataShapeError):
    """Two elements of the same array share a canonical primary key."""


class ReconciliationError(ObjectDiffError, RuntimeError):
    """A matched primary key could not be resolved to an element."""
