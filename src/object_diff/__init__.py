"""
Object Diff Engine

Schema-driven structural diff between two versions of a nested data
graph. Array elements are matched by primary key, so the change record
names which nested entity changed, not only what changed.
"""

__version__ = "0.1.0"
__engine_version__ = "OBJDIFF-0.1.0"

from .descriptors import (
    boolean,
    complex_,
    create_type_descriptor,
    number,
    string,
)
from .errors import (
    DataShapeError,
    DescriptorError,
    DuplicateKeyError,
    ObjectDiffError,
    ReconciliationError,
)
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
from .registry import DescriptorRegistry
from .serialization import record_to_json, to_json
from .service import compute_diff, create_change_record

__all__ = [
    "__version__",
    "__engine_version__",
    "ADDED_MARKER",
    "REMOVED_MARKER",
    "ChangeRecord",
    "ChangeResult",
    "DataShapeError",
    "DescriptorError",
    "DescriptorRegistry",
    "DiffLogger",
    "DuplicateKeyError",
    "ObjectDiffError",
    "PropertyDescriptor",
    "PropertyKind",
    "ReconciliationError",
    "TypeDescriptor",
    "boolean",
    "complex_",
    "compute_diff",
    "create_change_record",
    "create_type_descriptor",
    "number",
    "record_to_json",
    "string",
]
