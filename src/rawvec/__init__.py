"""
rawvec - a growable contiguous array built on raw slot storage.

Two layers:

- ``rawvec.memory.RawBuffer`` owns a block of uninitialized slots and
  knows only its capacity.
- ``rawvec.containers.DynamicArray`` owns a RawBuffer plus a live count
  and manages element lifecycles through ``ElementTraits``.

Every DynamicArray mutation either completes or raises with the array
unchanged.

Examples:
    >>> from rawvec import DynamicArray
    >>> arr = DynamicArray(3, factory=str)
    >>> arr[1] = "b"
    >>> list(arr)
    ['', 'b', '']
"""

from rawvec.containers import Cursor, DynamicArray, ElementTraits
from rawvec.core.errors import (
    AllocationError,
    BufferCopyError,
    ConfigError,
    ContractViolation,
    EmptyContainerError,
    ErrorCategory,
    ForeignCursorError,
    IndexOutOfRangeError,
    InvalidCapacityError,
    InvalidPositionError,
    LiveElementsError,
    MissingFactoryError,
    RawVecError,
    VacantSlotError,
)
from rawvec.core.settings import RawVecSettings, configure, get_settings, override_settings
from rawvec.memory import RawBuffer

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # containers
    "Cursor",
    "DynamicArray",
    "ElementTraits",
    # memory
    "RawBuffer",
    # errors
    "AllocationError",
    "BufferCopyError",
    "ConfigError",
    "ContractViolation",
    "EmptyContainerError",
    "ErrorCategory",
    "ForeignCursorError",
    "IndexOutOfRangeError",
    "InvalidCapacityError",
    "InvalidPositionError",
    "LiveElementsError",
    "MissingFactoryError",
    "RawVecError",
    "VacantSlotError",
    # settings
    "RawVecSettings",
    "configure",
    "get_settings",
    "override_settings",
]
