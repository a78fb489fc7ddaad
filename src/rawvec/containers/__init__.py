"""
rawvec.containers - element containers built on RawBuffer.

Modules:
    dynamic_array: DynamicArray, the growable contiguous sequence
    traits: ElementTraits, element lifecycle hooks
    cursor: Cursor, forward position markers
"""

from rawvec.containers.cursor import Cursor
from rawvec.containers.dynamic_array import DynamicArray
from rawvec.containers.traits import ElementTraits

__all__ = ["Cursor", "DynamicArray", "ElementTraits"]
