"""
rawvec.memory - raw, untyped slot storage.

RawBuffer owns a block of uninitialized slots and nothing else: element
construction and destruction belong to the containers built on top.
"""

from rawvec.memory.raw_buffer import SLOT_SIZE, VACANT, RawBuffer

__all__ = ["RawBuffer", "VACANT", "SLOT_SIZE"]
