"""
RawBuffer - owning handle to a block of uninitialized element slots.

A RawBuffer separates "has memory" from "has a live object". It owns a
fixed-size block of ``py_object`` slots and knows only how many slots the
block has; it never counts, constructs or destroys elements. Containers
built on it place elements into slots, vacate them, and track which
prefix is live.

Manifesto:
    - **Allocation only:** No element hooks are ever called from here
    - **Exclusive ownership:** Transfer with ``take()``, exchange with
      ``swap()``; copying is refused
    - **Explicit release:** The owner destroys elements first, then releases

Architecture:
    ::

        RawBuffer(capacity=4)
        ┌────────┬────────┬────────┬────────┐
        │ slot 0 │ slot 1 │ slot 2 │ slot 3 │   ctypes (4 * py_object)()
        └────────┴────────┴────────┴────────┘
        ^ address                             ^ buffer + 4 (one past last)

        slot states:
          NULL    - never written (fresh storage)
          vacant  - element moved out or destroyed
          object  - occupied (a live element, managed by the container)

Features:
    - **Acquire:** ``RawBuffer(n)``; n == 0 holds no block
    - **Release:** ``release()`` or context-manager exit
    - **Transfer / swap:** constant time, never fail
    - **Offset arithmetic:** ``buffer + offset`` gives a slot address for
      offsets in ``[0, capacity]``
    - **Slot access:** ``buffer[i]``, ``buffer[i] = v``, ``vacate(i)``

Examples:
    >>> buf = RawBuffer(4)
    >>> buf.capacity
    4
    >>> buf[0] = "a"
    >>> buf.vacate(0)
    'a'
    >>> moved = buf.take()
    >>> buf.capacity, moved.capacity
    (0, 4)
    >>> moved.release()

Guardrails:
    ❌ DON'T: Release a buffer that still holds live elements
    ✅ DO: Vacate or destroy every live slot first (checked in debug mode)

    ❌ DON'T: copy.copy() a RawBuffer
    ✅ DO: take() to move ownership, or copy elements at the container level

Tags:
    raw-memory, allocation, ctypes, ownership, rawvec

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import ctypes
from typing import Any, Generic, TypeVar

from rawvec.core.contracts import checks_enabled, expect
from rawvec.core.errors import (
    AllocationError,
    BufferCopyError,
    IndexOutOfRangeError,
    InvalidCapacityError,
    LiveElementsError,
    VacantSlotError,
)
from rawvec.core.settings import get_settings

T = TypeVar("T")

SLOT_SIZE = ctypes.sizeof(ctypes.py_object)


class _Vacant:
    """Marker stored in slots whose element was moved out or destroyed."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<vacant>"


VACANT: Any = _Vacant()


def _allocate(capacity: int) -> ctypes.Array | None:
    """Acquire a block of ``capacity`` NULL slots, or None for zero slots."""
    if capacity <= 0:
        return None

    limit = get_settings().max_capacity
    if limit is not None and capacity > limit:
        raise AllocationError(
            f"cannot acquire {capacity} slots: limit is {limit}",
            operation="acquire",
            requested=capacity,
            limit=limit,
        )

    try:
        return (capacity * ctypes.py_object)()
    except (MemoryError, OverflowError) as exc:
        raise AllocationError(
            f"cannot acquire {capacity} slots",
            operation="acquire",
            requested=capacity,
            cause=exc,
        ) from exc


class RawBuffer(Generic[T]):
    """Owning handle to ``capacity`` uninitialized slots.

    Invariant: ``capacity == 0`` if and only if no block is held.
    """

    __slots__ = ("_block", "_capacity")

    def __init__(self, capacity: int = 0) -> None:
        expect(
            capacity >= 0,
            InvalidCapacityError,
            "capacity must be >= 0, got {requested}",
            operation="acquire",
            requested=capacity,
        )
        self._block = _allocate(capacity)
        self._capacity = capacity if self._block is not None else 0

    # ── Ownership ────────────────────────────────────────────────

    def take(self) -> RawBuffer[T]:
        """Move the block into a new owner; this buffer becomes empty."""
        taken: RawBuffer[T] = RawBuffer()
        self.swap(taken)
        return taken

    def swap(self, other: RawBuffer[T]) -> None:
        """Exchange blocks and capacities with ``other``."""
        self._block, other._block = other._block, self._block
        self._capacity, other._capacity = other._capacity, self._capacity

    def release(self) -> None:
        """Free the block. All live elements must already be destroyed."""
        if self._block is not None and checks_enabled():
            live = self.occupied_count()
            if live:
                raise LiveElementsError(
                    f"release with {live} live element(s) still in the buffer",
                    operation="release",
                    capacity=self._capacity,
                    size=live,
                )
        self._block = None
        self._capacity = 0

    def __enter__(self) -> RawBuffer[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __copy__(self) -> RawBuffer[T]:
        raise BufferCopyError("RawBuffer cannot be copied; use take() or swap()")

    def __deepcopy__(self, memo: dict[int, Any]) -> RawBuffer[T]:
        raise BufferCopyError("RawBuffer cannot be copied; use take() or swap()")

    def __reduce_ex__(self, protocol: Any) -> Any:
        raise BufferCopyError("RawBuffer cannot be pickled")

    # ── Geometry ─────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def address(self) -> int | None:
        """Address of slot 0, or None when no block is held."""
        if self._block is None:
            return None
        return ctypes.addressof(self._block)

    def __add__(self, offset: int) -> int | None:
        """Address of the slot at ``offset``; ``capacity`` is one past the last slot."""
        expect(
            0 <= offset <= self._capacity,
            IndexOutOfRangeError,
            "offset {position} outside [0, {capacity}]",
            operation="offset",
            position=offset,
            capacity=self._capacity,
        )
        base = self.address
        if base is None:
            return None
        return base + offset * SLOT_SIZE

    def __bool__(self) -> bool:
        return self._block is not None

    # ── Slot access ──────────────────────────────────────────────

    def _check_index(self, index: int, operation: str) -> None:
        expect(
            0 <= index < self._capacity,
            IndexOutOfRangeError,
            "slot {position} outside [0, {capacity})",
            operation=operation,
            position=index,
            capacity=self._capacity,
        )

    def _occupant(self, index: int) -> Any:
        try:
            return self._block[index]
        except ValueError:
            # NULL slot: never written
            return VACANT

    def is_occupied(self, index: int) -> bool:
        self._check_index(index, "is_occupied")
        return self._occupant(index) is not VACANT

    def occupied_count(self) -> int:
        return sum(1 for i in range(self._capacity) if self._occupant(i) is not VACANT)

    def __getitem__(self, index: int) -> T:
        self._check_index(index, "read")
        value = self._occupant(index)
        expect(
            value is not VACANT,
            VacantSlotError,
            "slot {position} holds no live element",
            operation="read",
            position=index,
        )
        return value

    def __setitem__(self, index: int, value: T) -> None:
        self._check_index(index, "write")
        self._block[index] = value

    def vacate(self, index: int) -> T:
        """Remove and return the occupant of ``index``; the slot becomes vacant."""
        self._check_index(index, "vacate")
        value = self._occupant(index)
        self._block[index] = VACANT
        return value

    def __repr__(self) -> str:
        address = self.address
        where = hex(address) if address is not None else "null"
        return f"RawBuffer(capacity={self._capacity}, address={where})"


__all__ = ["RawBuffer", "VACANT", "SLOT_SIZE"]
