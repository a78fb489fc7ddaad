"""
DynamicArray - contiguous, growable sequence over a RawBuffer.

DynamicArray owns one RawBuffer and a live-element count. Slots
``[0, size)`` hold live elements in logical order; slots
``[size, capacity)`` are uninitialized storage. Element lifecycles are
driven through the array's ElementTraits.

Manifesto:
    Every mutation is atomic from the caller's point of view: it either
    completes, or raises and leaves the array exactly as it was.

    - **Build new, then swap:** Growth constructs the complete new layout in
      a fresh buffer before the old one is touched
    - **Constant-time commit:** Adopting the new buffer is a swap that
      cannot fail
    - **Relocate when safe:** Existing elements are relocated when
      relocation cannot fail, copied otherwise
    - **Failures propagate:** Element hook exceptions reach the caller
      unchanged after the operation has unwound

Architecture:
    ::

        emplace(pos, *args) with size == capacity
        ┌───────────────────────────────────────────────────────────┐
        │ 1. new = RawBuffer(max(1, 2 * capacity))                  │
        │ 2. new[pos] = construct(*args)      fail → release new    │
        │ 3. new[0:pos] = transfer(old[0:pos])                      │
        │                                     fail → unwind 2       │
        │ 4. new[pos+1:] = transfer(old[pos:])                      │
        │                                     fail → unwind 2 and 3 │
        │ 5. retire old elements, swap buffers, release old block   │
        └───────────────────────────────────────────────────────────┘

        emplace(pos, *args) with spare capacity, pos < size
        ┌───────────────────────────────────────────────────────────┐
        │ value = construct(*args)            fail → unchanged      │
        │ infallible relocation: shift [pos, size) right by one     │
        │ fallible relocation:   stage the shifted tail in a        │
        │                        scratch buffer, then commit        │
        │ slot[pos] = value                                         │
        └───────────────────────────────────────────────────────────┘

Features:
    - **Construction:** empty, sized (default elements), copy_of, moved_from
    - **Assignment:** assign (copy), move_assign, swap
    - **Capacity:** reserve, resize, clear, destroy
    - **Mutators:** push_back, emplace_back, pop_back, insert, emplace, erase
    - **Access:** len(), capacity, indexing, front/back, begin/end cursors

Examples:
    >>> arr = DynamicArray(factory=int)
    >>> for n in range(3):
    ...     arr.push_back(n)
    >>> list(arr), arr.capacity
    ([0, 1, 2], 4)
    >>> arr.insert(0, 9).value
    9
    >>> list(arr)
    [9, 0, 1, 2]
    >>> arr.erase(1).value
    1

Guardrails:
    ❌ DON'T: Keep cursors across reserve/insert/erase
    ✅ DO: Use the cursor the mutator returns

    ❌ DON'T: Share one array between threads without a lock
    ✅ DO: Give each array a single owner

Performance:
    - push_back/emplace_back: amortized O(1); capacity doubles when full
    - insert/emplace/erase: O(size - pos) relocations
    - swap/move_assign/moved_from: O(1) buffer exchange

Tags:
    dynamic-array, vector, strong-exception-safety, rawvec

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import copy
import operator
from collections.abc import Callable, Iterator
from dataclasses import replace
from typing import Any, Generic, TypeVar

from rawvec.containers.cursor import Cursor
from rawvec.containers.traits import ElementTraits
from rawvec.core.contracts import expect
from rawvec.core.errors import (
    EmptyContainerError,
    ForeignCursorError,
    IndexOutOfRangeError,
    InvalidCapacityError,
    InvalidPositionError,
)
from rawvec.core.logging import get_logger
from rawvec.memory.raw_buffer import RawBuffer

T = TypeVar("T")

logger = get_logger(__name__)


class DynamicArray(Generic[T]):
    """Growable array with failure-atomic mutations.

    Args:
        size: Number of default-constructed elements to start with
        factory: Element factory, shorthand for ``ElementTraits(factory=...)``
        traits: Full element lifecycle hooks

    Copy assignment keeps the destination's traits; swap and move
    operations carry traits along with the elements they manage.
    """

    def __init__(
        self,
        size: int = 0,
        *,
        factory: Callable[..., T] | None = None,
        traits: ElementTraits[T] | None = None,
    ) -> None:
        expect(
            size >= 0,
            InvalidCapacityError,
            "size must be >= 0, got {requested}",
            operation="construct",
            requested=size,
        )
        if traits is None:
            traits = ElementTraits(factory=factory)
        elif factory is not None:
            traits = replace(traits, factory=factory)

        self._traits: ElementTraits[T] = traits
        self._data: RawBuffer[T] = RawBuffer(size)
        self._size = 0

        if size > 0:
            try:
                self._construct_range(self._data, 0, size, lambda i: traits.default())
            except BaseException:
                self._data.release()
                raise
            self._size = size

    # ── Construction from another array ──────────────────────────

    @classmethod
    def copy_of(
        cls, other: DynamicArray[T], *, traits: ElementTraits[T] | None = None
    ) -> DynamicArray[T]:
        """Element-wise copy of ``other`` with capacity equal to its size."""
        traits = traits or other._traits
        array = cls(traits=traits)
        data: RawBuffer[T] = RawBuffer(other._size)
        source = other._data
        try:
            array._construct_range(data, 0, other._size, lambda i: traits.copy_of(source[i]))
        except BaseException:
            data.release()
            raise
        array._data = data
        array._size = other._size
        return array

    @classmethod
    def moved_from(cls, other: DynamicArray[T]) -> DynamicArray[T]:
        """Take over ``other``'s buffer; ``other`` is left empty."""
        array = cls(traits=other._traits)
        array.swap(other)
        return array

    def copy(self) -> DynamicArray[T]:
        return DynamicArray.copy_of(self)

    def __copy__(self) -> DynamicArray[T]:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> DynamicArray[T]:
        # registered before filling so self-references resolve to the clone
        clone = DynamicArray(traits=self._traits)
        memo[id(self)] = clone
        deep = replace(self._traits, copier=lambda value: copy.deepcopy(value, memo))
        filled = DynamicArray.copy_of(self, traits=deep)
        clone._data.swap(filled._data)
        clone._size, filled._size = filled._size, 0
        return clone

    # ── Assignment ───────────────────────────────────────────────

    def assign(self, other: DynamicArray[T]) -> DynamicArray[T]:
        """Copy-assign ``other``'s elements into this array.

        When ``other`` does not fit the current capacity, a full copy is
        built first and swapped in, so a failing copy leaves this array
        untouched. Otherwise elements are overwritten in place; a copy
        failing part-way leaves a valid array holding a mix of old and
        new elements.
        """
        if other is self:
            return self

        if other._size > self.capacity:
            replacement = DynamicArray.copy_of(other, traits=self._traits)
            self.swap(replacement)
            replacement.destroy()
            return self

        overlap = min(self._size, other._size)
        for i in range(overlap):
            self._assign_at(i, other._data[i])

        if other._size < self._size:
            self._vacate_range(self._data, other._size, self._size - other._size, destroy=True)
        else:
            source = other._data
            self._construct_range(
                self._data,
                self._size,
                other._size - self._size,
                lambda i: self._traits.copy_of(source[overlap + i]),
            )
        self._size = other._size
        return self

    def move_assign(self, other: DynamicArray[T]) -> DynamicArray[T]:
        """Take over ``other``'s elements; ``other`` is left empty."""
        if other is self:
            return self
        self.swap(other)
        other.destroy()
        return self

    def swap(self, other: DynamicArray[T]) -> None:
        self._data.swap(other._data)
        self._size, other._size = other._size, self._size
        self._traits, other._traits = other._traits, self._traits

    # ── Destruction ──────────────────────────────────────────────

    def clear(self) -> None:
        """Destroy all elements; capacity is kept."""
        self._vacate_range(self._data, 0, self._size, destroy=True)
        self._size = 0

    def destroy(self) -> None:
        """Destroy all elements and release the buffer."""
        self.clear()
        self._data.release()

    def __enter__(self) -> DynamicArray[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.destroy()

    # ── Capacity ─────────────────────────────────────────────────

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._data.capacity

    @property
    def traits(self) -> ElementTraits[T]:
        return self._traits

    @property
    def empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def reserve(self, new_capacity: int) -> None:
        if new_capacity <= self.capacity:
            return

        new_data: RawBuffer[T] = RawBuffer(new_capacity)
        try:
            self._transfer_into(new_data, 0, 0, self._size)
        except BaseException:
            new_data.release()
            logger.debug("growth_rolled_back", operation="reserve", capacity=self.capacity)
            raise
        self._adopt(new_data)

    def resize(self, new_size: int) -> None:
        expect(
            new_size >= 0,
            InvalidCapacityError,
            "size must be >= 0, got {requested}",
            operation="resize",
            requested=new_size,
        )
        if new_size < self._size:
            self._vacate_range(self._data, new_size, self._size - new_size, destroy=True)
        else:
            self.reserve(new_size)
            traits = self._traits
            self._construct_range(
                self._data, self._size, new_size - self._size, lambda i: traits.default()
            )
        self._size = new_size

    # ── Append / remove at end ───────────────────────────────────

    def emplace_back(self, *args: Any, **kwargs: Any) -> T:
        """Construct an element from ``args`` at the end and return it."""
        traits = self._traits
        return self._emplace_back_with(lambda: traits.construct(*args, **kwargs))

    def push_back(self, value: T, *, move: bool = False) -> None:
        """Append a copy of ``value`` (or ``value`` itself, relocated, with ``move=True``)."""
        self._emplace_back_with(self._maker(value, move))

    def pop_back(self) -> None:
        expect(
            self._size > 0,
            EmptyContainerError,
            "pop_back on an empty array",
            operation="pop_back",
        )
        self._size -= 1
        self._traits.destroy(self._data.vacate(self._size))

    def _emplace_back_with(self, make: Callable[[], T]) -> T:
        if self._size == self.capacity:
            self._grow_with(self._size, make)
        else:
            self._data[self._size] = make()
        self._size += 1
        return self._data[self._size - 1]

    # ── Insert / erase ───────────────────────────────────────────

    def emplace(self, pos: int | Cursor[T], *args: Any, **kwargs: Any) -> Cursor[T]:
        """Construct an element from ``args`` before ``pos``."""
        traits = self._traits
        return self._emplace_with(pos, lambda: traits.construct(*args, **kwargs))

    def insert(self, pos: int | Cursor[T], value: T, *, move: bool = False) -> Cursor[T]:
        """Insert a copy of ``value`` (relocate with ``move=True``) before ``pos``."""
        return self._emplace_with(pos, self._maker(value, move))

    def erase(self, pos: int | Cursor[T]) -> Cursor[T]:
        """Remove the element at ``pos``; returns a cursor to its successor."""
        index = self._position(pos, allow_end=False, operation="erase")
        traits = self._traits
        data = self._data
        tail = self._size - index - 1
        doomed = data[index]

        if traits.nothrow_relocate or tail == 0:
            for i in range(index, self._size - 1):
                data[i] = traits.relocate(data[i + 1])
            data.vacate(self._size - 1)
        else:
            scratch = self._stage(index + 1, tail)
            self._vacate_range(data, index + 1, tail, destroy=not traits.relocation_preferred)
            data.vacate(index)
            self._unstage(scratch, index)

        self._size -= 1
        traits.destroy(doomed)
        return Cursor(self, index)

    def _emplace_with(self, pos: int | Cursor[T], make: Callable[[], T]) -> Cursor[T]:
        index = self._position(pos, allow_end=True, operation="insert")

        if self._size == self.capacity:
            self._grow_with(index, make)
        elif index == self._size:
            self._data[index] = make()
        else:
            self._insert_shifting(index, make())

        self._size += 1
        return Cursor(self, index)

    def _insert_shifting(self, index: int, value: T) -> None:
        """Place ``value`` at ``index`` < size, shifting the tail right by one slot."""
        traits = self._traits
        data = self._data

        if traits.nothrow_relocate:
            data[self._size] = traits.relocate(data[self._size - 1])
            for i in range(self._size - 1, index, -1):
                data[i] = traits.relocate(data[i - 1])
            data[index] = value
            return

        tail = self._size - index
        try:
            scratch = self._stage(index, tail)
        except BaseException:
            traits.destroy(value)
            raise
        self._vacate_range(data, index, tail, destroy=not traits.relocation_preferred)
        self._unstage(scratch, index + 1)
        data[index] = value

    def _grow_with(self, index: int, make: Callable[[], T]) -> None:
        """Reallocate to the next capacity with a new element at ``index``."""
        relocated = self._traits.relocation_preferred
        new_data: RawBuffer[T] = RawBuffer(self._next_capacity())

        try:
            new_data[index] = make()
        except BaseException:
            new_data.release()
            raise

        try:
            self._transfer_into(new_data, 0, 0, index)
        except BaseException:
            self._traits.destroy(new_data.vacate(index))
            new_data.release()
            logger.debug("growth_rolled_back", operation="insert", position=index, stage="prefix")
            raise

        try:
            self._transfer_into(new_data, index + 1, index, self._size - index)
        except BaseException:
            self._vacate_range(new_data, 0, index, destroy=not relocated)
            self._traits.destroy(new_data.vacate(index))
            new_data.release()
            logger.debug("growth_rolled_back", operation="insert", position=index, stage="suffix")
            raise

        self._adopt(new_data)

    def _next_capacity(self) -> int:
        return max(1, 2 * self.capacity)

    # ── Access ───────────────────────────────────────────────────

    def __getitem__(self, index: int) -> T:
        self._check_index(index, "read")
        return self._data[index]

    def __setitem__(self, index: int, value: T) -> None:
        self._check_index(index, "write")
        self._assign_at(index, value)

    def front(self) -> T:
        expect(self._size > 0, EmptyContainerError, "front of an empty array", operation="front")
        return self._data[0]

    def back(self) -> T:
        expect(self._size > 0, EmptyContainerError, "back of an empty array", operation="back")
        return self._data[self._size - 1]

    def begin(self) -> Cursor[T]:
        return Cursor(self, 0)

    def end(self) -> Cursor[T]:
        return Cursor(self, self._size)

    def __iter__(self) -> Iterator[T]:
        for i in range(self._size):
            yield self._data[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynamicArray):
            return NotImplemented
        if self._size != other._size:
            return False
        return all(a == b for a, b in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DynamicArray({list(self)!r}, capacity={self.capacity})"

    # ── Internals ────────────────────────────────────────────────

    def _check_index(self, index: int, operation: str) -> None:
        expect(
            0 <= index < self._size,
            IndexOutOfRangeError,
            "index {position} outside [0, {size})",
            operation=operation,
            position=index,
            size=self._size,
        )

    def _position(self, pos: int | Cursor[T], *, allow_end: bool, operation: str) -> int:
        if isinstance(pos, Cursor):
            expect(
                pos.array is self,
                ForeignCursorError,
                "cursor belongs to a different array",
                operation=operation,
            )
            index = pos.index
        else:
            index = operator.index(pos)

        upper = self._size if allow_end else self._size - 1
        expect(
            0 <= index <= upper,
            InvalidPositionError,
            "position {position} outside [0, {upper}]",
            operation=operation,
            position=index,
            size=self._size,
            upper=upper,
        )
        return index

    def _maker(self, value: T, move: bool) -> Callable[[], T]:
        traits = self._traits
        if move:
            return lambda: traits.relocate(value)
        return lambda: traits.copy_of(value)

    def _assign_at(self, index: int, value: T) -> None:
        replacement = self._traits.copy_of(value)
        previous = self._data[index]
        self._data[index] = replacement
        self._traits.destroy(previous)

    def _construct_range(
        self,
        dest: RawBuffer[T],
        start: int,
        count: int,
        make: Callable[[int], T],
        *,
        relocated: bool = False,
    ) -> None:
        """Fill ``dest[start:start+count]`` with ``make(i)``; unwind on failure."""
        built = 0
        try:
            for i in range(count):
                dest[start + i] = make(i)
                built += 1
        except BaseException:
            self._vacate_range(dest, start, built, destroy=not relocated)
            raise

    def _transfer_into(self, dest: RawBuffer[T], dest_start: int, src_start: int, count: int) -> None:
        """Relocate or copy live elements into ``dest``; the source is untouched."""
        traits = self._traits
        source = self._data
        self._construct_range(
            dest,
            dest_start,
            count,
            lambda i: traits.transfer(source[src_start + i]),
            relocated=traits.relocation_preferred,
        )

    def _vacate_range(self, buf: RawBuffer[T], start: int, count: int, *, destroy: bool) -> None:
        for i in range(start, start + count):
            value = buf.vacate(i)
            if destroy:
                self._traits.destroy(value)

    def _stage(self, src_start: int, count: int) -> RawBuffer[T]:
        """Transfer ``count`` live elements into a scratch buffer."""
        scratch: RawBuffer[T] = RawBuffer(count)
        try:
            self._transfer_into(scratch, 0, src_start, count)
        except BaseException:
            scratch.release()
            logger.debug("shift_rolled_back", position=src_start, count=count)
            raise
        return scratch

    def _unstage(self, scratch: RawBuffer[T], dest_start: int) -> None:
        for i in range(scratch.capacity):
            self._data[dest_start + i] = scratch.vacate(i)
        scratch.release()

    def _adopt(self, new_data: RawBuffer[T]) -> None:
        """Retire the old elements and swap ``new_data`` in."""
        old_capacity = self.capacity
        relocated = self._traits.relocation_preferred
        self._vacate_range(self._data, 0, self._size, destroy=not relocated)
        self._data.swap(new_data)
        new_data.release()
        logger.debug(
            "buffer_grown",
            old_capacity=old_capacity,
            new_capacity=self.capacity,
            size=self._size,
            strategy="relocate" if relocated else "copy",
        )


__all__ = ["DynamicArray"]
