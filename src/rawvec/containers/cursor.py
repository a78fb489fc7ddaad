"""Forward position markers over a DynamicArray.

A Cursor is an (array, index) pair. ``begin()`` and ``end()`` produce them,
``insert``/``emplace``/``erase`` return them. Cursors are not tracked by
the array: one taken before a capacity change, or before an insert/erase
at or ahead of its index, no longer refers to the element it did.
"""

from __future__ import annotations

from functools import total_ordering
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from rawvec.core.errors import ForeignCursorError

if TYPE_CHECKING:
    from rawvec.containers.dynamic_array import DynamicArray

T = TypeVar("T")


@total_ordering
class Cursor(Generic[T]):
    __slots__ = ("_array", "_index")

    def __init__(self, array: DynamicArray[T], index: int) -> None:
        self._array = array
        self._index = index

    @property
    def array(self) -> DynamicArray[T]:
        return self._array

    @property
    def index(self) -> int:
        return self._index

    @property
    def value(self) -> T:
        return self._array[self._index]

    def set(self, value: T) -> None:
        """Copy-assign ``value`` into the element under the cursor."""
        self._array[self._index] = value

    def next(self) -> Cursor[T]:
        return Cursor(self._array, self._index + 1)

    def __add__(self, steps: int) -> Cursor[T]:
        return Cursor(self._array, self._index + steps)

    def __sub__(self, other: Cursor[T]) -> int:
        self._same_array(other)
        return self._index - other._index

    def _same_array(self, other: Cursor[Any]) -> None:
        if other._array is not self._array:
            raise ForeignCursorError("cursors belong to different arrays")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return other._array is self._array and other._index == self._index

    def __lt__(self, other: Cursor[T]) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        self._same_array(other)
        return self._index < other._index

    def __hash__(self) -> int:
        return hash((id(self._array), self._index))

    def __repr__(self) -> str:
        return f"Cursor(index={self._index})"


__all__ = ["Cursor"]
