"""Tests for DynamicArray construction, assignment, swap and destruction."""

import copy

import pytest

from conftest import Boom, Item, Tracker
from rawvec.containers import DynamicArray, ElementTraits
from rawvec.core.errors import InvalidCapacityError, MissingFactoryError


def filled(tracker: Tracker, *vals, reserve: int = 0) -> DynamicArray:
    arr = DynamicArray(traits=tracker.traits)
    arr.reserve(reserve)
    for v in vals:
        arr.emplace_back(v)
    return arr


class TestConstruction:
    def test_default_is_empty(self):
        arr = DynamicArray()
        assert len(arr) == 0
        assert arr.size == 0
        assert arr.capacity == 0
        assert arr.empty
        assert list(arr) == []

    def test_sized_default_constructs(self):
        arr = DynamicArray(3, factory=int)
        assert list(arr) == [0, 0, 0]
        assert arr.capacity == 3

    def test_sized_elements_are_distinct(self):
        arr = DynamicArray(2, factory=list)
        arr[0].append(1)
        assert list(arr) == [[1], []]

    def test_sized_without_factory(self):
        with pytest.raises(MissingFactoryError):
            DynamicArray(2)

    def test_negative_size(self):
        with pytest.raises(InvalidCapacityError):
            DynamicArray(-1, factory=int)

    def test_sized_failure_destroys_constructed(self, tracker):
        tracker.fail("construct", after=2)
        with pytest.raises(Boom):
            DynamicArray(5, traits=tracker.traits)
        assert tracker.constructed == 2
        assert tracker.alive == 0
        assert tracker.double_destroyed == 0

    def test_factory_overrides_traits_factory(self, tracker):
        arr = DynamicArray(1, factory=lambda: Item("x"), traits=tracker.traits)
        assert arr[0].value == "x"
        assert arr.traits.destroyer == tracker.destroy


class TestCopyConstruction:
    def test_copy_of_copies_elements(self, tracker, item_values):
        src = filled(tracker, 1, 2, 3, reserve=8)
        dup = DynamicArray.copy_of(src)
        assert item_values(dup) == [1, 2, 3]
        assert dup.capacity == 3
        assert tracker.copied == 3
        assert all(a is not b for a, b in zip(src, dup))

    def test_copies_are_independent(self):
        src = DynamicArray(factory=list)
        src.push_back([1])
        src.push_back([2])
        dup = src.copy()

        dup[0].append("dup")
        src.push_back([3])
        src[1].append("src")

        assert list(dup) == [[1, "dup"], [2]]
        assert list(src) == [[1], [2, "src"], [3]]

    def test_copy_of_empty(self):
        dup = DynamicArray.copy_of(DynamicArray())
        assert len(dup) == 0
        assert dup.capacity == 0

    def test_copy_failure_leaves_nothing_behind(self, tracker):
        src = filled(tracker, 1, 2, 3)
        tracker.fail("copy", after=1)
        with pytest.raises(Boom):
            DynamicArray.copy_of(src)
        assert tracker.alive == 3
        assert tracker.double_destroyed == 0

    def test_copy_module(self):
        src = DynamicArray(factory=list)
        src.push_back([[1]])
        shallow = copy.copy(src)
        deep = copy.deepcopy(src)

        src[0][0].append(2)
        assert shallow[0][0] == [1, 2]
        assert deep[0][0] == [1]
        assert deep.traits is src.traits

    def test_deepcopy_self_containing(self):
        src = DynamicArray(factory=list)
        src.push_back(src, move=True)
        src.push_back([1])
        deep = copy.deepcopy(src)

        assert deep is not src
        assert len(deep) == 2
        assert deep[0] is deep
        assert deep[1] == [1] and deep[1] is not src[1]
        assert deep.traits is src.traits

    def test_deepcopy_shared_array_copied_once(self):
        inner = DynamicArray(factory=int)
        inner.push_back(1)
        deep = copy.deepcopy([inner, inner])
        assert deep[0] is deep[1]
        assert deep[0] is not inner

    def test_deep_traits(self):
        src = DynamicArray(traits=ElementTraits.deep(list))
        src.push_back([[1]])
        dup = src.copy()
        src[0][0].append(2)
        assert dup[0] == [[1]]


class TestMoveConstruction:
    def test_moved_from_takes_elements(self, tracker):
        src = filled(tracker, 1, 2)
        originals = list(src)
        copies_before = tracker.copied

        moved = DynamicArray.moved_from(src)

        assert list(moved) == originals
        assert all(a is b for a, b in zip(moved, originals))
        assert tracker.copied == copies_before
        assert len(src) == 0
        assert src.capacity == 0

    def test_source_stays_usable(self, tracker, item_values):
        src = filled(tracker, 1)
        DynamicArray.moved_from(src)
        src.emplace_back(9)
        assert item_values(src) == [9]


class TestCopyAssignment:
    def test_assign_into_smaller_capacity(self, tracker, item_values):
        a = filled(tracker, 1)
        b = filled(tracker, 4, 5, 6)
        a.assign(b)
        assert item_values(a) == [4, 5, 6]
        assert a.capacity == 3
        assert item_values(b) == [4, 5, 6]
        assert tracker.alive == 6

    def test_assign_swap_failure_leaves_target_untouched(self, tracker, item_values):
        a = filled(tracker, 1)
        b = filled(tracker, 4, 5, 6)
        capacity = a.capacity
        tracker.fail("copy", after=2)
        with pytest.raises(Boom):
            a.assign(b)
        assert item_values(a) == [1]
        assert a.capacity == capacity
        assert tracker.alive == 4

    def test_assign_shorter_in_place(self, tracker, item_values):
        a = filled(tracker, 1, 2, 3)
        b = filled(tracker, 7)
        a.assign(b)
        assert item_values(a) == [7]
        assert a.capacity == 4
        assert tracker.alive == 2
        assert tracker.double_destroyed == 0

    def test_assign_longer_in_place(self, tracker, item_values):
        a = filled(tracker, 1, reserve=8)
        b = filled(tracker, 4, 5, 6)
        a.assign(b)
        assert item_values(a) == [4, 5, 6]
        assert a.capacity == 8
        assert tracker.alive == 6

    def test_assign_keeps_destination_traits(self, tracker, make_tracker):
        other = make_tracker()
        a = filled(tracker, 1, 2)
        b = filled(other, 3)
        a.assign(b)
        assert a.traits is tracker.traits

    def test_self_assignment(self, tracker, item_values):
        a = filled(tracker, 1, 2)
        copies = tracker.copied
        assert a.assign(a) is a
        assert item_values(a) == [1, 2]
        assert tracker.copied == copies


class TestMoveAssignment:
    def test_move_assign(self, tracker, item_values):
        a = filled(tracker, 1, 2)
        b = filled(tracker, 3, 4, 5)
        moved = list(b)
        a.move_assign(b)
        assert list(a) == moved
        assert len(b) == 0
        assert b.capacity == 0
        assert tracker.alive == 3
        assert tracker.copied == 0

    def test_self_move_assignment(self, tracker, item_values):
        a = filled(tracker, 1, 2)
        assert a.move_assign(a) is a
        assert item_values(a) == [1, 2]
        assert tracker.destroyed == 0


class TestSwap:
    def test_swap_exchanges(self, tracker, make_tracker, item_values):
        other = make_tracker()
        a = filled(tracker, 1)
        b = filled(other, 2, 3)
        a.swap(b)
        assert item_values(a) == [2, 3]
        assert item_values(b) == [1]
        assert a.traits is other.traits
        assert b.traits is tracker.traits

    def test_swap_twice_is_identity(self, tracker, item_values):
        a = filled(tracker, 1, 2, 3)
        b = filled(tracker)
        cap_a, cap_b = a.capacity, b.capacity
        a.swap(b)
        a.swap(b)
        assert item_values(a) == [1, 2, 3]
        assert (a.capacity, b.capacity) == (cap_a, cap_b)
        assert len(b) == 0


class TestDestruction:
    def test_destroy(self, tracker):
        arr = filled(tracker, 1, 2, 3)
        arr.destroy()
        assert tracker.alive == 0
        assert len(arr) == 0
        assert arr.capacity == 0

    def test_destroy_is_idempotent(self, tracker):
        arr = filled(tracker, 1)
        arr.destroy()
        arr.destroy()
        assert tracker.destroyed == 1

    def test_context_manager(self, tracker):
        with filled(tracker, 1, 2) as arr:
            assert len(arr) == 2
        assert tracker.alive == 0

    def test_clear_keeps_capacity(self, tracker):
        arr = filled(tracker, 1, 2, 3)
        arr.clear()
        assert len(arr) == 0
        assert arr.capacity == 4
        assert tracker.alive == 0
