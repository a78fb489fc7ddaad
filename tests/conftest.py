"""
Shared pytest fixtures and configuration for rawvec tests.

This module provides:
- Settings isolation (each test starts from a fresh RawVecSettings with
  debug checks on)
- ``Item`` / ``Tracker``: element objects plus lifecycle hooks that count
  constructions, copies, relocations and destructions and can be armed to
  fail on a chosen call

Usage:
    def test_growth_rolls_back(tracker):
        arr = DynamicArray(traits=tracker.traits)
        tracker.fail("copy", after=1)
        ...
        assert tracker.alive == len(arr)
"""

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Ensure rawvec package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rawvec.containers import ElementTraits
from rawvec.core.settings import configure, reset_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if "unit" not in markers:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Reload settings from a clean environment with contract checks on."""
    for name in ("RAWVEC_DEBUG_CHECKS", "RAWVEC_MAX_CAPACITY", "RAWVEC_LOG_LEVEL", "RAWVEC_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    configure(debug_checks=True)
    yield
    reset_settings()


# =============================================================================
# Tracked Elements
# =============================================================================


class Boom(Exception):
    """Failure injected by Tracker."""


class Item:
    """Element with a value and a liveness flag."""

    def __init__(self, value: Any = 0):
        self.value = value
        self.alive = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.value == other.value

    def __repr__(self) -> str:
        return f"Item({self.value!r})"


class Tracker:
    """Lifecycle hooks for ``Item`` with counters and failure injection."""

    def __init__(self, *, nothrow_relocate: bool = True, copyable: bool = True):
        self.constructed = 0
        self.copied = 0
        self.relocated = 0
        self.destroyed = 0
        self.double_destroyed = 0
        self._fuses: dict[str, int] = {}
        self.traits = ElementTraits(
            factory=self.construct,
            copier=self.copy,
            relocator=self.relocate,
            destroyer=self.destroy,
            nothrow_relocate=nothrow_relocate,
            copyable=copyable,
        )

    @property
    def alive(self) -> int:
        return self.constructed + self.copied - self.destroyed

    def fail(self, hook: str, after: int = 0) -> None:
        """Make the ``after + 1``-th next call of ``hook`` raise Boom."""
        self._fuses[hook] = after

    def disarm(self) -> None:
        self._fuses.clear()

    def _tick(self, hook: str) -> None:
        if hook not in self._fuses:
            return
        if self._fuses[hook] == 0:
            del self._fuses[hook]
            raise Boom(hook)
        self._fuses[hook] -= 1

    def construct(self, value: Any = 0) -> Item:
        self._tick("construct")
        self.constructed += 1
        return Item(value)

    def copy(self, item: Item) -> Item:
        self._tick("copy")
        self.copied += 1
        return Item(item.value)

    def relocate(self, item: Item) -> Item:
        self._tick("relocate")
        self.relocated += 1
        return item

    def destroy(self, item: Item) -> None:
        if not item.alive:
            self.double_destroyed += 1
        item.alive = False
        self.destroyed += 1


@pytest.fixture
def tracker() -> Tracker:
    """Tracker with infallible relocation."""
    return Tracker()


@pytest.fixture
def make_tracker() -> Callable[..., Tracker]:
    """Factory for trackers with custom relocation/copy capabilities."""
    return Tracker


def values(array) -> list[Any]:
    """Element values of an array of Items."""
    return [item.value for item in array]


@pytest.fixture
def item_values() -> Callable[[Any], list[Any]]:
    return values
