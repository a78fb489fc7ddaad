"""
Element lifecycle hooks for containers built on RawBuffer.

Python objects have no constructors/destructors a container can invoke on
raw storage, so a container is told how to manage its elements through an
``ElementTraits`` value:

- ``factory``: value construction (``construct(*args)``) and default
  construction (``default()``)
- ``copier``: copy construction, ``copy.copy`` unless overridden
- ``relocator``: relocation, i.e. ownership transfer to a new slot. The
  default hands over the same object, which cannot fail.
- ``destroyer``: end-of-life hook, called once for every element the
  container destroys

``relocation_preferred`` decides how growth and shifts transfer existing
elements: relocate when relocation cannot fail (or copying is impossible),
copy otherwise. Copying leaves the originals intact until the new layout
is complete, so a failure part-way through can be undone.

Rollback rules: values produced by ``relocate`` are abandoned on rollback
(their state still belongs to the source slot); values produced by
``copy_of`` are destroyed.

Examples:
    >>> traits = ElementTraits(factory=list)
    >>> traits.default()
    []
    >>> traits.construct("ab")
    ['a', 'b']
    >>> traits.relocation_preferred
    True
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from rawvec.core.errors import ConfigError, MissingFactoryError

T = TypeVar("T")


def _handover(value: Any) -> Any:
    return value


def _forget(value: Any) -> None:
    return None


@dataclass(frozen=True)
class ElementTraits(Generic[T]):
    """How a container constructs, copies, relocates and destroys elements."""

    factory: Callable[..., T] | None = None
    copier: Callable[[T], T] = copy.copy
    relocator: Callable[[T], T] = _handover
    destroyer: Callable[[T], None] = _forget
    nothrow_relocate: bool = True
    copyable: bool = True

    @classmethod
    def deep(cls, factory: Callable[..., T] | None = None, **kwargs: Any) -> ElementTraits[T]:
        """Traits whose copies share no nested state with the original."""
        return cls(factory=factory, copier=copy.deepcopy, **kwargs)

    @property
    def relocation_preferred(self) -> bool:
        return self.nothrow_relocate or not self.copyable

    def construct(self, *args: Any, **kwargs: Any) -> T:
        if self.factory is None:
            raise MissingFactoryError("construct")
        return self.factory(*args, **kwargs)

    def default(self) -> T:
        if self.factory is None:
            raise MissingFactoryError("default construction")
        return self.factory()

    def copy_of(self, value: T) -> T:
        if not self.copyable:
            raise ConfigError("element type is not copyable", operation="copy")
        return self.copier(value)

    def relocate(self, value: T) -> T:
        return self.relocator(value)

    def destroy(self, value: T) -> None:
        self.destroyer(value)

    def transfer(self, value: T) -> T:
        """Relocate or copy ``value``, per ``relocation_preferred``."""
        if self.relocation_preferred:
            return self.relocate(value)
        return self.copy_of(value)


__all__ = ["ElementTraits"]
