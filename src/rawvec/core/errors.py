"""
Structured error types for rawvec.

Provides a small hierarchy of typed errors with metadata for categorizing
failures of the raw storage layer and the containers built on it.

Errors raised by rawvec fall into three groups:
- **Allocation:** raw storage for the requested capacity could not be
  provided (configured ceiling, interpreter MemoryError/OverflowError)
- **Contract violations:** programming errors (index out of range, pop on
  empty, release with live elements). Raised only when debug checks are on.
- **Configuration:** the container was asked to do something its element
  traits cannot support (default construction without a factory)

Element construction failures are NOT wrapped: whatever the element's
factory, copier or relocator raised reaches the caller unchanged, after the
failing operation has unwound its intermediate state.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure mode
    - **Familiar Bases:** Errors also subclass the builtin a caller would
      expect (MemoryError, IndexError, ValueError, TypeError)
    - **Rich Context:** Errors carry operation, position, size and capacity
    - **Error Chaining:** Interpreter errors are kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                         RawVecError                              │
        │               (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  AllocationError     ContractViolation       ConfigError         │
        │  (ALLOCATION,        (CONTRACT)              (CONFIG)            │
        │   MemoryError)            │                       │              │
        │                      IndexOutOfRangeError   MissingFactoryError  │
        │  BufferCopyError     EmptyContainerError                         │
        │  (INTERNAL,          InvalidPositionError                        │
        │   TypeError)         InvalidCapacityError                        │
        │                      LiveElementsError                           │
        │                      ForeignCursorError                          │
        │                      VacantSlotError                             │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = AllocationError("cannot reserve 10 slots", requested=10)
    >>> isinstance(error, MemoryError)
    True
    >>> error.context.requested
    10

    >>> err = IndexOutOfRangeError("index 5 out of range").with_context(size=3)
    >>> err.to_dict()["context"]
    {'size': 3}

Guardrails:
    ❌ DON'T: Wrap element hook exceptions in RawVecError
    ✅ DO: Unwind, then re-raise the original exception

    ❌ DON'T: Rely on contract violations being raised in production
    ✅ DO: Treat them as programming errors surfaced by debug checks

Tags:
    error-handling, exception-hierarchy, error-context, rawvec

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        ALLOCATION: Raw storage could not be acquired
        CONSTRUCTION: Element factory/copy/relocation failure (used by
            categorize_error for foreign exceptions raised by element hooks)
        CONTRACT: Caller broke a precondition
        CONFIG: Traits or settings cannot support the request
        INTERNAL: Misuse of internal machinery (e.g. copying a RawBuffer)
        UNKNOWN: Uncategorized errors
    """

    ALLOCATION = "ALLOCATION"
    CONSTRUCTION = "CONSTRUCTION"
    CONTRACT = "CONTRACT"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a RawVecError.

    Attributes:
        operation: Name of the failing operation (``reserve``, ``insert``, ...)
        position: Index or offset the operation was given
        size: Live element count at the time of failure
        capacity: Capacity at the time of failure
        requested: Requested capacity or size
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    position: int | None = None
    size: int | None = None
    capacity: int | None = None
    requested: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "position", "size", "capacity", "requested"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RawVecError(Exception):
    """
    Base exception for all rawvec errors.

    Every RawVecError carries:
    - **category:** ErrorCategory for classification
    - **context:** ErrorContext with operation/position/size metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category``. Context fields can be passed as
    keyword arguments directly (``IndexOutOfRangeError("...", position=4)``)
    or added later through the fluent ``with_context``.

    Examples:
        >>> error = RawVecError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = RawVecError("Out of slots", category=ErrorCategory.ALLOCATION)
        >>> error.to_dict()["category"]
        'ALLOCATION'
    """

    # Default category for this error type
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
        **context_fields: Any,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if context_fields:
            self.with_context(**context_fields)

        # Chain the cause if provided
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RawVecError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidPositionError("bad position").with_context(
                operation="insert", position=7, size=3
            )
        """
        for key, value in kwargs.items():
            if key == "metadata":
                self.context.metadata.update(value)
            elif hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# ALLOCATION ERRORS
# =============================================================================


class AllocationError(RawVecError, MemoryError):
    """
    Raw storage for the requested capacity could not be acquired.

    Raised by RawBuffer before any state changes, so a container that
    fails to grow is left exactly as it was. Subclasses MemoryError so
    callers handling interpreter memory exhaustion catch it too.
    """

    default_category = ErrorCategory.ALLOCATION


# =============================================================================
# CONTRACT VIOLATIONS
# =============================================================================


class ContractViolation(RawVecError):
    """
    A precondition of a public operation was broken.

    These are programming errors. They are detected only when
    ``RawVecSettings.debug_checks`` is enabled; with checks off the
    behaviour of a violating call is unspecified.
    """

    default_category = ErrorCategory.CONTRACT


class IndexOutOfRangeError(ContractViolation, IndexError):
    """Element index outside ``[0, size)`` or slot offset outside the buffer."""

    pass


class EmptyContainerError(ContractViolation, IndexError):
    """Operation requires at least one live element."""

    pass


class InvalidPositionError(ContractViolation, IndexError):
    """Insert/erase position outside its valid range."""

    pass


class InvalidCapacityError(ContractViolation, ValueError):
    """Negative capacity or size requested."""

    pass


class LiveElementsError(ContractViolation):
    """Raw storage released while it still holds live elements."""

    pass


class ForeignCursorError(ContractViolation, ValueError):
    """Cursor belongs to a different container."""

    pass


class VacantSlotError(ContractViolation, LookupError):
    """Raw slot read where no live element has been constructed."""

    pass


# =============================================================================
# OWNERSHIP / CONFIGURATION ERRORS
# =============================================================================


class BufferCopyError(RawVecError, TypeError):
    """RawBuffer ownership is exclusive; it cannot be copied or pickled."""

    default_category = ErrorCategory.INTERNAL


class ConfigError(RawVecError):
    """Traits or settings cannot support the requested operation."""

    default_category = ErrorCategory.CONFIG


class MissingFactoryError(ConfigError):
    """Element traits have no factory, so elements cannot be constructed."""

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(
            message or f"{operation} needs an element factory; pass factory= or traits=",
            operation=operation,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_contract_violation(error: BaseException) -> bool:
    """Check if an error reports a broken precondition."""
    return isinstance(error, ContractViolation)


def categorize_error(error: BaseException) -> ErrorCategory:
    """
    Categorize any exception into an ErrorCategory.

    RawVecError instances report their own category. Interpreter memory
    errors map to ALLOCATION; any other foreign exception reaching the
    caller of a container operation was raised by an element hook, so it
    maps to CONSTRUCTION.
    """
    if isinstance(error, RawVecError):
        return error.category

    if isinstance(error, (MemoryError, OverflowError)):
        return ErrorCategory.ALLOCATION

    if isinstance(error, Exception):
        return ErrorCategory.CONSTRUCTION

    return ErrorCategory.UNKNOWN


__all__ = [
    # Enums and context
    "ErrorCategory",
    "ErrorContext",
    # Base
    "RawVecError",
    # Allocation
    "AllocationError",
    # Contract
    "ContractViolation",
    "IndexOutOfRangeError",
    "EmptyContainerError",
    "InvalidPositionError",
    "InvalidCapacityError",
    "LiveElementsError",
    "ForeignCursorError",
    "VacantSlotError",
    # Ownership / config
    "BufferCopyError",
    "ConfigError",
    "MissingFactoryError",
    # Utilities
    "is_contract_violation",
    "categorize_error",
]
