"""
rawvec.core - shared infrastructure for the storage layer.

Modules:
    errors: Typed error hierarchy (AllocationError, ContractViolation, ...)
    settings: Environment-driven RawVecSettings and accessors
    logging: structlog configuration
    contracts: Debug-only precondition checks
"""

from rawvec.core.errors import (
    AllocationError,
    BufferCopyError,
    ConfigError,
    ContractViolation,
    EmptyContainerError,
    ErrorCategory,
    ErrorContext,
    ForeignCursorError,
    IndexOutOfRangeError,
    InvalidCapacityError,
    InvalidPositionError,
    LiveElementsError,
    MissingFactoryError,
    RawVecError,
    VacantSlotError,
    categorize_error,
    is_contract_violation,
)
from rawvec.core.logging import configure_logging, get_logger
from rawvec.core.settings import (
    RawVecSettings,
    configure,
    get_settings,
    override_settings,
    reset_settings,
)

__all__ = [
    # errors
    "AllocationError",
    "BufferCopyError",
    "ConfigError",
    "ContractViolation",
    "EmptyContainerError",
    "ErrorCategory",
    "ErrorContext",
    "ForeignCursorError",
    "IndexOutOfRangeError",
    "InvalidCapacityError",
    "InvalidPositionError",
    "LiveElementsError",
    "MissingFactoryError",
    "RawVecError",
    "VacantSlotError",
    "categorize_error",
    "is_contract_violation",
    # logging
    "configure_logging",
    "get_logger",
    # settings
    "RawVecSettings",
    "configure",
    "get_settings",
    "override_settings",
    "reset_settings",
]
