"""Runtime settings for rawvec.

The storage layer has two knobs that matter at runtime: whether contract
checks run (the Python counterpart of a debug build) and an optional
ceiling on how many slots a single RawBuffer may acquire.  Both are read
from the environment so a test run or a deployment can flip them without
code changes.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked when settings load
    - **Environment-driven:** Reads ``RAWVEC_*`` env vars and .env files
    - **Sensible defaults:** Checks follow ``__debug__`` (off under ``python -O``)

Features:
    - **RawVecSettings:** debug_checks, max_capacity, log_level, log_json
    - **get_settings():** Cached process-wide settings
    - **configure():** Replace the active settings (explicit object or overrides)
    - **override_settings():** Scoped override, restored on exit

Examples:
    >>> from rawvec.core.settings import override_settings
    >>> with override_settings(max_capacity=16):
    ...     ...  # RawBuffer(17) now raises AllocationError

Tags:
    settings, configuration, pydantic, environment, rawvec

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RawVecSettings(BaseSettings):
    """Settings shared by every RawBuffer and DynamicArray in the process.

    Fields
    ──────
    debug_checks : Check contracts (bounds, positions, empty pops)
    max_capacity : Largest slot count a single RawBuffer may acquire
    log_level    : Structlog log level
    log_json     : JSON log output; None auto-detects from the TTY
    """

    model_config = SettingsConfigDict(
        env_prefix="RAWVEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    # ── Contracts ────────────────────────────────────────────────
    debug_checks: bool = Field(
        default=__debug__,
        description="Check preconditions and raise ContractViolation subclasses",
    )

    # ── Allocation ───────────────────────────────────────────────
    max_capacity: int | None = Field(
        default=None,
        ge=0,
        description="Allocation ceiling in slots; None means interpreter limits only",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: LogLevel = "WARNING"
    log_json: bool | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


# ── Settings singleton ───────────────────────────────────────────

_active: RawVecSettings | None = None


def get_settings() -> RawVecSettings:
    """Cached settings, loaded from the environment once per process."""
    global _active
    if _active is None:
        _active = RawVecSettings()
    return _active


def configure(settings: RawVecSettings | None = None, **overrides: Any) -> RawVecSettings:
    """Replace the active settings.

    Args:
        settings: Settings object to install; defaults to the current one
        **overrides: Field values applied on top (validated by pydantic)

    Returns:
        The newly active settings
    """
    global _active
    base = settings or get_settings()
    if overrides:
        base = RawVecSettings.model_validate({**base.model_dump(), **overrides})
    _active = base
    return _active


def reset_settings() -> None:
    """Drop the cached settings so the next access reloads the environment."""
    global _active
    _active = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[RawVecSettings]:
    """Temporarily apply setting overrides.

    Example:
        with override_settings(debug_checks=False):
            array[10]  # unchecked
    """
    global _active
    previous = _active
    try:
        yield configure(**overrides)
    finally:
        _active = previous


__all__ = [
    "RawVecSettings",
    "get_settings",
    "configure",
    "reset_settings",
    "override_settings",
]
