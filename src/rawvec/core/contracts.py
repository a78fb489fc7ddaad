"""Debug-only precondition checks.

Contract checks play the role of assertions in a debug build: when
``RawVecSettings.debug_checks`` is on, a broken precondition raises the
given ContractViolation subclass; when it is off, the check is skipped and
the call's behaviour is unspecified.

``message`` is a ``str.format`` template filled from the context keywords.
It is only rendered when the check fails.
"""

from __future__ import annotations

from typing import Any

from rawvec.core.errors import ContractViolation
from rawvec.core.settings import get_settings


def checks_enabled() -> bool:
    return get_settings().debug_checks


def expect(
    condition: bool,
    error: type[ContractViolation],
    message: str,
    **context: Any,
) -> None:
    """Raise ``error(message.format(**context), **context)`` if checks are on and ``condition`` is false."""
    if condition or not checks_enabled():
        return
    raise error(message.format(**context), **context)


__all__ = ["checks_enabled", "expect"]
