"""Process-wide debug switch.

With debug mode on, every gate application verifies the norm of the
resulting state. An anneal applies tens of thousands of gates, so this is
slow and meant for hunting numerical drift.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "AQCSIM_DEBUG"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE_VALUES


_debug_enabled: bool = _env_flag(_DEBUG_ENV_VAR)


def is_debug_enabled() -> bool:
    """True when gate applications check the state norm (``AQCSIM_DEBUG``)."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Switch debug mode for the duration of a block, restoring the previous
    value on exit.

    Example
    -------
    >>> with debug_context(True):
    ...     run_adiabatic(reference_problem(), AnnealConfig(step_size=0.1))
    """
    previous = is_debug_enabled()
    set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)
