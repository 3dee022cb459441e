"""Diagnostics and debugging utilities for Simplex Lab."""

from .core import (
    assert_canonical,
    assert_dual_feasible,
    is_canonical,
    is_dual_feasible,
    is_primal_feasible,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "is_canonical",
    "assert_canonical",
    "is_primal_feasible",
    "is_dual_feasible",
    "assert_dual_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
