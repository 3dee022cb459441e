"""Simplex Lab - a step-by-step linear and integer programming engine."""

__version__ = "0.1.0"

from .config import SolverConfig, default_config

# Diagnostics
from .diagnostics import (
    assert_canonical,
    assert_dual_feasible,
    debug_context,
    is_canonical,
    is_debug_enabled,
    is_dual_feasible,
    is_primal_feasible,
    set_debug_enabled,
)

# Linear programming engine
from .lp import (
    Constraint,
    IterationLimitError,
    LinearProgram,
    Operator,
    OptimizeResult,
    RHSChange,
    ShapeError,
    SimplexStep,
    Status,
    StepStatus,
    VariableSign,
    add_constraint,
    branch_and_bound,
    convert_to_dual,
    format_linear_program,
    needs_dual_simplex,
    reoptimize,
    shadow_prices,
    simplex,
    solve_dual_simplex,
    solve_with_steps,
    standardize,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

__all__ = [
    "__version__",
    # Configuration
    "SolverConfig",
    "default_config",
    # Core types
    "Status",
    "Operator",
    "VariableSign",
    "Constraint",
    "LinearProgram",
    "OptimizeResult",
    "ShapeError",
    "IterationLimitError",
    "StepStatus",
    "SimplexStep",
    "RHSChange",
    # Solvers
    "standardize",
    "simplex",
    "solve_with_steps",
    "solve_dual_simplex",
    "needs_dual_simplex",
    "reoptimize",
    "add_constraint",
    "convert_to_dual",
    "format_linear_program",
    "branch_and_bound",
    "shadow_prices",
    # Diagnostics
    "is_canonical",
    "assert_canonical",
    "is_primal_feasible",
    "is_dual_feasible",
    "assert_dual_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
