"""
Linear and integer programming engine.

This subpackage converts linear programs to standard form, solves them with
the two-phase tableau simplex method, re-optimizes with the dual simplex,
derives duals and runs branch-and-bound for integer restrictions. Every solver
returns a replayable list of immutable steps next to its answer.

Modules are NumPy-only; :mod:`simplexlab.lp.reference` additionally wraps
SciPy's HiGHS solver when SciPy is installed.
"""

from . import analysis, catalog, core, dual, duality, integer, linalg, primal, reference
from . import standard_form, tableau
from .analysis import (
    basic_solution,
    basis_inverse,
    complementary_slackness,
    is_complementary,
    shadow_prices,
)
from .catalog import example_problems, integer_examples
from .core import (
    Constraint,
    IterationLimitError,
    LinearProgram,
    Operator,
    OptimizeResult,
    ShapeError,
    Status,
    VariableSign,
)
from .dual import (
    DualSimplexDiagnosis,
    RHSChange,
    add_constraint,
    apply_rhs_changes,
    is_dual_simplex_candidate,
    needs_dual_simplex,
    reoptimize,
    reoptimize_with_constraint,
    solve_dual_simplex,
)
from .duality import DualityResult, convert_to_dual, format_linear_program
from .integer import (
    BranchAndBoundResult,
    BranchAndBoundTree,
    BranchNode,
    BranchStep,
    NodeStatus,
    branch_and_bound,
)
from .linalg import (
    BasicFeasibility,
    BasisMatrices,
    check_basic_feasibility,
    extract_basis_matrices,
    extract_matrix_form,
    extract_submatrix,
    format_matrix,
    identity,
    invert,
    multiply,
    multiply_vector,
    reconstruct_tableau,
    transpose,
)
from .primal import simplex, solve_standard, solve_with_steps
from .reference import linprog_reference
from .standard_form import StandardFormResult, VariableMapping, is_standard, standardize
from .tableau import (
    PhaseOneTableau,
    PhaseTwoTableau,
    SimplexStep,
    StepStatus,
    Tableau,
    TableauSource,
)

__all__ = [
    "analysis",
    "catalog",
    "core",
    "dual",
    "duality",
    "integer",
    "linalg",
    "primal",
    "reference",
    "standard_form",
    "tableau",
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
    "Tableau",
    "PhaseOneTableau",
    "PhaseTwoTableau",
    "TableauSource",
    "SimplexStep",
    # Standard form
    "standardize",
    "is_standard",
    "StandardFormResult",
    "VariableMapping",
    # Primal simplex
    "simplex",
    "solve_standard",
    "solve_with_steps",
    # Dual simplex
    "DualSimplexDiagnosis",
    "RHSChange",
    "is_dual_simplex_candidate",
    "needs_dual_simplex",
    "solve_dual_simplex",
    "apply_rhs_changes",
    "reoptimize",
    "add_constraint",
    "reoptimize_with_constraint",
    # Duality
    "DualityResult",
    "convert_to_dual",
    "format_linear_program",
    # Branch-and-bound
    "NodeStatus",
    "BranchNode",
    "BranchAndBoundTree",
    "BranchStep",
    "BranchAndBoundResult",
    "branch_and_bound",
    # Linear algebra
    "multiply",
    "multiply_vector",
    "identity",
    "transpose",
    "format_matrix",
    "invert",
    "BasisMatrices",
    "extract_basis_matrices",
    "BasicFeasibility",
    "check_basic_feasibility",
    "extract_matrix_form",
    "extract_submatrix",
    "reconstruct_tableau",
    # Analysis
    "basic_solution",
    "basis_inverse",
    "shadow_prices",
    "complementary_slackness",
    "is_complementary",
    # Catalog and reference
    "example_problems",
    "integer_examples",
    "linprog_reference",
]
