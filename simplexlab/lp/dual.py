"""
Dual simplex method and post-optimal re-optimization.

The dual simplex starts from a tableau that is dual feasible (no negative
objective-row coefficient) but primal infeasible (some negative RHS) and
restores primal feasibility while keeping the objective row dual feasible.
This is the natural way to re-optimize after the right-hand side changes or a
new constraint is added to an already optimal tableau.

Example:
    >>> from simplexlab.lp import Constraint, LinearProgram, solve_with_steps
    >>> from simplexlab.lp.dual import reoptimize_with_constraint
    >>> lp = LinearProgram(
    ...     objective=(3.0, 2.0),
    ...     constraints=(
    ...         Constraint((1.0, 1.0), "<=", 4.0),
    ...         Constraint((2.0, 1.0), "<=", 6.0),
    ...     ),
    ... )
    >>> optimal = solve_with_steps(lp)[-1].tableau
    >>> steps = reoptimize_with_constraint(optimal, (1.0, 0.0), ">=", 3.0)
    >>> steps[-1].status.value, steps[-1].tableau.objective_value
    ('optimal', 9.0)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .analysis import basis_inverse
from .core import Operator, ShapeError
from .tableau import (
    IterationBudget,
    PhaseTwoTableau,
    SimplexStep,
    StepStatus,
    Tableau,
    TableauSource,
    pivot_tableau,
)
from ..config import SolverConfig
from ..diagnostics import assert_canonical, assert_dual_feasible, is_debug_enabled, is_dual_feasible
from ..logging import get_logger

_logger = get_logger("lp.dual")


@dataclass(frozen=True)
class DualSimplexDiagnosis:
    """
    Whether a tableau should be handed to the dual simplex.

    ``negative_rows`` lists the 0-based constraint rows whose RHS is negative.
    """

    needed: bool
    reason: str
    negative_rows: Tuple[int, ...]


@dataclass(frozen=True)
class RHSChange:
    """New right-hand side for one standardized (``<=``/``=``) constraint."""

    constraint_index: int
    new_value: float


def _negative_rows(tableau: Tableau, tol: float) -> Tuple[int, ...]:
    return tuple(i for i, value in enumerate(tableau.rhs) if value < -tol)


def is_dual_simplex_candidate(tableau: Tableau, tol: float = 1e-9) -> bool:
    """True if ``tableau`` is dual feasible and at least one RHS is below ``-tol``."""
    return is_dual_feasible(tableau, tol=tol) and bool(_negative_rows(tableau, tol))


def needs_dual_simplex(tableau: Tableau, tol: float = 1e-9) -> DualSimplexDiagnosis:
    negative = _negative_rows(tableau, tol)
    if not negative:
        return DualSimplexDiagnosis(
            needed=False,
            reason="Every right-hand side is non-negative; the tableau is primal feasible.",
            negative_rows=(),
        )
    rows = ", ".join(str(i + 1) for i in negative)
    if not is_dual_feasible(tableau, tol=tol):
        return DualSimplexDiagnosis(
            needed=False,
            reason=(
                f"Rows {rows} have a negative right-hand side, but the objective row is "
                "not dual feasible; the dual simplex does not apply."
            ),
            negative_rows=negative,
        )
    return DualSimplexDiagnosis(
        needed=True,
        reason=(
            f"Rows {rows} have a negative right-hand side while the objective row is "
            "dual feasible: the dual simplex can restore feasibility."
        ),
        negative_rows=negative,
    )


def _leaving_row(matrix: np.ndarray, tol: float) -> Optional[int]:
    best: Optional[int] = None
    for r in range(1, matrix.shape[0]):
        value = matrix[r, -1]
        if value < -tol and (best is None or value < matrix[best, -1]):
            best = r
    return best


def _entering_column(
    matrix: np.ndarray, row: int, nonbasic: Iterable[int], tol: float
) -> Optional[int]:
    best: Optional[int] = None
    best_ratio = np.inf
    for j in sorted(nonbasic):
        coef = matrix[row, j]
        if coef >= -tol:
            continue
        ratio = matrix[0, j] / abs(coef)
        if best is None or ratio < best_ratio - tol:
            best, best_ratio = j, ratio
    return best


def solve_dual_simplex(
    tableau: Tableau,
    config: Optional[SolverConfig] = None,
) -> List[SimplexStep]:
    """
    Run the dual simplex method from ``tableau``.

    The leaving row is the one with the most negative RHS (lowest row on
    ties). The entering column has a negative entry in that row and minimizes
    ``objective coefficient / |entry|`` (lowest column on ties), which keeps the
    objective row non-negative.

    Returns:
        Steps starting with ``dual_start`` followed by one ``dual_iteration``
        per pivot and a terminal ``optimal`` or ``infeasible`` step.

    Raises:
        ValueError: If ``tableau`` is not dual feasible.
        IterationLimitError: If more than ``config.max_iterations`` pivots are needed.
    """
    config = config or SolverConfig()
    if not is_dual_feasible(tableau, tol=config.tol):
        raise ValueError(
            "The dual simplex requires a dual-feasible tableau "
            "(no negative objective-row coefficient)."
        )
    counter = IterationBudget(config.max_iterations)
    names = tableau.variable_names
    row = _leaving_row(tableau.matrix, config.tol)
    if row is None:
        start_text = "The tableau is already primal feasible."
        leaving = None
    else:
        leaving = tableau.basic[row - 1]
        start_text = (
            f"Dual simplex starts: {names[leaving]} = {tableau.matrix[row, -1]:.6g} is the "
            "most negative basic variable and leaves first."
        )
    steps = [
        SimplexStep(
            tableau=tableau,
            status=StepStatus.DUAL_START,
            explanation=start_text,
            leaving=leaving,
            leaving_row=row,
        )
    ]

    while row is not None:
        col = _entering_column(tableau.matrix, row, tableau.nonbasic, config.tol)
        leaving = tableau.basic[row - 1]
        if col is None:
            steps.append(
                SimplexStep(
                    tableau=tableau,
                    status=StepStatus.INFEASIBLE,
                    explanation=(
                        f"Row {row} ({names[leaving]}) has a negative right-hand side but "
                        "no negative entry: the problem has no feasible solution."
                    ),
                    leaving=leaving,
                    leaving_row=row,
                )
            )
            _logger.info("Dual simplex proved infeasibility at row %d", row)
            return steps
        counter.tick()
        explanation = (
            f"{names[leaving]} leaves (RHS {tableau.matrix[row, -1]:.6g}) and {names[col]} "
            f"enters by the dual ratio test (pivot {tableau.matrix[row, col]:.4g})."
        )
        tableau = pivot_tableau(tableau, row, col)
        if is_debug_enabled():
            assert_canonical(tableau)
            assert_dual_feasible(tableau, tol=max(config.tol, 1e-9) * 1e3)
        _logger.debug("Dual pivot %d: %s", counter.pivots, explanation)
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.DUAL_ITERATION,
                explanation=explanation,
                entering=col,
                leaving=leaving,
                leaving_row=row,
                pivot=(row, col),
            )
        )
        row = _leaving_row(tableau.matrix, config.tol)

    steps.append(
        SimplexStep(
            tableau=tableau,
            status=StepStatus.OPTIMAL,
            explanation=(
                "Every right-hand side is non-negative again: the tableau is optimal with "
                f"objective value {tableau.objective_value:.6g}."
            ),
        )
    )
    _logger.info("Dual simplex optimum %.6g", tableau.objective_value)
    return steps


def _require_source(tableau: Tableau) -> TableauSource:
    if not isinstance(tableau, PhaseTwoTableau):
        raise ValueError("Re-optimization needs a Phase-II tableau")
    if tableau.source is None:
        raise ValueError("Tableau carries no source data; it cannot be re-optimized")
    return tableau.source


def apply_rhs_changes(tableau: Tableau, changes: Sequence[RHSChange]) -> PhaseTwoTableau:
    """
    Replace right-hand sides and recompute ``B^{-1} b`` for the current basis.

    The objective row is unchanged, so an optimal tableau stays dual feasible;
    only the RHS column (and the objective value) move.

    Raises:
        ValueError: If the tableau has no source data, a constraint index is
            unknown, or the basis is singular.
    """
    source = _require_source(tableau)
    b = np.array(source.b_vector, dtype=float)
    for change in changes:
        row = source.row_of(change.constraint_index)
        b[row] = source.row_signs[row] * float(change.new_value)
    inverse = basis_inverse(tableau)
    rhs = inverse @ b
    matrix = np.array(tableau.matrix, dtype=float)
    matrix[1:, -1] = rhs
    matrix[0, -1] = float(source.costs[list(tableau.basic)] @ rhs)
    return replace(tableau, matrix=matrix, source=replace(source, b_vector=b))


def reoptimize(
    tableau: Tableau,
    changes: Sequence[RHSChange],
    config: Optional[SolverConfig] = None,
) -> List[SimplexStep]:
    """Apply ``changes`` to an optimal tableau and restore feasibility with the dual simplex."""
    modified = apply_rhs_changes(tableau, changes)
    _logger.debug(
        "Re-optimizing after %d RHS change(s); negative rows: %s",
        len(changes),
        list(_negative_rows(modified, (config or SolverConfig()).tol)),
    )
    return solve_dual_simplex(modified, config)


def _fresh_name(names: Sequence[str], start: int) -> str:
    k = start
    while f"s{k}" in names:
        k += 1
    return f"s{k}"


def add_constraint(
    tableau: Tableau,
    coefficients: Sequence[float],
    operator: "Operator | str",
    rhs: float,
) -> PhaseTwoTableau:
    """
    Append a ``<=`` or ``>=`` constraint to an optimal Phase-II tableau.

    ``coefficients`` refer to the tableau columns (trailing columns may be
    omitted). A ``>=`` row is multiplied by -1, a new slack column becomes its
    basic variable and the row is rewritten in terms of the current basis. The
    objective row is untouched, so the result is dual feasible whenever the
    input was, and a violated constraint shows up as a negative RHS.

    Raises:
        ValueError: For an ``=`` constraint or a tableau that is not Phase II.
        ShapeError: If more coefficients than columns are given.
    """
    if not isinstance(tableau, PhaseTwoTableau):
        raise ValueError("Constraints can only be added to a Phase-II tableau")
    op = Operator.parse(operator)
    if op is Operator.EQ:
        raise ValueError("Only <= and >= constraints can be added to a tableau")
    n, m = tableau.num_columns, tableau.num_rows
    given = np.asarray(coefficients, dtype=float).reshape(-1)
    if given.shape[0] > n:
        raise ShapeError(f"Got {given.shape[0]} coefficients for a tableau with {n} columns")
    row = np.zeros(n + 2)
    row[: given.shape[0]] = given
    row[n + 1] = float(rhs)
    if op is Operator.GE:
        row = -row
    row[n] = 1.0
    raw_row = row.copy()

    matrix = np.zeros((m + 2, n + 2))
    matrix[: m + 1, :n] = tableau.matrix[:, :n]
    matrix[: m + 1, n + 1] = tableau.matrix[:, n]
    for i, j in enumerate(tableau.basic, start=1):
        factor = row[j]
        if factor != 0.0:
            row = row - factor * matrix[i]
    for j in tableau.basic:
        row[j] = 0.0
    matrix[m + 1] = row

    name = _fresh_name(tableau.variable_names, m + 1)
    source = tableau.source
    if source is not None:
        a_matrix = np.zeros((m + 1, n + 1))
        a_matrix[:m, :n] = source.a_matrix
        a_matrix[m] = raw_row[: n + 1]
        source = TableauSource(
            a_matrix=a_matrix,
            b_vector=np.append(source.b_vector, raw_row[n + 1]),
            costs=np.append(source.costs, 0.0),
            row_signs=source.row_signs + (1,),
            constraint_ids=source.constraint_ids + (max(source.constraint_ids, default=-1) + 1,),
        )
    _logger.debug("Added constraint with slack %s; new RHS %.6g", name, row[-1])
    return PhaseTwoTableau(
        matrix=matrix,
        basic=tableau.basic + (n,),
        nonbasic=tableau.nonbasic,
        variable_names=tableau.variable_names + (name,),
        maximize=tableau.maximize,
        objective_constant=tableau.objective_constant,
        source=source,
    )


def reoptimize_with_constraint(
    tableau: Tableau,
    coefficients: Sequence[float],
    operator: "Operator | str",
    rhs: float,
    config: Optional[SolverConfig] = None,
) -> List[SimplexStep]:
    """Add a constraint to an optimal tableau and re-optimize with the dual simplex."""
    return solve_dual_simplex(add_constraint(tableau, coefficients, operator, rhs), config)


__all__ = [
    "DualSimplexDiagnosis",
    "RHSChange",
    "is_dual_simplex_candidate",
    "needs_dual_simplex",
    "solve_dual_simplex",
    "apply_rhs_changes",
    "reoptimize",
    "add_constraint",
    "reoptimize_with_constraint",
]
