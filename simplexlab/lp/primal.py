"""
Two-phase primal simplex method on a dense tableau.

The solver follows the textbook presentation of Hillier & Lieberman (Chapter 4)
rather than the revised method: every pivot rewrites the whole tableau, and
every intermediate tableau is recorded as a :class:`SimplexStep` so the solve
can be replayed.

Tableau construction works on a standardized problem (see
:func:`simplexlab.lp.standard_form.standardize`):

* every ``<=`` row receives a slack column;
* rows whose RHS is negative are multiplied by -1 (their slack coefficient
  becomes -1) and need an artificial variable, as do ``=`` rows;
* with ``force_phase_one`` every row receives an artificial variable.

If artificial variables exist, Phase I maximizes ``-sum(a)``. A positive
optimum ``w`` proves infeasibility. Otherwise the artificial columns are
dropped and Phase II starts from the feasible basis Phase I found.

Example:
    >>> from simplexlab.lp import Constraint, LinearProgram, simplex
    >>> lp = LinearProgram(
    ...     objective=(3.0, 2.0),
    ...     constraints=(
    ...         Constraint((2.0, 1.0), "<=", 10.0),
    ...         Constraint((1.0, 2.0), "<=", 8.0),
    ...     ),
    ... )
    >>> result = simplex(lp)
    >>> result.status
    <Status.OPTIMAL: 'optimal'>
    >>> result.fun
    16.0

References:
    - Hillier & Lieberman, *Introduction to Operations Research*, 10th edition.
    - Bertsimas & Tsitsiklis, *Introduction to Linear Optimization*, 1997.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .analysis import basic_solution, shadow_prices
from .core import (
    LinearProgram,
    Operator,
    OptimizeResult,
    ShapeError,
    Status,
)
from .standard_form import StandardFormResult, is_standard, standardize
from .tableau import (
    IterationBudget,
    PhaseOneTableau,
    PhaseTwoTableau,
    SimplexStep,
    StepStatus,
    Tableau,
    TableauSource,
    describe_pivot,
    find_entering,
    find_leaving,
    pivot_tableau,
)
from ..config import SolverConfig
from ..diagnostics import assert_canonical, is_debug_enabled
from ..logging import get_logger

_logger = get_logger("lp.primal")


@dataclass
class _Setup:
    a_matrix: np.ndarray
    b_vector: np.ndarray
    costs: np.ndarray
    row_signs: List[int]
    names: List[str]
    basis: List[Optional[int]]
    needs_artificial: List[bool]


def _prepare(standard: LinearProgram, force_phase_one: bool) -> _Setup:
    m, n = standard.num_constraints, standard.num_variables
    slack_rows = [i for i, c in enumerate(standard.constraints) if c.operator is Operator.LE]
    k = len(slack_rows)
    a_matrix = np.zeros((m, n + k))
    if m:
        a_matrix[:, :n] = standard.constraint_matrix()
    b_vector = standard.rhs_vector()
    names = list(standard.variables)
    basis: List[Optional[int]] = [None] * m
    for s, i in enumerate(slack_rows):
        a_matrix[i, n + s] = 1.0
        names.append(f"s{s + 1}")
        basis[i] = n + s

    row_signs = [1] * m
    needs_artificial = [force_phase_one or basis[i] is None for i in range(m)]
    for i in range(m):
        if b_vector[i] < 0.0:
            a_matrix[i] *= -1.0
            b_vector[i] = -b_vector[i]
            row_signs[i] = -1
            needs_artificial[i] = True
    costs = np.concatenate([np.asarray(standard.objective, dtype=float), np.zeros(k)])
    return _Setup(a_matrix + 0.0, b_vector + 0.0, costs, row_signs, names, basis, needs_artificial)


def _iterate(
    tableau: Tableau,
    candidates: Callable[[Tableau], Sequence[int]],
    config: SolverConfig,
    counter: IterationBudget,
    steps: List[SimplexStep],
) -> Tuple[Tableau, Optional[int]]:
    """
    Pivot until optimal or unbounded.

    Returns the final tableau and, when the problem is unbounded, the entering
    column that proved it (``None`` means optimal).
    """
    while True:
        col = find_entering(tableau.matrix, candidates(tableau), config.tol, config.pivot_rule)
        if col is None:
            return tableau, None
        row = find_leaving(tableau.matrix, col, tableau.basic, config.tol)
        if row is None:
            return tableau, col
        counter.tick()
        explanation = describe_pivot(tableau, row, col)
        leaving = tableau.basic[row - 1]
        tableau = pivot_tableau(tableau, row, col)
        if is_debug_enabled():
            assert_canonical(tableau)
        _logger.debug("Pivot %d: %s", counter.pivots, explanation)
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.ITERATION,
                explanation=explanation,
                entering=col,
                leaving=leaving,
                leaving_row=row,
                pivot=(row, col),
            )
        )


def _phase_two_candidates(tableau: Tableau) -> Sequence[int]:
    return tableau.nonbasic


def _terminal(
    tableau: Tableau,
    unbounded_col: Optional[int],
    steps: List[SimplexStep],
) -> None:
    if unbounded_col is None:
        message = (
            "No objective-row coefficient is negative: the current basic "
            f"solution is optimal with objective value {tableau.objective_value:.6g}."
        )
        steps.append(SimplexStep(tableau=tableau, status=StepStatus.OPTIMAL, explanation=message))
        _logger.info("Optimal objective %.6g", tableau.objective_value)
        return
    name = tableau.variable_names[unbounded_col]
    message = (
        f"{name} can enter the basis but no row limits it (no positive entry in "
        "its column): the objective is unbounded."
    )
    steps.append(
        SimplexStep(
            tableau=tableau,
            status=StepStatus.UNBOUNDED,
            explanation=message,
            entering=unbounded_col,
        )
    )
    _logger.info("Problem is unbounded along %s", name)


def _phase_two_tableau(
    matrix: np.ndarray,
    basic: Sequence[int],
    costs: np.ndarray,
    names: Sequence[str],
    maximize: bool,
    objective_constant: float,
    source: TableauSource,
) -> PhaseTwoTableau:
    out = np.array(matrix, dtype=float)
    out[0, :] = 0.0
    out[0, :-1] = -costs
    for i, j in enumerate(basic):
        if costs[j] != 0.0:
            out[0] = out[0] + costs[j] * out[i + 1]
    for j in basic:
        out[0, j] = 0.0
    basic_set = set(basic)
    return PhaseTwoTableau(
        matrix=out,
        basic=tuple(basic),
        nonbasic=tuple(j for j in range(len(names)) if j not in basic_set),
        variable_names=tuple(names),
        maximize=maximize,
        objective_constant=objective_constant,
        source=source,
    )


def _run_phase_one(
    setup: _Setup,
    config: SolverConfig,
    counter: IterationBudget,
    steps: List[SimplexStep],
) -> Optional[Tuple[np.ndarray, List[int], List[int]]]:
    """
    Run Phase I. Returns ``(matrix, basic, kept_rows)`` over the real columns,
    or ``None`` when the problem is infeasible (terminal step already added).
    """
    m, n_real = setup.a_matrix.shape
    art_rows = [i for i in range(m) if setup.needs_artificial[i]]
    art_cols = list(range(n_real, n_real + len(art_rows)))
    art_names = [f"a{r + 1}" for r in range(len(art_rows))]
    art_row_of = dict(zip(art_cols, art_rows))

    matrix = np.zeros((m + 1, n_real + len(art_rows) + 1))
    matrix[1:, :n_real] = setup.a_matrix
    matrix[1:, -1] = setup.b_vector
    basic = list(setup.basis)
    for col, i in zip(art_cols, art_rows):
        matrix[i + 1, col] = 1.0
        matrix[0, col] = 1.0
        basic[i] = col

    names = setup.names + art_names
    art_set = set(art_cols)

    def make(mat: np.ndarray, basis: Sequence[int]) -> PhaseOneTableau:
        basis_set = set(basis)
        return PhaseOneTableau(
            matrix=mat,
            basic=tuple(basis),
            nonbasic=tuple(j for j in range(len(names)) if j not in basis_set),
            variable_names=tuple(names),
            original_variable_names=tuple(setup.names),
            artificial_indices=tuple(art_cols),
            artificial_names=tuple(art_names),
        )

    raw = make(matrix, basic)
    steps.append(
        SimplexStep(
            tableau=raw,
            status=StepStatus.ARTIFICIAL_VARS,
            explanation=(
                f"Artificial variables {', '.join(art_names)} are added to rows "
                f"{', '.join(str(i + 1) for i in art_rows)}. Phase I minimizes "
                f"w = {' + '.join(art_names)}."
            ),
        )
    )

    for i in art_rows:
        matrix[0] = matrix[0] - matrix[i + 1]
    for col in art_cols:
        matrix[0, col] = 0.0
    tableau: Tableau = make(matrix, basic)
    steps.append(
        SimplexStep(
            tableau=tableau,
            status=StepStatus.PHASE1_START,
            explanation=(
                "Phase I starts: the artificial rows are subtracted from the w row so "
                f"that every basic column is priced out (w = {tableau.objective_value:.6g})."
            ),
        )
    )

    def candidates(t: Tableau) -> Sequence[int]:
        return [j for j in t.nonbasic if j not in art_set]

    tableau, _ = _iterate(tableau, candidates, config, counter, steps)
    w = tableau.objective_value
    if w > config.tol:
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.INFEASIBLE,
                explanation=(
                    f"Phase I ended with w = {w:.6g} > 0: the artificial variables "
                    "cannot all be zero, so the problem has no feasible solution."
                ),
            )
        )
        _logger.info("Phase I optimum w=%.3e: infeasible", w)
        return None

    redundant: List[int] = []
    for row in range(1, m + 1):
        if tableau.basic[row - 1] not in art_set:
            continue
        entries = tableau.matrix[row, :n_real]
        candidates_in_row = [j for j in range(n_real) if abs(entries[j]) > config.tol]
        if not candidates_in_row:
            redundant.append(row)
            continue
        col = candidates_in_row[0]
        counter.tick()
        leaving = tableau.basic[row - 1]
        explanation = (
            f"{names[leaving]} is basic at zero; a degenerate pivot replaces it by "
            f"{names[col]}."
        )
        tableau = pivot_tableau(tableau, row, col)
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.ITERATION,
                explanation=explanation,
                entering=col,
                leaving=leaving,
                leaving_row=row,
                pivot=(row, col),
            )
        )

    kept_rows = [r for r in range(1, m + 1) if r not in redundant]
    dropped = {art_row_of[tableau.basic[r - 1]] for r in redundant}
    if dropped:
        _logger.info("Removed %d redundant constraint row(s)", len(dropped))
    keep_cols = list(range(n_real)) + [tableau.matrix.shape[1] - 1]
    real_matrix = tableau.matrix[np.ix_([0] + kept_rows, keep_cols)]
    real_basic = [tableau.basic[r - 1] for r in kept_rows]
    source_rows = [i for i in range(m) if i not in dropped]
    return real_matrix, real_basic, source_rows


def solve_standard(
    standard: LinearProgram,
    force_phase_one: bool = False,
    config: Optional[SolverConfig] = None,
    maximize: bool = True,
    objective_constant: Optional[float] = None,
) -> List[SimplexStep]:
    """
    Solve a standardized LP and return the full step trace.

    Args:
        standard: Problem in standard form (maximize, ``<=``/``=`` rows,
            non-negative variables).
        force_phase_one: Give every row an artificial variable even when the
            slack basis is feasible.
        config: Solver settings; defaults to :class:`SolverConfig`.
        maximize: Direction reported by the Phase-II tableaux. Pass False when
            ``standard`` came from a minimization.
        objective_constant: Constant added to the reported objective; defaults
            to ``standard.objective_constant``.

    Returns:
        Non-empty list of steps whose last element is terminal.

    Raises:
        ShapeError: If ``standard`` is not in standard form.
        IterationLimitError: If more than ``config.max_iterations`` pivots are needed.
    """
    if not is_standard(standard):
        raise ShapeError(
            "solve_standard expects a problem in standard form; call standardize first"
        )
    config = config or SolverConfig()
    constant = standard.objective_constant if objective_constant is None else objective_constant
    setup = _prepare(standard, force_phase_one)
    counter = IterationBudget(config.max_iterations)
    steps: List[SimplexStep] = []
    m = len(setup.basis)

    if any(setup.needs_artificial):
        phase_one = _run_phase_one(setup, config, counter, steps)
        if phase_one is None:
            return steps
        matrix, basic, source_rows = phase_one
        source = TableauSource(
            a_matrix=setup.a_matrix[source_rows],
            b_vector=setup.b_vector[source_rows],
            costs=setup.costs,
            row_signs=[setup.row_signs[i] for i in source_rows],
            constraint_ids=source_rows,
        )
        tableau: Tableau = _phase_two_tableau(
            matrix, basic, setup.costs, setup.names, maximize, constant, source
        )
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.PHASE2_START,
                explanation=(
                    "Phase I found a feasible basis. The artificial columns are dropped "
                    "and the original objective row is rebuilt by substituting the "
                    "basic variables."
                ),
            )
        )
    else:
        matrix = np.zeros((m + 1, len(setup.names) + 1))
        matrix[0, :-1] = -setup.costs
        matrix[1:, :-1] = setup.a_matrix
        matrix[1:, -1] = setup.b_vector
        source = TableauSource(
            a_matrix=setup.a_matrix,
            b_vector=setup.b_vector,
            costs=setup.costs,
            row_signs=setup.row_signs,
            constraint_ids=range(m),
        )
        tableau = _phase_two_tableau(
            matrix, setup.basis, setup.costs, setup.names, maximize, constant, source
        )
        steps.append(
            SimplexStep(
                tableau=tableau,
                status=StepStatus.INITIAL,
                explanation=(
                    "Initial tableau: the slack variables form a feasible starting basis "
                    "and the objective row holds the negated objective coefficients."
                ),
            )
        )

    tableau, unbounded_col = _iterate(tableau, _phase_two_candidates, config, counter, steps)
    _terminal(tableau, unbounded_col, steps)
    return steps


def _solve(
    lp: LinearProgram,
    force_phase_one: bool,
    config: Optional[SolverConfig],
) -> Tuple[StandardFormResult, List[SimplexStep]]:
    form = standardize(lp)
    steps = solve_standard(
        form.standard,
        force_phase_one=force_phase_one,
        config=config,
        maximize=lp.maximize,
        objective_constant=lp.objective_constant,
    )
    header = SimplexStep(
        tableau=steps[0].tableau,
        status=StepStatus.STANDARD_FORM,
        explanation=form.explanation,
    )
    return form, [header] + steps


def solve_with_steps(
    lp: LinearProgram,
    force_phase_one: bool = False,
    config: Optional[SolverConfig] = None,
) -> List[SimplexStep]:
    """Standardize ``lp`` and solve it, returning the step trace (standard-form step first)."""
    return _solve(lp, force_phase_one, config)[1]


def simplex(
    lp: LinearProgram,
    force_phase_one: bool = False,
    config: Optional[SolverConfig] = None,
) -> OptimizeResult:
    """
    Solve ``lp`` with the two-phase simplex method.

    Args:
        lp: Any linear program.
        force_phase_one: Run Phase I even if the slack basis is feasible.
        config: Solver settings.

    Returns:
        :class:`OptimizeResult` with the original variable values, the
        objective in the problem's own direction, slacks and shadow prices
        when optimal.
    """
    form, steps = _solve(lp, force_phase_one, config)
    last = steps[-1]
    nit = sum(1 for s in steps if s.status is StepStatus.ITERATION)
    if last.status is StepStatus.INFEASIBLE:
        return OptimizeResult(
            x=None,
            fun=None,
            status=Status.INFEASIBLE,
            message="Problem is infeasible",
            nit=nit,
            steps=steps,
            standard_form=form,
        )
    if last.status is StepStatus.UNBOUNDED:
        return OptimizeResult(
            x=None,
            fun=None,
            status=Status.UNBOUNDED,
            message="Problem is unbounded",
            nit=nit,
            steps=steps,
            standard_form=form,
        )

    tableau = last.tableau
    values = basic_solution(tableau)
    x = form.recover(values[: form.standard.num_variables])
    slack = np.array([c.rhs - c.activity(x) for c in lp.constraints], dtype=float) + 0.0
    return OptimizeResult(
        x=x,
        fun=lp.evaluate(x),
        status=Status.OPTIMAL,
        message="Optimal solution found",
        nit=nit,
        steps=steps,
        standard_form=form,
        slack=slack,
        shadow_prices=shadow_prices(tableau, form),
    )


__all__ = ["solve_standard", "solve_with_steps", "simplex"]
