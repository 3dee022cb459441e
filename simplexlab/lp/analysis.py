"""
Solution analysis for optimal tableaux: basic solutions, shadow prices and
complementary-slackness diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Sequence

import numpy as np

from .core import LinearProgram, Operator, ShapeError, VariableSign
from .linalg import extract_basis_matrices, invert
from .tableau import PhaseTwoTableau, Tableau

if TYPE_CHECKING:  # pragma: no cover
    from .standard_form import StandardFormResult


def basic_solution(tableau: Tableau) -> np.ndarray:
    """
    Value of every tableau column in the current basic solution.

    Basic variables take the RHS of their row; non-basic variables are zero.
    """
    values = np.zeros(tableau.num_columns)
    for row, col in enumerate(tableau.basic, start=1):
        values[col] = tableau.matrix[row, -1]
    return values + 0.0


def basis_inverse(tableau: PhaseTwoTableau) -> np.ndarray:
    """
    Recover ``B^{-1}`` of a Phase-II tableau from its source data.

    Raises:
        ValueError: If the tableau has no source or its basis is singular.
    """
    source = tableau.source
    if source is None:
        raise ValueError("Tableau carries no source data; the basis inverse cannot be recovered")
    matrices = extract_basis_matrices(source.a_matrix, tableau.basic, tableau.nonbasic)
    inverse = invert(matrices.basic)
    if inverse is None:
        raise ValueError(f"Basis {list(tableau.basic)} is singular")
    return inverse


def shadow_prices(
    tableau: Tableau,
    standard_form: Optional["StandardFormResult"] = None,
) -> np.ndarray:
    """
    Dual values ``c_B B^{-1}`` of an optimal Phase-II tableau.

    Each price is the rate of change of the reported objective per unit
    increase of a constraint's right-hand side. With ``standard_form`` the
    prices are mapped back to the constraints of the original problem
    (undoing ``>=`` flips and the min/max conversion); without it they refer
    to the standardized constraints in the tableau's reported direction.
    Rows removed as redundant get a price of zero.

    Raises:
        ValueError: If the tableau is not a Phase-II tableau with source data,
            or its basis is singular.
    """
    if not isinstance(tableau, PhaseTwoTableau):
        raise ValueError("Shadow prices are only defined for Phase-II tableaux")
    source = tableau.source
    inverse = basis_inverse(tableau)
    c_basic = source.costs[list(tableau.basic)]
    y_rows = c_basic @ inverse

    count = max(source.constraint_ids, default=-1) + 1
    if standard_form is not None:
        count = max(count, standard_form.standard.num_constraints)
    internal = np.zeros(count)
    for row, constraint_index in enumerate(source.constraint_ids):
        internal[constraint_index] = source.row_signs[row] * y_rows[row]

    if standard_form is None:
        direction = 1.0 if tableau.maximize else -1.0
        return direction * internal + 0.0

    m = standard_form.original.num_constraints
    signs = np.asarray(standard_form.constraint_signs, dtype=float)
    prices = signs * internal[:m]
    if standard_form.negated_objective:
        prices = -prices
    return prices + 0.0


def complementary_slackness(
    primal: LinearProgram,
    x: Sequence[float],
    y: Sequence[float],
) -> Dict[str, float]:
    """
    Infinity-norm residuals of the LP optimality conditions at ``(x, y)``.

    ``y`` holds one shadow price per constraint of ``primal`` using the
    convention of :func:`shadow_prices`. The returned dictionary contains:

    ``primal``
        Largest violation of a constraint or variable sign restriction.
    ``dual``
        Largest violation of a dual constraint or dual sign restriction.
    ``complementary``
        Largest ``|slack_i * y_i|`` or ``|x_j * reduced_j|``.
    """
    x_arr = np.asarray(x, dtype=float).reshape(-1)
    y_arr = np.asarray(y, dtype=float).reshape(-1)
    if x_arr.shape[0] != primal.num_variables or y_arr.shape[0] != primal.num_constraints:
        raise ShapeError("Primal or dual point has the wrong dimension")
    sigma = 1.0 if primal.maximize else -1.0
    a_mat = primal.constraint_matrix()
    slack = primal.rhs_vector() - a_mat @ x_arr if primal.num_constraints else np.zeros(0)
    c = np.asarray(primal.objective, dtype=float)
    reduced = sigma * (c - a_mat.T @ y_arr) if primal.num_constraints else sigma * c

    primal_violation = 0.0
    dual_violation = 0.0
    for i, constraint in enumerate(primal.constraints):
        scaled = sigma * y_arr[i]
        if constraint.operator is Operator.LE:
            primal_violation = max(primal_violation, -slack[i])
            dual_violation = max(dual_violation, -scaled)
        elif constraint.operator is Operator.GE:
            primal_violation = max(primal_violation, slack[i])
            dual_violation = max(dual_violation, scaled)
        else:
            primal_violation = max(primal_violation, abs(slack[i]))
    for j in range(primal.num_variables):
        sign = primal.sign_of(j)
        if sign is VariableSign.NONNEGATIVE:
            primal_violation = max(primal_violation, -x_arr[j])
            dual_violation = max(dual_violation, reduced[j])
        elif sign is VariableSign.NONPOSITIVE:
            primal_violation = max(primal_violation, x_arr[j])
            dual_violation = max(dual_violation, -reduced[j])
        else:
            dual_violation = max(dual_violation, abs(reduced[j]))

    complementary = 0.0
    if primal.num_constraints:
        complementary = float(np.max(np.abs(slack * y_arr)))
    complementary = max(complementary, float(np.max(np.abs(x_arr * reduced))))
    return {
        "primal": float(primal_violation),
        "dual": float(dual_violation),
        "complementary": complementary,
    }


def is_complementary(
    primal: LinearProgram,
    x: Sequence[float],
    y: Sequence[float],
    tol: float = 1e-6,
) -> bool:
    """Return True if every residual of :func:`complementary_slackness` is below ``tol``."""
    residuals = complementary_slackness(primal, x, y)
    return all(value <= tol for value in residuals.values())


__all__ = [
    "basic_solution",
    "basis_inverse",
    "shadow_prices",
    "complementary_slackness",
    "is_complementary",
]
