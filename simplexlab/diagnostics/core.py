"""Invariant checks for simplex tableaux.

The functions only rely on the ``matrix`` and ``basic`` attributes of a
tableau, so they work for every tableau variant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from ..lp.tableau import Tableau


def is_canonical(tableau: "Tableau", tol: float = 1e-9) -> bool:
    """
    Check that the basic columns form an identity permutation in rows 1..m.

    Parameters
    ----------
    tableau:
        Any simplex tableau.
    tol:
        Absolute tolerance for the comparison with the identity.

    Returns
    -------
    bool
        True if column ``basic[i]`` equals the unit vector ``e_i`` on the
        constraint rows for every row ``i``.
    """
    matrix = np.asarray(tableau.matrix)
    m = matrix.shape[0] - 1
    basic = list(tableau.basic)
    if len(basic) != m or len(set(basic)) != m:
        return False
    if m == 0:
        return True
    block = matrix[1:, basic]
    return bool(np.allclose(block, np.eye(m), atol=tol, rtol=0.0))


def assert_canonical(tableau: "Tableau", tol: float = 1e-9) -> None:
    """
    Assert the canonical-form invariant of a tableau.

    Parameters
    ----------
    tableau:
        Any simplex tableau.
    tol:
        Absolute tolerance for the comparison with the identity.

    Raises
    ------
    ValueError
        If the basic columns do not form an identity permutation.
    """
    if not is_canonical(tableau, tol=tol):
        raise ValueError(
            f"Tableau is not in canonical form for basis {list(tableau.basic)} "
            f"within tolerance {tol}."
        )


def is_primal_feasible(tableau: "Tableau", tol: float = 1e-9) -> bool:
    """Return True if every constraint-row RHS is at least ``-tol``."""
    matrix = np.asarray(tableau.matrix)
    return bool(np.all(matrix[1:, -1] >= -tol))


def is_dual_feasible(tableau: "Tableau", tol: float = 1e-9) -> bool:
    """Return True if every objective-row coefficient is at least ``-tol``."""
    matrix = np.asarray(tableau.matrix)
    return bool(np.all(matrix[0, :-1] >= -tol))


def assert_dual_feasible(tableau: "Tableau", tol: float = 1e-9) -> None:
    """
    Assert that the objective row satisfies the optimality sign convention.

    Raises
    ------
    ValueError
        If some reduced cost is below ``-tol``.
    """
    if not is_dual_feasible(tableau, tol=tol):
        worst = float(np.min(np.asarray(tableau.matrix)[0, :-1]))
        raise ValueError(
            f"Tableau lost dual feasibility: most negative reduced cost is {worst:.3e}."
        )


__all__ = [
    "is_canonical",
    "assert_canonical",
    "is_primal_feasible",
    "is_dual_feasible",
    "assert_dual_feasible",
]
