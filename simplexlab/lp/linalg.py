"""
Dense linear-algebra helpers behind the basis-matrix view of the simplex method.

The functions are deliberately explicit: :func:`invert` performs Gauss-Jordan
elimination with partial pivoting instead of delegating to LAPACK so that the
elimination is reproducible step by step, and a singular basis is reported as
``None`` rather than raised. Everything else is a thin, validated wrapper over
NumPy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .core import LinearProgram, ShapeError
from .tableau import PhaseTwoTableau, TableauSource


def _as_matrix(matrix: np.ndarray, name: str = "matrix") -> np.ndarray:
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim != 2:
        raise ShapeError(f"{name} must be 2-D, got shape {arr.shape}")
    return arr


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Matrix product ``A @ B``.

    Raises:
        ShapeError: If the inner dimensions disagree.
    """
    a_arr = _as_matrix(a, "A")
    b_arr = _as_matrix(b, "B")
    if a_arr.shape[1] != b_arr.shape[0]:
        raise ShapeError(f"Cannot multiply {a_arr.shape} by {b_arr.shape}")
    return a_arr @ b_arr


def multiply_vector(a: np.ndarray, x: Sequence[float]) -> np.ndarray:
    """Matrix-vector product ``A @ x``."""
    a_arr = _as_matrix(a, "A")
    x_arr = np.asarray(x, dtype=float).reshape(-1)
    if a_arr.shape[1] != x_arr.shape[0]:
        raise ShapeError(f"Cannot multiply {a_arr.shape} by a vector of length {x_arr.shape[0]}")
    return a_arr @ x_arr


def identity(n: int) -> np.ndarray:
    if n < 0:
        raise ShapeError("Identity size must be non-negative")
    return np.eye(n)


def transpose(matrix: np.ndarray) -> np.ndarray:
    return _as_matrix(matrix).T.copy()


def format_matrix(matrix: np.ndarray, precision: int = 2) -> List[List[str]]:
    """Render every entry with ``precision`` fixed decimals."""
    arr = _as_matrix(matrix)
    return [[f"{value + 0.0:.{precision}f}" for value in row] for row in arr]


def invert(matrix: np.ndarray, tol: float = 1e-10) -> Optional[np.ndarray]:
    """
    Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    At every column the remaining row with the largest magnitude entry is
    swapped into pivot position.

    Args:
        matrix: Square matrix.
        tol: Pivot magnitudes at or below this value mark the matrix singular.

    Returns:
        The inverse, or ``None`` when the matrix is numerically singular.

    Raises:
        ShapeError: If the matrix is not square.
    """
    arr = _as_matrix(matrix)
    n, cols = arr.shape
    if n != cols:
        raise ShapeError(f"Only square matrices can be inverted, got {arr.shape}")
    augmented = np.hstack([arr, np.eye(n)])
    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
        if abs(augmented[pivot_row, col]) <= tol:
            return None
        if pivot_row != col:
            augmented[[col, pivot_row]] = augmented[[pivot_row, col]]
        augmented[col] = augmented[col] / augmented[col, col]
        for row in range(n):
            if row != col:
                augmented[row] = augmented[row] - augmented[row, col] * augmented[col]
    return augmented[:, n:] + 0.0


@dataclass(frozen=True)
class BasisMatrices:
    """Basic matrix ``B`` and non-basic matrix ``N`` of a basis, in the given column order."""

    basic: np.ndarray
    nonbasic: np.ndarray


def extract_basis_matrices(
    a_matrix: np.ndarray,
    basic: Sequence[int],
    nonbasic: Sequence[int],
) -> BasisMatrices:
    """
    Slice ``B`` and ``N`` out of the full constraint matrix.

    Column ``k`` of ``B`` is column ``basic[k]`` of ``A``; reordering ``basic``
    reorders the columns of ``B`` (and the rows of ``B^{-1}``).
    """
    arr = _as_matrix(a_matrix, "A")
    n = arr.shape[1]
    for j in list(basic) + list(nonbasic):
        if not 0 <= int(j) < n:
            raise ShapeError(f"Column index {j} out of range for {n} columns")
    return BasisMatrices(
        basic=arr[:, [int(j) for j in basic]],
        nonbasic=arr[:, [int(j) for j in nonbasic]],
    )


@dataclass(frozen=True)
class BasicFeasibility:
    feasible: bool
    solution: Optional[np.ndarray]


def check_basic_feasibility(
    basis_matrix: np.ndarray, b_vector: Sequence[float], tol: float = 1e-10
) -> BasicFeasibility:
    """
    Solve ``B x_B = b`` through :func:`invert` and test ``x_B >= -tol``.

    A singular basis is reported as infeasible without a solution, as is a
    basic solution with a negative component.
    """
    inverse = invert(basis_matrix)
    if inverse is None:
        return BasicFeasibility(feasible=False, solution=None)
    x_basic = multiply_vector(inverse, b_vector)
    feasible = bool(np.all(x_basic >= -tol))
    return BasicFeasibility(feasible=feasible, solution=x_basic if feasible else None)


def extract_matrix_form(lp: LinearProgram):
    """
    Return ``(A, b, c)`` for ``lp`` with ``c`` in minimization convention.

    Operators and sign restrictions are not encoded; callers that need them
    should standardize first.
    """
    c = np.asarray(lp.objective, dtype=float)
    if lp.maximize:
        c = -c
    return lp.constraint_matrix(), lp.rhs_vector(), c + 0.0


def extract_submatrix(
    matrix: np.ndarray, rows: Sequence[int], cols: Sequence[int]
) -> np.ndarray:
    arr = _as_matrix(matrix)
    return arr[np.ix_([int(r) for r in rows], [int(c) for c in cols])]


def reconstruct_tableau(
    a_matrix: np.ndarray,
    b_vector: Sequence[float],
    costs: Sequence[float],
    basic: Sequence[int],
    basis_inverse: np.ndarray,
    variable_names: Optional[Sequence[str]] = None,
) -> PhaseTwoTableau:
    """
    Build the Phase-II tableau of a basis from its inverse.

    Args:
        a_matrix: ``m x n`` constraint matrix including slack columns.
        b_vector: Right-hand side.
        costs: Objective coefficients in maximization convention.
        basic: Basic columns, one per row, in the order used for ``B``.
        basis_inverse: ``B^{-1}`` for that order.
        variable_names: Column names; defaults to ``x1..`` for structural
            columns and ``s1..`` for the trailing ``m`` slack columns.

    Returns:
        A :class:`PhaseTwoTableau` whose row 0 is ``c_B B^{-1} A - c`` with
        RHS ``c_B B^{-1} b``.
    """
    a_arr = _as_matrix(a_matrix, "A")
    m, n = a_arr.shape
    b_arr = np.asarray(b_vector, dtype=float).reshape(-1)
    c_arr = np.asarray(costs, dtype=float).reshape(-1)
    if b_arr.shape[0] != m or c_arr.shape[0] != n or len(basic) != m:
        raise ShapeError("Constraint matrix, RHS, costs and basis disagree in size")
    inverse = _as_matrix(basis_inverse, "basis_inverse")
    if inverse.shape != (m, m):
        raise ShapeError(f"Basis inverse must be {m} x {m}, got {inverse.shape}")

    body = multiply(inverse, a_arr)
    rhs = multiply_vector(inverse, b_arr)
    c_basic = c_arr[[int(j) for j in basic]]
    matrix = np.zeros((m + 1, n + 1))
    matrix[0, :n] = c_basic @ body - c_arr
    matrix[0, n] = float(c_basic @ rhs)
    matrix[1:, :n] = body
    matrix[1:, n] = rhs
    for i, j in enumerate(basic):
        matrix[1:, int(j)] = 0.0
        matrix[i + 1, int(j)] = 1.0
        matrix[0, int(j)] = 0.0

    if variable_names is None:
        structural = n - m
        variable_names = [f"x{j + 1}" for j in range(structural)] + [
            f"s{i + 1}" for i in range(m)
        ]
    basic_set = {int(j) for j in basic}
    return PhaseTwoTableau(
        matrix=matrix,
        basic=tuple(basic),
        nonbasic=tuple(j for j in range(n) if j not in basic_set),
        variable_names=tuple(variable_names),
        source=TableauSource(
            a_matrix=a_arr,
            b_vector=b_arr,
            costs=c_arr,
            row_signs=(1,) * m,
            constraint_ids=tuple(range(m)),
        ),
    )


__all__ = [
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
]
