"""
Tableau and step records shared by the primal and dual simplex solvers.

Every tableau stores its matrix in the maximization convention: row 0 holds
the negated reduced costs ``c_B B^{-1} A - c`` and its last entry is the
current objective value; rows ``1..m`` hold ``B^{-1} [A | b]``. The two phases
are modelled as two variants of a common base record, and callers dispatch on
the variant with ``isinstance``.

Tableaux and steps are immutable. Pivoting builds a new tableau, so a list of
:class:`SimplexStep` values is a faithful replay log of a solve.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from .core import IterationLimitError, ShapeError


def _frozen(values, ndim: int) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.ndim != ndim:
        raise ShapeError(f"Expected a {ndim}-D array, got shape {arr.shape}")
    arr += 0.0
    arr.setflags(write=False)
    return arr


class StepStatus(Enum):
    """Kind of event a :class:`SimplexStep` records."""

    STANDARD_FORM = "standard_form"
    ARTIFICIAL_VARS = "artificial_vars"
    PHASE1_START = "phase1_start"
    PHASE2_START = "phase2_start"
    INITIAL = "initial"
    ITERATION = "iteration"
    DUAL_START = "dual_start"
    DUAL_ITERATION = "dual_iteration"
    OPTIMAL = "optimal"
    UNBOUNDED = "unbounded"
    INFEASIBLE = "infeasible"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({StepStatus.OPTIMAL, StepStatus.UNBOUNDED, StepStatus.INFEASIBLE})


@dataclass(frozen=True, eq=False)
class TableauSource:
    """
    Pre-pivot data a Phase-II tableau was built from.

    Attributes:
        a_matrix: ``m x n`` constraint matrix over every tableau column, with
            each row already multiplied by its entry in ``row_signs``.
        b_vector: Right-hand side matching ``a_matrix``.
        costs: Objective coefficient of every column in maximization form.
        row_signs: ``-1`` for rows that were negated to make the RHS
            non-negative, ``+1`` otherwise.
        constraint_ids: Index of the standardized constraint each row came
            from. Redundant rows removed after Phase I are absent.
    """

    a_matrix: np.ndarray
    b_vector: np.ndarray
    costs: np.ndarray
    row_signs: Tuple[int, ...]
    constraint_ids: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "a_matrix", _frozen(self.a_matrix, 2))
        object.__setattr__(self, "b_vector", _frozen(self.b_vector, 1))
        object.__setattr__(self, "costs", _frozen(self.costs, 1))
        object.__setattr__(self, "row_signs", tuple(int(s) for s in self.row_signs))
        object.__setattr__(self, "constraint_ids", tuple(int(i) for i in self.constraint_ids))
        m, n = self.a_matrix.shape
        if self.b_vector.shape[0] != m or len(self.row_signs) != m or len(self.constraint_ids) != m:
            raise ShapeError("Tableau source rows are inconsistent")
        if self.costs.shape[0] != n:
            raise ShapeError("Tableau source costs do not match the column count")

    def row_of(self, constraint_index: int) -> int:
        """Return the source row holding standardized constraint ``constraint_index``."""
        try:
            return self.constraint_ids.index(int(constraint_index))
        except ValueError:
            raise ValueError(
                f"Constraint {constraint_index} is not part of this tableau"
            ) from None


@dataclass(frozen=True, eq=False)
class Tableau:
    """
    Common base of the Phase-I and Phase-II tableaux.

    Attributes:
        matrix: ``(m + 1) x (n + 1)`` read-only array; row 0 is the objective
            row and the last column is the RHS.
        basic: Basic column of every constraint row (row ``i`` holds
            ``basic[i - 1]``).
        nonbasic: Remaining columns.
        variable_names: One name per column.
    """

    matrix: np.ndarray
    basic: Tuple[int, ...]
    nonbasic: Tuple[int, ...]
    variable_names: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "matrix", _frozen(self.matrix, 2))
        object.__setattr__(self, "basic", tuple(int(j) for j in self.basic))
        object.__setattr__(self, "nonbasic", tuple(int(j) for j in self.nonbasic))
        object.__setattr__(self, "variable_names", tuple(str(v) for v in self.variable_names))
        rows, cols = self.matrix.shape
        if rows != len(self.basic) + 1:
            raise ShapeError(
                f"Tableau has {rows - 1} constraint rows but {len(self.basic)} basic variables"
            )
        if cols != len(self.variable_names) + 1:
            raise ShapeError(
                f"Tableau has {cols - 1} columns but {len(self.variable_names)} variable names"
            )

    @property
    def num_rows(self) -> int:
        """Number of constraint rows ``m``."""
        return self.matrix.shape[0] - 1

    @property
    def num_columns(self) -> int:
        """Number of variable columns ``n``."""
        return self.matrix.shape[1] - 1

    @property
    def rhs(self) -> np.ndarray:
        return self.matrix[1:, -1]

    @property
    def objective_row(self) -> np.ndarray:
        return self.matrix[0, :-1]

    @property
    def objective_value(self) -> float:
        return float(self.matrix[0, -1])


@dataclass(frozen=True, eq=False)
class PhaseOneTableau(Tableau):
    """Tableau of the artificial problem ``maximize -sum(a)``."""

    original_variable_names: Tuple[str, ...] = ()
    artificial_indices: Tuple[int, ...] = ()
    artificial_names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(
            self, "original_variable_names", tuple(str(v) for v in self.original_variable_names)
        )
        object.__setattr__(self, "artificial_indices", tuple(int(j) for j in self.artificial_indices))
        object.__setattr__(self, "artificial_names", tuple(str(v) for v in self.artificial_names))

    @property
    def objective_value(self) -> float:
        """Infeasibility ``w``, the sum of the artificial variables."""
        return -float(self.matrix[0, -1]) + 0.0


@dataclass(frozen=True, eq=False)
class PhaseTwoTableau(Tableau):
    """Tableau of the real objective, reported in the user's direction."""

    maximize: bool = True
    objective_constant: float = 0.0
    source: Optional[TableauSource] = None

    @property
    def objective_value(self) -> float:
        z = float(self.matrix[0, -1])
        return (z if self.maximize else -z) + self.objective_constant + 0.0


@dataclass(frozen=True, eq=False)
class SimplexStep:
    """
    One entry of a solve trace.

    ``entering`` and ``leaving`` are column indices, ``leaving_row`` and
    ``pivot`` use matrix row numbering (constraint rows start at 1).
    """

    tableau: Tableau
    status: StepStatus
    explanation: str
    entering: Optional[int] = None
    leaving: Optional[int] = None
    leaving_row: Optional[int] = None
    pivot: Optional[Tuple[int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass
class IterationBudget:
    """Pivot counter shared by the phases of one solve."""

    limit: int
    pivots: int = 0

    def tick(self) -> None:
        self.pivots += 1
        if self.pivots > self.limit:
            raise IterationLimitError(f"Simplex exceeded the limit of {self.limit} pivots")


def pivot(matrix: np.ndarray, row: int, col: int) -> np.ndarray:
    """
    Gauss-Jordan pivot on ``matrix[row, col]``.

    Args:
        matrix: Tableau matrix (not modified).
        row: Pivot row, 1-based constraint numbering.
        col: Pivot column.

    Returns:
        A new matrix whose column ``col`` is the unit vector ``e_row``.

    Raises:
        ValueError: If the pivot element is zero.
    """
    out = np.array(matrix, dtype=float)
    element = out[row, col]
    if element == 0.0:
        raise ValueError(f"Pivot element at ({row}, {col}) is zero")
    out[row] = out[row] / element
    for r in range(out.shape[0]):
        if r != row and out[r, col] != 0.0:
            out[r] = out[r] - out[r, col] * out[row]
    out[:, col] = 0.0
    out[row, col] = 1.0
    return out


def pivot_tableau(tableau: Tableau, row: int, col: int) -> Tableau:
    """Pivot ``tableau`` and swap ``col`` into the basis in place of row ``row``."""
    leaving = tableau.basic[row - 1]
    basic = list(tableau.basic)
    basic[row - 1] = col
    nonbasic = [leaving if j == col else j for j in tableau.nonbasic]
    return replace(
        tableau,
        matrix=pivot(tableau.matrix, row, col),
        basic=tuple(basic),
        nonbasic=tuple(nonbasic),
    )


def find_entering(
    matrix: np.ndarray,
    candidates: Sequence[int],
    tol: float = 1e-9,
    rule: str = "dantzig",
) -> Optional[int]:
    """
    Choose the entering column among ``candidates``.

    A column improves the objective when its objective-row coefficient is
    below ``-tol``. ``"dantzig"`` returns the most negative one (lowest index
    on ties), ``"bland"`` the lowest-index one. Returns ``None`` when no column
    improves, i.e. the tableau is optimal.
    """
    best: Optional[int] = None
    best_value = -tol
    for j in sorted(candidates):
        value = matrix[0, j]
        if value >= -tol:
            continue
        if rule == "bland":
            return j
        if value < best_value:
            best_value = value
            best = j
    return best


def find_leaving(
    matrix: np.ndarray,
    col: int,
    basic: Sequence[int],
    tol: float = 1e-9,
) -> Optional[int]:
    """
    Minimum-ratio test for entering column ``col``.

    Only rows with a coefficient above ``tol`` take part; ties (within ``tol``)
    go to the row whose basic variable has the lowest index. Returns the matrix
    row, or ``None`` when the column is unbounded.
    """
    best_row: Optional[int] = None
    best_ratio = np.inf
    for r in range(1, matrix.shape[0]):
        coef = matrix[r, col]
        if coef <= tol:
            continue
        ratio = max(matrix[r, -1], 0.0) / coef
        if best_row is None or ratio < best_ratio - tol:
            best_row, best_ratio = r, ratio
        elif abs(ratio - best_ratio) <= tol and basic[r - 1] < basic[best_row - 1]:
            best_row, best_ratio = r, min(ratio, best_ratio)
    return best_row


def describe_pivot(tableau: Tableau, row: int, col: int) -> str:
    """Short sentence naming the variables exchanged by a pivot."""
    names = tableau.variable_names
    leaving = tableau.basic[row - 1]
    return (
        f"{names[col]} enters the basis and {names[leaving]} leaves "
        f"(pivot {tableau.matrix[row, col]:.4g} at row {row}, column {col})."
    )


__all__ = [
    "StepStatus",
    "TableauSource",
    "Tableau",
    "PhaseOneTableau",
    "PhaseTwoTableau",
    "SimplexStep",
    "IterationBudget",
    "pivot",
    "pivot_tableau",
    "find_entering",
    "find_leaving",
    "describe_pivot",
]
