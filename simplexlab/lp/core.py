"""
Core problem and result types for the linear programming engine.

A :class:`LinearProgram` is described the way it is written on a blackboard:
an objective vector (plus an optional additive constant), a direction, a list
of :class:`Constraint` rows using ``<=``, ``>=`` or ``=`` and a sign restriction
for every variable. All containers are immutable; every transformation
(standardization, dualization, branching) builds a new problem.

References:
    - Bertsimas & Tsitsiklis, *Introduction to Linear Optimization* (1997)
    - Hillier & Lieberman, *Introduction to Operations Research* (2015)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .standard_form import StandardFormResult
    from .tableau import SimplexStep


class ShapeError(ValueError):
    """Raised when a linear program's dimensions are inconsistent."""


class IterationLimitError(RuntimeError):
    """Raised when a simplex run exceeds its pivot budget."""


class Status(Enum):
    """Solution status for optimization routines."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"


class Operator(Enum):
    """Relational operator of a constraint row."""

    LE = "<="
    GE = ">="
    EQ = "="

    @classmethod
    def parse(cls, value: "Operator | str") -> "Operator":
        """Accept an Operator or one of ``<=``, ``>=``, ``=``, ``≤``, ``≥``, ``==``."""
        if isinstance(value, Operator):
            return value
        key = str(value).strip()
        aliases = {
            "<=": cls.LE,
            "≤": cls.LE,
            ">=": cls.GE,
            "≥": cls.GE,
            "=": cls.EQ,
            "==": cls.EQ,
        }
        if key not in aliases:
            raise ValueError(f"Unknown constraint operator: {value!r}")
        return aliases[key]

    @property
    def flipped(self) -> "Operator":
        """Operator obtained after multiplying both sides by -1."""
        if self is Operator.LE:
            return Operator.GE
        if self is Operator.GE:
            return Operator.LE
        return Operator.EQ


class VariableSign(Enum):
    """Sign restriction of a decision variable."""

    NONNEGATIVE = "nonnegative"
    NONPOSITIVE = "nonpositive"
    FREE = "free"


def _as_float_tuple(values: Iterable[float]) -> Tuple[float, ...]:
    # ``+ 0.0`` turns -0.0 into 0.0 so printed problems never show "-0"
    return tuple(float(v) + 0.0 for v in values)


@dataclass(frozen=True)
class Constraint:
    """
    A single constraint row ``coefficients · x (op) rhs``.

    Attributes:
        coefficients: One coefficient per variable of the owning problem.
        operator: Relational operator (strings such as ``"<="`` are accepted).
        rhs: Right-hand-side scalar.
    """

    coefficients: Tuple[float, ...]
    operator: Operator
    rhs: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "coefficients", _as_float_tuple(self.coefficients))
        object.__setattr__(self, "operator", Operator.parse(self.operator))
        object.__setattr__(self, "rhs", float(self.rhs) + 0.0)

    def activity(self, x: Sequence[float]) -> float:
        """Return ``coefficients · x``."""
        return float(np.dot(self.coefficients, np.asarray(x, dtype=float)))

    def is_satisfied(self, x: Sequence[float], tol: float = 1e-9) -> bool:
        lhs = self.activity(x)
        if self.operator is Operator.LE:
            return lhs <= self.rhs + tol
        if self.operator is Operator.GE:
            return lhs >= self.rhs - tol
        return abs(lhs - self.rhs) <= tol


@dataclass(frozen=True)
class LinearProgram:
    """
    Linear program in the general form used throughout the engine.

    ``maximize`` (or minimize) ``objective · x + objective_constant`` subject to
    every constraint in ``constraints`` and the per-variable sign restrictions
    in ``signs``. When ``signs`` is ``None`` every variable is non-negative.
    ``integer_variables`` lists the indices that branch-and-bound must drive to
    integral values; the LP solvers ignore it.

    Raises:
        ShapeError: If the objective, variable names, constraint coefficients
            or sign restrictions disagree in length, or an integer index is out
            of range.
    """

    objective: Tuple[float, ...]
    constraints: Tuple[Constraint, ...] = ()
    maximize: bool = True
    variables: Optional[Tuple[str, ...]] = None
    objective_constant: float = 0.0
    signs: Optional[Tuple[VariableSign, ...]] = None
    integer_variables: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        objective = _as_float_tuple(self.objective)
        n = len(objective)
        if n == 0:
            raise ShapeError("Linear program must contain at least one variable")
        object.__setattr__(self, "objective", objective)

        if self.variables is None:
            variables = tuple(f"x{j + 1}" for j in range(n))
        else:
            variables = tuple(str(v) for v in self.variables)
        if len(variables) != n:
            raise ShapeError(
                f"Objective has {n} coefficients but {len(variables)} variable names were given"
            )
        object.__setattr__(self, "variables", variables)

        constraints = tuple(
            c if isinstance(c, Constraint) else Constraint(*c) for c in self.constraints
        )
        for i, constraint in enumerate(constraints):
            if len(constraint.coefficients) != n:
                raise ShapeError(
                    f"Constraint {i + 1} has {len(constraint.coefficients)} coefficients, "
                    f"expected {n}"
                )
        object.__setattr__(self, "constraints", constraints)

        if self.signs is not None:
            signs = tuple(
                s if isinstance(s, VariableSign) else VariableSign(s) for s in self.signs
            )
            if len(signs) != n:
                raise ShapeError(
                    f"Got {len(signs)} sign restrictions for {n} variables"
                )
            object.__setattr__(self, "signs", signs)

        integer_variables = frozenset(int(j) for j in self.integer_variables)
        for j in integer_variables:
            if not 0 <= j < n:
                raise ShapeError(f"Integer variable index {j} out of range for {n} variables")
        object.__setattr__(self, "integer_variables", integer_variables)
        object.__setattr__(self, "objective_constant", float(self.objective_constant) + 0.0)
        object.__setattr__(self, "maximize", bool(self.maximize))

    @property
    def num_variables(self) -> int:
        return len(self.objective)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def sign_of(self, index: int) -> VariableSign:
        """Sign restriction of variable ``index`` (non-negative when unspecified)."""
        if self.signs is None:
            return VariableSign.NONNEGATIVE
        return self.signs[index]

    def constraint_matrix(self) -> np.ndarray:
        """Return the ``m x n`` coefficient matrix."""
        if not self.constraints:
            return np.zeros((0, self.num_variables))
        return np.array([c.coefficients for c in self.constraints], dtype=float)

    def rhs_vector(self) -> np.ndarray:
        return np.array([c.rhs for c in self.constraints], dtype=float)

    def evaluate(self, x: Sequence[float]) -> float:
        """Objective value ``objective · x + objective_constant``."""
        return float(np.dot(self.objective, np.asarray(x, dtype=float))) + self.objective_constant

    def is_feasible(self, x: Sequence[float], tol: float = 1e-9) -> bool:
        """Check every constraint and sign restriction at the point ``x``."""
        values = np.asarray(x, dtype=float).reshape(-1)
        if values.shape[0] != self.num_variables:
            raise ShapeError("Point dimension does not match the number of variables")
        for j, value in enumerate(values):
            sign = self.sign_of(j)
            if sign is VariableSign.NONNEGATIVE and value < -tol:
                return False
            if sign is VariableSign.NONPOSITIVE and value > tol:
                return False
        return all(c.is_satisfied(values, tol) for c in self.constraints)

    def with_constraint(self, constraint: Constraint) -> "LinearProgram":
        """Return a new problem with ``constraint`` appended; ``self`` is unchanged."""
        return replace(self, constraints=self.constraints + (constraint,))


@dataclass
class OptimizeResult:
    """
    Solution container returned by :func:`simplexlab.lp.primal.simplex`.

    Attributes:
        x: Values of the original decision variables (or ``None`` when the
            problem is infeasible or unbounded).
        fun: Objective value at ``x`` in the direction the problem asked for,
            constant included (or ``None``).
        status: Enumeration describing solver exit.
        message: Human-readable string explaining the status.
        nit: Number of pivots performed across both phases.
        steps: Full step trace of the solve.
        standard_form: The standard-form conversion the solve ran on.
        slack: ``rhs - activity`` for every original constraint at ``x``.
        shadow_prices: Dual value of every original constraint, when optimal.
    """

    x: Optional[np.ndarray]
    fun: Optional[float]
    status: Status
    message: str
    nit: int
    steps: List["SimplexStep"] = field(default_factory=list)
    standard_form: Optional["StandardFormResult"] = None
    slack: Optional[np.ndarray] = None
    shadow_prices: Optional[np.ndarray] = None


def is_integral(value: float, tol: float = 1e-6) -> bool:
    """Return True if ``value`` lies within ``tol`` of an integer."""
    return abs(value - round(value)) <= tol


def fractional_distance(value: float) -> float:
    """Distance from ``value`` to the nearest integer."""
    return abs(value - math.floor(value + 0.5))


__all__ = [
    "ShapeError",
    "IterationLimitError",
    "Status",
    "Operator",
    "VariableSign",
    "Constraint",
    "LinearProgram",
    "OptimizeResult",
    "is_integral",
    "fractional_distance",
]
