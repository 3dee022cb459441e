"""
Conversion of an arbitrary linear program to the standard form the solvers use.

The standard form produced here is always a maximization with ``<=`` or ``=``
rows and non-negative variables. Slack and artificial variables are *not*
added; that is the tableau builder's job. The conversion records how every
original variable maps to standard columns so solutions can be translated
back.

Example:
    >>> from simplexlab.lp import Constraint, LinearProgram, standardize
    >>> lp = LinearProgram(
    ...     objective=(2.0, 3.0),
    ...     constraints=(Constraint((1.0, 1.0), ">=", 2.0),),
    ...     maximize=False,
    ... )
    >>> result = standardize(lp)
    >>> result.standard.objective
    (-2.0, -3.0)
    >>> result.standard.constraints[0]
    Constraint(coefficients=(-1.0, -1.0), operator=<Operator.LE: '<='>, rhs=-2.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .core import Constraint, LinearProgram, Operator, VariableSign
from ..logging import get_logger

_logger = get_logger("lp.standard_form")


@dataclass(frozen=True)
class VariableMapping:
    """
    How one original variable is represented in the standard problem.

    ``x = s[positive] - s[negative]`` for free variables, ``x = -s[positive]``
    when ``negated`` is set (non-positive variables) and ``x = s[positive]``
    otherwise.
    """

    name: str
    sign: VariableSign
    positive: int
    negative: Optional[int] = None
    negated: bool = False

    def value(self, values: Sequence[float]) -> float:
        if self.negative is not None:
            return float(values[self.positive] - values[self.negative]) + 0.0
        v = float(values[self.positive])
        return (-v if self.negated else v) + 0.0


@dataclass(frozen=True)
class StandardFormResult:
    """
    Outcome of :func:`standardize`.

    Attributes:
        original: The untouched input problem.
        standard: Equivalent maximization problem with ``<=``/``=`` rows and
            non-negative variables.
        explanation: Markdown walkthrough of the transformations applied.
        mappings: One entry per original variable.
        constraint_signs: ``-1`` for every ``>=`` row that was multiplied by
            -1, ``+1`` for the others.
        negated_objective: True when the original problem minimized.
        objective_constant: The original objective constant.
    """

    original: LinearProgram
    standard: LinearProgram
    explanation: str
    mappings: Tuple[VariableMapping, ...]
    constraint_signs: Tuple[int, ...]
    negated_objective: bool
    objective_constant: float

    def recover(self, values: Sequence[float]) -> np.ndarray:
        """Translate standard-variable values back to the original variables."""
        arr = np.asarray(values, dtype=float).reshape(-1)
        if arr.shape[0] < self.standard.num_variables:
            raise ValueError(
                f"Expected {self.standard.num_variables} standard values, got {arr.shape[0]}"
            )
        return np.array([m.value(arr) for m in self.mappings], dtype=float)

    def original_objective(self, z: float) -> float:
        """
        Map ``standard.objective · s`` (constant excluded) back to the original
        objective, constant included.
        """
        value = -z if self.negated_objective else z
        return float(value + self.objective_constant) + 0.0


def _format_terms(coefficients: Sequence[float], names: Sequence[str]) -> str:
    parts: List[str] = []
    for coef, name in zip(coefficients, names):
        if coef == 0.0:
            continue
        magnitude = abs(coef)
        body = name if magnitude == 1.0 else f"{magnitude:g}{name}"
        if not parts:
            parts.append(f"-{body}" if coef < 0 else body)
        else:
            parts.append(f"- {body}" if coef < 0 else f"+ {body}")
    return " ".join(parts) if parts else "0"


def standardize(lp: LinearProgram) -> StandardFormResult:
    """
    Convert ``lp`` to standard form.

    Rules, applied in order:

    * a minimization is turned into a maximization by negating the objective
      (and its constant);
    * a non-positive variable ``x`` is replaced in place by ``-x⁻``;
    * a free variable ``x`` becomes ``x⁺ - x⁻``; ``x⁺`` keeps the column and
      ``x⁻`` is appended after the original variables;
    * every ``>=`` row is multiplied by -1 (its RHS may become negative);
    * ``=`` rows pass through unchanged.

    The input is never modified.
    """
    n = lp.num_variables
    lines: List[str] = ["## Standard form conversion", ""]

    direction = -1.0 if not lp.maximize else 1.0
    if lp.maximize:
        lines.append("1. The problem already maximizes; the objective is kept as is.")
    else:
        lines.append(
            "1. Minimization becomes maximization: every objective coefficient "
            "is multiplied by -1 and the optimum is negated back at the end."
        )

    names = list(lp.variables)
    column_scale = np.ones(n)
    mappings: List[VariableMapping] = []
    appended: List[int] = []
    substitutions: List[str] = []
    for j in range(n):
        sign = lp.sign_of(j)
        name = lp.variables[j]
        if sign is VariableSign.NONNEGATIVE:
            mappings.append(VariableMapping(name=name, sign=sign, positive=j))
        elif sign is VariableSign.NONPOSITIVE:
            column_scale[j] = -1.0
            names[j] = f"{name}⁻"
            mappings.append(VariableMapping(name=name, sign=sign, positive=j, negated=True))
            substitutions.append(f"{name} = -{name}⁻ with {name}⁻ ≥ 0")
        else:
            negative = n + len(appended)
            appended.append(j)
            names[j] = f"{name}⁺"
            names.append(f"{name}⁻")
            mappings.append(
                VariableMapping(name=name, sign=sign, positive=j, negative=negative)
            )
            substitutions.append(f"{name} = {name}⁺ - {name}⁻ with {name}⁺, {name}⁻ ≥ 0")

    if substitutions:
        lines.append("2. Variables without a non-negativity restriction are substituted:")
        lines.extend(f"   - {text}" for text in substitutions)
    else:
        lines.append("2. Every variable is already non-negative.")

    def expand(coefficients: Sequence[float]) -> Tuple[float, ...]:
        base = np.asarray(coefficients, dtype=float) * column_scale
        extra = [-coefficients[j] for j in appended]
        return tuple(float(v) + 0.0 for v in list(base) + extra)

    objective = tuple(direction * v + 0.0 for v in expand(lp.objective))

    constraints: List[Constraint] = []
    signs: List[int] = []
    flipped: List[int] = []
    for i, constraint in enumerate(lp.constraints):
        coefficients = expand(constraint.coefficients)
        if constraint.operator is Operator.GE:
            constraints.append(
                Constraint(tuple(-v for v in coefficients), Operator.LE, -constraint.rhs)
            )
            signs.append(-1)
            flipped.append(i + 1)
        else:
            constraints.append(Constraint(coefficients, constraint.operator, constraint.rhs))
            signs.append(1)

    if flipped:
        rows = ", ".join(str(i) for i in flipped)
        lines.append(f"3. Rows {rows} use ≥ and are multiplied by -1 to become ≤.")
    else:
        lines.append("3. No ≥ row needs to be flipped; = rows are kept unchanged.")

    standard = LinearProgram(
        objective=objective,
        constraints=tuple(constraints),
        maximize=True,
        variables=tuple(names),
        objective_constant=direction * lp.objective_constant,
    )

    lines.append("")
    lines.append(f"**Maximize** {_format_terms(standard.objective, standard.variables)}")
    lines.append("")
    lines.append("**Subject to**")
    for constraint in standard.constraints:
        lines.append(
            f"- {_format_terms(constraint.coefficients, standard.variables)} "
            f"{constraint.operator.value} {constraint.rhs:g}"
        )
    lines.append(f"- {', '.join(standard.variables)} ≥ 0")

    _logger.debug(
        "Standardized %d variables / %d constraints into %d columns",
        n,
        lp.num_constraints,
        standard.num_variables,
    )
    return StandardFormResult(
        original=lp,
        standard=standard,
        explanation="\n".join(lines),
        mappings=tuple(mappings),
        constraint_signs=tuple(signs),
        negated_objective=not lp.maximize,
        objective_constant=lp.objective_constant,
    )


def is_standard(lp: LinearProgram) -> bool:
    """True if ``lp`` maximizes, has only ``<=``/``=`` rows and non-negative variables."""
    if not lp.maximize:
        return False
    if any(c.operator is Operator.GE for c in lp.constraints):
        return False
    return all(lp.sign_of(j) is VariableSign.NONNEGATIVE for j in range(lp.num_variables))


__all__ = ["VariableMapping", "StandardFormResult", "standardize", "is_standard"]
