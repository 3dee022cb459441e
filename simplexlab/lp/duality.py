"""
Primal to dual conversion and plain-text rendering of linear programs.

The dual is derived from the problem exactly as the user wrote it (no
standardization), one dual variable per primal constraint and one dual
constraint per primal variable:

=====================  ============================  ============================
Primal (maximize)      Dual (minimize)               Primal (minimize) ⇒ Dual
=====================  ============================  ============================
constraint ``<=``      variable ``>= 0``             variable ``<= 0``
constraint ``>=``      variable ``<= 0``             variable ``>= 0``
constraint ``=``       variable free                 variable free
variable ``>= 0``      constraint ``>=``             constraint ``<=``
variable ``<= 0``      constraint ``<=``             constraint ``>=``
variable free          constraint ``=``              constraint ``=``
=====================  ============================  ============================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .core import Constraint, LinearProgram, Operator, ShapeError, VariableSign
from ..logging import get_logger

_logger = get_logger("lp.duality")


@dataclass(frozen=True)
class DualityResult:
    primal: LinearProgram
    dual: LinearProgram
    explanation: str


def _dual_sign(operator: Operator, maximize: bool) -> VariableSign:
    if operator is Operator.EQ:
        return VariableSign.FREE
    natural = Operator.LE if maximize else Operator.GE
    return VariableSign.NONNEGATIVE if operator is natural else VariableSign.NONPOSITIVE


def _dual_operator(sign: VariableSign, maximize: bool) -> Operator:
    if sign is VariableSign.FREE:
        return Operator.EQ
    natural = Operator.GE if maximize else Operator.LE
    return natural if sign is VariableSign.NONNEGATIVE else natural.flipped


def convert_to_dual(primal: LinearProgram) -> DualityResult:
    """
    Build the dual of ``primal``.

    The dual flips the direction, uses the primal right-hand sides as its
    objective, the transposed constraint matrix as its constraints and the
    primal objective as its right-hand side. The objective constant carries
    over unchanged.

    Raises:
        ShapeError: If ``primal`` has no constraints (the dual would have no
            variables).
    """
    if primal.num_constraints == 0:
        raise ShapeError("A problem without constraints has no dual variables")
    m, n = primal.num_constraints, primal.num_variables
    names = tuple(f"y{i + 1}" for i in range(m))
    signs = tuple(_dual_sign(c.operator, primal.maximize) for c in primal.constraints)
    constraints = tuple(
        Constraint(
            tuple(primal.constraints[i].coefficients[j] for i in range(m)),
            _dual_operator(primal.sign_of(j), primal.maximize),
            primal.objective[j],
        )
        for j in range(n)
    )
    dual = LinearProgram(
        objective=tuple(c.rhs for c in primal.constraints),
        constraints=constraints,
        maximize=not primal.maximize,
        variables=names,
        objective_constant=primal.objective_constant,
        signs=signs,
    )

    direction = "minimization" if primal.maximize else "maximization"
    lines: List[str] = [
        f"The primal {'maximizes' if primal.maximize else 'minimizes'}, so the dual is a "
        f"{direction} with {m} variable(s) and {n} constraint(s).",
    ]
    for i, (constraint, sign) in enumerate(zip(primal.constraints, signs)):
        lines.append(
            f"- Constraint {i + 1} ({constraint.operator.value}) gives {names[i]} "
            f"{_sign_text(sign)}."
        )
    for j, constraint in enumerate(constraints):
        lines.append(
            f"- Variable {primal.variables[j]} ({_sign_text(primal.sign_of(j))}) gives dual "
            f"constraint {j + 1} with operator {constraint.operator.value}."
        )
    _logger.debug("Dual of %d x %d problem built", m, n)
    return DualityResult(primal=primal, dual=dual, explanation="\n".join(lines))


def _sign_text(sign: VariableSign) -> str:
    if sign is VariableSign.NONNEGATIVE:
        return "≥ 0"
    if sign is VariableSign.NONPOSITIVE:
        return "≤ 0"
    return "free"


def _number(value: float) -> str:
    value = float(value) + 0.0
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _terms(coefficients: Sequence[float], names: Sequence[str]) -> str:
    out = ""
    for coef, name in zip(coefficients, names):
        if coef == 0.0:
            continue
        magnitude = abs(coef)
        body = ("" if magnitude == 1.0 else _number(magnitude)) + name
        if not out:
            out = f"-{body}" if coef < 0 else body
        else:
            out += f" - {body}" if coef < 0 else f" + {body}"
    return out or "0"


def format_linear_program(lp: LinearProgram) -> str:
    """
    Render ``lp`` as plain text.

    The layout is a stable contract::

        Maximizar: 3x1 + 2x2

        Sujeito a:
        2x1 + x2 <= 10
        x1 + 2x2 <= 8

        x1, x2 ≥ 0

    Non-positive variables are summarized as ``… ≤ 0`` and free variables as
    ``… irrestrito``; the groups are joined by ``", "``.
    """
    text = f"{'Maximizar' if lp.maximize else 'Minimizar'}: "
    text += _terms(lp.objective, lp.variables)
    if lp.objective_constant > 0:
        text += f" + {_number(lp.objective_constant)}"
    elif lp.objective_constant < 0:
        text += f" - {_number(-lp.objective_constant)}"
    text += "\n\nSujeito a:\n"
    for constraint in lp.constraints:
        text += (
            f"{_terms(constraint.coefficients, lp.variables)} "
            f"{constraint.operator.value} {_number(constraint.rhs)}\n"
        )
    text += "\n"

    groups = []
    for sign, suffix in (
        (VariableSign.NONNEGATIVE, " ≥ 0"),
        (VariableSign.NONPOSITIVE, " ≤ 0"),
        (VariableSign.FREE, " irrestrito"),
    ):
        members = [v for j, v in enumerate(lp.variables) if lp.sign_of(j) is sign]
        if members:
            groups.append(", ".join(members) + suffix)
    return text + ", ".join(groups)


__all__ = ["DualityResult", "convert_to_dual", "format_linear_program"]
