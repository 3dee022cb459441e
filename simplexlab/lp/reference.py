"""
Cross-check against SciPy's HiGHS solver.

SciPy is an optional dependency (``pip install simplexlab[reference]``). The
wrapper translates a :class:`LinearProgram` into ``scipy.optimize.linprog``
arguments so that results of the tableau solvers can be compared with an
industrial-strength implementation.
"""

from __future__ import annotations

import numpy as np

from .core import LinearProgram, Operator, OptimizeResult, Status, VariableSign

try:
    from scipy.optimize import linprog as _scipy_linprog

    SCIPY_AVAILABLE = True
except Exception:  # pragma: no cover - SciPy is optional
    SCIPY_AVAILABLE = False
    _scipy_linprog = None


_BOUNDS = {
    VariableSign.NONNEGATIVE: (0.0, None),
    VariableSign.NONPOSITIVE: (None, 0.0),
    VariableSign.FREE: (None, None),
}


def linprog_reference(
    lp: LinearProgram,
    maxiter: int = 1000,
) -> OptimizeResult:
    """
    Solve ``lp`` via SciPy's ``linprog`` (HiGHS).

    Integer restrictions are ignored. The returned ``fun`` is expressed in
    the problem's own direction, constant included.

    Raises:
        ImportError: If SciPy is not installed.
        RuntimeError: If HiGHS stops for a reason other than optimality,
            infeasibility or unboundedness.
    """
    if not SCIPY_AVAILABLE:  # pragma: no cover - depends on SciPy
        raise ImportError("SciPy is required for linprog_reference; install simplexlab[reference]")

    sense = -1.0 if lp.maximize else 1.0
    c = sense * np.asarray(lp.objective, dtype=float)
    ub_rows, ub_rhs, eq_rows, eq_rhs = [], [], [], []
    for constraint in lp.constraints:
        row = np.asarray(constraint.coefficients, dtype=float)
        if constraint.operator is Operator.LE:
            ub_rows.append(row)
            ub_rhs.append(constraint.rhs)
        elif constraint.operator is Operator.GE:
            ub_rows.append(-row)
            ub_rhs.append(-constraint.rhs)
        else:
            eq_rows.append(row)
            eq_rhs.append(constraint.rhs)

    res = _scipy_linprog(
        c=c,
        A_ub=np.array(ub_rows) if ub_rows else None,
        b_ub=np.array(ub_rhs) if ub_rhs else None,
        A_eq=np.array(eq_rows) if eq_rows else None,
        b_eq=np.array(eq_rhs) if eq_rhs else None,
        bounds=[_BOUNDS[lp.sign_of(j)] for j in range(lp.num_variables)],
        options={"maxiter": maxiter},
        method="highs",
    )
    if res.status in (2, 3):
        status = Status.INFEASIBLE if res.status == 2 else Status.UNBOUNDED
        return OptimizeResult(
            x=None, fun=None, status=status, message=res.message, nit=res.nit
        )
    if not res.success:
        raise RuntimeError(f"linprog failed: {res.message}")
    x = np.asarray(res.x, dtype=float)
    return OptimizeResult(
        x=x,
        fun=lp.evaluate(x),
        status=Status.OPTIMAL,
        message=res.message,
        nit=res.nit,
    )


__all__ = ["SCIPY_AVAILABLE", "linprog_reference"]
