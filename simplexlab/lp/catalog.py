"""Named textbook problems used by the examples, the benchmarks and the tests."""

from __future__ import annotations

from typing import Dict

from .core import Constraint, LinearProgram, VariableSign


def example_problems() -> Dict[str, LinearProgram]:
    """
    Continuous linear programs covering every solver outcome.

    ``production`` is optimal (16 at ``(4, 2)``), ``infeasible`` has
    contradictory rows, ``unbounded`` grows without limit, ``reoptimization``
    is the starting point for the dual simplex scenario, ``diet`` is a
    minimization with ``>=`` rows, ``blending`` has an equality row and
    ``free_variable`` uses sign restrictions.
    """
    return {
        "production": LinearProgram(
            objective=(3.0, 2.0),
            constraints=(
                Constraint((2.0, 1.0), "<=", 10.0),
                Constraint((1.0, 2.0), "<=", 8.0),
            ),
        ),
        "infeasible": LinearProgram(
            objective=(1.0, 1.0),
            constraints=(
                Constraint((1.0, 1.0), "<=", 10.0),
                Constraint((1.0, 1.0), ">=", 15.0),
            ),
        ),
        "unbounded": LinearProgram(
            objective=(2.0, 1.0),
            constraints=(
                Constraint((-1.0, 1.0), "<=", 1.0),
                Constraint((-1.0, -1.0), "<=", -3.0),
            ),
        ),
        "reoptimization": LinearProgram(
            objective=(3.0, 2.0),
            constraints=(
                Constraint((1.0, 1.0), "<=", 4.0),
                Constraint((2.0, 1.0), "<=", 6.0),
            ),
        ),
        "diet": LinearProgram(
            objective=(4.0, 5.0),
            constraints=(
                Constraint((1.0, 2.0), ">=", 6.0),
                Constraint((3.0, 1.0), ">=", 7.0),
            ),
            maximize=False,
        ),
        "blending": LinearProgram(
            objective=(1.0, 2.0, 3.0),
            constraints=(
                Constraint((1.0, 0.0, 1.0), "<=", 5.0),
                Constraint((0.0, 1.0, 1.0), ">=", 3.0),
                Constraint((1.0, 1.0, 0.0), "=", 4.0),
            ),
        ),
        "free_variable": LinearProgram(
            objective=(-1.0, 2.0),
            constraints=(
                Constraint((1.0, 1.0), "<=", 4.0),
                Constraint((1.0, -1.0), ">=", -2.0),
                Constraint((0.0, 1.0), "<=", -1.0),
            ),
            signs=(VariableSign.FREE, VariableSign.NONPOSITIVE),
            objective_constant=5.0,
        ),
    }


def integer_examples() -> Dict[str, LinearProgram]:
    """Integer and mixed-integer programs for branch-and-bound."""
    return {
        "knapsack": LinearProgram(
            objective=(7.0, 9.0, 5.0, 12.0, 14.0, 6.0, 12.0),
            constraints=(Constraint((2.0, 3.0, 2.0, 4.0, 5.0, 3.0, 4.0), "<=", 15.0),),
            integer_variables=frozenset(range(7)),
        ),
        "simple_integer": LinearProgram(
            objective=(3.0, 2.0),
            constraints=(
                Constraint((2.0, 1.0), "<=", 6.0),
                Constraint((1.0, 2.0), "<=", 6.0),
            ),
            variables=("x", "y"),
            integer_variables=frozenset({0, 1}),
        ),
        "mixed_integer": LinearProgram(
            objective=(4.0, 3.0),
            constraints=(
                Constraint((3.0, 2.0), "<=", 12.0),
                Constraint((1.0, 2.0), "<=", 8.0),
            ),
            variables=("x", "y"),
            integer_variables=frozenset({0}),
        ),
    }


__all__ = ["example_problems", "integer_examples"]
