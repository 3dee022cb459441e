"""
Example: Step-by-step linear programming with Simplex Lab

This example walks through the engine the way a classroom session would:
standard form, the two-phase simplex with its full tableau trace, shadow
prices and duality, re-optimization with the dual simplex and finally
branch-and-bound for an integer program.
"""

import numpy as np

from simplexlab import (
    RHSChange,
    Status,
    StepStatus,
    branch_and_bound,
    convert_to_dual,
    format_linear_program,
    reoptimize,
    simplex,
    solve_with_steps,
)
from simplexlab.lp.catalog import example_problems, integer_examples
from simplexlab.lp.dual import reoptimize_with_constraint
from simplexlab.lp.linalg import format_matrix


def print_tableau(tableau) -> None:
    header = ["z"] + [tableau.variable_names[j] for j in tableau.basic]
    names = list(tableau.variable_names) + ["RHS"]
    print("      " + " ".join(f"{name:>7}" for name in names))
    for label, row in zip(header, format_matrix(tableau.matrix)):
        print(f"{label:>5} " + " ".join(f"{cell:>7}" for cell in row))


def example_primal_simplex():
    """Example: Production planning solved tableau by tableau."""
    print("=" * 60)
    print("Example 1: Primal Simplex - Production Planning")
    print("=" * 60)

    lp = example_problems()["production"]
    print(format_linear_program(lp))
    print()

    for step in solve_with_steps(lp):
        print(f"[{step.status.value}] {step.explanation.splitlines()[0]}")
        if step.status in (StepStatus.ITERATION, StepStatus.OPTIMAL):
            print_tableau(step.tableau)

    result = simplex(lp)
    print(f"Status: {result.status}")
    print(f"Optimal solution: x = {result.x}")
    print(f"Optimal value: {result.fun:.4g}")
    print(f"Shadow prices: {np.round(result.shadow_prices, 4)}")
    print()


def example_two_phase():
    """Example: Diet problem (minimization with >= rows) through Phase I."""
    print("=" * 60)
    print("Example 2: Two-Phase Simplex - Diet Problem")
    print("=" * 60)

    for name in ("diet", "infeasible", "unbounded"):
        result = simplex(example_problems()[name])
        phases = [s.status.value for s in result.steps]
        print(f"{name}: {result.message} after {result.nit} pivots")
        print(f"  phases: {' -> '.join(phases)}")
        if result.status is Status.OPTIMAL:
            print(f"  x = {result.x}, objective = {result.fun:.4g}")
    print()


def example_duality():
    """Example: The dual problem and strong duality."""
    print("=" * 60)
    print("Example 3: Duality")
    print("=" * 60)

    primal = example_problems()["diet"]
    duality = convert_to_dual(primal)
    print(format_linear_program(duality.dual))
    print()
    primal_result = simplex(primal)
    dual_result = simplex(duality.dual)
    print(f"Primal optimum: {primal_result.fun:.4g}")
    print(f"Dual optimum:   {dual_result.fun:.4g}")
    print(f"Dual solution:  {np.round(dual_result.x, 4)}")
    print()


def example_dual_simplex():
    """Example: Re-optimizing after a right-hand side change and a new cut."""
    print("=" * 60)
    print("Example 4: Dual Simplex - Re-optimization")
    print("=" * 60)

    optimal = solve_with_steps(example_problems()["reoptimization"])[-1].tableau
    print(f"Starting optimum: {optimal.objective_value:.4g}")

    steps = reoptimize_with_constraint(optimal, (1.0, 0.0), ">=", 3.0)
    for step in steps:
        print(f"[{step.status.value}] {step.explanation}")

    steps = reoptimize(optimal, [RHSChange(constraint_index=0, new_value=7.0)])
    print(f"After raising the first capacity to 7: {steps[-1].tableau.objective_value:.4g}")
    print()


def example_branch_and_bound():
    """Example: Integer knapsack via branch-and-bound."""
    print("=" * 60)
    print("Example 5: Branch-and-Bound - Knapsack")
    print("=" * 60)

    result = branch_and_bound(integer_examples()["knapsack"])
    print(f"Status: {result.status}")
    print(f"Nodes explored: {len(result.tree)}")
    print(f"Best integer point: {result.x}")
    print(f"Best integer objective: {result.fun:.4g}")
    print()


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("Simplex Lab - Linear and Integer Programming Walkthrough")
    print("=" * 60 + "\n")

    example_primal_simplex()
    example_two_phase()
    example_duality()
    example_dual_simplex()
    example_branch_and_bound()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
