"""Benchmark the tableau simplex and branch-and-bound."""

import time
from typing import Dict

import numpy as np

from simplexlab.lp import Constraint, LinearProgram, branch_and_bound, simplex


def random_problem(
    n_constraints: int,
    n_variables: int,
    seed: int = 0,
    integer: bool = False,
) -> LinearProgram:
    """Random bounded maximization with positive data (always optimal)."""
    rng = np.random.default_rng(seed)
    a = rng.uniform(0.1, 2.0, size=(n_constraints, n_variables))
    b = rng.uniform(5.0, 20.0, size=n_constraints)
    c = rng.uniform(0.5, 3.0, size=n_variables)
    return LinearProgram(
        objective=tuple(c),
        constraints=tuple(Constraint(tuple(row), "<=", rhs) for row, rhs in zip(a, b)),
        integer_variables=frozenset(range(n_variables)) if integer else frozenset(),
    )


def benchmark_simplex(
    n_constraints: int,
    n_variables: int,
    repeats: int = 20,
) -> Dict[str, float]:
    """Benchmark the two-phase simplex on a random dense problem.

    Args:
        n_constraints: Number of constraint rows.
        n_variables: Number of decision variables.
        repeats: Number of timed solves.

    Returns:
        Dictionary with timing results.
    """
    lp = random_problem(n_constraints, n_variables)

    # Warmup
    result = simplex(lp)

    start = time.perf_counter()
    for _ in range(repeats):
        simplex(lp)
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_constraints": n_constraints,
        "n_variables": n_variables,
        "pivots": result.nit,
        "total_time_sec": total_time,
        "time_per_solve_sec": total_time / repeats,
    }


def benchmark_branch_and_bound(n_constraints: int, n_variables: int) -> Dict[str, float]:
    """Benchmark branch-and-bound on a random pure integer program."""
    lp = random_problem(n_constraints, n_variables, seed=1, integer=True)

    start = time.perf_counter()
    result = branch_and_bound(lp)
    total_time = time.perf_counter() - start

    return {
        "nodes": len(result.tree),
        "total_time_sec": total_time,
        "nodes_per_sec": len(result.tree) / total_time,
    }


if __name__ == "__main__":
    print("Benchmarking tableau simplex...")

    for m, n in ((5, 5), (20, 20), (50, 40)):
        results = benchmark_simplex(m, n)
        print(f"Simplex ({m} x {n}, {results['pivots']} pivots):")
        print(f"  Time per solve: {results['time_per_solve_sec'] * 1e3:.2f} ms")

    results = benchmark_branch_and_bound(4, 6)
    print("Branch-and-bound (4 x 6):")
    print(f"  Nodes: {results['nodes']}")
    print(f"  Nodes per second: {results['nodes_per_sec']:.0f}")
