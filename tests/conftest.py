"""Pytest configuration and shared fixtures for Simplex Lab tests.

This module provides:
- A deterministic numpy RNG fixture
- Textbook linear programs shared across the LP test modules
- A fixture that restores debug mode after each test
"""

import os

import numpy as np
import pytest

from simplexlab.diagnostics import is_debug_enabled, set_debug_enabled
from simplexlab.lp import Constraint, LinearProgram
from simplexlab.lp.catalog import example_problems, integer_examples


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def restore_debug_mode():
    """Auto-use fixture so a test toggling debug mode cannot leak it."""
    original = is_debug_enabled()
    yield
    set_debug_enabled(original)


@pytest.fixture
def examples() -> dict:
    return example_problems()


@pytest.fixture
def integer_problems() -> dict:
    return integer_examples()


@pytest.fixture
def production_lp() -> LinearProgram:
    """maximize 3x1 + 2x2 s.t. 2x1 + x2 <= 10, x1 + 2x2 <= 8 (optimum 16 at (4, 2))."""
    return example_problems()["production"]


@pytest.fixture
def reoptimization_lp() -> LinearProgram:
    """maximize 3x1 + 2x2 s.t. x1 + x2 <= 4, 2x1 + x2 <= 6 (optimum 10 at (2, 2))."""
    return example_problems()["reoptimization"]


@pytest.fixture
def branching_lp() -> LinearProgram:
    """maximize 5x + 4y s.t. 6x + 4y <= 24, x + 2y <= 6, x, y integer."""
    return LinearProgram(
        objective=(5.0, 4.0),
        constraints=(
            Constraint((6.0, 4.0), "<=", 24.0),
            Constraint((1.0, 2.0), "<=", 6.0),
        ),
        variables=("x", "y"),
        integer_variables=frozenset({0, 1}),
    )
