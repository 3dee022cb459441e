import numpy as np
import pytest

from simplexlab.lp import Constraint, LinearProgram, ShapeError, solve_with_steps
from simplexlab.lp.linalg import (
    check_basic_feasibility,
    extract_basis_matrices,
    extract_matrix_form,
    extract_submatrix,
    format_matrix,
    identity,
    invert,
    multiply,
    multiply_vector,
    reconstruct_tableau,
    transpose,
)


def test_multiply_and_shape_checks():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    b = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert np.allclose(multiply(a, b), [[2.0, 1.0], [4.0, 3.0]])
    assert np.allclose(multiply_vector(a, [1.0, 1.0]), [3.0, 7.0])
    with pytest.raises(ShapeError):
        multiply(a, np.ones((3, 1)))
    with pytest.raises(ShapeError):
        multiply_vector(a, [1.0, 2.0, 3.0])


def test_identity_and_transpose():
    assert np.array_equal(identity(3), np.eye(3))
    with pytest.raises(ShapeError):
        identity(-1)
    m = np.arange(6.0).reshape(2, 3)
    t = transpose(m)
    assert t.shape == (3, 2)
    t[0, 0] = 99.0
    assert m[0, 0] == 0.0


def test_format_matrix():
    rows = format_matrix(np.array([[1.0, -0.0], [1.0 / 3.0, 2.5]]))
    assert rows == [["1.00", "0.00"], ["0.33", "2.50"]]
    assert format_matrix(np.array([[1.0 / 3.0]]), precision=4) == [["0.3333"]]


def test_invert_matches_numpy(rng):
    m = rng.standard_normal((4, 4)) + 4.0 * np.eye(4)
    inverse = invert(m)
    assert inverse is not None
    assert np.allclose(inverse @ m, np.eye(4), atol=1e-10)


def test_invert_needs_row_swaps():
    m = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert np.allclose(invert(m), m)


def test_invert_singular_returns_none():
    assert invert(np.array([[1.0, 2.0], [2.0, 4.0]])) is None


def test_invert_rejects_non_square():
    with pytest.raises(ShapeError):
        invert(np.ones((2, 3)))


def test_extract_basis_matrices_orders_columns():
    a = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    matrices = extract_basis_matrices(a, [2, 0], [1])
    assert np.array_equal(matrices.basic, [[3.0, 1.0], [6.0, 4.0]])
    assert np.array_equal(matrices.nonbasic, [[2.0], [5.0]])
    with pytest.raises(ShapeError):
        extract_basis_matrices(a, [0, 3], [1])


def test_check_basic_feasibility():
    basis = np.array([[1.0, 1.0], [2.0, 1.0]])
    feasible = check_basic_feasibility(basis, [4.0, 6.0])
    assert feasible.feasible
    assert np.allclose(feasible.solution, [2.0, 2.0])

    infeasible = check_basic_feasibility(basis, [4.0, 10.0])
    assert not infeasible.feasible
    assert infeasible.solution is None

    singular = check_basic_feasibility(np.array([[1.0, 1.0], [1.0, 1.0]]), [1.0, 1.0])
    assert not singular.feasible


def test_extract_matrix_form_uses_minimization_costs(production_lp):
    a, b, c = extract_matrix_form(production_lp)
    assert np.array_equal(a, [[2.0, 1.0], [1.0, 2.0]])
    assert np.array_equal(b, [10.0, 8.0])
    assert np.array_equal(c, [-3.0, -2.0])

    minimize = LinearProgram(objective=(1.0, 4.0), maximize=False)
    assert np.array_equal(extract_matrix_form(minimize)[2], [1.0, 4.0])


def test_extract_submatrix():
    m = np.arange(9.0).reshape(3, 3)
    assert np.array_equal(extract_submatrix(m, [0, 2], [1]), [[1.0], [7.0]])


def test_reconstruct_tableau_matches_simplex(reoptimization_lp):
    optimal = solve_with_steps(reoptimization_lp)[-1].tableau
    source = optimal.source
    matrices = extract_basis_matrices(source.a_matrix, optimal.basic, optimal.nonbasic)
    rebuilt = reconstruct_tableau(
        source.a_matrix,
        source.b_vector,
        source.costs,
        optimal.basic,
        invert(matrices.basic),
    )
    assert np.allclose(rebuilt.matrix, optimal.matrix)
    assert rebuilt.variable_names == ("x1", "x2", "s1", "s2")
    assert rebuilt.objective_value == pytest.approx(10.0)


def test_reconstruct_tableau_validates_sizes():
    a = np.array([[1.0, 1.0, 1.0, 0.0], [2.0, 1.0, 0.0, 1.0]])
    with pytest.raises(ShapeError):
        reconstruct_tableau(a, [4.0], [3.0, 2.0, 0.0, 0.0], [2, 3], np.eye(2))
    with pytest.raises(ShapeError):
        reconstruct_tableau(a, [4.0, 6.0], [3.0, 2.0, 0.0, 0.0], [2, 3], np.eye(3))


def test_reconstruct_slack_basis_is_initial_tableau():
    lp = LinearProgram(
        objective=(3.0, 2.0),
        constraints=(Constraint((1.0, 1.0), "<=", 4.0), Constraint((2.0, 1.0), "<=", 6.0)),
    )
    a = np.hstack([lp.constraint_matrix(), np.eye(2)])
    tableau = reconstruct_tableau(a, lp.rhs_vector(), [3.0, 2.0, 0.0, 0.0], [2, 3], np.eye(2))
    assert np.allclose(tableau.objective_row, [-3.0, -2.0, 0.0, 0.0])
    assert tableau.objective_value == 0.0
    assert tableau.nonbasic == (0, 1)


def test_inversion_round_trip(rng):
    for size in (1, 2, 5):
        m = rng.standard_normal((size, size)) + size * np.eye(size)
        inverse = invert(m)
        assert np.allclose(invert(inverse), m, atol=1e-9)
        assert np.allclose(multiply(m, inverse), identity(size), atol=1e-9)
