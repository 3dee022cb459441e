import numpy as np
import pytest

from simplexlab.lp.core import IterationLimitError, ShapeError
from simplexlab.lp.tableau import (
    IterationBudget,
    PhaseOneTableau,
    PhaseTwoTableau,
    SimplexStep,
    StepStatus,
    Tableau,
    TableauSource,
    describe_pivot,
    find_entering,
    find_leaving,
    pivot,
    pivot_tableau,
)


def _initial() -> PhaseTwoTableau:
    matrix = np.array(
        [
            [-3.0, -2.0, 0.0, 0.0, 0.0],
            [2.0, 1.0, 1.0, 0.0, 10.0],
            [1.0, 2.0, 0.0, 1.0, 8.0],
        ]
    )
    return PhaseTwoTableau(
        matrix=matrix,
        basic=(2, 3),
        nonbasic=(0, 1),
        variable_names=("x1", "x2", "s1", "s2"),
    )


def test_tableau_properties():
    t = _initial()
    assert t.num_rows == 2
    assert t.num_columns == 4
    assert np.array_equal(t.rhs, [10.0, 8.0])
    assert np.array_equal(t.objective_row, [-3.0, -2.0, 0.0, 0.0])
    assert t.objective_value == 0.0


def test_tableau_matrix_is_read_only():
    t = _initial()
    with pytest.raises(ValueError):
        t.matrix[0, 0] = 1.0


def test_tableau_copies_its_input():
    matrix = np.eye(2)
    t = Tableau(matrix=matrix, basic=(0,), nonbasic=(), variable_names=("x1",))
    matrix[1, 1] = 5.0
    assert t.matrix[1, 1] == 1.0


def test_tableau_shape_validation():
    with pytest.raises(ShapeError, match="basic variables"):
        Tableau(matrix=np.zeros((3, 3)), basic=(0,), nonbasic=(1,), variable_names=("a", "b"))
    with pytest.raises(ShapeError, match="variable names"):
        Tableau(matrix=np.zeros((2, 3)), basic=(0,), nonbasic=(), variable_names=("a",))


def test_phase_objective_values():
    matrix = np.array([[0.0, 0.0, -4.0], [1.0, 0.0, 4.0]])
    p1 = PhaseOneTableau(
        matrix=matrix,
        basic=(1,),
        nonbasic=(0,),
        variable_names=("x1", "a1"),
        original_variable_names=("x1",),
        artificial_indices=(1,),
        artificial_names=("a1",),
    )
    assert p1.objective_value == pytest.approx(4.0)

    matrix = np.array([[0.0, 1.0, 6.0], [1.0, 1.0, 2.0]])
    p2_min = PhaseTwoTableau(
        matrix=matrix,
        basic=(0,),
        nonbasic=(1,),
        variable_names=("x1", "s1"),
        maximize=False,
        objective_constant=1.0,
    )
    assert p2_min.objective_value == pytest.approx(-5.0)


def test_tableau_source_row_of():
    source = TableauSource(
        a_matrix=np.eye(2),
        b_vector=[1.0, 2.0],
        costs=[1.0, 1.0],
        row_signs=[1, -1],
        constraint_ids=[0, 2],
    )
    assert source.row_of(2) == 1
    with pytest.raises(ValueError, match="Constraint 1 is not part of this tableau"):
        source.row_of(1)
    with pytest.raises(ShapeError):
        TableauSource(
            a_matrix=np.eye(2),
            b_vector=[1.0],
            costs=[1.0, 1.0],
            row_signs=[1, 1],
            constraint_ids=[0, 1],
        )


def test_pivot_produces_unit_column():
    t = _initial()
    out = pivot(t.matrix, 1, 0)
    assert np.allclose(out[:, 0], [0.0, 1.0, 0.0])
    assert np.allclose(out[1], [1.0, 0.5, 0.5, 0.0, 5.0])
    assert out[0, -1] == pytest.approx(15.0)
    assert np.array_equal(t.matrix[1], [2.0, 1.0, 1.0, 0.0, 10.0])


def test_pivot_rejects_zero_element():
    with pytest.raises(ValueError, match="zero"):
        pivot(np.array([[1.0, 0.0], [0.0, 1.0]]), 1, 0)


def test_pivot_tableau_updates_basis():
    t = pivot_tableau(_initial(), 1, 0)
    assert t.basic == (0, 3)
    assert t.nonbasic == (2, 1)
    assert isinstance(t, PhaseTwoTableau)


def test_find_entering_rules():
    matrix = np.array([[-1.0, -3.0, -3.0, 2.0, 0.0]])
    assert find_entering(matrix, [0, 1, 2, 3]) == 1
    assert find_entering(matrix, [0, 1, 2, 3], rule="bland") == 0
    assert find_entering(matrix, [3]) is None
    assert find_entering(np.array([[-1e-12, 0.0]]), [0]) is None


def test_find_leaving_ratio_test():
    t = _initial()
    assert find_leaving(t.matrix, 0, t.basic) == 1
    assert find_leaving(t.matrix, 1, t.basic) == 2
    unbounded = np.array([[-1.0, 0.0], [-1.0, 3.0]])
    assert find_leaving(unbounded, 0, (1,)) is None


def test_find_leaving_ties_go_to_lowest_basic_index():
    matrix = np.array(
        [
            [-1.0, 0.0, 0.0, 0.0],
            [1.0, 1.0, 0.0, 2.0],
            [1.0, 0.0, 1.0, 2.0],
        ]
    )
    assert find_leaving(matrix, 0, (2, 1)) == 2


def test_describe_pivot_names_variables():
    text = describe_pivot(_initial(), 1, 0)
    assert text.startswith("x1 enters the basis and s1 leaves")


def test_step_status_terminal():
    assert StepStatus.OPTIMAL.is_terminal
    assert StepStatus.INFEASIBLE.is_terminal
    assert StepStatus.UNBOUNDED.is_terminal
    assert not StepStatus.ITERATION.is_terminal
    step = SimplexStep(tableau=_initial(), status=StepStatus.INITIAL, explanation="")
    assert not step.is_terminal


def test_iteration_budget():
    budget = IterationBudget(2)
    budget.tick()
    budget.tick()
    with pytest.raises(IterationLimitError):
        budget.tick()
