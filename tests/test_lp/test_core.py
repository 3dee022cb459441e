import numpy as np
import pytest

from simplexlab.lp.core import (
    Constraint,
    LinearProgram,
    Operator,
    ShapeError,
    VariableSign,
    fractional_distance,
    is_integral,
)


def test_operator_parse_accepts_aliases():
    assert Operator.parse("<=") is Operator.LE
    assert Operator.parse("≤") is Operator.LE
    assert Operator.parse(" >= ") is Operator.GE
    assert Operator.parse("≥") is Operator.GE
    assert Operator.parse("==") is Operator.EQ
    assert Operator.parse(Operator.EQ) is Operator.EQ


def test_operator_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown constraint operator"):
        Operator.parse("<")


def test_operator_flipped():
    assert Operator.LE.flipped is Operator.GE
    assert Operator.GE.flipped is Operator.LE
    assert Operator.EQ.flipped is Operator.EQ


def test_constraint_coerces_fields():
    c = Constraint([1, -0.0], "<=", 3)
    assert c.coefficients == (1.0, 0.0)
    assert c.operator is Operator.LE
    assert isinstance(c.rhs, float)
    assert c.activity([2.0, 5.0]) == pytest.approx(2.0)


def test_constraint_is_satisfied_per_operator():
    x = [1.0, 1.0]
    assert Constraint((1.0, 1.0), "<=", 2.0).is_satisfied(x)
    assert not Constraint((1.0, 1.0), "<=", 1.5).is_satisfied(x)
    assert Constraint((1.0, 1.0), ">=", 2.0).is_satisfied(x)
    assert not Constraint((1.0, 1.0), ">=", 2.5).is_satisfied(x)
    assert Constraint((1.0, 1.0), "=", 2.0 + 1e-12).is_satisfied(x)
    assert not Constraint((1.0, 1.0), "=", 2.1).is_satisfied(x)


def test_linear_program_defaults():
    lp = LinearProgram(objective=(1.0, 2.0, 3.0))
    assert lp.variables == ("x1", "x2", "x3")
    assert lp.maximize is True
    assert lp.num_variables == 3
    assert lp.num_constraints == 0
    assert lp.sign_of(1) is VariableSign.NONNEGATIVE
    assert lp.constraint_matrix().shape == (0, 3)
    assert lp.integer_variables == frozenset()


def test_linear_program_accepts_tuples_as_constraints():
    lp = LinearProgram(objective=(1.0, 1.0), constraints=(((1.0, 2.0), "<=", 4.0),))
    assert isinstance(lp.constraints[0], Constraint)
    assert np.array_equal(lp.constraint_matrix(), np.array([[1.0, 2.0]]))
    assert np.array_equal(lp.rhs_vector(), np.array([4.0]))


def test_linear_program_shape_errors():
    with pytest.raises(ShapeError):
        LinearProgram(objective=())
    with pytest.raises(ShapeError, match="variable names"):
        LinearProgram(objective=(1.0, 2.0), variables=("x",))
    with pytest.raises(ShapeError, match="Constraint 1 has 1 coefficients, expected 2"):
        LinearProgram(objective=(1.0, 2.0), constraints=(Constraint((1.0,), "<=", 1.0),))
    with pytest.raises(ShapeError, match="sign restrictions"):
        LinearProgram(objective=(1.0, 2.0), signs=(VariableSign.FREE,))
    with pytest.raises(ShapeError, match="out of range"):
        LinearProgram(objective=(1.0, 2.0), integer_variables=frozenset({2}))


def test_shape_error_is_a_value_error():
    assert issubclass(ShapeError, ValueError)


def test_signs_accept_string_values():
    lp = LinearProgram(objective=(1.0, 1.0), signs=("free", "nonpositive"))
    assert lp.sign_of(0) is VariableSign.FREE
    assert lp.sign_of(1) is VariableSign.NONPOSITIVE


def test_evaluate_includes_constant():
    lp = LinearProgram(objective=(3.0, 2.0), objective_constant=5.0)
    assert lp.evaluate([1.0, 1.0]) == pytest.approx(10.0)


def test_is_feasible_checks_rows_and_signs(production_lp):
    assert production_lp.is_feasible([4.0, 2.0])
    assert not production_lp.is_feasible([5.0, 2.0])
    assert not production_lp.is_feasible([-1.0, 0.0])

    lp = LinearProgram(objective=(1.0,), signs=(VariableSign.NONPOSITIVE,))
    assert lp.is_feasible([-3.0])
    assert not lp.is_feasible([1.0])
    with pytest.raises(ShapeError):
        lp.is_feasible([1.0, 2.0])


def test_with_constraint_returns_new_problem(production_lp):
    extra = Constraint((1.0, 0.0), "<=", 3.0)
    bigger = production_lp.with_constraint(extra)
    assert bigger.num_constraints == 3
    assert production_lp.num_constraints == 2
    assert bigger.constraints[-1] == extra


def test_linear_program_is_immutable(production_lp):
    with pytest.raises(AttributeError):
        production_lp.maximize = False


def test_integrality_helpers():
    assert is_integral(3.0000001)
    assert not is_integral(2.5)
    assert is_integral(-1.0)
    assert fractional_distance(2.5) == pytest.approx(0.5)
    assert fractional_distance(2.9) == pytest.approx(0.1)
    assert fractional_distance(-0.2) == pytest.approx(0.2)
