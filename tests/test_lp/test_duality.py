import numpy as np
import pytest

from simplexlab.lp import (
    Constraint,
    LinearProgram,
    Operator,
    ShapeError,
    Status,
    VariableSign,
    simplex,
)
from simplexlab.lp.duality import convert_to_dual, format_linear_program


def test_dual_of_production_problem(production_lp):
    result = convert_to_dual(production_lp)
    dual = result.dual
    assert not dual.maximize
    assert dual.variables == ("y1", "y2")
    assert dual.objective == (10.0, 8.0)
    assert [c.coefficients for c in dual.constraints] == [(2.0, 1.0), (1.0, 2.0)]
    assert all(c.operator is Operator.GE for c in dual.constraints)
    assert [c.rhs for c in dual.constraints] == [3.0, 2.0]
    assert all(dual.sign_of(i) is VariableSign.NONNEGATIVE for i in range(2))
    assert result.primal is production_lp
    assert "dual is a minimization" in result.explanation


def test_strong_duality(examples):
    for name in ("production", "diet", "blending", "free_variable"):
        primal = examples[name]
        dual = convert_to_dual(primal).dual
        p = simplex(primal)
        d = simplex(dual)
        assert d.status is Status.OPTIMAL, name
        assert d.fun == pytest.approx(p.fun), name


def test_dual_values_match_shadow_prices(examples):
    for name in ("production", "diet"):
        primal = examples[name]
        d = simplex(convert_to_dual(primal).dual)
        assert np.allclose(d.x, simplex(primal).shadow_prices), name


def test_dual_sign_rules_for_mixed_problem():
    primal = LinearProgram(
        objective=(1.0, 2.0, 3.0),
        constraints=(
            Constraint((1.0, 1.0, 1.0), "<=", 4.0),
            Constraint((1.0, 0.0, 0.0), ">=", 1.0),
            Constraint((0.0, 1.0, 1.0), "=", 2.0),
        ),
        signs=(VariableSign.NONNEGATIVE, VariableSign.NONPOSITIVE, VariableSign.FREE),
    )
    dual = convert_to_dual(primal).dual
    assert dual.signs == (
        VariableSign.NONNEGATIVE,
        VariableSign.NONPOSITIVE,
        VariableSign.FREE,
    )
    assert [c.operator for c in dual.constraints] == [Operator.GE, Operator.LE, Operator.EQ]

    min_dual = convert_to_dual(
        LinearProgram(
            objective=primal.objective,
            constraints=primal.constraints,
            maximize=False,
            signs=primal.signs,
        )
    ).dual
    assert min_dual.maximize
    assert min_dual.signs == (
        VariableSign.NONPOSITIVE,
        VariableSign.NONNEGATIVE,
        VariableSign.FREE,
    )
    assert [c.operator for c in min_dual.constraints] == [Operator.LE, Operator.GE, Operator.EQ]


def test_dual_of_dual_is_primal(examples):
    primal = examples["diet"]
    twice = convert_to_dual(convert_to_dual(primal).dual).dual
    assert twice.maximize == primal.maximize
    assert twice.objective == primal.objective
    coefficients = [c.coefficients for c in primal.constraints]
    assert [c.coefficients for c in twice.constraints] == coefficients
    assert [c.operator for c in twice.constraints] == [c.operator for c in primal.constraints]


def test_dual_keeps_objective_constant(examples):
    dual = convert_to_dual(examples["free_variable"]).dual
    assert dual.objective_constant == 5.0


def test_dual_requires_constraints():
    with pytest.raises(ShapeError):
        convert_to_dual(LinearProgram(objective=(1.0,)))


def test_format_linear_program(production_lp):
    text = format_linear_program(production_lp)
    assert text == (
        "Maximizar: 3x1 + 2x2\n"
        "\n"
        "Sujeito a:\n"
        "2x1 + x2 <= 10\n"
        "x1 + 2x2 <= 8\n"
        "\n"
        "x1, x2 ≥ 0"
    )


def test_format_linear_program_signs_and_constant(examples):
    text = format_linear_program(examples["free_variable"])
    assert text.startswith("Maximizar: -x1 + 2x2 + 5\n")
    assert "x1 - x2 >= -2\n" in text
    assert "x2 <= -1\n" in text
    assert text.endswith("x2 ≤ 0, x1 irrestrito")


def test_format_linear_program_minimization():
    lp = LinearProgram(
        objective=(0.5, 0.0, -1.0),
        constraints=(Constraint((1.0, 1.0, 1.0), "=", 2.5),),
        maximize=False,
        objective_constant=-2.0,
    )
    text = format_linear_program(lp)
    assert text.startswith("Minimizar: 0.5x1 - x3 - 2\n")
    assert "x1 + x2 + x3 = 2.5\n" in text
