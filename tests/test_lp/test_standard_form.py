import numpy as np
import pytest

from simplexlab.lp import Constraint, LinearProgram, Operator, VariableSign
from simplexlab.lp.standard_form import is_standard, standardize


def test_maximization_with_le_rows_is_unchanged(production_lp):
    result = standardize(production_lp)
    assert result.standard.objective == production_lp.objective
    assert result.standard.constraints == production_lp.constraints
    assert result.constraint_signs == (1, 1)
    assert not result.negated_objective
    assert is_standard(result.standard)
    assert is_standard(production_lp)


def test_minimization_and_ge_rows(examples):
    diet = examples["diet"]
    result = standardize(diet)
    assert result.standard.maximize
    assert result.standard.objective == (-4.0, -5.0)
    assert result.negated_objective
    assert result.constraint_signs == (-1, -1)
    first = result.standard.constraints[0]
    assert first.operator is Operator.LE
    assert first.coefficients == (-1.0, -2.0)
    assert first.rhs == -6.0
    assert not is_standard(diet)


def test_equality_rows_pass_through(examples):
    result = standardize(examples["blending"])
    assert result.standard.constraints[2].operator is Operator.EQ
    assert result.standard.constraints[2].rhs == 4.0
    assert result.constraint_signs == (1, -1, 1)


def test_sign_restrictions_and_recovery(examples):
    lp = examples["free_variable"]
    result = standardize(lp)
    assert result.standard.variables == ("x1⁺", "x2⁻", "x1⁻")
    assert result.standard.objective == (-1.0, -2.0, 1.0)
    assert result.standard.constraints[0].coefficients == (1.0, -1.0, -1.0)
    assert result.standard.objective_constant == 5.0

    free, nonpositive = result.mappings
    assert free.sign is VariableSign.FREE and free.negative == 2
    assert nonpositive.negated

    x = result.recover([0.0, 1.0, 3.0])
    assert np.allclose(x, [-3.0, -1.0])


def test_recover_rejects_short_vectors(examples):
    result = standardize(examples["free_variable"])
    with pytest.raises(ValueError, match="Expected 3 standard values"):
        result.recover([1.0, 2.0])


def test_original_objective_undoes_direction():
    lp = LinearProgram(objective=(2.0,), maximize=False, objective_constant=3.0)
    result = standardize(lp)
    assert result.standard.objective_constant == -3.0
    assert result.original_objective(-4.0) == pytest.approx(7.0)


def test_explanation_describes_every_rule(examples):
    text = standardize(examples["free_variable"]).explanation
    assert text.startswith("## Standard form conversion")
    assert "x1 = x1⁺ - x1⁻" in text
    assert "x2 = -x2⁻" in text
    assert "Rows 2 use ≥" in text

    text = standardize(examples["diet"]).explanation
    assert "Minimization becomes maximization" in text


def test_input_problem_is_not_modified(examples):
    lp = examples["diet"]
    before = (lp.objective, lp.constraints, lp.maximize)
    standardize(lp)
    assert (lp.objective, lp.constraints, lp.maximize) == before


def test_negative_rhs_stays_in_standard_form():
    lp = LinearProgram(
        objective=(1.0, 1.0),
        constraints=(Constraint((1.0, -1.0), "<=", -2.0),),
    )
    result = standardize(lp)
    assert result.standard.constraints[0].rhs == -2.0
    assert is_standard(result.standard)


def test_standardizing_twice_is_idempotent(examples):
    from simplexlab.lp import simplex

    for name in ("production", "diet", "blending", "free_variable"):
        once = standardize(examples[name]).standard
        twice = standardize(once).standard
        assert twice == once, name
        assert simplex(twice).fun == pytest.approx(simplex(once).fun), name
