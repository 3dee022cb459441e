import pytest

from simplexlab.config import SolverConfig, default_config


def test_defaults():
    config = default_config()
    assert config.tol == 1e-9
    assert config.max_iterations == 1000
    assert config.pivot_rule == "dantzig"
    assert config.integrality_tol == 1e-6
    assert config.max_nodes == 1000
    assert config.node_selection == "best_bound"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"tol": 0.0}, "Tolerance must be positive"),
        ({"integrality_tol": 0.5}, "Integrality tolerance"),
        ({"max_iterations": 0}, "max_iterations"),
        ({"max_nodes": 0}, "max_nodes"),
        ({"pivot_rule": "steepest"}, "Unsupported pivot rule"),
        ({"node_selection": "breadth_first"}, "Unsupported node selection"),
    ],
)
def test_invalid_settings_raise(kwargs, message):
    with pytest.raises(ValueError, match=message):
        SolverConfig(**kwargs)


def test_from_env_reads_prefixed_variables():
    env = {
        "SIMPLEXLAB_TOL": "1e-7",
        "SIMPLEXLAB_MAX_ITERATIONS": "50",
        "SIMPLEXLAB_PIVOT_RULE": "Bland",
        "SIMPLEXLAB_NODE_SELECTION": "depth_first",
        "SIMPLEXLAB_MAX_NODES": "",
    }
    config = SolverConfig.from_env(env)
    assert config.tol == pytest.approx(1e-7)
    assert config.max_iterations == 50
    assert config.pivot_rule == "bland"
    assert config.node_selection == "depth_first"
    assert config.max_nodes == 1000


def test_from_env_rejects_bad_numbers():
    with pytest.raises(ValueError, match="SIMPLEXLAB_MAX_ITERATIONS"):
        SolverConfig.from_env({"SIMPLEXLAB_MAX_ITERATIONS": "many"})


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("SIMPLEXLAB_INTEGRALITY_TOL", "1e-4")
    assert SolverConfig.from_env().integrality_tol == pytest.approx(1e-4)


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        default_config().tol = 1.0
