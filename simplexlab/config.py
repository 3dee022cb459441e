"""Solver configuration shared by the simplex, dual simplex and branch-and-bound engines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_PIVOT_RULES = ("dantzig", "bland")
_NODE_SELECTIONS = ("best_bound", "depth_first")

_ENV_PREFIX = "SIMPLEXLAB_"


@dataclass(frozen=True)
class SolverConfig:
    """
    Numerical and search settings for the optimization engine.

    Args:
        tol: Absolute tolerance used for every comparison against zero
            (reduced costs, ratio-test denominators, RHS feasibility, Phase-I
            infeasibility). Defaults to 1e-9.
        max_iterations: Maximum number of pivots a single primal or dual
            simplex run may perform before giving up. Defaults to 1000.
        pivot_rule: Entering-variable rule. "dantzig" picks the most negative
            reduced cost (ties by lowest column index); "bland" picks the
            lowest-index improving column. Defaults to "dantzig".
        integrality_tol: Distance from the nearest integer under which a
            branch-and-bound value counts as integral. Defaults to 1e-6.
        max_nodes: Maximum number of branch-and-bound nodes to create.
            Defaults to 1000.
        node_selection: Frontier order for branch-and-bound. "best_bound"
            expands the node whose parent relaxation is best; "depth_first"
            expands the most recently created node. Defaults to "best_bound".
    """

    tol: float = 1e-9
    max_iterations: int = 1000
    pivot_rule: str = "dantzig"
    integrality_tol: float = 1e-6
    max_nodes: int = 1000
    node_selection: str = "best_bound"

    def __post_init__(self) -> None:
        if self.tol <= 0.0:
            raise ValueError("Tolerance must be positive.")
        if self.integrality_tol <= 0.0 or self.integrality_tol >= 0.5:
            raise ValueError("Integrality tolerance must lie in (0, 0.5).")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1.")
        if self.max_nodes < 1:
            raise ValueError("max_nodes must be at least 1.")
        if self.pivot_rule not in _PIVOT_RULES:
            raise ValueError(
                f"Unsupported pivot rule '{self.pivot_rule}'. "
                f"Supported rules: {', '.join(_PIVOT_RULES)}."
            )
        if self.node_selection not in _NODE_SELECTIONS:
            raise ValueError(
                f"Unsupported node selection '{self.node_selection}'. "
                f"Supported strategies: {', '.join(_NODE_SELECTIONS)}."
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SolverConfig":
        """
        Build a configuration from ``SIMPLEXLAB_*`` environment variables.

        Recognised variables are ``SIMPLEXLAB_TOL``, ``SIMPLEXLAB_MAX_ITERATIONS``,
        ``SIMPLEXLAB_PIVOT_RULE``, ``SIMPLEXLAB_INTEGRALITY_TOL``,
        ``SIMPLEXLAB_MAX_NODES`` and ``SIMPLEXLAB_NODE_SELECTION``. Unset
        variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        casts = {
            "tol": float,
            "max_iterations": int,
            "pivot_rule": str,
            "integrality_tol": float,
            "max_nodes": int,
            "node_selection": str,
        }
        for field_name, cast in casts.items():
            raw = env.get(_ENV_PREFIX + field_name.upper())
            if raw is None or raw == "":
                continue
            try:
                kwargs[field_name] = cast(raw.strip().lower() if cast is str else raw)
            except ValueError as exc:
                raise ValueError(
                    f"Invalid value for {_ENV_PREFIX + field_name.upper()}: {raw!r}"
                ) from exc
        return cls(**kwargs)  # type: ignore[arg-type]


def default_config() -> SolverConfig:
    """Return the default solver configuration."""
    return SolverConfig()


__all__ = ["SolverConfig", "default_config"]
