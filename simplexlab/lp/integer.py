"""
Branch-and-bound for integer and mixed-integer linear programs.

Every node of the search owns a full :class:`LinearProgram`: its parent's
problem plus one bound constraint ``x_j <= floor(v)`` or ``x_j >= ceil(v)``.
Nodes live in an arena (:class:`BranchAndBoundTree`) and refer to each other
by integer id, which keeps the tree free of reference cycles and makes it easy
to serialize with :meth:`BranchAndBoundTree.to_records`.

Example:
    >>> from simplexlab.lp import Constraint, LinearProgram
    >>> from simplexlab.lp.integer import branch_and_bound
    >>> lp = LinearProgram(
    ...     objective=(5.0, 4.0),
    ...     constraints=(
    ...         Constraint((6.0, 4.0), "<=", 24.0),
    ...         Constraint((1.0, 2.0), "<=", 6.0),
    ...     ),
    ...     integer_variables=frozenset({0, 1}),
    ... )
    >>> result = branch_and_bound(lp)
    >>> result.fun
    20.0
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .core import (
    Constraint,
    LinearProgram,
    Operator,
    Status,
    fractional_distance,
)
from .primal import simplex
from ..config import SolverConfig
from ..logging import get_logger

_logger = get_logger("lp.integer")


class NodeStatus(Enum):
    PENDING = "pending"
    SOLVED_INTEGER = "solved-integer"
    SOLVED_FRACTIONAL = "solved-fractional"
    INFEASIBLE = "infeasible"
    PRUNED = "pruned"


@dataclass
class BranchNode:
    """
    One node of the search tree.

    Attributes:
        id: Position of the node in its tree.
        problem: LP relaxation solved at this node.
        depth: Distance from the root.
        parent: Id of the parent node (``None`` for the root).
        children: Ids of the two children once the node is branched.
        status: Current :class:`NodeStatus`.
        bound: Relaxation objective of the parent; ``None`` for the root.
        branch_variable: Variable whose bound created this node.
        branch_direction: ``"down"`` for ``x <= floor(v)``, ``"up"`` for ``x >= ceil(v)``.
        values: Relaxation solution, once solved and feasible.
        objective: Relaxation objective, once solved and feasible.
        reason: Why the node ended in its status.
    """

    id: int
    problem: LinearProgram
    depth: int = 0
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    status: NodeStatus = NodeStatus.PENDING
    bound: Optional[float] = None
    branch_variable: Optional[int] = None
    branch_direction: Optional[str] = None
    values: Optional[np.ndarray] = None
    objective: Optional[float] = None
    reason: str = ""


class BranchAndBoundTree:
    """Arena of :class:`BranchNode` objects indexed by id."""

    def __init__(self) -> None:
        self._nodes: List[BranchNode] = []

    def add(
        self,
        problem: LinearProgram,
        parent: Optional[int] = None,
        bound: Optional[float] = None,
        branch_variable: Optional[int] = None,
        branch_direction: Optional[str] = None,
    ) -> BranchNode:
        depth = 0 if parent is None else self._nodes[parent].depth + 1
        node = BranchNode(
            id=len(self._nodes),
            problem=problem,
            depth=depth,
            parent=parent,
            bound=bound,
            branch_variable=branch_variable,
            branch_direction=branch_direction,
        )
        self._nodes.append(node)
        if parent is not None:
            self._nodes[parent].children.append(node.id)
        return node

    def __getitem__(self, node_id: int) -> BranchNode:
        return self._nodes[node_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[BranchNode]:
        return iter(self._nodes)

    @property
    def root(self) -> BranchNode:
        return self._nodes[0]

    def path_to(self, node_id: int) -> List[int]:
        """Ids from the root down to ``node_id``."""
        path = []
        current: Optional[int] = node_id
        while current is not None:
            path.append(current)
            current = self._nodes[current].parent
        return path[::-1]

    def to_records(self) -> List[Dict[str, object]]:
        """Plain-data view of every node, suitable for JSON serialization."""
        records = []
        for node in self._nodes:
            records.append(
                {
                    "id": node.id,
                    "parent": node.parent,
                    "children": list(node.children),
                    "depth": node.depth,
                    "status": node.status.value,
                    "bound": node.bound,
                    "branch_variable": node.branch_variable,
                    "branch_direction": node.branch_direction,
                    "num_constraints": node.problem.num_constraints,
                    "values": None if node.values is None else [float(v) for v in node.values],
                    "objective": node.objective,
                    "reason": node.reason,
                }
            )
        return records


@dataclass(frozen=True)
class BranchStep:
    """
    Trace record of the search.

    ``action`` is one of ``select``, ``solve``, ``branch``, ``prune``,
    ``update_incumbent`` and ``finish``.
    """

    action: str
    node_id: Optional[int]
    explanation: str
    incumbent_objective: Optional[float] = None


@dataclass
class BranchAndBoundResult:
    """
    Outcome of :func:`branch_and_bound`.

    Attributes:
        status: ``OPTIMAL`` when an integer point was found, ``INFEASIBLE``
            when none exists (or none was found before the node limit) and
            ``UNBOUNDED`` when the root relaxation is unbounded.
        x: Best integer point, integer variables rounded exactly.
        fun: Objective at ``x`` in the problem's direction.
        tree: The full search tree.
        trace: Ordered :class:`BranchStep` records.
        incumbent: Id of the node that produced ``x``.
        message: Human-readable summary.
        node_limit_reached: True if the search stopped at ``max_nodes``.
    """

    status: Status
    x: Optional[np.ndarray]
    fun: Optional[float]
    tree: BranchAndBoundTree
    trace: List[BranchStep]
    incumbent: Optional[int] = None
    message: str = ""
    node_limit_reached: bool = False


def _branching_variable(
    values: np.ndarray, integer_variables, tol: float
) -> Optional[int]:
    best: Optional[int] = None
    best_distance = tol
    for j in sorted(integer_variables):
        distance = fractional_distance(values[j])
        if distance > best_distance:
            best, best_distance = j, distance
    return best


def _bound_constraint(n: int, index: int, operator: Operator, rhs: float) -> Constraint:
    coefficients = [0.0] * n
    coefficients[index] = 1.0
    return Constraint(tuple(coefficients), operator, rhs)


def branch_and_bound(
    lp: LinearProgram,
    config: Optional[SolverConfig] = None,
) -> BranchAndBoundResult:
    """
    Solve ``lp`` with its ``integer_variables`` restricted to integers.

    The relaxation of every node is solved with :func:`simplexlab.lp.simplex`.
    A node whose parent bound cannot beat the incumbent is pruned without
    being solved; a solved node whose relaxation cannot beat it is pruned
    before its integrality is checked. Fractional nodes branch on the most
    fractional integer variable (lowest index on ties). Among integer points
    with equal objective the first one found is kept.

    Args:
        lp: Problem to solve; variables outside ``integer_variables`` stay
            continuous.
        config: Solver settings (``integrality_tol``, ``max_nodes``,
            ``node_selection`` and the simplex settings used per node).

    Returns:
        :class:`BranchAndBoundResult`.
    """
    config = config or SolverConfig()
    sense = 1.0 if lp.maximize else -1.0
    tree = BranchAndBoundTree()
    trace: List[BranchStep] = []
    root = tree.add(lp)

    frontier: List[Tuple[Tuple[float, float], int, int]] = []
    counter = 0

    def push(node: BranchNode) -> None:
        nonlocal counter
        if config.node_selection == "depth_first":
            key = (-float(node.depth), float(counter))
        else:
            score = math.inf if node.bound is None else sense * node.bound
            key = (-score, float(counter))
        heapq.heappush(frontier, (key, counter, node.id))
        counter += 1

    push(root)
    incumbent: Optional[int] = None
    incumbent_score = -math.inf
    node_limit_reached = False

    def incumbent_objective() -> Optional[float]:
        return None if incumbent is None else tree[incumbent].objective

    def record(action: str, node_id: Optional[int], text: str) -> None:
        trace.append(BranchStep(action, node_id, text, incumbent_objective()))

    while frontier:
        _, _, node_id = heapq.heappop(frontier)
        node = tree[node_id]
        bound_text = "none" if node.bound is None else f"{node.bound:.6g}"
        record(
            "select",
            node_id,
            f"Node {node_id} selected (depth {node.depth}, parent bound {bound_text}).",
        )

        if (
            incumbent is not None
            and node.bound is not None
            and sense * node.bound <= incumbent_score + config.tol
        ):
            node.status = NodeStatus.PRUNED
            node.reason = "Parent bound cannot beat the incumbent"
            record("prune", node_id, f"Node {node_id} pruned: {node.reason.lower()}.")
            _logger.debug("Node %d pruned by parent bound", node_id)
            continue

        result = simplex(node.problem, config=config)
        if result.status is Status.INFEASIBLE:
            node.status = NodeStatus.INFEASIBLE
            node.reason = "LP relaxation is infeasible"
            record("solve", node_id, f"Node {node_id}: relaxation infeasible.")
            _logger.debug("Node %d infeasible", node_id)
            continue
        if result.status is Status.UNBOUNDED:
            node.reason = "LP relaxation is unbounded"
            record("solve", node_id, f"Node {node_id}: relaxation unbounded.")
            _logger.info("Relaxation of node %d is unbounded", node_id)
            trace.append(BranchStep("finish", None, "The relaxation is unbounded.", None))
            return BranchAndBoundResult(
                status=Status.UNBOUNDED,
                x=None,
                fun=None,
                tree=tree,
                trace=trace,
                message="LP relaxation is unbounded",
            )

        node.values = result.x
        node.objective = result.fun
        score = sense * result.fun
        record(
            "solve",
            node_id,
            f"Node {node_id}: relaxation objective {result.fun:.6g} at "
            f"{np.round(result.x, 6).tolist()}.",
        )

        if incumbent is not None and score <= incumbent_score + config.tol:
            node.status = NodeStatus.PRUNED
            node.reason = "Relaxation cannot beat the incumbent"
            record("prune", node_id, f"Node {node_id} pruned: {node.reason.lower()}.")
            _logger.debug("Node %d pruned by its relaxation", node_id)
            continue

        j = _branching_variable(result.x, lp.integer_variables, config.integrality_tol)
        if j is None:
            node.status = NodeStatus.SOLVED_INTEGER
            node.reason = "Integer-feasible relaxation"
            incumbent, incumbent_score = node_id, score
            trace.append(
                BranchStep(
                    "update_incumbent",
                    node_id,
                    f"Node {node_id} is integer feasible; new incumbent {result.fun:.6g}.",
                    result.fun,
                )
            )
            _logger.debug("New incumbent %.6g at node %d", result.fun, node_id)
            continue

        node.status = NodeStatus.SOLVED_FRACTIONAL
        if len(tree) + 2 > config.max_nodes:
            node_limit_reached = True
            node.reason = "Node limit reached before branching"
            _logger.warning(
                "Branch-and-bound stopped after %d nodes (max_nodes=%d)",
                len(tree),
                config.max_nodes,
            )
            record("finish", node_id, "Node limit reached; search stopped.")
            break

        value = float(result.x[j])
        name = lp.variables[j]
        n = lp.num_variables
        down = tree.add(
            node.problem.with_constraint(_bound_constraint(n, j, Operator.LE, math.floor(value))),
            parent=node_id,
            bound=result.fun,
            branch_variable=j,
            branch_direction="down",
        )
        up = tree.add(
            node.problem.with_constraint(_bound_constraint(n, j, Operator.GE, math.ceil(value))),
            parent=node_id,
            bound=result.fun,
            branch_variable=j,
            branch_direction="up",
        )
        node.reason = f"Branched on {name} = {value:.6g}"
        push(down)
        push(up)
        record(
            "branch",
            node_id,
            f"Branch on {name} = {value:.6g}: node {down.id} adds {name} ≤ "
            f"{math.floor(value)}, node {up.id} adds {name} ≥ {math.ceil(value)}.",
        )

    if incumbent is None:
        if root.status is NodeStatus.INFEASIBLE:
            message = "LP relaxation is infeasible"
        elif node_limit_reached:
            message = "Node limit reached before an integer point was found"
        else:
            message = "No integer-feasible point exists"
        if not node_limit_reached:
            trace.append(BranchStep("finish", None, message + ".", None))
        _logger.info("Branch-and-bound finished without incumbent: %s", message)
        return BranchAndBoundResult(
            status=Status.INFEASIBLE,
            x=None,
            fun=None,
            tree=tree,
            trace=trace,
            message=message,
            node_limit_reached=node_limit_reached,
        )

    x = np.array(tree[incumbent].values, dtype=float)
    for j in lp.integer_variables:
        x[j] = float(round(x[j]))
    fun = lp.evaluate(x)
    if not node_limit_reached:
        trace.append(
            BranchStep(
                "finish",
                incumbent,
                f"Search complete: optimal integer objective {fun:.6g} at node {incumbent}.",
                fun,
            )
        )
    _logger.info("Branch-and-bound optimum %.6g after %d nodes", fun, len(tree))
    return BranchAndBoundResult(
        status=Status.OPTIMAL,
        x=x + 0.0,
        fun=fun,
        tree=tree,
        trace=trace,
        incumbent=incumbent,
        message=(
            "Node limit reached; best integer point found so far"
            if node_limit_reached
            else "Integer optimum found"
        ),
        node_limit_reached=node_limit_reached,
    )


__all__ = [
    "NodeStatus",
    "BranchNode",
    "BranchAndBoundTree",
    "BranchStep",
    "BranchAndBoundResult",
    "branch_and_bound",
]
