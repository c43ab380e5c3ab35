"""DAG helpers over workflow nodes and edges.

Thin functions that build a Graph from editor nodes/edges and run the
graph algorithms on it. Nodes and edges may be passed as models or as
raw editor dicts.

Example:
    >>> nodes = [{"id": "A"}, {"id": "B"}]
    >>> edges = [{"source": "A", "target": "B"}, {"source": "B", "target": "A"}]
    >>> detect_cycles(nodes, edges)
    [['A', 'B', 'A']]
    >>> get_topological_order(nodes, edges).success
    False
"""

from __future__ import annotations

from typing import Any

from flowguard.core.logging import get_logger
from flowguard.schemas.validation import CycleCheckResult, TopologyResult
from flowguard.schemas.workflow import Edge, Node, coerce_edges, coerce_nodes
from flowguard.services.workflow.algorithms import GraphAlgorithms
from flowguard.services.workflow.exceptions import CycleDetectedError, format_cycle
from flowguard.services.workflow.graph import build_graph

logger = get_logger(__name__)

NodesArg = list[Node] | list[dict[str, Any]]
EdgesArg = list[Edge] | list[dict[str, Any]]


def detect_cycles(nodes: NodesArg, edges: EdgesArg) -> list[list[str]]:
    """Return one witness cycle per back edge found, in discovery order.

    Each cycle starts and ends at the node closing it; a self-loop is
    ``[v, v]``. Edges referencing unknown nodes are ignored.
    """
    graph = build_graph(coerce_nodes(nodes), coerce_edges(edges))
    return GraphAlgorithms.detect_cycles(graph)


def is_valid_dag(nodes: NodesArg, edges: EdgesArg) -> bool:
    """True iff the graph has no cycle (self-loops included)."""
    return len(detect_cycles(nodes, edges)) == 0


def get_topological_order(nodes: NodesArg, edges: EdgesArg) -> TopologyResult:
    """Compute an execution order consistent with every edge.

    Never raises for a cyclic graph: the failure is returned with an
    error naming a witness cycle and an empty order.
    """
    graph = build_graph(coerce_nodes(nodes), coerce_edges(edges))

    try:
        order = GraphAlgorithms.topological_sort(graph)
    except CycleDetectedError as exc:
        logger.debug(exc.message)
        return TopologyResult(
            success=False,
            order=[],
            error=exc.message,
            cycle=exc.cycle_path,
        )

    return TopologyResult(success=True, order=order)


def check_connection(
    nodes: NodesArg,
    edges: EdgesArg,
    source: str,
    target: str,
) -> CycleCheckResult:
    """Check whether drawing ``source -> target`` would close a cycle.

    Lightweight check for real-time canvas feedback before an edge is added.
    """
    graph = build_graph(coerce_nodes(nodes), coerce_edges(edges))
    cycle_path = GraphAlgorithms.detect_cycle_with_proposed_edge(graph, source, target)

    if cycle_path:
        return CycleCheckResult(
            has_cycle=True,
            cycle_path=cycle_path,
            cycle_description=(
                f"Cannot add connection: would create a cycle ({format_cycle(cycle_path)})"
            ),
        )

    return CycleCheckResult(has_cycle=False)


__all__ = [
    "check_connection",
    "detect_cycles",
    "get_topological_order",
    "is_valid_dag",
]
