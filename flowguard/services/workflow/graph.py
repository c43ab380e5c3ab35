"""Directed graph data structure for DAG operations.

This module provides a generic directed graph optimized for the
validation algorithms: cycle detection, topological sorting and
reachability analysis.

Nodes keep insertion order and successor lists keep edge order, so every
algorithm built on this graph is deterministic for a given input.

Time Complexity:
- Node/Edge addition: O(1)
- Successor/predecessor lookup: O(1)

Space Complexity: O(V + E)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Iterable, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from flowguard.schemas.workflow import Edge, Node

NodeId = TypeVar("NodeId", bound=Hashable)


class Graph(Generic[NodeId]):
    """Directed graph with forward and reverse adjacency lists.

    Type Parameters:
        NodeId: Hashable type used as node identifier (node IDs are strings).

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("a", "b")
        >>> graph.get_successors("a")
        ['b']
    """

    __slots__ = ("_adjacency", "_edge_count", "_nodes", "_reverse_adjacency")

    def __init__(self) -> None:
        """Initialize an empty directed graph."""
        self._adjacency: defaultdict[NodeId, list[NodeId]] = defaultdict(list)
        self._reverse_adjacency: defaultdict[NodeId, list[NodeId]] = defaultdict(list)
        # dict as an insertion-ordered set
        self._nodes: dict[NodeId, None] = {}
        self._edge_count: int = 0

    @property
    def node_count(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Get the number of edges in the graph."""
        return self._edge_count

    @property
    def nodes(self) -> list[NodeId]:
        """Nodes in insertion order."""
        return list(self._nodes)

    def add_node(self, node_id: NodeId) -> None:
        """Add a node to the graph.

        If the node already exists, this is a no-op.
        """
        self._nodes.setdefault(node_id, None)

    def add_edge(self, source: NodeId, target: NodeId) -> None:
        """Add a directed edge from source to target.

        Both nodes are added to the graph if they don't exist.
        Duplicate edges are allowed (reported by the edge validator).
        """
        self.add_node(source)
        self.add_node(target)
        self._adjacency[source].append(target)
        self._reverse_adjacency[target].append(source)
        self._edge_count += 1

    def get_successors(self, node_id: NodeId) -> list[NodeId]:
        """Get all successor nodes (outgoing neighbors), in edge order.

        Returns:
            List of successor node IDs. Empty list if node has no successors.
        """
        return self._adjacency.get(node_id, [])

    def get_predecessors(self, node_id: NodeId) -> list[NodeId]:
        """Get all predecessor nodes (incoming neighbors), in edge order.

        Returns:
            List of predecessor node IDs. Empty list if node has no predecessors.
        """
        return self._reverse_adjacency.get(node_id, [])

    def get_in_degree(self, node_id: NodeId) -> int:
        """Get the number of incoming edges for a node."""
        return len(self._reverse_adjacency.get(node_id, []))

    def get_out_degree(self, node_id: NodeId) -> int:
        """Get the number of outgoing edges for a node."""
        return len(self._adjacency.get(node_id, []))

    def __contains__(self, node_id: object) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __len__(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    def __repr__(self) -> str:
        """Return string representation of the graph."""
        return f"Graph(nodes={self.node_count}, edges={self.edge_count})"


def build_graph(nodes: Iterable[Node], edges: Iterable[Edge]) -> Graph[str]:
    """Build a Graph from workflow nodes and edges.

    Every node ID is added first so isolated nodes are present. Edges
    whose source or target is not a node are skipped; the edge validator
    reports them as dangling.
    """
    graph = Graph[str]()

    for node in nodes:
        graph.add_node(node.id)

    for edge in edges:
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target)

    return graph


__all__ = [
    "Graph",
    "build_graph",
]
