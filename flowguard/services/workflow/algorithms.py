"""Graph algorithms for DAG validation and topology analysis.

This module provides the graph algorithms behind workflow validation:
- Cycle detection using iterative DFS with three-state coloring
- Proposed-edge cycle check using BFS
- Topological sort using Kahn's algorithm
- Reachability analysis using multi-source BFS

Time Complexity:
- Cycle detection: O(V + E), plus the size of the reported cycle paths
- Topological sort: O(V + E)
- Reachability: O(V + E)

Space Complexity: O(V + E) for all algorithms.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable, Iterable, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

from flowguard.services.workflow.exceptions import CycleDetectedError

if TYPE_CHECKING:
    from flowguard.services.workflow.graph import Graph

NodeId = TypeVar("NodeId", bound=Hashable)

# DFS node states
WHITE = 0  # not visited
GRAY = 1  # on the current DFS path
BLACK = 2  # fully explored


class GraphAlgorithms(Generic[NodeId]):
    """Collection of graph algorithms for DAG validation.

    All methods are static and operate on the Graph data structure. None
    of them modify the graph.

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("a", "b")
        >>> graph.add_edge("b", "a")
        >>> GraphAlgorithms.detect_cycles(graph)
        [['a', 'b', 'a']]
    """

    @staticmethod
    def detect_cycles(graph: Graph[NodeId]) -> list[list[NodeId]]:
        """Find one witness cycle per back edge using iterative DFS.

        A DFS is started from every unvisited node in insertion order and
        successors are followed in edge order. An edge into a GRAY node
        (one on the current path) closes a cycle, which is read off the
        current path. An edge into a BLACK node is pruned. Each node turns
        BLACK once its successors are exhausted, so no explored subgraph is
        walked twice.

        The result is not an enumeration of every simple cycle: nested
        cycles sharing nodes may be reported through a single witness.

        Args:
            graph: The graph to check for cycles.

        Returns:
            Cycles in discovery order. Each cycle starts and ends with the
            node that closes it; a self-loop is ``[v, v]``. Empty if the
            graph is acyclic.

        Time Complexity: O(V + E)
        Space Complexity: O(V)

        Example:
            >>> graph = Graph[str]()
            >>> graph.add_edge("a", "b")
            >>> graph.add_edge("b", "c")
            >>> graph.add_edge("c", "a")
            >>> GraphAlgorithms.detect_cycles(graph)
            [['a', 'b', 'c', 'a']]
        """
        color: dict[NodeId, int] = dict.fromkeys(graph.nodes, WHITE)
        cycles: list[list[NodeId]] = []
        seen: set[tuple[NodeId, ...]] = set()

        for root in graph.nodes:
            if color[root] != WHITE:
                continue

            color[root] = GRAY
            path: list[NodeId] = [root]
            position: dict[NodeId, int] = {root: 0}
            stack: list[tuple[NodeId, Iterator[NodeId]]] = [
                (root, iter(graph.get_successors(root)))
            ]

            while stack:
                node, successors = stack[-1]
                for neighbor in successors:
                    state = color.get(neighbor, WHITE)
                    if state == WHITE:
                        color[neighbor] = GRAY
                        position[neighbor] = len(path)
                        path.append(neighbor)
                        stack.append((neighbor, iter(graph.get_successors(neighbor))))
                        break
                    if state == GRAY:
                        cycle = [*path[position[neighbor] :], neighbor]
                        # Parallel edges would report the same back edge twice
                        key = tuple(cycle)
                        if key not in seen:
                            seen.add(key)
                            cycles.append(cycle)
                else:
                    stack.pop()
                    path.pop()
                    del position[node]
                    color[node] = BLACK

        return cycles

    @staticmethod
    def detect_cycle(graph: Graph[NodeId]) -> list[NodeId] | None:
        """Return the first witness cycle, or None if the graph is acyclic."""
        cycles = GraphAlgorithms.detect_cycles(graph)
        return cycles[0] if cycles else None

    @staticmethod
    def detect_cycle_with_proposed_edge(
        graph: Graph[NodeId],
        source: NodeId,
        target: NodeId,
    ) -> list[NodeId] | None:
        """Check if adding an edge would create a cycle.

        Instead of checking the entire graph, we only need to check if
        target can already reach source.

        Args:
            graph: The current graph structure (assumed acyclic).
            source: Source node of the proposed edge.
            target: Target node of the proposed edge.

        Returns:
            The cycle ``[source, target, ..., source]`` the edge would
            close, or None. A proposed self-loop yields ``[source, source]``.

        Time Complexity: O(V + E) worst case, often much faster
        Space Complexity: O(V)

        Example:
            >>> graph = Graph[str]()
            >>> graph.add_edge("a", "b")
            >>> graph.add_edge("b", "c")
            >>> GraphAlgorithms.detect_cycle_with_proposed_edge(graph, "c", "a")
            ['c', 'a', 'b', 'c']
        """
        parent: dict[NodeId, NodeId | None] = {target: None}
        queue: deque[NodeId] = deque([target])

        while queue:
            current = queue.popleft()

            if current == source:
                # Walk parents back from source to target
                reversed_path: list[NodeId] = []
                node: NodeId | None = source
                while node is not None:
                    reversed_path.append(node)
                    node = parent[node]
                reversed_path.reverse()
                return [source, *reversed_path]

            for neighbor in graph.get_successors(current):
                if neighbor not in parent:
                    parent[neighbor] = current
                    queue.append(neighbor)

        return None

    @staticmethod
    def topological_sort_levels(graph: Graph[NodeId]) -> list[list[NodeId]] | None:
        """Kahn's algorithm for level-based topological sort.

        Groups nodes by execution level: every node's predecessors are in
        earlier levels. Level 0 holds the nodes without incoming edges in
        insertion order.

        Args:
            graph: The graph to sort.

        Returns:
            List of levels, where each level is a list of node IDs.
            Returns None if graph contains a cycle.

        Time Complexity: O(V + E)
        Space Complexity: O(V + E)

        Example:
            >>> graph = Graph[str]()
            >>> graph.add_edge("a", "b")
            >>> graph.add_edge("a", "c")
            >>> graph.add_edge("b", "d")
            >>> graph.add_edge("c", "d")
            >>> GraphAlgorithms.topological_sort_levels(graph)
            [['a'], ['b', 'c'], ['d']]
        """
        in_degree: dict[NodeId, int] = {
            node: graph.get_in_degree(node) for node in graph.nodes
        }

        current_level: list[NodeId] = [
            node for node in graph.nodes if in_degree[node] == 0
        ]
        levels: list[list[NodeId]] = []
        processed = 0

        while current_level:
            levels.append(current_level)
            processed += len(current_level)
            next_level: list[NodeId] = []

            for node in current_level:
                # Reduce in-degree for all successors
                for successor in graph.get_successors(node):
                    in_degree[successor] -= 1
                    if in_degree[successor] == 0:
                        next_level.append(successor)

            current_level = next_level

        # Nodes on or behind a cycle never reach in-degree zero
        if processed < graph.node_count:
            return None

        return levels

    @staticmethod
    def topological_sort(graph: Graph[NodeId]) -> list[NodeId]:
        """Return a linear order consistent with every edge.

        Raises:
            CycleDetectedError: If the graph contains a cycle.
        """
        levels = GraphAlgorithms.topological_sort_levels(graph)
        if levels is None:
            cycle = GraphAlgorithms.detect_cycle(graph) or []
            raise CycleDetectedError([str(n) for n in cycle])

        return [node for level in levels for node in level]

    @staticmethod
    def find_reachable_from(
        graph: Graph[NodeId],
        start_nodes: Iterable[NodeId],
    ) -> set[NodeId]:
        """Find every node reachable from any start node using BFS.

        Start nodes are always part of the result.

        Time Complexity: O(V + E)
        Space Complexity: O(V)
        """
        reachable: set[NodeId] = set()
        queue: deque[NodeId] = deque()

        for start in start_nodes:
            if start not in reachable:
                reachable.add(start)
                queue.append(start)

        while queue:
            current = queue.popleft()
            for successor in graph.get_successors(current):
                if successor not in reachable:
                    reachable.add(successor)
                    queue.append(successor)

        return reachable


__all__ = [
    "GraphAlgorithms",
]
