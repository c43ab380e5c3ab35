"""Connectivity analysis: trigger placement, orphaned and unreachable nodes."""

from __future__ import annotations

from collections.abc import Sequence

from flowguard.schemas.validation import IssueCode, ValidationIssue
from flowguard.schemas.workflow import Edge, Node
from flowguard.services.workflow.algorithms import GraphAlgorithms
from flowguard.services.workflow.graph import build_graph
from flowguard.services.workflow.issues import IssueFactory


class ConnectivityAnalyzer:
    """Flags nodes that are wired in a way the workflow can never execute.

    Edges referencing unknown nodes do not count as connections; they are
    reported separately as dangling edges.

    Example:
        >>> analyzer = ConnectivityAnalyzer()
        >>> found = analyzer.analyze(nodes, edges, IssueFactory())
    """

    def analyze(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        graph = build_graph(nodes, edges)
        found: list[ValidationIssue] = []

        for node in nodes:
            has_incoming = bool(graph.get_predecessors(node.id))
            has_outgoing = graph.get_out_degree(node.id) > 0

            if node.is_trigger:
                if has_incoming:
                    found.append(
                        issues.warning(
                            IssueCode.TRIGGER_HAS_INCOMING,
                            "Trigger nodes should not have incoming connections",
                            node_id=node.id,
                            suggestion="Triggers start workflows - remove incoming connections",
                        )
                    )
                if not has_outgoing:
                    found.append(
                        issues.warning(
                            IssueCode.TRIGGER_NOT_CONNECTED,
                            "Trigger is not connected to any other node",
                            node_id=node.id,
                            suggestion="Connect this trigger to an action or control node",
                        )
                    )
            elif not has_incoming:
                found.append(
                    issues.warning(
                        IssueCode.ORPHANED_NODE,
                        "Node is not connected to the workflow",
                        node_id=node.id,
                        suggestion="Connect this node to a trigger or another node",
                    )
                )

        # One multi-source traversal from every trigger at once
        reachable = GraphAlgorithms.find_reachable_from(
            graph, (node.id for node in nodes if node.is_trigger)
        )

        for node in nodes:
            if not node.is_trigger and node.id not in reachable:
                found.append(
                    issues.warning(
                        IssueCode.UNREACHABLE_NODE,
                        "Node is unreachable from any trigger",
                        node_id=node.id,
                        suggestion="Connect this node to the main workflow path",
                    )
                )

        return found


__all__ = ["ConnectivityAnalyzer"]
