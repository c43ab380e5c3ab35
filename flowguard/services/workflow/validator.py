"""Workflow validation service.

This module provides the WorkflowValidator, which runs every check over
an editor graph and consolidates the findings into one ValidationResult:
structure, node fields, edges, connectivity, cycles and expression
references. Findings are data; a well-formed but broken graph never
raises.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from flowguard.core.logging import get_logger
from flowguard.schemas.validation import (
    IssueCode,
    IssueSeverity,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
)
from flowguard.schemas.workflow import Edge, Node, Workflow, coerce_edges, coerce_nodes
from flowguard.services.workflow.algorithms import GraphAlgorithms
from flowguard.services.workflow.catalog import NodeSchemaCatalog, default_catalog
from flowguard.services.workflow.connectivity import ConnectivityAnalyzer
from flowguard.services.workflow.dag import get_topological_order
from flowguard.services.workflow.exceptions import format_cycle
from flowguard.services.workflow.expressions import ExpressionChecker
from flowguard.services.workflow.graph import Graph, build_graph
from flowguard.services.workflow.issues import IssueFactory, get_validation_summary
from flowguard.services.workflow.schema_validator import NodeSchemaValidator

logger = get_logger(__name__)


class WorkflowValidator:
    """Standalone workflow validation service.

    The validator is stateless between calls: every pass creates its own
    IssueFactory, so one instance can be shared freely.

    Example:
        >>> validator = WorkflowValidator(default_catalog())
        >>> result = validator.validate_workflow(nodes, edges)
        >>> if result.valid:
        ...     print("Workflow is valid!")
    """

    def __init__(
        self,
        catalog: NodeSchemaCatalog,
        options: ValidationOptions | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            catalog: Node type schemas used for field checks.
            options: Validation options. Defaults are taken from settings.
        """
        self.catalog = catalog
        self.options = options if options is not None else ValidationOptions()
        self._schema_validator = NodeSchemaValidator(catalog)
        self._connectivity = ConnectivityAnalyzer()
        self._expressions = ExpressionChecker()

    def validate(self, workflow: Workflow) -> ValidationResult:
        """Validate a Workflow model."""
        return self.validate_workflow(workflow.nodes, workflow.edges)

    def validate_workflow(
        self,
        nodes: Sequence[Node | dict[str, Any]],
        edges: Sequence[Edge | dict[str, Any]],
    ) -> ValidationResult:
        """Validate an editor graph.

        Runs, in order: structure, node fields, edges, connectivity, cycle
        detection and, when enabled, expression references. The execution
        order is filled in whenever the graph is acyclic, regardless of
        other errors.

        Args:
            nodes: Nodes as models or raw editor dicts.
            edges: Edges as models or raw editor dicts.

        Returns:
            ValidationResult with every issue found.

        Raises:
            pydantic.ValidationError: If a node or edge dict has the wrong shape.
        """
        start_time = datetime.now(UTC)
        node_models = coerce_nodes(list(nodes))
        edge_models = coerce_edges(list(edges))
        issues = IssueFactory()
        found: list[ValidationIssue] = []

        if not node_models:
            found.append(
                issues.error(
                    IssueCode.EMPTY_WORKFLOW,
                    "Workflow is empty",
                    suggestion="Add at least one trigger node to start your workflow",
                )
            )
            return self._build_result(found, None, node_models, edge_models, start_time)

        graph = build_graph(node_models, edge_models)

        # Structure
        found.extend(self._validate_structure(node_models, edge_models, issues))

        # Node fields and edges
        found.extend(self._schema_validator.validate_nodes(node_models, issues))
        found.extend(
            self._schema_validator.validate_edges(node_models, edge_models, issues)
        )

        # Connectivity
        found.extend(self._connectivity.analyze(node_models, edge_models, issues))

        # Cycles
        found.extend(self._validate_dag(graph, issues))

        # Expression references
        if self.options.check_expressions:
            found.extend(self._expressions.check(node_models, issues))

        topology = get_topological_order(node_models, edge_models)
        execution_order = topology.order if topology.success else None

        return self._build_result(
            found, execution_order, node_models, edge_models, start_time
        )

    def _validate_structure(
        self,
        nodes: list[Node],
        edges: list[Edge],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        """Trigger count and size limits."""
        found: list[ValidationIssue] = []
        trigger_count = sum(1 for node in nodes if node.is_trigger)

        if trigger_count == 0:
            found.append(
                issues.error(
                    IssueCode.NO_TRIGGER,
                    "Workflow must have a trigger",
                    suggestion="Add a Webhook, Schedule, or Manual trigger node",
                )
            )
        elif trigger_count > 1:
            found.append(
                issues.warning(
                    IssueCode.MULTIPLE_TRIGGERS,
                    f"Workflow has {trigger_count} trigger nodes",
                    suggestion=(
                        "Consider using a single trigger for clarity, "
                        "or use parallel execution"
                    ),
                    details={"trigger_count": trigger_count},
                )
            )

        if len(nodes) > self.options.max_nodes:
            found.append(
                issues.warning(
                    IssueCode.GRAPH_TOO_LARGE,
                    "Workflow exceeds maximum node limit",
                    details={
                        "current": len(nodes),
                        "limit": self.options.max_nodes,
                        "metric": "nodes",
                    },
                )
            )

        if len(edges) > self.options.max_edges:
            found.append(
                issues.warning(
                    IssueCode.GRAPH_TOO_LARGE,
                    "Workflow exceeds maximum edge limit",
                    details={
                        "current": len(edges),
                        "limit": self.options.max_edges,
                        "metric": "edges",
                    },
                )
            )

        return found

    def _validate_dag(
        self,
        graph: Graph[str],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        """One CYCLE_DETECTED error per witness cycle."""
        return [
            issues.error(
                IssueCode.CYCLE_DETECTED,
                f"Cycle detected: {format_cycle(cycle)}",
                node_id=cycle[-1],
                suggestion="Remove one of the connections to break the cycle",
                details={"cycle_path": cycle},
            )
            for cycle in GraphAlgorithms.detect_cycles(graph)
        ]

    def _build_result(
        self,
        found: list[ValidationIssue],
        execution_order: list[str] | None,
        nodes: list[Node],
        edges: list[Edge],
        start_time: datetime,
    ) -> ValidationResult:
        duration_ms = (datetime.now(UTC) - start_time).total_seconds() * 1000

        result = ValidationResult(
            valid=not any(issue.severity == IssueSeverity.ERROR for issue in found),
            issues=found,
            execution_order=execution_order,
            node_count=len(nodes),
            edge_count=len(edges),
            validation_duration_ms=duration_ms,
        )

        logger.debug(
            f"Workflow validated: {get_validation_summary(result)}",
            extra={
                "context": {
                    "node_count": result.node_count,
                    "edge_count": result.edge_count,
                    "issue_count": len(found),
                    "valid": result.valid,
                    "duration_ms": round(duration_ms, 3),
                }
            },
        )

        return result


def validate_workflow(
    nodes: Sequence[Node | dict[str, Any]],
    edges: Sequence[Edge | dict[str, Any]],
    catalog: NodeSchemaCatalog | None = None,
    options: ValidationOptions | None = None,
) -> ValidationResult:
    """Validate an editor graph with the default catalog unless one is given.

    Example:
        >>> result = validate_workflow([], [])
        >>> [issue.message for issue in result.issues]
        ['Workflow is empty']
    """
    if catalog is None:
        catalog = default_catalog()
    return WorkflowValidator(catalog, options).validate_workflow(nodes, edges)


__all__ = [
    "WorkflowValidator",
    "validate_workflow",
]
