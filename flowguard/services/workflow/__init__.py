"""Workflow graph validation package.

Components:
- Graph: Generic directed graph data structure
- GraphAlgorithms: Graph algorithm collection (cycle detection, topology)
- dag: Cycle detection, DAG check and topological order over editor graphs
- NodeSchemaCatalog: Node type schemas injected into the validators
- NodeSchemaValidator, ConnectivityAnalyzer, ExpressionChecker: Individual checks
- WorkflowValidator: Runs every check and builds one ValidationResult
- Exceptions: Programmer errors only; findings are returned as issues

Example:
    >>> from flowguard.services.workflow import WorkflowValidator, default_catalog
    >>> validator = WorkflowValidator(default_catalog())
    >>> result = validator.validate_workflow(nodes, edges)
"""

from flowguard.services.workflow.algorithms import GraphAlgorithms
from flowguard.services.workflow.catalog import (
    NodeSchemaCatalog,
    builtin_catalog,
    default_catalog,
    dump_catalog,
)
from flowguard.services.workflow.connectivity import ConnectivityAnalyzer
from flowguard.services.workflow.dag import (
    check_connection,
    detect_cycles,
    get_topological_order,
    is_valid_dag,
)
from flowguard.services.workflow.exceptions import (
    CycleDetectedError,
    DAGValidationError,
    SchemaCatalogError,
)
from flowguard.services.workflow.expressions import ExpressionChecker
from flowguard.services.workflow.graph import Graph, build_graph
from flowguard.services.workflow.issues import (
    IssueFactory,
    count_issues,
    filter_issues_by_severity,
    get_issues_for_node,
    get_validation_summary,
)
from flowguard.services.workflow.schema_validator import NodeSchemaValidator
from flowguard.services.workflow.validator import WorkflowValidator, validate_workflow

__all__ = [
    # Graph
    "Graph",
    "GraphAlgorithms",
    "build_graph",
    # DAG helpers
    "check_connection",
    "detect_cycles",
    "get_topological_order",
    "is_valid_dag",
    # Catalog
    "NodeSchemaCatalog",
    "builtin_catalog",
    "default_catalog",
    "dump_catalog",
    # Checks
    "ConnectivityAnalyzer",
    "ExpressionChecker",
    "NodeSchemaValidator",
    "WorkflowValidator",
    "validate_workflow",
    # Issues
    "IssueFactory",
    "count_issues",
    "filter_issues_by_severity",
    "get_issues_for_node",
    "get_validation_summary",
    # Exceptions
    "CycleDetectedError",
    "DAGValidationError",
    "SchemaCatalogError",
]
