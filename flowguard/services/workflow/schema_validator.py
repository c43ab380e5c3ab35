"""Node and edge validation against the node type schema catalog.

Node fields are checked against the descriptors of the node's type:
required-ness, declared type, pattern, numeric bounds, length bounds and
JSON syntax. Edges are checked for dangling references, self-loops and
duplicates. All findings are returned as issues.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from flowguard.core.logging import get_logger
from flowguard.schemas.node_schema import FieldSchema, FieldType
from flowguard.schemas.validation import IssueCode, ValidationIssue
from flowguard.schemas.workflow import Edge, FieldValue, Node, ValueKind
from flowguard.services.workflow.catalog import NodeSchemaCatalog
from flowguard.services.workflow.issues import IssueFactory

logger = get_logger(__name__)

EXPRESSION_MARKER = "{{"


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning(f"Invalid validation pattern {pattern!r} in catalog: {exc}")
        return None


def _fmt(number: float) -> str:
    """Render 1.0 as '1' and 0.5 as '0.5'."""
    return str(int(number)) if float(number).is_integer() else str(number)


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON."""
    raise ValueError(f"{name} is not a valid JSON value")


def _json_error_position(exc: ValueError) -> dict[str, Any]:
    if isinstance(exc, json.JSONDecodeError):
        return {"line": exc.lineno, "column": exc.colno}
    return {}


def suggest_label(node_type: str) -> str:
    """Derive a display name from a node type: 'slack_send_message' -> 'Slack Send Message'."""
    words = re.split(r"[_\-\s]+", node_type.strip())
    return " ".join(w.capitalize() for w in words if w) or "Node"


class NodeSchemaValidator:
    """Validates nodes and edges; the catalog is injected, never looked up globally."""

    def __init__(self, catalog: NodeSchemaCatalog) -> None:
        self.catalog = catalog

    # ==========================================================================
    # Nodes
    # ==========================================================================

    def validate_nodes(
        self,
        nodes: Sequence[Node],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        found: list[ValidationIssue] = []

        for node in nodes:
            schema = self.catalog.get(node.node_type)
            # Unknown node types have no field constraints
            if schema is not None:
                for field in schema.fields:
                    found.extend(self._validate_field(node, field, issues))

            if node.label is None or not node.label.strip():
                found.append(
                    issues.warning(
                        IssueCode.MISSING_LABEL,
                        "Node has no name",
                        node_id=node.id,
                        field="label",
                        suggestion="Add a descriptive name to help identify this node",
                        auto_fixable=True,
                        details={"suggested_label": suggest_label(node.node_type)},
                    )
                )

        id_counts = Counter(node.id for node in nodes)
        for node_id, count in id_counts.items():
            if count > 1:
                found.append(
                    issues.error(
                        IssueCode.DUPLICATE_NODE_ID,
                        "Duplicate node ID detected",
                        node_id=node_id,
                        suggestion="This is a system error. Please reload the workflow.",
                        details={"count": count},
                    )
                )

        return found

    def _validate_field(
        self,
        node: Node,
        field: FieldSchema,
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        value = node.field_value(field.name)

        if value.is_empty:
            if field.required:
                return [
                    issues.error(
                        IssueCode.REQUIRED_FIELD,
                        f"{field.label} is required",
                        node_id=node.id,
                        field=field.name,
                        suggestion=f"Enter a value for {field.label}",
                        auto_fixable=field.has_default,
                    )
                ]
            return []

        type_issue = self._check_declared_type(node, field, value, issues)
        if type_issue is not None:
            return [type_issue]

        found: list[ValidationIssue] = []
        rules = field.validation

        if rules is not None:
            if rules.pattern is not None and value.is_string:
                regex = _compile_pattern(rules.pattern)
                if regex is not None and not regex.search(value.value):
                    found.append(
                        issues.error(
                            IssueCode.INVALID_FORMAT,
                            f"{field.label} has invalid format",
                            node_id=node.id,
                            field=field.name,
                            suggestion=f"Check the format of {field.label}",
                            details={"pattern": rules.pattern},
                        )
                    )

            if value.is_number:
                if rules.min is not None and value.value < rules.min:
                    found.append(
                        issues.error(
                            IssueCode.VALUE_OUT_OF_RANGE,
                            f"{field.label} must be at least {_fmt(rules.min)}",
                            node_id=node.id,
                            field=field.name,
                            suggestion=f"Increase {field.label} to at least {_fmt(rules.min)}",
                            auto_fixable=True,
                            details={"min": rules.min},
                        )
                    )
                if rules.max is not None and value.value > rules.max:
                    found.append(
                        issues.error(
                            IssueCode.VALUE_OUT_OF_RANGE,
                            f"{field.label} must be at most {_fmt(rules.max)}",
                            node_id=node.id,
                            field=field.name,
                            suggestion=f"Reduce {field.label} to at most {_fmt(rules.max)}",
                            auto_fixable=True,
                            details={"max": rules.max},
                        )
                    )

            if value.is_string:
                length = len(value.value)
                if rules.min_length is not None and length < rules.min_length:
                    found.append(
                        issues.error(
                            IssueCode.LENGTH_OUT_OF_RANGE,
                            f"{field.label} must be at least {rules.min_length} characters",
                            node_id=node.id,
                            field=field.name,
                            details={"min_length": rules.min_length},
                        )
                    )
                if rules.max_length is not None and length > rules.max_length:
                    found.append(
                        issues.error(
                            IssueCode.LENGTH_OUT_OF_RANGE,
                            f"{field.label} must be at most {rules.max_length} characters",
                            node_id=node.id,
                            field=field.name,
                            details={"max_length": rules.max_length},
                        )
                    )

        if field.type == FieldType.JSON.value and value.is_string and value.value.strip():
            try:
                json.loads(value.value, parse_constant=_reject_constant)
            except ValueError as exc:
                found.append(
                    issues.error(
                        IssueCode.INVALID_JSON,
                        f"{field.label} contains invalid JSON",
                        node_id=node.id,
                        field=field.name,
                        suggestion="Check JSON syntax - ensure proper quoting and brackets",
                        details=_json_error_position(exc),
                    )
                )

        return found

    def _check_declared_type(
        self,
        node: Node,
        field: FieldSchema,
        value: FieldValue,
        issues: IssueFactory,
    ) -> ValidationIssue | None:
        """Reject values whose tag contradicts the field's declared type.

        Expression strings are accepted for typed fields; they are
        resolved at execution time.
        """
        if value.is_string and EXPRESSION_MARKER in value.value:
            return None

        expected: ValueKind | None = None
        if field.type == FieldType.NUMBER.value:
            expected = ValueKind.NUMBER
        elif field.type == FieldType.BOOLEAN.value:
            expected = ValueKind.BOOLEAN

        if expected is None or value.kind == expected:
            return None

        return issues.error(
            IssueCode.INVALID_FIELD_TYPE,
            f"{field.label} must be a {expected.value}",
            node_id=node.id,
            field=field.name,
            suggestion=f"Enter a {expected.value} for {field.label}",
            details={"expected": expected.value, "actual": value.kind.value},
        )

    # ==========================================================================
    # Edges
    # ==========================================================================

    def validate_edges(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        found: list[ValidationIssue] = []
        node_ids = {node.id for node in nodes}

        for edge in edges:
            if edge.source not in node_ids:
                found.append(
                    issues.error(
                        IssueCode.DANGLING_EDGE,
                        f"Edge references non-existent source node: {edge.source}",
                        suggestion="Remove or reconnect this edge",
                        details={"edge_id": edge.id, "source": edge.source},
                    )
                )

            if edge.target not in node_ids:
                found.append(
                    issues.error(
                        IssueCode.DANGLING_EDGE,
                        f"Edge references non-existent target node: {edge.target}",
                        suggestion="Remove or reconnect this edge",
                        details={"edge_id": edge.id, "target": edge.target},
                    )
                )

            if edge.is_self_loop:
                found.append(
                    issues.error(
                        IssueCode.SELF_LOOP,
                        "Node cannot connect to itself",
                        node_id=edge.source,
                        suggestion="Remove the self-referencing connection",
                        details={"edge_id": edge.id},
                    )
                )

        seen: set[tuple[str, str]] = set()
        for edge in edges:
            key = (edge.source, edge.target)
            if key in seen:
                found.append(
                    issues.warning(
                        IssueCode.DUPLICATE_EDGE,
                        f"Duplicate connection from {edge.source} to {edge.target}",
                        suggestion="Remove the duplicate connection",
                        details={
                            "edge_id": edge.id,
                            "source": edge.source,
                            "target": edge.target,
                        },
                    )
                )
            seen.add(key)

        return found


__all__ = [
    "NodeSchemaValidator",
    "suggest_label",
]
