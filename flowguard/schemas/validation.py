"""Pydantic schemas for workflow validation results.

This module defines the issue model, the consolidated validation result
and the smaller results returned by the graph helpers. All validation
findings use consistent issue codes so callers can match on them
instead of on message wording.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field

from flowguard.core.config import settings
from flowguard.schemas.base import BaseSchema, FrozenSchema

# =============================================================================
# Validation Enums
# =============================================================================


class IssueSeverity(str, Enum):
    """Severity of a validation issue.

    Only ERROR makes a workflow invalid.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCode(str, Enum):
    """Machine-readable issue codes."""

    # Structure
    EMPTY_WORKFLOW = "EMPTY_WORKFLOW"
    NO_TRIGGER = "NO_TRIGGER"
    MULTIPLE_TRIGGERS = "MULTIPLE_TRIGGERS"
    GRAPH_TOO_LARGE = "GRAPH_TOO_LARGE"

    # Node fields
    REQUIRED_FIELD = "REQUIRED_FIELD"
    INVALID_FIELD_TYPE = "INVALID_FIELD_TYPE"
    INVALID_FORMAT = "INVALID_FORMAT"
    VALUE_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
    LENGTH_OUT_OF_RANGE = "LENGTH_OUT_OF_RANGE"
    INVALID_JSON = "INVALID_JSON"
    MISSING_LABEL = "MISSING_LABEL"
    DUPLICATE_NODE_ID = "DUPLICATE_NODE_ID"

    # Edges
    DANGLING_EDGE = "DANGLING_EDGE"
    SELF_LOOP = "SELF_LOOP"
    DUPLICATE_EDGE = "DUPLICATE_EDGE"

    # Connectivity
    TRIGGER_HAS_INCOMING = "TRIGGER_HAS_INCOMING"
    TRIGGER_NOT_CONNECTED = "TRIGGER_NOT_CONNECTED"
    ORPHANED_NODE = "ORPHANED_NODE"
    UNREACHABLE_NODE = "UNREACHABLE_NODE"

    # DAG
    CYCLE_DETECTED = "CYCLE_DETECTED"

    # Expressions
    UNKNOWN_REFERENCE = "UNKNOWN_REFERENCE"


# =============================================================================
# Options
# =============================================================================


class ValidationOptions(BaseSchema):
    """Options for a validation pass.

    Defaults come from the engine settings.
    """

    check_expressions: bool = Field(
        default_factory=lambda: settings.CHECK_EXPRESSIONS,
        description="Check {{ steps.<name> }} references",
    )
    max_nodes: int = Field(
        default_factory=lambda: settings.MAX_NODES,
        ge=1,
        description="Node count above which a size warning is emitted",
    )
    max_edges: int = Field(
        default_factory=lambda: settings.MAX_EDGES,
        ge=0,
        description="Edge count above which a size warning is emitted",
    )


# =============================================================================
# Issue and Result Schemas
# =============================================================================


class ValidationIssue(FrozenSchema):
    """One validation finding.

    Issues are values: they are never mutated after creation. ``id`` is
    unique within the result that contains the issue.
    """

    id: str = Field(..., description="Issue ID, unique per validation result")
    severity: IssueSeverity = Field(..., description="error, warning or info")
    code: IssueCode = Field(..., description="Machine-readable issue code")
    message: str = Field(..., description="Human-readable message")
    node_id: str | None = Field(
        default=None,
        alias="nodeId",
        description="Affected node ID if applicable",
    )
    field: str | None = Field(
        default=None,
        description="Affected field name if applicable",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested fix or action",
    )
    auto_fixable: bool = Field(
        default=False,
        alias="autoFixable",
        description="Whether a caller can fix the issue without user input",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context",
    )

    @property
    def signature(self) -> tuple[str, str | None, str | None, str]:
        """(severity, node_id, field, code); stable across passes."""
        return (self.severity, self.node_id, self.field, self.code)


class ValidationResult(BaseSchema):
    """Consolidated result of one validation pass."""

    model_config = ConfigDict(from_attributes=True)

    valid: bool = Field(..., description="True iff no issue has severity error")
    issues: list[ValidationIssue] = Field(default_factory=list)
    execution_order: list[str] | None = Field(
        default=None,
        alias="executionOrder",
        description="Topological order; present iff the graph is acyclic",
    )

    # Statistics
    node_count: int = Field(default=0, ge=0)
    edge_count: int = Field(default=0, ge=0)
    validation_duration_ms: float = Field(default=0.0, ge=0.0)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def infos(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.INFO]


class TopologyResult(BaseSchema):
    """Result of topological ordering.

    On failure ``order`` is empty and ``error`` names a witness cycle.
    """

    success: bool = Field(..., description="Whether an order exists")
    order: list[str] = Field(default_factory=list)
    error: str | None = Field(default=None, description="Why no order exists")
    cycle: list[str] | None = Field(
        default=None,
        description="Witness cycle when ordering failed",
    )


class CycleCheckResult(BaseSchema):
    """Result of checking a proposed connection for cycles.

    Lightweight result for real-time canvas feedback.
    """

    has_cycle: bool = Field(..., description="Whether the connection closes a cycle")
    cycle_path: list[str] | None = Field(
        default=None,
        description="Cycle path if a cycle would be created",
    )
    cycle_description: str | None = Field(
        default=None,
        description="Human-readable cycle description",
    )


__all__ = [
    "CycleCheckResult",
    "IssueCode",
    "IssueSeverity",
    "TopologyResult",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
]
