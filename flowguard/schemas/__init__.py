"""Pydantic schemas for the graph model, node type catalog and results."""

from flowguard.schemas.base import BaseSchema, FrozenSchema
from flowguard.schemas.node_schema import (
    FieldSchema,
    FieldType,
    FieldValidation,
    NodeTypeSchema,
)
from flowguard.schemas.validation import (
    CycleCheckResult,
    IssueCode,
    IssueSeverity,
    TopologyResult,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
)
from flowguard.schemas.workflow import (
    Edge,
    FieldValue,
    Node,
    NodeCategory,
    ValueKind,
    Workflow,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    # Graph model
    "Edge",
    "FieldValue",
    "Node",
    "NodeCategory",
    "ValueKind",
    "Workflow",
    # Node type catalog
    "FieldSchema",
    "FieldType",
    "FieldValidation",
    "NodeTypeSchema",
    # Validation
    "CycleCheckResult",
    "IssueCode",
    "IssueSeverity",
    "TopologyResult",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
]
