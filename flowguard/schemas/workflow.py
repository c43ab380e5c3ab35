"""Graph model schemas: nodes, edges and workflows as sent by the editor.

The canvas serializes its graph as plain JSON. These models accept that
payload as-is (camelCase keys, extra presentation keys such as
``position`` are ignored) and expose read-only accessors used by the
validators. Nothing in the engine mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import Field

from flowguard.schemas.base import BaseSchema


class NodeCategory(str, Enum):
    """Node categories known to the editor.

    Categories outside this enum are tolerated and treated as non-trigger
    nodes.
    """

    TRIGGER = "trigger"
    ACTION = "action"
    CONTROL = "control"
    AI = "ai"


class ValueKind(str, Enum):
    """Tag of a node field value."""

    MISSING = "missing"
    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FieldValue:
    """Tagged view of one raw value from a node's ``data`` mapping.

    ``bool`` is tagged BOOLEAN, never NUMBER, so numeric range checks do
    not apply to checkboxes.
    """

    kind: ValueKind
    value: Any = None

    @classmethod
    def of(cls, data: dict[str, Any], name: str) -> FieldValue:
        if name not in data:
            return cls(ValueKind.MISSING)
        return cls.from_raw(data[name])

    @classmethod
    def from_raw(cls, value: Any) -> FieldValue:
        if value is None:
            return cls(ValueKind.NULL)
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, int | float):
            return cls(ValueKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ValueKind.STRING, value)
        if isinstance(value, dict | list):
            return cls(ValueKind.JSON, value)
        return cls(ValueKind.OTHER, value)

    @property
    def is_empty(self) -> bool:
        """Missing, null and the empty string count as empty."""
        if self.kind in (ValueKind.MISSING, ValueKind.NULL):
            return True
        return self.kind == ValueKind.STRING and self.value == ""

    @property
    def is_string(self) -> bool:
        return self.kind == ValueKind.STRING

    @property
    def is_number(self) -> bool:
        return self.kind == ValueKind.NUMBER


class Node(BaseSchema):
    """A vertex in the workflow graph."""

    id: str = Field(..., min_length=1, description="Node ID, unique within a workflow")
    type: str | None = Field(
        default=None,
        description="Node category (trigger, action, control, ai or an extension)",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Field values including label and nodeType",
    )

    @property
    def label(self) -> str | None:
        label = self.data.get("label")
        return label if isinstance(label, str) else None

    @property
    def node_type(self) -> str:
        """Schema discriminator: data.nodeType, then the category, then 'unknown'."""
        node_type = self.data.get("nodeType")
        if isinstance(node_type, str) and node_type:
            return node_type
        return self.type or "unknown"

    @property
    def is_trigger(self) -> bool:
        return self.type == NodeCategory.TRIGGER.value

    def field_value(self, name: str) -> FieldValue:
        return FieldValue.of(self.data, name)


class Edge(BaseSchema):
    """A directed connection ``source -> target`` between two nodes."""

    id: str | None = Field(default=None, description="Edge ID")
    source: str = Field(..., description="Source node ID")
    target: str = Field(..., description="Target node ID")
    source_handle: str | None = Field(
        default=None,
        alias="sourceHandle",
        description="Source handle (for multi-output nodes)",
    )
    target_handle: str | None = Field(
        default=None,
        alias="targetHandle",
        description="Target handle (for multi-input nodes)",
    )

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


class Workflow(BaseSchema):
    """Nodes and edges of one editor session, borrowed for a validation pass."""

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Workflow:
        return cls.model_validate(payload)

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> Node | None:
        return next((node for node in self.nodes if node.id == node_id), None)


def coerce_nodes(nodes: list[Node] | list[dict[str, Any]]) -> list[Node]:
    """Accept model instances or raw editor dicts."""
    return [node if isinstance(node, Node) else Node.model_validate(node) for node in nodes]


def coerce_edges(edges: list[Edge] | list[dict[str, Any]]) -> list[Edge]:
    """Accept model instances or raw editor dicts."""
    return [edge if isinstance(edge, Edge) else Edge.model_validate(edge) for edge in edges]


__all__ = [
    "Edge",
    "FieldValue",
    "Node",
    "NodeCategory",
    "ValueKind",
    "Workflow",
    "coerce_edges",
    "coerce_nodes",
]
