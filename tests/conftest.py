"""pytest configuration and shared fixtures.

Graphs are written as plain editor dicts, the same shape the canvas sends,
so tests exercise the pydantic coercion path as well as the checks.
"""

from collections.abc import Callable
from typing import Any

import pytest

from flowguard.schemas.validation import ValidationOptions
from flowguard.services.workflow.catalog import NodeSchemaCatalog, builtin_catalog
from flowguard.services.workflow.issues import IssueFactory
from flowguard.services.workflow.validator import WorkflowValidator

NodeBuilder = Callable[..., dict[str, Any]]
EdgeBuilder = Callable[..., dict[str, Any]]


def _node(
    node_id: str,
    category: str = "action",
    label: str | None = None,
    node_type: str | None = None,
    **data: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"label": node_id if label is None else label, **data}
    if node_type is not None:
        payload["nodeType"] = node_type
    return {"id": node_id, "type": category, "data": payload}


def _edge(source: str, target: str, edge_id: str | None = None) -> dict[str, Any]:
    return {"id": edge_id or f"{source}-{target}", "source": source, "target": target}


@pytest.fixture
def make_node() -> NodeBuilder:
    """Build an editor node dict; the label defaults to the node ID."""
    return _node


@pytest.fixture
def make_edge() -> EdgeBuilder:
    """Build an editor edge dict."""
    return _edge


@pytest.fixture
def issues() -> IssueFactory:
    """Fresh issue factory for one validation pass."""
    return IssueFactory()


@pytest.fixture
def catalog() -> NodeSchemaCatalog:
    """Built-in catalog of the editor's node types."""
    return builtin_catalog()


@pytest.fixture
def test_catalog() -> NodeSchemaCatalog:
    """Small catalog covering every field rule."""
    return NodeSchemaCatalog.from_schemas(
        [
            {
                "type": "sensor",
                "label": "Sensor",
                "category": "action",
                "fields": [
                    {"name": "target", "label": "Target", "required": True},
                    {
                        "name": "retries",
                        "label": "Retries",
                        "type": "number",
                        "defaultValue": 3,
                        "validation": {"min": 0, "max": 5},
                    },
                    {
                        "name": "code",
                        "label": "Code",
                        "validation": {"pattern": "^[A-Z]{3}$"},
                    },
                    {
                        "name": "note",
                        "label": "Note",
                        "validation": {"minLength": 2, "maxLength": 5},
                    },
                    {"name": "payload", "label": "Payload", "type": "json"},
                    {"name": "enabled", "label": "Enabled", "type": "boolean"},
                    {
                        "name": "mode",
                        "label": "Mode",
                        "type": "select",
                        "required": True,
                        "defaultValue": "fast",
                    },
                ],
            }
        ]
    )


@pytest.fixture
def validator(catalog: NodeSchemaCatalog) -> WorkflowValidator:
    """Workflow validator over the built-in catalog with expression checks on."""
    return WorkflowValidator(catalog, ValidationOptions(check_expressions=True))


@pytest.fixture
def linear_workflow(
    make_node: NodeBuilder, make_edge: EdgeBuilder
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """A valid manual -> transform -> delay workflow."""
    nodes = [
        make_node("start", "trigger", "Start", node_type="manual"),
        make_node(
            "shape",
            "action",
            "Shape Data",
            node_type="transform",
            expression="{{ trigger.data }}",
        ),
        make_node(
            "wait",
            "control",
            "Wait",
            node_type="delay",
            duration=10,
        ),
    ]
    edges = [make_edge("start", "shape"), make_edge("shape", "wait")]
    return nodes, edges
