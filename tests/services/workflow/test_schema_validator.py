"""Tests for NodeSchemaValidator: field rules, labels, node IDs and edges."""

import logging

import pytest

from flowguard.schemas.validation import IssueCode, IssueSeverity
from flowguard.schemas.workflow import coerce_edges, coerce_nodes
from flowguard.services.workflow.catalog import NodeSchemaCatalog
from flowguard.services.workflow.issues import IssueFactory
from flowguard.services.workflow.schema_validator import (
    NodeSchemaValidator,
    suggest_label,
)

# =============================================================================
# HELPERS
# =============================================================================


def _sensor(**data):
    """A 'sensor' node with a label and the required fields filled in."""
    values = {"label": "Sensor", "nodeType": "sensor", "target": "db", "mode": "fast"}
    values.update(data)
    return {"id": "p1", "type": "action", "data": values}


def _validate(catalog, *nodes):
    validator = NodeSchemaValidator(catalog)
    return validator.validate_nodes(coerce_nodes(list(nodes)), IssueFactory())


def _field_codes(found):
    return [(issue.field, issue.code) for issue in found]


# =============================================================================
# FIELD RULES
# =============================================================================


class TestRequiredFields:
    """Required-ness and emptiness."""

    def test_complete_node_has_no_issues(self, test_catalog: NodeSchemaCatalog):
        """A node with every required field set passes."""
        assert _validate(test_catalog, _sensor()) == []

    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_required_field(self, test_catalog: NodeSchemaCatalog, empty):
        """null and "" count as missing."""
        found = _validate(test_catalog, _sensor(target=empty))

        assert _field_codes(found) == [("target", IssueCode.REQUIRED_FIELD)]
        issue = found[0]
        assert issue.severity == IssueSeverity.ERROR
        assert issue.node_id == "p1"
        assert issue.message == "Target is required"
        assert issue.suggestion == "Enter a value for Target"
        assert issue.auto_fixable is False

    def test_missing_required_field_with_default_is_auto_fixable(
        self, test_catalog: NodeSchemaCatalog
    ):
        """A declared default makes the fix automatic."""
        node = _sensor()
        del node["data"]["mode"]

        found = _validate(test_catalog, node)

        assert _field_codes(found) == [("mode", IssueCode.REQUIRED_FIELD)]
        assert found[0].auto_fixable is True

    def test_whitespace_is_not_empty(self, test_catalog: NodeSchemaCatalog):
        """Only the empty string counts as empty."""
        assert _validate(test_catalog, _sensor(target="  ")) == []

    def test_empty_optional_field_skips_other_checks(
        self, test_catalog: NodeSchemaCatalog
    ):
        """Constraints do not apply to unset optional fields."""
        found = _validate(test_catalog, _sensor(code="", note=None, retries=None))
        assert found == []


class TestDeclaredType:
    """Tag checks before type-specific rules."""

    def test_number_field_with_string(self, test_catalog: NodeSchemaCatalog):
        """A plain string in a number field is a type error and nothing else."""
        found = _validate(test_catalog, _sensor(retries="lots"))

        assert _field_codes(found) == [("retries", IssueCode.INVALID_FIELD_TYPE)]
        assert found[0].message == "Retries must be a number"
        assert found[0].details == {"expected": "number", "actual": "string"}

    def test_number_field_with_bool(self, test_catalog: NodeSchemaCatalog):
        """Booleans are never numbers."""
        found = _validate(test_catalog, _sensor(retries=True))

        assert _field_codes(found) == [("retries", IssueCode.INVALID_FIELD_TYPE)]
        assert found[0].details["actual"] == "boolean"

    def test_number_field_with_expression(self, test_catalog: NodeSchemaCatalog):
        """Expressions are resolved at execution time."""
        assert _validate(test_catalog, _sensor(retries="{{ steps.cfg.retries }}")) == []

    def test_boolean_field(self, test_catalog: NodeSchemaCatalog):
        """Boolean fields need a real bool."""
        assert _validate(test_catalog, _sensor(enabled=False)) == []

        found = _validate(test_catalog, _sensor(enabled=1))
        assert _field_codes(found) == [("enabled", IssueCode.INVALID_FIELD_TYPE)]
        assert found[0].message == "Enabled must be a boolean"


class TestRangeAndFormat:
    """Numeric range, pattern and length rules."""

    @pytest.mark.parametrize(
        ("value", "message"),
        [(-1, "Retries must be at least 0"), (6, "Retries must be at most 5")],
    )
    def test_value_out_of_range(self, test_catalog: NodeSchemaCatalog, value, message):
        """Bounds are inclusive and the message names the bound."""
        found = _validate(test_catalog, _sensor(retries=value))

        assert _field_codes(found) == [("retries", IssueCode.VALUE_OUT_OF_RANGE)]
        assert found[0].message == message
        assert found[0].auto_fixable is True

    @pytest.mark.parametrize("value", [0, 5, 2.5])
    def test_value_in_range(self, test_catalog: NodeSchemaCatalog, value):
        """Inclusive bounds accept the limits themselves."""
        assert _validate(test_catalog, _sensor(retries=value)) == []

    def test_pattern_mismatch(self, test_catalog: NodeSchemaCatalog):
        """A string not matching the pattern is an invalid format."""
        found = _validate(test_catalog, _sensor(code="abc"))

        assert _field_codes(found) == [("code", IssueCode.INVALID_FORMAT)]
        assert found[0].message == "Code has invalid format"
        assert found[0].suggestion == "Check the format of Code"

    def test_pattern_match(self, test_catalog: NodeSchemaCatalog):
        """A matching string passes."""
        assert _validate(test_catalog, _sensor(code="ABC")) == []

    def test_pattern_ignores_non_strings(self, test_catalog: NodeSchemaCatalog):
        """Patterns only apply to string values."""
        assert _validate(test_catalog, _sensor(code=123)) == []

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("x", "Note must be at least 2 characters"),
            ("toolong", "Note must be at most 5 characters"),
        ],
    )
    def test_length_out_of_range(self, test_catalog: NodeSchemaCatalog, value, message):
        """Length bounds apply to strings."""
        found = _validate(test_catalog, _sensor(note=value))

        assert _field_codes(found) == [("note", IssueCode.LENGTH_OUT_OF_RANGE)]
        assert found[0].message == message

    def test_pattern_with_trailing_space(self):
        """A trailing space in a pattern is significant."""
        catalog = NodeSchemaCatalog.from_schemas(
            [
                {
                    "type": "tagged",
                    "label": "Tagged",
                    "category": "action",
                    "fields": [{"name": "v", "label": "V", "validation": {"pattern": "^\\w+ $"}}],
                }
            ]
        )

        def node(value):
            return {"id": "t", "type": "action", "data": {"label": "T", "nodeType": "tagged", "v": value}}

        assert _validate(catalog, node("word ")) == []
        assert _field_codes(_validate(catalog, node("word"))) == [("v", IssueCode.INVALID_FORMAT)]

    def test_invalid_regex_in_catalog_is_skipped(self, caplog):
        """A broken pattern is logged and does not produce issues."""
        catalog = NodeSchemaCatalog.from_schemas(
            [
                {
                    "type": "broken",
                    "label": "Broken",
                    "category": "action",
                    "fields": [
                        {"name": "v", "label": "V", "validation": {"pattern": "([unclosed"}}
                    ],
                }
            ]
        )
        node = {"id": "b", "type": "action", "data": {"label": "B", "nodeType": "broken", "v": "x"}}

        with caplog.at_level(logging.WARNING, logger="flowguard"):
            found = _validate(catalog, node)

        assert found == []
        assert "Invalid validation pattern" in caplog.text


class TestJsonFields:
    """JSON syntax checks."""

    def test_invalid_json(self, test_catalog: NodeSchemaCatalog):
        """Unparseable JSON text is an error."""
        found = _validate(test_catalog, _sensor(payload="{'single': quotes}"))

        assert _field_codes(found) == [("payload", IssueCode.INVALID_JSON)]
        assert found[0].message == "Payload contains invalid JSON"
        assert found[0].details["line"] == 1

    @pytest.mark.parametrize("value", ["NaN", "[Infinity]", '{"a": -Infinity}'])
    def test_non_standard_constants_are_invalid(self, test_catalog: NodeSchemaCatalog, value):
        """NaN and Infinity are rejected like any other non-JSON token."""
        found = _validate(test_catalog, _sensor(payload=value))

        assert _field_codes(found) == [("payload", IssueCode.INVALID_JSON)]
        assert found[0].details == {}

    @pytest.mark.parametrize("value", ['{"a": [1, 2]}', "   ", {"already": "parsed"}, [1, 2]])
    def test_valid_or_structured_json(self, test_catalog: NodeSchemaCatalog, value):
        """Valid text, blank text and structured values pass."""
        assert _validate(test_catalog, _sensor(payload=value)) == []


# =============================================================================
# NODE-LEVEL CHECKS
# =============================================================================


class TestLabels:
    """Missing labels and suggested names."""

    @pytest.mark.parametrize(
        ("node_type", "expected"),
        [
            ("http", "Http"),
            ("slack_send_message", "Slack Send Message"),
            ("ai-chat", "Ai Chat"),
            ("", "Node"),
        ],
    )
    def test_suggest_label(self, node_type, expected):
        """Labels are derived from the node type."""
        assert suggest_label(node_type) == expected

    @pytest.mark.parametrize("label", [None, "", "   "])
    def test_missing_label_warning(self, label):
        """Nodes without a usable name get an auto-fixable warning."""
        data = {"nodeType": "slack_send_message"}
        if label is not None:
            data["label"] = label
        node = {"id": "n1", "type": "action", "data": data}

        found = _validate(NodeSchemaCatalog(), node)

        assert _field_codes(found) == [("label", IssueCode.MISSING_LABEL)]
        issue = found[0]
        assert issue.severity == IssueSeverity.WARNING
        assert issue.message == "Node has no name"
        assert issue.auto_fixable is True
        assert issue.details == {"suggested_label": "Slack Send Message"}

    def test_catalog_label_field_adds_required_error(self, catalog: NodeSchemaCatalog):
        """Built-in node types declare the label as a required field."""
        node = {"id": "h", "type": "action", "data": {"nodeType": "http", "url": "https://x.io"}}

        found = _validate(catalog, node)

        assert _field_codes(found) == [
            ("label", IssueCode.REQUIRED_FIELD),
            ("label", IssueCode.MISSING_LABEL),
        ]

    @pytest.mark.parametrize(
        ("node_type", "required"),
        [
            ("slack_send_dm", ["user"]),
            ("slack_update_message", ["channel", "ts"]),
            ("slack_add_reaction", ["channel", "timestamp", "emoji"]),
            ("ai_classify", ["provider", "text", "categories"]),
            ("ai_embed", ["provider", "model", "text"]),
        ],
    )
    def test_builtin_types_require_their_fields(
        self, catalog: NodeSchemaCatalog, node_type, required
    ):
        """Slack and AI node types report their empty required fields."""
        node = {"id": "n", "type": "action", "data": {"label": "N", "nodeType": node_type}}

        found = _validate(catalog, node)

        assert _field_codes(found) == [(name, IssueCode.REQUIRED_FIELD) for name in required]

    def test_unknown_node_type_has_no_field_checks(self, test_catalog: NodeSchemaCatalog):
        """Types missing from the catalog are only checked for a label."""
        node = {"id": "u", "type": "action", "data": {"label": "U", "nodeType": "mystery"}}
        assert _validate(test_catalog, node) == []


class TestDuplicateNodeIds:
    """Duplicate node IDs."""

    def test_one_error_per_repeated_id(self):
        """Each repeated ID is reported once with its count."""
        nodes = [
            {"id": "a", "data": {"label": "A"}},
            {"id": "a", "data": {"label": "A2"}},
            {"id": "a", "data": {"label": "A3"}},
            {"id": "b", "data": {"label": "B"}},
        ]

        found = _validate(NodeSchemaCatalog(), *nodes)

        assert [(i.node_id, i.code) for i in found] == [("a", IssueCode.DUPLICATE_NODE_ID)]
        assert found[0].details == {"count": 3}
        assert found[0].message == "Duplicate node ID detected"


# =============================================================================
# EDGES
# =============================================================================


class TestEdges:
    """Dangling, self-loop and duplicate edges."""

    @staticmethod
    def _validate_edges(nodes, edges):
        validator = NodeSchemaValidator(NodeSchemaCatalog())
        return validator.validate_edges(
            coerce_nodes(nodes), coerce_edges(edges), IssueFactory()
        )

    def test_clean_edges(self, make_node, make_edge):
        """Edges between known nodes pass."""
        found = self._validate_edges(
            [make_node("a"), make_node("b")], [make_edge("a", "b")]
        )
        assert found == []

    def test_dangling_source_and_target(self, make_node, make_edge):
        """Each missing endpoint is its own error."""
        found = self._validate_edges([make_node("a")], [make_edge("x", "y")])

        assert [i.message for i in found] == [
            "Edge references non-existent source node: x",
            "Edge references non-existent target node: y",
        ]
        assert all(i.code == IssueCode.DANGLING_EDGE for i in found)
        assert found[0].details == {"edge_id": "x-y", "source": "x"}

    def test_self_loop(self, make_node, make_edge):
        """A node connected to itself is an error on that node."""
        found = self._validate_edges([make_node("a")], [make_edge("a", "a")])

        assert [(i.node_id, i.code) for i in found] == [("a", IssueCode.SELF_LOOP)]
        assert found[0].message == "Node cannot connect to itself"

    def test_duplicate_edges(self, make_node, make_edge):
        """Each extra copy of a connection is a warning."""
        nodes = [make_node("a"), make_node("b")]
        edges = [
            make_edge("a", "b", "e1"),
            make_edge("a", "b", "e2"),
            make_edge("a", "b", "e3"),
            make_edge("b", "a", "e4"),
        ]

        found = self._validate_edges(nodes, edges)

        assert [i.code for i in found] == [IssueCode.DUPLICATE_EDGE] * 2
        assert [i.details["edge_id"] for i in found] == ["e2", "e3"]
        assert found[0].severity == IssueSeverity.WARNING
        assert found[0].message == "Duplicate connection from a to b"
