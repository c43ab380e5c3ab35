"""Tests for the validation result schemas."""

import pytest
from pydantic import ValidationError

from flowguard.core.config import settings
from flowguard.schemas.validation import (
    CycleCheckResult,
    IssueCode,
    IssueSeverity,
    TopologyResult,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
)


class TestValidationIssue:
    """Issue values."""

    def test_issue_is_frozen(self):
        """Issues cannot be changed after creation."""
        issue = ValidationIssue(
            id="issue-1",
            severity=IssueSeverity.ERROR,
            code=IssueCode.NO_TRIGGER,
            message="Workflow must have a trigger",
        )
        with pytest.raises(ValidationError):
            issue.message = "changed"

    def test_camel_case_dump(self):
        """Issues serialize with the editor's key names."""
        issue = ValidationIssue(
            id="issue-1",
            severity="warning",
            code="MISSING_LABEL",
            message="Node has no name",
            node_id="n1",
            auto_fixable=True,
        )

        payload = issue.model_dump(by_alias=True)

        assert payload["nodeId"] == "n1"
        assert payload["autoFixable"] is True
        assert payload["severity"] == "warning"
        assert payload["code"] == "MISSING_LABEL"

    def test_unknown_code_is_rejected(self):
        """Codes are restricted to the known set."""
        with pytest.raises(ValidationError):
            ValidationIssue(id="i", severity="error", code="NOPE", message="m")


class TestValidationResult:
    """Result container."""

    def test_defaults(self):
        """Only validity is required."""
        result = ValidationResult(valid=True)

        assert result.issues == []
        assert result.execution_order is None
        assert result.node_count == 0
        assert result.validation_duration_ms == 0.0

    def test_round_trip_by_alias(self):
        """A dumped result validates back from camelCase keys."""
        result = ValidationResult(valid=True, execution_order=["a", "b"], node_count=2)

        restored = ValidationResult.model_validate(result.model_dump(by_alias=True))

        assert restored.execution_order == ["a", "b"]
        assert restored.node_count == 2


class TestSmallResults:
    """Topology and proposed-connection results."""

    def test_topology_result_defaults(self):
        """Failed orders are empty."""
        result = TopologyResult(success=False, error="Cycle detected: a → a", cycle=["a", "a"])
        assert result.order == []

    def test_cycle_check_defaults(self):
        """No cycle means no path or description."""
        result = CycleCheckResult(has_cycle=False)
        assert result.cycle_path is None
        assert result.cycle_description is None


class TestValidationOptions:
    """Options defaults and bounds."""

    def test_defaults_follow_settings(self, monkeypatch: pytest.MonkeyPatch):
        """Defaults are read from settings when options are created."""
        monkeypatch.setattr(settings, "MAX_NODES", 123)
        monkeypatch.setattr(settings, "CHECK_EXPRESSIONS", False)

        options = ValidationOptions()

        assert options.max_nodes == 123
        assert options.check_expressions is False
        assert options.max_edges == settings.MAX_EDGES

    @pytest.mark.parametrize("kwargs", [{"max_nodes": 0}, {"max_edges": -1}])
    def test_bounds(self, kwargs):
        """Limits must be sensible."""
        with pytest.raises(ValidationError):
            ValidationOptions(**kwargs)
