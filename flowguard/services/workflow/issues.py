"""Issue creation and result helpers.

Every validation pass owns one IssueFactory, so issue IDs are unique
within a result (``issue-1``, ``issue-2``, ...) and concurrent passes
share no counter.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import Any

from flowguard.schemas.validation import (
    IssueCode,
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
)


class IssueFactory:
    """Creates issues with IDs unique to one validation pass."""

    def __init__(self, prefix: str = "issue") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def create(
        self,
        severity: IssueSeverity,
        code: IssueCode,
        message: str,
        *,
        node_id: str | None = None,
        field: str | None = None,
        suggestion: str | None = None,
        auto_fixable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> ValidationIssue:
        return ValidationIssue(
            id=f"{self._prefix}-{next(self._counter)}",
            severity=severity,
            code=code,
            message=message,
            node_id=node_id,
            field=field,
            suggestion=suggestion,
            auto_fixable=auto_fixable,
            details=details or {},
        )

    def error(self, code: IssueCode, message: str, **kwargs: Any) -> ValidationIssue:
        return self.create(IssueSeverity.ERROR, code, message, **kwargs)

    def warning(self, code: IssueCode, message: str, **kwargs: Any) -> ValidationIssue:
        return self.create(IssueSeverity.WARNING, code, message, **kwargs)

    def info(self, code: IssueCode, message: str, **kwargs: Any) -> ValidationIssue:
        return self.create(IssueSeverity.INFO, code, message, **kwargs)


def count_issues(issues: Iterable[ValidationIssue]) -> dict[IssueSeverity, int]:
    """Count issues per severity; every severity is present in the result."""
    counts = dict.fromkeys(IssueSeverity, 0)
    for issue in issues:
        counts[IssueSeverity(issue.severity)] += 1
    return counts


def get_validation_summary(result: ValidationResult) -> str:
    """Human-readable one-line summary, e.g. ``"2 errors, 1 warning"``.

    Returns ``"Workflow is valid"`` when there are no issues at all.
    """
    counts = count_issues(result.issues)
    errors = counts[IssueSeverity.ERROR]
    warnings = counts[IssueSeverity.WARNING]
    infos = counts[IssueSeverity.INFO]

    parts: list[str] = []
    if errors:
        parts.append(f"{errors} error{'s' if errors > 1 else ''}")
    if warnings:
        parts.append(f"{warnings} warning{'s' if warnings > 1 else ''}")
    if infos:
        parts.append(f"{infos} info")

    if not parts:
        return "Workflow is valid"

    return ", ".join(parts)


def filter_issues_by_severity(
    issues: Iterable[ValidationIssue],
    severity: IssueSeverity | str,
) -> list[ValidationIssue]:
    """Issues with the given severity, in original order."""
    wanted = IssueSeverity(severity)
    return [issue for issue in issues if issue.severity == wanted]


def get_issues_for_node(
    issues: Iterable[ValidationIssue],
    node_id: str,
) -> list[ValidationIssue]:
    """Issues scoped to one node, for per-node badges."""
    return [issue for issue in issues if issue.node_id == node_id]


__all__ = [
    "IssueFactory",
    "count_issues",
    "filter_issues_by_severity",
    "get_issues_for_node",
    "get_validation_summary",
]
