"""Checks for ``{{ steps.<name> }}`` references in node configuration.

A reference names an upstream step either by node ID or by its label
normalized to ``lower_snake`` form, e.g. ``{{ steps.fetch_users.body }}``
for a node labelled "Fetch Users". Other roots such as ``trigger`` and
``env`` are resolved at execution time and are not checked here.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from typing import Any

from flowguard.schemas.validation import IssueCode, ValidationIssue
from flowguard.schemas.workflow import Node
from flowguard.services.workflow.issues import IssueFactory

EXPRESSION_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
STEPS_ROOT = "steps"

_WHITESPACE = re.compile(r"\s+")


def normalize_step_name(label: str) -> str:
    """'Fetch Users' -> 'fetch_users'."""
    return _WHITESPACE.sub("_", label.strip().lower())


def extract_step_references(text: str) -> list[str]:
    """Return the step names referenced by every placeholder in ``text``.

    Example:
        >>> extract_step_references("Hi {{ steps.lookup.name }} from {{ env.HOST }}")
        ['lookup']
    """
    references: list[str] = []
    for match in EXPRESSION_PATTERN.finditer(text):
        parts = match.group(1).strip().split(".")
        if len(parts) >= 2 and parts[0] == STEPS_ROOT and parts[1]:
            references.append(parts[1])
    return references


def _iter_strings(value: Any) -> Iterator[str]:
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            yield current
        elif isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))


class ExpressionChecker:
    """Warns about placeholders referencing steps that do not exist."""

    def check(
        self,
        nodes: Sequence[Node],
        issues: IssueFactory,
    ) -> list[ValidationIssue]:
        node_ids = {node.id for node in nodes}
        step_names = {
            normalize_step_name(node.label) for node in nodes if node.label
        }

        found: list[ValidationIssue] = []

        for node in nodes:
            for key, value in node.data.items():
                for text in _iter_strings(value):
                    for name in extract_step_references(text):
                        if name in node_ids or normalize_step_name(name) in step_names:
                            continue
                        found.append(
                            issues.warning(
                                IssueCode.UNKNOWN_REFERENCE,
                                f"Expression references unknown node: {name}",
                                node_id=node.id,
                                field=key,
                                suggestion=(
                                    "Check that the referenced node exists "
                                    "and has the correct name"
                                ),
                                details={"reference": name},
                            )
                        )

        return found


__all__ = [
    "EXPRESSION_PATTERN",
    "ExpressionChecker",
    "extract_step_references",
    "normalize_step_name",
]
