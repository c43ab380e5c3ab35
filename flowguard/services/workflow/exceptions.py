"""Workflow validation engine exceptions.

Validation findings are returned as issues, never raised. The exceptions
below cover the few conditions that are programmer or configuration
errors: asking for an order of a cyclic graph through the raising API,
and loading a broken schema catalog.
"""

from typing import Any


class DAGValidationError(Exception):
    """Base exception for engine errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


def format_cycle(cycle_path: list[str]) -> str:
    """Render a cycle path as ``A → B → A``."""
    return " → ".join(str(n) for n in cycle_path)


class CycleDetectedError(DAGValidationError):
    """Raised when a topological order is requested for a cyclic graph.

    Attributes:
        cycle_path: Node IDs forming the cycle, first and last equal.
    """

    def __init__(self, cycle_path: list[str]) -> None:
        super().__init__(
            message=f"Cycle detected: {format_cycle(cycle_path)}",
            error_code="CYCLE_DETECTED",
            details={"cycle_path": [str(n) for n in cycle_path]},
        )
        self.cycle_path = cycle_path


class SchemaCatalogError(DAGValidationError):
    """Raised when a node type schema catalog cannot be built.

    Attributes:
        source: File path or description of the catalog source.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid schema catalog {source}: {reason}",
            error_code="INVALID_SCHEMA_CATALOG",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason


__all__ = [
    "CycleDetectedError",
    "DAGValidationError",
    "SchemaCatalogError",
    "format_cycle",
]
