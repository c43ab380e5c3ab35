"""flowguard: workflow graph validation engine.

Validates editor workflow graphs (nodes, edges and per-node configuration)
before they are saved or executed.
"""

from flowguard.services.workflow import validate_workflow

__version__ = "0.1.0"

__all__ = [
    "validate_workflow",
    "__version__",
]
