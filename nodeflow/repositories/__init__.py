"""Repository layer for data persistence."""

from .run_repository import RunRepository
from .workflow_repository import WorkflowRepository

__all__ = [
    "WorkflowRepository",
    "RunRepository",
]
