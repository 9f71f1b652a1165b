"""Service layer for business logic."""

from .realtime_service import SubscriptionTokenService
from .run_service import RunHistoryService, RunService
from .trigger_service import TriggerService
from .workflow_service import WorkflowService

__all__ = [
    "RunHistoryService",
    "RunService",
    "SubscriptionTokenService",
    "TriggerService",
    "WorkflowService",
]
