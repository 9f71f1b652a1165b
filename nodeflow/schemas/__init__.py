"""Pydantic schemas for API request/response validation."""

from .common import (
    CamelModel,
    ErrorResponse,
    HealthResponse,
    PaginatedResponse,
    RootResponse,
    SuccessResponse,
)
from .node import NodeTypeInfoResponse
from .run import RunResponse
from .workflow import (
    ConnectionSchema,
    NodeSchema,
    PositionSchema,
    SubscriptionTokenResponse,
    TriggerResponse,
    TriggerWorkflowRequest,
    WorkflowCreateRequest,
    WorkflowDetailResponse,
    WorkflowListItem,
    WorkflowRenameRequest,
    WorkflowUpdateRequest,
)

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "PaginatedResponse",
    "RootResponse",
    "SuccessResponse",
    "NodeTypeInfoResponse",
    "RunResponse",
    "ConnectionSchema",
    "NodeSchema",
    "PositionSchema",
    "SubscriptionTokenResponse",
    "TriggerResponse",
    "TriggerWorkflowRequest",
    "WorkflowCreateRequest",
    "WorkflowDetailResponse",
    "WorkflowListItem",
    "WorkflowRenameRequest",
    "WorkflowUpdateRequest",
]
