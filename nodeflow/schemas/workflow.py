"""Workflow-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from .common import CamelModel


class PositionSchema(CamelModel):
    x: float = 0
    y: float = 0


class NodeSchema(CamelModel):
    """Schema for a node in a workflow graph."""

    id: str = Field(..., min_length=1, description="Node id, unique within the workflow")
    type: str = Field(..., description="Node type, e.g. HTTP_REQUEST")
    name: str = Field("", description="Display name")
    position: PositionSchema = Field(default_factory=PositionSchema, description="Editor position")
    data: dict[str, Any] = Field(default_factory=dict, description="Type-specific node config")

    model_config = CamelModel.model_config | {
        "json_schema_extra": {
            "example": {
                "id": "node_http",
                "type": "HTTP_REQUEST",
                "position": {"x": 100, "y": 200},
                "data": {
                    "variables": "todo",
                    "method": "GET",
                    "endpoint": "https://jsonplaceholder.typicode.com/todos/1",
                },
            }
        }
    }


class ConnectionSchema(CamelModel):
    """Schema for a connection: source runs before target."""

    id: str | None = None
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")
    source_handle: str = Field("main", description="Source handle")
    target_handle: str = Field("main", description="Target handle")


class WorkflowCreateRequest(CamelModel):
    """Request schema for creating a workflow."""

    name: str = Field(..., min_length=1, max_length=255, description="Workflow name")


class WorkflowUpdateRequest(CamelModel):
    """Request schema for saving a workflow; nodes and connections are replaced wholesale."""

    name: str | None = Field(None, min_length=1, max_length=255, description="Workflow name")
    nodes: list[NodeSchema] = Field(default_factory=list, description="List of nodes")
    connections: list[ConnectionSchema] = Field(default_factory=list, description="List of connections")


class WorkflowRenameRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


class WorkflowListItem(CamelModel):
    """Workflow summary for list views."""

    id: str
    name: str
    node_count: int
    created_at: datetime
    updated_at: datetime


class WorkflowDetailResponse(CamelModel):
    """Full workflow including its graph."""

    id: str
    name: str
    user_id: str
    nodes: list[NodeSchema]
    connections: list[ConnectionSchema]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TriggerWorkflowRequest(CamelModel):
    """Optional seed data for a manual run."""

    data: dict[str, Any] = Field(default_factory=dict)


class TriggerResponse(CamelModel):
    """Response for an accepted run trigger. The run itself proceeds in the background."""

    success: bool = True
    message: str
    workflow_id: str
    workflow_name: str | None = None
    event_id: str | None = None


class SubscriptionTokenResponse(CamelModel):
    """Realtime subscription tokens, one per status channel."""

    success: bool = True
    tokens: dict[str, str]
    channel_names: dict[str, str]
