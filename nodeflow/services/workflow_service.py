"""Workflow service for business logic."""

from __future__ import annotations

import math
import uuid
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ValidationError, WorkflowNotFoundError
from ..engine.events import WORKFLOW_TRIGGER_EVENT, EventBus, TriggerEvent
from ..engine.graph import validate_graph
from ..engine.node_registry import node_registry
from ..engine.types import Connection, Node, NodeType, Position, Workflow
from ..schemas.common import PaginatedResponse
from ..schemas.workflow import (
    ConnectionSchema,
    NodeSchema,
    PositionSchema,
    TriggerResponse,
    WorkflowCreateRequest,
    WorkflowDetailResponse,
    WorkflowListItem,
    WorkflowUpdateRequest,
)

if TYPE_CHECKING:
    from ..engine.node_registry import NodeRegistryClass
    from ..repositories import WorkflowRepository


class WorkflowService:
    """Service for workflow operations. Every user-facing call is owner-scoped."""

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        registry: NodeRegistryClass | None = None,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._registry = registry or node_registry

    async def list_workflows(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = 20,
        search: str = "",
    ) -> PaginatedResponse[WorkflowListItem]:
        """List a user's workflows."""
        workflows, total = await self._workflow_repo.list(user_id, page, page_size, search)
        total_pages = math.ceil(total / page_size) if total else 0
        return PaginatedResponse[WorkflowListItem](
            items=[
                WorkflowListItem(
                    id=w.id,
                    name=w.name,
                    node_count=len(w.nodes),
                    created_at=w.created_at,
                    updated_at=w.updated_at,
                )
                for w in workflows
            ],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    async def get_workflow(self, workflow_id: str, user_id: str) -> WorkflowDetailResponse:
        """Get a workflow owned by the user."""
        return self._to_detail(await self._get_owned(workflow_id, user_id))

    async def load_workflow(self, workflow_id: str) -> Workflow:
        """
        Load a workflow for execution, regardless of owner.

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
        """
        workflow = await self._workflow_repo.get(workflow_id)
        if not workflow:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    async def create_workflow(self, user_id: str, request: WorkflowCreateRequest) -> WorkflowDetailResponse:
        """Create a workflow holding a single INITIAL node."""
        workflow = Workflow(
            id="",
            name=request.name,
            user_id=user_id,
            nodes=[
                Node(
                    id=str(uuid.uuid4()),
                    type=NodeType.INITIAL.value,
                    name=NodeType.INITIAL.value,
                    position=Position(0, 0),
                )
            ],
        )
        stored = await self._workflow_repo.create(workflow)
        return self._to_detail(stored)

    async def rename_workflow(self, workflow_id: str, user_id: str, name: str) -> WorkflowDetailResponse:
        await self._get_owned(workflow_id, user_id)
        updated = await self._workflow_repo.rename(workflow_id, name)
        if not updated:
            raise WorkflowNotFoundError(workflow_id)
        return self._to_detail(updated)

    async def update_workflow(
        self,
        workflow_id: str,
        user_id: str,
        request: WorkflowUpdateRequest,
    ) -> WorkflowDetailResponse:
        """Replace a workflow's nodes and connections."""
        existing = await self._get_owned(workflow_id, user_id)

        workflow = Workflow(
            id=workflow_id,
            name=request.name or existing.name,
            user_id=existing.user_id,
            nodes=[self._schema_to_node(n) for n in request.nodes],
            connections=[self._schema_to_connection(c) for c in request.connections],
        )
        self._validate_workflow(workflow)

        updated = await self._workflow_repo.update(workflow)
        if not updated:
            raise WorkflowNotFoundError(workflow_id)
        return self._to_detail(updated)

    async def delete_workflow(self, workflow_id: str, user_id: str) -> None:
        await self._get_owned(workflow_id, user_id)
        await self._workflow_repo.delete(workflow_id)

    async def trigger_workflow(
        self,
        workflow_id: str,
        user_id: str,
        bus: EventBus,
        data: dict[str, Any] | None = None,
    ) -> TriggerResponse:
        """Send a run trigger for a workflow the user owns. Returns before the run starts."""
        workflow = await self._get_owned(workflow_id, user_id)
        event_id = await bus.send(
            TriggerEvent(
                name=WORKFLOW_TRIGGER_EVENT,
                data={"workflowId": workflow.id, "userId": user_id, "data": data or {}},
            )
        )
        return TriggerResponse(
            message="Workflow execution triggered successfully",
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            event_id=event_id,
        )

    async def _get_owned(self, workflow_id: str, user_id: str) -> Workflow:
        workflow = await self._workflow_repo.get(workflow_id)
        # Other users' workflows are reported as missing
        if not workflow or workflow.user_id != user_id:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    def _validate_workflow(self, workflow: Workflow) -> None:
        """Validate node types and graph structure."""
        for node in workflow.nodes:
            if not self._registry.has(node.type):
                raise ValidationError(f"Unknown node type: {node.type}", field="nodes")
        validate_graph(workflow.nodes, workflow.connections)

    def _schema_to_node(self, schema: NodeSchema) -> Node:
        return Node(
            id=schema.id,
            type=schema.type,
            name=schema.name,
            position=Position(schema.position.x, schema.position.y),
            data=dict(schema.data),
        )

    def _schema_to_connection(self, schema: ConnectionSchema) -> Connection:
        return Connection(
            id=schema.id,
            source=schema.source,
            target=schema.target,
            source_handle=schema.source_handle,
            target_handle=schema.target_handle,
        )

    def _to_detail(self, workflow: Workflow) -> WorkflowDetailResponse:
        return WorkflowDetailResponse(
            id=workflow.id,
            name=workflow.name,
            user_id=workflow.user_id,
            nodes=[
                NodeSchema(
                    id=n.id,
                    type=n.type,
                    name=n.name,
                    position=PositionSchema(x=n.position.x, y=n.position.y),
                    data=n.data,
                )
                for n in workflow.nodes
            ],
            connections=[
                ConnectionSchema(
                    id=c.id,
                    source=c.source,
                    target=c.target,
                    source_handle=c.source_handle,
                    target_handle=c.target_handle,
                )
                for c in workflow.connections
            ],
            created_at=workflow.created_at,
            updated_at=workflow.updated_at,
        )
