"""Workflow routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from ..core.dependencies import (
    get_current_user_id,
    get_event_bus,
    get_token_service,
    get_workflow_service,
)
from ..core.exceptions import ValidationError, WorkflowNotFoundError
from ..engine.events import EventBus
from ..schemas.common import PaginatedResponse, SuccessResponse
from ..schemas.workflow import (
    SubscriptionTokenResponse,
    TriggerResponse,
    TriggerWorkflowRequest,
    WorkflowCreateRequest,
    WorkflowDetailResponse,
    WorkflowListItem,
    WorkflowRenameRequest,
    WorkflowUpdateRequest,
)
from ..services.realtime_service import SubscriptionTokenService
from ..services.workflow_service import WorkflowService

router = APIRouter(prefix="/workflows")


# Type aliases for dependency injection
WorkflowServiceDep = Annotated[WorkflowService, Depends(get_workflow_service)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]


@router.get("", response_model=PaginatedResponse[WorkflowListItem])
async def list_workflows(
    service: WorkflowServiceDep,
    user_id: UserIdDep,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    search: str = "",
) -> PaginatedResponse[WorkflowListItem]:
    """List the caller's workflows."""
    return await service.list_workflows(user_id, page, page_size, search)


@router.post("", response_model=WorkflowDetailResponse, status_code=201)
async def create_workflow(
    workflow: WorkflowCreateRequest,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
) -> WorkflowDetailResponse:
    """Create a new workflow with a single initial node."""
    return await service.create_workflow(user_id, workflow)


@router.get("/subscription-token", response_model=SubscriptionTokenResponse)
async def get_subscription_token(
    user_id: UserIdDep,
    tokens: Annotated[SubscriptionTokenService, Depends(get_token_service)],
) -> SubscriptionTokenResponse:
    """Issue realtime tokens for every node status channel."""
    return SubscriptionTokenResponse(
        tokens=tokens.get_tokens(user_id),
        channel_names=tokens.channel_name_map(),
    )


@router.get("/{workflow_id}", response_model=WorkflowDetailResponse)
async def get_workflow(
    workflow_id: str,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
) -> WorkflowDetailResponse:
    """Get a single workflow by ID."""
    try:
        return await service.get_workflow(workflow_id, user_id)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/{workflow_id}/name", response_model=WorkflowDetailResponse)
async def rename_workflow(
    workflow_id: str,
    request: WorkflowRenameRequest,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
) -> WorkflowDetailResponse:
    try:
        return await service.rename_workflow(workflow_id, user_id, request.name)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{workflow_id}", response_model=WorkflowDetailResponse)
async def update_workflow(
    workflow_id: str,
    workflow: WorkflowUpdateRequest,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
) -> WorkflowDetailResponse:
    """Save a workflow's nodes and connections."""
    try:
        return await service.update_workflow(workflow_id, user_id, workflow)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/{workflow_id}", response_model=SuccessResponse)
async def delete_workflow(
    workflow_id: str,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
) -> SuccessResponse:
    """Delete a workflow."""
    try:
        await service.delete_workflow(workflow_id, user_id)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return SuccessResponse(message=f"Workflow {workflow_id} deleted")


@router.post("/{workflow_id}/trigger", response_model=TriggerResponse)
async def trigger_workflow(
    workflow_id: str,
    service: WorkflowServiceDep,
    user_id: UserIdDep,
    bus: Annotated[EventBus, Depends(get_event_bus)],
    request: Annotated[TriggerWorkflowRequest | None, Body()] = None,
) -> TriggerResponse:
    """Start a run. Returns as soon as the trigger is accepted."""
    try:
        return await service.trigger_workflow(
            workflow_id,
            user_id,
            bus,
            data=request.data if request else None,
        )
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
