"""Run history routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.dependencies import get_current_user_id, get_run_history_service
from ..core.exceptions import RunNotFoundError
from ..schemas.run import RunResponse
from ..services.run_service import RunHistoryService

router = APIRouter(prefix="/runs")

RunHistoryDep = Annotated[RunHistoryService, Depends(get_run_history_service)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]


@router.get("", response_model=list[RunResponse])
async def list_runs(
    service: RunHistoryDep,
    user_id: UserIdDep,
    workflow_id: Annotated[str | None, Query(alias="workflowId")] = None,
) -> list[RunResponse]:
    """List the caller's runs, newest first."""
    return await service.list_runs(user_id, workflow_id)


@router.get("/{run_id}", response_model=RunResponse)
async def get_run(run_id: str, service: RunHistoryDep, user_id: UserIdDep) -> RunResponse:
    try:
        return await service.get_run(run_id, user_id)
    except RunNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
