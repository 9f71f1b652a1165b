"""FastAPI dependency injection for the workflow engine."""

from __future__ import annotations

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings


# --- Caller Identity ---


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    """Caller identity, set by the authenticating proxy in front of the API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


# --- Database Session Dependency ---


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    from ..db import get_session

    async for session in get_session():
        yield session


# --- Repository Dependencies ---


def get_workflow_repository(session: AsyncSession = Depends(get_db_session)):
    """Get workflow repository instance."""
    from ..repositories import WorkflowRepository

    return WorkflowRepository(session)


def get_run_repository(session: AsyncSession = Depends(get_db_session)):
    """Get run repository instance."""
    from ..repositories import RunRepository

    return RunRepository(session, max_records=settings.max_runs_per_workflow)


def get_node_registry():
    """Get node registry instance."""
    from ..engine.node_registry import node_registry

    return node_registry


def get_event_bus():
    """Get the event bus run triggers are sent on."""
    from ..engine.events import event_bus

    return event_bus


def get_realtime_broker():
    from ..engine.realtime import realtime_broker

    return realtime_broker


# --- Service Dependencies ---


def get_workflow_service(
    workflow_repo=Depends(get_workflow_repository),
    node_registry=Depends(get_node_registry),
):
    """Get workflow service instance."""
    from ..services.workflow_service import WorkflowService

    return WorkflowService(workflow_repo, node_registry)


def get_trigger_service(workflow_repo=Depends(get_workflow_repository)):
    """Get trigger service instance."""
    from ..services.trigger_service import TriggerService

    return TriggerService(workflow_repo)


def get_run_history_service(run_repo=Depends(get_run_repository)):
    """Get run history service instance."""
    from ..services.run_service import RunHistoryService

    return RunHistoryService(run_repo)


def get_token_service():
    """Get subscription token service instance."""
    from ..services.realtime_service import SubscriptionTokenService

    return SubscriptionTokenService()
