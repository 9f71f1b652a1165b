"""Run service - orchestrates workflow runs triggered over the event bus."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..core.config import settings
from ..core.exceptions import NonRetriableError, RunNotFoundError
from ..db.session import async_session_factory
from ..engine.events import WORKFLOW_TRIGGER_EVENT
from ..engine.realtime import realtime_broker
from ..engine.types import RunRecord
from ..engine.workflow_runner import WorkflowRunner
from ..repositories import RunRepository, WorkflowRepository
from ..schemas.run import RunResponse
from .workflow_service import WorkflowService

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from ..engine.events import EventBus, TriggerEvent
    from ..engine.status import StatusSink

logger = logging.getLogger(__name__)


class RunService:
    """
    Handles `workflow/trigger` events.

    Loads the workflow, runs it with status published to the sink, and
    records the run. The event id doubles as the run id, so the id returned
    to the trigger caller can be used to look the run up.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = async_session_factory,
        runner: WorkflowRunner | None = None,
        sink: StatusSink | None = realtime_broker,
        max_runs: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._runner = runner or WorkflowRunner()
        self._sink = sink
        self._max_runs = max_runs or settings.max_runs_per_workflow

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe(WORKFLOW_TRIGGER_EVENT, self.handle_trigger)

    def unsubscribe(self, bus: EventBus) -> None:
        bus.unsubscribe(WORKFLOW_TRIGGER_EVENT, self.handle_trigger)

    async def handle_trigger(self, event: TriggerEvent) -> RunRecord:
        """
        Run the workflow named by a trigger event.

        Raises:
            NonRetriableError: If workflowId or userId is missing
            WorkflowNotFoundError: If the workflow does not exist
        """
        workflow_id = event.data.get("workflowId")
        user_id = event.data.get("userId")
        if not workflow_id:
            raise NonRetriableError("Workflow ID is required")
        if not user_id:
            raise NonRetriableError("User ID is required")

        seed: dict[str, Any] = event.data.get("data") or {}

        async with self._session_factory() as session:
            workflow = await WorkflowService(WorkflowRepository(session)).load_workflow(workflow_id)
            pending = RunRecord(id=event.id, workflow_id=workflow.id, user_id=user_id, context=dict(seed))
            await RunRepository(session, self._max_runs).save(pending)

        logger.info("Starting run %s of workflow %s", event.id, workflow.id)
        record = await self._runner.run(workflow, seed=seed, sink=self._sink, run_id=event.id)
        record.user_id = user_id
        record.start_time = pending.start_time

        async with self._session_factory() as session:
            await RunRepository(session, self._max_runs).save(record)

        if record.error:
            logger.warning("Run %s of workflow %s failed: %s", record.id, workflow.id, record.error)
        else:
            logger.info("Run %s of workflow %s completed", record.id, workflow.id)
        return record


class RunHistoryService:
    """Read access to recorded runs, scoped to the requesting user."""

    def __init__(self, run_repo: RunRepository) -> None:
        self._run_repo = run_repo

    async def list_runs(self, user_id: str, workflow_id: str | None = None) -> list[RunResponse]:
        records = await self._run_repo.list(workflow_id=workflow_id, user_id=user_id)
        return [self._to_response(r) for r in records]

    async def get_run(self, run_id: str, user_id: str) -> RunResponse:
        record = await self._run_repo.get(run_id)
        if not record or record.user_id != user_id:
            raise RunNotFoundError(run_id)
        return self._to_response(record)

    def _to_response(self, record: RunRecord) -> RunResponse:
        return RunResponse(
            id=record.id,
            workflow_id=record.workflow_id,
            state=record.state.value,
            failed_node_id=record.failed_node_id,
            error=record.error,
            executed_node_ids=record.executed_node_ids,
            context=record.context,
            start_time=record.start_time,
            end_time=record.end_time,
        )
