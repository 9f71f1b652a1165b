"""Run repository for workflow run history."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import RunModel
from ..engine.types import RunRecord, RunState


class RunRepository:
    """Repository for run history persistence."""

    def __init__(self, session: AsyncSession, max_records: int = 100) -> None:
        self._session = session
        self._max_records = max_records

    async def save(self, record: RunRecord) -> RunRecord:
        """Insert or update a run record."""
        db_run = await self._session.get(RunModel, record.id)
        is_new = db_run is None
        if db_run is None:
            db_run = RunModel(
                id=record.id,
                workflow_id=record.workflow_id,
                user_id=record.user_id,
                state=record.state.value,
                start_time=record.start_time,
            )
            self._session.add(db_run)

        db_run.state = record.state.value
        db_run.failed_node_id = record.failed_node_id
        db_run.error = record.error
        db_run.executed_node_ids = list(record.executed_node_ids)
        db_run.context = dict(record.context)
        db_run.end_time = record.end_time

        await self._session.commit()
        await self._session.refresh(db_run)

        if is_new:
            await self._cleanup(record.workflow_id)

        return self._to_run_record(db_run)

    async def get(self, run_id: str) -> RunRecord | None:
        """Get a run record by ID."""
        db_run = await self._session.get(RunModel, run_id)
        if not db_run:
            return None
        return self._to_run_record(db_run)

    async def list(self, workflow_id: str | None = None, user_id: str | None = None) -> list[RunRecord]:
        """List run records, newest first."""
        statement = select(RunModel).order_by(RunModel.start_time.desc())

        if workflow_id:
            statement = statement.where(RunModel.workflow_id == workflow_id)
        if user_id:
            statement = statement.where(RunModel.user_id == user_id)

        result = await self._session.execute(statement)
        return [self._to_run_record(r) for r in result.scalars().all()]

    async def _cleanup(self, workflow_id: str) -> None:
        """Keep only the newest runs of a workflow."""
        statement = (
            select(RunModel)
            .where(RunModel.workflow_id == workflow_id)
            .order_by(RunModel.start_time.desc())
            .offset(self._max_records)
        )
        result = await self._session.execute(statement)
        stale = result.scalars().all()

        if stale:
            for db_run in stale:
                await self._session.delete(db_run)
            await self._session.commit()

    def _to_run_record(self, db_run: RunModel) -> RunRecord:
        return RunRecord(
            id=db_run.id,
            workflow_id=db_run.workflow_id,
            user_id=db_run.user_id,
            state=RunState(db_run.state),
            failed_node_id=db_run.failed_node_id,
            error=db_run.error,
            executed_node_ids=list(db_run.executed_node_ids or []),
            context=dict(db_run.context or {}),
            start_time=db_run.start_time,
            end_time=db_run.end_time,
        )
