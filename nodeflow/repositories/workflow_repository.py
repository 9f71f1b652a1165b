"""Workflow repository for database persistence."""

from __future__ import annotations

import time
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import WorkflowModel
from ..engine.types import Connection, Node, Position, Workflow


def definition_from_workflow(workflow: Workflow) -> dict[str, Any]:
    """Serialize a workflow's graph into the stored definition."""
    return {
        "nodes": [
            {
                "id": n.id,
                "type": n.type,
                "name": n.name,
                "position": {"x": n.position.x, "y": n.position.y},
                "data": n.data,
            }
            for n in workflow.nodes
        ],
        "connections": [
            {
                "id": c.id,
                "source": c.source,
                "target": c.target,
                "sourceHandle": c.source_handle,
                "targetHandle": c.target_handle,
            }
            for c in workflow.connections
        ],
    }


class WorkflowRepository:
    """Repository for workflow persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, workflow: Workflow) -> Workflow:
        """Create a new workflow."""
        now = datetime.now()
        db_workflow = WorkflowModel(
            id=workflow.id or self._generate_id(),
            name=workflow.name,
            user_id=workflow.user_id,
            definition=definition_from_workflow(workflow),
            created_at=now,
            updated_at=now,
        )

        self._session.add(db_workflow)
        await self._session.commit()
        await self._session.refresh(db_workflow)

        return self._to_workflow(db_workflow)

    async def get(self, workflow_id: str) -> Workflow | None:
        """Get a workflow by ID."""
        result = await self._session.get(WorkflowModel, workflow_id)
        if not result:
            return None
        return self._to_workflow(result)

    async def list(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = 20,
        search: str = "",
    ) -> tuple[list[Workflow], int]:
        """List a user's workflows, newest first. Returns (items, total count)."""
        conditions = [WorkflowModel.user_id == user_id]
        if search:
            conditions.append(WorkflowModel.name.ilike(f"%{search}%"))

        count_statement = select(func.count()).select_from(WorkflowModel).where(*conditions)
        total = (await self._session.execute(count_statement)).scalar_one()

        statement = (
            select(WorkflowModel)
            .where(*conditions)
            .order_by(WorkflowModel.updated_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self._session.execute(statement)
        return [self._to_workflow(w) for w in result.scalars().all()], total

    async def update(self, workflow: Workflow) -> Workflow | None:
        """Replace a workflow's name and graph."""
        db_workflow = await self._session.get(WorkflowModel, workflow.id)
        if not db_workflow:
            return None

        if workflow.name:
            db_workflow.name = workflow.name
        db_workflow.definition = definition_from_workflow(workflow)
        db_workflow.updated_at = datetime.now()

        await self._session.commit()
        await self._session.refresh(db_workflow)

        return self._to_workflow(db_workflow)

    async def rename(self, workflow_id: str, name: str) -> Workflow | None:
        db_workflow = await self._session.get(WorkflowModel, workflow_id)
        if not db_workflow:
            return None

        db_workflow.name = name
        db_workflow.updated_at = datetime.now()

        await self._session.commit()
        await self._session.refresh(db_workflow)

        return self._to_workflow(db_workflow)

    async def delete(self, workflow_id: str) -> bool:
        """Delete a workflow."""
        db_workflow = await self._session.get(WorkflowModel, workflow_id)
        if not db_workflow:
            return False

        await self._session.delete(db_workflow)
        await self._session.commit()
        return True

    def _generate_id(self) -> str:
        """Generate a unique workflow ID."""
        return f"wf_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"

    def _to_workflow(self, db_workflow: WorkflowModel) -> Workflow:
        """Convert database model to Workflow."""
        definition = db_workflow.definition or {}

        nodes = [
            Node(
                id=n["id"],
                type=n["type"],
                name=n.get("name", ""),
                position=Position(**(n.get("position") or {})),
                data=n.get("data") or {},
            )
            for n in definition.get("nodes", [])
        ]

        connections = [
            Connection(
                id=c.get("id"),
                source=c["source"],
                target=c["target"],
                source_handle=c.get("sourceHandle") or "main",
                target_handle=c.get("targetHandle") or "main",
            )
            for c in definition.get("connections", [])
        ]

        return Workflow(
            id=db_workflow.id,
            name=db_workflow.name,
            user_id=db_workflow.user_id,
            nodes=nodes,
            connections=connections,
            created_at=db_workflow.created_at,
            updated_at=db_workflow.updated_at,
        )
