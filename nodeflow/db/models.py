"""SQLModel database models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel


class WorkflowModel(SQLModel, table=True):
    """Workflow database model."""

    __tablename__ = "workflows"

    id: str = Field(primary_key=True)
    name: str = Field(index=True)
    user_id: str = Field(index=True)

    # Graph definition: {"nodes": [...], "connections": [...]}
    definition: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now, index=True)


class RunModel(SQLModel, table=True):
    """Workflow run history database model."""

    __tablename__ = "runs"

    id: str = Field(primary_key=True)
    workflow_id: str = Field(index=True)
    user_id: str = Field(index=True)

    state: str = Field(index=True)  # pending, sorting, executing, completed, failed
    failed_node_id: str | None = Field(default=None)
    error: str | None = Field(default=None)

    executed_node_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    context: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    start_time: datetime = Field(default_factory=datetime.now, index=True)
    end_time: datetime | None = Field(default=None)
