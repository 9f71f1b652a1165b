"""Run history schemas."""

from datetime import datetime
from typing import Any

from .common import CamelModel


class RunResponse(CamelModel):
    id: str
    workflow_id: str
    state: str
    failed_node_id: str | None = None
    error: str | None = None
    executed_node_ids: list[str]
    context: dict[str, Any]
    start_time: datetime
    end_time: datetime | None = None
