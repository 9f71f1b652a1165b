"""Shared fixtures for the nodeflow test suite."""

from __future__ import annotations

import os
import tempfile

# Point the app at a throwaway database before nodeflow reads its settings
_DB_DIR = tempfile.mkdtemp(prefix="nodeflow-tests-")
os.environ["NODEFLOW_DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/nodeflow.db"

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from nodeflow.engine.context import ExecutionContext  # noqa: E402
from nodeflow.engine.status import StatusChannel, StatusPublisher  # noqa: E402
from nodeflow.engine.types import NodeExecutionRequest, NodeStatusEvent  # noqa: E402


class RecordingSink:
    """StatusSink that keeps every published event."""

    def __init__(self) -> None:
        self.events: list[tuple[StatusChannel, NodeStatusEvent]] = []

    async def publish(self, channel: StatusChannel, event: NodeStatusEvent) -> None:
        self.events.append((channel, event))

    def statuses(self, node_id: str) -> list[str]:
        return [e.status.value for _, e in self.events if e.node_id == node_id]

    def channels(self, node_id: str) -> set[str]:
        return {c.key for c, e in self.events if e.node_id == node_id}


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_request(sink: RecordingSink):
    """Build a NodeExecutionRequest for calling an executor directly."""

    def _make(
        node,
        data: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
        node_id: str = "node_1",
    ) -> NodeExecutionRequest:
        return NodeExecutionRequest(
            node_id=node_id,
            data=data or {},
            context=ExecutionContext(context),
            publish=StatusPublisher(sink, node.channel, run_id="run_test"),
            run_id="run_test",
        )

    return _make


@pytest.fixture(autouse=True)
def _no_provider_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without AI provider credentials in the environment."""
    for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
