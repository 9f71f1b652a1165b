"""Core type definitions for the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .context import ExecutionContext
    from .status import StatusPublisher


class NodeType(str, Enum):
    """Node types a workflow graph may contain."""

    INITIAL = "INITIAL"
    MANUAL_TRIGGER = "MANUAL_TRIGGER"
    WEBHOOK = "WEBHOOK"
    GOOGLE_FORM_TRIGGER = "GOOGLE_FORM_TRIGGER"
    STRIPE_TRIGGER = "STRIPE_TRIGGER"
    HTTP_REQUEST = "HTTP_REQUEST"
    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    GEMINI = "GEMINI"


class NodeStatus(str, Enum):
    """Live status of a node during a run."""

    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class RunState(str, Enum):
    """Lifecycle of a single workflow run."""

    PENDING = "pending"
    SORTING = "sorting"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


# --- Workflow Schema Types ---


@dataclass
class Position:
    """Editor position of a node. Not used during execution."""

    x: float = 0
    y: float = 0


@dataclass
class Node:
    """A node in a workflow graph."""

    id: str
    type: str
    name: str = ""
    position: Position = field(default_factory=Position)
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Connection:
    """Connection between two nodes: source must run before target."""

    source: str
    target: str
    id: str | None = None
    source_handle: str = "main"
    target_handle: str = "main"


@dataclass
class Workflow:
    """Workflow definition owned by a single user."""

    id: str
    name: str
    user_id: str
    nodes: list[Node] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Execution Types ---


@dataclass
class NodeStatusEvent:
    """Transient status signal published on a node-type channel."""

    node_id: str
    status: NodeStatus
    run_id: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "nodeId": self.node_id,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.run_id:
            result["runId"] = self.run_id
        return result


@dataclass
class NodeExecutionRequest:
    """Everything an executor receives for a single invocation."""

    node_id: str
    data: dict[str, Any]
    context: ExecutionContext
    publish: StatusPublisher
    run_id: str | None = None


@dataclass
class RunRecord:
    """State and outcome of a single workflow run."""

    id: str
    workflow_id: str
    user_id: str
    state: RunState = RunState.PENDING
    current_node_id: str | None = None
    failed_node_id: str | None = None
    error: str | None = None
    executed_node_ids: list[str] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None

    @property
    def finished(self) -> bool:
        return self.state in (RunState.COMPLETED, RunState.FAILED)
