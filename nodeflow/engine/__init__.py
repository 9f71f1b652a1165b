"""Core workflow engine components."""

from .context import ExecutionContext
from .events import WORKFLOW_TRIGGER_EVENT, EventBus, TriggerEvent, event_bus
from .expression_engine import ExpressionEngine, expression_engine, render
from .graph import topological_sort, validate_graph
from .node_registry import NodeRegistryClass, node_registry, register_all_nodes
from .realtime import RealtimeBroker, realtime_broker
from .status import ChannelRegistry, StatusChannel, StatusPublisher, channel_registry
from .types import (
    Connection,
    Node,
    NodeStatus,
    NodeStatusEvent,
    NodeType,
    RunRecord,
    RunState,
    Workflow,
)
from .workflow_runner import WorkflowRunner

__all__ = [
    "ExecutionContext",
    "WORKFLOW_TRIGGER_EVENT",
    "EventBus",
    "TriggerEvent",
    "event_bus",
    "ExpressionEngine",
    "expression_engine",
    "render",
    "topological_sort",
    "validate_graph",
    "NodeRegistryClass",
    "node_registry",
    "register_all_nodes",
    "RealtimeBroker",
    "realtime_broker",
    "ChannelRegistry",
    "StatusChannel",
    "StatusPublisher",
    "channel_registry",
    "Connection",
    "Node",
    "NodeStatus",
    "NodeStatusEvent",
    "NodeType",
    "RunRecord",
    "RunState",
    "Workflow",
    "WorkflowRunner",
]
