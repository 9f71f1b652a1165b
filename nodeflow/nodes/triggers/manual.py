"""Manual trigger node - entry point for workflows started by hand."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...engine.status import MANUAL_TRIGGER_CHANNEL
from ...engine.types import NodeType
from ..base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.context import ExecutionContext
    from ...engine.types import NodeExecutionRequest


class ManualTriggerNode(BaseNode):
    """Manual trigger - passes the seed context through unchanged."""

    node_type = NodeType.MANUAL_TRIGGER
    channel = MANUAL_TRIGGER_CHANNEL
    label = "Manual trigger node"

    node_description = NodeTypeDescription(
        display_name="Manual Trigger",
        description="Start the workflow manually",
        icon="fa:play",
        group=["trigger"],
    )

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        return request.context
